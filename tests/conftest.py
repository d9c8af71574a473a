"""Pytest fixtures for dotnetdiag tests."""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from hypothesis import Phase, Verbosity, settings

if TYPE_CHECKING:
    from collections.abc import Generator


settings.register_profile(
    "ci",
    max_examples=100,
    deadline=None,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
)
settings.register_profile(
    "dev",
    max_examples=20,
    deadline=500,
)
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    deadline=None,
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


@pytest.fixture(autouse=True)
def _isolate_runtime_dir(monkeypatch: pytest.MonkeyPatch) -> None:
    """Never let a test pick up sockets of real .NET processes on this machine."""
    monkeypatch.delenv("DOTNETDIAG_RUNTIME_DIR", raising=False)


@pytest.fixture
def short_tmp() -> Generator[Path, None, None]:
    """Create a short temp directory for Unix socket paths (macOS 104-byte limit)."""
    d = tempfile.mkdtemp(prefix="dd-", dir="/tmp")
    yield Path(d)
    shutil.rmtree(d, ignore_errors=True)
