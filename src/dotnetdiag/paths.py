"""Locations of runtime diagnostics sockets."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path


def get_runtime_dir() -> Path:
    """Get the directory the .NET runtime creates diagnostics sockets in.

    The runtime uses ``$TMPDIR`` (falling back to ``/tmp``); set
    ``DOTNETDIAG_RUNTIME_DIR`` to look somewhere else, e.g. inside a container's
    mounted temp directory.
    """
    override = os.environ.get("DOTNETDIAG_RUNTIME_DIR")
    if override:
        return Path(override).expanduser().resolve()
    return Path(tempfile.gettempdir())
