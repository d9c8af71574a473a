"""Translate package errors into click failures."""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING

import click

from dotnetdiag.ipc.errors import IPCError

if TYPE_CHECKING:
    from collections.abc import Iterator


@contextmanager
def ipc_errors() -> Iterator[None]:
    """Report IPC and socket failures as a one-line error and exit code 1."""
    try:
        yield
    except IPCError as exc:
        raise click.ClickException(f"[{exc.code}] {exc.message}") from exc
    except OSError as exc:
        raise click.ClickException(f"Connection failed: {exc}") from exc
