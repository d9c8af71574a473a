"""Version strings reported by ``dotnetdiag --version``."""

from __future__ import annotations

from functools import lru_cache
from importlib.metadata import PackageNotFoundError, version

from dotnetdiag import __version__
from dotnetdiag.ipc.constants import MAGIC


@lru_cache(maxsize=1)
def get_dotnetdiag_version() -> str:
    """Installed distribution version; the source tree's ``__version__`` when not installed."""
    try:
        return version("dotnetdiag")
    except PackageNotFoundError:
        return __version__


def get_protocol_name() -> str:
    return MAGIC.rstrip(b"\x00").decode("ascii")


def version_banner() -> str:
    return f"dotnetdiag {get_dotnetdiag_version()} ({get_protocol_name()})"


__all__ = ["get_dotnetdiag_version", "get_protocol_name", "version_banner"]
