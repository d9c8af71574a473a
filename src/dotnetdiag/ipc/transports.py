"""Blocking Unix domain socket transport for the diagnostics endpoint."""

from __future__ import annotations

import logging
import platform
import socket
from typing import TYPE_CHECKING

from dotnetdiag.limits import SOCKET_TIMEOUT

if TYPE_CHECKING:
    from pathlib import Path
    from types import TracebackType

logger = logging.getLogger(__name__)


class SocketStream:
    """Buffered binary stream over a connected socket.

    Satisfies ``ByteStream``: ``read`` blocks until *size* bytes or EOF, and
    ``write`` is only guaranteed on the wire after ``flush``.
    """

    def __init__(self, sock: socket.socket) -> None:
        self._sock = sock
        self._file = sock.makefile("rwb")

    def read(self, size: int, /) -> bytes:
        return self._file.read(size)

    def write(self, data: bytes, /) -> int:
        return self._file.write(data)

    def flush(self) -> None:
        self._file.flush()

    def settimeout(self, timeout: float | None) -> None:
        """Change the per-operation timeout, e.g. ``None`` before streaming a trace."""
        self._sock.settimeout(timeout)

    @property
    def closed(self) -> bool:
        return self._file.closed

    def close(self) -> None:
        if self._file.closed:
            return
        try:
            self._file.close()
        finally:
            self._sock.close()
        logger.debug("Diagnostics socket closed")

    def __enter__(self) -> SocketStream:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


class UnixSocketTransport:
    """Connects to a runtime's ``dotnet-diagnostic-*-socket``.

    Only available on macOS and Linux; Windows runtimes listen on a named pipe
    instead, which this transport does not open.
    """

    def __init__(self, path: str | Path, *, timeout: float | None = SOCKET_TIMEOUT) -> None:
        if platform.system() == "Windows":
            msg = "Unix sockets are not supported on Windows"
            raise NotImplementedError(msg)
        self._path = str(path)
        self._timeout = timeout

    @property
    def path(self) -> str:
        return self._path

    def connect(self) -> SocketStream:
        """Open a fresh connection; each one carries a single exchange."""
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        sock.settimeout(self._timeout)
        try:
            sock.connect(self._path)
        except OSError:
            sock.close()
            raise
        logger.debug("Connected to diagnostics socket at %s", self._path)
        return SocketStream(sock)


__all__ = [
    "SocketStream",
    "UnixSocketTransport",
]
