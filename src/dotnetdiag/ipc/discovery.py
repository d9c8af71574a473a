"""Endpoint discovery for running .NET processes.

Each runtime with diagnostics enabled listens on
``$TMPDIR/dotnet-diagnostic-<pid>-<key>-socket`` where ``<key>`` is derived
from the process start time, so a recycled PID leaves a stale socket with a
smaller key behind.
"""

from __future__ import annotations

import logging
import re
import socket
from dataclasses import dataclass
from typing import TYPE_CHECKING

import psutil

from dotnetdiag.limits import PROBE_TIMEOUT
from dotnetdiag.paths import get_runtime_dir

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

_SOCKET_GLOB = "dotnet-diagnostic-*-socket"
_SOCKET_PATTERN = re.compile(r"^dotnet-diagnostic-(?P<pid>\d+)-(?P<key>\d+)-socket$")


@dataclass(frozen=True)
class DiagnosticEndpoint:
    """A diagnostics socket and the process it belongs to.

    Attributes:
        pid: OS process ID of the runtime.
        path: Filesystem path of the Unix domain socket.
        key: Disambiguation key from the socket name; larger is newer.
    """

    pid: int
    path: Path
    key: int


def _is_process_alive(pid: int) -> bool:
    return psutil.pid_exists(pid)


def _is_socket_reachable(path: Path) -> bool:
    try:
        with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as sock:
            sock.settimeout(PROBE_TIMEOUT)
            sock.connect(str(path))
        return True
    except OSError:
        return False


def _parse_endpoint(path: Path) -> DiagnosticEndpoint | None:
    match = _SOCKET_PATTERN.match(path.name)
    if match is None:
        logger.debug("Ignoring unrecognised socket name %s", path.name)
        return None
    return DiagnosticEndpoint(pid=int(match["pid"]), path=path, key=int(match["key"]))


def _scan(runtime_dir: Path, pattern: str) -> dict[int, DiagnosticEndpoint]:
    newest: dict[int, DiagnosticEndpoint] = {}
    try:
        candidates = sorted(runtime_dir.glob(pattern))
    except OSError:
        logger.warning("Cannot scan %s for diagnostics sockets", runtime_dir, exc_info=True)
        return newest
    for path in candidates:
        endpoint = _parse_endpoint(path)
        if endpoint is None:
            continue
        current = newest.get(endpoint.pid)
        if current is None or endpoint.key > current.key:
            newest[endpoint.pid] = endpoint
    return newest


def find_diagnostic_socket(pid: int, *, runtime_dir: Path | None = None) -> Path | None:
    """Return the newest diagnostics socket for *pid*, or ``None``.

    The socket is not probed; a runtime may be about to accept on it.
    """
    resolved_dir = runtime_dir if runtime_dir is not None else get_runtime_dir()
    endpoint = _scan(resolved_dir, f"dotnet-diagnostic-{pid}-*-socket").get(pid)
    if endpoint is None:
        logger.debug("No diagnostics socket for PID %d in %s", pid, resolved_dir)
        return None
    return endpoint.path


def list_diagnostic_endpoints(
    *,
    runtime_dir: Path | None = None,
    probe: bool = False,
) -> list[DiagnosticEndpoint]:
    """List endpoints of live processes, sorted by PID.

    Sockets whose process has exited are skipped. With *probe*, sockets that
    refuse a connection are skipped too.
    """
    resolved_dir = runtime_dir if runtime_dir is not None else get_runtime_dir()
    endpoints: list[DiagnosticEndpoint] = []
    for pid, endpoint in sorted(_scan(resolved_dir, _SOCKET_GLOB).items()):
        if not _is_process_alive(pid):
            logger.info("Process %d is no longer running; stale socket %s", pid, endpoint.path)
            continue
        if probe and not _is_socket_reachable(endpoint.path):
            logger.info("Diagnostics socket %s is unreachable", endpoint.path)
            continue
        endpoints.append(endpoint)
    return endpoints


__all__ = [
    "DiagnosticEndpoint",
    "find_diagnostic_socket",
    "list_diagnostic_endpoints",
]
