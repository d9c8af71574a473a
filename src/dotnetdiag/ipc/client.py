"""Client that runs diagnostics commands against a running .NET process."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from dotnetdiag.ipc.contracts import (
    CollectTracingResponse,
    OKResponse,
    ProcessInfo2Payload,
    ProcessInfo2Response,
    ResumeRuntimePayload,
    StopTracingPayload,
    StopTracingResponse,
)
from dotnetdiag.ipc.discovery import find_diagnostic_socket
from dotnetdiag.ipc.errors import EndpointNotFoundError, SessionIDMismatchError
from dotnetdiag.ipc.messages import exchange
from dotnetdiag.ipc.transports import UnixSocketTransport
from dotnetdiag.limits import SOCKET_TIMEOUT

if TYPE_CHECKING:
    from pathlib import Path
    from types import TracebackType

    from dotnetdiag.ipc.contracts import (
        CollectDumpPayload,
        CollectTracingPayload,
        RequestPayload,
        ResponseBody,
    )
    from dotnetdiag.ipc.transports import SocketStream

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TracingSession:
    """An EventPipe session started by ``DiagnosticsClient.collect_tracing``.

    The runtime streams the trace over the connection that started the
    session, so ``stream`` stays open until ``close`` (or ``stop``).
    """

    client: DiagnosticsClient
    session_id: int
    stream: SocketStream

    def stop(self) -> StopTracingResponse:
        """Stop the session over a second connection.

        The runtime flushes the remaining trace data to ``stream`` and then
        closes it, so the caller may keep reading before calling ``close``.
        """
        return self.client.stop_tracing(self.session_id)

    def close(self) -> None:
        self.stream.close()

    def __enter__(self) -> TracingSession:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


class DiagnosticsClient:
    """Synchronous diagnostics client for one target process.

    Every command opens its own connection and performs exactly one
    request/response exchange; nothing is retried.

    Usage::

        client = DiagnosticsClient(pid=1234)
        info = client.process_info()
        with client.collect_tracing(payload) as session:
            ...
            session.stop()
    """

    def __init__(
        self,
        pid: int | None = None,
        *,
        socket_path: str | Path | None = None,
        transport: UnixSocketTransport | None = None,
        timeout: float | None = SOCKET_TIMEOUT,
    ) -> None:
        if pid is None and socket_path is None and transport is None:
            msg = "DiagnosticsClient needs a pid, a socket_path, or a transport"
            raise ValueError(msg)
        self._pid = pid
        self._socket_path = socket_path
        self._transport = transport
        self._timeout = timeout

    @property
    def pid(self) -> int | None:
        return self._pid

    def _resolve_transport(self) -> UnixSocketTransport:
        if self._transport is not None:
            return self._transport
        path = self._socket_path
        if path is None:
            assert self._pid is not None
            path = find_diagnostic_socket(self._pid)
            if path is None:
                raise EndpointNotFoundError(self._pid)
        self._transport = UnixSocketTransport(path, timeout=self._timeout)
        return self._transport

    def connect(self) -> SocketStream:
        return self._resolve_transport().connect()

    def _run[R: ResponseBody](self, request: RequestPayload, response_type: type[R]) -> R:
        with self.connect() as stream:
            return exchange(stream, request, response_type)

    def collect_tracing(self, payload: CollectTracingPayload) -> TracingSession:
        """Start a tracing session; accepts ``CollectTracing2Payload`` too.

        Raises:
            DiagnosticServerError: If the runtime refuses the session.
        """
        stream = self.connect()
        try:
            response = exchange(stream, payload, CollectTracingResponse)
        except BaseException:
            stream.close()
            raise
        logger.info("Started tracing session %#x on PID %s", response.session_id, self._pid)
        return TracingSession(client=self, session_id=response.session_id, stream=stream)

    def stop_tracing(self, session_id: int) -> StopTracingResponse:
        """Stop a session and check that the runtime stopped the same one.

        Raises:
            SessionIDMismatchError: If the echoed session id differs.
        """
        response = self._run(StopTracingPayload(session_id=session_id), StopTracingResponse)
        if response.session_id != session_id:
            raise SessionIDMismatchError(session_id, response.session_id)
        logger.info("Stopped tracing session %#x", session_id)
        return response

    def process_info(self) -> ProcessInfo2Response:
        return self._run(ProcessInfo2Payload(), ProcessInfo2Response)

    def collect_dump(self, payload: CollectDumpPayload) -> OKResponse:
        response = self._run(payload, OKResponse)
        logger.info("Dump %s written by PID %s", payload.dump_name, self._pid)
        return response

    def resume_runtime(self) -> OKResponse:
        return self._run(ResumeRuntimePayload(), OKResponse)


__all__ = [
    "DiagnosticsClient",
    "TracingSession",
]
