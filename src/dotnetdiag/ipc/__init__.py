"""DOTNET_IPC_V1 codec, transport, and client for the .NET diagnostics endpoint."""

from __future__ import annotations

from dotnetdiag.ipc.client import DiagnosticsClient, TracingSession
from dotnetdiag.ipc.commands import (
    CommandSet,
    DumpCommandId,
    DumpType,
    EventPipeCommandId,
    Format,
    ProcessCommandId,
    ServerResponseId,
)
from dotnetdiag.ipc.contracts import (
    CollectDumpPayload,
    CollectTracing2Payload,
    CollectTracingPayload,
    CollectTracingResponse,
    ErrorResponse,
    OKResponse,
    ProcessInfo2Payload,
    ProcessInfo2Response,
    ProviderConfig,
    ResumeRuntimePayload,
    StopTracingPayload,
    StopTracingResponse,
)
from dotnetdiag.ipc.discovery import (
    DiagnosticEndpoint,
    find_diagnostic_socket,
    list_diagnostic_endpoints,
)
from dotnetdiag.ipc.errors import (
    DiagnosticServerError,
    EncodingError,
    EndpointNotFoundError,
    HeaderMalformedError,
    InvalidLengthError,
    IPCError,
    PayloadTooLargeError,
    SessionIDMismatchError,
    StringDecodingError,
    StringEncodingError,
    TrailingDataError,
    TruncatedStreamError,
    UnknownEnumValueError,
)
from dotnetdiag.ipc.header import Header, read_header, write_header
from dotnetdiag.ipc.messages import (
    exchange,
    read_response,
    read_response_header,
    send_request,
    write_message,
)
from dotnetdiag.ipc.strings import decode_string, encode_string
from dotnetdiag.ipc.transports import SocketStream, UnixSocketTransport

__all__ = [
    "CollectDumpPayload",
    "CollectTracing2Payload",
    "CollectTracingPayload",
    "CollectTracingResponse",
    "CommandSet",
    "DiagnosticEndpoint",
    "DiagnosticServerError",
    "DiagnosticsClient",
    "DumpCommandId",
    "DumpType",
    "EncodingError",
    "EndpointNotFoundError",
    "ErrorResponse",
    "EventPipeCommandId",
    "Format",
    "Header",
    "HeaderMalformedError",
    "IPCError",
    "InvalidLengthError",
    "OKResponse",
    "PayloadTooLargeError",
    "ProcessCommandId",
    "ProcessInfo2Payload",
    "ProcessInfo2Response",
    "ProviderConfig",
    "ResumeRuntimePayload",
    "ServerResponseId",
    "SessionIDMismatchError",
    "SocketStream",
    "StopTracingPayload",
    "StopTracingResponse",
    "StringDecodingError",
    "StringEncodingError",
    "TracingSession",
    "TrailingDataError",
    "TruncatedStreamError",
    "UnixSocketTransport",
    "UnknownEnumValueError",
    "decode_string",
    "encode_string",
    "exchange",
    "find_diagnostic_socket",
    "list_diagnostic_endpoints",
    "read_header",
    "read_response",
    "read_response_header",
    "send_request",
    "write_header",
    "write_message",
]
