"""Test helpers package."""

from tests.helpers.ipc import (
    FakeDiagnosticServer,
    FakeStream,
    FakeTransport,
    error_response,
    ok_response,
    process_info2_body,
    server_string,
    session_response,
)

__all__ = [
    "FakeDiagnosticServer",
    "FakeStream",
    "FakeTransport",
    "error_response",
    "ok_response",
    "process_info2_body",
    "server_string",
    "session_response",
]
