"""Shared IPC framing constants."""

from __future__ import annotations

MAGIC = b"DOTNET_IPC_V1\x00"
HEADER_SIZE = 20
MAX_MESSAGE_BYTES = 0xFFFF  # ``size`` is a u16 covering header + payload
MAX_PAYLOAD_BYTES = MAX_MESSAGE_BYTES - HEADER_SIZE

RUNTIME_COOKIE_BYTES = 16

# Well-known HRESULTs reported by the runtime diagnostics server.
KNOWN_HRESULTS: dict[int, str] = {
    0x80004001: "E_NOTIMPL",
    0x80004005: "E_FAIL",
    0x80070057: "E_INVALIDARG",
    0x80131384: "DS_IPC_E_BAD_ENCODING",
    0x80131385: "DS_IPC_E_UNKNOWN_COMMAND",
    0x80131386: "DS_IPC_E_UNKNOWN_MAGIC",
    0x80131387: "DS_IPC_E_UNKNOWN_ERROR",
}

__all__ = [
    "HEADER_SIZE",
    "KNOWN_HRESULTS",
    "MAGIC",
    "MAX_MESSAGE_BYTES",
    "MAX_PAYLOAD_BYTES",
    "RUNTIME_COOKIE_BYTES",
]
