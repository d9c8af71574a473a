"""Typed errors raised while encoding, decoding, or exchanging IPC messages."""

from __future__ import annotations

from dotnetdiag.ipc.constants import KNOWN_HRESULTS


class IPCError(Exception):
    """Base for diagnostics IPC errors with a machine-readable code."""

    code: str = "IPC_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class HeaderMalformedError(IPCError):
    """Raised when a response header is short or carries the wrong magic."""

    code = "HEADER_MALFORMED"


class InvalidLengthError(IPCError):
    """Raised when a length-prefixed string declares a length of zero."""

    code = "INVALID_LENGTH"


class TruncatedStreamError(IPCError):
    """Raised when the stream ends before a declared field is complete."""

    code = "TRUNCATED_STREAM"

    def __init__(self, expected: int, received: int) -> None:
        super().__init__(f"Stream truncated: expected {expected} bytes, got {received}")
        self.expected = expected
        self.received = received


class TrailingDataError(IPCError):
    """Raised when a payload has bytes left over after its last field."""

    code = "TRAILING_DATA"

    def __init__(self, remaining: int) -> None:
        super().__init__(f"{remaining} unexpected trailing bytes after payload")
        self.remaining = remaining


class UnknownEnumValueError(IPCError):
    """Raised when a decoded field holds a value its enum does not define."""

    code = "UNKNOWN_ENUM_VALUE"

    def __init__(self, enum_name: str, value: int) -> None:
        super().__init__(f"Unknown {enum_name} value {value}")
        self.enum_name = enum_name
        self.value = value


class DiagnosticServerError(IPCError):
    """The remote diagnostics server answered with an error response."""

    code = "DIAGNOSTIC_SERVER_ERROR"

    def __init__(self, hresult: int) -> None:
        self.hresult = hresult
        self.name = KNOWN_HRESULTS.get(hresult)
        label = f"{hresult:#010x}"
        if self.name is not None:
            label = f"{label} ({self.name})"
        super().__init__(f"Diagnostic server error code {label}")


class SessionIDMismatchError(IPCError):
    """Raised when a response echoes a session id other than the one requested."""

    code = "SESSION_ID_MISMATCH"

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(f"Session ID mismatch: expected {expected}, got {actual}")
        self.expected = expected
        self.actual = actual


class EncodingError(IPCError):
    """Base for values that cannot be represented on the wire."""

    code = "ENCODING_ERROR"


class StringEncodingError(EncodingError):
    """Raised when a string cannot be encoded as UTF-16."""

    def __init__(self, value: str, cause: UnicodeError) -> None:
        super().__init__(f"Cannot encode {value!r} as UTF-16: {cause}")
        self.__cause__ = cause


class StringDecodingError(EncodingError):
    """Raised when received code units are not valid UTF-16."""

    def __init__(self, cause: UnicodeError) -> None:
        super().__init__(f"Invalid UTF-16 string on the wire: {cause}")
        self.__cause__ = cause


class PayloadTooLargeError(EncodingError):
    """Raised when a message does not fit in the u16 envelope size field."""

    def __init__(self, payload_len: int, limit: int) -> None:
        super().__init__(f"Payload of {payload_len} bytes exceeds the {limit} byte limit")
        self.payload_len = payload_len
        self.limit = limit


class EndpointNotFoundError(IPCError):
    """Raised when no diagnostics socket can be found for a process."""

    code = "ENDPOINT_NOT_FOUND"

    def __init__(self, pid: int) -> None:
        super().__init__(f"No diagnostics endpoint found for process {pid}")
        self.pid = pid


__all__ = [
    "DiagnosticServerError",
    "EncodingError",
    "EndpointNotFoundError",
    "HeaderMalformedError",
    "IPCError",
    "InvalidLengthError",
    "PayloadTooLargeError",
    "SessionIDMismatchError",
    "StringDecodingError",
    "StringEncodingError",
    "TrailingDataError",
    "TruncatedStreamError",
    "UnknownEnumValueError",
]
