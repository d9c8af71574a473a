"""Length-prefixed, null-terminated UTF-16LE strings.

Wire layout of a non-empty string::

    u32 code_units + 1 | UTF-16LE code units | u16 0

An empty string is written as a bare ``u16 0`` with no length prefix. The
runtime's own client emits that shorter form, so it is reproduced as-is even
though ``decode_string`` cannot read it back.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from dotnetdiag.ipc.constants import MAX_PAYLOAD_BYTES
from dotnetdiag.ipc.errors import (
    InvalidLengthError,
    PayloadTooLargeError,
    StringDecodingError,
    StringEncodingError,
)
from dotnetdiag.ipc.wire import U16, U32, read_exact, read_u32

if TYPE_CHECKING:
    from dotnetdiag.ipc.wire import ByteReader

_CODEC = "utf-16-le"
_CODE_UNIT = 2

EMPTY_STRING = U16.pack(0)


def encode_string(value: str) -> bytes:
    """Encode *value* for the wire.

    Raises:
        StringEncodingError: If *value* contains lone surrogates.
        PayloadTooLargeError: If the encoded string alone cannot fit in a message.
    """
    if not value:
        return EMPTY_STRING
    try:
        encoded = value.encode(_CODEC)
    except UnicodeEncodeError as exc:
        raise StringEncodingError(value, exc) from exc
    total = U32.size + len(encoded) + len(EMPTY_STRING)
    if total > MAX_PAYLOAD_BYTES:
        raise PayloadTooLargeError(total, MAX_PAYLOAD_BYTES)
    code_units = len(encoded) // _CODE_UNIT
    return U32.pack(code_units + 1) + encoded + EMPTY_STRING


def decode_string(reader: ByteReader) -> str:
    """Read a length-prefixed string as sent by the diagnostics server.

    Code units that are not valid UTF-16 (unpaired surrogates from a process
    command line, for instance) decode to U+FFFD.

    Raises:
        InvalidLengthError: If the declared length is zero.
        TruncatedStreamError: If fewer code units follow than declared.
    """
    length = read_u32(reader)
    if length == 0:
        msg = "Invalid string length 0"
        raise InvalidLengthError(msg)
    raw = read_exact(reader, length * _CODE_UNIT)
    # Last code unit is the null terminator.
    return raw[:-_CODE_UNIT].decode(_CODEC, errors="replace")


def decode_payload_string(reader: ByteReader) -> str:
    """Read a string written by ``encode_string``, including the empty marker.

    ``encode_string`` caps a string below 32768 code units, so the low half
    of a non-empty length prefix is never zero.

    Raises:
        StringDecodingError: If the code units are not valid UTF-16.
    """
    low = read_exact(reader, U16.size)
    if low == EMPTY_STRING:
        return ""
    length = U32.unpack(low + read_exact(reader, U16.size))[0]
    raw = read_exact(reader, length * _CODE_UNIT)
    try:
        return raw[:-_CODE_UNIT].decode(_CODEC)
    except UnicodeDecodeError as exc:
        raise StringDecodingError(exc) from exc


__all__ = [
    "EMPTY_STRING",
    "decode_payload_string",
    "decode_string",
    "encode_string",
]
