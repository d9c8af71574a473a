"""The fixed 20-byte envelope header that frames every message."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import TYPE_CHECKING

from dotnetdiag.ipc.commands import CommandSet, ServerResponseId
from dotnetdiag.ipc.constants import HEADER_SIZE, MAGIC, MAX_PAYLOAD_BYTES
from dotnetdiag.ipc.errors import HeaderMalformedError, PayloadTooLargeError

if TYPE_CHECKING:
    from dotnetdiag.ipc.wire import ByteReader, ByteWriter

# magic[14] | size u16 | command_set u8 | command_id u8 | reserved u16
_HEADER = struct.Struct("<14sHBBH")


@dataclass(frozen=True, slots=True)
class Header:
    """A decoded envelope header.

    Attributes:
        size: Total message length in bytes, header included.
        command_set: Raw command set byte.
        command_id: Raw command id byte.
        reserved: Reserved field; zero on every message we write.
    """

    size: int
    command_set: int
    command_id: int
    reserved: int = 0

    @property
    def payload_size(self) -> int:
        return self.size - HEADER_SIZE

    @property
    def is_error(self) -> bool:
        """Whether this header announces a server error response."""
        return self.command_set == CommandSet.SERVER and self.command_id == ServerResponseId.ERROR


def pack_header(command_set: int, command_id: int, payload_len: int) -> bytes:
    """Serialize a header for a payload of *payload_len* bytes.

    Raises:
        PayloadTooLargeError: If the message would not fit the u16 size field.
    """
    if payload_len > MAX_PAYLOAD_BYTES:
        raise PayloadTooLargeError(payload_len, MAX_PAYLOAD_BYTES)
    return _HEADER.pack(MAGIC, HEADER_SIZE + payload_len, command_set, command_id, 0)


def write_header(writer: ByteWriter, command_set: int, command_id: int, payload_len: int) -> None:
    writer.write(pack_header(command_set, command_id, payload_len))


def read_header(reader: ByteReader) -> Header:
    """Read and validate one header.

    The ``size`` field is not checked against the bytes remaining in the
    stream; framing beyond the header is left to the caller.

    Raises:
        HeaderMalformedError: On a short read or a magic mismatch.
    """
    raw = b""
    while len(raw) < HEADER_SIZE:
        chunk = reader.read(HEADER_SIZE - len(raw))
        if not chunk:
            msg = f"Short header: got {len(raw)} of {HEADER_SIZE} bytes"
            raise HeaderMalformedError(msg)
        raw += chunk
    magic, size, command_set, command_id, reserved = _HEADER.unpack(raw)
    if magic != MAGIC:
        msg = f"Unexpected magic {magic!r}"
        raise HeaderMalformedError(msg)
    return Header(size=size, command_set=command_set, command_id=command_id, reserved=reserved)


__all__ = [
    "Header",
    "pack_header",
    "read_header",
    "write_header",
]
