"""Byte stream protocols and little-endian primitive readers."""

from __future__ import annotations

import struct
from typing import Protocol

from dotnetdiag.ipc.errors import TruncatedStreamError

U8 = struct.Struct("<B")
U16 = struct.Struct("<H")
U32 = struct.Struct("<I")
U64 = struct.Struct("<Q")

_READ_CHUNK = 64 * 1024


class ByteReader(Protocol):
    """Anything with a blocking ``read(size)`` returning at most *size* bytes."""

    def read(self, size: int, /) -> bytes: ...


class ByteWriter(Protocol):
    """Anything with blocking ``write`` and ``flush``."""

    def write(self, data: bytes, /) -> object: ...

    def flush(self) -> None: ...


class ByteStream(ByteReader, ByteWriter, Protocol):
    """A duplex stream, such as a connected socket file."""


def read_exact(reader: ByteReader, size: int) -> bytes:
    """Read exactly *size* bytes or raise ``TruncatedStreamError``.

    Reads in bounded chunks so a bogus length field cannot force a huge
    allocation before the stream runs dry.
    """
    if size == 0:
        return b""
    chunks: list[bytes] = []
    received = 0
    while received < size:
        chunk = reader.read(min(size - received, _READ_CHUNK))
        if not chunk:
            raise TruncatedStreamError(size, received)
        chunks.append(chunk)
        received += len(chunk)
    return b"".join(chunks)


def read_u8(reader: ByteReader) -> int:
    return U8.unpack(read_exact(reader, U8.size))[0]


def read_u32(reader: ByteReader) -> int:
    return U32.unpack(read_exact(reader, U32.size))[0]


def read_u64(reader: ByteReader) -> int:
    return U64.unpack(read_exact(reader, U64.size))[0]


__all__ = [
    "U16",
    "U32",
    "U64",
    "U8",
    "ByteReader",
    "ByteStream",
    "ByteWriter",
    "read_exact",
    "read_u32",
    "read_u64",
    "read_u8",
]
