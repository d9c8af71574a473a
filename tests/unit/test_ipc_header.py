"""Tests for the 20-byte envelope header."""

from __future__ import annotations

import io

import pytest
from hypothesis import given
from hypothesis import strategies as st

from dotnetdiag.ipc.commands import CommandSet, EventPipeCommandId, ServerResponseId
from dotnetdiag.ipc.constants import HEADER_SIZE, MAGIC, MAX_PAYLOAD_BYTES
from dotnetdiag.ipc.errors import HeaderMalformedError, PayloadTooLargeError
from dotnetdiag.ipc.header import Header, pack_header, read_header, write_header

pytestmark = pytest.mark.unit


def test_magic_constant() -> None:
    assert MAGIC == b"DOTNET_IPC_V1\x00"
    assert len(MAGIC) == 14


def test_write_header_layout() -> None:
    buffer = io.BytesIO()
    write_header(buffer, CommandSet.EVENT_PIPE, EventPipeCommandId.COLLECT_TRACING, 94)

    raw = buffer.getvalue()
    assert len(raw) == HEADER_SIZE
    assert raw[:14] == MAGIC
    assert raw[14:16] == (114).to_bytes(2, "little")
    assert raw[16] == 0x02
    assert raw[17] == 0x02
    assert raw[18:20] == b"\x00\x00"


def test_read_header_decodes_fields() -> None:
    header = read_header(io.BytesIO(pack_header(CommandSet.PROCESS, 0x04, 3) + b"abc"))

    assert header == Header(size=23, command_set=4, command_id=4, reserved=0)
    assert header.payload_size == 3
    assert not header.is_error


def test_read_header_does_not_check_size_against_stream() -> None:
    header = read_header(io.BytesIO(pack_header(CommandSet.SERVER, 0x00, 100)))
    assert header.payload_size == 100


@given(
    st.binary(min_size=14, max_size=14).filter(lambda magic: magic != MAGIC),
    st.binary(min_size=6, max_size=6),
)
def test_wrong_magic_is_malformed(magic: bytes, rest: bytes) -> None:
    with pytest.raises(HeaderMalformedError):
        read_header(io.BytesIO(magic + rest))


@pytest.mark.parametrize("length", [0, 1, 14, 19])
def test_short_header_is_malformed(length: int) -> None:
    with pytest.raises(HeaderMalformedError):
        read_header(io.BytesIO(pack_header(CommandSet.DUMP, 1, 0)[:length]))


def test_read_header_tolerates_short_reads() -> None:
    class _Trickle:
        def __init__(self, data: bytes) -> None:
            self._data = io.BytesIO(data)

        def read(self, size: int, /) -> bytes:
            return self._data.read(min(size, 3))

    header = read_header(_Trickle(pack_header(CommandSet.DUMP, 1, 0)))
    assert header.size == HEADER_SIZE


def test_error_header_detection() -> None:
    header = read_header(io.BytesIO(pack_header(CommandSet.SERVER, ServerResponseId.ERROR, 4)))
    assert header.is_error


def test_payload_size_limit() -> None:
    assert len(pack_header(CommandSet.DUMP, 1, MAX_PAYLOAD_BYTES)) == HEADER_SIZE
    with pytest.raises(PayloadTooLargeError):
        pack_header(CommandSet.DUMP, 1, MAX_PAYLOAD_BYTES + 1)
