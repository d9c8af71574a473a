"""Tests for request payload encodings and response body parsing."""

from __future__ import annotations

import io
import uuid

import pytest
from hypothesis import given
from pydantic import ValidationError

from dotnetdiag.ipc.commands import (
    CommandSet,
    DumpCommandId,
    DumpType,
    EventPipeCommandId,
    Format,
    ProcessCommandId,
)
from dotnetdiag.ipc.contracts import (
    CollectDumpPayload,
    CollectTracing2Payload,
    CollectTracingPayload,
    CollectTracingResponse,
    OKResponse,
    ProcessInfo2Payload,
    ProcessInfo2Response,
    ProviderConfig,
    RequestPayload,
    ResumeRuntimePayload,
    StopTracingPayload,
    StopTracingResponse,
)
from dotnetdiag.ipc.errors import (
    PayloadTooLargeError,
    TrailingDataError,
    TruncatedStreamError,
    UnknownEnumValueError,
)
from dotnetdiag.ipc.strings import encode_string
from dotnetdiag.ipc.wire import U32, U64
from tests.helpers.ipc import process_info2_body, server_string
from tests.strategies import (
    collect_dump_payloads,
    collect_tracing2_payloads,
    collect_tracing_payloads,
)

pytestmark = pytest.mark.unit

RUNTIME_PROVIDER = "Microsoft-Windows-DotNETRuntime"


def _runtime_provider(**overrides: object) -> ProviderConfig:
    fields: dict[str, object] = {
        "keywords": 0xF00D,
        "log_level": 4,
        "provider_name": RUNTIME_PROVIDER,
        "filter_data": "",
    }
    fields.update(overrides)
    return ProviderConfig.model_validate(fields)


class TestCollectTracingPayload:
    def test_single_provider_encoding_length(self) -> None:
        payload = CollectTracingPayload(
            circular_buffer_size_mb=1024,
            format=Format.NETTRACE,
            providers=[_runtime_provider()],
        )

        encoded = payload.to_bytes()

        assert len(encoded) == 4 + 4 + 4 + (8 + 4 + (4 + 62 + 2) + 2)

    def test_single_provider_encoding_bytes(self) -> None:
        payload = CollectTracingPayload(
            circular_buffer_size_mb=1024,
            format=Format.NETTRACE,
            providers=[_runtime_provider()],
        )

        assert payload.to_bytes() == b"".join(
            (
                U32.pack(1024),
                U32.pack(1),
                U32.pack(1),
                U64.pack(0xF00D),
                U32.pack(4),
                U32.pack(32),
                RUNTIME_PROVIDER.encode("utf-16-le"),
                b"\x00\x00",
                b"\x00\x00",
            )
        )

    def test_provider_order_is_preserved(self) -> None:
        first = _runtime_provider(provider_name="A")
        second = _runtime_provider(provider_name="B", filter_data="k=v")
        encoded = CollectTracingPayload(
            circular_buffer_size_mb=1, providers=[first, second]
        ).to_bytes()

        assert encoded[12:] == first.to_bytes() + second.to_bytes()
        decoded = CollectTracingPayload.from_bytes(encoded)
        assert [p.provider_name for p in decoded.providers] == ["A", "B"]

    def test_no_providers(self) -> None:
        payload = CollectTracingPayload(circular_buffer_size_mb=256, format=Format.NETPERF)
        assert payload.to_bytes() == U32.pack(256) + U32.pack(0) + U32.pack(0)

    def test_targets_collect_tracing(self) -> None:
        assert CollectTracingPayload.command_set is CommandSet.EVENT_PIPE
        assert CollectTracingPayload.command_id is EventPipeCommandId.COLLECT_TRACING

    @given(collect_tracing_payloads)
    def test_decode_inverts_encode(self, payload: CollectTracingPayload) -> None:
        assert CollectTracingPayload.from_bytes(payload.to_bytes()) == payload

    def test_out_of_range_buffer_size_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CollectTracingPayload(circular_buffer_size_mb=2**32)

    def test_negative_keywords_are_rejected(self) -> None:
        with pytest.raises(ValidationError):
            _runtime_provider(keywords=-1)

    def test_models_are_immutable(self) -> None:
        provider = _runtime_provider()
        with pytest.raises(ValidationError):
            provider.log_level = 5  # type: ignore[misc]

    def test_unknown_format_is_an_ipc_error(self) -> None:
        body = U32.pack(64) + U32.pack(7) + U32.pack(0)
        with pytest.raises(UnknownEnumValueError) as exc_info:
            CollectTracingPayload.from_bytes(body)
        assert exc_info.value.code == "UNKNOWN_ENUM_VALUE"

    def test_truncated_provider_list(self) -> None:
        encoded = CollectTracingPayload(
            circular_buffer_size_mb=1, providers=[_runtime_provider()]
        ).to_bytes()
        with pytest.raises(TruncatedStreamError):
            CollectTracingPayload.from_bytes(encoded[:-3])


class TestCollectTracing2Payload:
    def test_rundown_flag_follows_format(self) -> None:
        payload = CollectTracing2Payload(circular_buffer_size_mb=256, request_rundown=False)
        assert payload.to_bytes() == U32.pack(256) + U32.pack(1) + b"\x00" + U32.pack(0)

    def test_targets_collect_tracing2(self) -> None:
        assert CollectTracing2Payload.command_set is CommandSet.EVENT_PIPE
        assert CollectTracing2Payload.command_id is EventPipeCommandId.COLLECT_TRACING_2

    @given(collect_tracing2_payloads)
    def test_decode_inverts_encode(self, payload: CollectTracing2Payload) -> None:
        assert CollectTracing2Payload.from_bytes(payload.to_bytes()) == payload


class TestStopTracingPayload:
    def test_raw_little_endian_session_id(self) -> None:
        payload = StopTracingPayload(session_id=0x1122334455667788)
        assert payload.to_bytes() == bytes.fromhex("8877665544332211")

    def test_trailing_bytes_are_rejected(self) -> None:
        with pytest.raises(TrailingDataError) as exc_info:
            StopTracingPayload.from_bytes(bytes(8) + b"\x00")
        assert exc_info.value.remaining == 1

    def test_targets_stop_tracing(self) -> None:
        assert StopTracingPayload.command_id is EventPipeCommandId.STOP_TRACING


class TestCollectDumpPayload:
    def test_layout(self) -> None:
        payload = CollectDumpPayload(
            dump_name="/tmp/core.dmp", dump_type=DumpType.FULL, diagnostics=True
        )
        assert payload.to_bytes() == encode_string("/tmp/core.dmp") + U32.pack(4) + U32.pack(1)

    def test_targets_generate_core_dump(self) -> None:
        assert CollectDumpPayload.command_set is CommandSet.DUMP
        assert CollectDumpPayload.command_id is DumpCommandId.GENERATE_CORE_DUMP

    @given(collect_dump_payloads)
    def test_decode_inverts_encode(self, payload: CollectDumpPayload) -> None:
        assert CollectDumpPayload.from_bytes(payload.to_bytes()) == payload

    def test_dump_name_too_long_for_a_message(self) -> None:
        payload = CollectDumpPayload(dump_name="a" * 65535)
        with pytest.raises(PayloadTooLargeError):
            payload.to_bytes()

    def test_unknown_dump_type_is_an_ipc_error(self) -> None:
        body = encode_string("core") + U32.pack(9) + U32.pack(0)
        with pytest.raises(UnknownEnumValueError) as exc_info:
            CollectDumpPayload.from_bytes(body)
        assert exc_info.value.enum_name == "DumpType"
        assert exc_info.value.value == 9


def test_request_base_is_abstract() -> None:
    with pytest.raises(TypeError):
        RequestPayload()


def test_process_commands_have_empty_payloads() -> None:
    assert ProcessInfo2Payload().to_bytes() == b""
    assert ResumeRuntimePayload().to_bytes() == b""
    assert ProcessInfo2Payload.command_id is ProcessCommandId.PROCESS_INFO_2
    assert ProcessInfo2Payload.command_id == 4
    assert ResumeRuntimePayload.command_id is ProcessCommandId.RESUME_RUNTIME


class TestResponses:
    def test_session_responses(self) -> None:
        body = U64.pack(0xDEADBEEF00000001)
        assert CollectTracingResponse.from_bytes(body).session_id == 0xDEADBEEF00000001
        assert StopTracingResponse.from_bytes(body).session_id == 0xDEADBEEF00000001

    def test_ok_response(self) -> None:
        assert OKResponse.from_bytes(U32.pack(0)).code == 0

    def test_process_info2_fields_in_order(self) -> None:
        cookie = uuid.UUID("12345678-9abc-def0-1234-56789abcdef0")
        body = process_info2_body(
            pid=31337,
            command_line="dotnet run",
            os_name="Linux",
            arch="arm64",
            cookie=cookie.bytes_le,
            entrypoint="",
            clr_version="9.0.0",
        )

        info = ProcessInfo2Response.from_bytes(body)

        assert info.process_id == 31337
        assert info.command_line == "dotnet run"
        assert info.os == "Linux"
        assert info.arch == "arm64"
        assert info.runtime_cookie == cookie.bytes_le
        assert info.runtime_cookie_uuid == cookie
        assert info.managed_entrypoint_assembly_name == ""
        assert info.clr_product_version == "9.0.0"

    def test_process_info2_cookie_is_raw_bytes(self) -> None:
        info = ProcessInfo2Response.from_bytes(process_info2_body(cookie=bytes(range(16))))
        assert info.runtime_cookie == bytes(range(16))

    def test_process_info2_truncated_string(self) -> None:
        body = U64.pack(1) + server_string("dotnet")[:-4]
        with pytest.raises(TruncatedStreamError):
            ProcessInfo2Response.read_from(io.BytesIO(body))

    def test_cookie_must_be_sixteen_bytes(self) -> None:
        with pytest.raises(ValidationError):
            ProcessInfo2Response(
                process_id=1,
                command_line="",
                os="",
                arch="",
                runtime_cookie=b"\x00" * 15,
                managed_entrypoint_assembly_name="",
                clr_product_version="",
            )

    def test_process_info2_tolerates_unpaired_surrogate_in_command_line(self) -> None:
        body = b"".join(
            (
                U64.pack(1),
                U32.pack(3) + b"a\x00" + b"\x00\xd8" + b"\x00\x00",
                server_string("Windows"),
                server_string("x64"),
                bytes(16),
                server_string("app"),
                server_string("8.0.4"),
            )
        )

        info = ProcessInfo2Response.from_bytes(body)

        assert info.command_line == "a\ufffd"
        assert info.os == "Windows"
