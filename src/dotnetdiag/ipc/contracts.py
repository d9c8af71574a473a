"""Request payloads and response bodies for diagnostics IPC commands.

Every model is frozen. Integer fields are range-checked against their wire
width, so an out-of-range value fails at construction with a pydantic
``ValidationError`` instead of being truncated during encoding.
"""

from __future__ import annotations

import io
import uuid
from abc import abstractmethod
from enum import IntEnum
from typing import TYPE_CHECKING, Annotated, ClassVar, Self

from pydantic import BaseModel, ConfigDict, Field

from dotnetdiag.ipc.commands import (
    CommandSet,
    DumpCommandId,
    DumpType,
    EventPipeCommandId,
    Format,
    ProcessCommandId,
)
from dotnetdiag.ipc.constants import RUNTIME_COOKIE_BYTES
from dotnetdiag.ipc.errors import TrailingDataError, UnknownEnumValueError
from dotnetdiag.ipc.strings import decode_payload_string, decode_string, encode_string
from dotnetdiag.ipc.wire import U8, U32, U64, read_exact, read_u8, read_u32, read_u64

if TYPE_CHECKING:
    from dotnetdiag.ipc.wire import ByteReader

UInt32 = Annotated[int, Field(ge=0, le=0xFFFF_FFFF)]
UInt64 = Annotated[int, Field(ge=0, le=0xFFFF_FFFF_FFFF_FFFF)]


class _WireModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    @classmethod
    @abstractmethod
    def read_from(cls, reader: ByteReader) -> Self: ...

    @classmethod
    def from_bytes(cls, data: bytes) -> Self:
        """Decode a complete body, rejecting leftover bytes."""
        reader = io.BytesIO(data)
        value = cls.read_from(reader)
        remaining = len(data) - reader.tell()
        if remaining:
            raise TrailingDataError(remaining)
        return value


def _read_enum[E: IntEnum](reader: ByteReader, enum_type: type[E]) -> E:
    raw = read_u32(reader)
    try:
        return enum_type(raw)
    except ValueError:
        raise UnknownEnumValueError(enum_type.__name__, raw) from None


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class RequestPayload(_WireModel):
    """Body of an outbound command; the command it targets is a class attribute."""

    command_set: ClassVar[CommandSet]
    command_id: ClassVar[IntEnum]

    @abstractmethod
    def to_bytes(self) -> bytes: ...


class ProviderConfig(_WireModel):
    """Filter for one EventPipe provider."""

    keywords: UInt64 = Field(description="Bitmask of event keywords to enable")
    log_level: UInt32 = Field(description="Verbosity level (0 = LogAlways ... 5 = Verbose)")
    provider_name: str = Field(description="Name of the event provider")
    filter_data: str = Field(default="", description="Provider-specific key=value filter")

    def to_bytes(self) -> bytes:
        return b"".join(
            (
                U64.pack(self.keywords),
                U32.pack(self.log_level),
                encode_string(self.provider_name),
                encode_string(self.filter_data),
            )
        )

    @classmethod
    def read_from(cls, reader: ByteReader) -> Self:
        return cls(
            keywords=read_u64(reader),
            log_level=read_u32(reader),
            provider_name=decode_payload_string(reader),
            filter_data=decode_payload_string(reader),
        )


def _encode_providers(providers: tuple[ProviderConfig, ...]) -> bytes:
    return U32.pack(len(providers)) + b"".join(p.to_bytes() for p in providers)


def _read_providers(reader: ByteReader) -> tuple[ProviderConfig, ...]:
    count = read_u32(reader)
    return tuple(ProviderConfig.read_from(reader) for _ in range(count))


class CollectTracingPayload(RequestPayload):
    """Start an EventPipe session streaming to this connection."""

    command_set = CommandSet.EVENT_PIPE
    command_id = EventPipeCommandId.COLLECT_TRACING

    circular_buffer_size_mb: UInt32 = Field(description="Session buffer size in megabytes")
    format: Format = Field(default=Format.NETTRACE, description="Trace serialization format")
    providers: tuple[ProviderConfig, ...] = Field(
        default=(),
        description="Providers to enable, in the order the runtime should apply them",
    )

    def to_bytes(self) -> bytes:
        return (
            U32.pack(self.circular_buffer_size_mb)
            + U32.pack(self.format)
            + _encode_providers(self.providers)
        )

    @classmethod
    def read_from(cls, reader: ByteReader) -> Self:
        return cls(
            circular_buffer_size_mb=read_u32(reader),
            format=_read_enum(reader, Format),
            providers=_read_providers(reader),
        )


class CollectTracing2Payload(CollectTracingPayload):
    """``CollectTracing`` with control over the rundown events sent on stop."""

    command_id = EventPipeCommandId.COLLECT_TRACING_2

    request_rundown: bool = Field(default=True, description="Emit rundown events on stop")

    def to_bytes(self) -> bytes:
        return (
            U32.pack(self.circular_buffer_size_mb)
            + U32.pack(self.format)
            + U8.pack(self.request_rundown)
            + _encode_providers(self.providers)
        )

    @classmethod
    def read_from(cls, reader: ByteReader) -> Self:
        return cls(
            circular_buffer_size_mb=read_u32(reader),
            format=_read_enum(reader, Format),
            request_rundown=bool(read_u8(reader)),
            providers=_read_providers(reader),
        )


class StopTracingPayload(RequestPayload):
    command_set = CommandSet.EVENT_PIPE
    command_id = EventPipeCommandId.STOP_TRACING

    session_id: UInt64

    def to_bytes(self) -> bytes:
        return U64.pack(self.session_id)

    @classmethod
    def read_from(cls, reader: ByteReader) -> Self:
        return cls(session_id=read_u64(reader))


class CollectDumpPayload(RequestPayload):
    """Ask the runtime to write a memory dump of itself."""

    command_set = CommandSet.DUMP
    command_id = DumpCommandId.GENERATE_CORE_DUMP

    dump_name: str = Field(description="Path of the dump file, as seen by the target process")
    dump_type: DumpType = Field(default=DumpType.NORMAL)
    diagnostics: bool = Field(default=False, description="Log dump generation to the console")

    def to_bytes(self) -> bytes:
        return (
            encode_string(self.dump_name)
            + U32.pack(self.dump_type)
            + U32.pack(1 if self.diagnostics else 0)
        )

    @classmethod
    def read_from(cls, reader: ByteReader) -> Self:
        return cls(
            dump_name=decode_payload_string(reader),
            dump_type=_read_enum(reader, DumpType),
            diagnostics=bool(read_u32(reader)),
        )


class _EmptyPayload(RequestPayload):
    def to_bytes(self) -> bytes:
        return b""

    @classmethod
    def read_from(cls, reader: ByteReader) -> Self:
        return cls()


class ProcessInfo2Payload(_EmptyPayload):
    command_set = CommandSet.PROCESS
    command_id = ProcessCommandId.PROCESS_INFO_2


class ResumeRuntimePayload(_EmptyPayload):
    """Resume a runtime started with ``DOTNET_DiagnosticPorts`` in suspend mode."""

    command_set = CommandSet.PROCESS
    command_id = ProcessCommandId.RESUME_RUNTIME


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class ResponseBody(_WireModel):
    """Body that follows a successful response header."""


class _SessionResponse(ResponseBody):
    session_id: UInt64

    @classmethod
    def read_from(cls, reader: ByteReader) -> Self:
        return cls(session_id=read_u64(reader))


class CollectTracingResponse(_SessionResponse):
    """Returned when a tracing session starts."""


class StopTracingResponse(_SessionResponse):
    """Returned when a tracing session is stopped; echoes its id."""


class _CodeResponse(ResponseBody):
    code: UInt32

    @classmethod
    def read_from(cls, reader: ByteReader) -> Self:
        return cls(code=read_u32(reader))


class OKResponse(_CodeResponse):
    """Plain status reply for commands with no richer result."""


class ErrorResponse(_CodeResponse):
    """HRESULT carried by a server error response."""


class ProcessInfo2Response(ResponseBody):
    """Identity and build information of the target process."""

    process_id: UInt64
    command_line: str
    os: str
    arch: str
    runtime_cookie: bytes = Field(
        min_length=RUNTIME_COOKIE_BYTES,
        max_length=RUNTIME_COOKIE_BYTES,
        description="Opaque per-runtime GUID, raw bytes as sent",
    )
    managed_entrypoint_assembly_name: str
    clr_product_version: str

    @property
    def runtime_cookie_uuid(self) -> uuid.UUID:
        """The cookie rendered as a GUID (mixed-endian .NET layout)."""
        return uuid.UUID(bytes_le=self.runtime_cookie)

    @classmethod
    def read_from(cls, reader: ByteReader) -> Self:
        return cls(
            process_id=read_u64(reader),
            command_line=decode_string(reader),
            os=decode_string(reader),
            arch=decode_string(reader),
            runtime_cookie=read_exact(reader, RUNTIME_COOKIE_BYTES),
            managed_entrypoint_assembly_name=decode_string(reader),
            clr_product_version=decode_string(reader),
        )


__all__ = [
    "CollectDumpPayload",
    "CollectTracing2Payload",
    "CollectTracingPayload",
    "CollectTracingResponse",
    "ErrorResponse",
    "OKResponse",
    "ProcessInfo2Payload",
    "ProcessInfo2Response",
    "ProviderConfig",
    "RequestPayload",
    "ResponseBody",
    "ResumeRuntimePayload",
    "StopTracingPayload",
    "StopTracingResponse",
    "UInt32",
    "UInt64",
]
