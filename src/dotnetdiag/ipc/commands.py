"""Command sets and per-set command ids of the DOTNET_IPC_V1 protocol."""

from __future__ import annotations

from enum import IntEnum


class CommandSet(IntEnum):
    """Coarse category of a diagnostics command."""

    DUMP = 0x01
    EVENT_PIPE = 0x02
    PROFILER = 0x03
    PROCESS = 0x04

    # Responses only; never a request target.
    SERVER = 0xFF


class ServerResponseId(IntEnum):
    OK = 0x00
    ERROR = 0xFF


class DumpCommandId(IntEnum):
    GENERATE_CORE_DUMP = 0x01


class EventPipeCommandId(IntEnum):
    STOP_TRACING = 0x01
    COLLECT_TRACING = 0x02
    COLLECT_TRACING_2 = 0x03


class ProfilerCommandId(IntEnum):
    ATTACH_PROFILER = 0x01


class ProcessCommandId(IntEnum):
    PROCESS_INFO = 0x00
    RESUME_RUNTIME = 0x01
    PROCESS_ENVIRONMENT = 0x02
    PROCESS_INFO_2 = 0x04


type CommandId = (
    DumpCommandId | EventPipeCommandId | ProfilerCommandId | ProcessCommandId | ServerResponseId
)

COMMAND_IDS: dict[CommandSet, type[IntEnum]] = {
    CommandSet.DUMP: DumpCommandId,
    CommandSet.EVENT_PIPE: EventPipeCommandId,
    CommandSet.PROFILER: ProfilerCommandId,
    CommandSet.PROCESS: ProcessCommandId,
    CommandSet.SERVER: ServerResponseId,
}


class Format(IntEnum):
    """Serialization format of an EventPipe trace stream."""

    NETPERF = 0
    NETTRACE = 1


class DumpType(IntEnum):
    NORMAL = 1
    WITH_HEAP = 2
    TRIAGE = 3
    FULL = 4


def resolve_request_command(command_set: int, command_id: int) -> tuple[CommandSet, IntEnum]:
    """Validate a request target and return it as enum members.

    Raises:
        ValueError: If the set is unknown or ``SERVER``, or the id does not
            belong to the set.
    """
    resolved_set = CommandSet(command_set)
    if resolved_set is CommandSet.SERVER:
        msg = "The server command set is reserved for responses"
        raise ValueError(msg)
    try:
        resolved_id = COMMAND_IDS[resolved_set](command_id)
    except ValueError:
        msg = f"Command id {command_id:#04x} is not defined for {resolved_set.name}"
        raise ValueError(msg) from None
    return resolved_set, resolved_id


__all__ = [
    "COMMAND_IDS",
    "CommandId",
    "CommandSet",
    "DumpCommandId",
    "DumpType",
    "EventPipeCommandId",
    "Format",
    "ProcessCommandId",
    "ProfilerCommandId",
    "ServerResponseId",
    "resolve_request_command",
]
