"""Send requests and read responses as complete envelopes over a byte stream."""

from __future__ import annotations

import io
import logging
from typing import TYPE_CHECKING

from dotnetdiag.ipc.commands import resolve_request_command
from dotnetdiag.ipc.contracts import ErrorResponse
from dotnetdiag.ipc.errors import DiagnosticServerError
from dotnetdiag.ipc.header import read_header, write_header

if TYPE_CHECKING:
    from dotnetdiag.ipc.contracts import RequestPayload, ResponseBody
    from dotnetdiag.ipc.header import Header
    from dotnetdiag.ipc.wire import ByteReader, ByteStream, ByteWriter

logger = logging.getLogger(__name__)


def write_message(
    stream: ByteWriter,
    command_set: int,
    command_id: int,
    payload: bytes = b"",
) -> None:
    """Write one request envelope and flush it.

    Header and payload go out in a single ``write`` so concurrent writers on
    other streams never see a partial header, and the call returns only after
    ``flush``.

    Raises:
        ValueError: If the command set/id pair is not a valid request target.
        PayloadTooLargeError: If the envelope would exceed 64 KiB.
    """
    resolved_set, resolved_id = resolve_request_command(command_set, command_id)
    buffer = io.BytesIO()
    write_header(buffer, resolved_set, resolved_id, len(payload))
    buffer.write(payload)
    stream.write(buffer.getvalue())
    stream.flush()
    logger.debug(
        "Sent %s/%s (%d payload bytes)",
        resolved_set.name,
        resolved_id.name,
        len(payload),
    )


def send_request(stream: ByteWriter, request: RequestPayload) -> None:
    """Serialize *request* and write it to the command it targets."""
    write_message(stream, request.command_set, request.command_id, request.to_bytes())


def read_response_header(stream: ByteReader) -> Header:
    """Read a response header, raising if the server reported an error.

    Returns the consumed header on success; the command-specific body is
    left in the stream.

    Raises:
        HeaderMalformedError: If the header is short or has the wrong magic.
        DiagnosticServerError: If the header announces an error response.
        TruncatedStreamError: If the error code is cut short.
    """
    header = read_header(stream)
    logger.debug(
        "Received header set=%#04x id=%#04x size=%d",
        header.command_set,
        header.command_id,
        header.size,
    )
    if header.is_error:
        error = ErrorResponse.read_from(stream)
        logger.debug("Diagnostic server returned error %#010x", error.code)
        raise DiagnosticServerError(error.code)
    return header


def read_response[R: ResponseBody](stream: ByteReader, response_type: type[R]) -> R:
    """Read a full response whose body is decoded as *response_type*."""
    read_response_header(stream)
    return response_type.read_from(stream)


def exchange[R: ResponseBody](
    stream: ByteStream,
    request: RequestPayload,
    response_type: type[R],
) -> R:
    """Send *request* and read back its response on the same stream."""
    send_request(stream, request)
    return read_response(stream, response_type)


__all__ = [
    "exchange",
    "read_response",
    "read_response_header",
    "send_request",
    "write_message",
]
