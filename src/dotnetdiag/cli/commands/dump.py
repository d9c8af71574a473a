"""Memory dump command."""

from __future__ import annotations

import click

from dotnetdiag.cli.errors import ipc_errors
from dotnetdiag.ipc.client import DiagnosticsClient
from dotnetdiag.ipc.commands import DumpType
from dotnetdiag.ipc.contracts import CollectDumpPayload

_DUMP_TYPES = {member.name.lower().replace("_", "-"): member for member in DumpType}


@click.command()
@click.argument("pid", type=int)
@click.argument("dump_name")
@click.option(
    "--type",
    "dump_type",
    type=click.Choice(sorted(_DUMP_TYPES)),
    default="normal",
    show_default=True,
    help="Amount of memory captured in the dump",
)
@click.option("--diagnostics", is_flag=True, help="Have the runtime log dump progress")
def dump(pid: int, dump_name: str, dump_type: str, diagnostics: bool) -> None:
    """Write a memory dump of PID to DUMP_NAME.

    DUMP_NAME is resolved by the target process, not by this command.
    """
    payload = CollectDumpPayload(
        dump_name=dump_name,
        dump_type=_DUMP_TYPES[dump_type],
        diagnostics=diagnostics,
    )
    with ipc_errors():
        DiagnosticsClient(pid).collect_dump(payload)
    click.secho(f"Dump written to {dump_name}", fg="green")
