"""Process information and control commands."""

from __future__ import annotations

import click

from dotnetdiag.cli.errors import ipc_errors
from dotnetdiag.ipc.client import DiagnosticsClient


@click.command()
@click.argument("pid", type=int)
def info(pid: int) -> None:
    """Show runtime information for PID."""
    with ipc_errors():
        details = DiagnosticsClient(pid).process_info()

    click.echo(f"  PID:          {details.process_id}")
    click.echo(f"  Command line: {details.command_line}")
    click.echo(f"  OS / arch:    {details.os} / {details.arch}")
    click.echo(f"  Entrypoint:   {details.managed_entrypoint_assembly_name or '-'}")
    click.echo(f"  CLR version:  {details.clr_product_version}")
    click.echo(f"  Cookie:       {details.runtime_cookie_uuid}")


@click.command()
@click.argument("pid", type=int)
def resume(pid: int) -> None:
    """Resume a runtime that is suspended waiting for a diagnostics client."""
    with ipc_errors():
        DiagnosticsClient(pid).resume_runtime()
    click.secho(f"Resumed runtime in process {pid}", fg="green")
