"""List processes exposing a diagnostics endpoint."""

from __future__ import annotations

import click
import psutil

from dotnetdiag.ipc.discovery import list_diagnostic_endpoints
from dotnetdiag.paths import get_runtime_dir


def _process_name(pid: int) -> str:
    try:
        return psutil.Process(pid).name()
    except psutil.Error:
        return "?"


@click.command(name="ps")
@click.option("--probe", is_flag=True, help="Skip sockets that refuse a connection")
def ps_cmd(probe: bool) -> None:
    """List .NET processes that can be diagnosed."""
    endpoints = list_diagnostic_endpoints(probe=probe)
    if not endpoints:
        click.secho(f"No diagnostics endpoints found in {get_runtime_dir()}", fg="yellow")
        return
    for endpoint in endpoints:
        click.echo(f"{endpoint.pid:>8}  {_process_name(endpoint.pid):<24}  {endpoint.path}")
