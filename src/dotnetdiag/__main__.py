"""CLI entry point for dotnetdiag."""

from __future__ import annotations

import logging

import click

from dotnetdiag.cli.commands.dump import dump
from dotnetdiag.cli.commands.process import info, resume
from dotnetdiag.cli.commands.ps import ps_cmd
from dotnetdiag.version import version_banner


@click.group(invoke_without_command=True)
@click.option("--version", is_flag=True, help="Show version and exit")
@click.option("-v", "--verbose", is_flag=True, help="Log IPC traffic to stderr")
@click.pass_context
def cli(ctx: click.Context, version: bool, verbose: bool) -> None:
    """Inspect and control running .NET processes over the diagnostics IPC channel."""
    if version:
        click.echo(version_banner())
        ctx.exit(0)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit(0)
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


cli.add_command(ps_cmd)
cli.add_command(info)
cli.add_command(resume)
cli.add_command(dump)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
