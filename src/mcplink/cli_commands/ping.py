"""``mcplink ping`` — check that an MCP server negotiates and lists tools."""

from __future__ import annotations

import asyncio

import click

from mcplink.cli_commands._output import print_connection_report
from mcplink.cli_commands.tools import resolve_target


@click.command()
@click.argument("target")
@click.pass_context
def ping(ctx: click.Context, target: str) -> None:
    """Initialize a session with TARGET, count its tools, and disconnect."""
    from mcplink.client import probe_server

    config = resolve_target(ctx, target)
    report = asyncio.run(probe_server(config))
    print_connection_report(report)
    if not report.success:
        ctx.exit(1)
