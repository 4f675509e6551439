"""``mcplink tools`` — list and call tools on an MCP server."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import click

from mcplink.cli_commands._output import console, print_standard_result, print_tools_json, print_tools_table
from mcplink.errors import ConfigError
from mcplink.failures import MalformedArguments, RpcFailure, TransportFailure

if TYPE_CHECKING:
    from mcplink.config import ClientConfig
    from mcplink.failures import Failure
    from mcplink.models import Tool, ToolPage


def resolve_target(ctx: click.Context, target: str) -> ClientConfig:
    """Turn a server name or URL into a config using the global options."""
    try:
        return ctx.obj["settings"].resolve(target, timeout=ctx.obj["timeout"])
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc


@click.group()
def tools() -> None:
    """List and call tools."""


@tools.command("list")
@click.argument("target")
@click.option("--cursor", default=None, help="Fetch the page starting at this cursor.")
@click.option("--all", "fetch_all", is_flag=True, help="Follow pagination to the end.")
@click.option("--json", "as_json", is_flag=True, help="Print raw tool definitions as JSON.")
@click.pass_context
def list_tools(ctx: click.Context, target: str, cursor: str | None, fetch_all: bool, as_json: bool) -> None:
    """List tools exposed by TARGET (a configured server name or an http(s) URL)."""
    from mcplink.client import MCPClient

    config = resolve_target(ctx, target)

    async def _list() -> list[Tool] | ToolPage | Failure:
        async with MCPClient(config) as client:
            init = await client.initialize()
            if isinstance(init, (TransportFailure, RpcFailure)):
                return init
            if fetch_all:
                return await client.list_all_tools()
            return await client.list_tools(cursor)

    outcome = asyncio.run(_list())
    if isinstance(outcome, (TransportFailure, RpcFailure)):
        console.print(f"[red]Discovery error:[/red] {outcome.describe()}")
        ctx.exit(1)

    if isinstance(outcome, list):
        found, next_cursor = outcome, None
    else:
        found, next_cursor = outcome.tools, outcome.next_cursor

    if as_json:
        print_tools_json(found)
    elif not found:
        console.print("[yellow]No tools discovered.[/yellow]")
    else:
        print_tools_table(found)

    if next_cursor:
        console.print(f"More tools available: --cursor {next_cursor}")


@tools.command("call")
@click.argument("target")
@click.argument("name")
@click.option("--args", "raw_args", default="{}", help="Tool arguments as a JSON object.")
@click.pass_context
def call_tool(ctx: click.Context, target: str, name: str, raw_args: str) -> None:
    """Call tool NAME on TARGET and print the flattened result."""
    from mcplink.bridge import function_call_to_tool_args
    from mcplink.client import run_tool
    from mcplink.models import FunctionCall

    call = function_call_to_tool_args(FunctionCall(name=name, arguments=raw_args))
    if isinstance(call, MalformedArguments):
        raise click.BadParameter(call.message, param_hint="--args")

    config = resolve_target(ctx, target)
    result = asyncio.run(run_tool(config, call.name, call.arguments))
    print_standard_result(result)
    if not result.success:
        ctx.exit(1)
