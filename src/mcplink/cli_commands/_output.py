"""Shared CLI output formatters."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from mcplink.models import ConnectionReport, StandardResult, Tool

console = Console()


def print_tools_table(tools: list[Tool], *, title: str = "Discovered Tools") -> None:
    """Pretty-print tools as a table."""
    table = Table(title=title)
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    table.add_column("Parameters")

    for tool in tools:
        properties = tool.input_schema.get("properties", {})
        params = ", ".join(properties) if isinstance(properties, dict) else ""
        table.add_row(tool.name, _truncate(tool.description), params or "-")

    console.print(table)


def print_tools_json(tools: list[Tool]) -> None:
    console.print_json(json.dumps([t.model_dump(by_alias=True, exclude_none=True) for t in tools]))


def print_standard_result(result: StandardResult) -> None:
    """Print a flattened tool result: text first, then the machine channel."""
    if not result.success:
        console.print(f"[red]Tool error:[/red] {result.error}")
        return
    if result.content:
        console.print(result.content)
    console.print_json(json.dumps(result.result, default=str))


def print_connection_report(report: ConnectionReport) -> None:
    if not report.success:
        console.print(f"[red]Connection failed:[/red] {report.error}")
        return
    console.print(f"[green]Connection successful[/green], found {report.tool_count} tool(s)")
    if report.tools:
        print_tools_table(report.tools, title="Preview")


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
