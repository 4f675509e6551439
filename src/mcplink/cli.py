"""mcplink CLI entrypoint."""

from __future__ import annotations

import logging
from pathlib import Path

import click
from rich.logging import RichHandler

from mcplink import __version__
from mcplink.cli_commands._output import console
from mcplink.config import ConfigLoader, LinkSettings
from mcplink.errors import ConfigError
from mcplink.utils.telemetry import configure_telemetry


@click.group()
@click.version_option(version=__version__, prog_name="mcplink")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="YAML file with named MCP servers.",
)
@click.option("--timeout", type=float, default=None, help="Per-request deadline in seconds.")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: Path | None, timeout: float | None, verbose: bool) -> None:
    """mcplink — talk to MCP servers over Streamable HTTP."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )

    settings = LinkSettings()
    if config_path is not None:
        try:
            settings = ConfigLoader(config_path).load()
        except ConfigError as exc:
            raise click.ClickException(str(exc)) from exc

    if settings.telemetry is not None and settings.telemetry.enabled:
        configure_telemetry(settings.telemetry)

    ctx.obj = {"settings": settings, "timeout": timeout}


# Register subcommands
from mcplink.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
