"""Smoke test to verify the project scaffolding works."""

from __future__ import annotations


def test_import() -> None:
    import mcplink

    assert mcplink.__version__ == "0.1.0"


def test_cli_entrypoint() -> None:
    from mcplink.cli import main

    assert callable(main)


def test_lazy_import_from_mcplink() -> None:
    import mcplink
    from mcplink.client import MCPClient, probe_server, run_tool
    from mcplink.config import ClientConfig

    assert mcplink.MCPClient is MCPClient
    assert mcplink.probe_server is probe_server
    assert mcplink.run_tool is run_tool
    assert mcplink.ClientConfig is ClientConfig


def test_unknown_attribute() -> None:
    import pytest

    import mcplink

    with pytest.raises(AttributeError, match="no attribute"):
        _ = mcplink.NotAThing  # type: ignore[attr-defined]
