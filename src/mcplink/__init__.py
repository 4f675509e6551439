"""mcplink — async Model Context Protocol client over Streamable HTTP."""

from __future__ import annotations

from typing import TYPE_CHECKING

__version__ = "0.1.0"

if TYPE_CHECKING:
    from mcplink.client import MCPClient as MCPClient
    from mcplink.client import probe_server as probe_server
    from mcplink.client import run_tool as run_tool
    from mcplink.config import ClientConfig as ClientConfig

_LAZY_EXPORTS = {
    "MCPClient": "mcplink.client",
    "probe_server": "mcplink.client",
    "run_tool": "mcplink.client",
    "ClientConfig": "mcplink.config",
}


def __getattr__(name: str) -> object:
    module_path = _LAZY_EXPORTS.get(name)
    if module_path is not None:
        import importlib

        mod = importlib.import_module(module_path)
        return getattr(mod, name)
    raise AttributeError(f"module 'mcplink' has no attribute {name!r}")
