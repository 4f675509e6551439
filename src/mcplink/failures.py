"""Failure values returned by client operations.

Every public operation returns either its result model or one of these
values.  They stay disjoint so callers can tell "the exchange failed"
(:class:`TransportFailure`) from "the server rejected the call"
(:class:`RpcFailure`); tool-level failures live in
:attr:`~mcplink.models.ToolCallResult.is_error` instead.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel

TransportFailureKind = Literal["timeout", "network", "http_status", "protocol_violation"]


class TransportFailure(BaseModel):
    """The HTTP exchange itself failed or returned an undecodable body."""

    kind: TransportFailureKind
    message: str
    status_code: int | None = None

    @classmethod
    def timeout(cls, seconds: float) -> TransportFailure:
        return cls(kind="timeout", message=f"Request timed out after {seconds}s")

    @classmethod
    def network(cls, detail: str) -> TransportFailure:
        return cls(kind="network", message=f"Network error: {detail}")

    @classmethod
    def http_status(cls, status_code: int, reason: str = "") -> TransportFailure:
        message = f"HTTP error: {status_code}" + (f" {reason}" if reason else "")
        return cls(kind="http_status", message=message, status_code=status_code)

    @classmethod
    def protocol_violation(cls, detail: str) -> TransportFailure:
        return cls(kind="protocol_violation", message=detail)

    def describe(self) -> str:
        """Return a message suitable for showing to an end user."""
        if self.kind == "timeout":
            return "Connection timeout: The MCP server took too long to respond."
        if self.kind == "network":
            return f"Unable to reach the MCP server ({self.message})."
        if self.kind == "http_status":
            hints = {
                400: "Bad Request: The MCP server rejected the request.",
                401: "Unauthorized: The MCP server requires valid credentials.",
                404: "Not Found: The MCP server endpoint was not found.",
                500: "Server Error: The MCP server encountered an internal error.",
            }
            return hints.get(self.status_code or 0, self.message)
        return f"Protocol violation: {self.message}"


class RpcFailure(BaseModel):
    """A JSON-RPC ``error`` object, carried verbatim from the server."""

    kind: Literal["rpc"] = "rpc"
    code: int
    message: str
    data: Any = None

    def describe(self) -> str:
        return f"MCP Error: {self.message} (Code: {self.code})"


class MalformedArguments(BaseModel):
    """A function call's ``arguments`` string was not a JSON object."""

    kind: Literal["malformed_arguments"] = "malformed_arguments"
    tool_name: str
    message: str

    def describe(self) -> str:
        return f"Malformed arguments for {self.tool_name}: {self.message}"


Failure = TransportFailure | RpcFailure
