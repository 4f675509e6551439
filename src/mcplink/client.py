"""MCPClient — negotiates a session with an MCP server and exposes its tools.

Implements the ``initialize`` handshake, tool discovery (``tools/list``) and
execution (``tools/call``) over an :class:`~mcplink.transport.HttpTransport`.
Expected failures come back as values (see :mod:`mcplink.failures`);
exceptions are reserved for misuse such as calling tools before
``initialize()``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel, ValidationError

from mcplink.bridge import function_call_to_tool_args, tool_result_to_standard, tool_to_function_schema
from mcplink.errors import NotInitializedError, SessionStateError
from mcplink.failures import Failure, MalformedArguments, RpcFailure, TransportFailure
from mcplink.models import (
    ConnectionReport,
    FunctionCall,
    InitializeResult,
    JsonRpcErrorResponse,
    JsonRpcNotification,
    JsonRpcRequest,
    StandardResult,
    Tool,
    ToolCallResult,
    ToolPage,
)
from mcplink.session import SessionState, redact_session_id
from mcplink.transport import HttpTransport
from mcplink.utils.telemetry import ATTR_TOOL_IS_ERROR, ATTR_TOOL_NAME, get_tracer

if TYPE_CHECKING:
    import httpx

    from mcplink.config import ClientConfig

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

_FAILURES = (TransportFailure, RpcFailure)

PREVIEW_TOOL_COUNT = 5

M = TypeVar("M", bound=BaseModel)


class MCPClient:
    """Async context manager holding one logical MCP session.

    Usage::

        config = ClientConfig(url="https://mcp.example.com/mcp")
        async with MCPClient(config) as client:
            await client.initialize()
            page = await client.list_tools()
            result = await client.call_tool("send_email", {"to": "a@b.com"})

    Once initialized, ``list_tools`` and ``call_tool`` may run concurrently.
    ``initialize`` is serialized and may succeed only once per session.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._state = SessionState(server_url=config.url, protocol_version=config.protocol_version)
        self._transport = HttpTransport(config, http_transport=http_transport)
        self._init_lock = asyncio.Lock()

    async def __aenter__(self) -> MCPClient:
        await self._transport.open()
        return self

    async def __aexit__(self, *_: object) -> None:
        try:
            await self.disconnect()
        finally:
            await self._transport.close()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def session_id(self) -> str | None:
        return self._state.session_id

    @property
    def initialized(self) -> bool:
        return self._state.initialized

    # ------------------------------------------------------------------
    # Session negotiation
    # ------------------------------------------------------------------

    async def initialize(self, *, timeout: float | None = None) -> InitializeResult | Failure:
        """Run the ``initialize`` / ``notifications/initialized`` handshake.

        A JSON-RPC error is returned unchanged and leaves the session
        uninitialized; it is never retried here.

        Raises:
            SessionStateError: If the session is already initialized.
        """
        async with self._init_lock:
            if self._state.initialized:
                msg = "Session already initialized"
                raise SessionStateError(msg)

            outcome = await self._request(
                "initialize",
                {
                    "protocolVersion": self._state.protocol_version,
                    "capabilities": {"tools": {"listChanged": False}},
                    "clientInfo": {
                        "name": self._config.client_name,
                        "version": self._config.client_version,
                    },
                },
                timeout=timeout,
            )
            if isinstance(outcome, _FAILURES):
                logger.debug("Initialization with %s failed: %s", self._state.server_url, outcome.message)
                return outcome

            result = _validate(InitializeResult, outcome)
            if isinstance(result, TransportFailure):
                return result

            failure = await self._transport.notify(
                self._state,
                JsonRpcNotification(method="notifications/initialized"),
                timeout=timeout,
            )
            if failure is not None:
                logger.warning("notifications/initialized failed, continuing: %s", failure.message)

            self._state.initialized = True
            logger.info(
                "Initialized MCP session with %s (session=%s, protocol=%s)",
                self._state.server_url,
                redact_session_id(self._state.session_id),
                result.protocol_version,
            )
            return result

    async def disconnect(self) -> None:
        """Best-effort session termination, then drop local session state.

        Waits for an in-flight ``initialize()`` so the session it opens is
        the one terminated.
        """
        async with self._init_lock:
            if self._state.session_id and self._transport.is_open:
                await self._transport.terminate(self._state)
            self._state.reset()

    # ------------------------------------------------------------------
    # Tool catalog
    # ------------------------------------------------------------------

    async def list_tools(
        self,
        cursor: str | None = None,
        *,
        timeout: float | None = None,
    ) -> ToolPage | Failure:
        """Fetch a single page of the server's tool catalog."""
        self._require_initialized("tools/list")
        params = {"cursor": cursor} if cursor else None
        outcome = await self._request("tools/list", params, timeout=timeout)
        if isinstance(outcome, _FAILURES):
            return outcome
        return _validate(ToolPage, outcome)

    async def list_all_tools(self, *, timeout: float | None = None) -> list[Tool] | Failure:
        """Follow ``nextCursor`` until the catalog is exhausted."""
        tools: list[Tool] = []
        seen: set[str] = set()
        cursor: str | None = None
        while True:
            page = await self.list_tools(cursor, timeout=timeout)
            if isinstance(page, _FAILURES):
                return page
            tools.extend(page.tools)
            cursor = page.next_cursor
            if not cursor:
                return tools
            if cursor in seen:
                return TransportFailure.protocol_violation(f"Server repeated pagination cursor {cursor!r}")
            seen.add(cursor)

    async def discover_tools(self, *, timeout: float | None = None) -> list[dict[str, Any]] | Failure:
        """Return the whole catalog as OpenAI-compatible function tools."""
        tools = await self.list_all_tools(timeout=timeout)
        if isinstance(tools, _FAILURES):
            return tools
        return [tool_to_function_schema(tool).to_openai() for tool in tools]

    # ------------------------------------------------------------------
    # Tool invocation
    # ------------------------------------------------------------------

    async def call_tool(
        self,
        name: str,
        arguments: dict[str, Any],
        *,
        timeout: float | None = None,
    ) -> ToolCallResult | Failure:
        """Send ``tools/call``.

        ``is_error`` on the returned result means the tool ran and reported
        failure; an :class:`RpcFailure` means it could not be invoked.
        """
        self._require_initialized("tools/call")
        with _tracer.start_as_current_span("mcp.tools.call") as span:
            span.set_attribute(ATTR_TOOL_NAME, name)
            outcome = await self._request(
                "tools/call",
                {"name": name, "arguments": arguments},
                timeout=timeout,
            )
            if isinstance(outcome, _FAILURES):
                return outcome
            result = _validate(ToolCallResult, outcome)
            if isinstance(result, ToolCallResult):
                span.set_attribute(ATTR_TOOL_IS_ERROR, result.is_error)
            return result

    async def call_function(
        self,
        call: FunctionCall,
        *,
        timeout: float | None = None,
    ) -> StandardResult | MalformedArguments | Failure:
        """Execute a model-emitted function call and flatten the result."""
        args = function_call_to_tool_args(call)
        if isinstance(args, MalformedArguments):
            return args
        result = await self.call_tool(args.name, args.arguments, timeout=timeout)
        if isinstance(result, _FAILURES):
            return result
        return tool_result_to_standard(result)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require_initialized(self, method: str) -> None:
        if not self._state.initialized:
            raise NotInitializedError(method)

    async def _request(
        self,
        method: str,
        params: dict[str, Any] | None,
        *,
        timeout: float | None,
    ) -> dict[str, Any] | Failure:
        request = JsonRpcRequest(id=self._state.next_request_id(), method=method, params=params)
        response = await self._transport.exchange(self._state, request, timeout=timeout)
        if isinstance(response, TransportFailure):
            return response
        if isinstance(response, JsonRpcErrorResponse):
            error = response.error
            return RpcFailure(code=error.code, message=error.message, data=error.data)
        return response.result


def _validate(model: type[M], payload: dict[str, Any]) -> M | TransportFailure:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        return TransportFailure.protocol_violation(f"Malformed {model.__name__}: {exc}")


# ---------------------------------------------------------------------------
# One-shot helpers
# ---------------------------------------------------------------------------


async def probe_server(
    config: ClientConfig,
    *,
    http_transport: httpx.AsyncBaseTransport | None = None,
) -> ConnectionReport:
    """Initialize, list every tool, and disconnect; report what happened."""
    async with MCPClient(config, http_transport=http_transport) as client:
        init = await client.initialize()
        if isinstance(init, _FAILURES):
            return ConnectionReport(success=False, error=init.describe())
        tools = await client.list_all_tools()
        if isinstance(tools, _FAILURES):
            return ConnectionReport(success=False, error=tools.describe())
    logger.info("Connection to %s successful, found %d tools", config.url, len(tools))
    return ConnectionReport(success=True, tool_count=len(tools), tools=tools[:PREVIEW_TOOL_COUNT])


async def run_tool(
    config: ClientConfig,
    name: str,
    arguments: dict[str, Any],
    *,
    http_transport: httpx.AsyncBaseTransport | None = None,
) -> StandardResult:
    """Open a session, call one tool, and return the flattened result."""
    async with MCPClient(config, http_transport=http_transport) as client:
        init = await client.initialize()
        if isinstance(init, _FAILURES):
            return StandardResult(success=False, error=init.describe())
        result = await client.call_tool(name, arguments)
    if isinstance(result, _FAILURES):
        return StandardResult(success=False, error=result.describe())
    return tool_result_to_standard(result)
