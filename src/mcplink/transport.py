"""HttpTransport — Streamable-HTTP exchanges with an MCP server.

Each request is one POST answered by one response body (JSON or SSE).
Failures are returned as :class:`~mcplink.failures.TransportFailure`
values; only misuse (using the transport before :meth:`open`) raises.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

import httpx

from mcplink.codec import ProtocolViolationError, encode, parse_response, select_decoder
from mcplink.failures import TransportFailure
from mcplink.session import redact_session_id
from mcplink.utils.telemetry import (
    ATTR_HTTP_STATUS,
    ATTR_METHOD,
    ATTR_OUTCOME,
    ATTR_REQUEST_ID,
    ATTR_SERVER_URL,
    ATTR_SESSION_ID,
    get_tracer,
)

if TYPE_CHECKING:
    from mcplink.config import ClientConfig
    from mcplink.models import JsonRpcNotification, JsonRpcRequest, JsonRpcResponse
    from mcplink.session import SessionState

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

SESSION_HEADER = "Mcp-Session-Id"
PROTOCOL_VERSION_HEADER = "MCP-Protocol-Version"
ACCEPT = "application/json, text/event-stream"

# Statuses a DELETE may return without it being a failure.  405 means the
# server has no explicit termination.
_TERMINATION_OK = (200, 405)


class HttpTransport:
    """Performs the HTTP side of each JSON-RPC exchange.

    The transport holds no session identity of its own: every call receives
    the :class:`SessionState` to read headers from and to write a rotated
    session id back into.

    Usage::

        transport = HttpTransport(config)
        await transport.open()
        response = await transport.exchange(state, request)
        await transport.close()
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._http_transport = http_transport
        self._client: httpx.AsyncClient | None = None

    @property
    def is_open(self) -> bool:
        return self._client is not None

    async def open(self) -> None:
        """Create the underlying ``httpx.AsyncClient``."""
        if self._client is None:
            # Deadlines are enforced per exchange with asyncio.wait_for.
            self._client = httpx.AsyncClient(transport=self._http_transport, timeout=None)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            msg = "Transport not open"
            raise RuntimeError(msg)
        return self._client

    # ------------------------------------------------------------------
    # Exchanges
    # ------------------------------------------------------------------

    async def exchange(
        self,
        state: SessionState,
        request: JsonRpcRequest,
        *,
        timeout: float | None = None,
    ) -> JsonRpcResponse | TransportFailure:
        """POST *request* and decode the single response it produces."""
        deadline = timeout if timeout is not None else self._config.timeout
        with _tracer.start_as_current_span("mcp.request") as span:
            span.set_attribute(ATTR_SERVER_URL, state.server_url)
            span.set_attribute(ATTR_METHOD, request.method)
            span.set_attribute(ATTR_REQUEST_ID, str(request.id))

            outcome = await self._post(state, encode(request), deadline)
            if isinstance(outcome, TransportFailure):
                span.set_attribute(ATTR_OUTCOME, outcome.kind)
                return outcome

            span.set_attribute(ATTR_HTTP_STATUS, outcome.status_code)
            if state.session_id:
                span.set_attribute(ATTR_SESSION_ID, redact_session_id(state.session_id))

            if not outcome.is_success:
                failure = TransportFailure.http_status(outcome.status_code, outcome.reason_phrase)
                span.set_attribute(ATTR_OUTCOME, failure.kind)
                return failure

            try:
                decoder = select_decoder(outcome.headers.get("content-type", ""))
                response = parse_response(decoder.decode(outcome.content))
            except ProtocolViolationError as exc:
                failure = TransportFailure.protocol_violation(str(exc))
                span.set_attribute(ATTR_OUTCOME, failure.kind)
                return failure

            if response.id is not None and response.id != request.id:
                logger.debug(
                    "Response id %r does not match request id %r for %s",
                    response.id,
                    request.id,
                    request.method,
                )
            span.set_attribute(ATTR_OUTCOME, "ok")
            return response

    async def notify(
        self,
        state: SessionState,
        notification: JsonRpcNotification,
        *,
        timeout: float | None = None,
    ) -> TransportFailure | None:
        """POST *notification*; the server must answer ``202 Accepted``."""
        deadline = timeout if timeout is not None else self._config.timeout
        with _tracer.start_as_current_span("mcp.notify") as span:
            span.set_attribute(ATTR_METHOD, notification.method)
            outcome = await self._post(state, encode(notification), deadline)
            if isinstance(outcome, TransportFailure):
                span.set_attribute(ATTR_OUTCOME, outcome.kind)
                return outcome
            span.set_attribute(ATTR_HTTP_STATUS, outcome.status_code)
            if outcome.status_code != 202:
                failure = TransportFailure.http_status(outcome.status_code, outcome.reason_phrase)
                span.set_attribute(ATTR_OUTCOME, failure.kind)
                return failure
            span.set_attribute(ATTR_OUTCOME, "ok")
            return None

    async def terminate(self, state: SessionState, *, timeout: float | None = None) -> bool:
        """Send a ``DELETE`` ending the server session.

        Returns ``True`` when the server terminated the session or does not
        support explicit termination.  Never raises for network problems.
        """
        deadline = timeout if timeout is not None else self._config.timeout
        try:
            response = await asyncio.wait_for(
                self._http().delete(state.server_url, headers=self._headers(state, body=False)),
                timeout=deadline,
            )
        except TimeoutError:
            logger.warning("Session termination timed out after %ss", deadline)
            return False
        except httpx.HTTPError as exc:
            logger.warning("Failed to terminate session: %s", exc)
            return False

        if response.status_code not in _TERMINATION_OK:
            logger.warning("Session termination returned status: %s", response.status_code)
            return False
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _headers(self, state: SessionState, *, body: bool = True) -> dict[str, str]:
        headers = dict(self._config.headers)
        if body:
            headers["Content-Type"] = "application/json"
            headers["Accept"] = ACCEPT
        headers[PROTOCOL_VERSION_HEADER] = state.protocol_version
        if state.session_id:
            headers[SESSION_HEADER] = state.session_id
        return headers

    async def _post(
        self,
        state: SessionState,
        body: bytes,
        deadline: float,
    ) -> httpx.Response | TransportFailure:
        logger.debug("POST %s (session=%s)", state.server_url, redact_session_id(state.session_id))
        try:
            response = await asyncio.wait_for(
                self._http().post(state.server_url, content=body, headers=self._headers(state)),
                timeout=deadline,
            )
        except (TimeoutError, httpx.TimeoutException):
            return TransportFailure.timeout(deadline)
        except httpx.HTTPError as exc:
            return TransportFailure.network(str(exc) or exc.__class__.__name__)

        # Servers may assign or rotate the session id on any response.
        session_id = response.headers.get(SESSION_HEADER)
        if session_id:
            state.session_id = session_id
        return response
