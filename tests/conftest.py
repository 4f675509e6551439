"""Shared fixtures: a scripted MCP server behind ``httpx.MockTransport``."""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from typing import Any

import httpx
import pytest

from mcplink.config import ClientConfig

SERVER_URL = "http://mcp.test/mcp"


@dataclass
class _Reply:
    result: dict[str, Any] | None = None
    error: dict[str, Any] | None = None
    status: int = 200
    headers: dict[str, str] = field(default_factory=dict)
    sse: bool = False
    body: bytes | None = None
    content_type: str | None = None
    delay: float = 0.0

    def build(self, request_id: Any) -> httpx.Response:
        headers = dict(self.headers)
        if self.body is not None:
            headers.setdefault("content-type", self.content_type or "application/json")
            return httpx.Response(self.status, headers=headers, content=self.body)
        if self.result is None and self.error is None:
            return httpx.Response(self.status, headers=headers)

        envelope: dict[str, Any] = {"jsonrpc": "2.0", "id": request_id}
        if self.error is not None:
            envelope["error"] = self.error
        else:
            envelope["result"] = self.result
        if self.sse:
            headers["content-type"] = "text/event-stream"
            text = f": keep-alive\n\nevent: message\ndata: {json.dumps(envelope)}\n\n"
            return httpx.Response(self.status, headers=headers, content=text.encode())
        headers["content-type"] = self.content_type or "application/json"
        return httpx.Response(self.status, headers=headers, content=json.dumps(envelope).encode())


_DEFAULTS = {
    "initialize": _Reply(result={}),
    "notifications/initialized": _Reply(status=202),
    "DELETE": _Reply(status=200),
}


class FakeMCPServer:
    """Replies to JSON-RPC methods from per-method queues.

    ``on(method, ...)`` queues one reply; unqueued methods fall back to a
    default (``initialize`` → ``{}``, notification → 202, DELETE → 200,
    anything else → ``Method not found``).
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.payloads: list[dict[str, Any]] = []
        self._queues: dict[str, list[_Reply]] = {}

    def on(self, method: str, **reply: Any) -> FakeMCPServer:
        self._queues.setdefault(method, []).append(_Reply(**reply))
        return self

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    def requests_for(self, method: str) -> list[httpx.Request]:
        matched: list[httpx.Request] = []
        for request in self.requests:
            if request.method == "DELETE":
                if method == "DELETE":
                    matched.append(request)
            elif json.loads(request.content).get("method") == method:
                matched.append(request)
        return matched

    async def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        request_id: Any = None
        if request.method == "DELETE":
            key = "DELETE"
        else:
            payload = json.loads(request.content)
            self.payloads.append(payload)
            key = payload["method"]
            request_id = payload.get("id")

        queue = self._queues.get(key)
        if queue:
            reply = queue.pop(0)
        else:
            reply = _DEFAULTS.get(key, _Reply(error={"code": -32601, "message": "Method not found"}))

        if reply.delay:
            await asyncio.sleep(reply.delay)
        return reply.build(request_id)


@pytest.fixture
def server() -> FakeMCPServer:
    return FakeMCPServer()


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig(url=SERVER_URL, timeout=5.0)
