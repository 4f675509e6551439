"""Per-connection session state owned by one :class:`~mcplink.client.MCPClient`."""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field

DEFAULT_PROTOCOL_VERSION = "2025-06-18"


@dataclass
class SessionState:
    """Session identity plus the request-id counter.

    ``next_request_id`` never awaits, so coroutines sharing one state on an
    event loop always receive distinct, increasing ids.
    """

    server_url: str
    protocol_version: str = DEFAULT_PROTOCOL_VERSION
    session_id: str | None = None
    initialized: bool = False
    _ids: itertools.count[int] = field(default_factory=lambda: itertools.count(1), repr=False)
    _issued: int = field(default=0, repr=False)

    def next_request_id(self) -> int:
        self._issued = next(self._ids)
        return self._issued

    @property
    def request_counter(self) -> int:
        """The most recently issued request id (0 before the first request)."""
        return self._issued

    def reset(self) -> None:
        """Forget the server session; the id counter keeps counting."""
        self.session_id = None
        self.initialized = False


def redact_session_id(session_id: str | None, visible: int = 4) -> str | None:
    """Shorten *session_id* to its first *visible* characters for logs and spans."""
    if session_id is None or len(session_id) <= visible:
        return session_id
    return session_id[:visible] + "..."
