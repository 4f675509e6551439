"""Exception types for client misuse and configuration problems.

Expected protocol failures are *not* raised; they are returned as values
from :mod:`mcplink.failures`.
"""


class MCPLinkError(Exception):
    """Base error for all mcplink exceptions."""


class SessionStateError(MCPLinkError):
    """An operation was attempted in the wrong session lifecycle state."""


class NotInitializedError(SessionStateError):
    """A catalog or invoke call was issued before ``initialize()`` succeeded."""

    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__(f"Session not initialized: call initialize() before {method}")


class ConfigError(MCPLinkError):
    """Raised when a config file fails parsing or validation."""
