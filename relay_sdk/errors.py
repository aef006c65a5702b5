"""Client error types for Relay backend interactions."""

from __future__ import annotations

from typing import Any

SERVER_ERROR = "Server error"


class RelayClientError(Exception):
    """Base error for Relay client failures."""


class RelayTimeout(RelayClientError):
    """Timeout while communicating with the backend."""


class RelayConnectionError(RelayClientError):
    """Network connection to the backend failed."""


class RelayHandshakeError(RelayClientError):
    """WebSocket handshake failed."""


class RelayRemoteError(RelayClientError):
    """Normalized error value of a failed REST call.

    ``error`` is the backend's ``error`` body field when one was sent,
    otherwise the generic ``"Server error"`` string.
    """

    def __init__(self, error: Any, status: int | None = None) -> None:
        message = error.get("message") if isinstance(error, dict) else None
        super().__init__(str(message or error))
        self.error = error
        self.status = status


class ConfigLoadError(RelayClientError):
    """Client configuration could not be loaded."""
