"""Transport layer for Relay clients.

This package contains all IO, wire framing, and network handling.

Components:
- http: HTTP client for REST calls
- ws: WebSocket connection management
- ws_client: WebSocket message iteration
- socket: Event-messaging socket (connect, emit, on) over the WebSocket
"""

from .http import RelayHttpClient
from .socket import AckHandle, EventSocket, SocketOptions
from .ws import connect_websocket
from .ws_client import RelayWsClient, RelayWsMessage, RelayWsMessageType

__all__ = [
    "AckHandle",
    "EventSocket",
    "RelayHttpClient",
    "RelayWsClient",
    "RelayWsMessage",
    "RelayWsMessageType",
    "SocketOptions",
    "connect_websocket",
]
