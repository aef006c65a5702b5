"""WebSocket client wrapper for the Relay streaming transport."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from websockets.asyncio.client import ClientConnection
from websockets.exceptions import ConnectionClosed

from ..errors import RelayClientError, RelayConnectionError
from .ws import connect_websocket

if TYPE_CHECKING:
    from collections.abc import AsyncIterator


class RelayWsMessageType(Enum):
    """Normalized WebSocket message types."""

    TEXT = "text"
    CLOSED = "closed"
    ERROR = "error"


@dataclass(frozen=True)
class RelayWsMessage:
    """Normalized WebSocket message payload."""

    type: RelayWsMessageType
    data: str | None = None


class RelayWsClient:
    """Wrapper around websockets library for Relay event frames."""

    def __init__(self) -> None:
        self._ws: ClientConnection | None = None

    @property
    def connected(self) -> bool:
        return self._ws is not None

    async def connect(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        ping_interval: int | None = 20,
        timeout: float = 15.0,
    ) -> None:
        """Connect to the backend websocket."""
        self._ws = await connect_websocket(
            url,
            headers=headers,
            ping_interval=ping_interval,
            timeout=timeout,
        )

    async def close(self) -> None:
        """Close the websocket connection."""
        if self._ws is not None:
            await self._ws.close()

    async def send_json(self, payload: dict[str, Any]) -> None:
        """Send a JSON payload to the websocket."""
        if self._ws is None:
            raise RelayConnectionError("WebSocket is not connected")
        await self._ws.send(json.dumps(payload))

    def __aiter__(self) -> AsyncIterator[RelayWsMessage]:
        if self._ws is None:
            raise RelayConnectionError("WebSocket is not connected")
        return self._iter_messages()

    async def _iter_messages(self) -> AsyncIterator[RelayWsMessage]:
        if self._ws is None:
            raise RelayConnectionError("WebSocket is not connected")

        try:
            async for msg in self._ws:
                # Event frames are always text
                if isinstance(msg, bytes):
                    continue
                yield RelayWsMessage(RelayWsMessageType.TEXT, msg)
        except ConnectionClosed:
            yield RelayWsMessage(type=RelayWsMessageType.CLOSED)
        except Exception:
            yield RelayWsMessage(type=RelayWsMessageType.ERROR)
        else:
            # Normal iteration completion means the peer closed gracefully.
            yield RelayWsMessage(type=RelayWsMessageType.CLOSED)

    @staticmethod
    def decode_json(message: RelayWsMessage) -> dict[str, Any]:
        """Decode a TEXT message payload into JSON."""
        if message.type is not RelayWsMessageType.TEXT:
            raise RelayClientError("Only TEXT messages can be decoded")
        if not isinstance(message.data, str):
            raise RelayClientError("Message data is not a string")
        result = json.loads(message.data)
        if not isinstance(result, dict):
            raise RelayClientError("Event frame is not a JSON object")
        return result
