"""Event-messaging socket: ``connect``, ``emit`` and ``on`` over a WebSocket.

Frames are JSON text objects::

    {"event": "[POST]/widgets", "args": [...]}            # event delivery
    {"event": "[POST]/widgets", "args": [...], "ack": 7}  # delivery wanting a reply
    {"ack": 7, "args": [...]}                              # reply to an ack

A delivery that asks for a reply gets an :class:`AckHandle` appended to its
listener arguments. Frames emitted before the connection is ready are queued
and flushed once it is.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from ..errors import RelayClientError
from .ws_client import RelayWsClient, RelayWsMessage, RelayWsMessageType

_LOGGER = logging.getLogger(__name__)

Listener = Callable[..., Any]


@dataclass(frozen=True)
class SocketOptions:
    """Connect options for :class:`EventSocket`."""

    headers: Mapping[str, str] = field(default_factory=dict)
    ping_interval: int | None = 20
    timeout: float = 15.0


class AckHandle:
    """Reply handle for a delivery that requested an acknowledgement.

    ``is_ack`` and ``send_ack`` form the contract listeners can rely on to
    recognise the handle.
    """

    is_ack = True

    def __init__(self, socket: EventSocket, ack_id: int) -> None:
        self._socket = socket
        self.ack_id = ack_id

    def send_ack(self, *args: Any) -> None:
        """Reply to the backend with ``args``."""
        self._socket.send_frame({"ack": self.ack_id, "args": list(args)})

    def __repr__(self) -> str:
        return f"AckHandle(ack_id={self.ack_id})"


class EventSocket:
    """One physical event connection.

    Usage:
        socket = EventSocket("wss://api.example.com/ws")
        socket.connect()
        socket.on("[POST]/widgets", handler)
        socket.emit("ping", {"ts": 1})
    """

    def __init__(self, url: str, options: SocketOptions | None = None) -> None:
        self.url = url
        self.options = options or SocketOptions()

        self._listeners: dict[str, list[Listener]] = {}
        self._pending_acks: dict[int, Callable[..., Any]] = {}
        self._ack_ids = itertools.count(1)
        self._outbox: asyncio.Queue[dict[str, Any]] = asyncio.Queue()

        self._ws: RelayWsClient | None = None
        self._state = "disconnected"
        self._run_task: asyncio.Task[None] | None = None
        self._writer_task: asyncio.Task[None] | None = None
        self._connected = asyncio.Event()

    @property
    def state(self) -> str:
        """Connection state: disconnected, connecting, connected or failed."""
        return self._state

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def connect(self) -> None:
        """Start connecting in the background. Requires a running loop."""
        if self._run_task is not None:
            return
        self._state = "connecting"
        self._run_task = asyncio.get_running_loop().create_task(self._run())

    async def wait_connected(self, timeout: float | None = None) -> None:
        """Wait until the connection is established."""
        await asyncio.wait_for(self._connected.wait(), timeout=timeout)

    def on(self, event: str, listener: Listener) -> None:
        """Register ``listener`` for ``event``."""
        self._listeners.setdefault(event, []).append(listener)

    def off(self, event: str, listener: Listener) -> None:
        """Remove one registration of ``listener`` for ``event``."""
        listeners = self._listeners.get(event)
        if not listeners or listener not in listeners:
            return
        listeners.remove(listener)
        if not listeners:
            del self._listeners[event]

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, ()))

    def emit(
        self,
        event: str,
        *args: Any,
        callback: Callable[..., Any] | None = None,
    ) -> None:
        """Send ``event`` with ``args``; ``callback`` receives the backend ack."""
        frame: dict[str, Any] = {"event": event, "args": list(args)}
        if callback is not None:
            ack_id = next(self._ack_ids)
            self._pending_acks[ack_id] = callback
            frame["ack"] = ack_id
        self.send_frame(frame)

    def send_frame(self, frame: dict[str, Any]) -> None:
        """Queue a raw frame for sending."""
        self._outbox.put_nowait(frame)

    async def close(self) -> None:
        """Stop the connection and its background tasks."""
        for task in (self._writer_task, self._run_task):
            if task is not None:
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass
        self._writer_task = None
        self._run_task = None
        if self._ws is not None:
            await self._ws.close()
            self._ws = None
        self._connected.clear()
        self._state = "disconnected"

    # -------------------------------------------------------------------------
    # Internal: connection and dispatch
    # -------------------------------------------------------------------------

    async def _run(self) -> None:
        ws_client = RelayWsClient()
        try:
            await ws_client.connect(
                self.url,
                headers=self.options.headers,
                ping_interval=self.options.ping_interval,
                timeout=self.options.timeout,
            )
        except RelayClientError as err:
            _LOGGER.warning("Socket connection to %s failed: %s", self.url, err)
            self._state = "failed"
            return

        self._ws = ws_client
        self._state = "connected"
        self._connected.set()
        _LOGGER.info("Socket connected to %s", self.url)
        self._writer_task = asyncio.create_task(self._write_loop())

        try:
            async for msg in ws_client:
                if msg.type is RelayWsMessageType.TEXT:
                    self._handle_message(msg)
                elif msg.type is RelayWsMessageType.CLOSED:
                    _LOGGER.warning("Socket to %s closed by backend", self.url)
                    break
                else:
                    _LOGGER.warning("Socket to %s reported an error", self.url)
                    break
        finally:
            if self._writer_task is not None:
                self._writer_task.cancel()
            self._connected.clear()
            self._state = "disconnected"

    async def _write_loop(self) -> None:
        while self._ws is not None:
            frame = await self._outbox.get()
            try:
                await self._ws.send_json(frame)
            except RelayClientError as err:
                _LOGGER.warning("Failed to send frame to %s: %s", self.url, err)

    def _handle_message(self, msg: RelayWsMessage) -> None:
        try:
            frame = RelayWsClient.decode_json(msg)
        except (ValueError, RelayClientError) as err:
            _LOGGER.warning("Invalid frame from %s: %s", self.url, err)
            return
        self.dispatch(frame)

    def dispatch(self, frame: dict[str, Any]) -> None:
        """Deliver one decoded frame to its listeners or pending ack."""
        args = list(frame.get("args") or [])
        event = frame.get("event")
        ack_id = frame.get("ack")

        if event is None:
            callback = self._pending_acks.pop(ack_id, None) if ack_id else None
            if callback is not None:
                self._call(callback, args)
            return

        if ack_id is not None:
            args.append(AckHandle(self, ack_id))

        # Copy so listeners may detach themselves during delivery
        for listener in list(self._listeners.get(event, ())):
            self._call(listener, args)

    @staticmethod
    def _call(listener: Listener, args: list[Any]) -> None:
        try:
            listener(*args)
        except Exception as err:
            _LOGGER.exception("Socket listener error: %s", err)
