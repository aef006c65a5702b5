"""Continuous, cancelable notification streams for streaming calls."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncIterator, Callable
from typing import TYPE_CHECKING, Any

from .errors import RelayClientError

if TYPE_CHECKING:
    from .connections import SocketHandler

_LOGGER = logging.getLogger(__name__)

_CLOSED: Any = object()


def decode_payload(args: tuple[Any, ...]) -> Any:
    """Turn listener arguments into one delivered value.

    Text payloads are parsed as JSON; text that is not JSON is passed through
    unchanged. Several arguments are delivered as a list.
    """
    values = [_decode(arg) for arg in args]
    if not values:
        return None
    if len(values) == 1:
        return values[0]
    return values


def _decode(value: Any) -> Any:
    if not isinstance(value, (str, bytes)):
        return value
    try:
        return json.loads(value)
    except ValueError:
        _LOGGER.debug("Delivered payload is not JSON, passing text through")
        return value


class Subscription:
    """Handle for one observer of a :class:`NotificationStream`."""

    def __init__(
        self, stream: NotificationStream, callback: Callable[[Any], Any]
    ) -> None:
        self._stream = stream
        self._callback = callback

    def unsubscribe(self) -> None:
        self._stream._remove(self._callback)


class NotificationStream:
    """Stream of payloads delivered on one channel.

    The stream listens from the moment it is created. Every observer sees
    every delivery made while it is attached, in transport order. After
    :meth:`cancel` the listener is detached from the shared connection and
    the stream cannot be restarted.

    Usage:
        stream = api.request("POST", "/widgets", use_streaming=True)
        async for widget in stream:
            ...
        stream.cancel()
    """

    def __init__(self, handler: SocketHandler, channel: str) -> None:
        self.channel = channel
        self._observers: list[Callable[[Any], Any]] = []
        self._closers: list[Callable[[], None]] = []
        self._cancelled = False
        self._detach = handler.on(channel, self._publish)

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def subscribe(self, callback: Callable[[Any], Any]) -> Subscription:
        """Attach an observer called with each delivered payload."""
        if self._cancelled:
            raise RelayClientError(f"Stream for {self.channel} was cancelled")
        self._observers.append(callback)
        return Subscription(self, callback)

    def cancel(self) -> None:
        """Detach from the connection and end all iterators."""
        if self._cancelled:
            return
        self._cancelled = True
        self._detach()
        self._observers.clear()
        for close in self._closers:
            close()
        self._closers.clear()

    def __aiter__(self) -> AsyncIterator[Any]:
        if self._cancelled:
            raise RelayClientError(f"Stream for {self.channel} was cancelled")
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[Any]:
        queue: asyncio.Queue[Any] = asyncio.Queue()
        subscription = self.subscribe(queue.put_nowait)

        def close() -> None:
            queue.put_nowait(_CLOSED)

        self._closers.append(close)
        try:
            while True:
                payload = await queue.get()
                if payload is _CLOSED:
                    return
                yield payload
        finally:
            subscription.unsubscribe()
            if close in self._closers:
                self._closers.remove(close)

    def _remove(self, callback: Callable[[Any], Any]) -> None:
        if callback in self._observers:
            self._observers.remove(callback)

    def _publish(self, *args: Any) -> None:
        payload = decode_payload(args)
        for observer in list(self._observers):
            try:
                observer(payload)
            except Exception as err:
                _LOGGER.exception(
                    "Observer error on channel %s: %s", self.channel, err
                )
