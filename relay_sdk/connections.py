"""Shared socket connections, one per base URL.

Many logical subscriptions are multiplexed over a single physical
:class:`EventSocket` per URL. Registrations live until the owning client is closed;
nothing here closes or recreates a connection.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any

from .transport.socket import EventSocket, SocketOptions

_LOGGER = logging.getLogger(__name__)

SocketFactory = Callable[[str, SocketOptions | None], EventSocket]


def is_ack_handle(value: Any) -> bool:
    """Return True when ``value`` satisfies the transport's ack contract.

    An ack handle carries ``is_ack = True`` and a callable ``send_ack``.
    Anything else is payload.
    """
    return getattr(value, "is_ack", False) is True and callable(
        getattr(value, "send_ack", None)
    )


class SocketHandler:
    """Subscription interface over one :class:`EventSocket`.

    Listeners registered here receive plain positional payload arguments; a
    trailing ack handle appended by the transport is stripped first.
    """

    def __init__(self, socket: EventSocket) -> None:
        self.socket = socket

    def on(self, event: str, callback: Callable[..., Any]) -> Callable[[], None]:
        """Register ``callback`` for ``event``.

        Returns:
            A function that detaches this registration.
        """

        def listener(*args: Any) -> None:
            if args and is_ack_handle(args[-1]):
                args = args[:-1]
            callback(*args)

        self.socket.on(event, listener)
        _LOGGER.debug("Subscribed to %s on %s", event, self.socket.url)

        def detach() -> None:
            self.socket.off(event, listener)
            _LOGGER.debug("Unsubscribed from %s on %s", event, self.socket.url)

        return detach

    def emit(self, event: str, *args: Any, **kwargs: Any) -> None:
        self.socket.emit(event, *args, **kwargs)


class SocketConnections:
    """Registry mapping a URL to its single :class:`SocketHandler`."""

    def __init__(self, socket_factory: SocketFactory = EventSocket) -> None:
        self._socket_factory = socket_factory
        self._handlers: dict[str, SocketHandler] = {}
        # Guards check-then-create when callers use threads
        self._lock = threading.Lock()

    @property
    def handlers(self) -> Mapping[str, SocketHandler]:
        return MappingProxyType(self._handlers)

    def get_handler(
        self, url: str, options: SocketOptions | None = None
    ) -> SocketHandler:
        """Return the handler for ``url``, creating and connecting it once.

        ``options`` only apply when this call creates the connection.
        """
        with self._lock:
            handler = self._handlers.get(url)
            if handler is None:
                socket = self._socket_factory(url, options)
                _LOGGER.debug("Opening socket connection to %s", url)
                # Register only once connect() has scheduled the connection
                socket.connect()
                handler = SocketHandler(socket)
                self._handlers[url] = handler
        return handler

    def clear(self) -> list[SocketHandler]:
        """Forget every registration and return the removed handlers."""
        with self._lock:
            handlers = list(self._handlers.values())
            self._handlers.clear()
        return handlers
