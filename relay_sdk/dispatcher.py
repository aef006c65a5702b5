"""Unified request dispatch over the REST and streaming transports.

Every remote call goes through :meth:`BaseApi.request`. It resolves the URL,
attaches the session's auth header and then either performs one HTTP
exchange or subscribes to the call's channel on the shared socket.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Mapping
from typing import Any, Literal, overload

from .auth import RelayAuth
from .config import RelayConfig
from .connections import SocketConnections
from .protocol import (
    build_auth_headers,
    channel_name,
    resolve_path,
    serialize_query,
)
from .stream import NotificationStream
from .transport.http import RelayHttpClient
from .transport.socket import SocketOptions

_LOGGER = logging.getLogger(__name__)


class BaseApi:
    """Dispatch point shared by every API class.

    The session manager, connection registry and HTTP client are injected;
    nothing here is process-global.
    """

    def __init__(
        self,
        http: RelayHttpClient,
        auth: RelayAuth,
        connections: SocketConnections,
        config: RelayConfig,
    ) -> None:
        self._http = http
        self._auth = auth
        self._connections = connections
        self._config = config

    @property
    def auth(self) -> RelayAuth:
        return self._auth

    @overload
    def request(
        self,
        method: str,
        url_template: str,
        path_params: Mapping[str, Any] | None = ...,
        query_params: Mapping[str, Any] | None = ...,
        body: Any = ...,
        use_streaming: Literal[False] = ...,
    ) -> Awaitable[Any]: ...

    @overload
    def request(
        self,
        method: str,
        url_template: str,
        path_params: Mapping[str, Any] | None = ...,
        query_params: Mapping[str, Any] | None = ...,
        body: Any = ...,
        *,
        use_streaming: Literal[True],
    ) -> NotificationStream: ...

    @overload
    def request(
        self,
        method: str,
        url_template: str,
        path_params: Mapping[str, Any] | None = ...,
        query_params: Mapping[str, Any] | None = ...,
        body: Any = ...,
        use_streaming: bool = ...,
    ) -> Awaitable[Any] | NotificationStream: ...

    def request(
        self,
        method: str,
        url_template: str,
        path_params: Mapping[str, Any] | None = None,
        query_params: Mapping[str, Any] | None = None,
        body: Any = None,
        use_streaming: bool = False,
    ) -> Awaitable[Any] | NotificationStream:
        """Issue a remote call over REST or subscribe to it as a stream.

        Args:
            method: HTTP method, e.g. ``GET``.
            url_template: Route relative to the API root, e.g.
                ``/widgets/:id``. Absolute ``http(s)://`` URLs are used as is.
            path_params: Values for the ``:name`` placeholders.
            query_params: Query values; mappings are JSON encoded.
            body: JSON-serializable request body (REST only).
            use_streaming: Subscribe on the socket instead of calling REST.

        Returns:
            An awaitable resolving to the decoded response body, or a
            :class:`NotificationStream` when ``use_streaming`` is set.
            Awaiting a failed call raises ``RelayRemoteError``.
        """
        method = method.upper()
        url = resolve_path(url_template, path_params)
        # Read the token now so the header reflects the session at call time
        headers = build_auth_headers(
            self._auth.get_access_token_id(), prefix=self._config.auth_prefix
        )

        if use_streaming:
            return self._subscribe(method, url, headers)

        return self._http.send(
            method,
            self._absolute_url(url) + serialize_query(query_params),
            headers,
            body,
        )

    def _absolute_url(self, url: str) -> str:
        if url.startswith(("http://", "https://")):
            return url
        return self._config.api_root + url

    def _subscribe(
        self, method: str, url: str, headers: dict[str, str]
    ) -> NotificationStream:
        channel = channel_name(method, url)
        handler = self._connections.get_handler(
            self._config.socket_url(),
            SocketOptions(
                headers=headers,
                ping_interval=self._config.ping_interval,
                timeout=self._config.connect_timeout,
            ),
        )
        _LOGGER.debug("Streaming %s", channel)
        return NotificationStream(handler, channel)
