"""Composition root wiring config, session, connections and HTTP together."""

from __future__ import annotations

import logging
from types import TracebackType

import aiohttp

from .auth import RelayAuth
from .config import RelayConfig
from .connections import SocketConnections
from .errors import RelayClientError
from .models import ModelApi
from .storage import MemoryStorage, SessionStore, StorageBackend, YamlFileStorage
from .transport.http import RelayHttpClient
from .users import UserApi

_LOGGER = logging.getLogger(__name__)


class RelayClient:
    """Owns one session and the transports every API instance shares.

    Usage:
        async with RelayClient(RelayConfig("https://api.example.com")) as client:
            await client.users.login({"email": "a@b.c", "password": "pw"})
            widgets = client.api("/widgets")
            print(await widgets.find())
            async for widget in widgets.on_create():
                ...
    """

    def __init__(
        self,
        config: RelayConfig,
        *,
        storage: StorageBackend | None = None,
        session: aiohttp.ClientSession | None = None,
        connections: SocketConnections | None = None,
    ) -> None:
        if storage is None:
            storage = (
                YamlFileStorage(config.storage_path)
                if config.storage_path is not None
                else MemoryStorage()
            )
        self.config = config
        self.auth = RelayAuth(SessionStore(storage))
        self.connections = connections or SocketConnections()

        self._session = session
        self._owns_session = session is None
        self._http: RelayHttpClient | None = None
        self._users: UserApi | None = None

    async def __aenter__(self) -> RelayClient:
        if self._session is None:
            self._session = aiohttp.ClientSession()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    @property
    def http(self) -> RelayHttpClient:
        if self._http is None:
            if self._session is None:
                raise RelayClientError(
                    "RelayClient has no HTTP session; use 'async with' or pass one"
                )
            self._http = RelayHttpClient(
                self._session, timeout=self.config.request_timeout
            )
        return self._http

    @property
    def users(self) -> UserApi:
        if self._users is None:
            self._users = UserApi(
                self.http, self.auth, self.connections, self.config
            )
        return self._users

    def api(self, model_path: str) -> ModelApi:
        """Return an API for the resource collection at ``model_path``."""
        return ModelApi(
            self.http,
            self.auth,
            self.connections,
            self.config,
            model_path=model_path,
        )

    async def close(self) -> None:
        """Close open sockets and the HTTP session if this client created it.

        Closed sockets are dropped from the registry, so a client with an
        injected session opens fresh connections for later streams.
        """
        for handler in self.connections.clear():
            _LOGGER.debug("Closing socket to %s", handler.socket.url)
            await handler.socket.close()
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None
            self._http = None
            self._users = None
