"""User API: login, logout and the current user.

Login and logout update the session as a side effect. The update is a
separate done-callback on the call's future, so it never changes the value
or error the caller receives. Done-callbacks run in registration order, so
the session is updated before the awaiting caller resumes.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from .auth import RelayAuth
from .config import RelayConfig
from .connections import SocketConnections
from .errors import RelayClientError
from .models import ModelApi
from .transport.http import RelayHttpClient

_LOGGER = logging.getLogger(__name__)


class UserApi(ModelApi):
    """Operations on the backend's user model."""

    def __init__(
        self,
        http: RelayHttpClient,
        auth: RelayAuth,
        connections: SocketConnections,
        config: RelayConfig,
        *,
        model_path: str = "/Users",
    ) -> None:
        super().__init__(http, auth, connections, config, model_path=model_path)

    async def login(
        self, credentials: dict[str, Any], include: str | None = "user"
    ) -> Any:
        """Log in and store the returned token.

        On success the session holds the token, user id and profile, is
        marked remember-me and is persisted.

        Args:
            credentials: e.g. ``{"email": ..., "password": ...}``.
            include: Relation to embed in the response, ``user`` by default.

        Returns:
            The backend's access token record.
        """
        future = asyncio.ensure_future(
            self.request(
                "POST",
                f"{self.model_path}/login",
                query_params={"include": include},
                body=credentials,
            )
        )
        future.add_done_callback(self._on_login_done)
        return await future

    async def logout(self) -> Any:
        """Log out; on success the session is cleared in memory and storage.

        The backend call is made even when no user is logged in.
        """
        future = asyncio.ensure_future(
            self.request("POST", f"{self.model_path}/logout")
        )
        future.add_done_callback(self._on_logout_done)
        return await future

    async def get_current(self, filter: dict[str, Any] | None = None) -> Any:
        """Fetch the logged-in user and refresh the cached profile.

        The refreshed profile is not persisted.

        Raises:
            RelayClientError: If no user is logged in.
        """
        user_id = self._auth.get_current_user_id()
        if user_id is None:
            raise RelayClientError("No user is logged in")
        user = await self.find_by_id(user_id, filter)
        self._auth.set_current_user_data(user)
        return user

    def get_cached_current(self) -> dict[str, Any] | None:
        return self._auth.get_current_user_data()

    def get_current_id(self) -> str | None:
        return self._auth.get_current_user_id()

    def get_current_token(self) -> str | None:
        return self._auth.get_access_token_id()

    def is_authenticated(self) -> bool:
        return bool(self._auth.get_current_user_id())

    # -------------------------------------------------------------------------
    # Internal: session side effects
    # -------------------------------------------------------------------------

    def _on_login_done(self, future: asyncio.Future[Any]) -> None:
        if future.cancelled() or future.exception() is not None:
            return
        token = future.result()
        if (
            not isinstance(token, dict)
            or not token.get("id")
            or token.get("userId") in (None, "")
        ):
            _LOGGER.warning("Login response carried no access token or user id")
            return

        user_id = str(token["userId"])
        self._auth.set_user(str(token["id"]), user_id, token.get("user"))
        self._auth.set_remember_me(True)
        self._auth.save()
        _LOGGER.info("Logged in as user %s", user_id)

    def _on_logout_done(self, future: asyncio.Future[Any]) -> None:
        if future.cancelled() or future.exception() is not None:
            return
        self._auth.clear_user()
        self._auth.clear_storage()
        _LOGGER.info("Logged out")
