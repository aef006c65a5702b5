"""Session state for the logged-in identity.

``RelayAuth`` is the single source of truth for who is logged in. It is an
explicit instance owned by the composition root and injected into every API,
so isolated sessions can coexist in one process.

Persistence is opt-in per call site: mutators only touch memory, and callers
commit with :meth:`RelayAuth.save`. The cached user profile is never
persisted.
"""

from __future__ import annotations

import logging
from typing import Any

from .storage import SessionStore

_LOGGER = logging.getLogger(__name__)

ACCESS_TOKEN_ID = "accessTokenId"
CURRENT_USER_ID = "currentUserId"
REMEMBER_ME = "rememberMe"

PERSISTED_KEYS: tuple[str, ...] = (ACCESS_TOKEN_ID, CURRENT_USER_ID, REMEMBER_ME)


class RelayAuth:
    """In-memory session backed by a :class:`SessionStore`.

    Usage:
        auth = RelayAuth(SessionStore(MemoryStorage()))
        auth.set_user("token", "42", {"email": "a@b.c"})
        auth.set_remember_me(True)
        auth.save()
    """

    def __init__(self, store: SessionStore) -> None:
        self._store = store
        self._access_token_id: str | None = None
        self._current_user_id: str | None = None
        self._remember_me = False
        self._current_user_data: dict[str, Any] | None = None
        self.load_from_storage()

    def load_from_storage(self) -> None:
        """Restore token, user id and remember flag from the store."""
        self._access_token_id = self._store.load(ACCESS_TOKEN_ID) or None
        self._current_user_id = self._store.load(CURRENT_USER_ID) or None
        self._remember_me = self._store.load(REMEMBER_ME) == "true"
        _LOGGER.debug(
            "Session loaded (authenticated=%s)", self._access_token_id is not None
        )

    def set_user(
        self,
        access_token_id: str | None,
        user_id: str | None,
        user_data: dict[str, Any] | None = None,
    ) -> None:
        """Set the identity fields together. Does not persist."""
        self._access_token_id = access_token_id
        self._current_user_id = user_id
        self._current_user_data = user_data

    def set_remember_me(self, value: bool) -> None:
        self._remember_me = value

    def set_current_user_data(self, data: dict[str, Any] | None) -> None:
        """Replace the cached profile. Does not persist."""
        self._current_user_data = data

    def clear_user(self) -> None:
        """Clear the identity fields in memory only."""
        self._access_token_id = None
        self._current_user_id = None
        self._current_user_data = None

    def save(self) -> None:
        """Write token, user id and remember flag to the store."""
        self._store.save(ACCESS_TOKEN_ID, self._access_token_id)
        self._store.save(CURRENT_USER_ID, self._current_user_id)
        self._store.save(REMEMBER_ME, "true" if self._remember_me else "false")

    def clear_storage(self) -> None:
        """Write the absent marker for every persisted key."""
        for name in PERSISTED_KEYS:
            self._store.save(name, "")

    def get_access_token_id(self) -> str | None:
        return self._access_token_id

    def get_current_user_id(self) -> str | None:
        return self._current_user_id

    def get_current_user_data(self) -> dict[str, Any] | None:
        return self._current_user_data

    def get_remember_me(self) -> bool:
        return self._remember_me
