"""Durable key/value storage for session state.

Values are stored as text. An empty string is the absent marker: the store
cannot tell "never set" from "set to empty", and callers treat both as unset.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

import yaml

_LOGGER = logging.getLogger(__name__)

PROPS_PREFIX = "$RelaySDK$"


class StorageBackend(Protocol):
    """Durable string storage consumed by :class:`SessionStore`."""

    def get_string(self, key: str) -> str:
        """Return the stored value, or ``""`` when absent."""

    def set_string(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``."""


class MemoryStorage:
    """Process-local storage. Used for tests and memory-only sessions."""

    def __init__(self, values: dict[str, str] | None = None) -> None:
        self.values: dict[str, str] = dict(values or {})

    def get_string(self, key: str) -> str:
        return self.values.get(key, "")

    def set_string(self, key: str, value: str) -> None:
        self.values[key] = value


class YamlFileStorage:
    """Storage backed by a single YAML mapping on disk.

    Every write rewrites the whole file. The parent directory is created on
    first write.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        with self.path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Session file {self.path} is not a mapping")
        return {str(k): "" if v is None else str(v) for k, v in data.items()}

    def get_string(self, key: str) -> str:
        return self._read().get(key, "")

    def set_string(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, default_flow_style=False)


class SessionStore:
    """Namespaced view over a storage backend that never raises.

    Backend failures are logged and read back as the absent marker.
    """

    def __init__(self, backend: StorageBackend, prefix: str = PROPS_PREFIX) -> None:
        self.backend = backend
        self.prefix = prefix

    def load(self, name: str) -> str:
        """Return the stored value for ``name`` or ``""``."""
        key = self.prefix + name
        try:
            return self.backend.get_string(key)
        except (OSError, ValueError, yaml.YAMLError) as err:
            _LOGGER.warning("Cannot read %s from session storage: %s", key, err)
            return ""

    def save(self, name: str, value: str | None) -> None:
        """Store ``value`` for ``name``; ``None`` is written as ``""``."""
        key = self.prefix + name
        try:
            self.backend.set_string(key, "" if value is None else value)
        except (OSError, ValueError, yaml.YAMLError) as err:
            _LOGGER.warning("Cannot write %s to session storage: %s", key, err)
