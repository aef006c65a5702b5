"""Client configuration for Relay backends.

Configuration is plain data: a frozen dataclass that can be built in code or
loaded from a YAML file such as::

    base_url: https://api.example.com
    api_version: api
    auth_prefix: ""
    storage_path: ~/.relay/session.yaml
    request_timeout: 30
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit, urlunsplit

import yaml

from .errors import ConfigLoadError


@dataclass(frozen=True)
class RelayConfig:
    """Connection and auth settings shared by both transports.

    Attributes:
        base_url: Backend root, e.g. ``https://api.example.com``.
        api_version: Path segment REST routes live under (default: ``api``).
        auth_prefix: Prepended to the token in the Authorization header.
        storage_path: YAML file the session is persisted to. ``None`` keeps
            the session in memory only.
        request_timeout: Total timeout for one REST call (seconds).
        socket_path: WebSocket endpoint path on the backend.
        ping_interval: WebSocket keepalive ping interval (seconds).
        connect_timeout: WebSocket connect timeout (seconds).
    """

    base_url: str
    api_version: str = "api"
    auth_prefix: str = ""
    storage_path: Path | None = None
    request_timeout: float = 30.0
    socket_path: str = "/ws"
    ping_interval: int | None = 20
    connect_timeout: float = 15.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @property
    def api_root(self) -> str:
        """Root URL REST paths are appended to."""
        if not self.api_version:
            return self.base_url
        return f"{self.base_url}/{self.api_version.strip('/')}"

    def socket_url(self) -> str:
        """Derive the WebSocket URL from ``base_url``."""
        parts = urlsplit(self.base_url)
        scheme = {"https": "wss", "http": "ws"}.get(parts.scheme, parts.scheme)
        path = parts.path.rstrip("/") + self.socket_path
        return urlunsplit((scheme, parts.netloc, path, "", ""))


def _load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML file and return contents."""
    if not path.exists():
        raise ConfigLoadError(f"File not found: {path}")
    try:
        with path.open() as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as err:
        raise ConfigLoadError(f"Invalid YAML in {path}") from err
    if not isinstance(data, dict):
        raise ConfigLoadError(f"Expected a mapping in {path}")
    return data


def load_config(path: Path) -> RelayConfig:
    """Load client configuration from a YAML file.

    Args:
        path: Path to the config file.

    Returns:
        Parsed configuration.

    Raises:
        ConfigLoadError: If the file is missing, malformed or has no base_url.
    """
    data = _load_yaml(path)

    base_url = data.get("base_url")
    if not base_url:
        raise ConfigLoadError(f"base_url is required in {path}")

    storage_path = None
    if raw_storage := data.get("storage_path"):
        storage_path = Path(raw_storage).expanduser()

    return RelayConfig(
        base_url=str(base_url),
        api_version=str(data.get("api_version", "api")),
        auth_prefix=str(data.get("auth_prefix", "")),
        storage_path=storage_path,
        request_timeout=float(data.get("request_timeout", 30.0)),
        socket_path=str(data.get("socket_path", "/ws")),
        ping_interval=data.get("ping_interval", 20),
        connect_timeout=float(data.get("connect_timeout", 15.0)),
    )
