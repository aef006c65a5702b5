"""Client request layer for resource-oriented Relay backends.

One call signature reaches the backend over REST or over a shared
publish/subscribe socket, with one session model for both.
"""

__version__ = "0.1.0"

from .auth import RelayAuth
from .client import RelayClient
from .config import RelayConfig, load_config
from .connections import SocketConnections, SocketHandler, is_ack_handle
from .dispatcher import BaseApi
from .error_handler import translate_error
from .errors import (
    ConfigLoadError,
    RelayClientError,
    RelayConnectionError,
    RelayHandshakeError,
    RelayRemoteError,
    RelayTimeout,
)
from .models import ModelApi
from .protocol import channel_name, resolve_path, serialize_query
from .storage import MemoryStorage, SessionStore, YamlFileStorage
from .stream import NotificationStream, Subscription
from .users import UserApi

__all__ = [
    "BaseApi",
    "ConfigLoadError",
    "MemoryStorage",
    "ModelApi",
    "NotificationStream",
    "RelayAuth",
    "RelayClient",
    "RelayClientError",
    "RelayConfig",
    "RelayConnectionError",
    "RelayHandshakeError",
    "RelayRemoteError",
    "RelayTimeout",
    "SessionStore",
    "SocketConnections",
    "SocketHandler",
    "Subscription",
    "UserApi",
    "YamlFileStorage",
    "__version__",
    "channel_name",
    "is_ack_handle",
    "load_config",
    "resolve_path",
    "serialize_query",
    "translate_error",
]
