"""Pytest configuration and fixtures for relay_sdk tests."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from relay_sdk import (
    MemoryStorage,
    RelayAuth,
    RelayConfig,
    SessionStore,
    SocketConnections,
)
from relay_sdk.transport.http import RelayHttpClient
from relay_sdk.transport.socket import EventSocket, SocketOptions


@pytest.fixture
def mock_session() -> MagicMock:
    """Create a mock aiohttp ClientSession."""
    return MagicMock(spec=aiohttp.ClientSession)


@pytest.fixture
def config() -> RelayConfig:
    return RelayConfig(base_url="http://api.test")


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def auth(storage: MemoryStorage) -> RelayAuth:
    return RelayAuth(SessionStore(storage))


@pytest.fixture
def http_client(mock_session: MagicMock) -> RelayHttpClient:
    return RelayHttpClient(mock_session, timeout=5)


class FakeSocket(EventSocket):
    """EventSocket that never opens a network connection."""

    instances: list[FakeSocket] = []

    def __init__(self, url: str, options: SocketOptions | None = None) -> None:
        super().__init__(url, options)
        self.connect_calls = 0
        self.sent: list[dict[str, Any]] = []
        FakeSocket.instances.append(self)

    def connect(self) -> None:
        self.connect_calls += 1

    def send_frame(self, frame: dict[str, Any]) -> None:
        self.sent.append(frame)


@pytest.fixture
def connections() -> SocketConnections:
    FakeSocket.instances.clear()
    return SocketConnections(socket_factory=FakeSocket)


def create_mock_response(
    status: int = 200,
    json_data: Any = None,
    text_data: str | None = None,
) -> AsyncMock:
    """Create a configured mock response.

    Args:
        status: HTTP status code
        json_data: Data served as the JSON text body
        text_data: Raw text body (wins over json_data)

    Returns:
        Configured AsyncMock response
    """
    response = AsyncMock()
    response.status = status

    if text_data is None:
        text_data = "" if json_data is None else json.dumps(json_data)
    response.text.return_value = text_data

    response.__aenter__.return_value = response
    response.__aexit__.return_value = None

    return response
