"""Resource API built on :class:`BaseApi`.

Each operation comes as a REST method and, where the backend publishes
changes, an ``on_*`` streaming twin that shares its URL and method.
"""

from __future__ import annotations

from typing import Any

from .auth import RelayAuth
from .config import RelayConfig
from .connections import SocketConnections
from .dispatcher import BaseApi
from .stream import NotificationStream
from .transport.http import RelayHttpClient


class ModelApi(BaseApi):
    """CRUD operations for one remote resource collection.

    Usage:
        widgets = ModelApi(http, auth, connections, config, model_path="/widgets")
        widget = await widgets.find_by_id("7")
        created = widgets.on_create()
    """

    def __init__(
        self,
        http: RelayHttpClient,
        auth: RelayAuth,
        connections: SocketConnections,
        config: RelayConfig,
        *,
        model_path: str,
    ) -> None:
        super().__init__(http, auth, connections, config)
        self.model_path = "/" + model_path.strip("/")

    async def find(self, filter: dict[str, Any] | None = None) -> Any:
        return await self.request(
            "GET", self.model_path, query_params={"filter": filter}
        )

    async def find_by_id(
        self, id: Any, filter: dict[str, Any] | None = None
    ) -> Any:
        return await self.request(
            "GET",
            f"{self.model_path}/:id",
            path_params={"id": id},
            query_params={"filter": filter},
        )

    async def count(self, where: dict[str, Any] | None = None) -> Any:
        return await self.request(
            "GET", f"{self.model_path}/count", query_params={"where": where}
        )

    async def create(self, data: dict[str, Any]) -> Any:
        return await self.request("POST", self.model_path, body=data)

    async def patch_attributes(self, id: Any, data: dict[str, Any]) -> Any:
        return await self.request(
            "PATCH", f"{self.model_path}/:id", path_params={"id": id}, body=data
        )

    async def delete_by_id(self, id: Any) -> Any:
        return await self.request(
            "DELETE", f"{self.model_path}/:id", path_params={"id": id}
        )

    def on_create(self) -> NotificationStream:
        """Stream of records created on this collection."""
        return self.request("POST", self.model_path, use_streaming=True)

    def on_patch_attributes(self, id: Any) -> NotificationStream:
        """Stream of updates to one record."""
        return self.request(
            "PATCH",
            f"{self.model_path}/:id",
            path_params={"id": id},
            use_streaming=True,
        )

    def on_delete_by_id(self, id: Any) -> NotificationStream:
        return self.request(
            "DELETE",
            f"{self.model_path}/:id",
            path_params={"id": id},
            use_streaming=True,
        )
