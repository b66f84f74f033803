"""
Content library repositories.

Encapsulates document access for:
- content_tasks     (generated id)
- content_roadmaps  (generated id)
"""

from typing import Any, Optional

from shared.documents import SERVER_TIMESTAMP, DocumentSnapshot
from shared.repository import BaseRepository

from .models import ContentRoadmap, ContentTask


class ContentTaskRepository(BaseRepository[ContentTask]):
    """Repository for library tasks."""

    collection = "content_tasks"

    async def get(self, task_id: str) -> Optional[ContentTask]:
        doc = await self._get_doc(task_id)
        return self._map_to_task(doc) if doc else None

    async def list_all(self) -> list[ContentTask]:
        docs = await self._find(order_by="created_at", descending=True)
        return [self._map_to_task(doc) for doc in docs]

    async def create(self, fields: dict[str, Any], created_by: str) -> ContentTask:
        data = {
            **fields,
            "created_by": created_by,
            "created_at": SERVER_TIMESTAMP,
            "updated_at": SERVER_TIMESTAMP,
        }
        return await self.get(await self._store.add(self.collection, data))

    async def update(self, task_id: str, fields: dict[str, Any]) -> ContentTask:
        await self._store.update(
            self.collection, task_id, {**fields, "updated_at": SERVER_TIMESTAMP}
        )
        return await self.get(task_id)

    async def delete(self, task_id: str) -> bool:
        return await self._store.delete(self.collection, task_id)

    def _map_to_task(self, doc: DocumentSnapshot) -> ContentTask:
        return ContentTask.model_validate(self._fields(doc))


class ContentRoadmapRepository(BaseRepository[ContentRoadmap]):
    """Repository for library roadmaps (ordered task lists)."""

    collection = "content_roadmaps"

    async def get(self, roadmap_id: str) -> Optional[ContentRoadmap]:
        doc = await self._get_doc(roadmap_id)
        return self._map_to_roadmap(doc) if doc else None

    async def list_all(self) -> list[ContentRoadmap]:
        docs = await self._find(order_by="created_at", descending=True)
        return [self._map_to_roadmap(doc) for doc in docs]

    async def create(self, fields: dict[str, Any], created_by: str) -> ContentRoadmap:
        data = {
            **fields,
            "created_by": created_by,
            "created_at": SERVER_TIMESTAMP,
            "updated_at": SERVER_TIMESTAMP,
        }
        return await self.get(await self._store.add(self.collection, data))

    async def update(self, roadmap_id: str, fields: dict[str, Any]) -> ContentRoadmap:
        await self._store.update(
            self.collection, roadmap_id, {**fields, "updated_at": SERVER_TIMESTAMP}
        )
        return await self.get(roadmap_id)

    async def delete(self, roadmap_id: str) -> bool:
        return await self._store.delete(self.collection, roadmap_id)

    def _map_to_roadmap(self, doc: DocumentSnapshot) -> ContentRoadmap:
        return ContentRoadmap.model_validate(self._fields(doc))
