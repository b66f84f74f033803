"""
Children repositories.

Encapsulates document access for child data:
- children        (id: child id)
- child_progress  (id: child id)
- child_tasks     (field child_id)
- child_feedback  (field child_id)
- notes           (field child_id)
"""

from datetime import datetime
from typing import Optional

from shared.documents import SERVER_TIMESTAMP, DocumentSnapshot, Where
from shared.repository import BaseRepository

from .models import (
    ChildFeedback,
    ChildProgress,
    ChildRecord,
    ChildTask,
    Note,
)


class ChildRepository(BaseRepository[ChildRecord]):
    """Repository for child profiles and their activity."""

    collection = "children"
    progress_collection = "child_progress"
    tasks_collection = "child_tasks"
    feedback_collection = "child_feedback"

    # -------------------------------------------------------------------------
    # Child profiles
    # -------------------------------------------------------------------------

    async def get(self, child_id: str) -> Optional[ChildRecord]:
        doc = await self._get_doc(child_id)
        return self._map_to_child(doc) if doc else None

    async def set_organization(self, child_id: str, org_id: str) -> bool:
        """
        Point an existing child at an organization.

        Returns:
            False if the child does not exist (nothing is written).
        """
        if await self._get_doc(child_id) is None:
            return False
        await self._store.update(
            self.collection,
            child_id,
            {"organization_id": org_id, "updated_at": SERVER_TIMESTAMP},
        )
        return True

    # -------------------------------------------------------------------------
    # Progress and activity
    # -------------------------------------------------------------------------

    async def get_progress(self, child_id: str) -> Optional[ChildProgress]:
        doc = await self._store.get(self.progress_collection, child_id)
        return ChildProgress.model_validate(doc.data) if doc else None

    async def count_completed_tasks(self, child_id: str) -> int:
        docs = await self._store.query(
            self.tasks_collection,
            [self._eq("child_id", child_id), self._eq("status", "completed")],
        )
        return len(docs)

    async def recent_tasks(self, child_id: str, limit: int = 10) -> list[ChildTask]:
        docs = await self._store.query(
            self.tasks_collection,
            [self._eq("child_id", child_id)],
            order_by="updated_at",
            descending=True,
            limit=limit,
        )
        return [ChildTask.model_validate(self._fields(doc)) for doc in docs]

    async def tasks_since(self, child_id: str, since: datetime) -> list[ChildTask]:
        docs = await self._store.query(
            self.tasks_collection,
            [self._eq("child_id", child_id), Where(field="updated_at", op=">=", value=since)],
            order_by="updated_at",
            descending=True,
        )
        return [ChildTask.model_validate(self._fields(doc)) for doc in docs]

    async def feedback_since(self, child_id: str, since: datetime) -> list[ChildFeedback]:
        docs = await self._store.query(
            self.feedback_collection,
            [self._eq("child_id", child_id), Where(field="timestamp", op=">=", value=since)],
            order_by="timestamp",
        )
        return [ChildFeedback.model_validate(self._fields(doc)) for doc in docs]

    def _map_to_child(self, doc: DocumentSnapshot) -> ChildRecord:
        data = self._fields(doc)
        # Older family app builds wrote childName / childAge
        data.setdefault("name", data.get("child_name") or "Unknown")
        data.setdefault("age", data.get("child_age"))
        return ChildRecord.model_validate(data)


class NoteRepository(BaseRepository[Note]):
    """Repository for specialist notes."""

    collection = "notes"

    async def create(
        self,
        child_id: str,
        org_id: str,
        specialist_id: str,
        specialist_name: str,
        text: str,
        tags: list[str],
        visible_to_parent: bool = True,
    ) -> Note:
        data = {
            "child_id": child_id,
            "org_id": org_id,
            "specialist_id": specialist_id,
            "specialist_name": specialist_name,
            "text": text,
            "tags": tags,
            "visible_to_parent": visible_to_parent,
            "created_at": SERVER_TIMESTAMP,
            "updated_at": SERVER_TIMESTAMP,
        }
        note_id = await self._store.add(self.collection, data)
        doc = await self._get_doc(note_id)
        return Note.model_validate(self._fields(doc))

    async def list_for_child(self, child_id: str, org_id: str) -> list[Note]:
        """Notes written about the child within one organization, newest first."""
        docs = await self._find(
            self._eq("child_id", child_id),
            self._eq("org_id", org_id),
            order_by="created_at",
            descending=True,
        )
        return [Note.model_validate(self._fields(doc)) for doc in docs]
