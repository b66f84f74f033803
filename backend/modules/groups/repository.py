"""
Groups repository.

Encapsulates document access for:
- groups         (generated id)
- group_parents  (id: "{group_id}:{parent_user_id}")
"""

from typing import Any, Optional

from shared.documents import SERVER_TIMESTAMP, DocumentSnapshot
from shared.repository import BaseRepository, composite_id

from .models import DEFAULT_GROUP_COLOR, Group, GroupMembership


class GroupRepository(BaseRepository[Group]):
    """Repository for groups and their parents."""

    collection = "groups"
    parents_collection = "group_parents"

    # -------------------------------------------------------------------------
    # Groups
    # -------------------------------------------------------------------------

    async def get(self, group_id: str) -> Optional[Group]:
        doc = await self._get_doc(group_id)
        return self._map_to_group(doc) if doc else None

    async def list_for_owner(self, owner_uid: str, org_id: str) -> list[Group]:
        docs = await self._find(
            self._eq("owner_uid", owner_uid),
            self._eq("org_id", org_id),
            order_by="created_at",
            descending=True,
        )
        return [self._map_to_group(doc) for doc in docs]

    async def find_by_name(self, owner_uid: str, org_id: str, name: str) -> Optional[Group]:
        docs = await self._find(
            self._eq("owner_uid", owner_uid),
            self._eq("org_id", org_id),
            self._eq("name", name),
            limit=1,
        )
        return self._map_to_group(docs[0]) if docs else None

    async def create(
        self,
        owner_uid: str,
        org_id: str,
        name: str,
        description: Optional[str],
        color: Optional[str],
    ) -> Group:
        data = {
            "owner_uid": owner_uid,
            "org_id": org_id,
            "name": name,
            "description": description,
            "color": color or DEFAULT_GROUP_COLOR,
            "created_at": SERVER_TIMESTAMP,
            "updated_at": SERVER_TIMESTAMP,
        }
        group_id = await self._store.add(self.collection, data)
        return await self.get(group_id)

    async def update(self, group_id: str, updates: dict[str, Any]) -> Group:
        await self._store.update(
            self.collection, group_id, {**updates, "updated_at": SERVER_TIMESTAMP}
        )
        return await self.get(group_id)

    async def delete(self, group_id: str) -> None:
        for membership in await self.list_parents(group_id):
            await self.remove_parent(group_id, membership.parent_user_id)
        await self._store.delete(self.collection, group_id)

    # -------------------------------------------------------------------------
    # Group parents
    # -------------------------------------------------------------------------

    async def list_parents(self, group_id: str) -> list[GroupMembership]:
        docs = await self._store.query(
            self.parents_collection, [self._eq("group_id", group_id)], order_by="added_at"
        )
        return [GroupMembership.model_validate(doc.data) for doc in docs]

    async def count_parents(self, group_id: str) -> int:
        return len(await self.list_parents(group_id))

    async def upsert_parent(
        self, group_id: str, parent_user_id: str, child_ids: list[str]
    ) -> GroupMembership:
        doc_id = composite_id(group_id, parent_user_id)
        existing = await self._store.get(self.parents_collection, doc_id)
        data: dict[str, Any] = {
            "group_id": group_id,
            "parent_user_id": parent_user_id,
            "child_ids": child_ids,
            "updated_at": SERVER_TIMESTAMP,
        }
        if existing is None:
            data["added_at"] = SERVER_TIMESTAMP
        await self._store.set(self.parents_collection, doc_id, data, merge=True)
        doc = await self._store.get(self.parents_collection, doc_id)
        return GroupMembership.model_validate(doc.data)

    async def remove_parent(self, group_id: str, parent_user_id: str) -> bool:
        return await self._store.delete(
            self.parents_collection, composite_id(group_id, parent_user_id)
        )

    def _map_to_group(self, doc: DocumentSnapshot) -> Group:
        return Group.model_validate(self._fields(doc))
