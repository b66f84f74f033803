"""
Parent contacts repository.

Contacts are plain address-book entries of an organization, kept in the
``parent_contacts`` collection with a generated id.
"""

from typing import Any, Optional

from shared.documents import SERVER_TIMESTAMP, DocumentSnapshot
from shared.repository import BaseRepository

from .models import ParentContact


class ParentContactRepository(BaseRepository[ParentContact]):
    """Repository for parent contacts."""

    collection = "parent_contacts"

    async def get(self, org_id: str, contact_id: str) -> Optional[ParentContact]:
        doc = await self._get_doc(contact_id)
        if doc is None or doc.get("org_id") != org_id:
            return None
        return self._map_to_contact(doc)

    async def list_for_org(self, org_id: str) -> list[ParentContact]:
        docs = await self._find(self._eq("org_id", org_id), order_by="created_at")
        return [self._map_to_contact(doc) for doc in docs]

    async def create(
        self,
        org_id: str,
        name: str,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        linked_children: Optional[list[str]] = None,
    ) -> ParentContact:
        data = {
            "org_id": org_id,
            "name": name,
            "email": email,
            "phone": phone,
            "linked_children": linked_children or [],
            "created_at": SERVER_TIMESTAMP,
            "updated_at": SERVER_TIMESTAMP,
        }
        contact_id = await self._store.add(self.collection, data)
        return await self.get(org_id, contact_id)

    async def update(self, org_id: str, contact_id: str, updates: dict[str, Any]) -> ParentContact:
        await self._store.update(
            self.collection, contact_id, {**updates, "updated_at": SERVER_TIMESTAMP}
        )
        return await self.get(org_id, contact_id)

    async def delete(self, contact_id: str) -> bool:
        return await self._store.delete(self.collection, contact_id)

    def _map_to_contact(self, doc: DocumentSnapshot) -> ParentContact:
        return ParentContact.model_validate(self._fields(doc))
