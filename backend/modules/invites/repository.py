"""
Invite repository.

All invite flavors live in the ``invites`` collection, keyed by code.
"""

from typing import Any, Optional

from shared.documents import SERVER_TIMESTAMP, DocumentSnapshot
from shared.repository import BaseRepository

from .models import Invite, InviteKind


class InviteRepository(BaseRepository[Invite]):
    """
    Repository for invite codes.

    Creation is create-if-absent, so two issuers can never end up sharing
    a code. Use counting goes through compare_and_set on the version read
    together with the invite.
    """

    collection = "invites"

    async def get(self, code: str) -> Optional[Invite]:
        doc = await self._get_doc(code)
        return self._map_to_invite(doc) if doc else None

    async def get_versioned(self, code: str) -> Optional[tuple[Invite, DocumentSnapshot]]:
        """Invite plus the snapshot needed for a conditional write."""
        doc = await self._get_doc(code)
        if doc is None:
            return None
        return self._map_to_invite(doc), doc

    async def create(self, code: str, data: dict[str, Any]) -> bool:
        """Insert the invite unless the code is taken."""
        payload = {**data, "code": code, "used_count": 0, "is_active": True}
        payload.setdefault("created_at", SERVER_TIMESTAMP)
        return await self._store.create(self.collection, code, payload)

    async def increment_used(self, snapshot: DocumentSnapshot) -> bool:
        """
        Add one use if the invite is unchanged since ``snapshot``.

        Returns:
            False if another write landed first; the caller re-reads and retries.
        """
        used = int(snapshot.get("used_count") or 0)
        return await self._store.compare_and_set(snapshot, {"used_count": used + 1})

    async def deactivate(self, code: str, revoked_by: str) -> None:
        await self._store.update(
            self.collection,
            code,
            {"is_active": False, "revoked_at": SERVER_TIMESTAMP, "revoked_by": revoked_by},
        )

    async def list_for_org(
        self, org_id: str, kind: Optional[InviteKind] = None, limit: Optional[int] = None
    ) -> list[Invite]:
        where = [self._eq("org_id", org_id)]
        if kind is not None:
            where.append(self._eq("kind", kind.value))
        docs = await self._find(*where, order_by="created_at", descending=True, limit=limit)
        return [self._map_to_invite(doc) for doc in docs]

    async def list_by_creator(self, uid: str, limit: int = 50) -> list[Invite]:
        docs = await self._find(
            self._eq("created_by", uid), order_by="created_at", descending=True, limit=limit
        )
        return [self._map_to_invite(doc) for doc in docs]

    def _map_to_invite(self, doc: DocumentSnapshot) -> Invite:
        return Invite.model_validate({**doc.data, "code": doc.id})
