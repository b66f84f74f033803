"""
Tenancy repositories.

Encapsulates document access for the records every module authorizes
against:
- organizations
- memberships      (id: "{org_id}:{uid}")
- org_children     (id: "{org_id}:{child_id}")
- org_parents      (id: "{org_id}:{uid}")
- specialists      (id: uid)

Composite ids make "at most one record per pair" hold by construction.
These repositories do NOT perform authorization checks.
"""

from typing import Any, Optional

from shared.documents import SERVER_TIMESTAMP, DocumentSnapshot
from shared.repository import BaseRepository, composite_id

from .models import (
    ChildLink,
    Membership,
    MembershipStatus,
    OrgParent,
    Organization,
    OrganizationType,
    Role,
    SpecialistProfile,
)

# Create-or-reactivate rounds before treating the member as already present
MAX_GRANT_ATTEMPTS = 5


class OrganizationRepository(BaseRepository[Organization]):
    """Repository for organizations."""

    collection = "organizations"

    async def get(self, org_id: str) -> Optional[Organization]:
        doc = await self._get_doc(org_id)
        return self._map_to_organization(doc) if doc else None

    async def create(
        self,
        name: str,
        created_by: str,
        country: Optional[str] = None,
        org_type: OrganizationType = OrganizationType.MANAGED,
    ) -> Organization:
        data = {
            "name": name,
            "country": country,
            "created_by": created_by,
            "created_at": SERVER_TIMESTAMP,
            "is_active": True,
            "type": org_type.value,
        }
        org_id = await self._store.add(self.collection, data)
        return await self.get(org_id)

    async def list_by_creator(self, uid: str) -> list[Organization]:
        docs = await self._find(
            self._eq("created_by", uid), order_by="created_at", descending=True
        )
        return [self._map_to_organization(doc) for doc in docs]

    async def find_by_name(self, name: str, created_by: str) -> Optional[Organization]:
        docs = await self._find(
            self._eq("created_by", created_by), self._eq("name", name), limit=1
        )
        return self._map_to_organization(docs[0]) if docs else None

    def _map_to_organization(self, doc: DocumentSnapshot) -> Organization:
        return Organization.model_validate(self._fields(doc))


class MembershipRepository(BaseRepository[Membership]):
    """Repository for organization memberships."""

    collection = "memberships"

    async def get(self, org_id: str, uid: str) -> Optional[Membership]:
        doc = await self._get_doc(composite_id(org_id, uid))
        return self._map_to_membership(doc) if doc else None

    async def upsert(
        self,
        org_id: str,
        uid: str,
        role: Role,
        status: MembershipStatus = MembershipStatus.ACTIVE,
    ) -> Membership:
        """Create or overwrite the membership for (org, user), keeping joined_at."""
        doc_id = composite_id(org_id, uid)
        existing = await self._get_doc(doc_id)
        data: dict[str, Any] = {
            "org_id": org_id,
            "uid": uid,
            "role": role.value,
            "status": status.value,
        }
        if existing is None or not existing.get("joined_at"):
            data["joined_at"] = SERVER_TIMESTAMP
        await self._store.set(self.collection, doc_id, data, merge=True)
        return await self.get(org_id, uid)

    async def grant(
        self, org_id: str, uid: str, role: Role
    ) -> tuple[bool, Optional[dict[str, Any]]]:
        """
        Make (org, user) an active member unless they already are.

        Creation is create-if-absent and reactivation is a conditional
        write, so of several concurrent grants for the same pair exactly
        one reports True.

        Returns:
            (granted, previous) where previous is the record this call
            replaced (None when it created one), for restore().
        """
        doc_id = composite_id(org_id, uid)
        data = {
            "org_id": org_id,
            "uid": uid,
            "role": role.value,
            "status": MembershipStatus.ACTIVE.value,
            "joined_at": SERVER_TIMESTAMP,
        }
        for _ in range(MAX_GRANT_ATTEMPTS):
            if await self._store.create(self.collection, doc_id, data):
                return True, None
            doc = await self._get_doc(doc_id)
            if doc is None:
                continue
            if doc.data.get("status") == MembershipStatus.ACTIVE.value:
                return False, None
            updates = {"role": role.value, "status": MembershipStatus.ACTIVE.value}
            if not doc.data.get("joined_at"):
                updates["joined_at"] = SERVER_TIMESTAMP
            if await self._store.compare_and_set(doc, updates):
                return True, dict(doc.data)
        return False, None

    async def restore(self, org_id: str, uid: str, previous: Optional[dict[str, Any]]) -> None:
        """Undo a grant() whose invite use could not be claimed."""
        doc_id = composite_id(org_id, uid)
        if previous is None:
            await self._store.delete(self.collection, doc_id)
        else:
            await self._store.set(self.collection, doc_id, previous)

    async def list_for_org(
        self,
        org_id: str,
        status: Optional[MembershipStatus] = MembershipStatus.ACTIVE,
        role: Optional[Role] = None,
    ) -> list[Membership]:
        where = [self._eq("org_id", org_id)]
        if status is not None:
            where.append(self._eq("status", status.value))
        if role is not None:
            where.append(self._eq("role", role.value))
        docs = await self._find(*where, order_by="joined_at")
        return [self._map_to_membership(doc) for doc in docs]

    async def list_for_user(
        self, uid: str, status: Optional[MembershipStatus] = MembershipStatus.ACTIVE
    ) -> list[Membership]:
        where = [self._eq("uid", uid)]
        if status is not None:
            where.append(self._eq("status", status.value))
        docs = await self._find(*where, order_by="joined_at")
        return [self._map_to_membership(doc) for doc in docs]

    def _map_to_membership(self, doc: DocumentSnapshot) -> Membership:
        return Membership.model_validate(doc.data)


class ChildLinkRepository(BaseRepository[ChildLink]):
    """Repository for child-to-organization links."""

    collection = "org_children"

    async def get(self, org_id: str, child_id: str) -> Optional[ChildLink]:
        doc = await self._get_doc(composite_id(org_id, child_id))
        return self._map_to_child_link(doc) if doc else None

    async def upsert(self, org_id: str, child_id: str, **fields: Any) -> ChildLink:
        """Merge fields into the link for (org, child), creating it if needed."""
        data = {"org_id": org_id, "child_id": child_id, **fields}
        await self._store.set(
            self.collection, composite_id(org_id, child_id), data, merge=True
        )
        return await self.get(org_id, child_id)

    async def set_assignment(
        self, org_id: str, child_id: str, specialist_id: Optional[str]
    ) -> ChildLink:
        return await self.upsert(
            org_id,
            child_id,
            assigned_specialist_id=specialist_id,
            assigned_at=SERVER_TIMESTAMP,
        )

    async def list_for_org(
        self,
        org_id: str,
        specialist_id: Optional[str] = None,
        parent_user_id: Optional[str] = None,
    ) -> list[ChildLink]:
        """Assigned links of an organization, optionally narrowed."""
        where = [self._eq("org_id", org_id), self._eq("assigned", True)]
        if specialist_id is not None:
            where.append(self._eq("assigned_specialist_id", specialist_id))
        if parent_user_id is not None:
            where.append(self._eq("parent_user_id", parent_user_id))
        docs = await self._find(*where, order_by="assigned_at", descending=True)
        return [self._map_to_child_link(doc) for doc in docs]

    def _map_to_child_link(self, doc: DocumentSnapshot) -> ChildLink:
        return ChildLink.model_validate(doc.data)


class SpecialistRepository(BaseRepository[SpecialistProfile]):
    """Repository for staff profiles (id: uid)."""

    collection = "specialists"

    async def get(self, uid: str) -> Optional[SpecialistProfile]:
        doc = await self._get_doc(uid)
        return self._map_to_profile(doc) if doc else None

    async def get_many(self, uids: list[str]) -> dict[str, SpecialistProfile]:
        profiles = {}
        for uid in dict.fromkeys(uids):
            profile = await self.get(uid)
            if profile is not None:
                profiles[uid] = profile
        return profiles

    async def upsert(
        self,
        uid: str,
        email: str = "",
        name: Optional[str] = None,
        org_id: Optional[str] = None,
        role: Optional[Role] = None,
    ) -> SpecialistProfile:
        """Create the profile on first sight, otherwise merge the given fields."""
        existing = await self._get_doc(uid)
        data: dict[str, Any] = {"uid": uid, "updated_at": SERVER_TIMESTAMP}
        if existing is None:
            data.update(
                email=email,
                name=name or default_display_name(email),
                created_at=SERVER_TIMESTAMP,
            )
        elif name:
            data["name"] = name
        if org_id is not None:
            data["org_id"] = org_id
        if role is not None:
            data["role"] = role.value
        await self._store.set(self.collection, uid, data, merge=True)
        return await self.get(uid)

    def _map_to_profile(self, doc: DocumentSnapshot) -> SpecialistProfile:
        return SpecialistProfile.model_validate({"uid": doc.id, **doc.data})


class OrgParentRepository(BaseRepository[OrgParent]):
    """Repository for parent-to-organization links (id: "{org_id}:{uid}")."""

    collection = "org_parents"

    async def get(self, org_id: str, parent_user_id: str) -> Optional[OrgParent]:
        doc = await self._get_doc(composite_id(org_id, parent_user_id))
        return OrgParent.model_validate(doc.data) if doc else None

    async def upsert(
        self, org_id: str, parent_user_id: str, linked_specialist_uid: Optional[str] = None
    ) -> OrgParent:
        doc_id = composite_id(org_id, parent_user_id)
        existing = await self._get_doc(doc_id)
        data: dict[str, Any] = {"org_id": org_id, "parent_user_id": parent_user_id}
        if linked_specialist_uid:
            data["linked_specialist_uid"] = linked_specialist_uid
        if existing is None:
            data["joined_at"] = SERVER_TIMESTAMP
        await self._store.set(self.collection, doc_id, data, merge=True)
        return await self.get(org_id, parent_user_id)

    async def list_for_org(self, org_id: str) -> list[OrgParent]:
        docs = await self._find(self._eq("org_id", org_id), order_by="joined_at")
        return [OrgParent.model_validate(doc.data) for doc in docs]


def default_display_name(email: str) -> str:
    """Fallback name derived from the email's local part."""
    local = (email or "").split("@")[0]
    return local or "Specialist"
