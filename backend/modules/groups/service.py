"""
Group service implementation.
"""

import logging
from typing import Optional

from modules.access.interfaces import IAccessService
from modules.access.repository import ChildLinkRepository
from modules.auth.interfaces import IAuthService
from modules.children.repository import ChildRepository
from shared.exceptions import NurooError
from shared.models import AuthenticatedUser

from .exceptions import (
    DuplicateGroupNameError,
    GroupNotFoundError,
    GroupOrganizationMismatchError,
    ParentNotLinkedError,
)
from .interfaces import IGroupService
from .models import (
    AddParentRequest,
    CreateGroupRequest,
    Group,
    GroupChild,
    GroupDetail,
    GroupParent,
    UpdateGroupRequest,
)
from .repository import GroupRepository

logger = logging.getLogger(__name__)


class GroupService(IGroupService):
    """Implementation of the group service."""

    def __init__(
        self,
        access: IAccessService,
        groups: GroupRepository,
        child_links: ChildLinkRepository,
        children: ChildRepository,
        auth: Optional[IAuthService] = None,
    ):
        self._access = access
        self._groups = groups
        self._child_links = child_links
        self._children = children
        self._auth = auth

    async def list_groups(self, user: AuthenticatedUser, org_id: str) -> list[Group]:
        await self._access.resolve_effective_role(user, org_id)
        groups = await self._groups.list_for_owner(user.id, org_id)
        return [
            group.model_copy(update={"parent_count": await self._groups.count_parents(group.id)})
            for group in groups
        ]

    async def create_group(
        self, user: AuthenticatedUser, org_id: str, request: CreateGroupRequest
    ) -> Group:
        await self._access.resolve_effective_role(user, org_id)
        name = request.name.strip()
        if await self._groups.find_by_name(user.id, org_id, name) is not None:
            raise DuplicateGroupNameError(name)

        group = await self._groups.create(
            owner_uid=user.id,
            org_id=org_id,
            name=name,
            description=request.description,
            color=request.color,
        )
        logger.info(f"Group {group.id} created by {user.id} in org {org_id}")
        return group

    async def get_group(
        self, user: AuthenticatedUser, org_id: str, group_id: str
    ) -> GroupDetail:
        await self._access.resolve_effective_role(user, org_id)
        group = await self._owned_group(user, org_id, group_id)
        return await self._detail(group)

    async def update_group(
        self, user: AuthenticatedUser, org_id: str, group_id: str, request: UpdateGroupRequest
    ) -> Group:
        await self._access.resolve_effective_role(user, org_id)
        group = await self._owned_group(user, org_id, group_id)

        updates = request.model_dump(exclude_unset=True, exclude_none=True)
        if "name" in updates:
            updates["name"] = updates["name"].strip()
            if updates["name"] != group.name:
                duplicate = await self._groups.find_by_name(user.id, org_id, updates["name"])
                if duplicate is not None and duplicate.id != group.id:
                    raise DuplicateGroupNameError(updates["name"])
        if not updates:
            return group.model_copy(
                update={"parent_count": await self._groups.count_parents(group.id)}
            )

        updated = await self._groups.update(group.id, updates)
        return updated.model_copy(
            update={"parent_count": await self._groups.count_parents(group.id)}
        )

    async def delete_group(self, user: AuthenticatedUser, org_id: str, group_id: str) -> None:
        await self._access.resolve_effective_role(user, org_id)
        group = await self._owned_group(user, org_id, group_id)
        await self._groups.delete(group.id)
        logger.info(f"Group {group.id} deleted by {user.id}")

    async def add_parent(
        self, user: AuthenticatedUser, org_id: str, group_id: str, request: AddParentRequest
    ) -> GroupDetail:
        await self._access.resolve_effective_role(user, org_id)
        group = await self._owned_group(user, org_id, group_id)

        links = await self._child_links.list_for_org(
            org_id, parent_user_id=request.parent_user_id
        )
        if not links:
            raise ParentNotLinkedError(request.parent_user_id)

        linked = [link.child_id for link in links]
        # Only children linked to the organization can be grouped
        child_ids = [c for c in request.child_ids if c in linked] if request.child_ids else linked
        await self._groups.upsert_parent(group.id, request.parent_user_id, child_ids)
        return await self._detail(group)

    async def remove_parent(
        self, user: AuthenticatedUser, org_id: str, group_id: str, parent_user_id: str
    ) -> GroupDetail:
        await self._access.resolve_effective_role(user, org_id)
        group = await self._owned_group(user, org_id, group_id)
        await self._groups.remove_parent(group.id, parent_user_id)
        return await self._detail(group)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    async def _owned_group(
        self, user: AuthenticatedUser, org_id: str, group_id: str
    ) -> Group:
        group = await self._groups.get(group_id)
        if group is None or group.owner_uid != user.id:
            raise GroupNotFoundError(group_id)
        if group.org_id != org_id:
            raise GroupOrganizationMismatchError(group_id, org_id)
        return group

    async def _detail(self, group: Group) -> GroupDetail:
        parents = []
        for membership in await self._groups.list_parents(group.id):
            name, email = await self._identity(membership.parent_user_id)
            children = []
            for child_id in membership.child_ids:
                child = await self._children.get(child_id)
                children.append(
                    GroupChild(
                        id=child_id,
                        name=child.name if child else "Unknown",
                        age=child.age if child else None,
                    )
                )
            parents.append(
                GroupParent(
                    parent_user_id=membership.parent_user_id,
                    name=name or "Unknown",
                    email=email,
                    children=children,
                    added_at=membership.added_at,
                )
            )
        return GroupDetail(
            **group.model_dump(exclude={"parent_count"}),
            parent_count=len(parents),
            parents=parents,
        )

    async def _identity(self, uid: str) -> tuple[Optional[str], Optional[str]]:
        if self._auth is None:
            return None, None
        try:
            identity = await self._auth.get_user_by_id(uid)
        except NurooError as e:
            logger.warning(f"Parent lookup for {uid} failed: {e.message}")
            return None, None
        if identity is None:
            return None, None
        return identity.display_name, identity.email
