"""
Groups module interface.
"""

from typing import Protocol, runtime_checkable

from shared.models import AuthenticatedUser

from .models import AddParentRequest, CreateGroupRequest, Group, GroupDetail, UpdateGroupRequest


@runtime_checkable
class IGroupService(Protocol):
    """
    Interface for managing a member's parent groups.

    Every operation requires an active membership (or the super-admin
    creator bypass) in the organization, and only touches groups owned
    by the caller.
    """

    async def list_groups(self, user: AuthenticatedUser, org_id: str) -> list[Group]:
        """List the caller's groups in the organization, newest first."""
        ...

    async def create_group(
        self, user: AuthenticatedUser, org_id: str, request: CreateGroupRequest
    ) -> Group:
        """
        Create a group.

        Raises:
            DuplicateGroupNameError: If the caller already has a group with this name
        """
        ...

    async def get_group(
        self, user: AuthenticatedUser, org_id: str, group_id: str
    ) -> GroupDetail:
        """Get a group with its parents and their children."""
        ...

    async def update_group(
        self, user: AuthenticatedUser, org_id: str, group_id: str, request: UpdateGroupRequest
    ) -> Group:
        ...

    async def delete_group(self, user: AuthenticatedUser, org_id: str, group_id: str) -> None:
        """Delete a group together with its parent entries."""
        ...

    async def add_parent(
        self, user: AuthenticatedUser, org_id: str, group_id: str, request: AddParentRequest
    ) -> GroupDetail:
        """
        Add (or update) a parent in the group.

        Raises:
            ParentNotLinkedError: If no child of this parent is linked to the organization
        """
        ...

    async def remove_parent(
        self, user: AuthenticatedUser, org_id: str, group_id: str, parent_user_id: str
    ) -> GroupDetail:
        ...
