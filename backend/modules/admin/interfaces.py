"""
Admin module interface.
"""

from typing import Protocol, runtime_checkable

from modules.access.models import Organization
from shared.models import AuthenticatedUser

from .models import (
    AdminCheck,
    AdminInvite,
    BootstrapRequest,
    ContentRoadmap,
    ContentTask,
    CreateAdminInviteRequest,
    CreateContentTaskRequest,
    CreateManagedOrganizationRequest,
    CreateRoadmapRequest,
    GrantSuperAdminRequest,
    OrgChildEntry,
    OrgParentEntry,
    OrgStaffMember,
    SuperAdminChange,
    SuperAdminEntry,
    UpdateContentTaskRequest,
    UpdateRoadmapRequest,
)


@runtime_checkable
class IAdminService(Protocol):
    """
    Interface for platform operator (super admin) operations.

    Every method except ``check`` and ``bootstrap_super_admin`` raises
    SuperAdminRequiredError for callers who are not super admins.
    Organization-scoped methods are limited to organizations the caller
    created.
    """

    def check(self, user: AuthenticatedUser) -> AdminCheck:
        """Report whether the caller is a super admin and why."""
        ...

    # Organizations and invites

    async def list_organizations(self, user: AuthenticatedUser) -> list[Organization]:
        ...

    async def create_organization(
        self, user: AuthenticatedUser, request: CreateManagedOrganizationRequest
    ) -> Organization:
        """
        Raises:
            DuplicateOrganizationError: If the caller already created one with this name
        """
        ...

    async def list_invites(self, user: AuthenticatedUser) -> list[AdminInvite]:
        ...

    async def create_invite(
        self, user: AuthenticatedUser, request: CreateAdminInviteRequest
    ) -> AdminInvite:
        """
        Issue an invite for an organization the caller created.

        Raises:
            OrganizationNotFoundError: If the organization does not exist
            OrganizationNotOwnedError: If another operator created it
            OrganizationNotActiveError: If it is deactivated
        """
        ...

    async def revoke_invite(self, user: AuthenticatedUser, code: str) -> AdminInvite:
        ...

    async def list_org_specialists(
        self, user: AuthenticatedUser, org_id: str
    ) -> list[OrgStaffMember]:
        ...

    async def list_org_parents(
        self, user: AuthenticatedUser, org_id: str
    ) -> list[OrgParentEntry]:
        ...

    async def list_org_children(
        self, user: AuthenticatedUser, org_id: str
    ) -> list[OrgChildEntry]:
        ...

    # Super admins

    async def list_super_admins(self, user: AuthenticatedUser) -> list[SuperAdminEntry]:
        ...

    async def grant_super_admin(
        self, user: AuthenticatedUser, request: GrantSuperAdminRequest
    ) -> SuperAdminChange:
        """
        Raises:
            UserNotFoundError: If no user has this email
        """
        ...

    async def revoke_super_admin(self, user: AuthenticatedUser, uid: str) -> SuperAdminChange:
        """
        Raises:
            SelfRevokeError: If uid is the caller
            NotASuperAdminError: If the target holds no super-admin claim
        """
        ...

    async def bootstrap_super_admin(self, request: BootstrapRequest) -> SuperAdminChange:
        """Grant the first super admin with the configured secret key."""
        ...

    # Content library

    async def list_tasks(self, user: AuthenticatedUser) -> list[ContentTask]:
        ...

    async def create_task(
        self, user: AuthenticatedUser, request: CreateContentTaskRequest
    ) -> ContentTask:
        ...

    async def update_task(
        self, user: AuthenticatedUser, task_id: str, request: UpdateContentTaskRequest
    ) -> ContentTask:
        ...

    async def delete_task(self, user: AuthenticatedUser, task_id: str) -> None:
        ...

    async def list_roadmaps(self, user: AuthenticatedUser) -> list[ContentRoadmap]:
        ...

    async def create_roadmap(
        self, user: AuthenticatedUser, request: CreateRoadmapRequest
    ) -> ContentRoadmap:
        ...

    async def update_roadmap(
        self, user: AuthenticatedUser, roadmap_id: str, request: UpdateRoadmapRequest
    ) -> ContentRoadmap:
        ...

    async def delete_roadmap(self, user: AuthenticatedUser, roadmap_id: str) -> None:
        ...
