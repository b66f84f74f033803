"""
Access module interface.

Every organization-scoped route authorizes through IAccessService. The
same resolution rule backs route guards, the profile endpoint and the
admin listings, so the super-admin creator bypass is defined once.
"""

from typing import Protocol, runtime_checkable

from shared.models import AuthenticatedUser

from .models import ChildAccess, EffectiveRole, OrgRole
from .policy import SuperAdminPolicy


@runtime_checkable
class IAccessService(Protocol):
    """Interface for role resolution and child access decisions."""

    @property
    def policy(self) -> SuperAdminPolicy:
        """The super-admin policy decisions are made with."""
        ...

    def is_super_admin(self, user: AuthenticatedUser) -> bool:
        """
        Whether the caller is a platform super admin.

        True when the identity carries the ``super_admin`` claim, or outside
        production when the caller's email is on the operator allow-list.
        """
        ...

    def require_super_admin(self, user: AuthenticatedUser) -> None:
        """
        Raises:
            SuperAdminRequiredError: If the caller is not a super admin
        """
        ...

    async def resolve_effective_role(
        self, user: AuthenticatedUser, org_id: str
    ) -> EffectiveRole:
        """
        Determine the caller's role in an organization.

        A super admin who created the organization is its org_admin without
        a membership record. Everyone else needs an active membership.

        Raises:
            NotAMemberError: No membership for (org, caller)
            InactiveMemberError: Membership exists but is not active
        """
        ...

    async def require_org_admin(
        self, user: AuthenticatedUser, org_id: str
    ) -> EffectiveRole:
        """
        Resolve the role and require org_admin.

        Raises:
            OrgAdminRequiredError: If the caller is only a specialist
        """
        ...

    async def authorize_child_access(
        self, user: AuthenticatedUser, org_id: str, child_id: str
    ) -> ChildAccess:
        """
        Decide whether the caller may access one child's record.

        Evaluated on every call; decisions are never cached because
        assignments change between requests.

        Raises:
            ChildNotAssignedToOrgError: The child is not assigned to the org
            UnassignedChildRequiresAdminError: Specialist, child has no specialist
            NotYourChildError: Specialist, child belongs to another specialist
        """
        ...

    async def list_org_roles(self, user: AuthenticatedUser) -> list[OrgRole]:
        """All organizations the caller can act in, with their effective role."""
        ...
