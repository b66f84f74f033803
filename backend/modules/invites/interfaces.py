"""
Invites module interface.
"""

from datetime import datetime
from typing import Optional, Protocol, runtime_checkable

from modules.access.models import Organization, Role
from shared.models import AuthenticatedUser

from .models import (
    CreateOrgInviteRequest,
    CreateParentInviteRequest,
    Invite,
    InviteKind,
    InviteSummary,
    InviteValidation,
    RedemptionResult,
)


@runtime_checkable
class IInviteService(Protocol):
    """
    Interface for the invite lifecycle.

    Codes are normalized (trimmed, upper-cased) by every operation that
    takes one.
    """

    async def create_org_invite(
        self, user: AuthenticatedUser, org_id: str, request: CreateOrgInviteRequest
    ) -> InviteSummary:
        """
        Issue an invite granting membership with ``request.role``.

        Raises:
            OrgAdminRequiredError: Caller is not an org_admin of the organization
            OrganizationInactiveError: The organization is deactivated
            CodeGenerationExhaustedError: No unused code after MAX_CODE_ATTEMPTS tries
        """
        ...

    async def create_parent_invite(
        self, user: AuthenticatedUser, org_id: str, request: CreateParentInviteRequest
    ) -> InviteSummary:
        """
        Issue an invite that links a parent's child to the organization.

        Specialists always issue invites bound to themselves; admins may
        name an active member or leave the child unassigned.
        """
        ...

    async def issue(
        self,
        org: Organization,
        issuer_uid: str,
        kind: InviteKind,
        role: Optional[Role] = None,
        specialist_id: Optional[str] = None,
        max_uses: Optional[int] = None,
        expires_in_days: Optional[int] = None,
        expires_at: Optional[datetime] = None,
    ) -> InviteSummary:
        """Create an invite for an organization the caller was already authorized for."""
        ...

    async def validate(self, code: str) -> InviteValidation:
        """Evaluate a code without changing it. Never raises for invalid codes."""
        ...

    async def list_org_invites(
        self, user: AuthenticatedUser, org_id: str
    ) -> list[InviteSummary]:
        """All invites of an organization, newest first (org_admin only)."""
        ...

    async def list_created_by(self, uid: str, limit: int = 50) -> list[InviteSummary]:
        """Invites issued by a user, newest first."""
        ...

    async def redeem_org_invite(self, user: AuthenticatedUser, code: str) -> RedemptionResult:
        """
        Join an organization with an org invite.

        An already-active member gets success with no effect applied and no
        use consumed.

        Raises:
            InviteNotFoundError, InviteRevokedError, InviteExpiredError,
            InviteExhaustedError, InviteKindMismatchError,
            OrganizationNotFoundError, OrganizationInactiveError
        """
        ...

    async def redeem_parent_invite(
        self, user: AuthenticatedUser, code: str, child_id: str
    ) -> RedemptionResult:
        """
        Link a child to the organization with a parent invite.

        Redeeming again for a child already linked by the same parent is a
        no-op success.
        """
        ...

    async def revoke_org_invite(
        self, user: AuthenticatedUser, org_id: str, code: str
    ) -> InviteSummary:
        """Deactivate an invite of the organization (org_admin only). Idempotent."""
        ...

    async def revoke(self, invite: Invite, revoked_by: str) -> InviteSummary:
        """Deactivate an invite the caller was already authorized to manage."""
        ...

    async def get_invite(self, code: str) -> Invite:
        """
        Raises:
            InviteNotFoundError: If no invite has this code
        """
        ...
