"""
Invite lifecycle service.

Create -> (Valid <-> Redeemed) -> Exhausted | Expired | Revoked, where
validity is recomputed from the record and the clock each time.

Redeeming a bounded invite (max_uses set) first claims a use with a
conditional write on the version that was validated, then applies the
effect. A claim that loses a race re-reads and re-validates, so N
concurrent redemptions of a max_uses=N code succeed exactly N times.
Unbounded invites apply the effect first and count the use best-effort.
Org invites create the membership before claiming, so a user racing
themselves spends one use; a failed claim restores the prior membership.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

from modules.access.exceptions import OrganizationNotFoundError
from modules.access.interfaces import IAccessService
from modules.access.models import MembershipStatus, Organization, Role
from modules.access.repository import (
    ChildLinkRepository,
    MembershipRepository,
    OrganizationRepository,
    OrgParentRepository,
    SpecialistRepository,
)
from modules.children.repository import ChildRepository
from shared.documents import SERVER_TIMESTAMP, as_utc, utcnow
from shared.exceptions import NurooError
from shared.models import AuthenticatedUser

from .codes import MAX_CODE_ATTEMPTS, generate_invite_code
from .exceptions import (
    CodeGenerationExhaustedError,
    InvalidSpecialistError,
    InviteContentionError,
    InviteExhaustedError,
    InviteExpiredError,
    InviteKindMismatchError,
    InviteNotFoundError,
    InviteRevokedError,
    OrganizationInactiveError,
)
from .interfaces import IInviteService
from .models import (
    CreateOrgInviteRequest,
    CreateParentInviteRequest,
    Invite,
    InviteKind,
    InviteStatus,
    InviteSummary,
    InviteValidation,
    RedemptionResult,
    normalize_code,
)
from .repository import InviteRepository

logger = logging.getLogger(__name__)

# Conditional-write attempts per redemption before reporting contention
MAX_CLAIM_ATTEMPTS = 20
# Best-effort counter bumps for unbounded invites
MAX_COUNT_ATTEMPTS = 3


class InviteService(IInviteService):
    """Implementation of the invite lifecycle."""

    def __init__(
        self,
        invites: InviteRepository,
        organizations: OrganizationRepository,
        memberships: MembershipRepository,
        child_links: ChildLinkRepository,
        specialists: SpecialistRepository,
        org_parents: OrgParentRepository,
        children: ChildRepository,
        access: IAccessService,
        frontend_url: str = "",
        clock: Callable[[], datetime] = utcnow,
    ):
        self._invites = invites
        self._organizations = organizations
        self._memberships = memberships
        self._child_links = child_links
        self._specialists = specialists
        self._org_parents = org_parents
        self._children = children
        self._access = access
        self._frontend_url = frontend_url.rstrip("/")
        self._clock = clock

    # -------------------------------------------------------------------------
    # Creation
    # -------------------------------------------------------------------------

    async def create_org_invite(
        self, user: AuthenticatedUser, org_id: str, request: CreateOrgInviteRequest
    ) -> InviteSummary:
        await self._access.require_org_admin(user, org_id)
        org = await self._require_open_org(org_id)
        return await self.issue(
            org,
            issuer_uid=user.id,
            kind=InviteKind.ORG,
            role=request.role,
            max_uses=request.max_uses,
            expires_in_days=request.expires_in_days,
        )

    async def create_parent_invite(
        self, user: AuthenticatedUser, org_id: str, request: CreateParentInviteRequest
    ) -> InviteSummary:
        effective = await self._access.resolve_effective_role(user, org_id)
        org = await self._require_open_org(org_id)

        specialist_id = request.specialist_id
        if not effective.is_org_admin:
            specialist_id = user.id
        elif specialist_id and specialist_id != user.id:
            membership = await self._memberships.get(org_id, specialist_id)
            if membership is None or membership.status != MembershipStatus.ACTIVE:
                raise InvalidSpecialistError(specialist_id)

        return await self.issue(
            org,
            issuer_uid=user.id,
            kind=InviteKind.PARENT,
            specialist_id=specialist_id,
            max_uses=request.max_uses,
            expires_in_days=request.expires_in_days,
        )

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
        if expires_in_days is not None:
            expires_at = self._clock() + timedelta(days=expires_in_days)
        expires_at = as_utc(expires_at)

        data = {
            "kind": kind.value,
            "org_id": org.id,
            "role": (role or Role.SPECIALIST).value if kind == InviteKind.ORG else None,
            "specialist_id": specialist_id,
            "created_by": issuer_uid,
            "created_at": SERVER_TIMESTAMP,
            "expires_at": expires_at,
            "max_uses": max_uses,
        }
        for _ in range(MAX_CODE_ATTEMPTS):
            code = generate_invite_code()
            if await self._invites.create(code, data):
                logger.info(
                    f"Invite {code} ({kind.value}) created for org {org.id} by {issuer_uid}"
                )
                return self._summarize(await self._invites.get(code))
        logger.error(f"No unused invite code after {MAX_CODE_ATTEMPTS} attempts")
        raise CodeGenerationExhaustedError(MAX_CODE_ATTEMPTS)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def validate(self, code: str) -> InviteValidation:
        normalized = normalize_code(code)
        invite = await self._invites.get(normalized)
        if invite is None:
            return InviteValidation(valid=False, code=normalized, reason="not_found")

        status = invite.status_at(self._clock())
        org = await self._organizations.get(invite.org_id)
        specialist_name = None
        if invite.specialist_id:
            profile = await self._specialists.get(invite.specialist_id)
            specialist_name = profile.name if profile else None

        reason = None if status == InviteStatus.VALID else status.value
        if reason is None and (org is None or not org.is_active):
            reason = "organization_inactive"

        return InviteValidation(
            valid=reason is None,
            code=normalized,
            reason=reason,
            kind=invite.kind,
            org_id=invite.org_id,
            org_name=org.name if org else None,
            role=invite.role,
            specialist_id=invite.specialist_id,
            specialist_name=specialist_name,
            expires_at=invite.expires_at,
            remaining_uses=invite.remaining_uses(),
        )

    async def list_org_invites(
        self, user: AuthenticatedUser, org_id: str
    ) -> list[InviteSummary]:
        await self._access.require_org_admin(user, org_id)
        return [self._summarize(invite) for invite in await self._invites.list_for_org(org_id)]

    async def list_created_by(self, uid: str, limit: int = 50) -> list[InviteSummary]:
        return [
            self._summarize(invite)
            for invite in await self._invites.list_by_creator(uid, limit=limit)
        ]

    # -------------------------------------------------------------------------
    # Redemption
    # -------------------------------------------------------------------------

    async def redeem_org_invite(self, user: AuthenticatedUser, code: str) -> RedemptionResult:
        normalized = normalize_code(code)
        invite = await self._require_redeemable(normalized, InviteKind.ORG)
        org = await self._require_open_org(invite.org_id)
        role = invite.role or Role.SPECIALIST

        existing = await self._memberships.get(org.id, user.id)
        if existing is not None and existing.is_active:
            return RedemptionResult(
                kind=InviteKind.ORG,
                org_id=org.id,
                org_name=org.name,
                role=existing.role,
                already_member=True,
            )

        # Only the caller that actually made the membership spends a use.
        granted, previous = await self._memberships.grant(org.id, user.id, role)
        if not granted:
            current = await self._memberships.get(org.id, user.id)
            return RedemptionResult(
                kind=InviteKind.ORG,
                org_id=org.id,
                org_name=org.name,
                role=current.role if current else role,
                already_member=True,
            )

        if invite.is_bounded:
            try:
                await self._claim_use(normalized, InviteKind.ORG)
            except NurooError:
                await self._memberships.restore(org.id, user.id, previous)
                logger.info(
                    f"Rolled back membership of {user.id} in {org.id}: invite {normalized} not claimable"
                )
                raise

        await self._specialists.upsert(
            user.id, email=user.email, name=user.name, org_id=org.id, role=role
        )
        logger.info(f"User {user.id} joined org {org.id} as {role.value} with invite {normalized}")

        if not invite.is_bounded:
            await self._record_use(normalized)

        return RedemptionResult(kind=InviteKind.ORG, org_id=org.id, org_name=org.name, role=role)

    async def redeem_parent_invite(
        self, user: AuthenticatedUser, code: str, child_id: str
    ) -> RedemptionResult:
        normalized = normalize_code(code)
        invite = await self._require_redeemable(normalized, InviteKind.PARENT)
        org = await self._require_open_org(invite.org_id)

        link = await self._child_links.get(org.id, child_id)
        if link is not None and link.assigned and link.parent_user_id == user.id:
            return RedemptionResult(
                kind=InviteKind.PARENT,
                org_id=org.id,
                org_name=org.name,
                child_id=child_id,
                already_member=True,
            )

        if invite.is_bounded:
            await self._claim_use(normalized, InviteKind.PARENT)

        fields = {
            "assigned": True,
            "assigned_at": SERVER_TIMESTAMP,
            "parent_user_id": user.id,
        }
        if invite.specialist_id:
            fields["assigned_specialist_id"] = invite.specialist_id
        await self._child_links.upsert(org.id, child_id, **fields)
        await self._org_parents.upsert(org.id, user.id, invite.specialist_id)
        if not await self._children.set_organization(child_id, org.id):
            logger.warning(f"Child {child_id} has no profile yet; linked to org {org.id} only")
        logger.info(
            f"Parent {user.id} linked child {child_id} to org {org.id} with invite {normalized}"
        )

        if not invite.is_bounded:
            await self._record_use(normalized)

        return RedemptionResult(
            kind=InviteKind.PARENT, org_id=org.id, org_name=org.name, child_id=child_id
        )

    # -------------------------------------------------------------------------
    # Revocation
    # -------------------------------------------------------------------------

    async def revoke_org_invite(
        self, user: AuthenticatedUser, org_id: str, code: str
    ) -> InviteSummary:
        await self._access.require_org_admin(user, org_id)
        normalized = normalize_code(code)
        invite = await self._invites.get(normalized)
        if invite is None or invite.org_id != org_id:
            raise InviteNotFoundError(normalized)
        return await self.revoke(invite, user.id)

    async def revoke(self, invite: Invite, revoked_by: str) -> InviteSummary:
        if invite.is_active:
            await self._invites.deactivate(invite.code, revoked_by)
            logger.info(f"Invite {invite.code} revoked by {revoked_by}")
        return self._summarize(await self._invites.get(invite.code))

    async def get_invite(self, code: str) -> Invite:
        normalized = normalize_code(code)
        invite = await self._invites.get(normalized)
        if invite is None:
            raise InviteNotFoundError(normalized)
        return invite

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _ensure_valid(self, invite: Invite) -> None:
        status = invite.status_at(self._clock())
        if status == InviteStatus.REVOKED:
            raise InviteRevokedError(invite.code)
        if status == InviteStatus.EXPIRED:
            raise InviteExpiredError(invite.code)
        if status == InviteStatus.EXHAUSTED:
            raise InviteExhaustedError(invite.code)

    async def _require_redeemable(self, code: str, kind: InviteKind) -> Invite:
        invite = await self._invites.get(code)
        if invite is None:
            raise InviteNotFoundError(code)
        if invite.kind != kind:
            raise InviteKindMismatchError(code, kind.value)
        self._ensure_valid(invite)
        return invite

    async def _require_open_org(self, org_id: str) -> Organization:
        org = await self._organizations.get(org_id)
        if org is None:
            raise OrganizationNotFoundError(org_id)
        if not org.is_active:
            raise OrganizationInactiveError(org_id)
        return org

    async def _claim_use(self, code: str, kind: InviteKind) -> Invite:
        """Consume one use atomically, re-validating after every lost race."""
        for _ in range(MAX_CLAIM_ATTEMPTS):
            found = await self._invites.get_versioned(code)
            if found is None:
                raise InviteNotFoundError(code)
            invite, snapshot = found
            if invite.kind != kind:
                raise InviteKindMismatchError(code, kind.value)
            self._ensure_valid(invite)
            if await self._invites.increment_used(snapshot):
                return invite
        logger.warning(f"Gave up claiming invite {code} after {MAX_CLAIM_ATTEMPTS} attempts")
        raise InviteContentionError(code)

    async def _record_use(self, code: str) -> None:
        """Count a use of an unbounded invite. Failures are logged, never raised."""
        try:
            for _ in range(MAX_COUNT_ATTEMPTS):
                found = await self._invites.get_versioned(code)
                if found is None:
                    return
                if await self._invites.increment_used(found[1]):
                    return
            logger.warning(f"Usage count for invite {code} not updated (contention)")
        except NurooError as e:
            logger.warning(f"Usage count for invite {code} not updated: {e.message}")

    def _summarize(self, invite: Invite) -> InviteSummary:
        link = None
        if invite.kind == InviteKind.ORG and self._frontend_url:
            link = f"{self._frontend_url}/b2b/register?code={invite.code}"
        return InviteSummary(
            **invite.model_dump(),
            status=invite.status_at(self._clock()),
            invite_link=link,
        )
