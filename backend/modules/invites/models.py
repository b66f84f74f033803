"""
Invites module data models.

One invite record serves both flavors: org invites grant a membership,
parent invites link a child to the organization. Validity is derived from
the record and the clock on every read, never stored.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import AliasChoices, BaseModel, Field, field_validator

from modules.access.models import Role
from shared.documents import as_utc


class InviteKind(str, Enum):
    ORG = "org"        # Grants organization membership
    PARENT = "parent"  # Links a child to the organization


class InviteStatus(str, Enum):
    """Derived status; checked in this order when an invite is redeemed."""

    VALID = "valid"
    REVOKED = "revoked"      # Deactivated by an admin
    EXPIRED = "expired"
    EXHAUSTED = "exhausted"  # used_count reached max_uses


def normalize_code(code: str) -> str:
    return code.strip().upper()


class Invite(BaseModel):
    """An invite code and its usage bookkeeping."""

    code: str = Field(..., description="Redeemable code, also the record id")
    kind: InviteKind = InviteKind.ORG
    org_id: str
    role: Optional[Role] = Field(None, description="Role granted by org invites")
    specialist_id: Optional[str] = Field(
        None, description="Specialist a parent invite assigns children to"
    )
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    max_uses: Optional[int] = Field(None, description="None means unlimited")
    used_count: int = 0
    is_active: bool = True
    revoked_at: Optional[datetime] = None
    revoked_by: Optional[str] = None

    @field_validator("created_at", "expires_at", "revoked_at")
    @classmethod
    def assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)

    @property
    def is_bounded(self) -> bool:
        return self.max_uses is not None

    def status_at(self, now: datetime) -> InviteStatus:
        if not self.is_active:
            return InviteStatus.REVOKED
        if self.expires_at is not None and now > self.expires_at:
            return InviteStatus.EXPIRED
        if self.max_uses is not None and self.used_count >= self.max_uses:
            return InviteStatus.EXHAUSTED
        return InviteStatus.VALID

    def remaining_uses(self) -> Optional[int]:
        if self.max_uses is None:
            return None
        return max(self.max_uses - self.used_count, 0)


class InviteSummary(Invite):
    """Invite as returned by listing and creation endpoints."""

    status: InviteStatus
    invite_link: Optional[str] = None


# -----------------------------------------------------------------------------
# Requests
# -----------------------------------------------------------------------------


class CreateOrgInviteRequest(BaseModel):
    """Request to issue an org invite."""

    role: Role = Role.SPECIALIST
    max_uses: Optional[int] = Field(None, ge=1, le=1000)
    expires_in_days: int = Field(default=30, ge=1, le=365)


class CreateParentInviteRequest(BaseModel):
    """Request to issue a parent invite. Specialists always bind themselves."""

    specialist_id: Optional[str] = None
    max_uses: Optional[int] = Field(None, ge=1, le=1000)
    expires_in_days: int = Field(default=365, ge=1, le=365)


class InviteCodeRequest(BaseModel):
    """Body carrying only a code (``invite_code`` is accepted as well)."""

    code: str = Field(
        ...,
        min_length=1,
        max_length=100,
        validation_alias=AliasChoices("code", "invite_code", "inviteCode"),
    )

    @field_validator("code")
    @classmethod
    def strip_code(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Invite code is required")
        return value


class RedeemParentInviteRequest(InviteCodeRequest):
    child_id: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("child_id", "childId")
    )


# -----------------------------------------------------------------------------
# Results
# -----------------------------------------------------------------------------


class InviteValidation(BaseModel):
    """Outcome of a read-only validity check."""

    valid: bool
    code: str
    reason: Optional[str] = Field(
        None, description="not_found, revoked, expired, exhausted or organization_inactive"
    )
    kind: Optional[InviteKind] = None
    org_id: Optional[str] = None
    org_name: Optional[str] = None
    role: Optional[Role] = None
    specialist_id: Optional[str] = None
    specialist_name: Optional[str] = None
    expires_at: Optional[datetime] = None
    remaining_uses: Optional[int] = None


class RedemptionResult(BaseModel):
    """Outcome of redeeming an invite."""

    ok: bool = True
    kind: InviteKind
    org_id: str
    org_name: str
    role: Optional[Role] = None
    child_id: Optional[str] = None
    already_member: bool = Field(
        default=False, description="True when nothing was applied because it already held"
    )
