"""
Invites module.

Invite Lifecycle Manager: issues, validates, redeems and revokes invite
codes for organization membership (org invites) and child linkage
(parent invites).

Public API:
- IInviteService: Interface for the invite lifecycle
- Invite, InviteKind, InviteStatus: Invite record and derived status
- Request/result models for the HTTP surface
- Invite exceptions: InviteNotFoundError, InviteExhaustedError, etc.
"""

from .interfaces import IInviteService
from .codes import INVITE_CODE_ALPHABET, generate_invite_code
from .models import (
    CreateOrgInviteRequest,
    CreateParentInviteRequest,
    Invite,
    InviteCodeRequest,
    InviteKind,
    InviteStatus,
    InviteSummary,
    InviteValidation,
    RedeemParentInviteRequest,
    RedemptionResult,
    normalize_code,
)
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

__all__ = [
    # Interface
    "IInviteService",
    # Codes
    "INVITE_CODE_ALPHABET",
    "generate_invite_code",
    "normalize_code",
    # Models
    "CreateOrgInviteRequest",
    "CreateParentInviteRequest",
    "Invite",
    "InviteCodeRequest",
    "InviteKind",
    "InviteStatus",
    "InviteSummary",
    "InviteValidation",
    "RedeemParentInviteRequest",
    "RedemptionResult",
    # Exceptions
    "CodeGenerationExhaustedError",
    "InvalidSpecialistError",
    "InviteContentionError",
    "InviteExhaustedError",
    "InviteExpiredError",
    "InviteKindMismatchError",
    "InviteNotFoundError",
    "InviteRevokedError",
    "OrganizationInactiveError",
]
