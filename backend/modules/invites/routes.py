"""
Invite API endpoints.

Joining with a code, validating codes, parent child-linking, and the
org-scoped invite management endpoints. Errors propagate as module
exceptions and are mapped to HTTP responses by the app's handlers.
"""

from fastapi import APIRouter, Depends

from api.middleware.auth import get_current_user
from api.dependencies import get_invite_service
from shared.models import AuthenticatedUser

from .interfaces import IInviteService
from .models import (
    CreateOrgInviteRequest,
    CreateParentInviteRequest,
    InviteCodeRequest,
    InviteSummary,
    InviteValidation,
    RedeemParentInviteRequest,
    RedemptionResult,
)

router = APIRouter()


@router.post("/join", response_model=RedemptionResult)
async def join_organization(
    request: InviteCodeRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IInviteService = Depends(get_invite_service),
) -> RedemptionResult:
    """Join an organization with an org invite code."""
    return await service.redeem_org_invite(user, request.code)


@router.post("/invites/accept", response_model=RedemptionResult)
async def accept_invite(
    request: InviteCodeRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IInviteService = Depends(get_invite_service),
) -> RedemptionResult:
    """
    Accept an org invite (registration flow).

    Same semantics as /join; kept as a separate path for invite links.
    """
    return await service.redeem_org_invite(user, request.code)


@router.post("/invites/validate", response_model=InviteValidation)
async def validate_invite(
    request: InviteCodeRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IInviteService = Depends(get_invite_service),
) -> InviteValidation:
    """Check a code without consuming it."""
    return await service.validate(request.code)


@router.post("/parent-invites/accept", response_model=RedemptionResult)
async def accept_parent_invite(
    request: RedeemParentInviteRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IInviteService = Depends(get_invite_service),
) -> RedemptionResult:
    """Link the caller's child to the organization behind a parent invite."""
    return await service.redeem_parent_invite(user, request.code, request.child_id)


@router.get("/orgs/{org_id}/invites", response_model=list[InviteSummary])
async def list_invites(
    org_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IInviteService = Depends(get_invite_service),
) -> list[InviteSummary]:
    return await service.list_org_invites(user, org_id)


@router.post("/orgs/{org_id}/invites", response_model=InviteSummary, status_code=201)
async def create_invite(
    org_id: str,
    request: CreateOrgInviteRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IInviteService = Depends(get_invite_service),
) -> InviteSummary:
    """Issue an org invite (org_admin only)."""
    return await service.create_org_invite(user, org_id, request)


@router.post("/orgs/{org_id}/parent-invites", response_model=InviteSummary, status_code=201)
async def create_parent_invite(
    org_id: str,
    request: CreateParentInviteRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IInviteService = Depends(get_invite_service),
) -> InviteSummary:
    """Issue a parent invite. Specialists' invites are always bound to themselves."""
    return await service.create_parent_invite(user, org_id, request)


@router.delete("/orgs/{org_id}/invites/{code}", response_model=InviteSummary)
async def revoke_invite(
    org_id: str,
    code: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IInviteService = Depends(get_invite_service),
) -> InviteSummary:
    """Deactivate an invite so it can no longer be redeemed."""
    return await service.revoke_org_invite(user, org_id, code)
