"""
Profile and session endpoints for the signed-in caller.
"""

from fastapi import APIRouter, Depends

from api.middleware.auth import get_current_user
from api.dependencies import get_organization_service
from modules.organizations.interfaces import IOrganizationService
from modules.organizations.models import (
    MeResponse,
    ProfileResponse,
    SessionResponse,
    UpdateProfileRequest,
)
from shared.models import AuthenticatedUser

router = APIRouter()


@router.get("/me", response_model=MeResponse)
async def get_me(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IOrganizationService = Depends(get_organization_service),
) -> MeResponse:
    """
    Get the caller's profile.

    Lists every organization the caller can act in: organizations a
    super admin created, then active memberships.
    """
    return await service.get_me(user)


@router.post("/me", response_model=ProfileResponse)
async def update_me(
    request: UpdateProfileRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IOrganizationService = Depends(get_organization_service),
) -> ProfileResponse:
    return await service.update_me(user, request)


@router.get("/session", response_model=SessionResponse)
async def get_session(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IOrganizationService = Depends(get_organization_service),
) -> SessionResponse:
    return await service.get_session(user)
