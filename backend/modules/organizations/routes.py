"""
Organization API endpoints.

Mounted under /orgs.
"""

from fastapi import APIRouter, Depends, Response

from api.middleware.auth import get_current_user
from api.dependencies import get_organization_service
from shared.models import AuthenticatedUser

from .interfaces import IOrganizationService
from .models import (
    CreateOrganizationRequest,
    CreateParentContactRequest,
    OrganizationSummary,
    ParentContact,
    TeamMember,
    UpdateParentContactRequest,
)

router = APIRouter()


@router.post("", response_model=OrganizationSummary, status_code=201)
async def create_organization(
    request: CreateOrganizationRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IOrganizationService = Depends(get_organization_service),
) -> OrganizationSummary:
    """
    Create an organization.

    The caller becomes its org_admin.
    """
    return await service.create_organization(user, request)


@router.get("/{org_id}", response_model=OrganizationSummary)
async def get_organization(
    org_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IOrganizationService = Depends(get_organization_service),
) -> OrganizationSummary:
    return await service.get_organization(user, org_id)


@router.get("/{org_id}/team", response_model=list[TeamMember])
async def list_team(
    org_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IOrganizationService = Depends(get_organization_service),
) -> list[TeamMember]:
    """Active members of the organization (org_admin only)."""
    return await service.list_team(user, org_id)


@router.get("/{org_id}/parents", response_model=list[ParentContact])
async def list_parent_contacts(
    org_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IOrganizationService = Depends(get_organization_service),
) -> list[ParentContact]:
    return await service.list_parent_contacts(user, org_id)


@router.post("/{org_id}/parents", response_model=ParentContact, status_code=201)
async def create_parent_contact(
    org_id: str,
    request: CreateParentContactRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IOrganizationService = Depends(get_organization_service),
) -> ParentContact:
    return await service.create_parent_contact(user, org_id, request)


@router.patch("/{org_id}/parents/{contact_id}", response_model=ParentContact)
async def update_parent_contact(
    org_id: str,
    contact_id: str,
    request: UpdateParentContactRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IOrganizationService = Depends(get_organization_service),
) -> ParentContact:
    return await service.update_parent_contact(user, org_id, contact_id, request)


@router.delete("/{org_id}/parents/{contact_id}", status_code=204)
async def delete_parent_contact(
    org_id: str,
    contact_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IOrganizationService = Depends(get_organization_service),
) -> Response:
    await service.delete_parent_contact(user, org_id, contact_id)
    return Response(status_code=204)
