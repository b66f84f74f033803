"""
Group API endpoints.

Mounted under /orgs; every group belongs to the calling member.
"""

from fastapi import APIRouter, Depends, Response

from api.middleware.auth import get_current_user
from api.dependencies import get_group_service
from shared.models import AuthenticatedUser

from .interfaces import IGroupService
from .models import AddParentRequest, CreateGroupRequest, Group, GroupDetail, UpdateGroupRequest

router = APIRouter()


@router.get("/{org_id}/groups", response_model=list[Group])
async def list_groups(
    org_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IGroupService = Depends(get_group_service),
) -> list[Group]:
    return await service.list_groups(user, org_id)


@router.post("/{org_id}/groups", response_model=Group, status_code=201)
async def create_group(
    org_id: str,
    request: CreateGroupRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IGroupService = Depends(get_group_service),
) -> Group:
    return await service.create_group(user, org_id, request)


@router.get("/{org_id}/groups/{group_id}", response_model=GroupDetail)
async def get_group(
    org_id: str,
    group_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IGroupService = Depends(get_group_service),
) -> GroupDetail:
    return await service.get_group(user, org_id, group_id)


@router.patch("/{org_id}/groups/{group_id}", response_model=Group)
async def update_group(
    org_id: str,
    group_id: str,
    request: UpdateGroupRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IGroupService = Depends(get_group_service),
) -> Group:
    return await service.update_group(user, org_id, group_id, request)


@router.delete("/{org_id}/groups/{group_id}", status_code=204)
async def delete_group(
    org_id: str,
    group_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IGroupService = Depends(get_group_service),
) -> Response:
    """Delete a group and its parent entries."""
    await service.delete_group(user, org_id, group_id)
    return Response(status_code=204)


@router.post("/{org_id}/groups/{group_id}/parents", response_model=GroupDetail)
async def add_parent(
    org_id: str,
    group_id: str,
    request: AddParentRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IGroupService = Depends(get_group_service),
) -> GroupDetail:
    """
    Add a parent to the group.

    Without child_ids every child the parent linked to the organization
    is included.
    """
    return await service.add_parent(user, org_id, group_id, request)


@router.delete("/{org_id}/groups/{group_id}/parents/{parent_user_id}", response_model=GroupDetail)
async def remove_parent(
    org_id: str,
    group_id: str,
    parent_user_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IGroupService = Depends(get_group_service),
) -> GroupDetail:
    return await service.remove_parent(user, org_id, group_id, parent_user_id)
