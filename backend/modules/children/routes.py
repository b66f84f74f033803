"""
Children API endpoints.

Children, timeline, parent connections, assignments and notes of one
organization.
"""

from fastapi import APIRouter, Depends, Query

from api.middleware.auth import get_current_user
from api.dependencies import get_children_service
from shared.models import AuthenticatedUser

from .interfaces import IChildrenService
from .models import (
    AssignChildRequest,
    AssignmentResult,
    ChildDetail,
    ChildSummary,
    ConnectionsResponse,
    CreateNoteRequest,
    Note,
    TimelineResponse,
    UnassignChildRequest,
)

router = APIRouter()


@router.get("/{org_id}/children", response_model=list[ChildSummary])
async def list_children(
    org_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IChildrenService = Depends(get_children_service),
) -> list[ChildSummary]:
    """
    List children of the organization.

    Admins see every assigned child, specialists only their own.
    """
    return await service.list_children(user, org_id)


@router.get("/{org_id}/children/{child_id}", response_model=ChildDetail)
async def get_child(
    org_id: str,
    child_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IChildrenService = Depends(get_children_service),
) -> ChildDetail:
    return await service.get_child(user, org_id, child_id)


@router.get("/{org_id}/children/{child_id}/timeline", response_model=TimelineResponse)
async def get_timeline(
    org_id: str,
    child_id: str,
    days: int = Query(default=30, description="Window in days, clamped to 7..90"),
    user: AuthenticatedUser = Depends(get_current_user),
    service: IChildrenService = Depends(get_children_service),
) -> TimelineResponse:
    return await service.get_timeline(user, org_id, child_id, days)


@router.get("/{org_id}/children/{child_id}/notes", response_model=list[Note])
async def list_notes(
    org_id: str,
    child_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IChildrenService = Depends(get_children_service),
) -> list[Note]:
    return await service.list_notes(user, org_id, child_id)


@router.post("/{org_id}/children/{child_id}/notes", response_model=Note, status_code=201)
async def create_note(
    org_id: str,
    child_id: str,
    request: CreateNoteRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IChildrenService = Depends(get_children_service),
) -> Note:
    return await service.create_note(user, org_id, child_id, request)


@router.get("/{org_id}/connections", response_model=ConnectionsResponse)
async def list_connections(
    org_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IChildrenService = Depends(get_children_service),
) -> ConnectionsResponse:
    """Parents connected to the organization, with their children."""
    return await service.list_connections(user, org_id)


@router.post("/{org_id}/assignments", response_model=AssignmentResult)
async def assign_child(
    org_id: str,
    request: AssignChildRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IChildrenService = Depends(get_children_service),
) -> AssignmentResult:
    """Assign a child to a specialist (org_admin only)."""
    return await service.assign(user, org_id, request)


@router.delete("/{org_id}/assignments", response_model=AssignmentResult)
async def unassign_child(
    org_id: str,
    request: UnassignChildRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IChildrenService = Depends(get_children_service),
) -> AssignmentResult:
    """Remove the specialist assignment; the child stays with the organization."""
    return await service.unassign(user, org_id, request)
