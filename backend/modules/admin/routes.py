"""
Admin API endpoints.

Platform operator routes, mounted under /admin. The bootstrap route
lives on its own router because it runs before any operator exists and
therefore carries no bearer token.
"""

from fastapi import APIRouter, Depends, Response

from api.middleware.auth import get_current_user
from api.dependencies import get_admin_service
from modules.access.models import Organization
from shared.models import AuthenticatedUser

from .interfaces import IAdminService
from .models import (
    AdminCheck,
    AdminInvite,
    BootstrapRequest,
    ContentRoadmap,
    ContentTask,
    CreateAdminInviteRequest,
    CreateContentTaskRequest,
    CreateManagedOrganizationRequest,
    CreateRoadmapRequest,
    GrantSuperAdminRequest,
    OrgChildEntry,
    OrgParentEntry,
    OrgStaffMember,
    SuperAdminChange,
    SuperAdminEntry,
    UpdateContentTaskRequest,
    UpdateRoadmapRequest,
)

router = APIRouter()
bootstrap_router = APIRouter()


@router.get("/check", response_model=AdminCheck)
async def check(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAdminService = Depends(get_admin_service),
) -> AdminCheck:
    """Whether the caller is a super admin (never 403)."""
    return service.check(user)


# =============================================================================
# Organizations
# =============================================================================


@router.get("/organizations", response_model=list[Organization])
async def list_organizations(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAdminService = Depends(get_admin_service),
) -> list[Organization]:
    """Organizations created by the calling operator, newest first."""
    return await service.list_organizations(user)


@router.post("/organizations", response_model=Organization, status_code=201)
async def create_organization(
    request: CreateManagedOrganizationRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAdminService = Depends(get_admin_service),
) -> Organization:
    return await service.create_organization(user, request)


@router.get("/orgs/{org_id}/specialists", response_model=list[OrgStaffMember])
async def list_org_specialists(
    org_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAdminService = Depends(get_admin_service),
) -> list[OrgStaffMember]:
    return await service.list_org_specialists(user, org_id)


@router.get("/orgs/{org_id}/parents", response_model=list[OrgParentEntry])
async def list_org_parents(
    org_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAdminService = Depends(get_admin_service),
) -> list[OrgParentEntry]:
    """Parent contacts and app-linked parents of the organization."""
    return await service.list_org_parents(user, org_id)


@router.get("/orgs/{org_id}/children", response_model=list[OrgChildEntry])
async def list_org_children(
    org_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAdminService = Depends(get_admin_service),
) -> list[OrgChildEntry]:
    return await service.list_org_children(user, org_id)


# =============================================================================
# Invites
# =============================================================================


@router.get("/invites", response_model=list[AdminInvite])
async def list_invites(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAdminService = Depends(get_admin_service),
) -> list[AdminInvite]:
    """The 50 most recent invites issued by the calling operator."""
    return await service.list_invites(user)


@router.post("/invites", response_model=AdminInvite, status_code=201)
async def create_invite(
    request: CreateAdminInviteRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAdminService = Depends(get_admin_service),
) -> AdminInvite:
    """
    Issue an invite for an organization the operator created.

    ``role`` is org_admin, specialist or parent; parent issues a parent
    invite.
    """
    return await service.create_invite(user, request)


@router.delete("/invites/{code}", response_model=AdminInvite)
async def revoke_invite(
    code: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAdminService = Depends(get_admin_service),
) -> AdminInvite:
    return await service.revoke_invite(user, code)


# =============================================================================
# Super admins
# =============================================================================


@router.get("/super-admin", response_model=list[SuperAdminEntry])
async def list_super_admins(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAdminService = Depends(get_admin_service),
) -> list[SuperAdminEntry]:
    return await service.list_super_admins(user)


@router.post("/super-admin", response_model=SuperAdminChange)
async def grant_super_admin(
    request: GrantSuperAdminRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAdminService = Depends(get_admin_service),
) -> SuperAdminChange:
    return await service.grant_super_admin(user, request)


@router.delete("/super-admin/{uid}", response_model=SuperAdminChange)
async def revoke_super_admin(
    uid: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAdminService = Depends(get_admin_service),
) -> SuperAdminChange:
    return await service.revoke_super_admin(user, uid)


# =============================================================================
# Content library
# =============================================================================


@router.get("/content/tasks", response_model=list[ContentTask])
async def list_tasks(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAdminService = Depends(get_admin_service),
) -> list[ContentTask]:
    return await service.list_tasks(user)


@router.post("/content/tasks", response_model=ContentTask, status_code=201)
async def create_task(
    request: CreateContentTaskRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAdminService = Depends(get_admin_service),
) -> ContentTask:
    return await service.create_task(user, request)


@router.patch("/content/tasks/{task_id}", response_model=ContentTask)
async def update_task(
    task_id: str,
    request: UpdateContentTaskRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAdminService = Depends(get_admin_service),
) -> ContentTask:
    return await service.update_task(user, task_id, request)


@router.delete("/content/tasks/{task_id}", status_code=204)
async def delete_task(
    task_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAdminService = Depends(get_admin_service),
) -> Response:
    await service.delete_task(user, task_id)
    return Response(status_code=204)


@router.get("/content/roadmaps", response_model=list[ContentRoadmap])
async def list_roadmaps(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAdminService = Depends(get_admin_service),
) -> list[ContentRoadmap]:
    return await service.list_roadmaps(user)


@router.post("/content/roadmaps", response_model=ContentRoadmap, status_code=201)
async def create_roadmap(
    request: CreateRoadmapRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAdminService = Depends(get_admin_service),
) -> ContentRoadmap:
    return await service.create_roadmap(user, request)


@router.patch("/content/roadmaps/{roadmap_id}", response_model=ContentRoadmap)
async def update_roadmap(
    roadmap_id: str,
    request: UpdateRoadmapRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAdminService = Depends(get_admin_service),
) -> ContentRoadmap:
    return await service.update_roadmap(user, roadmap_id, request)


@router.delete("/content/roadmaps/{roadmap_id}", status_code=204)
async def delete_roadmap(
    roadmap_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAdminService = Depends(get_admin_service),
) -> Response:
    await service.delete_roadmap(user, roadmap_id)
    return Response(status_code=204)


# =============================================================================
# Bootstrap (no bearer token)
# =============================================================================


@bootstrap_router.post("/super-admin", response_model=SuperAdminChange)
async def bootstrap_super_admin(
    request: BootstrapRequest,
    service: IAdminService = Depends(get_admin_service),
) -> SuperAdminChange:
    """
    Grant the first super admin.

    Requires the configured bootstrap secret. In production the route
    refuses once any super admin exists.
    """
    return await service.bootstrap_super_admin(request)
