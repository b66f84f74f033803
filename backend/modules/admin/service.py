"""
Admin service implementation.

Platform operator operations. Organization-scoped reads and invite
issuance are limited to organizations the operator created.
"""

import logging
from typing import Optional

from modules.access.exceptions import OrganizationNotFoundError
from modules.access.interfaces import IAccessService
from modules.access.models import Organization, OrganizationType, Role
from modules.access.repository import (
    ChildLinkRepository,
    MembershipRepository,
    OrganizationRepository,
    OrgParentRepository,
    SpecialistRepository,
)
from modules.auth.exceptions import UserNotFoundError
from modules.auth.interfaces import IAuthService
from modules.children.repository import ChildRepository
from modules.invites.interfaces import IInviteService
from modules.invites.models import InviteKind, InviteSummary
from modules.organizations.repository import ParentContactRepository
from shared.exceptions import NurooError
from shared.models import AuthenticatedUser

from .exceptions import (
    BootstrapClosedError,
    BootstrapNotConfiguredError,
    ContentNotFoundError,
    DuplicateOrganizationError,
    InvalidBootstrapKeyError,
    NotASuperAdminError,
    OrganizationNotActiveError,
    OrganizationNotOwnedError,
    SelfRevokeError,
)
from .interfaces import IAdminService
from .models import (
    AdminCheck,
    AdminInvite,
    AdminInviteRole,
    BootstrapRequest,
    ContentRoadmap,
    ContentTask,
    CreateAdminInviteRequest,
    CreateContentTaskRequest,
    CreateManagedOrganizationRequest,
    CreateRoadmapRequest,
    GrantSuperAdminRequest,
    LinkedChild,
    OrgChildEntry,
    OrgParentEntry,
    OrgStaffMember,
    SuperAdminChange,
    SuperAdminEntry,
    UpdateContentTaskRequest,
    UpdateRoadmapRequest,
)
from .repository import ContentRoadmapRepository, ContentTaskRepository

logger = logging.getLogger(__name__)

# Accepted outside production when no bootstrap secret is configured
DEV_BOOTSTRAP_KEY = "dev-bootstrap-key-2024"
SUPER_ADMIN_CLAIM = "super_admin"
USER_SCAN_LIMIT = 1000


class AdminService(IAdminService):
    """Implementation of the admin service."""

    def __init__(
        self,
        access: IAccessService,
        auth: IAuthService,
        invites: IInviteService,
        organizations: OrganizationRepository,
        memberships: MembershipRepository,
        specialists: SpecialistRepository,
        org_parents: OrgParentRepository,
        child_links: ChildLinkRepository,
        children: ChildRepository,
        parent_contacts: ParentContactRepository,
        tasks: ContentTaskRepository,
        roadmaps: ContentRoadmapRepository,
        bootstrap_secret_key: str = "",
        environment: str = "development",
    ):
        self._access = access
        self._auth = auth
        self._invites = invites
        self._organizations = organizations
        self._memberships = memberships
        self._specialists = specialists
        self._org_parents = org_parents
        self._child_links = child_links
        self._children = children
        self._parent_contacts = parent_contacts
        self._tasks = tasks
        self._roadmaps = roadmaps
        self._bootstrap_secret_key = bootstrap_secret_key
        self._environment = environment

    @property
    def _is_production(self) -> bool:
        return self._environment == "production"

    def check(self, user: AuthenticatedUser) -> AdminCheck:
        return AdminCheck(
            uid=user.id,
            email=user.email,
            is_super_admin=self._access.is_super_admin(user),
            via_allow_list=self._access.policy.via_allow_list(user),
            environment=self._environment,
        )

    # -------------------------------------------------------------------------
    # Organizations
    # -------------------------------------------------------------------------

    async def list_organizations(self, user: AuthenticatedUser) -> list[Organization]:
        self._access.require_super_admin(user)
        return await self._organizations.list_by_creator(user.id)

    async def create_organization(
        self, user: AuthenticatedUser, request: CreateManagedOrganizationRequest
    ) -> Organization:
        self._access.require_super_admin(user)
        name = request.name.strip()
        if await self._organizations.find_by_name(name, created_by=user.id) is not None:
            raise DuplicateOrganizationError(name)

        org = await self._organizations.create(
            name=name,
            created_by=user.id,
            country=request.country,
            org_type=OrganizationType.MANAGED,
        )
        logger.info(f"Organization {org.id} ({name}) created by super admin {user.id}")
        return org

    async def _owned_org(self, user: AuthenticatedUser, org_id: str) -> Organization:
        org = await self._organizations.get(org_id)
        if org is None:
            raise OrganizationNotFoundError(org_id)
        if org.created_by != user.id:
            raise OrganizationNotOwnedError(org_id)
        return org

    # -------------------------------------------------------------------------
    # Invites
    # -------------------------------------------------------------------------

    async def list_invites(self, user: AuthenticatedUser) -> list[AdminInvite]:
        self._access.require_super_admin(user)
        names: dict[str, Optional[str]] = {}
        invites = []
        for summary in await self._invites.list_created_by(user.id):
            if summary.org_id not in names:
                org = await self._organizations.get(summary.org_id)
                names[summary.org_id] = org.name if org else None
            invites.append(self._with_org_name(summary, names[summary.org_id]))
        return invites

    async def create_invite(
        self, user: AuthenticatedUser, request: CreateAdminInviteRequest
    ) -> AdminInvite:
        self._access.require_super_admin(user)
        org = await self._owned_org(user, request.org_id)
        if not org.is_active:
            raise OrganizationNotActiveError(org.id)

        if request.role == AdminInviteRole.PARENT:
            kind, role = InviteKind.PARENT, None
        else:
            kind, role = InviteKind.ORG, Role(request.role.value)

        summary = await self._invites.issue(
            org,
            issuer_uid=user.id,
            kind=kind,
            role=role,
            specialist_id=request.specialist_id if kind == InviteKind.PARENT else None,
            max_uses=request.max_uses,
            expires_in_days=request.expires_in_days,
            expires_at=request.expires_at,
        )
        return self._with_org_name(summary, org.name)

    async def revoke_invite(self, user: AuthenticatedUser, code: str) -> AdminInvite:
        self._access.require_super_admin(user)
        invite = await self._invites.get_invite(code)
        org = await self._owned_org(user, invite.org_id)
        summary = await self._invites.revoke(invite, user.id)
        return self._with_org_name(summary, org.name)

    @staticmethod
    def _with_org_name(summary: InviteSummary, org_name: Optional[str]) -> AdminInvite:
        return AdminInvite(**summary.model_dump(), org_name=org_name)

    # -------------------------------------------------------------------------
    # Organization listings
    # -------------------------------------------------------------------------

    async def list_org_specialists(
        self, user: AuthenticatedUser, org_id: str
    ) -> list[OrgStaffMember]:
        self._access.require_super_admin(user)
        await self._owned_org(user, org_id)

        members = [
            m
            for m in await self._memberships.list_for_org(org_id, status=None)
            if m.is_active or m.role == Role.ORG_ADMIN
        ]
        profiles = await self._specialists.get_many([m.uid for m in members])
        staff = []
        for member in members:
            profile = profiles.get(member.uid)
            staff.append(
                OrgStaffMember(
                    uid=member.uid,
                    email=profile.email if profile else "",
                    name=profile.name if profile else "Unknown",
                    role=member.role,
                    status=member.status,
                    joined_at=member.joined_at,
                    created_at=profile.created_at if profile else None,
                )
            )
        return staff

    async def list_org_parents(
        self, user: AuthenticatedUser, org_id: str
    ) -> list[OrgParentEntry]:
        self._access.require_super_admin(user)
        await self._owned_org(user, org_id)

        parents: dict[str, OrgParentEntry] = {}
        for contact in await self._parent_contacts.list_for_org(org_id):
            parents[contact.id] = OrgParentEntry(
                id=contact.id,
                name=contact.name,
                email=contact.email,
                phone=contact.phone,
                linked_children=[
                    await self._linked_child(child_id) for child_id in contact.linked_children
                ],
                joined_at=contact.created_at,
            )

        for org_parent in await self._org_parents.list_for_org(org_id):
            uid = org_parent.parent_user_id
            if uid in parents:
                continue
            name, email = await self._identity(uid)
            links = await self._child_links.list_for_org(org_id, parent_user_id=uid)
            parents[uid] = OrgParentEntry(
                id=uid,
                name=name or "Unknown",
                email=email,
                linked_children=[await self._linked_child(link.child_id) for link in links],
                linked_specialist_uid=org_parent.linked_specialist_uid,
                joined_at=org_parent.joined_at,
            )
        return list(parents.values())

    async def list_org_children(
        self, user: AuthenticatedUser, org_id: str
    ) -> list[OrgChildEntry]:
        self._access.require_super_admin(user)
        await self._owned_org(user, org_id)

        entries = []
        for link in await self._child_links.list_for_org(org_id):
            child = await self._children.get(link.child_id)
            entries.append(
                OrgChildEntry(
                    id=link.child_id,
                    name=child.name if child else "Unknown",
                    age=child.age if child else None,
                    parent_user_id=link.parent_user_id,
                    assigned_specialist_id=link.assigned_specialist_id,
                    assigned_at=link.assigned_at,
                )
            )
        return entries

    async def _linked_child(self, child_id: str) -> LinkedChild:
        child = await self._children.get(child_id)
        if child is None:
            return LinkedChild(id=child_id)
        return LinkedChild(id=child_id, name=child.name, age=child.age)

    async def _identity(self, uid: str) -> tuple[Optional[str], Optional[str]]:
        try:
            identity = await self._auth.get_user_by_id(uid)
        except NurooError as e:
            logger.warning(f"Parent lookup for {uid} failed: {e.message}")
            return None, None
        if identity is None:
            return None, None
        return identity.display_name, identity.email

    # -------------------------------------------------------------------------
    # Super admins
    # -------------------------------------------------------------------------

    async def list_super_admins(self, user: AuthenticatedUser) -> list[SuperAdminEntry]:
        self._access.require_super_admin(user)
        users = await self._auth.list_users(limit=USER_SCAN_LIMIT)
        return [
            SuperAdminEntry(
                uid=u.uid,
                email=u.email or "",
                display_name=u.display_name,
                created_at=u.created_at,
            )
            for u in users
            if u.is_super_admin
        ]

    async def grant_super_admin(
        self, user: AuthenticatedUser, request: GrantSuperAdminRequest
    ) -> SuperAdminChange:
        self._access.require_super_admin(user)
        target = await self._auth.get_user_by_email(request.email)
        if target is None:
            raise UserNotFoundError(request.email)

        await self._auth.set_custom_claims(target.uid, {SUPER_ADMIN_CLAIM: True})
        logger.info(f"Super admin granted to {target.uid} by {user.id}")
        return SuperAdminChange(
            uid=target.uid,
            email=target.email,
            message=f"Super Admin rights granted to {target.email}",
        )

    async def revoke_super_admin(self, user: AuthenticatedUser, uid: str) -> SuperAdminChange:
        self._access.require_super_admin(user)
        if uid == user.id:
            raise SelfRevokeError()

        target = await self._auth.get_user_by_id(uid)
        if target is None:
            raise UserNotFoundError(uid)
        if not target.is_super_admin:
            raise NotASuperAdminError(uid)

        # Claims are merged by the provider, so the flag is cleared rather than removed
        await self._auth.set_custom_claims(uid, {SUPER_ADMIN_CLAIM: False})
        logger.info(f"Super admin revoked from {uid} by {user.id}")
        return SuperAdminChange(
            uid=uid,
            email=target.email,
            message=f"Super Admin rights removed from {target.email}",
        )

    async def bootstrap_super_admin(self, request: BootstrapRequest) -> SuperAdminChange:
        expected = self._bootstrap_secret_key or (None if self._is_production else DEV_BOOTSTRAP_KEY)
        if not expected:
            raise BootstrapNotConfiguredError()
        if request.secret_key != expected:
            logger.warning(f"Bootstrap attempt for {request.email} with an invalid key")
            raise InvalidBootstrapKeyError()

        if self._is_production:
            users = await self._auth.list_users(limit=USER_SCAN_LIMIT)
            if any(u.is_super_admin for u in users):
                raise BootstrapClosedError()

        target = await self._auth.get_user_by_email(request.email)
        if target is None:
            raise UserNotFoundError(request.email)

        await self._auth.set_custom_claims(target.uid, {SUPER_ADMIN_CLAIM: True})
        logger.info(f"Bootstrapped super admin {target.uid} ({target.email})")
        return SuperAdminChange(
            uid=target.uid,
            email=target.email,
            message=f"Super Admin claim set for {target.email}",
        )

    # -------------------------------------------------------------------------
    # Content library
    # -------------------------------------------------------------------------

    async def list_tasks(self, user: AuthenticatedUser) -> list[ContentTask]:
        self._access.require_super_admin(user)
        return await self._tasks.list_all()

    async def create_task(
        self, user: AuthenticatedUser, request: CreateContentTaskRequest
    ) -> ContentTask:
        self._access.require_super_admin(user)
        task = await self._tasks.create(request.model_dump(exclude_none=True), created_by=user.id)
        logger.info(f"Content task {task.id} created by {user.id}")
        return task

    async def update_task(
        self, user: AuthenticatedUser, task_id: str, request: UpdateContentTaskRequest
    ) -> ContentTask:
        self._access.require_super_admin(user)
        if await self._tasks.get(task_id) is None:
            raise ContentNotFoundError("task", task_id)
        updates = request.model_dump(exclude_unset=True, exclude_none=True)
        return await self._tasks.update(task_id, updates)

    async def delete_task(self, user: AuthenticatedUser, task_id: str) -> None:
        self._access.require_super_admin(user)
        if not await self._tasks.delete(task_id):
            raise ContentNotFoundError("task", task_id)
        logger.info(f"Content task {task_id} deleted by {user.id}")

    async def list_roadmaps(self, user: AuthenticatedUser) -> list[ContentRoadmap]:
        self._access.require_super_admin(user)
        return await self._roadmaps.list_all()

    async def create_roadmap(
        self, user: AuthenticatedUser, request: CreateRoadmapRequest
    ) -> ContentRoadmap:
        self._access.require_super_admin(user)
        roadmap = await self._roadmaps.create(
            request.model_dump(exclude_none=True), created_by=user.id
        )
        logger.info(f"Content roadmap {roadmap.id} created by {user.id}")
        return roadmap

    async def update_roadmap(
        self, user: AuthenticatedUser, roadmap_id: str, request: UpdateRoadmapRequest
    ) -> ContentRoadmap:
        self._access.require_super_admin(user)
        if await self._roadmaps.get(roadmap_id) is None:
            raise ContentNotFoundError("roadmap", roadmap_id)
        updates = request.model_dump(exclude_unset=True, exclude_none=True)
        return await self._roadmaps.update(roadmap_id, updates)

    async def delete_roadmap(self, user: AuthenticatedUser, roadmap_id: str) -> None:
        self._access.require_super_admin(user)
        if not await self._roadmaps.delete(roadmap_id):
            raise ContentNotFoundError("roadmap", roadmap_id)
        logger.info(f"Content roadmap {roadmap_id} deleted by {user.id}")
