"""
Organization service implementation.
"""

import logging

from modules.access.exceptions import OrganizationNotFoundError
from modules.access.interfaces import IAccessService
from modules.access.models import OrganizationType, Role
from modules.access.repository import (
    MembershipRepository,
    OrganizationRepository,
    SpecialistRepository,
    default_display_name,
)
from shared.models import AuthenticatedUser

from .exceptions import ParentContactNotFoundError
from .interfaces import IOrganizationService
from .models import (
    CreateOrganizationRequest,
    CreateParentContactRequest,
    MeResponse,
    OrganizationRoleEntry,
    OrganizationSummary,
    ParentContact,
    ProfileResponse,
    SessionResponse,
    TeamMember,
    UpdateParentContactRequest,
    UpdateProfileRequest,
)
from .repository import ParentContactRepository

logger = logging.getLogger(__name__)


class OrganizationService(IOrganizationService):
    """Implementation of the organization service."""

    def __init__(
        self,
        access: IAccessService,
        organizations: OrganizationRepository,
        memberships: MembershipRepository,
        specialists: SpecialistRepository,
        parent_contacts: ParentContactRepository,
    ):
        self._access = access
        self._organizations = organizations
        self._memberships = memberships
        self._specialists = specialists
        self._parent_contacts = parent_contacts

    # -------------------------------------------------------------------------
    # Organizations
    # -------------------------------------------------------------------------

    async def create_organization(
        self, user: AuthenticatedUser, request: CreateOrganizationRequest
    ) -> OrganizationSummary:
        profile = await self._specialists.get(user.id)
        owner_name = profile.name if profile else (user.name or default_display_name(user.email))
        name = (request.name or "").strip() or f"{owner_name}'s Practice"

        org = await self._organizations.create(
            name=name,
            created_by=user.id,
            country=request.country,
            org_type=OrganizationType.PERSONAL,
        )
        await self._memberships.upsert(org.id, user.id, Role.ORG_ADMIN)
        await self._specialists.upsert(
            user.id, email=user.email, name=owner_name, org_id=org.id, role=Role.ORG_ADMIN
        )
        logger.info(f"Organization {org.id} ({name}) created by {user.id}")

        return OrganizationSummary(**org.model_dump(exclude={"created_by"}), role=Role.ORG_ADMIN)

    async def get_organization(
        self, user: AuthenticatedUser, org_id: str
    ) -> OrganizationSummary:
        org = await self._organizations.get(org_id)
        if org is None:
            raise OrganizationNotFoundError(org_id)
        effective = await self._access.resolve_effective_role(user, org_id)
        return OrganizationSummary(
            **org.model_dump(exclude={"created_by"}),
            role=effective.role,
            via_super_admin=effective.via_super_admin,
        )

    async def list_team(self, user: AuthenticatedUser, org_id: str) -> list[TeamMember]:
        await self._access.require_org_admin(user, org_id)
        members = await self._memberships.list_for_org(org_id)
        profiles = await self._specialists.get_many([m.uid for m in members])

        team = []
        for member in members:
            profile = profiles.get(member.uid)
            team.append(
                TeamMember(
                    uid=member.uid,
                    email=profile.email if profile else "",
                    name=profile.name if profile else "Unknown",
                    role=member.role,
                    joined_at=member.joined_at,
                )
            )
        return team

    # -------------------------------------------------------------------------
    # Parent contacts
    # -------------------------------------------------------------------------

    async def list_parent_contacts(
        self, user: AuthenticatedUser, org_id: str
    ) -> list[ParentContact]:
        await self._access.require_org_admin(user, org_id)
        return await self._parent_contacts.list_for_org(org_id)

    async def create_parent_contact(
        self, user: AuthenticatedUser, org_id: str, request: CreateParentContactRequest
    ) -> ParentContact:
        await self._access.require_org_admin(user, org_id)
        contact = await self._parent_contacts.create(
            org_id,
            name=request.name,
            email=request.email,
            phone=request.phone,
            linked_children=request.child_ids,
        )
        logger.info(f"Parent contact {contact.id} created in org {org_id}")
        return contact

    async def update_parent_contact(
        self,
        user: AuthenticatedUser,
        org_id: str,
        contact_id: str,
        request: UpdateParentContactRequest,
    ) -> ParentContact:
        await self._access.require_org_admin(user, org_id)
        if await self._parent_contacts.get(org_id, contact_id) is None:
            raise ParentContactNotFoundError(contact_id)
        updates = request.model_dump(exclude_unset=True)
        return await self._parent_contacts.update(org_id, contact_id, updates)

    async def delete_parent_contact(
        self, user: AuthenticatedUser, org_id: str, contact_id: str
    ) -> None:
        await self._access.require_org_admin(user, org_id)
        if await self._parent_contacts.get(org_id, contact_id) is None:
            raise ParentContactNotFoundError(contact_id)
        await self._parent_contacts.delete(contact_id)
        logger.info(f"Parent contact {contact_id} deleted from org {org_id}")

    # -------------------------------------------------------------------------
    # Profile and session
    # -------------------------------------------------------------------------

    async def get_me(self, user: AuthenticatedUser) -> MeResponse:
        profile = await self._specialists.get(user.id)
        name = profile.name if profile else (user.name or default_display_name(user.email))
        roles = await self._access.list_org_roles(user)
        return MeResponse(
            uid=user.id,
            email=user.email,
            name=name,
            is_super_admin=self._access.is_super_admin(user),
            organizations=[
                OrganizationRoleEntry(
                    org_id=entry.organization.id,
                    org_name=entry.organization.name or entry.organization.id,
                    role=entry.role,
                )
                for entry in roles
            ],
        )

    async def update_me(
        self, user: AuthenticatedUser, request: UpdateProfileRequest
    ) -> ProfileResponse:
        profile = await self._specialists.upsert(user.id, email=user.email, name=request.name)
        return ProfileResponse(uid=user.id, email=profile.email or user.email, name=profile.name)

    async def get_session(self, user: AuthenticatedUser) -> SessionResponse:
        if await self._specialists.get(user.id) is None:
            return SessionResponse(has_org=False)
        memberships = await self._memberships.list_for_user(user.id)
        if not memberships:
            return SessionResponse(has_org=False)
        return SessionResponse(has_org=True, org_id=memberships[0].org_id)
