"""
Access service implementation.

Role Resolver and Child-Access Guard over the tenancy repositories.
"""

import logging

from shared.models import AuthenticatedUser

from .exceptions import (
    ChildNotAssignedToOrgError,
    InactiveMemberError,
    NotAMemberError,
    NotYourChildError,
    OrgAdminRequiredError,
    SuperAdminRequiredError,
    UnassignedChildRequiresAdminError,
)
from .interfaces import IAccessService
from .models import ChildAccess, EffectiveRole, MembershipStatus, OrgRole, Role
from .policy import SuperAdminPolicy
from .repository import ChildLinkRepository, MembershipRepository, OrganizationRepository

logger = logging.getLogger(__name__)


class AccessService(IAccessService):
    """Implementation of the access service."""

    def __init__(
        self,
        organizations: OrganizationRepository,
        memberships: MembershipRepository,
        child_links: ChildLinkRepository,
        policy: SuperAdminPolicy,
    ):
        self._organizations = organizations
        self._memberships = memberships
        self._child_links = child_links
        self._policy = policy

    @property
    def policy(self) -> SuperAdminPolicy:
        return self._policy

    def is_super_admin(self, user: AuthenticatedUser) -> bool:
        return self._policy.is_super_admin(user)

    def require_super_admin(self, user: AuthenticatedUser) -> None:
        if not self.is_super_admin(user):
            raise SuperAdminRequiredError()

    async def resolve_effective_role(
        self, user: AuthenticatedUser, org_id: str
    ) -> EffectiveRole:
        if self.is_super_admin(user):
            org = await self._organizations.get(org_id)
            if org is not None and org.created_by == user.id:
                logger.info(f"Super admin {user.id} acting as org_admin of {org_id} (creator)")
                return EffectiveRole(
                    org_id=org_id, uid=user.id, role=Role.ORG_ADMIN, via_super_admin=True
                )

        membership = await self._memberships.get(org_id, user.id)
        if membership is None:
            raise NotAMemberError(org_id)
        if membership.status != MembershipStatus.ACTIVE:
            raise InactiveMemberError(org_id)
        return EffectiveRole(
            org_id=org_id, uid=user.id, role=membership.role, status=membership.status
        )

    async def require_org_admin(
        self, user: AuthenticatedUser, org_id: str
    ) -> EffectiveRole:
        effective = await self.resolve_effective_role(user, org_id)
        if not effective.is_org_admin:
            raise OrgAdminRequiredError(org_id)
        return effective

    async def authorize_child_access(
        self, user: AuthenticatedUser, org_id: str, child_id: str
    ) -> ChildAccess:
        effective = await self.resolve_effective_role(user, org_id)

        link = await self._child_links.get(org_id, child_id)
        if link is None or not link.assigned:
            raise ChildNotAssignedToOrgError(org_id, child_id)

        if effective.is_org_admin:
            return ChildAccess(effective_role=effective, link=link)

        if not link.assigned_specialist_id:
            raise UnassignedChildRequiresAdminError(child_id)
        if link.assigned_specialist_id != user.id:
            raise NotYourChildError(child_id)
        return ChildAccess(effective_role=effective, link=link)

    async def list_org_roles(self, user: AuthenticatedUser) -> list[OrgRole]:
        roles: dict[str, OrgRole] = {}

        if self.is_super_admin(user):
            for org in await self._organizations.list_by_creator(user.id):
                roles[org.id] = OrgRole(organization=org, role=Role.ORG_ADMIN, via_super_admin=True)

        for membership in await self._memberships.list_for_user(user.id):
            if membership.org_id in roles:
                continue
            org = await self._organizations.get(membership.org_id)
            if org is None:
                logger.warning(
                    f"Membership {membership.org_id}:{user.id} points at a missing organization"
                )
                continue
            roles[org.id] = OrgRole(organization=org, role=membership.role)

        return list(roles.values())
