"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations.

Repositories share one document store; which store is used depends on
``settings.document_backend``.
"""

from typing import TYPE_CHECKING, Optional

from shared.config import Settings, get_settings

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.access.interfaces import IAccessService
    from modules.access.repository import (
        ChildLinkRepository,
        MembershipRepository,
        OrganizationRepository,
        OrgParentRepository,
        SpecialistRepository,
    )
    from modules.admin.interfaces import IAdminService
    from modules.auth.interfaces import IAuthService
    from modules.children.interfaces import IChildrenService
    from modules.children.repository import ChildRepository
    from modules.groups.interfaces import IGroupService
    from modules.invites.interfaces import IInviteService
    from modules.organizations.interfaces import IOrganizationService
    from shared.documents import IDocumentStore


class ServiceContainer:
    """
    Container for all service instances.

    This class manages the lifecycle of service instances and their
    dependencies. Services are created lazily on first access.

    All services are cached as singletons within the container.
    Use reset() to clear all cached services for testing.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        store: "Optional[IDocumentStore]" = None,
        auth: "Optional[IAuthService]" = None,
    ) -> None:
        self._settings = settings
        self._store = store
        self._auth_service = auth
        self._reset_cached()

    def _reset_cached(self) -> None:
        self._organizations: "OrganizationRepository | None" = None
        self._memberships: "MembershipRepository | None" = None
        self._child_links: "ChildLinkRepository | None" = None
        self._specialists: "SpecialistRepository | None" = None
        self._org_parents: "OrgParentRepository | None" = None
        self._children: "ChildRepository | None" = None
        self._access_service: "IAccessService | None" = None
        self._invite_service: "IInviteService | None" = None
        self._children_service: "IChildrenService | None" = None
        self._group_service: "IGroupService | None" = None
        self._organization_service: "IOrganizationService | None" = None
        self._admin_service: "IAdminService | None" = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def store(self) -> "IDocumentStore":
        """Get the document store shared by all repositories."""
        if self._store is None:
            from shared.database import get_document_store
            self._store = get_document_store()
        return self._store

    # -------------------------------------------------------------------------
    # Repositories
    # -------------------------------------------------------------------------

    @property
    def organizations(self) -> "OrganizationRepository":
        if self._organizations is None:
            from modules.access.repository import OrganizationRepository
            self._organizations = OrganizationRepository(self.store)
        return self._organizations

    @property
    def memberships(self) -> "MembershipRepository":
        if self._memberships is None:
            from modules.access.repository import MembershipRepository
            self._memberships = MembershipRepository(self.store)
        return self._memberships

    @property
    def child_links(self) -> "ChildLinkRepository":
        if self._child_links is None:
            from modules.access.repository import ChildLinkRepository
            self._child_links = ChildLinkRepository(self.store)
        return self._child_links

    @property
    def specialists(self) -> "SpecialistRepository":
        if self._specialists is None:
            from modules.access.repository import SpecialistRepository
            self._specialists = SpecialistRepository(self.store)
        return self._specialists

    @property
    def org_parents(self) -> "OrgParentRepository":
        if self._org_parents is None:
            from modules.access.repository import OrgParentRepository
            self._org_parents = OrgParentRepository(self.store)
        return self._org_parents

    @property
    def children(self) -> "ChildRepository":
        if self._children is None:
            from modules.children.repository import ChildRepository
            self._children = ChildRepository(self.store)
        return self._children

    # -------------------------------------------------------------------------
    # Services
    # -------------------------------------------------------------------------

    @property
    def auth(self) -> "IAuthService":
        """Get the auth service instance."""
        if self._auth_service is None:
            from modules.auth.service import AuthService
            self._auth_service = AuthService(settings=self.settings)
        return self._auth_service

    @property
    def access(self) -> "IAccessService":
        """Get the access service instance."""
        if self._access_service is None:
            from modules.access.policy import SuperAdminPolicy
            from modules.access.service import AccessService
            self._access_service = AccessService(
                organizations=self.organizations,
                memberships=self.memberships,
                child_links=self.child_links,
                policy=SuperAdminPolicy.from_settings(self.settings),
            )
        return self._access_service

    @property
    def invites(self) -> "IInviteService":
        """Get the invite service instance."""
        if self._invite_service is None:
            from modules.invites.repository import InviteRepository
            from modules.invites.service import InviteService
            self._invite_service = InviteService(
                invites=InviteRepository(self.store),
                organizations=self.organizations,
                memberships=self.memberships,
                child_links=self.child_links,
                specialists=self.specialists,
                org_parents=self.org_parents,
                children=self.children,
                access=self.access,
                frontend_url=self.settings.frontend_url,
            )
        return self._invite_service

    @property
    def children_service(self) -> "IChildrenService":
        """Get the children service instance."""
        if self._children_service is None:
            from modules.children.repository import NoteRepository
            from modules.children.service import ChildrenService
            self._children_service = ChildrenService(
                access=self.access,
                child_links=self.child_links,
                children=self.children,
                notes=NoteRepository(self.store),
                memberships=self.memberships,
                specialists=self.specialists,
                org_parents=self.org_parents,
                auth=self.auth,
            )
        return self._children_service

    @property
    def groups(self) -> "IGroupService":
        """Get the group service instance."""
        if self._group_service is None:
            from modules.groups.repository import GroupRepository
            from modules.groups.service import GroupService
            self._group_service = GroupService(
                access=self.access,
                groups=GroupRepository(self.store),
                child_links=self.child_links,
                children=self.children,
                auth=self.auth,
            )
        return self._group_service

    @property
    def organization_service(self) -> "IOrganizationService":
        """Get the organization service instance."""
        if self._organization_service is None:
            from modules.organizations.repository import ParentContactRepository
            from modules.organizations.service import OrganizationService
            self._organization_service = OrganizationService(
                access=self.access,
                organizations=self.organizations,
                memberships=self.memberships,
                specialists=self.specialists,
                parent_contacts=ParentContactRepository(self.store),
            )
        return self._organization_service

    @property
    def admin(self) -> "IAdminService":
        """Get the admin service instance."""
        if self._admin_service is None:
            from modules.admin.repository import ContentRoadmapRepository, ContentTaskRepository
            from modules.admin.service import AdminService
            from modules.organizations.repository import ParentContactRepository
            self._admin_service = AdminService(
                access=self.access,
                auth=self.auth,
                invites=self.invites,
                organizations=self.organizations,
                memberships=self.memberships,
                specialists=self.specialists,
                org_parents=self.org_parents,
                child_links=self.child_links,
                children=self.children,
                parent_contacts=ParentContactRepository(self.store),
                tasks=ContentTaskRepository(self.store),
                roadmaps=ContentRoadmapRepository(self.store),
                bootstrap_secret_key=self.settings.bootstrap_secret_key,
                environment=self.settings.environment,
            )
        return self._admin_service

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._reset_cached()


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def set_container(container: ServiceContainer) -> None:
    """Install a pre-wired container (tests, local tooling)."""
    global _container
    _container = container


def reset_container() -> None:
    """
    Reset the service container.

    This clears the cached container, so the next call to get_container()
    will create a fresh container with new service instances.

    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_auth_service() -> "IAuthService":
    """FastAPI dependency for auth service."""
    return get_container().auth


def get_access_service() -> "IAccessService":
    """FastAPI dependency for access service."""
    return get_container().access


def get_invite_service() -> "IInviteService":
    """FastAPI dependency for invite service."""
    return get_container().invites


def get_children_service() -> "IChildrenService":
    """FastAPI dependency for children service."""
    return get_container().children_service


def get_group_service() -> "IGroupService":
    """FastAPI dependency for group service."""
    return get_container().groups


def get_organization_service() -> "IOrganizationService":
    """FastAPI dependency for organization service."""
    return get_container().organization_service


def get_admin_service() -> "IAdminService":
    """FastAPI dependency for admin service."""
    return get_container().admin
