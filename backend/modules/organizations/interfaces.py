"""
Organizations module interface.
"""

from typing import Protocol, runtime_checkable

from shared.models import AuthenticatedUser

from .models import (
    CreateOrganizationRequest,
    CreateParentContactRequest,
    MeResponse,
    OrganizationSummary,
    ParentContact,
    ProfileResponse,
    SessionResponse,
    TeamMember,
    UpdateParentContactRequest,
    UpdateProfileRequest,
)


@runtime_checkable
class IOrganizationService(Protocol):
    """
    Interface for organization-level operations of a member.

    Covers self-serve organization creation, the team roster, parent
    contacts, and the caller's own profile and session.
    """

    async def create_organization(
        self, user: AuthenticatedUser, request: CreateOrganizationRequest
    ) -> OrganizationSummary:
        """Create a personal organization with the caller as its org_admin."""
        ...

    async def get_organization(
        self, user: AuthenticatedUser, org_id: str
    ) -> OrganizationSummary:
        """
        Get an organization together with the caller's role in it.

        Raises:
            OrganizationNotFoundError: If the organization does not exist
            NotAMemberError: If the caller has no role in it
        """
        ...

    async def list_team(self, user: AuthenticatedUser, org_id: str) -> list[TeamMember]:
        """Active members with their profile data (org_admin only)."""
        ...

    async def list_parent_contacts(
        self, user: AuthenticatedUser, org_id: str
    ) -> list[ParentContact]:
        ...

    async def create_parent_contact(
        self, user: AuthenticatedUser, org_id: str, request: CreateParentContactRequest
    ) -> ParentContact:
        ...

    async def update_parent_contact(
        self,
        user: AuthenticatedUser,
        org_id: str,
        contact_id: str,
        request: UpdateParentContactRequest,
    ) -> ParentContact:
        ...

    async def delete_parent_contact(
        self, user: AuthenticatedUser, org_id: str, contact_id: str
    ) -> None:
        ...

    async def get_me(self, user: AuthenticatedUser) -> MeResponse:
        """Profile of the caller and every organization they can act in."""
        ...

    async def update_me(
        self, user: AuthenticatedUser, request: UpdateProfileRequest
    ) -> ProfileResponse:
        """Create or rename the caller's profile."""
        ...

    async def get_session(self, user: AuthenticatedUser) -> SessionResponse:
        """Whether the caller has a profile and an active membership."""
        ...
