"""
Organizations module.

Self-serve organization creation, team roster, parent contacts and the
caller's profile/session.

Public API:
- IOrganizationService: Interface for organization operations
- OrganizationSummary, TeamMember, ParentContact: Read models
- MeResponse, SessionResponse: Profile and session views
"""

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
from .exceptions import ParentContactNotFoundError

__all__ = [
    # Interface
    "IOrganizationService",
    # Models
    "CreateOrganizationRequest",
    "CreateParentContactRequest",
    "MeResponse",
    "OrganizationRoleEntry",
    "OrganizationSummary",
    "ParentContact",
    "ProfileResponse",
    "SessionResponse",
    "TeamMember",
    "UpdateParentContactRequest",
    "UpdateProfileRequest",
    # Exceptions
    "ParentContactNotFoundError",
]
