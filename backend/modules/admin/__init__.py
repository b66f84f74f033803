"""
Admin module.

Platform operator (super admin) operations: managed organizations and
their invites, super-admin grants, the shared content library and the
one-time bootstrap of the first operator.

Public API:
- IAdminService: Interface for operator operations
- AdminInvite, ContentTask, ContentRoadmap: Read models
- Admin exceptions
"""

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
    SuperAdminChange,
    SuperAdminEntry,
)
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

__all__ = [
    # Interface
    "IAdminService",
    # Models
    "AdminCheck",
    "AdminInvite",
    "AdminInviteRole",
    "BootstrapRequest",
    "ContentRoadmap",
    "ContentTask",
    "CreateAdminInviteRequest",
    "CreateContentTaskRequest",
    "CreateManagedOrganizationRequest",
    "CreateRoadmapRequest",
    "GrantSuperAdminRequest",
    "SuperAdminChange",
    "SuperAdminEntry",
    # Exceptions
    "BootstrapClosedError",
    "BootstrapNotConfiguredError",
    "ContentNotFoundError",
    "DuplicateOrganizationError",
    "InvalidBootstrapKeyError",
    "NotASuperAdminError",
    "OrganizationNotActiveError",
    "OrganizationNotOwnedError",
    "SelfRevokeError",
]
