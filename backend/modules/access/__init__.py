"""
Access module.

Role Resolver (RBAC) and Child-Access Guard, plus the tenancy records
they read.

Public API:
- IAccessService: Interface for authorization decisions
- SuperAdminPolicy: Claim / operator allow-list check
- Role, MembershipStatus: Shared enums
- Organization, Membership, ChildLink: Tenancy records
- Access exceptions: NotAMemberError, NotYourChildError, etc.
"""

from .interfaces import IAccessService
from .policy import SuperAdminPolicy
from .models import (
    ChildAccess,
    ChildLink,
    EffectiveRole,
    Membership,
    MembershipStatus,
    Organization,
    OrganizationType,
    OrgParent,
    OrgRole,
    Role,
    SpecialistProfile,
)
from .exceptions import (
    ChildNotAssignedToOrgError,
    InactiveMemberError,
    NotAMemberError,
    NotYourChildError,
    OrgAdminRequiredError,
    OrganizationNotFoundError,
    SuperAdminRequiredError,
    UnassignedChildRequiresAdminError,
)

__all__ = [
    # Interface
    "IAccessService",
    "SuperAdminPolicy",
    # Models
    "ChildAccess",
    "ChildLink",
    "EffectiveRole",
    "Membership",
    "MembershipStatus",
    "Organization",
    "OrganizationType",
    "OrgParent",
    "OrgRole",
    "Role",
    "SpecialistProfile",
    # Exceptions
    "ChildNotAssignedToOrgError",
    "InactiveMemberError",
    "NotAMemberError",
    "NotYourChildError",
    "OrgAdminRequiredError",
    "OrganizationNotFoundError",
    "SuperAdminRequiredError",
    "UnassignedChildRequiresAdminError",
]
