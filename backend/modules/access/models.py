"""
Access module data models.

Tenancy records (organizations, memberships, child links) and the
results of authorization decisions.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class Role(str, Enum):
    """Role of a member within one organization."""

    ORG_ADMIN = "org_admin"
    SPECIALIST = "specialist"


class MembershipStatus(str, Enum):
    """Only active memberships confer access."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class OrganizationType(str, Enum):
    MANAGED = "managed"    # Created by a platform operator
    PERSONAL = "personal"  # Self-serve, created by its first admin


class Organization(BaseModel):
    """A tenant: owns members, child links, groups and invites."""

    id: str = Field(..., description="Organization ID")
    name: str = Field(..., description="Display name")
    country: Optional[str] = Field(None, description="Country of operation")
    created_by: str = Field(..., description="UID of the creator")
    created_at: Optional[datetime] = None
    is_active: bool = Field(default=True, description="Inactive orgs cannot issue or accept invites")
    type: OrganizationType = OrganizationType.MANAGED


class Membership(BaseModel):
    """One per (organization, user) pair."""

    org_id: str
    uid: str
    role: Role = Role.SPECIALIST
    status: MembershipStatus = MembershipStatus.ACTIVE
    joined_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status == MembershipStatus.ACTIVE


class ChildLink(BaseModel):
    """Makes a child visible to an organization, optionally assigned to one specialist."""

    org_id: str
    child_id: str
    assigned: bool = False
    assigned_specialist_id: Optional[str] = None
    assigned_at: Optional[datetime] = None
    parent_user_id: Optional[str] = None


class EffectiveRole(BaseModel):
    """Outcome of role resolution for one caller in one organization."""

    org_id: str
    uid: str
    role: Role
    status: MembershipStatus = MembershipStatus.ACTIVE
    via_super_admin: bool = Field(
        default=False, description="Granted by the super-admin creator rule, not a membership"
    )

    model_config = {"frozen": True}

    @property
    def is_org_admin(self) -> bool:
        return self.role == Role.ORG_ADMIN


class OrgRole(BaseModel):
    """An organization the caller can act in, with the role they hold there."""

    organization: Organization
    role: Role
    via_super_admin: bool = False


class ChildAccess(BaseModel):
    """Proof that the caller may read and write a child's record."""

    effective_role: EffectiveRole
    link: ChildLink

    model_config = {"frozen": True}


class SpecialistProfile(BaseModel):
    """Portal profile of a staff user (specialist or admin)."""

    uid: str
    email: str = ""
    name: str = "Specialist"
    org_id: Optional[str] = Field(None, description="Most recently joined organization")
    role: Optional[Role] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class OrgParent(BaseModel):
    """Links a parent user to an organization. Parents never hold memberships."""

    org_id: str
    parent_user_id: str
    linked_specialist_uid: Optional[str] = None
    joined_at: Optional[datetime] = None
