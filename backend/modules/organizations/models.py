"""
Organizations module data models.
"""

from datetime import datetime
from typing import Optional
from pydantic import AliasChoices, BaseModel, EmailStr, Field

from modules.access.models import OrganizationType, Role


class CreateOrganizationRequest(BaseModel):
    """Self-serve organization; the name defaults to "<caller>'s Practice"."""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    country: Optional[str] = Field(None, max_length=100)


class OrganizationSummary(BaseModel):
    """An organization as seen by one of its members."""

    id: str
    name: str
    country: Optional[str] = None
    type: OrganizationType = OrganizationType.MANAGED
    is_active: bool = True
    created_at: Optional[datetime] = None
    role: Role
    via_super_admin: bool = False


class TeamMember(BaseModel):
    uid: str
    email: str = ""
    name: str = "Unknown"
    role: Role
    joined_at: Optional[datetime] = None


class ParentContact(BaseModel):
    """Contact card for a parent; not an authenticated user."""

    id: str
    org_id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    linked_children: list[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CreateParentContactRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    child_ids: list[str] = Field(
        default_factory=list, validation_alias=AliasChoices("child_ids", "childIds")
    )


class UpdateParentContactRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    linked_children: Optional[list[str]] = Field(
        None, validation_alias=AliasChoices("linked_children", "linkedChildren")
    )


# -----------------------------------------------------------------------------
# Profile and session
# -----------------------------------------------------------------------------


class OrganizationRoleEntry(BaseModel):
    org_id: str
    org_name: str
    role: Role


class MeResponse(BaseModel):
    uid: str
    email: str
    name: str
    is_super_admin: bool = False
    organizations: list[OrganizationRoleEntry] = Field(default_factory=list)


class UpdateProfileRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)


class ProfileResponse(BaseModel):
    uid: str
    email: str
    name: str


class SessionResponse(BaseModel):
    has_org: bool
    org_id: Optional[str] = None
