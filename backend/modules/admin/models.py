"""
Admin module data models.

Request and response shapes for platform operators (super admins):
organizations they manage, invites, super-admin grants and the shared
content library.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import AliasChoices, BaseModel, EmailStr, Field, field_validator, model_validator

from modules.access.models import MembershipStatus, Role
from modules.invites.models import InviteSummary
from shared.documents import as_utc


class CreateManagedOrganizationRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    country: Optional[str] = Field(None, max_length=100)


class AdminInviteRole(str, Enum):
    """Roles an operator can invite into an organization."""

    ORG_ADMIN = "org_admin"
    SPECIALIST = "specialist"
    PARENT = "parent"


class CreateAdminInviteRequest(BaseModel):
    org_id: str = Field(..., min_length=1, validation_alias=AliasChoices("org_id", "orgId"))
    role: AdminInviteRole
    expires_at: Optional[datetime] = Field(
        None, validation_alias=AliasChoices("expires_at", "expiresAt")
    )
    expires_in_days: Optional[int] = Field(
        None, ge=1, le=365, validation_alias=AliasChoices("expires_in_days", "expiresInDays")
    )
    max_uses: Optional[int] = Field(
        None, ge=1, le=1000, validation_alias=AliasChoices("max_uses", "maxUses")
    )
    specialist_id: Optional[str] = Field(
        None, validation_alias=AliasChoices("specialist_id", "specialistId")
    )

    @field_validator("expires_at")
    @classmethod
    def assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)


class AdminInvite(InviteSummary):
    org_name: Optional[str] = None


# -----------------------------------------------------------------------------
# Organization listings
# -----------------------------------------------------------------------------


class OrgStaffMember(BaseModel):
    uid: str
    email: str = ""
    name: str = "Unknown"
    role: Role
    status: MembershipStatus
    joined_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class LinkedChild(BaseModel):
    id: str
    name: str = "Unknown"
    age: Optional[int] = None


class OrgParentEntry(BaseModel):
    id: str
    name: str = "Unknown"
    email: Optional[str] = None
    phone: Optional[str] = None
    linked_children: list[LinkedChild] = Field(default_factory=list)
    linked_specialist_uid: Optional[str] = None
    joined_at: Optional[datetime] = None


class OrgChildEntry(BaseModel):
    id: str
    name: str = "Unknown"
    age: Optional[int] = None
    parent_user_id: Optional[str] = None
    assigned_specialist_id: Optional[str] = None
    assigned_at: Optional[datetime] = None


# -----------------------------------------------------------------------------
# Super admins
# -----------------------------------------------------------------------------


class GrantSuperAdminRequest(BaseModel):
    email: EmailStr


class SuperAdminEntry(BaseModel):
    uid: str
    email: str = ""
    display_name: Optional[str] = None
    created_at: Optional[datetime] = None


class SuperAdminChange(BaseModel):
    """Result of a grant or revoke; takes effect on the user's next token refresh."""

    uid: str
    email: Optional[str] = None
    message: str
    note: str = "User must sign in again for the change to take effect"


class AdminCheck(BaseModel):
    uid: str
    email: str
    is_super_admin: bool
    via_allow_list: bool = False
    environment: Optional[str] = None


class BootstrapRequest(BaseModel):
    email: EmailStr
    secret_key: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("secret_key", "secretKey")
    )


# -----------------------------------------------------------------------------
# Content library
# -----------------------------------------------------------------------------


class AgeRange(BaseModel):
    min: int = Field(..., ge=0)
    max: int = Field(..., le=18)

    @model_validator(mode="after")
    def _ordered(self) -> "AgeRange":
        if self.min > self.max:
            raise ValueError("age_range.min must not exceed age_range.max")
        return self


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class MediaType(str, Enum):
    VIDEO = "video"
    IMAGE = "image"
    NONE = "none"


class ContentTaskFields(BaseModel):
    description: Optional[str] = None
    category: Optional[str] = None
    age_range: Optional[AgeRange] = Field(
        None, validation_alias=AliasChoices("age_range", "ageRange")
    )
    difficulty: Optional[Difficulty] = None
    estimated_duration: Optional[int] = Field(
        None, ge=0, validation_alias=AliasChoices("estimated_duration", "estimatedDuration")
    )
    instructions: Optional[list[str]] = None
    video_url: Optional[str] = Field(None, validation_alias=AliasChoices("video_url", "videoUrl"))
    image_url: Optional[str] = Field(None, validation_alias=AliasChoices("image_url", "imageUrl"))
    media_type: Optional[MediaType] = Field(
        None, validation_alias=AliasChoices("media_type", "mediaType")
    )


class CreateContentTaskRequest(ContentTaskFields):
    title: str = Field(..., min_length=1, max_length=200)


class UpdateContentTaskRequest(ContentTaskFields):
    title: Optional[str] = Field(None, min_length=1, max_length=200)


class ContentTask(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    category: Optional[str] = None
    age_range: Optional[AgeRange] = None
    difficulty: Optional[Difficulty] = None
    estimated_duration: Optional[int] = None
    instructions: list[str] = Field(default_factory=list)
    video_url: Optional[str] = None
    image_url: Optional[str] = None
    media_type: Optional[MediaType] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RoadmapFields(BaseModel):
    description: Optional[str] = None
    category: Optional[str] = None
    age_range: Optional[AgeRange] = Field(
        None, validation_alias=AliasChoices("age_range", "ageRange")
    )


class CreateRoadmapRequest(RoadmapFields):
    name: str = Field(..., min_length=1, max_length=200)
    task_ids: list[str] = Field(
        default_factory=list, validation_alias=AliasChoices("task_ids", "taskIds")
    )


class UpdateRoadmapRequest(RoadmapFields):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    task_ids: Optional[list[str]] = Field(
        None, validation_alias=AliasChoices("task_ids", "taskIds")
    )


class ContentRoadmap(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    age_range: Optional[AgeRange] = None
    task_ids: list[str] = Field(default_factory=list)
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
