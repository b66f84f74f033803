"""
Groups module data models.

Groups are private to the member who created them within one
organization and hold parents (with a subset of their children).
"""

from datetime import datetime
from typing import Optional
from pydantic import AliasChoices, BaseModel, Field

DEFAULT_GROUP_COLOR = "#6366f1"
COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class Group(BaseModel):
    id: str
    owner_uid: str
    org_id: str
    name: str
    description: Optional[str] = None
    color: str = DEFAULT_GROUP_COLOR
    parent_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class GroupChild(BaseModel):
    id: str
    name: str = "Unknown"
    age: Optional[int] = None


class GroupParent(BaseModel):
    parent_user_id: str
    name: str = "Unknown"
    email: Optional[str] = None
    children: list[GroupChild] = Field(default_factory=list)
    added_at: Optional[datetime] = None


class GroupDetail(Group):
    parents: list[GroupParent] = Field(default_factory=list)


class GroupMembership(BaseModel):
    """Stored record of a parent in a group."""

    group_id: str
    parent_user_id: str
    child_ids: list[str] = Field(default_factory=list)
    added_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CreateGroupRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    color: Optional[str] = Field(None, pattern=COLOR_PATTERN)


class UpdateGroupRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    color: Optional[str] = Field(None, pattern=COLOR_PATTERN)


class AddParentRequest(BaseModel):
    parent_user_id: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("parent_user_id", "parentUserId")
    )
    child_ids: list[str] = Field(
        default_factory=list, validation_alias=AliasChoices("child_ids", "childIds")
    )
