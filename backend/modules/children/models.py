"""
Children module data models.

Child records, progress and task activity are written by the family app;
the portal reads them. Notes are written by specialists.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import AliasChoices, BaseModel, Field


class Mood(str, Enum):
    GOOD = "good"
    OK = "ok"
    HARD = "hard"


class ChildRecord(BaseModel):
    """A child profile as stored by the family app."""

    id: str
    name: str = "Unknown"
    age: Optional[int] = None
    organization_id: Optional[str] = None
    last_active_date: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ChildProgress(BaseModel):
    current_step_id: Optional[str] = None
    current_step_number: Optional[int] = None


class ChildTask(BaseModel):
    id: str
    child_id: str
    title: str = "Untitled Task"
    status: str = "pending"
    updated_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None


class ChildFeedback(BaseModel):
    id: str
    child_id: str
    mood: Mood = Mood.OK
    comment: Optional[str] = None
    timestamp: Optional[datetime] = None


# -----------------------------------------------------------------------------
# API models
# -----------------------------------------------------------------------------


class ChildSummary(BaseModel):
    """A child as listed for an organization."""

    id: str
    name: str
    age: Optional[int] = None
    assigned_specialist_id: Optional[str] = None
    speech_step_id: Optional[str] = None
    speech_step_number: Optional[int] = None
    last_active_date: Optional[datetime] = None
    completed_tasks_count: int = 0


class RecentTask(BaseModel):
    id: str
    title: str
    status: str
    completed_at: Optional[datetime] = None


class ChildDetail(ChildSummary):
    organization_id: str
    recent_tasks: list[RecentTask] = Field(default_factory=list)


class DayFeedback(BaseModel):
    mood: Mood
    comment: Optional[str] = None
    timestamp: datetime


class ActivityDay(BaseModel):
    date: str = Field(..., description="UTC day, YYYY-MM-DD")
    tasks_attempted: int = 0
    tasks_completed: int = 0
    feedback: Optional[DayFeedback] = None


class TimelineResponse(BaseModel):
    days: list[ActivityDay]


class ConnectedChild(BaseModel):
    child_id: str
    child_name: str = "Unknown"
    child_age: Optional[int] = None
    assigned_at: Optional[datetime] = None


class ParentConnection(BaseModel):
    """A parent and the children they linked to the organization."""

    parent_user_id: str
    parent_name: str = "Unknown"
    parent_email: Optional[str] = None
    specialist_id: Optional[str] = None
    joined_at: Optional[datetime] = None
    children: list[ConnectedChild] = Field(default_factory=list)


class ConnectionsResponse(BaseModel):
    ok: bool = True
    connections: list[ParentConnection]
    count: int


class AssignChildRequest(BaseModel):
    child_id: str = Field(..., min_length=1, validation_alias=AliasChoices("child_id", "childId"))
    specialist_id: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("specialist_id", "specialistId")
    )


class UnassignChildRequest(BaseModel):
    child_id: str = Field(..., min_length=1, validation_alias=AliasChoices("child_id", "childId"))


class AssignmentResult(BaseModel):
    ok: bool = True
    child_id: str
    specialist_id: Optional[str] = None


class Note(BaseModel):
    """A specialist's note on a child."""

    id: str
    child_id: str
    org_id: str
    specialist_id: str
    specialist_name: str = "Unknown"
    text: str
    tags: list[str] = Field(default_factory=list)
    visible_to_parent: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CreateNoteRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=5000)
    tags: list[str] = Field(default_factory=list)
    visible_to_parent: bool = True
