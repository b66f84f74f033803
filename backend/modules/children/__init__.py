"""
Children module.

Read access to children linked to an organization (list, detail,
timeline, parent connections), specialist assignment and notes.

Public API:
- IChildrenService: Interface for child operations
- ChildSummary, ChildDetail, TimelineResponse: Read models
- Note, CreateNoteRequest: Specialist notes
- Children exceptions
"""

from .interfaces import IChildrenService
from .models import (
    ActivityDay,
    AssignChildRequest,
    AssignmentResult,
    ChildDetail,
    ChildRecord,
    ChildSummary,
    ConnectionsResponse,
    CreateNoteRequest,
    Note,
    ParentConnection,
    TimelineResponse,
    UnassignChildRequest,
)
from .exceptions import (
    ChildNotFoundError,
    NotASpecialistError,
    SpecialistInactiveError,
    SpecialistNotMemberError,
)

__all__ = [
    # Interface
    "IChildrenService",
    # Models
    "ActivityDay",
    "AssignChildRequest",
    "AssignmentResult",
    "ChildDetail",
    "ChildRecord",
    "ChildSummary",
    "ConnectionsResponse",
    "CreateNoteRequest",
    "Note",
    "ParentConnection",
    "TimelineResponse",
    "UnassignChildRequest",
    # Exceptions
    "ChildNotFoundError",
    "NotASpecialistError",
    "SpecialistInactiveError",
    "SpecialistNotMemberError",
]
