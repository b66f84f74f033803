"""
Children module interface.
"""

from typing import Protocol, runtime_checkable

from shared.models import AuthenticatedUser

from .models import (
    AssignChildRequest,
    AssignmentResult,
    ChildDetail,
    ChildSummary,
    ConnectionsResponse,
    CreateNoteRequest,
    Note,
    TimelineResponse,
    UnassignChildRequest,
)


@runtime_checkable
class IChildrenService(Protocol):
    """
    Interface for child data within an organization.

    Every per-child operation goes through the Child-Access Guard.
    """

    async def list_children(self, user: AuthenticatedUser, org_id: str) -> list[ChildSummary]:
        """
        Children visible to the caller.

        Org admins see every assigned child of the organization; specialists
        only the children assigned to them.
        """
        ...

    async def get_child(
        self, user: AuthenticatedUser, org_id: str, child_id: str
    ) -> ChildDetail:
        """Child detail with progress and the ten most recent tasks."""
        ...

    async def get_timeline(
        self, user: AuthenticatedUser, org_id: str, child_id: str, days: int = 30
    ) -> TimelineResponse:
        """Per-day activity for the last ``days`` days (clamped to 7..90)."""
        ...

    async def list_connections(
        self, user: AuthenticatedUser, org_id: str
    ) -> ConnectionsResponse:
        """Parents with the children they linked, scoped like list_children."""
        ...

    async def assign(
        self, user: AuthenticatedUser, org_id: str, request: AssignChildRequest
    ) -> AssignmentResult:
        """Assign a child to an active specialist (org_admin only)."""
        ...

    async def unassign(
        self, user: AuthenticatedUser, org_id: str, request: UnassignChildRequest
    ) -> AssignmentResult:
        """Clear the child's specialist; it stays assigned to the organization."""
        ...

    async def list_notes(
        self, user: AuthenticatedUser, org_id: str, child_id: str
    ) -> list[Note]:
        ...

    async def create_note(
        self, user: AuthenticatedUser, org_id: str, child_id: str, request: CreateNoteRequest
    ) -> Note:
        ...
