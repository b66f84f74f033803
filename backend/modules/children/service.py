"""
Children service implementation.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

from modules.access.exceptions import ChildNotAssignedToOrgError
from modules.access.interfaces import IAccessService
from modules.access.models import ChildLink, MembershipStatus, Role
from modules.access.repository import (
    ChildLinkRepository,
    MembershipRepository,
    OrgParentRepository,
    SpecialistRepository,
    default_display_name,
)
from modules.auth.interfaces import IAuthService
from shared.documents import utcnow
from shared.exceptions import NurooError
from shared.models import AuthenticatedUser

from .exceptions import (
    ChildNotFoundError,
    NotASpecialistError,
    SpecialistInactiveError,
    SpecialistNotMemberError,
)
from .interfaces import IChildrenService
from .models import (
    ActivityDay,
    AssignChildRequest,
    AssignmentResult,
    ChildDetail,
    ChildSummary,
    ConnectedChild,
    ConnectionsResponse,
    CreateNoteRequest,
    DayFeedback,
    Note,
    ParentConnection,
    RecentTask,
    TimelineResponse,
    UnassignChildRequest,
)
from .repository import ChildRepository, NoteRepository

logger = logging.getLogger(__name__)

DEFAULT_TIMELINE_DAYS = 30
MIN_TIMELINE_DAYS = 7
MAX_TIMELINE_DAYS = 90
RECENT_TASKS_LIMIT = 10


def clamp_timeline_days(days: Optional[int]) -> int:
    if days is None:
        return DEFAULT_TIMELINE_DAYS
    return min(max(days, MIN_TIMELINE_DAYS), MAX_TIMELINE_DAYS)


class ChildrenService(IChildrenService):
    """Implementation of the children service."""

    def __init__(
        self,
        access: IAccessService,
        child_links: ChildLinkRepository,
        children: ChildRepository,
        notes: NoteRepository,
        memberships: MembershipRepository,
        specialists: SpecialistRepository,
        org_parents: OrgParentRepository,
        auth: Optional[IAuthService] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._access = access
        self._child_links = child_links
        self._children = children
        self._notes = notes
        self._memberships = memberships
        self._specialists = specialists
        self._org_parents = org_parents
        self._auth = auth
        self._clock = clock

    async def _visible_links(self, user: AuthenticatedUser, org_id: str) -> list[ChildLink]:
        effective = await self._access.resolve_effective_role(user, org_id)
        if effective.is_org_admin:
            return await self._child_links.list_for_org(org_id)
        return await self._child_links.list_for_org(org_id, specialist_id=user.id)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def list_children(self, user: AuthenticatedUser, org_id: str) -> list[ChildSummary]:
        summaries = []
        for link in await self._visible_links(user, org_id):
            child = await self._children.get(link.child_id)
            if child is None:
                summaries.append(
                    ChildSummary(
                        id=link.child_id,
                        name="Unknown",
                        assigned_specialist_id=link.assigned_specialist_id,
                    )
                )
                continue
            progress = await self._children.get_progress(child.id)
            summaries.append(
                ChildSummary(
                    id=child.id,
                    name=child.name,
                    age=child.age,
                    assigned_specialist_id=link.assigned_specialist_id,
                    speech_step_id=progress.current_step_id if progress else None,
                    speech_step_number=progress.current_step_number if progress else None,
                    last_active_date=child.last_active_date or child.updated_at,
                    completed_tasks_count=await self._children.count_completed_tasks(child.id),
                )
            )
        return summaries

    async def get_child(
        self, user: AuthenticatedUser, org_id: str, child_id: str
    ) -> ChildDetail:
        access = await self._access.authorize_child_access(user, org_id, child_id)
        child = await self._children.get(child_id)
        if child is None:
            raise ChildNotFoundError(child_id)

        progress = await self._children.get_progress(child_id)
        recent = await self._children.recent_tasks(child_id, limit=RECENT_TASKS_LIMIT)
        return ChildDetail(
            id=child.id,
            name=child.name,
            age=child.age,
            organization_id=child.organization_id or org_id,
            assigned_specialist_id=access.link.assigned_specialist_id,
            speech_step_id=progress.current_step_id if progress else None,
            speech_step_number=progress.current_step_number if progress else None,
            last_active_date=child.last_active_date,
            completed_tasks_count=await self._children.count_completed_tasks(child_id),
            recent_tasks=[
                RecentTask(
                    id=task.id,
                    title=task.title,
                    status=task.status,
                    completed_at=task.completed_at,
                )
                for task in recent
            ],
        )

    async def get_timeline(
        self, user: AuthenticatedUser, org_id: str, child_id: str, days: int = 30
    ) -> TimelineResponse:
        await self._access.authorize_child_access(user, org_id, child_id)
        days = clamp_timeline_days(days)
        now = self._clock()
        since = now - timedelta(days=days)

        activity: dict[str, list[int]] = {}
        for task in await self._children.tasks_since(child_id, since):
            key = (task.updated_at or now).date().isoformat()
            counts = activity.setdefault(key, [0, 0])
            counts[0] += 1
            if task.status == "completed":
                counts[1] += 1

        # Latest feedback of a day wins
        feedback: dict[str, DayFeedback] = {}
        for entry in await self._children.feedback_since(child_id, since):
            timestamp = entry.timestamp or now
            feedback[timestamp.date().isoformat()] = DayFeedback(
                mood=entry.mood, comment=entry.comment, timestamp=timestamp
            )

        timeline = []
        for offset in range(days - 1, -1, -1):
            key = (now - timedelta(days=offset)).date().isoformat()
            attempted, completed = activity.get(key, (0, 0))
            timeline.append(
                ActivityDay(
                    date=key,
                    tasks_attempted=attempted,
                    tasks_completed=completed,
                    feedback=feedback.get(key),
                )
            )
        return TimelineResponse(days=timeline)

    async def list_connections(
        self, user: AuthenticatedUser, org_id: str
    ) -> ConnectionsResponse:
        by_parent: dict[str, list[ConnectedChild]] = {}
        for link in await self._visible_links(user, org_id):
            if not link.parent_user_id:
                continue
            child = await self._children.get(link.child_id)
            by_parent.setdefault(link.parent_user_id, []).append(
                ConnectedChild(
                    child_id=link.child_id,
                    child_name=child.name if child else "Unknown",
                    child_age=child.age if child else None,
                    assigned_at=link.assigned_at,
                )
            )

        connections = []
        for parent_user_id, children in by_parent.items():
            org_parent = await self._org_parents.get(org_id, parent_user_id)
            name, email = await self._parent_identity(parent_user_id)
            connections.append(
                ParentConnection(
                    parent_user_id=parent_user_id,
                    parent_name=name or "Unknown",
                    parent_email=email,
                    specialist_id=org_parent.linked_specialist_uid if org_parent else None,
                    joined_at=org_parent.joined_at if org_parent else None,
                    children=children,
                )
            )
        return ConnectionsResponse(connections=connections, count=len(connections))

    async def _parent_identity(self, uid: str) -> tuple[Optional[str], Optional[str]]:
        if self._auth is None:
            return None, None
        try:
            parent = await self._auth.get_user_by_id(uid)
        except NurooError as e:
            logger.warning(f"Parent lookup for {uid} failed: {e.message}")
            return None, None
        if parent is None:
            return None, None
        return parent.display_name, parent.email

    # -------------------------------------------------------------------------
    # Assignments
    # -------------------------------------------------------------------------

    async def assign(
        self, user: AuthenticatedUser, org_id: str, request: AssignChildRequest
    ) -> AssignmentResult:
        await self._access.require_org_admin(user, org_id)
        await self._require_org_child(org_id, request.child_id)

        membership = await self._memberships.get(org_id, request.specialist_id)
        if membership is None:
            raise SpecialistNotMemberError(request.specialist_id)
        if membership.role != Role.SPECIALIST:
            raise NotASpecialistError(request.specialist_id)
        if membership.status != MembershipStatus.ACTIVE:
            raise SpecialistInactiveError(request.specialist_id)

        await self._child_links.set_assignment(org_id, request.child_id, request.specialist_id)
        logger.info(
            f"Child {request.child_id} assigned to specialist {request.specialist_id} "
            f"in org {org_id} by {user.id}"
        )
        return AssignmentResult(child_id=request.child_id, specialist_id=request.specialist_id)

    async def unassign(
        self, user: AuthenticatedUser, org_id: str, request: UnassignChildRequest
    ) -> AssignmentResult:
        await self._access.require_org_admin(user, org_id)
        await self._require_org_child(org_id, request.child_id)
        await self._child_links.set_assignment(org_id, request.child_id, None)
        logger.info(f"Child {request.child_id} unassigned in org {org_id} by {user.id}")
        return AssignmentResult(child_id=request.child_id)

    async def _require_org_child(self, org_id: str, child_id: str) -> ChildLink:
        link = await self._child_links.get(org_id, child_id)
        if link is None or not link.assigned:
            raise ChildNotAssignedToOrgError(org_id, child_id)
        return link

    # -------------------------------------------------------------------------
    # Notes
    # -------------------------------------------------------------------------

    async def list_notes(
        self, user: AuthenticatedUser, org_id: str, child_id: str
    ) -> list[Note]:
        await self._access.authorize_child_access(user, org_id, child_id)
        return await self._notes.list_for_child(child_id, org_id)

    async def create_note(
        self, user: AuthenticatedUser, org_id: str, child_id: str, request: CreateNoteRequest
    ) -> Note:
        await self._access.authorize_child_access(user, org_id, child_id)
        profile = await self._specialists.get(user.id)
        author = profile.name if profile else default_display_name(user.email)
        return await self._notes.create(
            child_id=child_id,
            org_id=org_id,
            specialist_id=user.id,
            specialist_name=author,
            text=request.text,
            tags=request.tags,
            visible_to_parent=request.visible_to_parent,
        )
