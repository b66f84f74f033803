"""
Children module exceptions.
"""

from shared.exceptions import NotFoundError, ValidationError


class ChildNotFoundError(NotFoundError):
    """Raised when a linked child has no profile record."""

    def __init__(self, child_id: str):
        super().__init__(
            "Child not found",
            code="CHILD_NOT_FOUND",
            details={"child_id": child_id},
        )


class SpecialistNotMemberError(NotFoundError):
    """Raised when assigning a child to someone outside the organization."""

    def __init__(self, specialist_id: str):
        super().__init__(
            "Specialist is not a member of this organization",
            code="SPECIALIST_NOT_MEMBER",
            details={"specialist_id": specialist_id},
        )


class NotASpecialistError(ValidationError):
    """Raised when the assignment target is a member but not a specialist."""

    def __init__(self, uid: str):
        super().__init__(
            "User is not a specialist",
            code="NOT_A_SPECIALIST",
            details={"uid": uid},
        )


class SpecialistInactiveError(ValidationError):
    """Raised when the assignment target's membership is inactive."""

    def __init__(self, specialist_id: str):
        super().__init__(
            "Specialist account is not active",
            code="SPECIALIST_INACTIVE",
            details={"specialist_id": specialist_id},
        )
