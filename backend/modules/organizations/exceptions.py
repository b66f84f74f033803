"""
Organizations module exceptions.
"""

from shared.exceptions import NotFoundError


class ParentContactNotFoundError(NotFoundError):
    """Raised when a parent contact does not exist in the organization."""

    def __init__(self, contact_id: str):
        super().__init__(
            "Parent contact not found",
            code="PARENT_CONTACT_NOT_FOUND",
            details={"contact_id": contact_id},
        )
