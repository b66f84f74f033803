"""
Groups module exceptions.
"""

from shared.exceptions import AuthorizationError, ConflictError, NotFoundError


class GroupNotFoundError(NotFoundError):
    """Raised when the group does not exist or belongs to another member."""

    def __init__(self, group_id: str):
        super().__init__(
            "Group not found",
            code="GROUP_NOT_FOUND",
            details={"group_id": group_id},
        )


class GroupOrganizationMismatchError(AuthorizationError):
    """Raised when a group is addressed through another organization."""

    def __init__(self, group_id: str, org_id: str):
        super().__init__(
            "Group does not belong to this organization",
            code="GROUP_ORG_MISMATCH",
            details={"group_id": group_id, "org_id": org_id},
        )


class DuplicateGroupNameError(ConflictError):
    """Raised when the owner already has a group with this name in the organization."""

    def __init__(self, name: str):
        super().__init__(
            "Group with this name already exists",
            code="DUPLICATE_GROUP_NAME",
            details={"name": name},
        )


class ParentNotLinkedError(NotFoundError):
    """Raised when adding a parent who has no child linked to the organization."""

    def __init__(self, parent_user_id: str):
        super().__init__(
            "Parent is not linked to this organization",
            code="PARENT_NOT_LINKED",
            details={"parent_user_id": parent_user_id},
        )
