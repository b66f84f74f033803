"""
Access module exceptions.

Authorization failures are terminal: the API maps them to 403 (or 404 for
children outside the organization) and the request never reaches the
business logic.
"""

from shared.exceptions import AuthorizationError, NotFoundError


class NotAMemberError(AuthorizationError):
    """Raised when the caller has no membership in the organization."""

    def __init__(self, org_id: str):
        super().__init__(
            "Not a member of this organization",
            code="NOT_A_MEMBER",
            details={"org_id": org_id},
        )


class InactiveMemberError(AuthorizationError):
    """Raised when the caller's membership is not active."""

    def __init__(self, org_id: str):
        super().__init__(
            "Member account is not active",
            code="MEMBER_INACTIVE",
            details={"org_id": org_id},
        )


class OrgAdminRequiredError(AuthorizationError):
    """Raised when an organization-wide operation is attempted by a specialist."""

    def __init__(self, org_id: str):
        super().__init__(
            "Organization admin role required",
            code="ORG_ADMIN_REQUIRED",
            details={"org_id": org_id},
        )


class SuperAdminRequiredError(AuthorizationError):
    """Raised when a platform operation is attempted by a non-operator."""

    def __init__(self):
        super().__init__("Super admin access required", code="SUPER_ADMIN_REQUIRED")


class ChildNotAssignedToOrgError(NotFoundError):
    """Raised when the child has no assigned link to the organization."""

    def __init__(self, org_id: str, child_id: str):
        super().__init__(
            "Child not assigned to this organization",
            code="CHILD_NOT_ASSIGNED_TO_ORG",
            details={"org_id": org_id, "child_id": child_id},
        )


class UnassignedChildRequiresAdminError(AuthorizationError):
    """Raised when a specialist asks for a child no specialist is assigned to."""

    def __init__(self, child_id: str):
        super().__init__(
            "Child is not assigned to any specialist; only organization admins can access it",
            code="UNASSIGNED_CHILD_REQUIRES_ADMIN",
            details={"child_id": child_id},
        )


class NotYourChildError(AuthorizationError):
    """Raised when a specialist asks for a child assigned to someone else."""

    def __init__(self, child_id: str):
        super().__init__(
            "Child is not assigned to you",
            code="NOT_YOUR_CHILD",
            details={"child_id": child_id},
        )


class OrganizationNotFoundError(NotFoundError):
    """Raised when an organization does not exist."""

    def __init__(self, org_id: str):
        super().__init__(
            "Organization not found",
            code="ORGANIZATION_NOT_FOUND",
            details={"org_id": org_id},
        )
