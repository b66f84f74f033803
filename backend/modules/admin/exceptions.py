"""
Admin module exceptions.
"""

from shared.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    NurooError,
    ValidationError,
)


class DuplicateOrganizationError(ConflictError):
    """Raised when the operator already created an organization with this name."""

    def __init__(self, name: str):
        super().__init__(
            "You already have an organization with this name",
            code="DUPLICATE_ORGANIZATION",
            details={"name": name},
        )


class OrganizationNotOwnedError(AuthorizationError):
    """Raised when an operator addresses an organization someone else created."""

    def __init__(self, org_id: str):
        super().__init__(
            "You can only manage organizations you created",
            code="ORGANIZATION_NOT_OWNED",
            details={"org_id": org_id},
        )


class OrganizationNotActiveError(ValidationError):
    """Raised when issuing an invite for a deactivated organization."""

    def __init__(self, org_id: str):
        super().__init__(
            "Organization is not active",
            code="ORGANIZATION_NOT_ACTIVE",
            details={"org_id": org_id},
        )


class SelfRevokeError(ValidationError):
    """Raised when an operator tries to drop their own super-admin rights."""

    def __init__(self):
        super().__init__(
            "Cannot remove Super Admin rights from yourself", code="SELF_REVOKE"
        )


class NotASuperAdminError(ValidationError):
    """Raised when revoking rights from a user who does not hold them."""

    def __init__(self, uid: str):
        super().__init__(
            "User is not a Super Admin", code="NOT_A_SUPER_ADMIN", details={"uid": uid}
        )


class ContentNotFoundError(NotFoundError):
    """Raised when a content task or roadmap does not exist."""

    def __init__(self, kind: str, content_id: str):
        super().__init__(
            f"{kind.capitalize()} not found",
            code="CONTENT_NOT_FOUND",
            details={"kind": kind, "id": content_id},
        )


class InvalidBootstrapKeyError(AuthorizationError):
    def __init__(self):
        super().__init__("Invalid secret key", code="INVALID_BOOTSTRAP_KEY")


class BootstrapClosedError(AuthorizationError):
    """Raised in production once a super admin exists."""

    def __init__(self):
        super().__init__(
            "Super Admin already exists. Use /admin/super-admin instead.",
            code="BOOTSTRAP_CLOSED",
        )


class BootstrapNotConfiguredError(NurooError):
    """Raised in production when no bootstrap secret is configured."""

    def __init__(self):
        super().__init__(
            "BOOTSTRAP_SECRET_KEY is not configured", code="BOOTSTRAP_NOT_CONFIGURED"
        )
