"""
Invites module exceptions.
"""

from shared.exceptions import NotFoundError, NurooError, ValidationError, ConflictError


class InviteNotFoundError(NotFoundError):
    """Raised when no invite exists for a code."""

    def __init__(self, code: str):
        super().__init__(
            "Invalid invite code",
            code="INVITE_NOT_FOUND",
            details={"code": code},
        )


class InviteRevokedError(ValidationError):
    """Raised when redeeming a deactivated invite."""

    def __init__(self, code: str):
        super().__init__(
            "Invite code is no longer active",
            code="INVITE_DEACTIVATED",
            details={"code": code},
        )


class InviteExpiredError(ValidationError):
    """Raised when redeeming an invite past its expiry."""

    def __init__(self, code: str):
        super().__init__(
            "Invite code has expired",
            code="INVITE_EXPIRED",
            details={"code": code},
        )


class InviteExhaustedError(ValidationError):
    """Raised when an invite has no uses left."""

    def __init__(self, code: str):
        super().__init__(
            "Invite code has reached maximum usage",
            code="INVITE_EXHAUSTED",
            details={"code": code},
        )


class InviteKindMismatchError(ValidationError):
    """Raised when a code is redeemed through the wrong flow."""

    def __init__(self, code: str, expected: str):
        super().__init__(
            f"This code is not a {expected} invite",
            code="INVITE_KIND_MISMATCH",
            details={"code": code, "expected": expected},
        )


class OrganizationInactiveError(ValidationError):
    """Raised when an inactive organization issues or accepts invites."""

    def __init__(self, org_id: str):
        super().__init__(
            "Organization is not active",
            code="ORGANIZATION_INACTIVE",
            details={"org_id": org_id},
        )


class InvalidSpecialistError(ValidationError):
    """Raised when a parent invite names someone who is not an active specialist."""

    def __init__(self, specialist_id: str):
        super().__init__(
            "Specialist is not an active member of this organization",
            code="INVALID_SPECIALIST",
            details={"specialist_id": specialist_id},
        )


class CodeGenerationExhaustedError(NurooError):
    """Raised when every generated code was already taken."""

    def __init__(self, attempts: int):
        super().__init__(
            "Failed to generate a unique invite code",
            code="CODE_GENERATION_EXHAUSTED",
            details={"attempts": attempts},
        )


class InviteContentionError(ConflictError):
    """Raised when a use could not be claimed because of concurrent redemptions."""

    def __init__(self, code: str):
        super().__init__(
            "Invite code is being redeemed concurrently, please retry",
            code="INVITE_CONTENTION",
            details={"code": code},
        )
