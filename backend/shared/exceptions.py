"""
Base exception classes for the Nuroo B2B backend.

Each module should define its own exceptions that inherit from these bases.
The API layer maps each base class onto an HTTP status code, so modules
never build HTTP responses themselves.
"""

from typing import Optional, Any


class NurooError(Exception):
    """
    Base exception for all Nuroo errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(NurooError):
    """Resource not found."""

    pass


class ValidationError(NurooError):
    """Input validation failed."""

    pass


class ConflictError(NurooError):
    """Resource already exists or conflicts with existing state."""

    pass


class AuthenticationError(NurooError):
    """Authentication failed (invalid or missing credentials)."""

    pass


class AuthorizationError(NurooError):
    """Authorization failed (insufficient permissions)."""

    pass


class ExternalServiceError(NurooError):
    """Error communicating with an external service."""

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service
