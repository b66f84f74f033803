"""
Authentication module interface.

Other modules should depend on IAuthService, not the concrete implementation.
This enables testing with fakes and swapping the identity provider.
"""

from typing import Any, Protocol, Optional, runtime_checkable

from .models import AuthenticatedUser, IdentityUser


@runtime_checkable
class IAuthService(Protocol):
    """
    Interface for identity operations.

    This protocol defines the contract that the auth module exposes
    to other modules. Implementations must provide all these methods.
    """

    async def validate_token(self, token: str) -> AuthenticatedUser:
        """
        Validate a bearer token and return the caller identity.

        Args:
            token: JWT access token from Supabase Auth

        Returns:
            AuthenticatedUser with uid, email and custom claims

        Raises:
            MissingTokenError: If the token is empty
            ExpiredTokenError: If the token has expired
            InvalidTokenError: If the token is malformed or badly signed
        """
        ...

    async def get_user_by_id(self, user_id: str) -> Optional[IdentityUser]:
        """
        Get a user by their ID.

        Args:
            user_id: Supabase user ID (UUID)

        Returns:
            IdentityUser if found, None otherwise
        """
        ...

    async def get_user_by_email(self, email: str) -> Optional[IdentityUser]:
        """
        Get a user by their email (case-insensitive).

        Args:
            email: User's email address

        Returns:
            IdentityUser if found, None otherwise
        """
        ...

    async def set_custom_claims(self, user_id: str, claims: dict[str, Any]) -> None:
        """
        Merge custom claims into the user's record.

        Claims take effect on the user's next token refresh.

        Raises:
            UserNotFoundError: If the user does not exist
        """
        ...

    async def list_users(self, limit: int = 1000) -> list[IdentityUser]:
        """List up to ``limit`` users."""
        ...
