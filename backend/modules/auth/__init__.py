"""
Authentication module.

Identity Verifier: validates bearer tokens and exposes the identity
provider's admin operations (user lookup, custom claims, listing).

Public API:
- IAuthService: Interface for identity operations
- AuthenticatedUser: Caller identity from the token
- IdentityUser: User record from the identity provider
- Auth exceptions: InvalidTokenError, ExpiredTokenError, etc.
"""

from .interfaces import IAuthService
from .models import AuthenticatedUser, IdentityUser, JWTPayload
from .exceptions import (
    InvalidTokenError,
    ExpiredTokenError,
    MissingTokenError,
    UserNotFoundError,
    IdentityProviderError,
)

__all__ = [
    # Interface
    "IAuthService",
    # Models
    "AuthenticatedUser",
    "IdentityUser",
    "JWTPayload",
    # Exceptions
    "InvalidTokenError",
    "ExpiredTokenError",
    "MissingTokenError",
    "UserNotFoundError",
    "IdentityProviderError",
]
