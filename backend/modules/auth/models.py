"""
Authentication module data models.

These models define the data structures used by the auth module
and exposed to other modules through the interface.
"""

from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel, Field

from shared.models import AuthenticatedUser


class JWTPayload(BaseModel):
    """
    Decoded JWT token payload from Supabase.

    This matches the structure of Supabase Auth JWTs.
    """

    sub: str = Field(..., description="Subject (user ID)")
    email: Optional[str] = Field(None, description="User's email")
    exp: int = Field(..., description="Expiration timestamp")
    iat: int = Field(..., description="Issued at timestamp")
    aud: str = Field(default="authenticated", description="Audience")
    role: str = Field(default="authenticated", description="User role")
    email_confirmed_at: Optional[str] = Field(None, description="Email confirmation time")

    # Supabase-specific claims. Custom claims live in app_metadata,
    # which only the service role can write.
    app_metadata: dict[str, Any] = Field(default_factory=dict)
    user_metadata: dict[str, Any] = Field(default_factory=dict)


class IdentityUser(BaseModel):
    """
    A user record as held by the identity provider.

    Returned by the admin lookups (by id, by email, listing).
    """

    uid: str = Field(..., description="User ID (UUID)")
    email: Optional[str] = Field(None, description="Email address")
    display_name: Optional[str] = Field(None, description="Display name")
    claims: dict[str, Any] = Field(default_factory=dict, description="Custom claims")
    created_at: Optional[datetime] = Field(None, description="Account creation time")

    @property
    def is_super_admin(self) -> bool:
        return self.claims.get("super_admin") is True


__all__ = ["JWTPayload", "IdentityUser", "AuthenticatedUser"]
