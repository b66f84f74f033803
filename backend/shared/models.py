"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel, Field


class AuthenticatedUser(BaseModel):
    """
    The verified caller of a request.

    Populated from the access token by the Identity Verifier and passed to
    every authorization decision. Custom claims come from the identity
    provider's app metadata; the only one the portal reads is ``super_admin``.
    """

    id: str = Field(..., description="User ID (uid from the identity provider)")
    email: str = Field(default="", description="User's email address")
    name: Optional[str] = Field(None, description="Display name, if the provider has one")
    email_verified: bool = Field(default=False, description="Whether email is verified")
    claims: dict[str, Any] = Field(default_factory=dict, description="Custom claims")
    last_sign_in: Optional[datetime] = Field(None, description="Token issue time")

    model_config = {
        "frozen": True,
        "extra": "ignore",
    }

    @property
    def uid(self) -> str:
        return self.id

    @property
    def has_super_admin_claim(self) -> bool:
        return self.claims.get("super_admin") is True
