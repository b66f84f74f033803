"""
Authentication service implementation.

Validates Supabase JWT tokens and wraps the Supabase Auth admin API
for the lookups and claim changes the portal needs.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional
import jwt
from supabase import AuthError, Client

from shared.config import Settings, get_settings
from shared.database import get_supabase_client
from shared.models import AuthenticatedUser

from .interfaces import IAuthService
from .models import IdentityUser, JWTPayload
from .exceptions import (
    IdentityProviderError,
    InvalidTokenError,
    ExpiredTokenError,
    MissingTokenError,
    UserNotFoundError,
)

logger = logging.getLogger(__name__)

# Page size used when scanning users (the admin API caps per_page at 1000)
USERS_PAGE_SIZE = 1000


def _display_name(user_metadata: dict[str, Any]) -> Optional[str]:
    return user_metadata.get("full_name") or user_metadata.get("name")


class AuthService(IAuthService):
    """
    Implementation of the authentication service.

    Uses Supabase JWT tokens for authentication and the Supabase Auth
    admin API (service role) for user lookups and custom claims.
    """

    def __init__(self, settings: Optional[Settings] = None, db: Optional[Client] = None):
        self._settings = settings or get_settings()
        self._db = db

    @property
    def _admin(self):
        if self._db is None:
            self._db = get_supabase_client()
        return self._db.auth.admin

    async def validate_token(self, token: str) -> AuthenticatedUser:
        """
        Validate a JWT token and return the authenticated user.

        This implementation validates Supabase JWTs using the JWT secret.
        """
        if not token:
            raise MissingTokenError()

        try:
            payload = jwt.decode(
                token,
                self._settings.supabase_jwt_secret,
                algorithms=["HS256"],
                audience="authenticated",
            )
        except jwt.ExpiredSignatureError:
            raise ExpiredTokenError()
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(str(e))

        jwt_payload = JWTPayload(**payload)
        return AuthenticatedUser(
            id=jwt_payload.sub,
            email=jwt_payload.email or "",
            name=_display_name(jwt_payload.user_metadata),
            email_verified=jwt_payload.email_confirmed_at is not None,
            claims=jwt_payload.app_metadata,
            last_sign_in=datetime.fromtimestamp(jwt_payload.iat, tz=timezone.utc),
        )

    async def get_user_by_id(self, user_id: str) -> Optional[IdentityUser]:
        try:
            response = self._admin.get_user_by_id(user_id)
        except AuthError as e:
            if getattr(e, "status", None) == 404:
                return None
            raise IdentityProviderError(f"User lookup failed: {e}") from e
        user = getattr(response, "user", None)
        return self._map_to_identity_user(user) if user else None

    async def get_user_by_email(self, email: str) -> Optional[IdentityUser]:
        wanted = email.strip().lower()
        page = 1
        while True:
            users = self._list_page(page, USERS_PAGE_SIZE)
            for user in users:
                if (user.email or "").lower() == wanted:
                    return self._map_to_identity_user(user)
            if len(users) < USERS_PAGE_SIZE:
                return None
            page += 1

    async def set_custom_claims(self, user_id: str, claims: dict[str, Any]) -> None:
        existing = await self.get_user_by_id(user_id)
        if existing is None:
            raise UserNotFoundError(user_id)
        try:
            # Supabase merges app_metadata keys, so removals are written as False
            self._admin.update_user_by_id(user_id, {"app_metadata": claims})
        except AuthError as e:
            raise IdentityProviderError(f"Updating claims failed: {e}") from e
        logger.info(f"Updated custom claims for user {user_id}: {sorted(claims)}")

    async def list_users(self, limit: int = 1000) -> list[IdentityUser]:
        users: list[IdentityUser] = []
        page = 1
        per_page = min(USERS_PAGE_SIZE, limit)
        while len(users) < limit:
            batch = self._list_page(page, per_page)
            users.extend(self._map_to_identity_user(user) for user in batch)
            if len(batch) < per_page:
                break
            page += 1
        return users[:limit]

    def _list_page(self, page: int, per_page: int) -> list[Any]:
        try:
            return list(self._admin.list_users(page=page, per_page=per_page))
        except AuthError as e:
            raise IdentityProviderError(f"Listing users failed: {e}") from e

    def _map_to_identity_user(self, user: Any) -> IdentityUser:
        created_at = getattr(user, "created_at", None)
        return IdentityUser(
            uid=user.id,
            email=user.email,
            display_name=_display_name(getattr(user, "user_metadata", None) or {}),
            claims=getattr(user, "app_metadata", None) or {},
            created_at=created_at,
        )


# Module-level instance getter
_service_instance: Optional[AuthService] = None


def get_auth_service() -> AuthService:
    """Get the auth service singleton."""
    global _service_instance
    if _service_instance is None:
        _service_instance = AuthService()
    return _service_instance


def reset_auth_service() -> None:
    """Reset the auth service singleton (for testing)."""
    global _service_instance
    _service_instance = None
