"""
Test support: token minting, an in-memory identity provider and a seeder.

Imported by conftest.py and by test modules that need the helpers directly.
"""

import asyncio
from datetime import datetime, timezone, timedelta
from typing import Any, Optional

import jwt  # PyJWT

from api.dependencies import ServiceContainer
from modules.access.models import MembershipStatus, OrganizationType, Role
from modules.auth.exceptions import UserNotFoundError
from modules.auth.models import IdentityUser
from modules.auth.service import AuthService
from shared.config import Settings
from shared.documents import InMemoryDocumentStore
from shared.models import AuthenticatedUser


# Test JWT secret (only for testing)
TEST_JWT_SECRET = "test-secret-key-for-testing-only"


def create_test_token(
    user_id: str = "test-user-123",
    email: str = "test@example.com",
    expired: bool = False,
    email_verified: bool = True,
    super_admin: bool = False,
    name: Optional[str] = None,
) -> str:
    """
    Create a test JWT token shaped like a Supabase access token.

    Args:
        user_id: User ID to include in the token
        email: Email to include in the token
        expired: If True, creates an expired token
        email_verified: Whether the email should be marked as verified
        super_admin: Whether to carry the super_admin custom claim
        name: Display name stored in user_metadata

    Returns:
        JWT token string
    """
    now = datetime.now(timezone.utc)
    exp = now - timedelta(hours=1) if expired else now + timedelta(hours=1)

    payload = {
        "sub": user_id,
        "email": email,
        "email_confirmed_at": now.isoformat() if email_verified else None,
        "aud": "authenticated",
        "role": "authenticated",
        "exp": int(exp.timestamp()),
        "iat": int(now.timestamp()),
        "app_metadata": {"super_admin": True} if super_admin else {},
        "user_metadata": {"full_name": name} if name else {},
    }
    return jwt.encode(payload, TEST_JWT_SECRET, algorithm="HS256")


def bearer(user_id: str, email: Optional[str] = None, **kwargs: Any) -> dict[str, str]:
    """Authorization headers for a user."""
    token = create_test_token(user_id=user_id, email=email or f"{user_id}@example.com", **kwargs)
    return {"Authorization": f"Bearer {token}"}


def make_user(
    uid: str, email: Optional[str] = None, super_admin: bool = False, name: Optional[str] = None
) -> AuthenticatedUser:
    return AuthenticatedUser(
        id=uid,
        email=email or f"{uid}@example.com",
        name=name,
        claims={"super_admin": True} if super_admin else {},
    )


class FakeAuthService:
    """
    Identity provider double.

    Tokens are verified by the real AuthService against TEST_JWT_SECRET;
    the admin operations work on an in-memory user table.
    """

    def __init__(self, settings: Settings):
        self._verifier = AuthService(settings=settings, db=None)
        self.users: dict[str, IdentityUser] = {}

    def add_user(
        self,
        uid: str,
        email: Optional[str] = None,
        display_name: Optional[str] = None,
        claims: Optional[dict[str, Any]] = None,
    ) -> IdentityUser:
        user = IdentityUser(
            uid=uid,
            email=email or f"{uid}@example.com",
            display_name=display_name,
            claims=claims or {},
            created_at=datetime.now(timezone.utc),
        )
        self.users[uid] = user
        return user

    async def validate_token(self, token: str) -> AuthenticatedUser:
        return await self._verifier.validate_token(token)

    async def get_user_by_id(self, user_id: str) -> Optional[IdentityUser]:
        return self.users.get(user_id)

    async def get_user_by_email(self, email: str) -> Optional[IdentityUser]:
        wanted = email.strip().lower()
        for user in self.users.values():
            if (user.email or "").lower() == wanted:
                return user
        return None

    async def set_custom_claims(self, user_id: str, claims: dict[str, Any]) -> None:
        user = self.users.get(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        self.users[user_id] = user.model_copy(update={"claims": {**user.claims, **claims}})

    async def list_users(self, limit: int = 1000) -> list[IdentityUser]:
        return list(self.users.values())[:limit]


class Seeder:
    """Writes fixture records straight into the document store."""

    def __init__(self, container: ServiceContainer):
        self._container = container

    @property
    def store(self) -> InMemoryDocumentStore:
        return self._container.store

    async def org(
        self,
        name: str = "Acme",
        created_by: str = "operator",
        is_active: bool = True,
        org_type: OrganizationType = OrganizationType.MANAGED,
    ) -> str:
        org = await self._container.organizations.create(
            name=name, created_by=created_by, org_type=org_type
        )
        if not is_active:
            await self.store.update("organizations", org.id, {"is_active": False})
        return org.id

    async def member(
        self,
        org_id: str,
        uid: str,
        role: Role = Role.SPECIALIST,
        status: MembershipStatus = MembershipStatus.ACTIVE,
        name: Optional[str] = None,
    ) -> None:
        await self._container.memberships.upsert(org_id, uid, role, status)
        await self._container.specialists.upsert(
            uid, email=f"{uid}@example.com", name=name, org_id=org_id, role=role
        )

    async def child(
        self,
        child_id: str,
        name: str = "Sam",
        age: Optional[int] = 5,
        org_id: Optional[str] = None,
        parent_user_id: Optional[str] = None,
        specialist_id: Optional[str] = None,
    ) -> None:
        """Create the child profile and, with org_id, an assigned link."""
        await self.store.set("children", child_id, {"name": name, "age": age})
        if org_id is not None:
            await self._container.child_links.upsert(
                org_id,
                child_id,
                assigned=True,
                assigned_at=datetime.now(timezone.utc),
                parent_user_id=parent_user_id,
                assigned_specialist_id=specialist_id,
            )

    def run(self, coro):
        """Run a seeding coroutine from a synchronous test."""
        return asyncio.run(coro)


