"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
Helpers that tests import directly live in support.py.
"""

import pytest
from fastapi.testclient import TestClient

from api.app import app
from api.dependencies import ServiceContainer, reset_container, set_container
from modules.auth.service import reset_auth_service
from shared.config import Settings
from shared.documents import InMemoryDocumentStore

from support import TEST_JWT_SECRET, FakeAuthService, Seeder, create_test_token


@pytest.fixture(autouse=True)
def reset_auth_singleton():
    """Reset the auth service singleton before and after each test."""
    reset_auth_service()
    yield
    reset_auth_service()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        environment="test",
        supabase_jwt_secret=TEST_JWT_SECRET,
        document_backend="memory",
        super_admin_emails=[],
        frontend_url="http://portal.test",
    )


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def identity(settings: Settings) -> FakeAuthService:
    return FakeAuthService(settings)


@pytest.fixture
def container(settings: Settings, store: InMemoryDocumentStore, identity: FakeAuthService):
    """Service container over the in-memory store and identity provider."""
    return ServiceContainer(settings=settings, store=store, auth=identity)


@pytest.fixture
def seed(container: ServiceContainer) -> Seeder:
    return Seeder(container)


@pytest.fixture
def client(container: ServiceContainer):
    """Test client whose dependencies resolve to the test container."""
    set_container(container)
    yield TestClient(app)
    reset_container()


@pytest.fixture
def test_user_id() -> str:
    """Provide a consistent test user ID."""
    return "test-user-123"


@pytest.fixture
def test_user_email() -> str:
    """Provide a consistent test user email."""
    return "test@example.com"


@pytest.fixture
def auth_token(test_user_id: str, test_user_email: str) -> str:
    """Create a valid auth token for testing."""
    return create_test_token(user_id=test_user_id, email=test_user_email)


@pytest.fixture
def auth_headers(auth_token: str) -> dict[str, str]:
    """Create authorization headers with a valid token."""
    return {"Authorization": f"Bearer {auth_token}"}
