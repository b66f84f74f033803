"""Tests for health check endpoints."""

from fastapi.testclient import TestClient

from api.app import app
from api.dependencies import ServiceContainer, reset_container, set_container


class UnreachableStore:
    """Document store whose reads always fail."""

    async def get(self, collection, doc_id):
        raise RuntimeError("connection refused")


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    def test_health_check(self, client):
        """Health endpoint should return 200 with status."""
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == "0.1.0"

    def test_health_response_structure(self, client):
        data = client.get("/health").json()
        assert set(data.keys()) == {"status", "version"}

    def test_health_needs_no_token(self, client):
        assert client.get("/health").status_code == 200

    def test_readiness_check(self, client):
        """Readiness endpoint should report the document store."""
        response = client.get("/ready")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ready"
        assert data["database"] == "connected"
        assert data["document_backend"] == "memory"

    def test_readiness_degraded_when_store_unreachable(self, settings, identity):
        set_container(ServiceContainer(settings=settings, store=UnreachableStore(), auth=identity))
        try:
            response = TestClient(app).get("/ready")
        finally:
            reset_container()

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "degraded"
        assert data["database"] == "unavailable"
