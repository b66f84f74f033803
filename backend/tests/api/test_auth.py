"""
Tests for bearer authentication and the error response shape.
"""

import asyncio
import os
from datetime import datetime, timezone, timedelta

import jwt
import pytest

from modules.auth.service import AuthService
from shared.config import Settings
from support import TEST_JWT_SECRET, bearer, create_test_token


class TestAuthentication:

    def test_missing_auth_header(self, client):
        """Request without auth header should return 401."""
        response = client.get("/me")
        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert response.json()["error"] == "MISSING_TOKEN"

    def test_protected_route_with_valid_token(self, client, auth_headers, test_user_id):
        """Protected route should work with valid token."""
        response = client.get("/me", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["uid"] == test_user_id
        assert data["email"] == "test@example.com"
        assert data["is_super_admin"] is False
        assert data["organizations"] == []

    def test_protected_route_with_expired_token(self, client):
        """Protected route should return 401 with expired token."""
        token = create_test_token(expired=True)
        response = client.get("/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert response.json()["error"] == "TOKEN_EXPIRED"

    def test_invalid_token(self, client):
        response = client.get("/me", headers={"Authorization": "Bearer invalid-token"})
        assert response.status_code == 401
        body = response.json()
        assert body["error"] == "INVALID_TOKEN"
        assert set(body.keys()) == {"error", "message", "details"}

    def test_wrong_secret_rejected(self, client):
        now = datetime.now(timezone.utc)
        payload = {
            "sub": "intruder",
            "aud": "authenticated",
            "exp": int((now + timedelta(hours=1)).timestamp()),
            "iat": int(now.timestamp()),
        }
        token = jwt.encode(payload, "this-is-not-the-real-secret", algorithm="HS256")
        response = client.get("/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_wrong_audience_rejected(self, client):
        now = datetime.now(timezone.utc)
        payload = {
            "sub": "user-1",
            "aud": "anon",
            "exp": int((now + timedelta(hours=1)).timestamp()),
            "iat": int(now.timestamp()),
        }
        token = jwt.encode(payload, TEST_JWT_SECRET, algorithm="HS256")
        response = client.get("/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert response.json()["error"] == "INVALID_TOKEN"

    def test_super_admin_claim_reaches_profile(self, client):
        response = client.get("/me", headers=bearer("op", super_admin=True))
        assert response.json()["is_super_admin"] is True


class TestErrorMapping:

    def test_malformed_body_is_400(self, client, auth_headers):
        response = client.post("/join", json={}, headers=auth_headers)
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "VALIDATION_ERROR"
        assert body["details"]["errors"]

    def test_unknown_invite_is_404(self, client, auth_headers):
        response = client.post("/join", json={"code": "NOPE1234"}, headers=auth_headers)
        assert response.status_code == 404
        assert response.json()["error"] == "INVITE_NOT_FOUND"

    def test_non_member_is_403(self, client, seed, auth_headers):
        org_id = seed.run(seed.org("Acme"))
        response = client.get(f"/orgs/{org_id}/children", headers=auth_headers)
        assert response.status_code == 403
        assert response.json()["error"] == "NOT_A_MEMBER"

    def test_missing_org_is_404(self, client, auth_headers):
        response = client.get("/orgs/missing", headers=auth_headers)
        assert response.status_code == 404
        assert response.json()["error"] == "ORGANIZATION_NOT_FOUND"

    def test_duplicate_group_is_409(self, client, seed):
        org_id = seed.run(seed.org("Acme"))
        seed.run(seed.member(org_id, "spec-1"))
        headers = bearer("spec-1")

        first = client.post(f"/orgs/{org_id}/groups", json={"name": "Mornings"}, headers=headers)
        second = client.post(f"/orgs/{org_id}/groups", json={"name": "Mornings"}, headers=headers)

        assert first.status_code == 201
        assert second.status_code == 409
        assert second.json()["error"] == "DUPLICATE_GROUP_NAME"


# Integration test that uses a real JWT secret from the environment
@pytest.mark.skipif(
    not os.environ.get("SUPABASE_JWT_SECRET"),
    reason="SUPABASE_JWT_SECRET not set"
)
class TestAuthIntegration:
    """Tokens signed with the deployment's secret."""

    def test_real_jwt_secret_decodes_valid_token(self):
        secret = os.environ["SUPABASE_JWT_SECRET"]
        now = datetime.now(timezone.utc)
        payload = {
            "sub": "integration-test-user",
            "email": "integration@test.com",
            "email_confirmed_at": now.isoformat(),
            "aud": "authenticated",
            "exp": int((now + timedelta(hours=1)).timestamp()),
            "iat": int(now.timestamp()),
        }
        token = jwt.encode(payload, secret, algorithm="HS256")
        service = AuthService(settings=Settings(_env_file=None, supabase_jwt_secret=secret))

        user = asyncio.run(service.validate_token(token))
        assert user.id == "integration-test-user"
        assert user.email_verified is True
