"""Tests for shared/models.py."""

import pytest
from pydantic import ValidationError

from shared.models import AuthenticatedUser


class TestAuthenticatedUser:
    def test_uid_alias(self):
        user = AuthenticatedUser(id="u1", email="a@b.c")
        assert user.uid == "u1"

    def test_super_admin_claim_must_be_true(self):
        assert AuthenticatedUser(id="u1", claims={"super_admin": True}).has_super_admin_claim
        assert not AuthenticatedUser(id="u1", claims={"super_admin": "yes"}).has_super_admin_claim
        assert not AuthenticatedUser(id="u1", claims={"super_admin": False}).has_super_admin_claim
        assert not AuthenticatedUser(id="u1").has_super_admin_claim

    def test_frozen(self):
        user = AuthenticatedUser(id="u1")
        with pytest.raises(ValidationError):
            user.email = "other@example.com"
