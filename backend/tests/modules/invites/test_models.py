from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from modules.invites.codes import generate_invite_code
from modules.invites.models import (
    Invite,
    InviteCodeRequest,
    InviteStatus,
    RedeemParentInviteRequest,
    normalize_code,
)

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


class TestInviteStatus:
    def test_valid(self):
        assert Invite(code="A", org_id="o").status_at(NOW) == InviteStatus.VALID

    def test_revoked_wins_over_expiry(self):
        invite = Invite(code="A", org_id="o", is_active=False, expires_at=NOW - timedelta(days=1))
        assert invite.status_at(NOW) == InviteStatus.REVOKED

    def test_expired(self):
        invite = Invite(code="A", org_id="o", expires_at=NOW - timedelta(seconds=1))
        assert invite.status_at(NOW) == InviteStatus.EXPIRED

    def test_exhausted(self):
        invite = Invite(code="A", org_id="o", max_uses=2, used_count=2)
        assert invite.status_at(NOW) == InviteStatus.EXHAUSTED
        assert invite.remaining_uses() == 0


class TestRequests:
    def test_accepts_invite_code_alias(self):
        assert InviteCodeRequest.model_validate({"inviteCode": "abc"}).code == "abc"
        assert InviteCodeRequest.model_validate({"invite_code": "abc"}).code == "abc"

    def test_rejects_blank_code(self):
        with pytest.raises(ValidationError):
            InviteCodeRequest(code="   ")

    def test_parent_request_requires_child(self):
        with pytest.raises(ValidationError):
            RedeemParentInviteRequest.model_validate({"code": "abc"})
        request = RedeemParentInviteRequest.model_validate({"code": "abc", "childId": "c1"})
        assert request.child_id == "c1"


def test_normalize_code():
    assert normalize_code("  ab12cd34 ") == "AB12CD34"


def test_generated_codes_differ():
    assert len({generate_invite_code() for _ in range(50)}) > 1
