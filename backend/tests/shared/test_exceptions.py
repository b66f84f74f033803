"""Tests for shared/exceptions.py."""

from shared.exceptions import (
    AuthenticationError,
    ExternalServiceError,
    NotFoundError,
    NurooError,
)


class TestNurooError:
    def test_code_defaults_to_class_name(self):
        error = NotFoundError("missing")
        assert error.code == "NotFoundError"
        assert error.message == "missing"
        assert str(error) == "missing"

    def test_to_dict(self):
        error = AuthenticationError("nope", code="INVALID_TOKEN", details={"a": 1})
        assert error.to_dict() == {
            "error": "INVALID_TOKEN",
            "message": "nope",
            "details": {"a": 1},
        }

    def test_details_default_to_empty(self):
        assert NurooError("x").details == {}


class TestExternalServiceError:
    def test_records_service(self):
        error = ExternalServiceError("down", service="supabase")
        assert error.service == "supabase"
        assert error.details["service"] == "supabase"
