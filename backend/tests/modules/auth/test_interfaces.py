from typing import runtime_checkable

from modules.auth.interfaces import IAuthService
from modules.auth.service import AuthService

from support import FakeAuthService


class TestAuthInterface:
    def test_interface_methods_exist(self):
        """IAuthService should define required methods."""
        methods = [
            "validate_token",
            "get_user_by_id",
            "get_user_by_email",
            "set_custom_claims",
            "list_users",
        ]
        for method in methods:
            assert hasattr(IAuthService, method)
            assert callable(getattr(AuthService, method))

    def test_service_satisfies_protocol(self, settings):
        """AuthService should satisfy the runtime-checkable protocol."""
        assert runtime_checkable
        assert isinstance(AuthService(settings=settings), IAuthService)

    def test_test_double_satisfies_protocol(self, settings):
        assert isinstance(FakeAuthService(settings), IAuthService)
