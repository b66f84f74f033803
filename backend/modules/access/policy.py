"""
Super-admin policy.

A caller is a platform super admin when their identity carries the
``super_admin`` claim. Outside production an operator email allow-list,
injected from settings, is honored as well so that fresh environments
can be administered before any claim has been granted.
"""

from typing import Iterable

from shared.config import Settings
from shared.models import AuthenticatedUser


class SuperAdminPolicy:
    """Decides whether an identity is a platform super admin."""

    def __init__(self, operator_emails: Iterable[str] = (), allow_list_enabled: bool = True):
        self._operator_emails = frozenset(
            email.strip().lower() for email in operator_emails if email.strip()
        )
        self._allow_list_enabled = allow_list_enabled

    @classmethod
    def from_settings(cls, settings: Settings) -> "SuperAdminPolicy":
        return cls(settings.super_admin_emails, allow_list_enabled=not settings.is_production)

    def via_allow_list(self, user: AuthenticatedUser) -> bool:
        if not self._allow_list_enabled or not user.email:
            return False
        return user.email.strip().lower() in self._operator_emails

    def is_super_admin(self, user: AuthenticatedUser) -> bool:
        return user.has_super_admin_claim or self.via_allow_list(user)
