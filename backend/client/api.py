"""
Async client for the portal API.

Reads go through a ResponseCache; writes invalidate every cached read
of the resource families they touch. Clearing the token (logout) clears
the cache.
"""

import logging
from typing import Any, Optional
from urllib.parse import urlencode
import httpx

from .cache import CacheCategory, ResponseCache

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class PortalAPIError(Exception):
    """A non-2xx response; ``message`` is the server's message verbatim."""

    def __init__(self, status_code: int, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.code = code


class PortalClient:
    """
    Client for the portal API.

    Usage:
        async with PortalClient("http://localhost:8000", token=token) as client:
            me = await client.get_me()
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        cache: Optional[ResponseCache] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self._token = token
        self._cache = cache or ResponseCache()
        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/"), transport=transport, timeout=timeout
        )

    async def __aenter__(self) -> "PortalClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self._http.aclose()

    @property
    def cache(self) -> ResponseCache:
        return self._cache

    def set_token(self, token: Optional[str]) -> None:
        """Switch credentials; ``None`` signs out and drops every cached response."""
        self._token = token
        if token is None:
            self._cache.clear()

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        headers = {"Authorization": f"Bearer {self._token}"} if self._token else {}
        response = await self._http.request(method, path, json=json, params=params, headers=headers)

        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = {}
            if not isinstance(body, dict):
                body = {}
            message = body.get("message") or body.get("error") or f"HTTP {response.status_code}"
            logger.debug(f"{method} {path} -> {response.status_code}: {message}")
            raise PortalAPIError(response.status_code, message, code=body.get("error"))

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    async def _get(
        self,
        path: str,
        category: CacheCategory = CacheCategory.DEFAULT,
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        key = f"{path}?{urlencode(sorted(params.items()))}" if params else path
        return await self._cache.fetch(
            key, lambda: self._request("GET", path, params=params), category
        )

    async def _write(
        self,
        method: str,
        path: str,
        json: Optional[dict[str, Any]] = None,
        invalidates: tuple[str, ...] = (),
    ) -> Any:
        result = await self._request(method, path, json=json)
        for pattern in invalidates:
            self._cache.invalidate(pattern)
        return result

    # -------------------------------------------------------------------------
    # Profile and session
    # -------------------------------------------------------------------------

    async def health(self) -> dict:
        return await self._request("GET", "/health")

    async def get_me(self) -> dict:
        return await self._get("/me", CacheCategory.PROFILE)

    async def update_me(self, name: Optional[str] = None) -> dict:
        return await self._write("POST", "/me", {"name": name}, invalidates=("/me",))

    async def get_session(self) -> dict:
        return await self._get("/session", CacheCategory.PROFILE)

    # -------------------------------------------------------------------------
    # Invites
    # -------------------------------------------------------------------------

    async def join_organization(self, invite_code: str) -> dict:
        return await self._write(
            "POST", "/join", {"invite_code": invite_code}, invalidates=("/me", "/session", "/orgs")
        )

    async def accept_invite(self, code: str) -> dict:
        return await self._write(
            "POST", "/invites/accept", {"code": code}, invalidates=("/me", "/session", "/orgs")
        )

    async def validate_invite(self, code: str) -> dict:
        return await self._request("POST", "/invites/validate", json={"code": code})

    async def accept_parent_invite(self, code: str, child_id: str) -> dict:
        return await self._write(
            "POST",
            "/parent-invites/accept",
            {"code": code, "child_id": child_id},
            invalidates=("/children", "/connections"),
        )

    async def list_org_invites(self, org_id: str) -> list:
        return await self._get(f"/orgs/{org_id}/invites")

    async def create_invite(
        self,
        org_id: str,
        role: str = "specialist",
        max_uses: Optional[int] = None,
        expires_in_days: int = 30,
    ) -> dict:
        body = {"role": role, "max_uses": max_uses, "expires_in_days": expires_in_days}
        return await self._write(
            "POST", f"/orgs/{org_id}/invites", body, invalidates=("/invites",)
        )

    async def create_parent_invite(
        self,
        org_id: str,
        specialist_id: Optional[str] = None,
        max_uses: Optional[int] = None,
    ) -> dict:
        body = {"specialist_id": specialist_id, "max_uses": max_uses}
        return await self._write(
            "POST", f"/orgs/{org_id}/parent-invites", body, invalidates=("/invites",)
        )

    async def revoke_invite(self, org_id: str, code: str) -> dict:
        return await self._write(
            "DELETE", f"/orgs/{org_id}/invites/{code}", invalidates=("/invites",)
        )

    # -------------------------------------------------------------------------
    # Organizations
    # -------------------------------------------------------------------------

    async def create_organization(self, name: Optional[str] = None, country: Optional[str] = None) -> dict:
        return await self._write(
            "POST", "/orgs", {"name": name, "country": country}, invalidates=("/me", "/session")
        )

    async def get_organization(self, org_id: str) -> dict:
        return await self._get(f"/orgs/{org_id}", CacheCategory.ORGANIZATIONS)

    async def list_team(self, org_id: str) -> list:
        return await self._get(f"/orgs/{org_id}/team")

    async def list_parent_contacts(self, org_id: str) -> list:
        return await self._get(f"/orgs/{org_id}/parents")

    async def create_parent_contact(self, org_id: str, **fields: Any) -> dict:
        return await self._write(
            "POST", f"/orgs/{org_id}/parents", fields, invalidates=("/parents",)
        )

    async def update_parent_contact(self, org_id: str, contact_id: str, **fields: Any) -> dict:
        return await self._write(
            "PATCH", f"/orgs/{org_id}/parents/{contact_id}", fields, invalidates=("/parents",)
        )

    async def delete_parent_contact(self, org_id: str, contact_id: str) -> None:
        await self._write(
            "DELETE", f"/orgs/{org_id}/parents/{contact_id}", invalidates=("/parents",)
        )

    # -------------------------------------------------------------------------
    # Children
    # -------------------------------------------------------------------------

    async def list_children(self, org_id: str) -> list:
        return await self._get(f"/orgs/{org_id}/children", CacheCategory.CHILDREN)

    async def get_child(self, org_id: str, child_id: str) -> dict:
        return await self._get(f"/orgs/{org_id}/children/{child_id}", CacheCategory.CHILD_DETAIL)

    async def get_timeline(self, org_id: str, child_id: str, days: int = 30) -> dict:
        return await self._get(
            f"/orgs/{org_id}/children/{child_id}/timeline",
            CacheCategory.CHILD_DETAIL,
            params={"days": days},
        )

    async def list_notes(self, org_id: str, child_id: str) -> list:
        return await self._get(f"/orgs/{org_id}/children/{child_id}/notes")

    async def create_note(
        self,
        org_id: str,
        child_id: str,
        text: str,
        tags: Optional[list[str]] = None,
        visible_to_parent: bool = True,
    ) -> dict:
        body = {"text": text, "tags": tags or [], "visible_to_parent": visible_to_parent}
        return await self._write(
            "POST", f"/orgs/{org_id}/children/{child_id}/notes", body, invalidates=("/notes",)
        )

    async def list_connections(self, org_id: str) -> dict:
        return await self._get(f"/orgs/{org_id}/connections")

    async def assign_child(self, org_id: str, child_id: str, specialist_id: str) -> dict:
        return await self._write(
            "POST",
            f"/orgs/{org_id}/assignments",
            {"child_id": child_id, "specialist_id": specialist_id},
            invalidates=("/children", "/connections"),
        )

    async def unassign_child(self, org_id: str, child_id: str) -> dict:
        return await self._write(
            "DELETE",
            f"/orgs/{org_id}/assignments",
            {"child_id": child_id},
            invalidates=("/children", "/connections"),
        )

    # -------------------------------------------------------------------------
    # Groups
    # -------------------------------------------------------------------------

    async def list_groups(self, org_id: str) -> list:
        return await self._get(f"/orgs/{org_id}/groups")

    async def get_group(self, org_id: str, group_id: str) -> dict:
        return await self._get(f"/orgs/{org_id}/groups/{group_id}")

    async def create_group(
        self,
        org_id: str,
        name: str,
        description: Optional[str] = None,
        color: Optional[str] = None,
    ) -> dict:
        body = {"name": name, "description": description, "color": color}
        return await self._write("POST", f"/orgs/{org_id}/groups", body, invalidates=("/groups",))

    async def update_group(self, org_id: str, group_id: str, **updates: Any) -> dict:
        return await self._write(
            "PATCH", f"/orgs/{org_id}/groups/{group_id}", updates, invalidates=("/groups",)
        )

    async def delete_group(self, org_id: str, group_id: str) -> None:
        await self._write("DELETE", f"/orgs/{org_id}/groups/{group_id}", invalidates=("/groups",))

    async def add_parent_to_group(
        self,
        org_id: str,
        group_id: str,
        parent_user_id: str,
        child_ids: Optional[list[str]] = None,
    ) -> dict:
        body = {"parent_user_id": parent_user_id, "child_ids": child_ids or []}
        return await self._write(
            "POST", f"/orgs/{org_id}/groups/{group_id}/parents", body, invalidates=("/groups",)
        )

    async def remove_parent_from_group(
        self, org_id: str, group_id: str, parent_user_id: str
    ) -> dict:
        return await self._write(
            "DELETE",
            f"/orgs/{org_id}/groups/{group_id}/parents/{parent_user_id}",
            invalidates=("/groups",),
        )

    # -------------------------------------------------------------------------
    # Admin
    # -------------------------------------------------------------------------

    async def check_super_admin(self) -> dict:
        return await self._get("/admin/check", CacheCategory.SUPER_ADMIN)

    async def admin_list_organizations(self) -> list:
        return await self._get("/admin/organizations", CacheCategory.ORGANIZATIONS)

    async def admin_create_organization(self, name: str, country: Optional[str] = None) -> dict:
        return await self._write(
            "POST",
            "/admin/organizations",
            {"name": name, "country": country},
            invalidates=("/organizations", "/me"),
        )

    async def admin_list_org_specialists(self, org_id: str) -> list:
        return await self._get(f"/admin/orgs/{org_id}/specialists")

    async def admin_list_org_parents(self, org_id: str) -> list:
        return await self._get(f"/admin/orgs/{org_id}/parents")

    async def admin_list_org_children(self, org_id: str) -> list:
        return await self._get(f"/admin/orgs/{org_id}/children")

    async def admin_list_invites(self) -> list:
        return await self._get("/admin/invites")

    async def admin_create_invite(
        self,
        org_id: str,
        role: str,
        max_uses: Optional[int] = None,
        expires_at: Optional[str] = None,
    ) -> dict:
        body = {"org_id": org_id, "role": role, "max_uses": max_uses, "expires_at": expires_at}
        return await self._write("POST", "/admin/invites", body, invalidates=("/invites",))

    async def admin_revoke_invite(self, code: str) -> dict:
        return await self._write("DELETE", f"/admin/invites/{code}", invalidates=("/invites",))

    async def list_super_admins(self) -> list:
        return await self._get("/admin/super-admin", CacheCategory.SUPER_ADMIN)

    async def grant_super_admin(self, email: str) -> dict:
        return await self._write(
            "POST", "/admin/super-admin", {"email": email}, invalidates=("/admin/super-admin",)
        )

    async def revoke_super_admin(self, uid: str) -> dict:
        return await self._write(
            "DELETE", f"/admin/super-admin/{uid}", invalidates=("/admin/super-admin",)
        )

    async def list_content_tasks(self) -> list:
        return await self._get("/admin/content/tasks")

    async def create_content_task(self, **fields: Any) -> dict:
        return await self._write("POST", "/admin/content/tasks", fields, invalidates=("/content",))

    async def update_content_task(self, task_id: str, **fields: Any) -> dict:
        return await self._write(
            "PATCH", f"/admin/content/tasks/{task_id}", fields, invalidates=("/content",)
        )

    async def delete_content_task(self, task_id: str) -> None:
        await self._write("DELETE", f"/admin/content/tasks/{task_id}", invalidates=("/content",))

    async def list_content_roadmaps(self) -> list:
        return await self._get("/admin/content/roadmaps")

    async def create_content_roadmap(self, **fields: Any) -> dict:
        return await self._write(
            "POST", "/admin/content/roadmaps", fields, invalidates=("/content",)
        )

    async def update_content_roadmap(self, roadmap_id: str, **fields: Any) -> dict:
        return await self._write(
            "PATCH", f"/admin/content/roadmaps/{roadmap_id}", fields, invalidates=("/content",)
        )

    async def delete_content_roadmap(self, roadmap_id: str) -> None:
        await self._write(
            "DELETE", f"/admin/content/roadmaps/{roadmap_id}", invalidates=("/content",)
        )
