"""
Client response cache.

Keeps recent GET responses for a per-category time to live. Entries are
evicted lazily when read after expiry. Concurrent fetches of the same
key share one in-flight load.

Invalidation is by substring of the key (the request path), so a write
to ``/orgs/o1/children/c1/notes`` can drop every cached ``/notes`` read.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class CacheCategory(str, Enum):
    PROFILE = "profile"
    SUPER_ADMIN = "super_admin"
    CHILDREN = "children"
    CHILD_DETAIL = "child_detail"
    ORGANIZATIONS = "organizations"
    DEFAULT = "default"


TTL_SECONDS: dict[CacheCategory, float] = {
    CacheCategory.PROFILE: 300,
    CacheCategory.SUPER_ADMIN: 300,
    CacheCategory.CHILDREN: 60,
    CacheCategory.CHILD_DETAIL: 30,
    CacheCategory.ORGANIZATIONS: 120,
    CacheCategory.DEFAULT: 30,
}


@dataclass
class CacheEntry:
    data: Any
    expires_at: float


class ResponseCache:
    """TTL cache with in-flight de-duplication."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._inflight: dict[str, asyncio.Task] = {}
        # Bumped on every invalidation; loads started before it are not stored
        self._generation = 0

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() >= entry.expires_at:
            del self._entries[key]
            return None
        return entry.data

    def set(self, key: str, data: Any, category: CacheCategory = CacheCategory.DEFAULT) -> None:
        self._entries[key] = CacheEntry(data=data, expires_at=self._clock() + TTL_SECONDS[category])

    def invalidate(self, pattern: Optional[str] = None) -> int:
        """
        Drop entries whose key contains ``pattern`` (all entries when None).

        Returns:
            Number of entries dropped.
        """
        self._generation += 1
        if pattern is None:
            dropped = len(self._entries)
            self._entries.clear()
            self._inflight.clear()
            return dropped

        keys = [key for key in self._entries if pattern in key]
        for key in keys:
            del self._entries[key]
        for key in [key for key in self._inflight if pattern in key]:
            del self._inflight[key]
        if keys:
            logger.debug(f"Invalidated {len(keys)} cached responses matching {pattern!r}")
        return len(keys)

    def clear(self) -> None:
        self.invalidate()

    async def fetch(
        self,
        key: str,
        loader: Callable[[], Awaitable[Any]],
        category: CacheCategory = CacheCategory.DEFAULT,
    ) -> Any:
        """
        Return the cached value for ``key`` or load it.

        Callers arriving while a load for the same key is running await
        that load instead of starting another.
        """
        cached = self.get(key)
        if cached is not None:
            return cached

        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._load(key, loader, category, self._generation))
            self._inflight[key] = task
        return await task

    async def _load(
        self,
        key: str,
        loader: Callable[[], Awaitable[Any]],
        category: CacheCategory,
        generation: int,
    ) -> Any:
        try:
            data = await loader()
            if generation == self._generation:
                self.set(key, data, category)
            return data
        finally:
            if self._inflight.get(key) is asyncio.current_task():
                del self._inflight[key]
