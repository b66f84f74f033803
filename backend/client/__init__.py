"""
Portal API client.

Async HTTP client for the portal API with a short-lived response cache.

Public API:
- PortalClient: Typed-by-path client over httpx
- PortalAPIError: Raised for non-2xx responses
- ResponseCache, CacheCategory, TTL_SECONDS: Response cache
"""

from .api import PortalAPIError, PortalClient
from .cache import TTL_SECONDS, CacheCategory, ResponseCache

__all__ = [
    "PortalClient",
    "PortalAPIError",
    "ResponseCache",
    "CacheCategory",
    "TTL_SECONDS",
]
