"""
Shared infrastructure for the Nuroo B2B backend.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- database: Supabase client factory and the Supabase-backed document store
- documents: Document store interface and in-memory implementation
- exceptions: Base exception classes
- logging_config: Root logger setup

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .database import get_supabase_client, get_document_store, reset_client_cache
from .documents import (
    SERVER_TIMESTAMP,
    DocumentSnapshot,
    IDocumentStore,
    InMemoryDocumentStore,
    Where,
)
from .exceptions import (
    NurooError,
    NotFoundError,
    ValidationError,
    ConflictError,
    AuthenticationError,
    AuthorizationError,
    ExternalServiceError,
)
from .models import AuthenticatedUser

__all__ = [
    "Settings",
    "get_settings",
    "get_supabase_client",
    "get_document_store",
    "reset_client_cache",
    "SERVER_TIMESTAMP",
    "DocumentSnapshot",
    "IDocumentStore",
    "InMemoryDocumentStore",
    "Where",
    "NurooError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "AuthenticationError",
    "AuthorizationError",
    "ExternalServiceError",
    "AuthenticatedUser",
]
