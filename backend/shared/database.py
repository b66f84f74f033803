"""
Database client factory for Supabase.

Provides the service-role client (backend operations bypass RLS) and the
document store built on top of it. All collections live in a single
``documents`` table keyed by (collection, id); see migrations/001_documents.sql.
"""

import logging
from typing import Any, Iterable, Optional

from postgrest.exceptions import APIError
from supabase import create_client, Client

from .config import get_settings
from .documents import (
    DocumentNotFoundError,
    DocumentSnapshot,
    IDocumentStore,
    InMemoryDocumentStore,
    Where,
    matches,
    new_document_id,
    prepare_data,
    sort_and_limit,
)
from .exceptions import ConflictError, ExternalServiceError

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"
# Optimistic write attempts before giving up on a hot document
MAX_WRITE_ATTEMPTS = 5

# Module-level client cache
_service_client: Optional[Client] = None
_document_store: Optional[IDocumentStore] = None


def get_supabase_client() -> Client:
    """
    Get Supabase client with service role (bypasses RLS).

    Returns:
        Supabase client configured with service role key
    """
    global _service_client

    if _service_client is None:
        settings = get_settings()
        if not settings.supabase_url or not settings.supabase_service_role_key:
            raise RuntimeError(
                "Supabase configuration missing. "
                "Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY environment variables."
            )
        _service_client = create_client(
            settings.supabase_url,
            settings.supabase_service_role_key,
        )

    return _service_client


class SupabaseDocumentStore:
    """
    Document store backed by one Postgres table through the Supabase client.

    Every row carries a ``version`` column; writes to existing rows are
    conditional on the version that was read, which gives compare_and_set
    its atomicity without a database transaction. Equality filters are
    pushed down as jsonb containment, the remaining filters, ordering and
    limits are applied to the fetched rows.
    """

    def __init__(self, db: Client, table: str = "documents") -> None:
        self._db = db
        self._table = table

    def _rows(self):
        return self._db.table(self._table)

    def _map_to_snapshot(self, row: dict[str, Any]) -> DocumentSnapshot:
        return DocumentSnapshot(
            collection=row["collection"],
            id=row["id"],
            data=row.get("data") or {},
            version=row.get("version") or 1,
        )

    def _execute(self, query, operation: str):
        try:
            return query.execute()
        except APIError as e:
            raise ExternalServiceError(
                f"Document store {operation} failed: {e.message}",
                service="supabase",
                details={"code": e.code},
            ) from e

    def _write_if_version(self, snapshot: DocumentSnapshot, data: dict[str, Any]) -> bool:
        query = (
            self._rows()
            .update({"data": data, "version": snapshot.version + 1})
            .eq("collection", snapshot.collection)
            .eq("id", snapshot.id)
            .eq("version", snapshot.version)
        )
        result = self._execute(query, "update")
        return bool(result.data)

    # -------------------------------------------------------------------------
    # IDocumentStore
    # -------------------------------------------------------------------------

    async def get(self, collection: str, doc_id: str) -> Optional[DocumentSnapshot]:
        query = self._rows().select("*").eq("collection", collection).eq("id", doc_id)
        result = self._execute(query, "get")
        if not result.data:
            return None
        return self._map_to_snapshot(result.data[0])

    async def create(self, collection: str, doc_id: str, data: dict[str, Any]) -> bool:
        row = {"collection": collection, "id": doc_id, "data": prepare_data(data), "version": 1}
        try:
            self._rows().insert(row).execute()
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                return False
            raise ExternalServiceError(
                f"Document store insert failed: {e.message}",
                service="supabase",
                details={"code": e.code},
            ) from e
        return True

    async def add(self, collection: str, data: dict[str, Any]) -> str:
        doc_id = new_document_id()
        await self.create(collection, doc_id, data)
        return doc_id

    async def set(
        self, collection: str, doc_id: str, data: dict[str, Any], merge: bool = False
    ) -> None:
        payload = prepare_data(data)
        for _ in range(MAX_WRITE_ATTEMPTS):
            existing = await self.get(collection, doc_id)
            if existing is None:
                if await self.create(collection, doc_id, payload):
                    return
                continue
            merged = {**existing.data, **payload} if merge else payload
            if self._write_if_version(existing, merged):
                return
        raise ConflictError(
            f"Concurrent writes to {collection}/{doc_id}",
            code="WRITE_CONFLICT",
        )

    async def update(self, collection: str, doc_id: str, updates: dict[str, Any]) -> None:
        payload = prepare_data(updates)
        for _ in range(MAX_WRITE_ATTEMPTS):
            existing = await self.get(collection, doc_id)
            if existing is None:
                raise DocumentNotFoundError(collection, doc_id)
            if self._write_if_version(existing, {**existing.data, **payload}):
                return
        raise ConflictError(
            f"Concurrent writes to {collection}/{doc_id}",
            code="WRITE_CONFLICT",
        )

    async def delete(self, collection: str, doc_id: str) -> bool:
        query = self._rows().delete().eq("collection", collection).eq("id", doc_id)
        result = self._execute(query, "delete")
        return bool(result.data)

    async def query(
        self,
        collection: str,
        where: Iterable[Where] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[DocumentSnapshot]:
        filters = list(where)
        query = self._rows().select("*").eq("collection", collection)
        # Missing keys read as None in matches(), which containment cannot express
        equality = {
            clause.field: clause.value
            for clause in filters
            if clause.op == "==" and clause.value is not None
        }
        if equality:
            query = query.contains("data", prepare_data(equality))
        result = self._execute(query, "query")
        docs = [
            snapshot
            for snapshot in map(self._map_to_snapshot, result.data or [])
            if matches(snapshot.data, filters)
        ]
        return sort_and_limit(docs, order_by, descending, limit)

    async def compare_and_set(
        self, snapshot: DocumentSnapshot, updates: dict[str, Any]
    ) -> bool:
        return self._write_if_version(snapshot, {**snapshot.data, **prepare_data(updates)})


def get_document_store() -> IDocumentStore:
    """
    Get the configured document store singleton.

    ``DOCUMENT_BACKEND=memory`` selects the in-process store, which is
    handy for local development without a Supabase project.
    """
    global _document_store

    if _document_store is None:
        settings = get_settings()
        if settings.document_backend == "memory":
            logger.warning("Using in-memory document store; data is not persisted")
            _document_store = InMemoryDocumentStore()
        else:
            _document_store = SupabaseDocumentStore(
                get_supabase_client(), table=settings.documents_table
            )

    return _document_store


def reset_client_cache() -> None:
    """
    Reset the cached database client and document store.

    Useful for testing or when configuration changes.
    """
    global _service_client, _document_store
    _service_client = None
    _document_store = None
