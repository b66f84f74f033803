"""
Document store abstraction.

Every module persists its records as JSON documents addressed by
(collection, id). The store contract is deliberately small: point reads,
writes, equality/range queries and one optimistic primitive,
``compare_and_set``, which is what makes invite redemption atomic.

Implementations:
- InMemoryDocumentStore: process-local, used for tests and local development
- SupabaseDocumentStore (shared.database): one Postgres table via Supabase
"""

import asyncio
import uuid
from datetime import datetime, timezone
from typing import Any, Iterable, Optional, Protocol, runtime_checkable

from pydantic import BaseModel, Field
from pydantic_core import to_jsonable_python

from .exceptions import NotFoundError


class _ServerTimestamp:
    """Sentinel replaced with the store's current UTC time on write."""

    _instance: "Optional[_ServerTimestamp]" = None

    def __new__(cls) -> "_ServerTimestamp":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()

QUERY_OPERATORS = ("==", "!=", "<", "<=", ">", ">=", "in", "array_contains")


class Where(BaseModel):
    """A single query filter on a top-level document field."""

    field: str
    op: str = "=="
    value: Any = None

    model_config = {"frozen": True}


class DocumentSnapshot(BaseModel):
    """A document as read from the store."""

    collection: str
    id: str
    data: dict[str, Any] = Field(default_factory=dict)
    version: int = Field(default=1, description="Incremented on every write")

    model_config = {"frozen": True}

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)


class DocumentNotFoundError(NotFoundError):
    """Raised when updating a document that does not exist."""

    def __init__(self, collection: str, doc_id: str):
        super().__init__(
            f"Document not found: {collection}/{doc_id}",
            code="DOCUMENT_NOT_FOUND",
            details={"collection": collection, "id": doc_id},
        )


@runtime_checkable
class IDocumentStore(Protocol):
    """
    Interface for document persistence.

    All writes resolve SERVER_TIMESTAMP values and serialize data to
    JSON-compatible form, so datetimes come back as ISO-8601 strings.
    """

    async def get(self, collection: str, doc_id: str) -> Optional[DocumentSnapshot]:
        """Return the document or None."""
        ...

    async def create(self, collection: str, doc_id: str, data: dict[str, Any]) -> bool:
        """
        Insert a document only if the id is free.

        Returns:
            True if created, False if a document with that id already exists
        """
        ...

    async def add(self, collection: str, data: dict[str, Any]) -> str:
        """Insert a document under a generated id and return the id."""
        ...

    async def set(
        self, collection: str, doc_id: str, data: dict[str, Any], merge: bool = False
    ) -> None:
        """Create or overwrite a document. With merge=True, fields are merged."""
        ...

    async def update(self, collection: str, doc_id: str, updates: dict[str, Any]) -> None:
        """
        Merge fields into an existing document.

        Raises:
            DocumentNotFoundError: If the document does not exist
        """
        ...

    async def delete(self, collection: str, doc_id: str) -> bool:
        """Delete a document. Returns whether it existed."""
        ...

    async def query(
        self,
        collection: str,
        where: Iterable[Where] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[DocumentSnapshot]:
        """Return documents matching all filters."""
        ...

    async def compare_and_set(
        self, snapshot: DocumentSnapshot, updates: dict[str, Any]
    ) -> bool:
        """
        Merge updates into the document only if it is still at snapshot.version.

        Returns:
            True if the write happened, False if the document changed or vanished
        """
        ...


# -----------------------------------------------------------------------------
# Helpers shared by implementations
# -----------------------------------------------------------------------------


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Read timezone-less datetimes as UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def prepare_data(data: dict[str, Any], now: Optional[datetime] = None) -> dict[str, Any]:
    """Resolve SERVER_TIMESTAMP sentinels and convert to JSON-compatible values."""
    now = now or utcnow()
    resolved = {
        key: (now if value is SERVER_TIMESTAMP else value) for key, value in data.items()
    }
    return to_jsonable_python(resolved)


def new_document_id() -> str:
    return uuid.uuid4().hex


def matches(data: dict[str, Any], filters: Iterable[Where]) -> bool:
    """Evaluate query filters against stored (JSON-compatible) data."""
    for clause in filters:
        if clause.op not in QUERY_OPERATORS:
            raise ValueError(f"Unsupported query operator: {clause.op}")
        value = to_jsonable_python(clause.value)
        current = data.get(clause.field)
        if clause.op == "==":
            ok = current == value
        elif clause.op == "!=":
            ok = current != value
        elif clause.op == "in":
            ok = current in value
        elif clause.op == "array_contains":
            ok = isinstance(current, list) and value in current
        elif current is None:
            ok = False
        elif clause.op == "<":
            ok = current < value
        elif clause.op == "<=":
            ok = current <= value
        elif clause.op == ">":
            ok = current > value
        else:
            ok = current >= value
        if not ok:
            return False
    return True


def sort_and_limit(
    docs: list[DocumentSnapshot],
    order_by: Optional[str],
    descending: bool,
    limit: Optional[int],
) -> list[DocumentSnapshot]:
    if order_by:
        # Missing values sort first ascending, last descending
        def sort_key(doc: DocumentSnapshot) -> tuple[bool, Any]:
            value = doc.data.get(order_by)
            return (value is not None, value if value is not None else "")

        docs = sorted(docs, key=sort_key, reverse=descending)
    if limit is not None:
        docs = docs[:limit]
    return docs


# -----------------------------------------------------------------------------
# In-memory implementation
# -----------------------------------------------------------------------------


class InMemoryDocumentStore:
    """
    Process-local document store.

    Reads yield to the event loop before returning, so concurrent
    read-then-write sequences interleave the way they would against a
    remote store. Writes are serialized by a single lock.
    """

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, DocumentSnapshot]] = {}
        self._lock = asyncio.Lock()

    def _bucket(self, collection: str) -> dict[str, DocumentSnapshot]:
        return self._collections.setdefault(collection, {})

    async def get(self, collection: str, doc_id: str) -> Optional[DocumentSnapshot]:
        await asyncio.sleep(0)
        return self._bucket(collection).get(doc_id)

    async def create(self, collection: str, doc_id: str, data: dict[str, Any]) -> bool:
        async with self._lock:
            bucket = self._bucket(collection)
            if doc_id in bucket:
                return False
            bucket[doc_id] = DocumentSnapshot(
                collection=collection, id=doc_id, data=prepare_data(data)
            )
            return True

    async def add(self, collection: str, data: dict[str, Any]) -> str:
        doc_id = new_document_id()
        await self.create(collection, doc_id, data)
        return doc_id

    async def set(
        self, collection: str, doc_id: str, data: dict[str, Any], merge: bool = False
    ) -> None:
        async with self._lock:
            bucket = self._bucket(collection)
            existing = bucket.get(doc_id)
            payload = prepare_data(data)
            if existing is None:
                bucket[doc_id] = DocumentSnapshot(collection=collection, id=doc_id, data=payload)
                return
            merged = {**existing.data, **payload} if merge else payload
            bucket[doc_id] = DocumentSnapshot(
                collection=collection, id=doc_id, data=merged, version=existing.version + 1
            )

    async def update(self, collection: str, doc_id: str, updates: dict[str, Any]) -> None:
        async with self._lock:
            bucket = self._bucket(collection)
            existing = bucket.get(doc_id)
            if existing is None:
                raise DocumentNotFoundError(collection, doc_id)
            bucket[doc_id] = DocumentSnapshot(
                collection=collection,
                id=doc_id,
                data={**existing.data, **prepare_data(updates)},
                version=existing.version + 1,
            )

    async def delete(self, collection: str, doc_id: str) -> bool:
        async with self._lock:
            return self._bucket(collection).pop(doc_id, None) is not None

    async def query(
        self,
        collection: str,
        where: Iterable[Where] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[DocumentSnapshot]:
        await asyncio.sleep(0)
        filters = list(where)
        docs = [doc for doc in self._bucket(collection).values() if matches(doc.data, filters)]
        return sort_and_limit(docs, order_by, descending, limit)

    async def compare_and_set(
        self, snapshot: DocumentSnapshot, updates: dict[str, Any]
    ) -> bool:
        async with self._lock:
            bucket = self._bucket(snapshot.collection)
            current = bucket.get(snapshot.id)
            if current is None or current.version != snapshot.version:
                return False
            bucket[snapshot.id] = DocumentSnapshot(
                collection=snapshot.collection,
                id=snapshot.id,
                data={**current.data, **prepare_data(updates)},
                version=current.version + 1,
            )
            return True
