"""
Base repository class for document access.

Provides a common abstraction layer for all repositories, encapsulating
document store access and providing shared utilities for data operations.
"""

from typing import Any, Generic, Optional, TypeVar

from .documents import DocumentSnapshot, IDocumentStore, Where


T = TypeVar("T")


def composite_id(*parts: str) -> str:
    """Build a deterministic document id for records keyed by a pair."""
    return ":".join(parts)


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Provides common functionality for document operations:
    - Document store access via self._store
    - A default collection name via the ``collection`` class attribute
    - Generic type parameter for model type hints

    Subclasses implement domain-specific data access methods and handle
    document-to-Pydantic mapping internally (``_map_to_<model>`` helpers).

    Example:
        class OrganizationRepository(BaseRepository[Organization]):
            collection = "organizations"

            async def get(self, org_id: str) -> Optional[Organization]:
                doc = await self._store.get(self.collection, org_id)
                return self._map_to_organization(doc) if doc else None
    """

    collection: str = ""

    def __init__(self, store: IDocumentStore) -> None:
        """
        Initialize the repository with a document store.

        Args:
            store: Document store used for all reads and writes.
        """
        self._store = store

    async def _get_doc(self, doc_id: str) -> Optional[DocumentSnapshot]:
        return await self._store.get(self.collection, doc_id)

    async def _find(
        self,
        *where: Where,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[DocumentSnapshot]:
        return await self._store.query(
            self.collection, where, order_by=order_by, descending=descending, limit=limit
        )

    @staticmethod
    def _eq(field: str, value: Any) -> Where:
        return Where(field=field, op="==", value=value)

    @staticmethod
    def _fields(doc: DocumentSnapshot, extra: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """Document data plus its id, ready for model validation."""
        return {**doc.data, "id": doc.id, **(extra or {})}

