"""Tests for shared/repository.py."""

from typing import Optional

from shared.documents import InMemoryDocumentStore
from shared.repository import BaseRepository, composite_id


class Widget:
    def __init__(self, id: str, name: str):
        self.id = id
        self.name = name


class WidgetRepository(BaseRepository[Widget]):
    collection = "widgets"

    async def get(self, widget_id: str) -> Optional[Widget]:
        doc = await self._get_doc(widget_id)
        return Widget(**self._fields(doc)) if doc else None

    async def named(self, name: str) -> list[Widget]:
        docs = await self._find(self._eq("name", name), order_by="id")
        return [Widget(**self._fields(doc)) for doc in docs]


class TestBaseRepository:
    """Tests for BaseRepository base class."""

    def test_init_stores_document_store(self):
        store = InMemoryDocumentStore()
        repo = WidgetRepository(store)
        assert repo._store is store

    def test_composite_id(self):
        assert composite_id("org1", "user1") == "org1:user1"

    async def test_get_doc_and_fields(self):
        store = InMemoryDocumentStore()
        await store.set("widgets", "w1", {"name": "gear"})
        widget = await WidgetRepository(store).get("w1")
        assert widget.id == "w1"
        assert widget.name == "gear"

    async def test_get_missing(self):
        assert await WidgetRepository(InMemoryDocumentStore()).get("nope") is None

    async def test_find_with_equality(self):
        store = InMemoryDocumentStore()
        await store.set("widgets", "w1", {"name": "gear"})
        await store.set("widgets", "w2", {"name": "cog"})
        await store.set("widgets", "w3", {"name": "gear"})
        widgets = await WidgetRepository(store).named("gear")
        assert [w.id for w in widgets] == ["w1", "w3"]
