"""Tests for shared/documents.py."""

import asyncio
from datetime import datetime, timezone

import pytest

from shared.documents import (
    SERVER_TIMESTAMP,
    DocumentNotFoundError,
    InMemoryDocumentStore,
    Where,
    matches,
    prepare_data,
)


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


class TestPrepareData:
    def test_resolves_server_timestamp(self):
        now = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
        data = prepare_data({"created_at": SERVER_TIMESTAMP, "n": 1}, now=now)
        assert data["n"] == 1
        assert datetime.fromisoformat(data["created_at"].replace("Z", "+00:00")) == now

    def test_server_timestamp_is_singleton(self):
        assert type(SERVER_TIMESTAMP)() is SERVER_TIMESTAMP


class TestMatches:
    def test_equality_and_missing_fields(self):
        assert matches({"a": 1}, [Where(field="a", value=1)])
        assert not matches({"a": 1}, [Where(field="a", value=2)])
        assert matches({}, [Where(field="a", value=None)])

    def test_range_skips_missing(self):
        assert not matches({}, [Where(field="n", op=">", value=0)])
        assert matches({"n": 3}, [Where(field="n", op=">=", value=3)])

    def test_in_and_array_contains(self):
        assert matches({"s": "a"}, [Where(field="s", op="in", value=["a", "b"])])
        assert matches({"tags": ["x", "y"]}, [Where(field="tags", op="array_contains", value="y")])
        assert not matches({"tags": "y"}, [Where(field="tags", op="array_contains", value="y")])

    def test_unknown_operator(self):
        with pytest.raises(ValueError):
            matches({"a": 1}, [Where(field="a", op="~", value=1)])


class TestInMemoryDocumentStore:
    async def test_create_is_insert_if_absent(self, store):
        assert await store.create("c", "1", {"v": 1}) is True
        assert await store.create("c", "1", {"v": 2}) is False
        doc = await store.get("c", "1")
        assert doc.data == {"v": 1}
        assert doc.version == 1

    async def test_add_generates_id(self, store):
        doc_id = await store.add("c", {"v": 1})
        assert (await store.get("c", doc_id)).data["v"] == 1

    async def test_set_merge_and_overwrite(self, store):
        await store.set("c", "1", {"a": 1, "b": 2})
        await store.set("c", "1", {"b": 3}, merge=True)
        assert (await store.get("c", "1")).data == {"a": 1, "b": 3}
        await store.set("c", "1", {"c": 4})
        doc = await store.get("c", "1")
        assert doc.data == {"c": 4}
        assert doc.version == 3

    async def test_update_requires_existing(self, store):
        with pytest.raises(DocumentNotFoundError):
            await store.update("c", "missing", {"a": 1})

    async def test_delete_reports_existence(self, store):
        await store.set("c", "1", {})
        assert await store.delete("c", "1") is True
        assert await store.delete("c", "1") is False

    async def test_query_orders_and_limits(self, store):
        for i, n in enumerate([3, 1, 2]):
            await store.set("c", str(i), {"n": n, "kind": "x"})
        await store.set("c", "other", {"n": 10, "kind": "y"})
        docs = await store.query("c", [Where(field="kind", value="x")], order_by="n")
        assert [d.data["n"] for d in docs] == [1, 2, 3]
        docs = await store.query("c", order_by="n", descending=True, limit=2)
        assert [d.data["n"] for d in docs] == [10, 3]

    async def test_query_with_datetime_bound(self, store):
        early = datetime(2024, 1, 1, tzinfo=timezone.utc)
        late = datetime(2024, 6, 1, tzinfo=timezone.utc)
        await store.set("c", "early", {"at": early})
        await store.set("c", "late", {"at": late})
        since = datetime(2024, 3, 1, tzinfo=timezone.utc)
        docs = await store.query("c", [Where(field="at", op=">=", value=since)])
        assert [d.id for d in docs] == ["late"]

    async def test_compare_and_set_rejects_stale_snapshot(self, store):
        await store.set("c", "1", {"used": 0})
        snapshot = await store.get("c", "1")
        assert await store.compare_and_set(snapshot, {"used": 1}) is True
        assert await store.compare_and_set(snapshot, {"used": 1}) is False
        assert (await store.get("c", "1")).data["used"] == 1

    async def test_compare_and_set_on_deleted_document(self, store):
        await store.set("c", "1", {"used": 0})
        snapshot = await store.get("c", "1")
        await store.delete("c", "1")
        assert await store.compare_and_set(snapshot, {"used": 1}) is False

    async def test_concurrent_increments_never_lose_updates(self, store):
        await store.set("c", "counter", {"n": 0})

        async def increment():
            while True:
                snapshot = await store.get("c", "counter")
                if await store.compare_and_set(snapshot, {"n": snapshot.data["n"] + 1}):
                    return

        await asyncio.gather(*(increment() for _ in range(10)))
        assert (await store.get("c", "counter")).data["n"] == 10
