"""Tests for shared/database.py."""

from unittest.mock import MagicMock, patch

import pytest
from postgrest.exceptions import APIError

from shared.database import (
    SupabaseDocumentStore,
    get_document_store,
    get_supabase_client,
    reset_client_cache,
)
from shared.documents import DocumentSnapshot, InMemoryDocumentStore, Where
from shared.exceptions import ExternalServiceError


class TestSupabaseClient:
    def setup_method(self):
        """Reset cache before each test."""
        reset_client_cache()

    def teardown_method(self):
        reset_client_cache()

    @patch("shared.database.create_client")
    @patch("shared.database.get_settings")
    def test_get_supabase_client_creates_client(self, mock_settings, mock_create):
        """Should create client with service role key."""
        mock_settings.return_value.supabase_url = "https://test.supabase.co"
        mock_settings.return_value.supabase_service_role_key = "test-key"
        mock_create.return_value = MagicMock()

        client = get_supabase_client()

        mock_create.assert_called_once_with("https://test.supabase.co", "test-key")
        assert client is not None

    @patch("shared.database.create_client")
    @patch("shared.database.get_settings")
    def test_get_supabase_client_caches_client(self, mock_settings, mock_create):
        """Should cache the client and not recreate it."""
        mock_settings.return_value.supabase_url = "https://test.supabase.co"
        mock_settings.return_value.supabase_service_role_key = "test-key"
        mock_create.return_value = MagicMock()

        assert get_supabase_client() is get_supabase_client()
        mock_create.assert_called_once()

    @patch("shared.database.get_settings")
    def test_get_supabase_client_raises_without_config(self, mock_settings):
        """Should raise if configuration is missing."""
        mock_settings.return_value.supabase_url = ""
        mock_settings.return_value.supabase_service_role_key = ""

        with pytest.raises(RuntimeError, match="Supabase configuration missing"):
            get_supabase_client()

    @patch("shared.database.get_settings")
    def test_memory_backend(self, mock_settings):
        mock_settings.return_value.document_backend = "memory"
        store = get_document_store()
        assert isinstance(store, InMemoryDocumentStore)
        assert get_document_store() is store


class TestSupabaseDocumentStore:
    """The Supabase query builder is mocked; only the calls are checked."""

    @pytest.fixture
    def db(self):
        return MagicMock()

    @pytest.fixture
    def table(self, db):
        return db.table.return_value

    async def test_get_maps_row(self, db, table):
        query = table.select.return_value.eq.return_value.eq.return_value
        query.execute.return_value.data = [
            {"collection": "invites", "id": "ABC", "data": {"used_count": 2}, "version": 4}
        ]
        doc = await SupabaseDocumentStore(db).get("invites", "ABC")
        assert doc.data == {"used_count": 2}
        assert doc.version == 4
        db.table.assert_called_with("documents")

    async def test_get_missing(self, db, table):
        query = table.select.return_value.eq.return_value.eq.return_value
        query.execute.return_value.data = []
        assert await SupabaseDocumentStore(db).get("invites", "ABC") is None

    async def test_create_unique_violation_returns_false(self, db, table):
        table.insert.return_value.execute.side_effect = APIError(
            {"message": "duplicate key", "code": "23505"}
        )
        assert await SupabaseDocumentStore(db).create("invites", "ABC", {}) is False

    async def test_create_other_error_raises(self, db, table):
        table.insert.return_value.execute.side_effect = APIError(
            {"message": "boom", "code": "XX000"}
        )
        with pytest.raises(ExternalServiceError):
            await SupabaseDocumentStore(db).create("invites", "ABC", {})

    async def test_compare_and_set_is_conditional_on_version(self, db, table):
        conditional = table.update.return_value.eq.return_value.eq.return_value.eq
        conditional.return_value.execute.return_value.data = []
        snapshot = DocumentSnapshot(collection="invites", id="ABC", data={"used_count": 0}, version=3)

        assert await SupabaseDocumentStore(db).compare_and_set(snapshot, {"used_count": 1}) is False
        table.update.assert_called_once_with({"data": {"used_count": 1}, "version": 4})
        conditional.assert_called_once_with("version", 3)

    async def test_query_pushes_down_equality(self, db, table):
        query = table.select.return_value.eq.return_value
        query.contains.return_value.execute.return_value.data = [
            {"collection": "memberships", "id": "o:b", "data": {"org_id": "o", "n": 2}},
            {"collection": "memberships", "id": "o:a", "data": {"org_id": "o", "n": 1}},
        ]
        docs = await SupabaseDocumentStore(db).query(
            "memberships", [Where(field="org_id", value="o")], order_by="n"
        )
        query.contains.assert_called_once_with("data", {"org_id": "o"})
        assert [d.id for d in docs] == ["o:a", "o:b"]
