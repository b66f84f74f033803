"""Tests for the migration runner."""

from unittest.mock import MagicMock

import run_migrations
from run_migrations import Migration, discover, pending_migrations


def fake_connection(applied_rows):
    conn = MagicMock()
    cursor = conn.cursor.return_value.__enter__.return_value
    cursor.fetchall.return_value = applied_rows
    return conn


class TestDiscover:

    def test_finds_documents_migration(self):
        names = [m.name for m in discover()]
        assert names[0] == "001_documents.sql"
        assert names == sorted(names)

    def test_checksum_is_stable(self, tmp_path):
        path = tmp_path / "002_example.sql"
        path.write_text("SELECT 1;")

        assert Migration.load(path).checksum == Migration.load(path).checksum
        assert len(Migration.load(path).checksum) == 16

    def test_missing_directory(self, tmp_path, monkeypatch):
        monkeypatch.setattr(run_migrations, "MIGRATIONS_DIR", tmp_path / "absent")
        assert discover() == []


class TestPending:

    def test_unapplied_migrations_are_pending(self, tmp_path, monkeypatch):
        (tmp_path / "001_a.sql").write_text("SELECT 1;")
        (tmp_path / "002_b.sql").write_text("SELECT 2;")
        monkeypatch.setattr(run_migrations, "MIGRATIONS_DIR", tmp_path)
        applied = Migration.load(tmp_path / "001_a.sql")

        conn = fake_connection([("001_a.sql", applied.checksum, "2024-01-01")])

        assert [m.name for m in pending_migrations(conn)] == ["002_b.sql"]

    def test_changed_migration_is_not_reapplied(self, tmp_path, monkeypatch):
        (tmp_path / "001_a.sql").write_text("SELECT 1;")
        monkeypatch.setattr(run_migrations, "MIGRATIONS_DIR", tmp_path)

        conn = fake_connection([("001_a.sql", "0000000000000000", "2024-01-01")])

        assert pending_migrations(conn) == []

    def test_apply_records_ledger_row(self, tmp_path):
        path = tmp_path / "001_a.sql"
        path.write_text("SELECT 1;")
        conn = fake_connection([])

        run_migrations.apply(conn, Migration.load(path))

        cursor = conn.cursor.return_value.__enter__.return_value
        assert cursor.execute.call_count == 2
        conn.commit.assert_called_once()
