#!/usr/bin/env python3
"""
Apply the SQL migrations in migrations/ to the Supabase Postgres database.

Usage:
    python run_migrations.py              # Apply pending migrations
    python run_migrations.py --status     # Show applied / pending migrations
    python run_migrations.py --dry-run    # List what would be applied

Configuration:
    SUPABASE_DB_URL=postgresql://postgres.[project-ref]:[password]@[host]:6543/postgres
"""

import argparse
import hashlib
import sys
from dataclasses import dataclass
from pathlib import Path

import psycopg2
from psycopg2 import sql
from rich.console import Console
from rich.table import Table

from shared.config import get_settings

console = Console()

MIGRATIONS_DIR = Path(__file__).parent / "migrations"
LEDGER_TABLE = "_migrations"


@dataclass
class Migration:
    name: str
    path: Path
    checksum: str

    @classmethod
    def load(cls, path: Path) -> "Migration":
        content = path.read_text()
        return cls(path.name, path, hashlib.sha256(content.encode()).hexdigest()[:16])


def connect():
    """Open a connection or exit with a readable error."""
    settings = get_settings()
    if not settings.supabase_db_url:
        console.print("[red]Error:[/red] SUPABASE_DB_URL is not set.")
        sys.exit(1)
    try:
        return psycopg2.connect(settings.supabase_db_url)
    except psycopg2.Error as e:
        console.print(f"[red]Database connection failed:[/red] {e}")
        sys.exit(1)


def ensure_ledger(conn) -> None:
    with conn.cursor() as cur:
        cur.execute(
            sql.SQL(
                "CREATE TABLE IF NOT EXISTS {} ("
                " name VARCHAR(255) PRIMARY KEY,"
                " checksum VARCHAR(64) NOT NULL,"
                " applied_at TIMESTAMPTZ NOT NULL DEFAULT NOW())"
            ).format(sql.Identifier(LEDGER_TABLE))
        )
    conn.commit()


def applied_migrations(conn) -> dict[str, tuple[str, object]]:
    with conn.cursor() as cur:
        cur.execute(
            sql.SQL("SELECT name, checksum, applied_at FROM {} ORDER BY name").format(
                sql.Identifier(LEDGER_TABLE)
            )
        )
        return {name: (checksum, applied_at) for name, checksum, applied_at in cur.fetchall()}


def discover() -> list[Migration]:
    if not MIGRATIONS_DIR.exists():
        return []
    return [Migration.load(path) for path in sorted(MIGRATIONS_DIR.glob("*.sql"))]


def pending_migrations(conn) -> list[Migration]:
    applied = applied_migrations(conn)
    pending = []
    for migration in discover():
        if migration.name not in applied:
            pending.append(migration)
        elif applied[migration.name][0] != migration.checksum:
            console.print(
                f"[yellow]Warning:[/yellow] {migration.name} changed after it was applied"
            )
    return pending


def apply(conn, migration: Migration) -> None:
    console.print(f"[blue]Applying:[/blue] {migration.name}")
    try:
        with conn.cursor() as cur:
            cur.execute(migration.path.read_text())
            cur.execute(
                sql.SQL("INSERT INTO {} (name, checksum) VALUES (%s, %s)").format(
                    sql.Identifier(LEDGER_TABLE)
                ),
                (migration.name, migration.checksum),
            )
        conn.commit()
    except psycopg2.Error as e:
        conn.rollback()
        console.print(f"[red]✗[/red] {migration.name} failed: {e}")
        raise
    console.print(f"[green]✓[/green] {migration.name}")


def show_status(conn) -> None:
    applied = applied_migrations(conn)
    table = Table(title="Migrations")
    table.add_column("Migration", style="cyan")
    table.add_column("Status")
    table.add_column("Applied At")
    for migration in discover():
        if migration.name in applied:
            applied_at = applied[migration.name][1]
            table.add_row(migration.name, "[green]applied[/green]", str(applied_at))
        else:
            table.add_row(migration.name, "[yellow]pending[/yellow]", "")
    console.print(table)


def main():
    parser = argparse.ArgumentParser(description="Apply Nuroo database migrations")
    parser.add_argument("--status", action="store_true", help="Show migration status")
    parser.add_argument("--dry-run", action="store_true", help="List pending migrations only")
    args = parser.parse_args()

    conn = connect()
    try:
        ensure_ledger(conn)
        if args.status:
            show_status(conn)
            return

        pending = pending_migrations(conn)
        if not pending:
            console.print("[green]All migrations are up to date[/green]")
            return
        for migration in pending:
            if args.dry_run:
                console.print(f"[cyan]Would apply:[/cyan] {migration.name}")
            else:
                apply(conn, migration)
    finally:
        conn.close()


if __name__ == "__main__":
    main()
