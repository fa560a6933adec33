"""Tests for the forward-only migration runner."""

from __future__ import annotations

import sqlite3

import pytest

from inkwell.db.migrations import MIGRATIONS, current_version, run_migrations
from inkwell.db.schema import CURRENT_VERSION


def _tables(conn: sqlite3.Connection) -> set[str]:
    rows = conn.execute("SELECT name FROM sqlite_master WHERE type='table'").fetchall()
    return {r[0] for r in rows}


def test_fresh_database_gets_all_tables() -> None:
    conn = sqlite3.connect(":memory:")
    run_migrations(conn)
    assert {"schema_version", "project", "fragments", "history"} <= _tables(conn)
    assert current_version(conn) == CURRENT_VERSION == MIGRATIONS[-1][0]


def test_run_migrations_idempotent() -> None:
    conn = sqlite3.connect(":memory:")
    run_migrations(conn)
    run_migrations(conn)
    count = conn.execute("SELECT COUNT(*) FROM schema_version").fetchone()[0]
    assert count == len(MIGRATIONS)


def test_project_table_holds_single_slot(tmp_db) -> None:
    with pytest.raises(sqlite3.IntegrityError):
        tmp_db.execute(
            "INSERT INTO project (slot, id, title, initial_prompt, assembled_content, created_at)"
            " VALUES (2, 'p', 't', 'p', 'c', '2026-01-01')"
        )
