"""Forward-only migration runner for the project store schema."""

from __future__ import annotations

import sqlite3

# schema_version is the bootstrap table, created before migrations run.
_CREATE_SCHEMA_VERSION = """
CREATE TABLE IF NOT EXISTS schema_version (
    version     INTEGER NOT NULL,
    applied_at  DATETIME NOT NULL DEFAULT (datetime('now'))
)
"""

# Single slot: the project table holds at most one row.
_V1_SQL = """
CREATE TABLE IF NOT EXISTS project (
    slot                INTEGER PRIMARY KEY CHECK (slot = 1),
    id                  TEXT NOT NULL,
    title               TEXT NOT NULL,
    initial_prompt      TEXT NOT NULL,
    assembled_content   TEXT NOT NULL,
    status              TEXT NOT NULL DEFAULT 'draft',
    created_at          TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS fragments (
    position            INTEGER PRIMARY KEY,
    id                  TEXT NOT NULL,
    display_name        TEXT NOT NULL,
    content             TEXT NOT NULL,
    element_kind        TEXT NOT NULL,
    last_modified_at    TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS history (
    seq                 INTEGER PRIMARY KEY,
    timestamp           TEXT NOT NULL,
    description         TEXT NOT NULL,
    model_used          TEXT NOT NULL,
    change_id           TEXT NOT NULL
);
"""

# Append-only. Each entry: (version: int, sql: str).
# executescript() issues an implicit COMMIT before running.
MIGRATIONS: list[tuple[int, str]] = [
    (1, _V1_SQL),
]


def current_version(conn: sqlite3.Connection) -> int:
    """Return the highest applied migration version (0 for a fresh database)."""
    row = conn.execute("SELECT MAX(version) FROM schema_version").fetchone()
    return row[0] if row[0] is not None else 0


def run_migrations(conn: sqlite3.Connection) -> None:
    """Apply all pending migrations in ascending version order.

    Idempotent: safe to call on a database at any version.
    """
    conn.execute(_CREATE_SCHEMA_VERSION)
    conn.commit()

    current = current_version(conn)

    for version, sql in MIGRATIONS:
        if version > current:
            conn.executescript(sql)
            conn.execute(
                "INSERT INTO schema_version (version) VALUES (?)", (version,)
            )
            conn.commit()
