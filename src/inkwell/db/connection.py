"""SQLite connection layer for the project store.

A store is one SQLite file (``.inkwell.db`` by default) in the working
directory. Opening it brings the schema up to date unless told otherwise.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from inkwell.db.schema import initialize

logger = logging.getLogger(__name__)

# Milliseconds to wait on a locked store (two commands running at once).
_BUSY_TIMEOUT_MS = 5_000


class Database:
    """Handle on a project store file.

    Usage:
        with Database(".inkwell.db") as conn:
            ProjectRepository(conn).load()
    """

    def __init__(self, db_path: Path | str, *, migrate: bool = True) -> None:
        self.db_path = Path(db_path)
        self.migrate = migrate
        self._conn: sqlite3.Connection | None = None

    def exists(self) -> bool:
        """True if the store file is present (nothing is created)."""
        return self.db_path.is_file()

    def connect(self) -> sqlite3.Connection:
        """Open the store and return the connection.

        Rows come back as ``sqlite3.Row``. Foreign keys and WAL journaling
        are switched on, and pending migrations are applied when ``migrate``
        is set. The caller owns the connection and must close it.
        """
        if not self.db_path.exists():
            logger.debug("Creating project store at %s", self.db_path)
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute(f"PRAGMA busy_timeout = {_BUSY_TIMEOUT_MS}")
        conn.execute("PRAGMA foreign_keys = ON")
        conn.execute("PRAGMA journal_mode = WAL")
        if self.migrate:
            initialize(conn)
        return conn

    def __enter__(self) -> sqlite3.Connection:
        self._conn = self.connect()
        return self._conn

    def __exit__(self, exc_type: type[BaseException] | None, *args: object) -> None:
        if self._conn is None:
            return
        if exc_type is not None:
            self._conn.rollback()
        self._conn.close()
        self._conn = None
