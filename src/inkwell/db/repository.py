"""Single-slot project repository.

Holds at most one Project: ``save`` replaces whatever was stored before.
Every write runs in one transaction, so a failed save leaves the previous
project intact.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime

from inkwell.models import ChangeRecord, Fragment, Project

logger = logging.getLogger(__name__)


class ProjectRepository:
    """Data access layer for the current project, its fragments and history.

    Wraps an open sqlite3.Connection. The connection is owned by the caller
    and must be closed after use.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Initialise with an open database connection.

        Args:
            conn: An open sqlite3.Connection with the schema initialised
                (see inkwell.db.schema.initialize).
        """
        self._conn = conn

    def save(self, project: Project) -> None:
        """Store *project* in the slot, replacing any previous project.

        Raises:
            sqlite3.Error: On write failure (the transaction is rolled back).
        """
        try:
            self._delete_all()
            self._conn.execute(
                """
                INSERT INTO project
                    (slot, id, title, initial_prompt, assembled_content, status, created_at)
                VALUES (1, ?, ?, ?, ?, ?, ?)
                """,
                (
                    project.id,
                    project.title,
                    project.initial_prompt,
                    project.assembled_content,
                    project.status,
                    project.created_at.isoformat(),
                ),
            )
            self._conn.executemany(
                """
                INSERT INTO fragments
                    (position, id, display_name, content, element_kind, last_modified_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                [
                    (
                        pos,
                        f.id,
                        f.display_name,
                        f.content,
                        f.element_kind,
                        f.last_modified_at.isoformat(),
                    )
                    for pos, f in enumerate(project.fragments)
                ],
            )
            self._conn.executemany(
                """
                INSERT INTO history (seq, timestamp, description, model_used, change_id)
                VALUES (?, ?, ?, ?, ?)
                """,
                [
                    (seq, h.timestamp.isoformat(), h.description, h.model_used, h.change_id)
                    for seq, h in enumerate(project.history)
                ],
            )
            self._conn.commit()
        except sqlite3.Error:
            self._conn.rollback()
            raise
        logger.debug(
            "Saved project '%s' (%d fragments, %d history entries)",
            project.id,
            len(project.fragments),
            len(project.history),
        )

    def load(self) -> Project | None:
        """Return the stored project, or None if the slot is empty."""
        row = self._conn.execute(
            """
            SELECT id, title, initial_prompt, assembled_content, status, created_at
            FROM project WHERE slot = 1
            """
        ).fetchone()
        if row is None:
            return None

        fragments = [
            Fragment(
                id=r["id"],
                display_name=r["display_name"],
                content=r["content"],
                element_kind=r["element_kind"],
                last_modified_at=datetime.fromisoformat(r["last_modified_at"]),
            )
            for r in self._conn.execute(
                """
                SELECT id, display_name, content, element_kind, last_modified_at
                FROM fragments ORDER BY position
                """
            ).fetchall()
        ]
        history = [
            ChangeRecord(
                timestamp=datetime.fromisoformat(r["timestamp"]),
                description=r["description"],
                model_used=r["model_used"],
                change_id=r["change_id"],
            )
            for r in self._conn.execute(
                "SELECT timestamp, description, model_used, change_id FROM history ORDER BY seq"
            ).fetchall()
        ]

        return Project(
            id=row["id"],
            title=row["title"],
            initial_prompt=row["initial_prompt"],
            fragments=fragments,
            assembled_content=row["assembled_content"],
            history=history,
            status=row["status"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    def clear(self) -> None:
        """Empty the slot. A no-op when nothing is stored."""
        try:
            self._delete_all()
            self._conn.commit()
        except sqlite3.Error:
            self._conn.rollback()
            raise

    def _delete_all(self) -> None:
        self._conn.execute("DELETE FROM history")
        self._conn.execute("DELETE FROM fragments")
        self._conn.execute("DELETE FROM project")
