"""Inkwell project store (SQLite)."""

from inkwell.db.connection import Database
from inkwell.db.migrations import MIGRATIONS, run_migrations
from inkwell.db.repository import ProjectRepository
from inkwell.db.schema import initialize

__all__ = [
    "Database",
    "MIGRATIONS",
    "ProjectRepository",
    "initialize",
    "run_migrations",
]
