"""Helpers shared by the CLI commands: config loading and store access."""

from __future__ import annotations

import sqlite3
from pathlib import Path

import typer
from rich.console import Console

from inkwell.cli.errors import ExitCode, err_config
from inkwell.config import ConfigError, InkwellConfig, load_config
from inkwell.db.connection import Database
from inkwell.db.repository import ProjectRepository
from inkwell.models import Project


def load_config_or_exit(console: Console) -> InkwellConfig:
    """Load the layered config; print the problem and exit 1 when it is invalid."""
    try:
        return load_config()
    except ConfigError as exc:
        console.print(err_config(str(exc)))
        raise typer.Exit(ExitCode.INTERNAL_FAILURE)


def resolve_db(db: Path | None, cfg: InkwellConfig) -> Path:
    return db if db is not None else Path(cfg.store.path)


def open_db(db_path: Path) -> sqlite3.Connection:
    return Database(db_path).connect()


def load_stored_project(db_path: Path) -> Project | None:
    """Return the stored project, or None; a missing store file is never created."""
    database = Database(db_path)
    if not database.exists():
        return None
    with database as conn:
        return ProjectRepository(conn).load()
