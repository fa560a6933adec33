"""inkwell clear command: discard the current project."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from inkwell.cli.common import load_config_or_exit, open_db, resolve_db
from inkwell.db.repository import ProjectRepository

console = Console()


def clear_cmd(
    db: Annotated[
        Path | None,
        typer.Option("--db", help="Path to the project store."),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
) -> None:
    """Discard the current project."""
    cfg = load_config_or_exit(console)
    db_path = resolve_db(db, cfg)

    if not db_path.exists():
        console.print("[dim]Nothing to clear.[/]")
        return

    conn = open_db(db_path)
    try:
        repo = ProjectRepository(conn)
        project = repo.load()
        if project is None:
            console.print("[dim]Nothing to clear.[/]")
            return

        if not yes:
            if not typer.confirm(f"Discard project '{project.id}' ({project.title})?", default=False):
                console.print("[dim]Cancelled.[/]")
                raise typer.Exit(0)

        repo.clear()
    finally:
        conn.close()

    console.print(f"[green]✓[/] Cleared project {project.id}")
