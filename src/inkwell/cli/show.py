"""inkwell show command.

Shows the current project: metadata, fragments and change history.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from inkwell.cli.common import load_config_or_exit, load_stored_project, resolve_db
from inkwell.cli.errors import ExitCode, err_no_project
from inkwell.models import Project

console = Console()


def show_cmd(
    db: Annotated[
        Path | None,
        typer.Option("--db", help="Path to the project store."),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Print the project as JSON."),
    ] = False,
    code: Annotated[
        bool,
        typer.Option("--code", help="Print only the assembled document."),
    ] = False,
) -> None:
    """Show the current project."""
    cfg = load_config_or_exit(console)
    db_path = resolve_db(db, cfg)

    project = load_stored_project(db_path)
    if project is None:
        console.print(err_no_project(str(db_path)))
        raise typer.Exit(ExitCode.NOT_FOUND)

    if json_output:
        typer.echo(json.dumps(project.to_dict(), indent=2))
        return
    if code:
        typer.echo(project.assembled_content, nl=False)
        return

    _show_project_panel(project)
    _show_fragments_table(project)
    _show_history_table(project)
    console.print(Syntax(project.assembled_content, "jsx", line_numbers=False))


def _show_project_panel(project: Project) -> None:
    lines = [
        f"  Id:       [bold]{project.id}[/]",
        f"  Title:    {escape(project.title)}",
        f"  Status:   {project.status}",
        f"  Created:  {project.created_at:%Y-%m-%d %H:%M:%S}",
    ]
    console.print(Panel("\n".join(lines), title="[bold]Project[/]", expand=False))


def _show_fragments_table(project: Project) -> None:
    table = Table(title="Fragments", show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Id", style="cyan")
    table.add_column("Name")
    table.add_column("Kind")
    table.add_column("Modified", style="dim")
    for pos, frag in enumerate(project.fragments, start=1):
        table.add_row(
            str(pos),
            frag.id,
            frag.display_name,
            frag.element_kind,
            f"{frag.last_modified_at:%Y-%m-%d %H:%M:%S}",
        )
    console.print(table)


def _show_history_table(project: Project) -> None:
    table = Table(title="History")
    table.add_column("When", style="dim")
    table.add_column("Change")
    table.add_column("Model", style="dim")
    for record in project.history:
        table.add_row(
            f"{record.timestamp:%Y-%m-%d %H:%M:%S}",
            escape(record.description),
            record.model_used,
        )
    console.print(table)
