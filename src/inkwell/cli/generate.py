"""inkwell generate CLI command.

Generates a new UI from a prompt, decomposes it into fragments and stores it
as the current project (replacing any previous one).

Usage:
  inkwell generate --prompt "A login card with email and password" [--json]

Flags:
  --prompt TEXT   Description of the UI (required, non-empty)
  --db PATH       Path to the project store (default: store.path, .inkwell.db)
  --json          Print the project and assembled document as JSON
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn

from inkwell.cli.common import load_config_or_exit, open_db, resolve_db
from inkwell.cli.errors import (
    ExitCode,
    err_assembly,
    err_empty_field,
    err_upstream,
)
from inkwell.db.repository import ProjectRepository
from inkwell.errors import AssemblyInvariantError, InvalidInputError, UpstreamError
from inkwell.pipeline import generate_project

console = Console()


def generate_cmd(
    prompt: Annotated[
        str,
        typer.Option("--prompt", "-p", help="Description of the UI to generate (required)."),
    ],
    db: Annotated[
        Path | None,
        typer.Option("--db", help="Path to the project store (created if missing)."),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Print the project as JSON."),
    ] = False,
) -> None:
    """Generate a UI from a prompt and store it as the current project."""
    cfg = load_config_or_exit(console)

    if not prompt.strip():
        console.print(err_empty_field("--prompt"))
        raise typer.Exit(ExitCode.INVALID_INPUT)

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
            console=console,
        ) as prog:
            prog.add_task(f"Generating with {cfg.generation.model}…", total=None)
            project = generate_project(prompt, cfg)
    except InvalidInputError as exc:
        console.print(f"[red]Error:[/] {exc}")
        raise typer.Exit(ExitCode.INVALID_INPUT)
    except UpstreamError as exc:
        console.print(err_upstream(str(exc)))
        raise typer.Exit(ExitCode.UPSTREAM_FAILURE)
    except AssemblyInvariantError as exc:
        console.print(err_assembly(str(exc)))
        raise typer.Exit(ExitCode.INTERNAL_FAILURE)

    conn = open_db(resolve_db(db, cfg))
    try:
        ProjectRepository(conn).save(project)
    finally:
        conn.close()

    if json_output:
        typer.echo(json.dumps(
            {"project": project.to_dict(), "assembled_content": project.assembled_content},
            indent=2,
        ))
        return

    console.print(f"[green]✓[/] Generated project [bold]{project.id}[/]: {escape(project.title)}")
    console.print(f"  Fragments: {len(project.fragments)}")
    for frag in project.fragments:
        console.print(f"    [cyan]{frag.id}[/]  {frag.display_name} <{frag.element_kind}>")
    console.print("  [dim]Run:  inkwell patch --project "
                  f"{project.id} --target <id> --instruction \"...\"[/]")
