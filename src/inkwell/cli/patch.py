"""inkwell patch CLI command.

Rewrites one element of the current project, identified by its identity
attribute, and stores the result. The stored project is only replaced when
the whole patch succeeds.

Usage:
  inkwell patch --project a1b2c3d --target e4f5a6b --instruction "Make it red"
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
    err_identity_not_preserved,
    err_no_project,
    err_project_mismatch,
    err_target_not_found,
    err_upstream,
)
from inkwell.db.repository import ProjectRepository
from inkwell.errors import (
    AssemblyInvariantError,
    InvalidInputError,
    InvalidPatchError,
    TargetNotFoundError,
    UpstreamError,
)
from inkwell.pipeline import regenerate_element

console = Console()


def patch_cmd(
    project_id: Annotated[
        str,
        typer.Option("--project", help="Id of the current project (required)."),
    ],
    target: Annotated[
        str,
        typer.Option("--target", "-t", help="Identity of the element to change (required)."),
    ],
    instruction: Annotated[
        str,
        typer.Option("--instruction", "-i", help="What to change (required)."),
    ],
    db: Annotated[
        Path | None,
        typer.Option("--db", help="Path to the project store."),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Print the updated project as JSON."),
    ] = False,
) -> None:
    """Rewrite one element of the current project."""
    cfg = load_config_or_exit(console)

    for flag, value in (("--project", project_id), ("--target", target), ("--instruction", instruction)):
        if not value.strip():
            console.print(err_empty_field(flag))
            raise typer.Exit(ExitCode.INVALID_INPUT)

    db_path = resolve_db(db, cfg)
    if not db_path.is_file():
        console.print(err_no_project(str(db_path)))
        raise typer.Exit(ExitCode.NOT_FOUND)

    conn = open_db(db_path)
    try:
        repo = ProjectRepository(conn)
        project = repo.load()
        if project is None:
            console.print(err_no_project(str(db_path)))
            raise typer.Exit(ExitCode.NOT_FOUND)
        if project.id != project_id:
            console.print(err_project_mismatch(project_id, project.id))
            raise typer.Exit(ExitCode.NOT_FOUND)

        try:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                transient=True,
                console=console,
            ) as prog:
                prog.add_task(f"Patching {target} with {cfg.generation.patch_model}…", total=None)
                updated = regenerate_element(project, target, instruction, cfg)
        except InvalidInputError as exc:
            console.print(f"[red]Error:[/] {exc}")
            raise typer.Exit(ExitCode.INVALID_INPUT)
        except TargetNotFoundError:
            console.print(err_target_not_found(target))
            raise typer.Exit(ExitCode.NOT_FOUND)
        except UpstreamError as exc:
            console.print(err_upstream(str(exc)))
            raise typer.Exit(ExitCode.UPSTREAM_FAILURE)
        except InvalidPatchError as exc:
            console.print(err_identity_not_preserved(exc.target_id, exc.identity_attribute))
            raise typer.Exit(ExitCode.UPSTREAM_FAILURE)
        except AssemblyInvariantError as exc:
            console.print(err_assembly(str(exc)))
            raise typer.Exit(ExitCode.INTERNAL_FAILURE)

        repo.save(updated)
    finally:
        conn.close()

    if json_output:
        typer.echo(json.dumps(
            {"project": updated.to_dict(), "assembled_content": updated.assembled_content},
            indent=2,
        ))
        return

    console.print(f"[green]✓[/] {escape(updated.history[-1].description)}")
    console.print(f"  [dim]History: {len(updated.history)} change(s)[/]")
