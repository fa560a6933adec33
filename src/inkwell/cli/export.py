"""inkwell export command.

Writes the current project's assembled document to a JSX file.

Usage:
  inkwell export --output ui/GeneratedUI.jsx [--yes]
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from inkwell.cli.common import load_config_or_exit, load_stored_project, resolve_db
from inkwell.cli.errors import ExitCode, err_assembly, err_no_project, err_output_path_unsafe
from inkwell.errors import AssemblyInvariantError
from inkwell.writer import check_overwrite, render_module, validate_output_path, write_output

console = Console()


def export_cmd(
    output: Annotated[
        str,
        typer.Option("--output", "-o", help="Output file path (required)."),
    ],
    db: Annotated[
        Path | None,
        typer.Option("--db", help="Path to the project store."),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Overwrite without asking."),
    ] = False,
) -> None:
    """Write the current project's document to a file."""
    cfg = load_config_or_exit(console)

    try:
        output_path = validate_output_path(output)
    except ValueError as exc:
        console.print(err_output_path_unsafe(output, str(exc)))
        raise typer.Exit(ExitCode.INVALID_INPUT)

    db_path = resolve_db(db, cfg)
    project = load_stored_project(db_path)
    if project is None:
        console.print(err_no_project(str(db_path)))
        raise typer.Exit(ExitCode.NOT_FOUND)

    try:
        content = render_module(project)
    except AssemblyInvariantError as exc:
        console.print(err_assembly(str(exc)))
        raise typer.Exit(ExitCode.INTERNAL_FAILURE)

    if not check_overwrite(output_path, yes=yes):
        console.print("  [dim]Cancelled.[/]")
        raise typer.Exit(ExitCode.OK)

    write_output(output_path, content)
    console.print(f"[green]✓[/] Wrote {output_path}")
