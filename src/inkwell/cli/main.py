"""Inkwell CLI entry point."""

from __future__ import annotations

import importlib.metadata
import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from inkwell.cli.clear import clear_cmd
from inkwell.cli.export import export_cmd
from inkwell.cli.generate import generate_cmd
from inkwell.cli.patch import patch_cmd
from inkwell.cli.show import show_cmd


def _installed_version() -> str:
    try:
        return importlib.metadata.version("inkwell")
    except importlib.metadata.PackageNotFoundError:
        return "dev"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"inkwell {_installed_version()}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=verbose)],
        force=True,
    )


app = typer.Typer(
    name="inkwell",
    help=(
        "Inkwell: generate UI markup and edit it element by element.\n\n"
        "  inkwell generate  Generate a UI from a prompt.\n"
        "  inkwell patch     Rewrite one element by its identity."
    ),
    add_completion=False,
)


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging on stderr."),
    ] = False,
) -> None:
    """Inkwell: generate UI markup and edit it element by element."""
    _configure_logging(verbose)


app.command("generate")(generate_cmd)
app.command("patch")(patch_cmd)
app.command("show")(show_cmd)
app.command("export")(export_cmd)
app.command("clear")(clear_cmd)


@app.command("version")
def version_cmd() -> None:
    """Show the installed Inkwell version."""
    typer.echo(f"inkwell {_installed_version()}")


if __name__ == "__main__":
    app()
