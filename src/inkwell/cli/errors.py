"""Inkwell CLI exit codes and actionable error messages.

Every error shown to the user names what went wrong and what to do next.

Usage:
    from inkwell.cli.errors import ExitCode, err_no_project
    console.print(err_no_project())
    raise typer.Exit(ExitCode.NOT_FOUND)
"""

from __future__ import annotations

from enum import IntEnum

from rich.markup import escape


class ExitCode(IntEnum):
    OK = 0
    INTERNAL_FAILURE = 1
    INVALID_INPUT = 2
    NOT_FOUND = 3
    UPSTREAM_FAILURE = 4


def err_no_project(db_path: str = ".inkwell.db") -> str:
    """No project stored in the database."""
    return (
        f"[red]Error:[/] No active project found in '{db_path}'.\n"
        '  Run:  inkwell generate --prompt "..."'
    )


def err_project_mismatch(requested: str, current: str) -> str:
    return (
        f"[red]Error:[/] Project '{requested}' not found.\n"
        f"  The current project is '{current}'. Run:  inkwell show"
    )


def err_target_not_found(target_id: str) -> str:
    """Identity not present in any fragment."""
    return (
        f"[red]Error:[/] Element '{target_id}' not found in the current project.\n"
        "  Run:  inkwell show  to list fragment ids."
    )


def err_empty_field(name: str) -> str:
    return f"[red]Error:[/] {name} is required and must not be empty."


def err_upstream(message: str) -> str:
    """Content-generation collaborator returned its error sentinel."""
    return (
        f"[red]Error:[/] Content generation failed: {escape(message)}\n"
        "  Check your API key and model settings, then retry."
    )


def err_identity_not_preserved(target_id: str, identity_attribute: str) -> str:
    """The model's replacement dropped the target identity."""
    return (
        f"[red]Error:[/] The model did not preserve {identity_attribute}=\"{target_id}\".\n"
        "  The project was not changed. Rephrase the instruction and retry."
    )


def err_assembly(message: str) -> str:
    return (
        f"[red]Error:[/] Internal failure: {escape(message)}\n"
        "  The project was not saved."
    )


def err_config(message: str) -> str:
    return f"[red]Error:[/] Invalid configuration.\n  {escape(message)}"


def err_output_path_unsafe(path: str, reason: str) -> str:
    """--output path fails validation."""
    return (
        f"[red]Error:[/] Output path is not allowed: '{path}'\n"
        f"  {reason}\n"
        "  Use a file path within the current working directory."
    )
