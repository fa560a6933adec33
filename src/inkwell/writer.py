"""Export writer: assembled document → file, with path guards.

Responsibilities:
  1. Render the project's assembled document as a standalone JSX module.
  2. Validate the output path: relative paths are confined to CWD.
     Path traversal (../../etc/passwd) → hard fail.
  3. Overwrite protection: if the file exists, prompt the user (--yes skips).
  4. Write atomically (temp file → rename).
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

import typer

from inkwell.markup.assembler import verify_assembly
from inkwell.models import Project

_EXPORT_FOOTER = "\nexport default GeneratedUI;\n"


def render_module(project: Project) -> str:
    """Return *project*'s document as a module with a title comment and default export.

    Raises:
        AssemblyInvariantError: The stored document lost its wrapper.
    """
    verify_assembly(project.assembled_content)
    title = " ".join(project.title.split())
    header = f"// {title} (project {project.id})\n\n" if title else ""
    return header + project.assembled_content.rstrip("\n") + "\n" + _EXPORT_FOOTER


# ------------------------------------------------------------------
# Path validation
# ------------------------------------------------------------------


def validate_output_path(output: str, allowed_base: Path | None = None) -> Path:
    """Resolve *output* and confine relative paths to *allowed_base* (default CWD).

    Absolute paths are accepted as the user's explicit choice.

    Raises:
        ValueError: If a relative path escapes the allowed base directory,
            or names a directory.
    """
    path = Path(output)
    if path.is_absolute():
        resolved = path.resolve()
    else:
        base = (allowed_base or Path.cwd()).resolve()
        resolved = (base / path).resolve()
        try:
            resolved.relative_to(base)
        except ValueError:
            raise ValueError(
                f"Output path '{output}' resolves outside '{base}'. "
                "Path traversal is not permitted."
            )

    if resolved.is_dir():
        raise ValueError(f"Output path '{output}' is a directory.")
    return resolved


def check_overwrite(path: Path, yes: bool) -> bool:
    """Return True if writing may proceed; asks before replacing an existing file."""
    if yes or not path.exists():
        return True
    return typer.confirm(f"  File exists: {path.name}\n  Overwrite?", default=False)


def write_output(path: Path, content: str) -> None:
    """Write *content* to *path* atomically, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp_path, path)
    except BaseException:
        Path(tmp_path).unlink(missing_ok=True)
        raise
