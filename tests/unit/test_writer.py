"""Tests for the export writer."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import patch

import pytest

from inkwell.errors import AssemblyInvariantError
from inkwell.markup.assembler import reassemble
from inkwell.models import Fragment, Project
from inkwell.writer import check_overwrite, render_module, validate_output_path, write_output

_T0 = datetime(2026, 1, 1, tzinfo=timezone.utc)


def _project(assembled: str | None = None) -> Project:
    frags = [Fragment("a", "Div", '<div data-id="a">A</div>', "div", _T0)]
    return Project(
        id="p1",
        title="Login\ncard",
        initial_prompt="Login card",
        fragments=frags,
        assembled_content=assembled if assembled is not None else reassemble(frags),
        created_at=_T0,
    )


# ---------------------------------------------------------------------------
# render_module
# ---------------------------------------------------------------------------


def test_render_module_adds_header_and_export() -> None:
    out = render_module(_project())
    assert out.startswith("// Login card (project p1)\n\nfunction GeneratedUI()")
    assert out.endswith("}\n\nexport default GeneratedUI;\n")


def test_render_module_rejects_broken_document() -> None:
    with pytest.raises(AssemblyInvariantError):
        render_module(_project(assembled="<div/>"))


# ---------------------------------------------------------------------------
# validate_output_path
# ---------------------------------------------------------------------------


def test_relative_path_confined_to_base(tmp_path: Path) -> None:
    assert validate_output_path("out/ui.jsx", allowed_base=tmp_path) == (tmp_path / "out" / "ui.jsx").resolve()


def test_path_traversal_blocked(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="traversal"):
        validate_output_path("../../etc/passwd", allowed_base=tmp_path)


def test_absolute_path_accepted(tmp_path: Path) -> None:
    target = tmp_path / "elsewhere" / "ui.jsx"
    assert validate_output_path(str(target)) == target.resolve()


def test_directory_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="directory"):
        validate_output_path(str(tmp_path))


# ---------------------------------------------------------------------------
# check_overwrite / write_output
# ---------------------------------------------------------------------------


def test_check_overwrite_missing_file(tmp_path: Path) -> None:
    assert check_overwrite(tmp_path / "new.jsx", yes=False) is True


def test_check_overwrite_yes_skips_prompt(tmp_path: Path) -> None:
    existing = tmp_path / "ui.jsx"
    existing.write_text("x", encoding="utf-8")
    with patch("inkwell.writer.typer.confirm") as mock_confirm:
        assert check_overwrite(existing, yes=True) is True
    mock_confirm.assert_not_called()


def test_check_overwrite_asks(tmp_path: Path) -> None:
    existing = tmp_path / "ui.jsx"
    existing.write_text("x", encoding="utf-8")
    with patch("inkwell.writer.typer.confirm", return_value=False):
        assert check_overwrite(existing, yes=False) is False


def test_write_output_creates_parents(tmp_path: Path) -> None:
    target = tmp_path / "a" / "b" / "ui.jsx"
    write_output(target, "content")
    assert target.read_text(encoding="utf-8") == "content"
    assert list(target.parent.glob("*.tmp")) == []


def test_write_output_cleans_temp_on_failure(tmp_path: Path) -> None:
    target = tmp_path / "ui.jsx"
    with patch("inkwell.writer.os.replace", side_effect=OSError("disk full")):
        with pytest.raises(OSError):
            write_output(target, "content")
    assert list(tmp_path.glob("*.tmp")) == []
    assert not target.exists()
