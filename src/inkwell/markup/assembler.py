"""Reassembler: project an ordered fragment list into one renderable document.

Fragment contents are joined with a single newline, in collection order, and
embedded in a fixed wrapper:

  function GeneratedUI()          ← marker the renderer looks for
    outer centering container
      inner fixed-width container
        <React.Fragment>          ← lets several root elements sit side by side
          {fragments}

The wrapper is a contract with the renderer and is byte-stable: identical
fragments in identical order always produce an identical document.
"""

from __future__ import annotations

from typing import Sequence

from inkwell.errors import AssemblyInvariantError
from inkwell.models import Fragment

WRAPPER_MARKER = "function GeneratedUI()"

_WRAPPER_HEAD = (
    f"{WRAPPER_MARKER} {{\n"
    "    return (\n"
    '        <div className="flex flex-col items-center justify-center min-h-screen p-8">\n'
    '            <div className="w-full max-w-md h-auto min-h-16">\n'
    "                <React.Fragment>\n"
)

_WRAPPER_TAIL = (
    "\n"
    "                </React.Fragment>\n"
    "            </div>\n"
    "        </div>\n"
    "    );\n"
    "}\n"
)


def reassemble(fragments: Sequence[Fragment]) -> str:
    """Join fragment contents inside the fixed document wrapper."""
    combined = "\n".join(f.content for f in fragments)
    return _WRAPPER_HEAD + combined + _WRAPPER_TAIL


def verify_assembly(document: str) -> None:
    """Raise if *document* lost its wrapper marker.

    Raises:
        AssemblyInvariantError: If the marker or the grouping construct is missing.
    """
    if not document.startswith(WRAPPER_MARKER) or "<React.Fragment>" not in document:
        raise AssemblyInvariantError(
            f"Assembled document is missing the '{WRAPPER_MARKER}' wrapper."
        )
