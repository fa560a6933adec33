"""Error kinds surfaced by the inkwell pipeline.

Malformed input and markup without identities are recovered locally by the
parser and decomposer (fallback fragments) and never appear here. Everything
below leaves the caller's Project untouched when raised.
"""

from __future__ import annotations

from typing import Any


class InkwellError(Exception):
    """Base class for all pipeline errors."""


class InvalidInputError(InkwellError):
    """A required field (prompt, instruction, identity) is missing or empty."""


class TargetNotFoundError(InkwellError):
    """No fragment in the project contains the requested identity."""

    def __init__(self, target_id: str) -> None:
        super().__init__(f"Element with identity '{target_id}' not found.")
        self.target_id = target_id


class InvalidPatchError(InkwellError):
    """Replacement markup does not carry the target identity attribute."""

    def __init__(self, target_id: str, identity_attribute: str) -> None:
        super().__init__(
            f"Replacement content does not preserve {identity_attribute}=\"{target_id}\"."
        )
        self.target_id = target_id
        self.identity_attribute = identity_attribute


class UpstreamError(InkwellError):
    """The content-generation collaborator returned its error sentinel.

    ``payload`` is the sentinel object exactly as received.
    """

    def __init__(self, payload: dict[str, Any]) -> None:
        super().__init__(str(payload.get("error", "Upstream content generation failed.")))
        self.payload = payload


class AssemblyInvariantError(InkwellError):
    """The reassembled document is missing its structural wrapper marker."""
