"""Element identity scheme.

Every addressable element carries a reserved identity attribute whose value
is the fragment/element key. Ids recovered from markup are used verbatim;
generated ids are short hex tokens that are safe as attribute values.
"""

from __future__ import annotations

import uuid
from typing import Callable

DEFAULT_IDENTITY_ATTRIBUTE = "data-id"

_ID_LENGTH = 7
_MAX_DRAWS = 32


def new_id() -> str:
    """Return a short, practically-unique identity token."""
    return uuid.uuid4().hex[:_ID_LENGTH]


def identity_markers(target_id: str, identity_attribute: str = DEFAULT_IDENTITY_ATTRIBUTE) -> tuple[str, str]:
    """Return the double- and single-quoted attribute spellings for *target_id*."""
    return (
        f'{identity_attribute}="{target_id}"',
        f"{identity_attribute}='{target_id}'",
    )


def carries_identity(
    markup: str,
    target_id: str,
    identity_attribute: str = DEFAULT_IDENTITY_ATTRIBUTE,
) -> bool:
    """True if *markup* textually contains the identity attribute set to *target_id*."""
    return any(marker in markup for marker in identity_markers(target_id, identity_attribute))


class IdAllocator:
    """Hands out ids that are unique within one decomposition.

    Ids recovered from the input are claimed first so that generated ids
    never shadow them.
    """

    def __init__(self, factory: Callable[[], str] = new_id) -> None:
        self._factory = factory
        self._taken: set[str] = set()

    def claim(self, candidate: str) -> bool:
        """Reserve *candidate*. Returns False if it is already taken."""
        if not candidate or candidate in self._taken:
            return False
        self._taken.add(candidate)
        return True

    def allocate(self) -> str:
        """Generate and reserve a fresh id."""
        for _ in range(_MAX_DRAWS):
            candidate = self._factory()
            if self.claim(candidate):
                return candidate

        # Factory keeps colliding (e.g. a fixed stub); suffix until unique.
        base = self._factory()
        n = 2
        while not self.claim(f"{base}-{n}"):
            n += 1
        return f"{base}-{n}"
