"""Decomposer: split working markup into root-level identified fragments.

A root-level identified element carries the identity attribute and has no
identity-bearing ancestor. Each one becomes a Fragment whose content is the
element serialized with all its descendants; nested identified elements stay
embedded in their owner's content.

Every call returns at least one fragment:
  - malformed input          → the parser's error fragment
  - no identified elements   → one "RootContainer" fragment holding the
                               whole working markup
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Callable

from bs4 import BeautifulSoup, Tag

from inkwell.markup.identity import DEFAULT_IDENTITY_ATTRIBUTE, IdAllocator, new_id
from inkwell.markup.parser import (
    ParseFailure,
    display_name_for,
    error_fragment,
    parse_markup,
    parse_tree,
    serialize,
)
from inkwell.models import Fragment, utcnow

logger = logging.getLogger(__name__)

ROOT_CONTAINER_NAME = "RootContainer"


def decompose(
    raw: str,
    *,
    identity_attribute: str = DEFAULT_IDENTITY_ATTRIBUTE,
    id_factory: Callable[[], str] = new_id,
    now: datetime | None = None,
) -> list[Fragment]:
    """Decompose *raw* model output into an ordered, non-empty fragment list.

    Args:
        raw: Raw (normalized) text: a ``return ( … ); }`` function or a bare element.
        identity_attribute: Name of the identity attribute.
        id_factory: Source of fresh ids (tests inject a deterministic one).
        now: Timestamp for ``last_modified_at`` (defaults to current UTC time).

    Returns:
        Fragments in document order. Never empty.
    """
    result = parse_markup(raw)
    if isinstance(result, ParseFailure):
        return [error_fragment(id_factory)]
    return decompose_markup(
        result.working_markup,
        identity_attribute=identity_attribute,
        id_factory=id_factory,
        now=now,
        tree=result.tree,
    )


def decompose_markup(
    working_markup: str,
    *,
    identity_attribute: str = DEFAULT_IDENTITY_ATTRIBUTE,
    id_factory: Callable[[], str] = new_id,
    now: datetime | None = None,
    tree: BeautifulSoup | None = None,
) -> list[Fragment]:
    """Decompose markup that has already been cut out of the model reply.

    No shape check is made: *working_markup* may be a run of sibling
    elements, as left behind by the sanitizer. Returns at least one fragment.
    """
    if tree is None:
        tree = parse_tree(working_markup)
    stamp = now or utcnow()
    roots = [
        el
        for el in tree.find_all(attrs={identity_attribute: True})
        if not _has_identified_ancestor(el, identity_attribute)
    ]

    if not roots:
        return [_root_container(working_markup, identity_attribute, id_factory, stamp)]

    allocator = IdAllocator(id_factory)
    # Recovered ids take precedence: claim them before generating any.
    claimed: list[bool] = [allocator.claim(el.get(identity_attribute, "")) for el in roots]

    fragments: list[Fragment] = []
    for el, owns_id in zip(roots, claimed):
        frag_id = el.get(identity_attribute, "")
        if not owns_id:
            fresh = allocator.allocate()
            if frag_id:
                logger.warning("Duplicate identity '%s' renamed to '%s'", frag_id, fresh)
            el[identity_attribute] = fresh
            frag_id = fresh

        fragments.append(
            Fragment(
                id=frag_id,
                display_name=display_name_for(el.name),
                content=serialize(el),
                element_kind=el.name.lower(),
                last_modified_at=stamp,
            )
        )

    logger.debug("Decomposed markup into %d fragment(s)", len(fragments))
    return fragments


def _has_identified_ancestor(el: Tag, identity_attribute: str) -> bool:
    return any(
        isinstance(parent, Tag) and parent.has_attr(identity_attribute)
        for parent in el.parents
    )


def _root_container(
    working_markup: str,
    identity_attribute: str,
    id_factory: Callable[[], str],
    stamp: datetime,
) -> Fragment:
    """Wrap the whole working markup as one fragment.

    The id and kind come from the outermost opening tag when it carries the
    identity attribute; otherwise a fresh id and ``div``.
    """
    frag_id = id_factory()
    kind = "div"
    root_tag = re.match(
        rf"""^<([a-zA-Z0-9]+)[^>]*?\s{re.escape(identity_attribute)}=["']([^"']+)["']""",
        working_markup,
    )
    if root_tag:
        kind = root_tag.group(1).lower()
        frag_id = root_tag.group(2)

    logger.info("No identified elements found; using a single %s fragment", ROOT_CONTAINER_NAME)
    return Fragment(
        id=frag_id,
        display_name=ROOT_CONTAINER_NAME,
        content=working_markup,
        element_kind=kind,
        last_modified_at=stamp,
    )
