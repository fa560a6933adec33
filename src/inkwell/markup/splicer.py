"""Subtree locator and splicer.

Given a fragment's content and a target identity, find the first element
carrying that identity and replace it in place. Siblings, ancestors and the
surrounding whitespace are kept; the whole fragment is re-serialized from
the mutated tree.

When the model rewrites an element it often drops styling it was not asked
to touch. Unless told otherwise, the prior class tokens are kept in front of
the replacement's own, and a dropped inline ``style`` is carried over.
"""

from __future__ import annotations

import logging

from bs4 import BeautifulSoup, Tag

from inkwell.errors import TargetNotFoundError
from inkwell.markup.identity import DEFAULT_IDENTITY_ATTRIBUTE
from inkwell.markup.parser import first_element, parse_tree, serialize

logger = logging.getLogger(__name__)

_CLASS_ATTRIBUTES = ("className", "class")
_STYLE_ATTRIBUTE = "style"


def locate(
    tree: BeautifulSoup,
    target_id: str,
    identity_attribute: str = DEFAULT_IDENTITY_ATTRIBUTE,
) -> Tag | None:
    """Return the first element in *tree* whose identity is *target_id*.

    Duplicate identities are a model error; the first match wins.
    """
    return tree.find(attrs={identity_attribute: target_id})


def extract_target_markup(
    content: str,
    target_id: str,
    *,
    identity_attribute: str = DEFAULT_IDENTITY_ATTRIBUTE,
) -> str:
    """Return the serialized markup of the element named *target_id*.

    Raises:
        TargetNotFoundError: If no element in *content* carries the identity.
    """
    target = locate(parse_tree(content), target_id, identity_attribute)
    if target is None:
        raise TargetNotFoundError(target_id)
    return serialize(target)


def splice(
    content: str,
    target_id: str,
    replacement: str,
    *,
    identity_attribute: str = DEFAULT_IDENTITY_ATTRIBUTE,
    preserve_styles: bool = True,
) -> str:
    """Replace the element named *target_id* inside *content* with *replacement*.

    Args:
        content: Serialized fragment markup.
        target_id: Identity of the element to replace (may be the fragment root).
        replacement: New markup for that element.
        identity_attribute: Name of the identity attribute.
        preserve_styles: Merge the prior class/style into the replacement.

    Returns:
        The fragment content re-serialized with the replacement in place.

    Raises:
        TargetNotFoundError: If no element in *content* carries the identity.
    """
    tree = parse_tree(content)
    target = locate(tree, target_id, identity_attribute)
    if target is None:
        raise TargetNotFoundError(target_id)

    incoming = parse_tree(replacement)
    if preserve_styles:
        new_el = locate(incoming, target_id, identity_attribute) or first_element(incoming)
        if new_el is not None:
            _merge_styles(target, new_el)

    for node in list(incoming.contents):
        target.insert_before(node)
    target.decompose()

    logger.debug("Spliced element '%s' (%d chars of replacement)", target_id, len(replacement))
    return serialize(tree)


def _merge_styles(prior: Tag, new: Tag) -> None:
    """Prefix *new*'s class tokens with *prior*'s; keep a dropped inline style."""
    for attr in _CLASS_ATTRIBUTES:
        old_tokens = (prior.get(attr) or "").split()
        if not old_tokens:
            continue
        tokens = old_tokens + (new.get(attr) or "").split()
        new[attr] = " ".join(dict.fromkeys(tokens))

    old_style = prior.get(_STYLE_ATTRIBUTE)
    if old_style and not new.has_attr(_STYLE_ATTRIBUTE):
        new[_STYLE_ATTRIBUTE] = old_style
