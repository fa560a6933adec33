"""Markup sanitizer: allow-list policy for model-generated UI markup.

Policy:
  - forbidden tags (script, iframe, …) are removed together with their content
  - tags outside the allow-list are unwrapped (their children are kept)
  - comments are removed
  - attributes are dropped when forbidden, when they are event handlers
    (``on*``), when they are not allow-listed (``data-*`` passes by default),
    or when a URL attribute uses the ``javascript:`` scheme
  - the identity attribute is always kept; fragment identity depends on it
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from bs4 import Comment

from inkwell.markup.identity import DEFAULT_IDENTITY_ATTRIBUTE
from inkwell.markup.parser import parse_tree, serialize

logger = logging.getLogger(__name__)

_URL_ATTRIBUTES = frozenset(["href", "src", "action", "formaction", "xlink:href"])
_SCRIPT_URL_RE = re.compile(r"^\s*(?:javascript|vbscript):", re.IGNORECASE)

DEFAULT_ALLOWED_TAGS: tuple[str, ...] = (
    "div", "span", "p", "h1", "h2", "h3", "h4", "h5", "h6",
    "a", "img", "button", "input", "textarea", "select", "option",
    "form", "label", "ul", "ol", "li", "strong", "em", "small",
    "svg", "path", "circle", "rect", "g",
    "header", "footer", "section", "article", "aside", "main", "nav",
    "br", "hr",
)

DEFAULT_ALLOWED_ATTRIBUTES: tuple[str, ...] = (
    "class", "className", "style", "id", "src", "alt", "href", "role", "type",
    "name", "placeholder", "value", "for", "htmlFor", "aria-hidden", "aria-label",
    "tabindex", "tabIndex", "viewBox", "fill", "stroke", "strokeWidth",
    "strokeLinecap", "strokeLinejoin", "d", "cx", "cy", "r", "x", "y",
    "width", "height", "xmlns",
)

DEFAULT_FORBIDDEN_TAGS: tuple[str, ...] = ("script", "iframe", "object", "embed", "style")

DEFAULT_FORBIDDEN_ATTRIBUTES: tuple[str, ...] = (
    "onerror", "onload", "onclick", "onmouseover", "onchange", "onfocus", "onblur",
    "xmlns:xlink",
)


@dataclass
class SanitizerPolicy:
    allowed_tags: list[str] = field(default_factory=lambda: list(DEFAULT_ALLOWED_TAGS))
    allowed_attributes: list[str] = field(default_factory=lambda: list(DEFAULT_ALLOWED_ATTRIBUTES))
    forbidden_tags: list[str] = field(default_factory=lambda: list(DEFAULT_FORBIDDEN_TAGS))
    forbidden_attributes: list[str] = field(
        default_factory=lambda: list(DEFAULT_FORBIDDEN_ATTRIBUTES)
    )
    allow_data_attributes: bool = True


def sanitize(
    markup: str,
    policy: SanitizerPolicy | None = None,
    *,
    identity_attribute: str = DEFAULT_IDENTITY_ATTRIBUTE,
) -> str:
    """Return *markup* with everything outside *policy* removed.

    Args:
        markup: Working markup (a bare element or a run of sibling elements).
        policy: Allow/deny lists. Defaults to ``SanitizerPolicy()``.
        identity_attribute: Always allowed, whatever the policy says.

    Returns:
        The cleaned, re-serialized markup.
    """
    policy = policy or SanitizerPolicy()
    allowed_tags = {t.lower() for t in policy.allowed_tags}
    forbidden_tags = {t.lower() for t in policy.forbidden_tags}
    allowed_attrs = {a.lower() for a in policy.allowed_attributes} | {identity_attribute.lower()}
    forbidden_attrs = {a.lower() for a in policy.forbidden_attributes} - {identity_attribute.lower()}

    tree = parse_tree(markup)

    for comment in tree.find_all(string=lambda s: isinstance(s, Comment)):
        comment.extract()

    removed = 0
    # An empty name list would match every tag.
    forbidden_found = tree.find_all(sorted(forbidden_tags)) if forbidden_tags else []
    for tag in forbidden_found:
        if not tag.decomposed:
            tag.decompose()
            removed += 1

    for tag in tree.find_all(True):
        if tag.name.lower() not in allowed_tags:
            tag.unwrap()
            removed += 1
            continue
        for name in list(tag.attrs):
            if not _attribute_allowed(
                name, tag.attrs[name], allowed_attrs, forbidden_attrs, policy.allow_data_attributes
            ):
                del tag.attrs[name]

    if removed:
        logger.info("Sanitizer removed or unwrapped %d element(s)", removed)
    return serialize(tree).strip()


def _attribute_allowed(
    name: str,
    value: str | None,
    allowed: set[str],
    forbidden: set[str],
    allow_data: bool,
) -> bool:
    key = name.lower()
    if key in forbidden or key.startswith("on"):
        return False
    if key in _URL_ATTRIBUTES and value and _SCRIPT_URL_RE.match(value):
        return False
    if key in allowed:
        return True
    return allow_data and key.startswith("data-")
