"""Tolerant markup parser for model-generated JSX.

Working markup is located in one of two shapes:
  1. A function whose body ends in ``return ( <markup> ); }``. The markup
     between the parentheses is used (nested parentheses are fine).
  2. A bare element: the whole trimmed input starts with an opening tag and
     ends with a closing tag.

Anything else is malformed. Malformed input never raises: callers get a
``ParseFailure`` and turn it into the self-contained error fragment.

Trees are BeautifulSoup documents built with ``html.parser`` (tolerant of
unclosed void elements and mixed-case tags). That builder lower-cases
attribute names, so JSX spellings such as ``className`` are restored after
every parse.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Union

from bs4 import BeautifulSoup, Tag
from bs4.formatter import HTMLFormatter

from inkwell.markup.identity import new_id
from inkwell.models import Fragment, utcnow

logger = logging.getLogger(__name__)

_RETURN_BLOCK_RE = re.compile(r"return\s*\(([\s\S]*?)\)\s*;\s*\}")
_BARE_ELEMENT_RE = re.compile(r"^\s*<[^>]+>[\s\S]*</[^>]+>\s*$")

ERROR_FALLBACK_NAME = "ErrorFallback"
ERROR_FALLBACK_MARKUP = (
    '<div className="text-red-500 p-8 border border-red-500 bg-red-900 rounded-lg text-center">'
    '<p className="text-lg font-bold">Parsing Failed: LLM Output Structure Error</p>'
    '<p className="text-sm mt-2">The AI output was malformed. '
    "Please try again or simplify the prompt.</p>"
    "</div>"
)

# html.parser lower-cases attribute names; map them back to their JSX form.
_JSX_ATTRIBUTES: dict[str, str] = {
    name.lower(): name
    for name in (
        "className",
        "htmlFor",
        "tabIndex",
        "readOnly",
        "maxLength",
        "minLength",
        "autoComplete",
        "autoFocus",
        "colSpan",
        "rowSpan",
        "crossOrigin",
        "srcSet",
        "viewBox",
        "preserveAspectRatio",
        "strokeWidth",
        "strokeLinecap",
        "strokeLinejoin",
        "strokeDasharray",
        "fillRule",
        "clipRule",
        "fillOpacity",
        "strokeOpacity",
        "defaultValue",
        "defaultChecked",
        "contentEditable",
        "spellCheck",
    )
}


@dataclass(frozen=True)
class ParsedMarkup:
    working_markup: str
    tree: BeautifulSoup


@dataclass(frozen=True)
class ParseFailure:
    reason: str


ParseResult = Union[ParsedMarkup, ParseFailure]


def _escape_tag_open(text: str) -> str:
    return text.replace("<", "&lt;")


# JSX expressions such as ``=>`` and ``&&`` must come back out unchanged. Only
# "<" is escaped, so text can never be re-parsed as a tag.
JSX_FORMATTER = HTMLFormatter(entity_substitution=_escape_tag_open)


def extract_working_markup(raw: str) -> str | None:
    """Return the markup span of *raw*, or None if it has neither known shape."""
    match = _RETURN_BLOCK_RE.search(raw)
    if match and match.group(1).strip():
        return match.group(1).strip()

    trimmed = raw.strip()
    if _BARE_ELEMENT_RE.match(trimmed):
        return trimmed

    return None


def parse_tree(markup: str) -> BeautifulSoup:
    """Parse *markup* into a tree with JSX attribute names restored."""
    soup = BeautifulSoup(markup, "html.parser", multi_valued_attributes=None)
    for tag in soup.find_all(True):
        if any(name in _JSX_ATTRIBUTES for name in tag.attrs):
            tag.attrs = {_JSX_ATTRIBUTES.get(name, name): value for name, value in tag.attrs.items()}
    return soup


def parse_markup(raw: str) -> ParseResult:
    """Locate the working markup in *raw* and parse it.

    Returns:
        ``ParsedMarkup`` on success, ``ParseFailure`` when *raw* matches
        neither the wrapped-return nor the bare-element shape.
    """
    working = extract_working_markup(raw)
    if working is None:
        logger.warning(
            "Input is neither a function component nor a markup element (%d chars)", len(raw)
        )
        return ParseFailure("Input is neither a function component nor a valid markup element.")
    return ParsedMarkup(working_markup=working, tree=parse_tree(working))


def first_element(tree: BeautifulSoup) -> Tag | None:
    """Return the first element node of *tree*, skipping text and comments."""
    return tree.find(True)


def serialize(node: Tag) -> str:
    """Serialize *node* (a tag or a whole tree) as JSX-friendly markup."""
    return node.decode(formatter=JSX_FORMATTER)


def display_name_for(tag_name: str) -> str:
    return tag_name[:1].upper() + tag_name[1:]


def error_fragment(id_factory: Callable[[], str] = new_id) -> Fragment:
    """The single fragment returned when input cannot be parsed at all."""
    return Fragment(
        id=id_factory(),
        display_name=ERROR_FALLBACK_NAME,
        content=ERROR_FALLBACK_MARKUP,
        element_kind="div",
        last_modified_at=utcnow(),
    )
