"""Input normalization: clean raw model output before it reaches the parser.

Model output routinely arrives wrapped in Markdown fences, with stray
``export`` lines, ``<>`` fragment shorthand, non-self-closed void elements,
half-written event handlers and HTML entities where JSX expects literal
characters. Each fix is a named rule so the list can be inspected and tested
on its own.

Usage:
    cleaned = normalize(raw_output)                       # initial generation
    cleaned = normalize(raw_patch, rules=PATCH_RULES)     # element rewrite
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Sequence, Union

Replacement = Union[str, Callable[[re.Match[str]], str]]


@dataclass(frozen=True)
class NormalizationRule:
    name: str
    pattern: re.Pattern[str]
    replacement: Replacement

    def apply(self, text: str) -> str:
        return self.pattern.sub(self.replacement, text)


_ENTITIES: dict[str, str] = {
    "gt": ">",
    "lt": "<",
    "amp": "&",
    "#39": "'",
    "quot": '"',
}

_VOID_ELEMENTS = "input|img|br|hr|meta|link|area|base|col|embed|source|track|wbr"


STRIP_FENCED_BLOCKS = NormalizationRule(
    "strip-fenced-blocks",
    re.compile(r"```[a-zA-Z]*\n([\s\S]*?)```"),
    r"\1",
)

STRIP_STRAY_FENCES = NormalizationRule(
    "strip-stray-fences",
    re.compile(r"```[a-zA-Z]*\n?"),
    "",
)

STRIP_EXPORTS = NormalizationRule(
    "strip-exports",
    re.compile(r"^export\s+(?:default\s+\w+|\{[^}]*\}|\w+);?[ \t]*$", re.MULTILINE),
    "",
)

# The reassembled wrapper already groups sibling roots.
STRIP_FRAGMENT_SHORTHAND = NormalizationRule(
    "strip-fragment-shorthand",
    re.compile(r"<\s*/?\s*>"),
    "",
)

# \b keeps <colgroup>, <inputs> etc. out of the match.
SELF_CLOSE_VOID_ELEMENTS = NormalizationRule(
    "self-close-void-elements",
    re.compile(rf"<({_VOID_ELEMENTS})\b([^/>]*?)>"),
    r"<\1\2 />",
)

STRIP_HANDLER_REMNANTS = NormalizationRule(
    "strip-handler-remnants",
    re.compile(r"e\.preventDefault\(\)\}>[ \t]*$|^[ \t]*\}>[ \t]*$", re.MULTILINE),
    "",
)

DECODE_ENTITIES = NormalizationRule(
    "decode-entities",
    re.compile(r"&(gt|lt|amp|#39|quot);"),
    lambda m: _ENTITIES[m.group(1)],
)


GENERATION_RULES: tuple[NormalizationRule, ...] = (
    STRIP_FENCED_BLOCKS,
    STRIP_STRAY_FENCES,
    STRIP_EXPORTS,
    STRIP_FRAGMENT_SHORTHAND,
    SELF_CLOSE_VOID_ELEMENTS,
    STRIP_HANDLER_REMNANTS,
    DECODE_ENTITIES,
)

PATCH_RULES: tuple[NormalizationRule, ...] = (
    STRIP_FENCED_BLOCKS,
    STRIP_STRAY_FENCES,
    STRIP_FRAGMENT_SHORTHAND,
    STRIP_HANDLER_REMNANTS,
    SELF_CLOSE_VOID_ELEMENTS,
    DECODE_ENTITIES,
)


def normalize(text: str, rules: Sequence[NormalizationRule] = GENERATION_RULES) -> str:
    """Apply *rules* to *text* in order and trim surrounding whitespace."""
    for rule in rules:
        text = rule.apply(text)
    return text.strip()
