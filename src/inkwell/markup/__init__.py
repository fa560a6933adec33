"""Inkwell markup core: normalize, parse, decompose, splice, reassemble."""

from inkwell.markup.assembler import WRAPPER_MARKER, reassemble, verify_assembly
from inkwell.markup.decomposer import ROOT_CONTAINER_NAME, decompose, decompose_markup
from inkwell.markup.identity import DEFAULT_IDENTITY_ATTRIBUTE, IdAllocator, new_id
from inkwell.markup.normalize import GENERATION_RULES, PATCH_RULES, normalize
from inkwell.markup.parser import (
    ERROR_FALLBACK_MARKUP,
    ParsedMarkup,
    ParseFailure,
    extract_working_markup,
    parse_markup,
    parse_tree,
)
from inkwell.markup.sanitizer import SanitizerPolicy, sanitize
from inkwell.markup.splicer import extract_target_markup, locate, splice

__all__ = [
    "DEFAULT_IDENTITY_ATTRIBUTE",
    "ERROR_FALLBACK_MARKUP",
    "GENERATION_RULES",
    "IdAllocator",
    "PATCH_RULES",
    "ParseFailure",
    "ParsedMarkup",
    "ROOT_CONTAINER_NAME",
    "SanitizerPolicy",
    "WRAPPER_MARKER",
    "decompose",
    "decompose_markup",
    "extract_target_markup",
    "extract_working_markup",
    "locate",
    "new_id",
    "normalize",
    "parse_markup",
    "parse_tree",
    "reassemble",
    "sanitize",
    "splice",
    "verify_assembly",
]
