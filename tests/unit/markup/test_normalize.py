"""Tests for the input normalization rules."""

from __future__ import annotations

from inkwell.markup.normalize import (
    DECODE_ENTITIES,
    GENERATION_RULES,
    PATCH_RULES,
    SELF_CLOSE_VOID_ELEMENTS,
    STRIP_EXPORTS,
    STRIP_FENCED_BLOCKS,
    STRIP_FRAGMENT_SHORTHAND,
    STRIP_HANDLER_REMNANTS,
    STRIP_STRAY_FENCES,
    normalize,
)


def test_rule_names_are_unique() -> None:
    names = [r.name for r in GENERATION_RULES]
    assert len(names) == len(set(names))


def test_patch_rules_keep_export_lines() -> None:
    assert STRIP_EXPORTS in GENERATION_RULES
    assert STRIP_EXPORTS not in PATCH_RULES


# ---------------------------------------------------------------------------
# Individual rules
# ---------------------------------------------------------------------------


def test_fenced_block_body_is_kept() -> None:
    text = "Here you go:\n```jsx\n<div>a</div>\n```\nEnjoy"
    assert STRIP_FENCED_BLOCKS.apply(text) == "Here you go:\n<div>a</div>\n\nEnjoy"


def test_stray_fences_removed() -> None:
    assert STRIP_STRAY_FENCES.apply("```tsx\n<div>a</div>```") == "<div>a</div>"


def test_export_lines_removed() -> None:
    text = "function GeneratedUI() {}\nexport default GeneratedUI;\nexport { A, B };\nexport Foo"
    assert STRIP_EXPORTS.apply(text).strip() == "function GeneratedUI() {}"


def test_export_inside_line_is_kept() -> None:
    text = "<p>We export goods</p>"
    assert STRIP_EXPORTS.apply(text) == text


def test_fragment_shorthand_removed() -> None:
    text = "<>\n  <div data-id=\"a\">A</div>\n</>"
    assert STRIP_FRAGMENT_SHORTHAND.apply(text) == "\n  <div data-id=\"a\">A</div>\n"


def test_fragment_shorthand_rule_in_both_profiles() -> None:
    assert STRIP_FRAGMENT_SHORTHAND in GENERATION_RULES
    assert STRIP_FRAGMENT_SHORTHAND in PATCH_RULES


def test_void_elements_self_closed() -> None:
    assert SELF_CLOSE_VOID_ELEMENTS.apply('<input type="text">') == '<input type="text" />'
    assert SELF_CLOSE_VOID_ELEMENTS.apply("<br>") == "<br />"


def test_already_self_closed_void_element_untouched() -> None:
    assert SELF_CLOSE_VOID_ELEMENTS.apply('<img alt="x" />') == '<img alt="x" />'


def test_void_rule_is_word_bounded() -> None:
    assert SELF_CLOSE_VOID_ELEMENTS.apply("<colgroup>") == "<colgroup>"


def test_handler_remnants_removed() -> None:
    text = '<form className="x" e.preventDefault()}>\n  }>\n<p>ok</p>'
    out = STRIP_HANDLER_REMNANTS.apply(text)
    assert "preventDefault" not in out
    assert "}>" not in out
    assert "<p>ok</p>" in out


def test_handler_rule_leaves_inline_braces_alone() -> None:
    text = "<p>{a}>b</p>"
    assert STRIP_HANDLER_REMNANTS.apply(text) == text


def test_entities_decoded() -> None:
    assert DECODE_ENTITIES.apply("&lt;div&gt; &amp; &#39;x&#39; &quot;y&quot;") == "<div> & 'x' \"y\""


def test_unknown_entities_untouched() -> None:
    assert DECODE_ENTITIES.apply("&nbsp;&copy;") == "&nbsp;&copy;"


# ---------------------------------------------------------------------------
# normalize()
# ---------------------------------------------------------------------------


def test_normalize_full_model_reply() -> None:
    raw = (
        "```jsx\n"
        "function GeneratedUI() {\n"
        "  return (\n"
        '    <div data-id="a1"><input type="email"><p>Tom &amp; Jerry</p></div>\n'
        "  );\n"
        "}\n"
        "export default GeneratedUI;\n"
        "```"
    )
    out = normalize(raw)
    assert out.startswith("function GeneratedUI()")
    assert "```" not in out
    assert "export" not in out
    assert '<input type="email" />' in out
    assert "Tom & Jerry" in out


def test_normalize_trims() -> None:
    assert normalize("  \n<p>x</p>\n  ", PATCH_RULES) == "<p>x</p>"
