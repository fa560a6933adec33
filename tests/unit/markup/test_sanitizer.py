"""Tests for the markup sanitizer."""

from __future__ import annotations

from inkwell.markup.sanitizer import SanitizerPolicy, sanitize


def test_clean_markup_passes_through() -> None:
    markup = '<div data-id="a" className="p-4"><p>Hello</p></div>'
    assert sanitize(markup) == markup


def test_script_removed_with_content() -> None:
    out = sanitize('<div data-id="a"><script>alert(1)</script><p>ok</p></div>')
    assert "script" not in out
    assert "alert" not in out
    assert "<p>ok</p>" in out


def test_nested_forbidden_tags_removed() -> None:
    out = sanitize("<div><iframe><object>x</object></iframe>y</div>")
    assert out == "<div>y</div>"


def test_unknown_tag_unwrapped_content_kept() -> None:
    out = sanitize("<div><marquee>hi</marquee></div>")
    assert out == "<div>hi</div>"


def test_event_handlers_dropped() -> None:
    out = sanitize('<button onClick="go()" onmouseenter="x()" type="button">Go</button>')
    assert out == '<button type="button">Go</button>'


def test_javascript_urls_dropped() -> None:
    out = sanitize('<a href="javascript:alert(1)">x</a><a href="/ok">y</a>')
    assert out == '<a>x</a><a href="/ok">y</a>'


def test_unlisted_attribute_dropped() -> None:
    assert sanitize('<div foo="bar">x</div>') == "<div>x</div>"


def test_data_attributes_allowed_by_default() -> None:
    assert sanitize('<div data-extra="1">x</div>') == '<div data-extra="1">x</div>'


def test_data_attributes_can_be_disallowed() -> None:
    policy = SanitizerPolicy(allow_data_attributes=False)
    assert sanitize('<div data-extra="1">x</div>', policy) == "<div>x</div>"


def test_identity_attribute_always_kept() -> None:
    policy = SanitizerPolicy(
        allow_data_attributes=False,
        forbidden_attributes=["data-inkwell-id"],
    )
    out = sanitize(
        '<div data-inkwell-id="k1">x</div>', policy, identity_attribute="data-inkwell-id"
    )
    assert out == '<div data-inkwell-id="k1">x</div>'


def test_comments_removed() -> None:
    assert sanitize("<div><!-- hidden -->x</div>") == "<div>x</div>"


def test_jsx_attribute_names_preserved() -> None:
    markup = '<label htmlFor="e" className="text-sm">E</label>'
    assert sanitize(markup) == markup


def test_empty_forbidden_list_keeps_everything_allowed() -> None:
    policy = SanitizerPolicy(forbidden_tags=[])
    assert sanitize("<p>x</p>", policy) == "<p>x</p>"


def test_expression_operators_not_escaped() -> None:
    markup = '<p data-id="a">{ok && list.map((x) => x)}</p>'
    assert sanitize(markup) == markup


def test_escaped_tag_in_text_stays_text() -> None:
    out = sanitize('<p data-id="a">&#60;script&#62;alert(1)&#60;/script&#62;</p>')
    assert "<script" not in out
    assert "&lt;script>" in out
