"""Tests for the generate / patch pipelines (content generation mocked)."""

from __future__ import annotations

import json
from unittest.mock import MagicMock, patch

import pytest

from inkwell.config import InkwellConfig
from inkwell.errors import InvalidInputError, InvalidPatchError, TargetNotFoundError, UpstreamError
from inkwell.markup.assembler import WRAPPER_MARKER
from inkwell.markup.parser import ERROR_FALLBACK_NAME
from inkwell.pipeline import (
    INITIAL_CHANGE_ID,
    INITIAL_DESCRIPTION,
    build_project,
    generate_project,
    prepare_markup,
    regenerate_element,
)

_MODEL_REPLY = (
    "```jsx\n"
    "function GeneratedUI() {\n"
    "  return (\n"
    '    <div data-id="card" className="p-4">\n'
    '      <h1 data-id="title">Welcome</h1>\n'
    '      <button data-id="btn" onClick="go()">Go</button>\n'
    "    </div>\n"
    "  );\n"
    "}\n"
    "export default GeneratedUI;\n"
    "```"
)


def _cfg() -> InkwellConfig:
    return InkwellConfig()


# ---------------------------------------------------------------------------
# prepare_markup / build_project
# ---------------------------------------------------------------------------


def test_prepare_markup_normalizes_and_sanitizes() -> None:
    out = prepare_markup(_MODEL_REPLY, _cfg())
    assert out.startswith('<div data-id="card"')
    assert "onClick" not in out
    assert "```" not in out


def test_prepare_markup_malformed_text_gives_none() -> None:
    assert prepare_markup("I can't do that.", _cfg()) is None


def test_build_project(id_factory) -> None:
    project = build_project("A welcome card " * 10, _MODEL_REPLY, config=_cfg(), model_used="m", id_factory=id_factory)

    assert project.title == ("A welcome card " * 10)[:50]
    assert project.status == "draft"
    assert [f.id for f in project.fragments] == ["card"]
    assert project.assembled_content.startswith(WRAPPER_MARKER)
    assert len(project.history) == 1
    assert project.history[0].description == INITIAL_DESCRIPTION
    assert project.history[0].change_id == INITIAL_CHANGE_ID
    assert project.history[0].model_used == "m"


def test_build_project_malformed_output_yields_error_fragment(id_factory) -> None:
    project = build_project("x", "no markup", config=_cfg(), model_used="m", id_factory=id_factory)
    assert [f.display_name for f in project.fragments] == [ERROR_FALLBACK_NAME]


def test_build_project_fragment_shorthand_reply(id_factory) -> None:
    raw = (
        "function GeneratedUI() { return ( <> "
        '<div data-id="a">A</div> <p data-id="b">B</p> </> ); }'
    )
    project = build_project("p", raw, config=_cfg(), model_used="m", id_factory=id_factory)

    assert [(f.id, f.display_name) for f in project.fragments] == [("a", "Div"), ("b", "P")]
    assert "&lt;" not in project.assembled_content


def test_build_project_all_forbidden_markup_yields_error_fragment(id_factory) -> None:
    raw = "<script>alert(1)</script>"
    project = build_project("x", raw, config=_cfg(), model_used="m", id_factory=id_factory)
    assert [f.display_name for f in project.fragments] == [ERROR_FALLBACK_NAME]


# ---------------------------------------------------------------------------
# generate_project
# ---------------------------------------------------------------------------


def test_generate_project_calls_model_with_prompt(id_factory) -> None:
    generate = MagicMock(return_value=_MODEL_REPLY)
    project = generate_project("A welcome card", _cfg(), generate=generate, id_factory=id_factory)

    args, kwargs = generate.call_args
    assert args[0] == "gemini/gemini-2.0-flash"
    assert args[1] == [{"role": "user", "content": "A welcome card"}]
    assert "data-id" in args[2]
    assert kwargs["max_tokens"] == 8_192
    assert project.initial_prompt == "A welcome card"


def test_generate_project_uses_module_collaborator_by_default(id_factory) -> None:
    with patch("inkwell.pipeline.generate_content", return_value=_MODEL_REPLY) as mock_gen:
        generate_project("card", _cfg(), id_factory=id_factory)
    mock_gen.assert_called_once()


@pytest.mark.parametrize("prompt", ["", "   "])
def test_generate_project_rejects_empty_prompt(prompt: str) -> None:
    generate = MagicMock()
    with pytest.raises(InvalidInputError):
        generate_project(prompt, _cfg(), generate=generate)
    generate.assert_not_called()


def test_generate_project_upstream_error_propagated_verbatim() -> None:
    sentinel = json.dumps({"error": "quota exceeded", "code": 429})
    with pytest.raises(UpstreamError) as exc_info:
        generate_project("card", _cfg(), generate=MagicMock(return_value=sentinel))
    assert exc_info.value.payload == {"error": "quota exceeded", "code": 429}
    assert str(exc_info.value) == "quota exceeded"


# ---------------------------------------------------------------------------
# regenerate_element
# ---------------------------------------------------------------------------


def _project(id_factory):
    return build_project("card", _MODEL_REPLY, config=_cfg(), model_used="m", id_factory=id_factory)


def test_regenerate_nested_element(id_factory) -> None:
    project = _project(id_factory)
    generate = MagicMock(return_value='```jsx\n<h1 data-id="title" className="text-red-500">Hi</h1>\n```')

    updated = regenerate_element(project, "title", "Make it red", _cfg(), generate=generate)

    sent = generate.call_args.args[1][0]["content"]
    assert '<h1 data-id="title">Welcome</h1>' in sent
    assert "Make it red" in sent
    assert "button" not in sent
    assert '<h1 data-id="title" className="text-red-500">Hi</h1>' in updated.fragments[0].content
    assert updated.history[-1].description == "Patched element title: Make it red"
    assert updated.history[-1].model_used == "gemini/gemini-2.0-flash"
    assert project.history[-1].description == INITIAL_DESCRIPTION


def test_regenerate_root_sends_whole_fragment(id_factory) -> None:
    project = _project(id_factory)
    generate = MagicMock(return_value='<section data-id="card">New</section>')

    updated = regenerate_element(project, "card", "Simplify", _cfg(), generate=generate)

    sent = generate.call_args.args[1][0]["content"]
    assert project.fragments[0].content in sent
    assert updated.fragments[0].content == '<section data-id="card">New</section>'


def test_regenerate_unknown_target(id_factory) -> None:
    generate = MagicMock()
    with pytest.raises(TargetNotFoundError):
        regenerate_element(_project(id_factory), "nope", "x", _cfg(), generate=generate)
    generate.assert_not_called()


def test_regenerate_empty_instruction(id_factory) -> None:
    with pytest.raises(InvalidInputError):
        regenerate_element(_project(id_factory), "title", " ", _cfg(), generate=MagicMock())


def test_regenerate_reply_without_identity_rejected(id_factory) -> None:
    project = _project(id_factory)
    generate = MagicMock(return_value="<h1>Hi</h1>")
    with pytest.raises(InvalidPatchError):
        regenerate_element(project, "title", "x", _cfg(), generate=generate)


def test_regenerate_upstream_error(id_factory) -> None:
    generate = MagicMock(return_value='{"error": "boom"}')
    with pytest.raises(UpstreamError, match="boom"):
        regenerate_element(_project(id_factory), "title", "x", _cfg(), generate=generate)


def test_regenerate_strips_handlers_from_reply(id_factory) -> None:
    generate = MagicMock(return_value='<h1 data-id="title" onClick="x()">Hi</h1>')
    updated = regenerate_element(_project(id_factory), "title", "x", _cfg(), generate=generate)
    assert "onClick" not in updated.fragments[0].content
