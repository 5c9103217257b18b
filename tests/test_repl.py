from __future__ import annotations

import pytest
from prompt_toolkit.document import Document

import rill.repl
from rill.repl import _SlashCompleter, _normalize, handle_slash, needs_more_input
from rill.repl_highlight import GROUP_STYLE, RillLexer, highlight_line
from rill.types import Context, RillInt
from rill.utils import DEBUG_PY_TRACE_ENV, debug_py_trace_enabled


@pytest.fixture
def context_box() -> list:
    return [Context()]


@pytest.mark.parametrize(
    "text, expected",
    [
        pytest.param("x = 1", False, id="complete-statement"),
        pytest.param("{ 1 }", False, id="closed-block"),
        pytest.param("fn f() {", True, id="open-block"),
        pytest.param("fn f() {\n  if (x == 1) {", True, id="nested-open-blocks"),
        pytest.param("f(1,", True, id="open-call"),
        pytest.param('"abc', True, id="open-string"),
        pytest.param("}", False, id="extra-close"),
        pytest.param("@", False, id="lex-error-not-continued"),
        pytest.param("", False, id="empty"),
    ],
)
def test_needs_more_input(text: str, expected: bool) -> None:
    assert needs_more_input(text) is expected


def test_plain_line_is_not_a_command(context_box) -> None:
    assert handle_slash("x = 1", context_box) is False


def test_context_command_dumps_bindings(context_box, capsys) -> None:
    context_box[0].set_variable("x", RillInt(4))

    assert handle_slash("/context", context_box) is True
    assert capsys.readouterr().out == "scope 0:\n  x = 4\n"


def test_reset_command_replaces_context(context_box, capsys) -> None:
    old = context_box[0]
    old.set_variable("x", RillInt(4))

    assert handle_slash("  /reset  ", context_box) is True
    assert context_box[0] is not old
    assert context_box[0].get_variable("x") is None
    assert "Environment reset." in capsys.readouterr().out


def test_clear_command(context_box, monkeypatch: pytest.MonkeyPatch) -> None:
    calls = []
    monkeypatch.setattr(rill.repl, "clear", lambda: calls.append(1))

    assert handle_slash("/clear", context_box) is True
    assert calls == [1]


def test_py_traceback_on_off_and_toggle(context_box, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    monkeypatch.setenv(DEBUG_PY_TRACE_ENV, "0")

    handle_slash("/py-traceback on", context_box)
    assert debug_py_trace_enabled()

    handle_slash("/py-traceback off", context_box)
    assert not debug_py_trace_enabled()

    handle_slash("/py-traceback", context_box)
    assert debug_py_trace_enabled()

    handle_slash("/py-traceback", context_box)
    assert not debug_py_trace_enabled()

    out = capsys.readouterr().out
    assert out.splitlines() == [
        "Python traceback: on",
        "Python traceback: off",
        "Python traceback: on",
        "Python traceback: off",
    ]


def test_py_traceback_bad_argument(context_box, capsys) -> None:
    assert handle_slash("/py-traceback maybe", context_box) is True
    assert "Usage: /py-traceback [on|off]" in capsys.readouterr().err


def test_unknown_command(context_box, capsys) -> None:
    assert handle_slash("/nope", context_box) is True
    assert capsys.readouterr().err == "Unknown command: /nope\n"


def test_slash_completer() -> None:
    completions = list(_SlashCompleter().get_completions(Document("/c"), None))
    assert [c.text for c in completions] == ["/clear", "/context"]
    assert all(c.start_position == -2 for c in completions)


def test_slash_completer_ignores_source() -> None:
    assert list(_SlashCompleter().get_completions(Document("x = "), None)) == []


def test_normalize_strips_invisible_characters() -> None:
    assert _normalize("x\u200b = 1\u00a0\r") == "x = 1"


@pytest.mark.parametrize(
    "text",
    [
        "if (x) { 1 }",
        'fn greet(name) { "hi " + name }',
        "  a   =  b  ",
        'x = "unterminated',
        "x = @ 1",
    ],
)
def test_highlight_preserves_text(text: str) -> None:
    assert "".join(fragment for _, fragment in highlight_line(text)) == text


def test_highlight_groups() -> None:
    styled = dict((fragment, style) for style, fragment in highlight_line('fn add(a) { "s" + 12 }'))

    assert styled["fn"] == GROUP_STYLE["keyword"]
    assert styled["add"] == GROUP_STYLE["function"]
    assert styled['"s"'] == GROUP_STYLE["string"]
    assert styled["12"] == GROUP_STYLE["number"]


def test_highlight_call_name() -> None:
    styled = highlight_line("f(1)")
    assert styled[0] == (GROUP_STYLE["function"], "f")


def test_highlight_lex_error_tail() -> None:
    assert highlight_line("x = @ 1") == [("", "x = "), (GROUP_STYLE["error"], "@ 1")]


def test_highlight_empty_line() -> None:
    assert highlight_line("") == [("", "")]


def test_lexer_highlights_each_line() -> None:
    get_line = RillLexer().lex_document(Document('x = 1\nwhile'))

    assert get_line(1) == [(GROUP_STYLE["keyword"], "while")]
    assert get_line(5) == [("", "")]
