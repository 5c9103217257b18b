from __future__ import annotations

import io
from pathlib import Path

import pytest

import rill.repl
from rill.runner import main, run_with_dump
from rill.types import RillInt
from rill.utils import (
    DEBUG_DUMP_ENV,
    DEBUG_PY_TRACE_ENV,
    dump_tokens,
    env_flag,
)
from tests.support.harness import RillZeroDivisionError, tokenize


class _TTYInput(io.StringIO):
    def isatty(self) -> bool:
        return True


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(DEBUG_DUMP_ENV, raising=False)
    monkeypatch.delenv(DEBUG_PY_TRACE_ENV, raising=False)


@pytest.mark.parametrize(
    "source, expected",
    [
        pytest.param("1 + 2", "3\n", id="number"),
        pytest.param('"hi" + "!"', '"hi!"\n', id="string"),
        pytest.param("1 == 1", "true\n", id="bool"),
        pytest.param("x = 1", "", id="null-prints-nothing"),
        pytest.param("", "", id="empty-program"),
    ],
)
def test_main_prints_final_value(source: str, expected: str, capsys) -> None:
    assert main([source]) == 0
    assert capsys.readouterr().out == expected


@pytest.mark.parametrize(
    "source, expected",
    [
        pytest.param("1 / 0", "eval error: Division by zero (offset 2)\n", id="eval"),
        pytest.param("@", "lex error: Invalid character '@' (offset 0)\n", id="lex"),
        pytest.param("1 +", "parse error: Expected operand after '+' (offset 3)\n", id="parse"),
    ],
)
def test_main_reports_errors(source: str, expected: str, capsys) -> None:
    assert main([source]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == expected


def test_main_runs_file(tmp_path: Path, capsys) -> None:
    script = tmp_path / "prog.rill"
    script.write_text("fn sq(x) { x * x }\nsq(9)\n", encoding="utf-8")

    assert main([str(script)]) == 0
    assert capsys.readouterr().out == "81\n"


def test_main_reads_stdin_dash(monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("2 * 21"))

    assert main(["-"]) == 0
    assert capsys.readouterr().out == "42\n"


def test_main_reads_piped_stdin_without_args(monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO('"piped"'))

    assert main([]) == 0
    assert capsys.readouterr().out == '"piped"\n'


def test_main_rejects_empty_stdin(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO(""))

    with pytest.raises(SystemExit):
        main(["-"])


def test_main_rejects_extra_arguments() -> None:
    with pytest.raises(SystemExit):
        main(["1", "2"])


def test_main_starts_repl_on_flag(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = []
    monkeypatch.setattr(rill.repl, "repl", lambda: calls.append("repl"))

    assert main(["--repl"]) == 0
    assert calls == ["repl"]


def test_main_starts_repl_on_terminal(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = []
    monkeypatch.setattr(rill.repl, "repl", lambda: calls.append("repl"))
    monkeypatch.setattr("sys.stdin", _TTYInput(""))

    assert main([]) == 0
    assert calls == ["repl"]


def test_dump_flag_writes_tokens_tree_and_context(capsys) -> None:
    assert main(["--dump", "x = 1 x"]) == 0
    captured = capsys.readouterr()

    assert captured.out == "1\n"
    assert "Tok(IDENTIFIER, 'x', @0)" in captured.err
    assert "Tok(EOF, '', @7)" in captured.err
    assert "BLOCK scoped=True" in captured.err
    assert "ASSIGN '='" in captured.err
    assert "scope 0:" in captured.err


def test_dump_env_flag(monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    monkeypatch.setenv(DEBUG_DUMP_ENV, "1")

    assert main(["7"]) == 0
    captured = capsys.readouterr()
    assert captured.out == "7\n"
    assert "Tok(NUMERIC, '7', @0)" in captured.err


def test_py_trace_env_flag(monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    monkeypatch.setenv(DEBUG_PY_TRACE_ENV, "yes")

    assert main(["1 / 0"]) == 1
    err = capsys.readouterr().err
    assert err.startswith("eval error: Division by zero (offset 2)\n")
    assert "Python traceback:" in err


def test_run_with_dump_returns_value() -> None:
    out = io.StringIO()
    assert run_with_dump("fn f() { 3 } f()", out) == RillInt(3)
    assert "<fn f" not in out.getvalue()
    assert "CALL 'f'" in out.getvalue()


def test_run_with_dump_prints_context_on_error() -> None:
    out = io.StringIO()

    with pytest.raises(RillZeroDivisionError):
        run_with_dump("1 / 0", out)

    assert out.getvalue().rstrip().endswith("scope 0:")


@pytest.mark.parametrize(
    "raw, expected",
    [
        pytest.param("1", True, id="one"),
        pytest.param("true", True, id="true"),
        pytest.param("YES", True, id="yes-upper"),
        pytest.param(" on ", True, id="on-padded"),
        pytest.param("0", False, id="zero"),
        pytest.param("", False, id="empty"),
        pytest.param("no", False, id="no"),
    ],
)
def test_env_flag(raw: str, expected: bool, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(DEBUG_DUMP_ENV, raw)
    assert env_flag(DEBUG_DUMP_ENV) is expected


def test_env_flag_unset() -> None:
    assert env_flag(DEBUG_DUMP_ENV) is False


def test_dump_tokens_one_per_line() -> None:
    assert dump_tokens(tokenize("a + 1")) == "\n".join(
        [
            "Tok(IDENTIFIER, 'a', @0)",
            "Tok(BINARYOP, '+', @2)",
            "Tok(NUMERIC, '1', @4)",
            "Tok(EOF, '', @5)",
        ]
    )


def test_main_runs_literal_longer_than_a_file_name(capsys) -> None:
    source = "1 + " * 200 + "1"
    assert len(source) > 600

    assert main([source]) == 0
    assert capsys.readouterr().out == "201\n"


def test_main_reports_deep_nesting_as_parse_error(capsys) -> None:
    assert main(["(" * 5000 + "1" + ")" * 5000]) == 1
    assert capsys.readouterr().err.startswith("parse error: Maximum nesting depth exceeded")
