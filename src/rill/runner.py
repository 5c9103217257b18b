from __future__ import annotations

import sys
import traceback
from pathlib import Path
from typing import List, Optional, TextIO

from .evaluator import eval_expr, eval_statements
from .lexer import tokenize
from .parser import parse
from .types import Context, RillError, RillNull, RillValue
from .utils import debug_dump_enabled, debug_py_trace_enabled, dump_tokens


def run(src: str, context: Optional[Context] = None) -> RillValue:
    """Lex, parse and evaluate ``src``; return the last top-level value.

    Raises a RillError subclass (LexError, ParseError, RillRuntimeError)
    naming the failing stage.
    """
    if context is None:
        context = Context()

    tree = parse(tokenize(src))
    return eval_expr(tree, context)


def repl_eval(src: str, context: Context) -> RillValue:
    """Evaluate one REPL entry so its bindings land in the context's global scope."""
    tree = parse(tokenize(src))
    return eval_statements(tree, context)


def run_with_dump(src: str, out: TextIO) -> RillValue:
    """Same as run(), printing tokens, tree and final context along the way."""
    context = Context()

    tokens = tokenize(src)
    print(dump_tokens(tokens), file=out)

    tree = parse(tokens)
    print(tree.pretty(), file=out, end="")

    try:
        return eval_expr(tree, context)
    finally:
        print(context.dump(), file=out)


def _load_source(arg: Optional[str]) -> str:
    """Source text for a CLI argument: stdin for None/"-", a file's
    contents when the argument names one, else the argument itself."""
    if arg is None or arg == "-":
        data = sys.stdin.read()
        if not data:
            raise SystemExit("No input provided on stdin")
        return data

    try:
        is_file = Path(arg).is_file()
    except OSError:
        # too long (or otherwise unusable) as a path name
        is_file = False

    if is_file:
        return Path(arg).read_text(encoding="utf-8")

    return arg


def report_error(exc: RillError, err: TextIO) -> None:
    print(f"{exc.stage} error: {exc}", file=err)

    if debug_py_trace_enabled():
        print("\nPython traceback:", file=err)
        print("".join(traceback.format_tb(exc.__traceback__)), file=err, end="")


def main(argv: Optional[List[str]] = None) -> int:
    dump = debug_dump_enabled()
    arg = None
    args = sys.argv[1:] if argv is None else argv

    for token in args:
        if token == "--dump":
            dump = True
            continue

        if token == "--repl":
            from .repl import repl
            repl()
            return 0

        if arg is None:
            arg = token
        else:
            raise SystemExit(f"Unexpected argument: {token}")

    if arg is None and sys.stdin.isatty():
        from .repl import repl
        repl()
        return 0

    source = _load_source(arg)

    try:
        if dump:
            result = run_with_dump(source, sys.stderr)
        else:
            result = run(source)
    except RillError as exc:
        report_error(exc, sys.stderr)
        return 1

    if not isinstance(result, RillNull):
        print(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
