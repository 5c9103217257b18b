"""Interactive REPL for Rill, powered by prompt_toolkit."""

from __future__ import annotations

import os
import re
import sys
from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.shortcuts import clear

from .lexer import LexError, tokenize
from .repl_highlight import RillLexer
from .runner import repl_eval, report_error
from .token_types import TT
from .types import Context, RillError, RillNull
from .utils import DEBUG_PY_TRACE_ENV, debug_py_trace_enabled

# Zero-width and invisible characters to strip from input.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

# Slash commands: name => (description, argument_hint).
_SLASH_CMDS = {
    "/clear": ("Clear the terminal screen", ""),
    "/context": ("Show the current bindings", ""),
    "/py-traceback": ("Toggle Python traceback on errors", "[on|off]"),
    "/reset": ("Reset the REPL environment", ""),
}

_DEPTH_OPEN = {TT.LPAREN, TT.LBRACE}
_DEPTH_CLOSE = {TT.RPAREN, TT.RBRACE}


def needs_more_input(text: str) -> bool:
    """Return True while *text* has unclosed braces/parens or an open string."""
    try:
        tokens = tokenize(text)
    except LexError:
        return text.count('"') % 2 == 1

    depth = 0

    for tok in tokens:
        if tok.kind in _DEPTH_OPEN:
            depth += 1
        elif tok.kind in _DEPTH_CLOSE:
            depth -= 1

    return depth > 0


class _SlashCompleter(Completer):
    """Autocomplete slash commands on the primary prompt."""

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if not text.startswith("/"):
            return

        for cmd, (desc, hint) in _SLASH_CMDS.items():
            if cmd.startswith(text):
                yield Completion(
                    cmd,
                    start_position=-len(text),
                    display_meta=desc,
                )


def handle_slash(line: str, context_box: list[Context]) -> bool:
    """Handle slash commands. Returns True if the line was a command."""
    stripped = line.strip()
    if not stripped.startswith("/"):
        return False

    parts = stripped.split(None, 1)
    cmd = parts[0]
    arg = parts[1] if len(parts) > 1 else ""

    if cmd == "/clear":
        clear()
        return True

    if cmd == "/context":
        print(context_box[0].dump())
        return True

    if cmd == "/py-traceback":
        if arg.lower() in ("on", "1", "true", "yes"):
            os.environ[DEBUG_PY_TRACE_ENV] = "1"
        elif arg.lower() in ("off", "0", "false", "no"):
            os.environ.pop(DEBUG_PY_TRACE_ENV, None)
        elif arg == "":
            # Toggle.
            if debug_py_trace_enabled():
                os.environ.pop(DEBUG_PY_TRACE_ENV, None)
            else:
                os.environ[DEBUG_PY_TRACE_ENV] = "1"
        else:
            print("Usage: /py-traceback [on|off]", file=sys.stderr)
            return True

        state = "on" if debug_py_trace_enabled() else "off"
        print(f"Python traceback: {state}")
        return True

    if cmd == "/reset":
        context_box[0] = Context()
        print("Environment reset.")
        return True

    print(f"Unknown command: {cmd}", file=sys.stderr)
    return True


def _normalize(text: str) -> str:
    """Strip invisible characters from input."""
    return _INVISIBLE_RE.sub("", text)


def repl() -> None:
    """Interactive read-eval-print loop with prompt_toolkit."""
    # Use a mutable box so /reset can swap the context.
    context_box: list[Context] = [Context()]

    bindings = KeyBindings()

    @bindings.add("enter")
    def _enter(event):
        buf = event.app.current_buffer

        if buf.text.startswith("/") or not needs_more_input(buf.text):
            buf.validate_and_handle()
            return

        buf.insert_text("\n    ")

    session: PromptSession[str] = PromptSession(
        history=InMemoryHistory(),
        lexer=RillLexer(),
        completer=_SlashCompleter(),
        complete_while_typing=True,
        key_bindings=bindings,
        multiline=True,
        prompt_continuation="... ",
    )

    print("rill repl - Ctrl-D to exit, / for commands")

    while True:
        try:
            text = session.prompt(">>> ")
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue

        text = _normalize(text)
        if not text.strip():
            continue

        if handle_slash(text, context_box):
            continue

        try:
            result = repl_eval(text, context_box[0])
        except RillError as exc:
            report_error(exc, sys.stderr)
            continue
        except KeyboardInterrupt:
            # scopes opened by the interrupted evaluation are already popped
            print("KeyboardInterrupt")
            continue

        if not isinstance(result, RillNull):
            print(result)
