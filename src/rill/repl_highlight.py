"""prompt_toolkit lexer for live Rill syntax highlighting in the REPL."""

from __future__ import annotations

from typing import Callable, Tuple

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .lexer import LexError, tokenize
from .token_types import TT, Tok

# Map highlight groups → prompt_toolkit style strings.
GROUP_STYLE = {
    "keyword": "bold ansicyan",
    "number": "ansimagenta",
    "string": "ansigreen",
    "identifier": "",
    "function": "bold ansiyellow",
    "operator": "",
    "punctuation": "",
    "error": "bold ansired",
}

_TT_GROUP = {
    TT.IF: "keyword",
    TT.ELSE: "keyword",
    TT.WHILE: "keyword",
    TT.FOR: "keyword",
    TT.FN: "keyword",
    TT.NUMERIC: "number",
    TT.STRING: "string",
    TT.IDENTIFIER: "identifier",
    TT.BINARYOP: "operator",
    TT.ASSIGN: "operator",
    TT.LPAREN: "punctuation",
    TT.RPAREN: "punctuation",
    TT.LBRACE: "punctuation",
    TT.RBRACE: "punctuation",
    TT.COMMA: "punctuation",
}


def _token_span(tok: Tok) -> Tuple[int, int]:
    """Source span of a token, quotes included for strings."""
    if tok.kind == TT.STRING:
        return tok.offset - 1, tok.offset + len(tok.text) + 1
    return tok.offset, tok.offset + len(tok.text)


def _group_for(tokens: list[Tok], idx: int) -> str:
    tok = tokens[idx]

    if tok.kind == TT.IDENTIFIER:
        nxt = tokens[idx + 1] if idx + 1 < len(tokens) else None
        prev = tokens[idx - 1] if idx > 0 else None
        if (nxt is not None and nxt.kind == TT.LPAREN) or (prev is not None and prev.kind == TT.FN):
            return "function"

    return _TT_GROUP.get(tok.kind, "")


def highlight_line(text: str) -> StyleAndTextTuples:
    """Tokenize a single line and return styled fragments."""
    if not text:
        return [("", "")]

    try:
        tokens = tokenize(text)
    except LexError as exc:
        # Style everything from the failure point on as an error.
        if exc.offset is None:
            return [("", text)]
        return [("", text[:exc.offset]), (GROUP_STYLE["error"], text[exc.offset:])]

    result: StyleAndTextTuples = []
    pos = 0

    for i, tok in enumerate(tokens):
        if tok.kind == TT.EOF:
            continue

        start, end = _token_span(tok)
        if start < pos:
            continue

        # Unstyled gap before token.
        if start > pos:
            result.append(("", text[pos:start]))

        style = GROUP_STYLE.get(_group_for(tokens, i), "")
        result.append((style, text[start:end]))
        pos = end

    # Trailing unstyled text.
    if pos < len(text):
        result.append(("", text[pos:]))

    return result if result else [("", text)]


class RillLexer(Lexer):
    """prompt_toolkit Lexer that highlights Rill source using the Rill lexer."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines

        # Pre-compute highlights lazily per line.
        cache: dict[int, StyleAndTextTuples] = {}

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno not in cache:
                if lineno < len(lines):
                    cache[lineno] = highlight_line(lines[lineno])
                else:
                    cache[lineno] = [("", "")]

            return cache[lineno]

        return get_line
