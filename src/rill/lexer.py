"""
Lexer for Rill

Tokenizes Rill source code into a flat token list.

Features:
- Single-pass character-classification state machine
- Offset tracking (0-based character index)
- Raw string literals (no escape processing)
- Always terminates the stream with an EOF sentinel
"""

from enum import Enum, auto
from typing import List

from .token_types import KEYWORDS, TT, Tok
from .types import RillError

# ============================================================================
# Lexer Implementation
# ============================================================================

class LexState(Enum):
    """What the lexer is currently accumulating"""

    NONE = auto()
    NUMBER = auto()
    IDENTIFIER = auto()
    STRING = auto()
    SYMBOL = auto()


class Lexer:
    """
    Rill lexer.

    Characters are classified one at a time. A character that ends the
    token in progress is not consumed by the ending state; it is looked
    at again from NONE on the next step.
    """

    SYMBOL_CHARS = frozenset('+-*/=!&|')

    # Accepted symbol runs. Anything else made of SYMBOL_CHARS is invalid.
    OPERATORS = {
        '+': TT.BINARYOP,
        '-': TT.BINARYOP,
        '*': TT.BINARYOP,
        '/': TT.BINARYOP,
        '==': TT.BINARYOP,
        '!=': TT.BINARYOP,
        '&&': TT.BINARYOP,
        '||': TT.BINARYOP,
        '=': TT.ASSIGN,
    }

    PUNCTUATION = {
        '{': TT.LBRACE,
        '}': TT.RBRACE,
        '(': TT.LPAREN,
        ')': TT.RPAREN,
        ',': TT.COMMA,
    }

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.state = LexState.NONE
        self.text = ''
        self.start = 0
        self.tokens: List[Tok] = []

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def tokenize(self) -> List[Tok]:
        """Tokenize entire source, return token list ending with EOF"""
        while self.pos < len(self.source):
            ch = self.source[self.pos]

            match self.state:
                case LexState.NONE:
                    self.scan_start(ch)
                case LexState.NUMBER:
                    if _is_digit(ch):
                        self.extend(ch)
                    else:
                        self.flush()
                case LexState.IDENTIFIER:
                    if _is_ident_char(ch):
                        self.extend(ch)
                    else:
                        self.flush()
                case LexState.STRING:
                    if ch == '"':
                        self.flush()
                        self.pos += 1  # closing quote
                    else:
                        self.extend(ch)
                case LexState.SYMBOL:
                    if ch in self.SYMBOL_CHARS:
                        self.extend(ch)
                    else:
                        self.flush()

        if self.state == LexState.STRING:
            raise LexError("Unterminated string literal", self.start)

        self.flush()

        # The parser stops on EOF; it must always be present.
        self.tokens.append(Tok(TT.EOF, '', len(self.source)))
        return self.tokens

    def scan_start(self, ch: str):
        """Pick the next state from the first character of a token"""
        if _is_digit(ch):
            self.begin(LexState.NUMBER)
            return

        if ch.isascii() and (ch.isalpha() or ch == '_'):
            self.begin(LexState.IDENTIFIER)
            return

        if ch in self.SYMBOL_CHARS:
            self.begin(LexState.SYMBOL)
            return

        if ch.isspace():
            self.pos += 1
            return

        if ch == '"':
            self.pos += 1
            self.begin(LexState.STRING)
            return

        kind = self.PUNCTUATION.get(ch)
        if kind is not None:
            self.emit(kind, ch, self.pos)
            self.pos += 1
            return

        raise LexError(f"Invalid character '{ch}'", self.pos)

    # ========================================================================
    # State Transitions
    # ========================================================================

    def begin(self, state: LexState):
        self.state = state
        self.start = self.pos
        self.text = ''

    def extend(self, ch: str):
        self.text += ch
        self.pos += 1

    def flush(self):
        """Emit the token in progress (if any) and return to NONE"""
        state = self.state
        text = self.text
        self.state = LexState.NONE
        self.text = ''

        match state:
            case LexState.NONE:
                return
            case LexState.NUMBER:
                self.emit(TT.NUMERIC, text, self.start)
            case LexState.IDENTIFIER:
                self.emit(KEYWORDS.get(text, TT.IDENTIFIER), text, self.start)
            case LexState.STRING:
                self.emit(TT.STRING, text, self.start)
            case LexState.SYMBOL:
                kind = self.OPERATORS.get(text)
                if kind is None:
                    raise LexError(f"Invalid symbol '{text}'", self.start)
                self.emit(kind, text, self.start)

    def emit(self, kind: TT, text: str, offset: int):
        """Emit a token"""
        self.tokens.append(Tok(kind, text, offset))


def _is_digit(ch: str) -> bool:
    return '0' <= ch <= '9'

def _is_ident_char(ch: str) -> bool:
    return ch.isascii() and (ch.isalnum() or ch == '_')


class LexError(RillError):
    """Lexical analysis error"""
    stage = 'lex'


def tokenize(source: str) -> List[Tok]:
    """Convenience function to tokenize source"""
    return Lexer(source).tokenize()


if __name__ == '__main__':
    import sys

    for tok in tokenize(sys.stdin.read()):
        print(tok)
