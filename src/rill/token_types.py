"""
Token Types for Rill

Shared between lexer, parser and evaluator to avoid circular dependencies.
"""

from dataclasses import dataclass
from enum import Enum, auto


class TT(Enum):
    """Token Types - one per lexical class, plus the parser-made BLOCK/CALL"""

    # Literals
    NUMERIC = auto()
    STRING = auto()
    IDENTIFIER = auto()

    # Keywords
    IF = auto()
    WHILE = auto()
    FOR = auto()
    ELSE = auto()
    FN = auto()

    # Operators
    BINARYOP = auto()
    ASSIGN = auto()

    # Punctuation
    LBRACE = auto()
    RBRACE = auto()
    LPAREN = auto()
    RPAREN = auto()
    COMMA = auto()

    # Synthesised by the parser
    BLOCK = auto()
    CALL = auto()

    # Special
    EOF = auto()


KEYWORDS = {
    'if': TT.IF,
    'while': TT.WHILE,
    'for': TT.FOR,
    'else': TT.ELSE,
    'fn': TT.FN,
}


@dataclass(frozen=True)
class Tok:
    """Token with its source offset"""

    kind: TT
    text: str
    offset: int = 0
    creates_scope: bool = False  # BLOCK only

    def __repr__(self):
        if self.kind == TT.BLOCK:
            return f"Tok(BLOCK, scoped={self.creates_scope}, @{self.offset})"
        return f"Tok({self.kind.name}, {self.text!r}, @{self.offset})"
