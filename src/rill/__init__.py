"""Rill: a small brace-delimited scripting language with a tree-walking interpreter."""

from .lexer import LexError, Lexer, tokenize
from .parser import ParseError, Parser, ParserInvariantError, parse, parse_source
from .runner import run
from .token_types import TT, Tok
from .tree import Node
from .types import (
    Context,
    Function,
    RillArityError,
    RillBool,
    RillError,
    RillInt,
    RillNameError,
    RillNull,
    RillOverflowError,
    RillRuntimeError,
    RillString,
    RillTypeError,
    RillValue,
    RillValueError,
    RillZeroDivisionError,
)

__all__ = [
    "Context",
    "Function",
    "LexError",
    "Lexer",
    "Node",
    "ParseError",
    "Parser",
    "ParserInvariantError",
    "RillArityError",
    "RillBool",
    "RillError",
    "RillInt",
    "RillNameError",
    "RillNull",
    "RillOverflowError",
    "RillRuntimeError",
    "RillString",
    "RillTypeError",
    "RillValue",
    "RillValueError",
    "RillZeroDivisionError",
    "TT",
    "Tok",
    "parse",
    "parse_source",
    "run",
    "tokenize",
]
