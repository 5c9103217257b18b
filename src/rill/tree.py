"""AST node type shared by the parser and the evaluator.

Nodes are lark Trees whose ``data`` is the token kind name, so lark's
``pretty()`` and ``iter_subtrees*`` helpers work on them unchanged.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Iterator, List, Optional

from lark import Tree

from .token_types import TT, Tok

if TYPE_CHECKING:
    from .types import Context, RillValue


class Node(Tree):
    """One syntactic construct: a token plus its ordered children."""

    def __init__(self, token: Tok, children: Optional[List[Node]] = None):
        super().__init__(token.kind.name, list(children or []))
        self.token = token

    @property
    def kind(self) -> TT:
        return self.token.kind

    @property
    def text(self) -> str:
        return self.token.text

    @property
    def offset(self) -> int:
        return self.token.offset

    def eval(self, context: Context) -> RillValue:
        from .evaluator import eval_node  # local import to avoid cycle
        return eval_node(self, context)

    def _pretty_label(self) -> str:
        if self.token.kind == TT.BLOCK:
            return f"BLOCK scoped={self.token.creates_scope}"
        if self.token.text:
            return f"{self.data} {self.token.text!r}"
        return self.data

    def __repr__(self) -> str:
        return f'Node({self.token!r}, {self.children!r})'

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return False
        return (
            self.token.kind == other.token.kind
            and self.token.text == other.token.text
            and self.token.creates_scope == other.token.creates_scope
            and self.children == other.children
        )

    def __hash__(self) -> int:
        return hash((self.token.kind, self.token.text, self.token.creates_scope, tuple(self.children)))


def leaf(token: Tok) -> Node:
    return Node(token, [])

def block(children: List[Node], creates_scope: bool, offset: int = 0) -> Node:
    return Node(Tok(TT.BLOCK, '', offset, creates_scope=creates_scope), children)

def is_kind(node: Node, *kinds: TT) -> bool:
    return node.token.kind in kinds

def walk(node: Node) -> Iterator[Node]:
    """Pre-order traversal including the root."""
    return node.iter_subtrees_topdown()

def count_kind(node: Node, kind: TT) -> int:
    return sum(1 for n in walk(node) if n.token.kind == kind)
