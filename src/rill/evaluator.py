from __future__ import annotations

from typing import Optional

from .token_types import TT
from .tree import Node
from .types import Context, RillRuntimeError, RillValue

from .eval.blocks import eval_assign, eval_block, eval_program
from .eval.common import lookup_variable, token_number, token_string
from .eval.expr import eval_binary
from .eval.fn import eval_call, eval_fn_def
from .eval.loops import eval_if_stmt, eval_while_stmt


def _maybe_attach_location(exc: RillRuntimeError, node: Node) -> None:
    if exc.offset is None:
        exc.offset = node.offset

# ---------------- Public API ----------------

def eval_expr(ast: Node, context: Optional[Context] = None) -> RillValue:
    """Evaluate a whole tree. Scopes opened inside are popped even on failure."""
    if context is None:
        context = Context()

    try:
        return eval_node(ast, context)
    except RecursionError:
        raise RillRuntimeError("Maximum recursion depth exceeded", ast.offset) from None

def eval_statements(ast: Node, context: Context) -> RillValue:
    """Run a program block's statements directly in the context's current scope."""
    if ast.kind != TT.BLOCK:
        return eval_expr(ast, context)

    try:
        return eval_program(ast.children, context, eval_node)
    except RecursionError:
        raise RillRuntimeError("Maximum recursion depth exceeded", ast.offset) from None

# ---------------- Core evaluator ----------------

def eval_node(n: Node, context: Context) -> RillValue:
    try:
        return _eval_node_inner(n, context)
    except RillRuntimeError as e:
        _maybe_attach_location(e, n)
        raise


def _eval_node_inner(n: Node, context: Context) -> RillValue:
    match n.kind:
        case TT.NUMERIC:
            return token_number(n, context)
        case TT.STRING:
            return token_string(n, context)
        case TT.IDENTIFIER:
            return lookup_variable(n, context)
        case TT.CALL:
            return eval_call(n, context, eval_node)
        case TT.BINARYOP:
            return eval_binary(n, context, eval_node)
        case TT.ASSIGN:
            return eval_assign(n, context, eval_node)
        case TT.IF:
            return eval_if_stmt(n, context, eval_node)
        case TT.WHILE:
            return eval_while_stmt(n, context, eval_node)
        case TT.FN:
            return eval_fn_def(n, context)
        case TT.BLOCK:
            return eval_block(n, context, eval_node)
        case TT.FOR | TT.ELSE | TT.LBRACE | TT.RBRACE | TT.LPAREN | TT.RPAREN | TT.COMMA | TT.EOF:
            raise RillRuntimeError(f"Unexpected {n.data} node", n.offset)
        case _:
            raise RillRuntimeError(f"Unknown node: {n.data}", n.offset)
