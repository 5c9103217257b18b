from __future__ import annotations

from typing import Callable, Iterable

from ..token_types import TT
from ..tree import Node
from ..types import Context, RillNull, RillRuntimeError, RillValue
from .common import expect_children

EvalFunc = Callable[[Node, Context], RillValue]

def eval_program(children: Iterable[Node], context: Context, eval_func: EvalFunc) -> RillValue:
    """Run statements in order in the current scope, returning the last value."""
    result: RillValue = RillNull()

    for child in children:
        result = eval_func(child, context)

    return result

def eval_block(node: Node, context: Context, eval_func: EvalFunc) -> RillValue:
    if not node.token.creates_scope:
        # function bodies: the call already opened the scope
        return eval_program(node.children, context, eval_func)

    with context.scope():
        return eval_program(node.children, context, eval_func)

def eval_assign(node: Node, context: Context, eval_func: EvalFunc) -> RillValue:
    """Always binds in the innermost scope; outer bindings are shadowed, never updated."""
    expect_children(node, 2)
    target, value_node = node.children

    if target.kind != TT.IDENTIFIER or target.children:
        raise RillRuntimeError("Assignment target must be an identifier", target.offset)

    context.set_variable(target.text, eval_func(value_node, context))

    return RillNull()
