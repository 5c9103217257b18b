from __future__ import annotations

from typing import Callable

from ..tree import Node
from ..types import Context, RillNull, RillValue
from .common import expect_children
from .helpers import require_bool

EvalFunc = Callable[[Node, Context], RillValue]

def eval_if_stmt(node: Node, context: Context, eval_func: EvalFunc) -> RillValue:
    expect_children(node, 2, 3)
    cond_node, then_body, *rest = node.children

    if require_bool(eval_func(cond_node, context), cond_node, "if"):
        return eval_func(then_body, context)

    if rest:
        return eval_func(rest[0], context)

    return RillNull()

def eval_while_stmt(node: Node, context: Context, eval_func: EvalFunc) -> RillValue:
    expect_children(node, 2)
    cond_node, body = node.children

    while require_bool(eval_func(cond_node, context), cond_node, "while"):
        eval_func(body, context)

    return RillNull()
