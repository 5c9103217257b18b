from __future__ import annotations

from typing import Callable, List

from ..token_types import TT
from ..tree import Node
from ..types import (
    Context,
    Function,
    RillArityError,
    RillNameError,
    RillNull,
    RillRuntimeError,
    RillValue,
)

EvalFunc = Callable[[Node, Context], RillValue]

def extract_param_names(param_nodes: List[Node]) -> List[str]:
    names: List[str] = []

    for p in param_nodes:
        if p.kind != TT.IDENTIFIER:
            raise RillRuntimeError(f"Unsupported parameter node {p.data}", p.offset)
        if p.text in names:
            raise RillRuntimeError(f"Duplicate parameter '{p.text}'", p.offset)
        names.append(p.text)

    return names

def eval_fn_def(node: Node, context: Context) -> RillValue:
    if len(node.children) < 2:
        raise RillRuntimeError("Malformed function definition", node.offset)

    name_node, *param_nodes, body = node.children

    if name_node.kind != TT.IDENTIFIER:
        raise RillRuntimeError("Function name must be an identifier", name_node.offset)
    if body.kind != TT.BLOCK:
        raise RillRuntimeError("Function body must be a block", body.offset)

    params = extract_param_names(param_nodes)
    # the body node is shared, not copied
    context.set_function(name_node.text, params, body)

    return RillNull()

def eval_call(node: Node, context: Context, eval_func: EvalFunc) -> RillValue:
    fn = context.get_function(node.text)

    if fn is None:
        raise RillNameError(f"Attempted to call unset function '{node.text}'", node.text, node.offset)

    # arguments see the caller's scopes, not the new one
    args = [eval_func(arg, context) for arg in node.children]

    return call_function(fn, args, context, eval_func, node)

def call_function(fn: Function, args: List[RillValue], context: Context, eval_func: EvalFunc, call_node: Node) -> RillValue:
    if len(args) != len(fn.params):
        raise RillArityError(
            f"Function '{fn.name}' expects {len(fn.params)} args; got {len(args)}",
            call_node.offset,
        )

    with context.scope():
        for name, val in zip(fn.params, args):
            context.set_variable(name, val)

        return eval_func(fn.body, context)
