from __future__ import annotations

from typing import Callable

from ..tree import Node
from ..types import (
    Context,
    RillBool,
    RillInt,
    RillString,
    RillTypeError,
    RillValue,
    RillZeroDivisionError,
)
from .common import expect_children
from .helpers import checked_int, trunc_div

EvalFunc = Callable[[Node, Context], RillValue]

def eval_binary(node: Node, context: Context, eval_func: EvalFunc) -> RillValue:
    """Both sides always run, so && and || never short-circuit."""
    expect_children(node, 2)
    lhs_node, rhs_node = node.children
    lhs = eval_func(lhs_node, context)
    rhs = eval_func(rhs_node, context)
    op = node.text

    match lhs, rhs:
        case RillInt(value=a), RillInt(value=b):
            return _int_op(op, a, b, node, lhs, rhs)
        case RillBool(value=a), RillBool(value=b):
            return _bool_op(op, a, b, node, lhs, rhs)
        case RillString(value=a), RillString(value=b):
            return _string_op(op, a, b, node, lhs, rhs)
        case _:
            raise _mismatch(node, lhs, rhs)

def _int_op(op: str, a: int, b: int, node: Node, lhs: RillValue, rhs: RillValue) -> RillValue:
    match op:
        case '+':
            return checked_int(a + b, node)
        case '-':
            return checked_int(a - b, node)
        case '*':
            return checked_int(a * b, node)
        case '/':
            if b == 0:
                raise RillZeroDivisionError("Division by zero", node.offset)
            return checked_int(trunc_div(a, b), node)
        case '==':
            return RillBool(a == b)
        case '!=':
            return RillBool(a != b)
        case _:
            raise _mismatch(node, lhs, rhs)

def _bool_op(op: str, a: bool, b: bool, node: Node, lhs: RillValue, rhs: RillValue) -> RillValue:
    match op:
        case '&&':
            return RillBool(a and b)
        case '||':
            return RillBool(a or b)
        case '==':
            return RillBool(a == b)
        case '!=':
            return RillBool(a != b)
        case _:
            raise _mismatch(node, lhs, rhs)

def _string_op(op: str, a: str, b: str, node: Node, lhs: RillValue, rhs: RillValue) -> RillValue:
    match op:
        case '+':
            return RillString(a + b)
        case '==':
            return RillBool(a == b)
        case '!=':
            return RillBool(a != b)
        case _:
            raise _mismatch(node, lhs, rhs)

def _mismatch(node: Node, lhs: RillValue, rhs: RillValue) -> RillTypeError:
    return RillTypeError(
        f"Type mismatch: {lhs.type_name} {node.text} {rhs.type_name} is not supported",
        node.offset,
    )
