from __future__ import annotations

from ..tree import Node
from ..types import INT32_MAX, INT32_MIN, RillBool, RillInt, RillOverflowError, RillTypeError, RillValue

def require_bool(val: RillValue, node: Node, context_label: str) -> bool:
    """Condition values must be BOOL; there is no truthiness."""
    if isinstance(val, RillBool):
        return val.value

    raise RillTypeError(f"{context_label} condition must be BOOL, got {val.type_name}", node.offset)

def checked_int(value: int, node: Node) -> RillInt:
    if not INT32_MIN <= value <= INT32_MAX:
        raise RillOverflowError(f"Integer overflow in '{node.text}'", node.offset)

    return RillInt(value)

def trunc_div(lhs: int, rhs: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(lhs) // abs(rhs)
    return quotient if (lhs < 0) == (rhs < 0) else -quotient
