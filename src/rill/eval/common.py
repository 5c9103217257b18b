from __future__ import annotations

from typing import Any

from ..tree import Node
from ..types import (
    INT32_MAX,
    INT32_MIN,
    Context,
    RillInt,
    RillNameError,
    RillRuntimeError,
    RillString,
    RillValue,
    RillValueError,
)

def expect_children(node: Node, *counts: int) -> None:
    if len(node.children) not in counts:
        expected = " or ".join(str(c) for c in counts)
        raise RillRuntimeError(
            f"Malformed {node.data} node: expected {expected} children, got {len(node.children)}",
            node.offset,
        )

def token_number(node: Node, _: Any) -> RillInt:
    text = node.text

    try:
        value = int(text, 10)
    except ValueError:
        raise RillValueError(f"Invalid integer literal '{text}'", node.offset) from None

    if not INT32_MIN <= value <= INT32_MAX:
        raise RillValueError(f"Integer literal '{text}' does not fit in 32 bits", node.offset)

    return RillInt(value)

def token_string(node: Node, _: Any) -> RillString:
    return RillString(node.text)

def lookup_variable(node: Node, context: Context) -> RillValue:
    value = context.get_variable(node.text)

    if value is None:
        raise RillNameError(f"Attempted to access unset identifier '{node.text}'", node.text, node.offset)

    return value
