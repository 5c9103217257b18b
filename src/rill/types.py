from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import ClassVar, Dict, Iterator, List, Optional, Tuple
from typing_extensions import TypeAlias
from .tree import Node

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1

# ---------- Value Model ----------

@dataclass(frozen=True)
class RillNull:
    type_name: ClassVar[str] = "NULL"
    def __repr__(self) -> str:
        return "null"

@dataclass(frozen=True)
class RillInt:
    value: int
    type_name: ClassVar[str] = "INTEGER"
    def __repr__(self) -> str:
        return str(self.value)

@dataclass(frozen=True)
class RillString:
    value: str
    type_name: ClassVar[str] = "STRING"
    def __repr__(self) -> str:
        return f'"{self.value}"'

@dataclass(frozen=True)
class RillBool:
    value: bool
    type_name: ClassVar[str] = "BOOL"
    def __repr__(self) -> str:
        return "true" if self.value else "false"

RillValue: TypeAlias = RillNull | RillInt | RillString | RillBool


@dataclass(frozen=True)
class Function:
    name: str
    params: Tuple[str, ...]
    body: Node                    # shared with the defining fn node
    def __repr__(self) -> str:
        param_desc = ", ".join(self.params) if self.params else "nullary"
        return f"<fn {self.name} params={param_desc}>"

# ---------- Context ----------

class Context:
    """Scope stack for one evaluation.

    Variables and functions live in two parallel stacks that are always
    pushed and popped together. A fresh context holds the global scope.
    """

    def __init__(self) -> None:
        self.variables: List[Dict[str, RillValue]] = []
        self.functions: List[Dict[str, Function]] = []
        self.push_scope()

    @property
    def depth(self) -> int:
        return len(self.variables)

    def push_scope(self) -> None:
        self.variables.append({})
        self.functions.append({})

    def pop_scope(self) -> None:
        if len(self.variables) <= 1:
            raise RuntimeError("Cannot pop the global scope")

        self.variables.pop()
        self.functions.pop()

    @contextmanager
    def scope(self) -> Iterator[None]:
        """Run the body inside a fresh scope, popping it even on error."""
        self.push_scope()
        try:
            yield
        finally:
            self.pop_scope()

    def set_variable(self, name: str, value: RillValue) -> None:
        self.variables[-1][name] = value

    def get_variable(self, name: str) -> Optional[RillValue]:
        for scope in reversed(self.variables):
            if name in scope:
                return scope[name]

        return None

    def set_function(self, name: str, params: List[str], body: Node) -> Function:
        fn = Function(name=name, params=tuple(params), body=body)
        self.functions[-1][name] = fn
        return fn

    def get_function(self, name: str) -> Optional[Function]:
        for scope in reversed(self.functions):
            if name in scope:
                return scope[name]

        return None

    def dump(self) -> str:
        lines = []

        for level, (vars_, fns) in enumerate(zip(self.variables, self.functions)):
            lines.append(f"scope {level}:")

            for name, val in vars_.items():
                lines.append(f"  {name} = {val!r}")
            for fn in fns.values():
                lines.append(f"  {fn!r}")

        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"<Context depth={self.depth}>"

# ---------- Exceptions ----------

class RillError(Exception):
    """Base for every user-facing error; names the failing stage."""
    stage: ClassVar[str] = "rill"

    def __init__(self, message: str, offset: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.offset = offset

    def __str__(self) -> str:
        if self.offset is None:
            return self.message

        return f"{self.message} (offset {self.offset})"

class RillRuntimeError(RillError):
    stage = "eval"

class RillNameError(RillRuntimeError):
    def __init__(self, message: str, name: str, offset: Optional[int] = None):
        super().__init__(message, offset)
        self.name = name

class RillTypeError(RillRuntimeError):
    pass

class RillArityError(RillRuntimeError):
    pass

class RillZeroDivisionError(RillRuntimeError):
    pass

class RillOverflowError(RillRuntimeError):
    pass

class RillValueError(RillRuntimeError):
    pass
