from __future__ import annotations

import os as _os
from typing import List

from .token_types import Tok

DEBUG_PY_TRACE_ENV = "RILL_DEBUG_PY_TRACE"
DEBUG_DUMP_ENV = "RILL_DEBUG_DUMP"

_TRUTHY = {"1", "true", "yes", "on"}


def env_flag(name: str) -> bool:
    """True when the env var is set to one of 1/true/yes/on."""
    raw = _os.environ.get(name)
    if raw is None:
        return False

    return raw.strip().lower() in _TRUTHY


def debug_py_trace_enabled() -> bool:
    return env_flag(DEBUG_PY_TRACE_ENV)


def debug_dump_enabled() -> bool:
    return env_flag(DEBUG_DUMP_ENV)


def dump_tokens(tokens: List[Tok]) -> str:
    return "\n".join(repr(tok) for tok in tokens)
