"""Evaluator helper modules for the Rill runtime."""

__all__ = [
    "blocks",
    "common",
    "expr",
    "fn",
    "helpers",
    "loops",
]
