"""Evaluator helper modules for the minijs runtime."""

__all__ = [
    "blocks",
    "expr",
    "fn",
    "helpers",
    "literals",
    "loops",
]
