"""Evaluator helper modules for the MiniLang runtime."""

__all__ = [
    "bind",
    "blocks",
    "expr",
    "fn",
    "helpers",
    "loops",
]
