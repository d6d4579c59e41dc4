"""Graceful degradation for hybrid search."""

from .fallback import handle_fallback, LEXICAL, SEMANTIC

__all__ = [
    "handle_fallback",
    "LEXICAL",
    "SEMANTIC",
]
