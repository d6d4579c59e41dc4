"""
Lexical Search Module

BM25 keyword scoring over a loaded document set.
"""

from .bm25 import BM25Config, BM25Scorer, score_lexical

__all__ = [
    "BM25Config",
    "BM25Scorer",
    "score_lexical",
]
