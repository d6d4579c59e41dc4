"""
Semantic Search Module

Embedding-based document scoring backed by the persistent embedding cache.
"""

from .engine import SemanticScorer, cosine_similarity

__all__ = [
    "SemanticScorer",
    "cosine_similarity",
]
