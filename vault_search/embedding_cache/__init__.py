"""
Embedding Cache Module

Durable storage for document embeddings with batched, concurrent generation
of cache misses.
"""

from .storage import EmbeddingVector, FileEmbeddingStore
from .cache import CacheStats, EmbeddingCache

__all__ = [
    "EmbeddingVector",
    "FileEmbeddingStore",
    "CacheStats",
    "EmbeddingCache",
]
