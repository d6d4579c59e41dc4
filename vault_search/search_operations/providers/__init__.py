"""
Providers Module

This module provides interfaces and implementations for the external
collaborators of search: embedding generation and query keyword extraction.
"""

from .embedding import (
    EmbeddingProvider,
    EmbeddingResult,
    HashEmbeddingProvider,
)

from .gemini_embedding import (
    GeminiEmbeddingProvider,
    TaskType,
)

from .keywords import (
    KeywordExtractor,
    SimpleKeywordExtractor,
    GeminiKeywordExtractor,
)

__all__ = [
    # Base interfaces
    "EmbeddingProvider",
    "EmbeddingResult",
    "KeywordExtractor",

    # Offline implementations
    "HashEmbeddingProvider",
    "SimpleKeywordExtractor",

    # Gemini implementations
    "GeminiEmbeddingProvider",
    "GeminiKeywordExtractor",
    "TaskType",
]
