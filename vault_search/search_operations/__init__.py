"""
Search Operations Module

Result types, exceptions and external collaborators (embedding providers and
keyword extractors) shared by the search implementations in the search
subpackage.
"""

# Core exports
from .core import (
    ScoredDocument,
    RankedList,
    FusedResult,
    SearchError,
    InvalidSearchParametersError,
    EmbeddingGenerationError,
    EmbeddingProviderError,
    KeywordExtractionError,
    SearchTimeoutError,
    HybridSearchError,
)

# Provider exports
from .providers import (
    EmbeddingProvider,
    EmbeddingResult,
    HashEmbeddingProvider,
    GeminiEmbeddingProvider,
    KeywordExtractor,
    SimpleKeywordExtractor,
    GeminiKeywordExtractor,
)

__all__ = [
    # Core
    "ScoredDocument",
    "RankedList",
    "FusedResult",
    "SearchError",
    "InvalidSearchParametersError",
    "EmbeddingGenerationError",
    "EmbeddingProviderError",
    "KeywordExtractionError",
    "SearchTimeoutError",
    "HybridSearchError",

    # Providers
    "EmbeddingProvider",
    "EmbeddingResult",
    "HashEmbeddingProvider",
    "GeminiEmbeddingProvider",
    "KeywordExtractor",
    "SimpleKeywordExtractor",
    "GeminiKeywordExtractor",
]
