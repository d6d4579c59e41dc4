"""
Search Core Module

Shared result types and exceptions for search operations.
"""

from .base import ScoredDocument, RankedList, FusedResult, sort_ranked
from .search_ops_exceptions import (
    SearchError,
    InvalidSearchParametersError,
    EmbeddingGenerationError,
    EmbeddingProviderError,
    KeywordExtractionError,
    SearchTimeoutError,
    HybridSearchError,
)

__all__ = [
    "ScoredDocument",
    "RankedList",
    "FusedResult",
    "sort_ranked",
    "SearchError",
    "InvalidSearchParametersError",
    "EmbeddingGenerationError",
    "EmbeddingProviderError",
    "KeywordExtractionError",
    "SearchTimeoutError",
    "HybridSearchError",
]
