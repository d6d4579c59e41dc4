"""
Search Operations Exceptions

This module defines custom exceptions for search operations over a document
vault, providing clear error handling and reporting for search-related issues.
"""

from ...vault_search_exceptions import QueryError


class SearchError(QueryError):
    """Base exception for all search-related errors"""
    pass


class InvalidSearchParametersError(SearchError):
    """Raised when search parameters are invalid"""
    pass


class EmbeddingGenerationError(SearchError):
    """Raised when the embedding provider fails or returns a malformed response"""
    pass


# Name used at the provider boundary
EmbeddingProviderError = EmbeddingGenerationError


class KeywordExtractionError(SearchError):
    """Raised when query keyword extraction fails"""
    pass


class SearchTimeoutError(SearchError):
    """Raised when a search operation times out"""
    pass


class HybridSearchError(SearchError):
    """Raised when hybrid search fails"""
    pass
