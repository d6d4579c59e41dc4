"""
Vault Search Exceptions

This module defines custom exceptions for the vault_search package
to provide clear error handling and reporting.
"""


class VaultSearchError(Exception):
    """Base exception for all vault_search errors"""
    pass


class ConfigurationError(VaultSearchError):
    """Raised when configuration is invalid or missing"""
    pass


class CorpusLoadError(VaultSearchError, OSError):
    """Raised when the corpus root cannot be opened or walked"""
    pass


class CacheError(VaultSearchError):
    """Base exception for embedding cache errors"""
    pass


class CacheCorruptionError(CacheError):
    """Raised when a persisted cache record cannot be read or parsed"""
    pass


class QueryError(VaultSearchError):
    """Raised when a query operation fails"""
    pass
