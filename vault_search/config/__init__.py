"""
Configuration Module

This module provides centralized configuration management for vault search:
- Corpus location and recognized document extensions
- Embedding provider, batching and rate limiting
- Embedding cache location and record keying
- Hybrid search and fusion parameters
- Logging and metrics

Implements an environment-aware configuration system with sensible
defaults and validation using Pydantic.
"""

from .settings import (
    VaultSearchSettings,
    CorpusSettings,
    EmbeddingSettings,
    CacheSettings,
    SearchSettings,
    MonitoringSettings,
    load_settings,
    EmbeddingProviderType,
    CacheKeyStrategy,
    KeywordExtractorType,
)

__all__ = [
    'VaultSearchSettings',
    'CorpusSettings',
    'EmbeddingSettings',
    'CacheSettings',
    'SearchSettings',
    'MonitoringSettings',
    'load_settings',
    'EmbeddingProviderType',
    'CacheKeyStrategy',
    'KeywordExtractorType',
]
