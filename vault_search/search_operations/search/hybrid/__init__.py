"""
Hybrid Search Module

This module combines lexical and semantic scoring into one ranking with
reciprocal rank fusion, graceful degradation and per-query metrics.
"""

from .core.fusion import fuse_results_rrf
from .core.engine import (
    HybridSearch,
    HybridSearchResult,
    create_hybrid_search,
    create_embedding_provider,
    create_keyword_extractor,
)
from .utils.metrics import HybridSearchMetrics, SearchStatus
from .utils.config import HybridSearchConfig, HybridSearchMode
from .resilience.fallback import handle_fallback

__all__ = [
    "HybridSearch",
    "HybridSearchResult",
    "create_hybrid_search",
    "create_embedding_provider",
    "create_keyword_extractor",
    "fuse_results_rrf",
    "HybridSearchMetrics",
    "SearchStatus",
    "HybridSearchConfig",
    "HybridSearchMode",
    "handle_fallback",
]
