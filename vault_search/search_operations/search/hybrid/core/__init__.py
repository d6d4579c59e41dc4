"""Hybrid search core: rank fusion and the search orchestrator."""

from .fusion import fuse_results_rrf, DEFAULT_RRF_K
from .engine import HybridSearch, HybridSearchResult, create_hybrid_search

__all__ = [
    "fuse_results_rrf",
    "DEFAULT_RRF_K",
    "HybridSearch",
    "HybridSearchResult",
    "create_hybrid_search",
]
