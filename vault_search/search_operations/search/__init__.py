"""
Search Implementations Module

This module contains the lexical, semantic and hybrid search
implementations.
"""

# Import lexical search components
from .lexical import BM25Config, BM25Scorer, score_lexical

# Import semantic search components
from .semantic import SemanticScorer, cosine_similarity

# Import hybrid search components
from .hybrid import (
    HybridSearch,
    HybridSearchResult,
    HybridSearchConfig,
    HybridSearchMetrics,
    SearchStatus,
    create_hybrid_search,
    fuse_results_rrf,
)

__all__ = [
    # Lexical search
    "BM25Config",
    "BM25Scorer",
    "score_lexical",

    # Semantic search
    "SemanticScorer",
    "cosine_similarity",

    # Hybrid search
    "HybridSearch",
    "HybridSearchResult",
    "HybridSearchConfig",
    "HybridSearchMetrics",
    "SearchStatus",
    "create_hybrid_search",
    "fuse_results_rrf",
]
