"""
Vault Search - Hybrid Search for Personal Knowledge Vaults

Indexes a directory tree of markdown documents and answers natural-language
queries by fusing BM25 keyword relevance and embedding similarity with
reciprocal rank fusion. Embeddings are persisted in a file cache so each
document is embedded once per model.
"""

__version__ = "0.1.0"
__author__ = "RhythmX"

from .config import VaultSearchSettings, load_settings
from .corpus_operations import Document, CorpusLoader, load_corpus
from .vault_search_exceptions import (
    VaultSearchError,
    ConfigurationError,
    CorpusLoadError,
    CacheError,
    CacheCorruptionError,
)
from .search_operations.search import (
    HybridSearch,
    HybridSearchResult,
    SearchStatus,
    create_hybrid_search,
    fuse_results_rrf,
    score_lexical,
)

__all__ = [
    "VaultSearchSettings",
    "load_settings",
    "Document",
    "CorpusLoader",
    "load_corpus",
    "VaultSearchError",
    "ConfigurationError",
    "CorpusLoadError",
    "CacheError",
    "CacheCorruptionError",
    "HybridSearch",
    "HybridSearchResult",
    "SearchStatus",
    "create_hybrid_search",
    "fuse_results_rrf",
    "score_lexical",
]
