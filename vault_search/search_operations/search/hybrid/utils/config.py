"""
Configuration Module

This module provides the runtime configuration for hybrid search operations
and the search mode enumeration.
"""

from enum import Enum
from dataclasses import dataclass, field

from ...lexical.bm25 import BM25Config


class HybridSearchMode(Enum):
    """Which scoring paths a hybrid search combines."""
    HYBRID = "hybrid"
    LEXICAL_ONLY = "lexical_only"
    SEMANTIC_ONLY = "semantic_only"


@dataclass
class HybridSearchConfig:
    """
    Configuration for the hybrid search orchestrator.

    Attributes:
        top_k: Maximum number of fused results returned
        candidate_pool_size: Per-scorer list length fed into fusion
        rrf_k: Reciprocal rank fusion constant
        timeout: Wall-clock budget of one query in seconds
        fallback_enabled: Return single-path results when the other path fails
        enable_lexical: Run the keyword/BM25 path
        enable_semantic: Run the embedding path
        bm25: Lexical scorer parameters
    """
    top_k: int = 10
    candidate_pool_size: int = 30
    rrf_k: int = 60
    timeout: float = 60.0
    fallback_enabled: bool = True
    enable_lexical: bool = True
    enable_semantic: bool = True
    bm25: BM25Config = field(default_factory=BM25Config)

    def __post_init__(self):
        """Validate hybrid search configuration parameters."""
        if self.top_k < 1:
            raise ValueError(f"top_k must be at least 1, got {self.top_k}")
        if self.candidate_pool_size < 1:
            raise ValueError(f"candidate_pool_size must be at least 1, got {self.candidate_pool_size}")
        if self.rrf_k <= 0:
            raise ValueError(f"rrf_k must be positive, got {self.rrf_k}")
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        if not (self.enable_lexical or self.enable_semantic):
            raise ValueError("At least one of enable_lexical or enable_semantic must be set")

    @property
    def search_mode(self) -> HybridSearchMode:
        if self.enable_lexical and self.enable_semantic:
            return HybridSearchMode.HYBRID
        if self.enable_lexical:
            return HybridSearchMode.LEXICAL_ONLY
        return HybridSearchMode.SEMANTIC_ONLY

    @classmethod
    def from_settings(cls, search_settings) -> "HybridSearchConfig":
        """Build from a SearchSettings instance."""
        return cls(
            top_k=search_settings.top_k,
            candidate_pool_size=search_settings.candidate_pool_size,
            rrf_k=search_settings.rrf_k,
            timeout=search_settings.timeout,
            fallback_enabled=search_settings.fallback_enabled,
            enable_lexical=search_settings.enable_lexical,
            enable_semantic=search_settings.enable_semantic,
            bm25=BM25Config(k1=search_settings.bm25_k1, b=search_settings.bm25_b),
        )
