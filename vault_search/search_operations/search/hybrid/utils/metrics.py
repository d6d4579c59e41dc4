"""
Metrics Module

This module provides metrics tracking for hybrid search operations,
including status enumerations and per-query metrics dataclasses.
"""

import time
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional


class SearchStatus(Enum):
    """
    Enumeration of search operation states.

    SUCCESS and DEGRADED are the states of a returned result; FAILURE and
    TIMEOUT only appear in recorded metrics of queries that raised.
    """
    SUCCESS = "success"
    DEGRADED = "degraded"
    FAILURE = "failure"
    TIMEOUT = "timeout"


@dataclass
class HybridSearchMetrics:
    """
    Per-query metrics for hybrid search operations.

    Attributes:
        query_hash: Hash of the query for identification
        search_mode: Which scoring paths were enabled
        corpus_time_ms: Time taken to load the corpus
        keyword_time_ms: Time taken to extract query keywords
        lexical_time_ms: Time taken by the lexical path, keywords included
        semantic_time_ms: Time taken by the semantic path
        fusion_time_ms: Time taken for result fusion
        total_time_ms: Total end-to-end time
        documents_count: Number of documents in the corpus snapshot
        lexical_results: Number of lexical candidates fused
        semantic_results: Number of semantic candidates fused
        results_count: Number of results returned
        status: Final status of the search operation
        error_message: Error message if search failed or degraded
        timestamp: Unix timestamp when search was initiated
    """
    query_hash: str
    search_mode: str = "hybrid"
    corpus_time_ms: float = 0.0
    keyword_time_ms: float = 0.0
    lexical_time_ms: float = 0.0
    semantic_time_ms: float = 0.0
    fusion_time_ms: float = 0.0
    total_time_ms: float = 0.0
    documents_count: int = 0
    lexical_results: int = 0
    semantic_results: int = 0
    results_count: int = 0
    status: SearchStatus = SearchStatus.SUCCESS
    error_message: Optional[str] = None
    timestamp: float = field(default_factory=time.time)

    def to_dict(self):
        """
        Convert metrics to dictionary format.

        Returns:
            Dictionary representation of metrics
        """
        return {
            "query_hash": self.query_hash,
            "search_mode": self.search_mode,
            "corpus_time_ms": round(self.corpus_time_ms, 2),
            "keyword_time_ms": round(self.keyword_time_ms, 2),
            "lexical_time_ms": round(self.lexical_time_ms, 2),
            "semantic_time_ms": round(self.semantic_time_ms, 2),
            "fusion_time_ms": round(self.fusion_time_ms, 2),
            "total_time_ms": round(self.total_time_ms, 2),
            "documents_count": self.documents_count,
            "lexical_results": self.lexical_results,
            "semantic_results": self.semantic_results,
            "results_count": self.results_count,
            "status": self.status.value,
            "error_message": self.error_message,
            "timestamp": self.timestamp,
        }
