"""
Hybrid Search Utilities

Metrics and configuration for the hybrid search orchestrator.
"""

from .metrics import HybridSearchMetrics, SearchStatus
from .config import HybridSearchConfig, HybridSearchMode

__all__ = [
    "HybridSearchMetrics",
    "SearchStatus",
    "HybridSearchConfig",
    "HybridSearchMode",
]
