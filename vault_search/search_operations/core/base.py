"""
Base Search Types

This module provides the result types shared by every scorer and by the
rank fuser.
"""

from dataclasses import dataclass
from typing import List

from ...corpus_operations.models import Document


@dataclass
class ScoredDocument:
    """
    A document with a scorer-specific relevance score.

    Scores from different scorers live on different scales and are only
    comparable within one ranked list.
    """
    document: Document
    score: float


# Ordered by descending relevance, rank 0 first
RankedList = List[ScoredDocument]


@dataclass
class FusedResult:
    """A document with its reciprocal rank fusion score."""
    document: Document
    fused_score: float

    def to_dict(self) -> dict:
        result = self.document.to_dict()
        result["score"] = self.fused_score
        return result


def sort_ranked(scored: List[ScoredDocument]) -> RankedList:
    """
    Sort by descending score, breaking ties by input position.

    Args:
        scored: Scored documents in original document order

    Returns:
        New list ordered rank 0 first
    """
    order = sorted(
        range(len(scored)),
        key=lambda index: (-scored[index].score, index)
    )
    return [scored[index] for index in order]
