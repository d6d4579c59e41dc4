"""
Result Fusion Module

This module merges the ranked lists produced by independent scorers into a
single ranking with Reciprocal Rank Fusion. RRF only looks at rank
positions, so scorers whose scores live on different scales can be combined
without normalization.
"""

import logging
from typing import Dict, List, Sequence

from .....corpus_operations.models import Document
from ....core.base import FusedResult, RankedList

logger = logging.getLogger(__name__)

DEFAULT_RRF_K = 60


def fuse_results_rrf(
    ranked_lists: Sequence[RankedList],
    k: int = DEFAULT_RRF_K
) -> List[FusedResult]:
    """
    Fuse ranked lists using Reciprocal Rank Fusion (RRF).

    Formula: RRF_score(d) = Σ 1 / (k + rank(d)), with zero-based ranks.

    A document listed more than once in the same list is credited only for
    its best rank in that list. Documents absent from every list never
    appear in the output.

    Args:
        ranked_lists: Ranked lists from different scorers, rank 0 first
        k: RRF constant damping the weight of top ranks

    Returns:
        Fused results by descending score, exact ties broken by document id
    """
    if not ranked_lists:
        return []

    scores: Dict[str, float] = {}
    documents: Dict[str, Document] = {}

    for ranked in ranked_lists:
        credited = set()
        for rank, scored in enumerate(ranked):
            doc_id = scored.document.id
            if doc_id in credited:
                continue
            credited.add(doc_id)

            scores[doc_id] = scores.get(doc_id, 0.0) + 1.0 / (k + rank)
            documents.setdefault(doc_id, scored.document)

    ordered = sorted(scores.items(), key=lambda item: (-item[1], item[0]))
    fused_results = [
        FusedResult(document=documents[doc_id], fused_score=score)
        for doc_id, score in ordered
    ]

    logger.debug(
        f"RRF fusion completed - "
        f"input_lists: {len(ranked_lists)}, "
        f"unique_docs: {len(fused_results)}, "
        f"k: {k}"
    )

    return fused_results
