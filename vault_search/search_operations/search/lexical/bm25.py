"""
BM25 Lexical Scorer

This module ranks a document set against a list of query keywords with the
Okapi BM25 probabilistic ranking function: saturating term frequency,
corpus-wide inverse document frequency, and document length normalization
against the average document length.
"""

import math
import logging
from collections import Counter
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Sequence

from ...core.base import RankedList, ScoredDocument, sort_ranked
from ....corpus_operations.models import Document
from ....utils.text import DEFAULT_STOPWORDS, tokenize

logger = logging.getLogger(__name__)


@dataclass
class BM25Config:
    """
    Configuration for BM25 scoring.

    Attributes:
        k1: Term frequency saturation parameter (typical range: 1.2-2.0)
        b: Length normalization parameter (0 = no normalization, 1 = full normalization)
        min_term_length: Minimum length of tokens to consider
        max_term_length: Maximum length of tokens to consider
        enable_stopwords: Whether to filter stopwords from documents and keywords
        custom_stopwords: Optional custom stopword set
    """
    k1: float = 1.2
    b: float = 0.75
    min_term_length: int = 1
    max_term_length: int = 50
    enable_stopwords: bool = False
    custom_stopwords: Optional[FrozenSet[str]] = None

    def __post_init__(self):
        """Validate BM25 configuration parameters."""
        if self.k1 <= 0:
            raise ValueError(f"k1 must be positive, got {self.k1}")
        if not 0 <= self.b <= 1:
            raise ValueError(f"b must be between 0 and 1, got {self.b}")
        if self.min_term_length < 1:
            raise ValueError(f"min_term_length must be at least 1, got {self.min_term_length}")
        if self.max_term_length < self.min_term_length:
            raise ValueError(
                f"max_term_length ({self.max_term_length}) must be >= "
                f"min_term_length ({self.min_term_length})"
            )


class BM25Scorer:
    """
    Scores documents against query keywords with BM25.

    Statistics (document frequency, average length) are computed over the
    document set passed to each score() call, so the scorer holds no state
    between queries.
    """

    def __init__(self, config: Optional[BM25Config] = None):
        """
        Initialize BM25 scorer.

        Args:
            config: BM25 configuration (uses defaults if not provided)
        """
        self.config = config or BM25Config()
        if self.config.enable_stopwords:
            self.stopwords = self.config.custom_stopwords or DEFAULT_STOPWORDS
        else:
            self.stopwords = None

    def _tokenize(self, text: str) -> List[str]:
        return tokenize(
            text,
            self.config.min_term_length,
            self.config.max_term_length,
            self.stopwords
        )

    def _calculate_idf(self, doc_freq: int, total_docs: int) -> float:
        """
        Smoothed IDF, never negative even for terms present in every document.
        """
        return math.log(1 + (total_docs - doc_freq + 0.5) / (doc_freq + 0.5))

    def _calculate_term_score(
        self,
        term_freq: int,
        doc_length: int,
        avg_doc_length: float,
        idf: float
    ) -> float:
        if term_freq == 0:
            return 0.0

        if avg_doc_length > 0:
            normalized_length = doc_length / avg_doc_length
        else:
            normalized_length = 1.0

        numerator = term_freq * (self.config.k1 + 1)
        denominator = (
            term_freq +
            self.config.k1 * (1 - self.config.b + self.config.b * normalized_length)
        )
        return idf * numerator / denominator

    def score(
        self,
        keywords: Sequence[str],
        documents: Sequence[Document]
    ) -> RankedList:
        """
        Rank documents by their summed BM25 score over the keywords.

        Each keyword is tokenized like the documents; a multi-word keyword
        contributes the sum of its terms. Documents matching nothing keep a
        score of exactly 0 and stay in the list.

        Args:
            keywords: Query keywords
            documents: Documents to rank

        Returns:
            Ranked list, highest score first, ties in input order
        """
        if not documents:
            return []

        term_freqs: List[Counter] = []
        doc_lengths: List[int] = []
        for document in documents:
            tokens = self._tokenize(document.search_text)
            term_freqs.append(Counter(tokens))
            doc_lengths.append(len(tokens))

        total_docs = len(documents)
        avg_doc_length = sum(doc_lengths) / total_docs

        query_terms: List[str] = []
        for keyword in keywords:
            query_terms.extend(self._tokenize(keyword))

        doc_freq: Dict[str, int] = {
            term: sum(1 for freqs in term_freqs if term in freqs)
            for term in set(query_terms)
        }
        idf = {
            term: self._calculate_idf(freq, total_docs)
            for term, freq in doc_freq.items()
        }

        scored = []
        for document, freqs, length in zip(documents, term_freqs, doc_lengths):
            total = 0.0
            for term in query_terms:
                total += self._calculate_term_score(freqs.get(term, 0), length, avg_doc_length, idf[term])
            scored.append(ScoredDocument(document=document, score=total))

        ranked = sort_ranked(scored)

        logger.debug(
            f"BM25 scored {total_docs} documents - "
            f"terms: {len(query_terms)}, "
            f"matches: {sum(1 for s in scored if s.score > 0)}, "
            f"avg_doc_length: {avg_doc_length:.2f}"
        )
        return ranked


def score_lexical(
    keywords: Sequence[str],
    documents: Sequence[Document],
    config: Optional[BM25Config] = None
) -> RankedList:
    """
    Rank documents against keywords with BM25.

    Args:
        keywords: Query keywords
        documents: Documents to rank
        config: BM25 configuration (uses defaults if not provided)

    Returns:
        Ranked list, highest score first
    """
    return BM25Scorer(config).score(keywords, documents)
