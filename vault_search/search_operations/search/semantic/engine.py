"""
Semantic Scorer

Ranks documents by cosine similarity between the query embedding and the
document embeddings served by the embedding cache.
"""

import time
import logging
from typing import List, Sequence

import numpy as np

from ....corpus_operations.models import Document
from ....embedding_cache.cache import EmbeddingCache
from ...core.base import RankedList, ScoredDocument, sort_ranked
from ...core.search_ops_exceptions import EmbeddingGenerationError
from ...providers.embedding import EmbeddingProvider

logger = logging.getLogger(__name__)


def cosine_similarity(query_vector: np.ndarray, document_vector: Sequence[float]) -> float:
    """
    Cosine similarity of two vectors; a zero-norm vector scores 0.

    Raises:
        ValueError: If the vectors have different dimensions
    """
    document_array = np.asarray(document_vector, dtype=np.float64)
    if document_array.shape != query_vector.shape:
        raise ValueError(
            f"Dimension mismatch: query {query_vector.shape[0]}, "
            f"document {document_array.shape[0] if document_array.ndim else 0}"
        )

    norm = np.linalg.norm(query_vector) * np.linalg.norm(document_array)
    if norm == 0:
        return 0.0
    return float(np.dot(query_vector, document_array) / norm)


class SemanticScorer:
    """
    Embedding-based relevance scorer.

    Document embeddings come from the cache, the query embedding is generated
    fresh on every call. Scores are raw cosine similarities, not clamped.
    """

    def __init__(self, provider: EmbeddingProvider, cache: EmbeddingCache):
        self.provider = provider
        self.cache = cache

    async def score(self, query: str, documents: List[Document]) -> RankedList:
        """
        Score documents against a query.

        Args:
            query: Natural-language query
            documents: Documents to rank

        Returns:
            Ranked list ordered by descending similarity, ties by input position

        Raises:
            EmbeddingGenerationError: If the provider fails for the query or any
                document batch
        """
        if not documents:
            return []

        start_time = time.time()
        vectors = await self.cache.get_or_create_embeddings(documents)

        try:
            query_result = await self.provider.generate_embedding(query)
        except EmbeddingGenerationError:
            raise
        except Exception as e:
            raise EmbeddingGenerationError(f"Query embedding failed: {e}") from e

        if not query_result.embeddings or not query_result.embedding:
            raise EmbeddingGenerationError("Embedding provider returned no query vector")
        query_vector = np.asarray(query_result.embedding, dtype=np.float64)

        try:
            scored = [
                ScoredDocument(document=document, score=cosine_similarity(query_vector, vectors[document.id].vector))
                for document in documents
            ]
        except ValueError as e:
            raise EmbeddingGenerationError(f"Incompatible embeddings: {e}") from e

        ranked = sort_ranked(scored)
        logger.debug(
            f"Semantic scoring completed - documents: {len(documents)}, "
            f"time: {(time.time() - start_time) * 1000:.2f}ms"
        )
        return ranked
