"""Tests for the semantic scorer."""

import numpy as np
import pytest

from vault_search.embedding_cache import EmbeddingCache, FileEmbeddingStore
from vault_search.search_operations.core.search_ops_exceptions import EmbeddingProviderError
from vault_search.search_operations.search.semantic import SemanticScorer, cosine_similarity

from conftest import CountingEmbeddingProvider


VECTORS = {
    "query": [1.0, 0.0],
    "A apple banana": [1.0, 0.0],
    "B banana cherry": [0.6, 0.8],
    "C date": [0.0, 1.0],
}


def _scorer(tmp_path, provider):
    cache = EmbeddingCache(FileEmbeddingStore(tmp_path / "embeddings"), provider, model_key="test")
    return SemanticScorer(provider, cache)


class TestCosineSimilarity:

    def test_identical_and_orthogonal(self):
        query = np.array([1.0, 0.0, 0.0])

        assert cosine_similarity(query, [2.0, 0.0, 0.0]) == pytest.approx(1.0)
        assert cosine_similarity(query, [0.0, 3.0, 0.0]) == pytest.approx(0.0)

    def test_opposite_vectors_not_clamped(self):
        assert cosine_similarity(np.array([1.0, 1.0]), [-1.0, -1.0]) == pytest.approx(-1.0)

    def test_zero_norm_scores_zero(self):
        assert cosine_similarity(np.array([0.0, 0.0]), [1.0, 2.0]) == 0.0
        assert cosine_similarity(np.array([1.0, 2.0]), [0.0, 0.0]) == 0.0

    def test_dimension_mismatch(self):
        with pytest.raises(ValueError):
            cosine_similarity(np.array([1.0, 0.0]), [1.0, 0.0, 0.0])


class TestSemanticScorer:

    @pytest.mark.asyncio
    async def test_ranks_by_similarity(self, tmp_path, documents):
        provider = CountingEmbeddingProvider(vectors=VECTORS, dimension=2)

        ranked = await _scorer(tmp_path, provider).score("query", documents)

        assert [scored.document.title for scored in ranked] == ["A", "B", "C"]
        assert [scored.score for scored in ranked] == pytest.approx([1.0, 0.6, 0.0])

    @pytest.mark.asyncio
    async def test_ties_keep_input_order(self, tmp_path, documents):
        vectors = {text: [1.0, 0.0] for text in VECTORS}
        provider = CountingEmbeddingProvider(vectors=vectors, dimension=2)

        ranked = await _scorer(tmp_path, provider).score("query", list(reversed(documents)))

        assert [scored.document.title for scored in ranked] == ["C", "B", "A"]

    @pytest.mark.asyncio
    async def test_query_embedding_never_cached(self, tmp_path, documents):
        provider = CountingEmbeddingProvider(vectors=VECTORS, dimension=2)
        scorer = _scorer(tmp_path, provider)

        await scorer.score("query", documents)
        await scorer.score("query", documents)

        assert provider.query_calls == ["query", "query"]
        assert len(provider.batch_calls) == 1

    @pytest.mark.asyncio
    async def test_empty_documents_skip_provider(self, tmp_path, provider):
        ranked = await _scorer(tmp_path, provider).score("query", [])

        assert ranked == []
        assert provider.query_calls == []
        assert provider.batch_calls == []

    @pytest.mark.asyncio
    async def test_query_failure_raises_provider_error(self, tmp_path, documents):
        provider = CountingEmbeddingProvider(fail_query=True)

        with pytest.raises(EmbeddingProviderError):
            await _scorer(tmp_path, provider).score("query", documents)

    @pytest.mark.asyncio
    async def test_batch_failure_raises_provider_error(self, tmp_path, documents):
        provider = CountingEmbeddingProvider(fail_on_batch=1)

        with pytest.raises(EmbeddingProviderError):
            await _scorer(tmp_path, provider).score("query", documents)

    @pytest.mark.asyncio
    async def test_dimension_mismatch_raises_provider_error(self, tmp_path, documents):
        vectors = dict(VECTORS, query=[1.0, 0.0, 0.0])
        provider = CountingEmbeddingProvider(vectors=vectors, dimension=2)

        with pytest.raises(EmbeddingProviderError):
            await _scorer(tmp_path, provider).score("query", documents)
