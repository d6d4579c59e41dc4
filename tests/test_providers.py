"""Tests for keyword extractors and embedding providers, with the Gemini SDK mocked."""

import warnings
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import numpy as np
import pytest
from google.api_core import exceptions as google_exceptions

from vault_search.search_operations.core.search_ops_exceptions import (
    EmbeddingGenerationError,
    KeywordExtractionError,
)
from vault_search.search_operations.providers import (
    GeminiEmbeddingProvider,
    GeminiKeywordExtractor,
    HashEmbeddingProvider,
    SimpleKeywordExtractor,
    TaskType,
)

KEYWORDS_MODULE = "vault_search.search_operations.providers.keywords.genai"
EMBEDDING_MODULE = "vault_search.search_operations.providers.gemini_embedding.genai"


class TestSimpleKeywordExtractor:

    @pytest.mark.asyncio
    async def test_stopwords_removed(self):
        keywords = await SimpleKeywordExtractor().extract_keywords("the quick brown fox and the lazy dog")

        assert keywords == ["quick", "brown", "fox", "lazy", "dog"]

    @pytest.mark.asyncio
    async def test_duplicates_removed_case_insensitively(self):
        assert await SimpleKeywordExtractor().extract_keywords("Fox fox FOX den") == ["fox", "den"]

    @pytest.mark.asyncio
    async def test_limit(self):
        keywords = await SimpleKeywordExtractor(max_keywords=2).extract_keywords("one two three four")

        assert keywords == ["one", "two"]

    @pytest.mark.asyncio
    async def test_only_stopwords_kept(self):
        assert await SimpleKeywordExtractor().extract_keywords("what is the") == ["what", "is", "the"]

    @pytest.mark.asyncio
    async def test_punctuation_only(self):
        assert await SimpleKeywordExtractor().extract_keywords("?!") == []


class TestGeminiKeywordExtractor:

    def _extractor(self, genai_mock, response_text=None, error=None):
        model = genai_mock.GenerativeModel.return_value
        if error is not None:
            model.generate_content.side_effect = error
        else:
            model.generate_content.return_value = SimpleNamespace(text=response_text)
        return GeminiKeywordExtractor(api_key="key", max_keywords=3)

    @pytest.mark.asyncio
    async def test_parses_json_keywords(self):
        with patch(KEYWORDS_MODULE) as genai_mock:
            extractor = self._extractor(genai_mock, '{"keywords": ["vector", "Vector", "database", "index", "ann"]}')
            keywords = await extractor.extract_keywords("vector databases")

        assert keywords == ["vector", "database", "index"]
        genai_mock.configure.assert_called_once_with(api_key="key")

    @pytest.mark.asyncio
    async def test_malformed_response(self):
        with patch(KEYWORDS_MODULE) as genai_mock:
            extractor = self._extractor(genai_mock, "not json")

            with pytest.raises(KeywordExtractionError):
                await extractor.extract_keywords("query")

    @pytest.mark.asyncio
    async def test_empty_keyword_list(self):
        with patch(KEYWORDS_MODULE) as genai_mock:
            extractor = self._extractor(genai_mock, '{"keywords": []}')

            with pytest.raises(KeywordExtractionError):
                await extractor.extract_keywords("query")

    @pytest.mark.asyncio
    async def test_api_error(self):
        with patch(KEYWORDS_MODULE) as genai_mock:
            extractor = self._extractor(genai_mock, error=RuntimeError("quota"))

            with pytest.raises(KeywordExtractionError):
                await extractor.extract_keywords("query")

    def test_requires_api_key(self):
        with patch(KEYWORDS_MODULE):
            with pytest.raises(ValueError):
                GeminiKeywordExtractor(api_key=None)


class TestHashEmbeddingProvider:

    @pytest.mark.asyncio
    async def test_deterministic_unit_vectors(self):
        provider = HashEmbeddingProvider(dimension=32)

        first = await provider.generate_embeddings(["alpha beta", "gamma"])
        second = await provider.generate_embedding("alpha beta")

        assert first.embeddings[0] == second.embedding
        assert len(first.embeddings) == 2
        assert np.linalg.norm(first.embeddings[1]) == pytest.approx(1.0)

    @pytest.mark.asyncio
    async def test_empty_text_is_zero_vector(self):
        result = await HashEmbeddingProvider(dimension=8).generate_embedding("")

        assert result.embedding == [0.0] * 8

    def test_invalid_dimension(self):
        with pytest.raises(ValueError):
            HashEmbeddingProvider(dimension=0)


class TestGeminiEmbeddingProvider:

    def _provider(self, **kwargs):
        return GeminiEmbeddingProvider(api_key="key", retry_initial_delay=0.001, **kwargs)

    @pytest.mark.asyncio
    async def test_batch_uses_document_task_type(self):
        with patch(EMBEDDING_MODULE) as genai_mock:
            genai_mock.embed_content.return_value = {"embedding": [[0.1, 0.2], [0.3, 0.4]]}
            result = await self._provider().generate_embeddings(["a", "b"])

        assert result.embeddings == [[0.1, 0.2], [0.3, 0.4]]
        assert result.dimension == 2
        kwargs = genai_mock.embed_content.call_args.kwargs
        assert kwargs["task_type"] == TaskType.RETRIEVAL_DOCUMENT.value
        assert kwargs["model"] == "models/text-embedding-004"
        assert kwargs["content"] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_query_uses_query_task_type(self):
        with patch(EMBEDDING_MODULE) as genai_mock:
            genai_mock.embed_content.return_value = {"embedding": [0.5, 0.5]}
            result = await self._provider(output_dimensionality=2).generate_embedding("q")

        assert result.embedding == [0.5, 0.5]
        kwargs = genai_mock.embed_content.call_args.kwargs
        assert kwargs["task_type"] == TaskType.RETRIEVAL_QUERY.value
        assert kwargs["output_dimensionality"] == 2

    @pytest.mark.asyncio
    async def test_transient_errors_retried(self):
        with patch(EMBEDDING_MODULE) as genai_mock:
            genai_mock.embed_content.side_effect = [
                google_exceptions.ResourceExhausted("quota"),
                {"embedding": [[1.0]]},
            ]
            result = await self._provider().generate_embeddings(["a"])

        assert result.embeddings == [[1.0]]
        assert genai_mock.embed_content.call_count == 2

    @pytest.mark.asyncio
    async def test_retry_backoff_emits_no_deprecation_warning(self):
        with patch(EMBEDDING_MODULE) as genai_mock:
            genai_mock.embed_content.side_effect = [
                google_exceptions.ServiceUnavailable("down"),
                {"embedding": [[1.0]]},
            ]
            with warnings.catch_warnings():
                warnings.simplefilter("error", DeprecationWarning)
                result = await self._provider().generate_embeddings(["a"])

        assert result.embeddings == [[1.0]]

    @pytest.mark.asyncio
    async def test_retries_exhausted(self):
        with patch(EMBEDDING_MODULE) as genai_mock:
            genai_mock.embed_content.side_effect = google_exceptions.ServiceUnavailable("down")

            with pytest.raises(EmbeddingGenerationError):
                await self._provider(max_retries=2).generate_embeddings(["a"])

        assert genai_mock.embed_content.call_count == 3

    @pytest.mark.asyncio
    async def test_permanent_errors_not_retried(self):
        with patch(EMBEDDING_MODULE) as genai_mock:
            genai_mock.embed_content.side_effect = google_exceptions.InvalidArgument("bad request")

            with pytest.raises(EmbeddingGenerationError):
                await self._provider().generate_embeddings(["a"])

        assert genai_mock.embed_content.call_count == 1

    @pytest.mark.asyncio
    async def test_vector_count_mismatch(self):
        with patch(EMBEDDING_MODULE) as genai_mock:
            genai_mock.embed_content.return_value = {"embedding": [[1.0]]}

            with pytest.raises(EmbeddingGenerationError):
                await self._provider().generate_embeddings(["a", "b"])

    @pytest.mark.asyncio
    async def test_empty_batch_makes_no_request(self):
        with patch(EMBEDDING_MODULE) as genai_mock:
            result = await self._provider().generate_embeddings([])

        assert result.embeddings == []
        genai_mock.embed_content.assert_not_called()

    def test_requires_api_key(self):
        with patch(EMBEDDING_MODULE):
            with pytest.raises(ValueError):
                GeminiEmbeddingProvider(api_key=None)

    def test_dimension(self):
        with patch(EMBEDDING_MODULE):
            assert self._provider().get_dimension() == 768
            assert self._provider(output_dimensionality=256).get_dimension() == 256
