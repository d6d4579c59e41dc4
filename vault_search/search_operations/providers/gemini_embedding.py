"""
Gemini Embedding Provider

This module provides a concrete implementation of the EmbeddingProvider
interface for Google's Gemini embedding models.
"""

import asyncio
import logging
import time
from enum import Enum
from typing import List, Optional

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

from .embedding import EmbeddingProvider, EmbeddingResult
from ..core.search_ops_exceptions import EmbeddingGenerationError

logger = logging.getLogger(__name__)

# Errors worth retrying: throttling and temporary server-side failures
TRANSIENT_ERRORS = (
    google_exceptions.ResourceExhausted,
    google_exceptions.ServiceUnavailable,
    google_exceptions.DeadlineExceeded,
    google_exceptions.InternalServerError,
)

MODEL_DIMENSIONS = {
    "models/text-embedding-004": 768,
    "models/embedding-001": 768,
    "models/gemini-embedding-001": 3072,
}


class TaskType(str, Enum):
    """Enumeration of supported task types for Gemini embeddings."""
    RETRIEVAL_QUERY = "RETRIEVAL_QUERY"
    RETRIEVAL_DOCUMENT = "RETRIEVAL_DOCUMENT"
    SEMANTIC_SIMILARITY = "SEMANTIC_SIMILARITY"
    CLASSIFICATION = "CLASSIFICATION"
    CLUSTERING = "CLUSTERING"


class GeminiEmbeddingProvider(EmbeddingProvider):
    """
    An implementation of EmbeddingProvider that uses the Gemini API.

    Batch requests embed documents with the RETRIEVAL_DOCUMENT task type and
    single requests embed queries with RETRIEVAL_QUERY. The blocking SDK call
    runs in a worker thread so concurrent batches overlap, and transient API
    errors are retried with exponential backoff.
    """

    def __init__(
        self,
        model_name: str = "models/text-embedding-004",
        document_task_type: TaskType = TaskType.RETRIEVAL_DOCUMENT,
        query_task_type: TaskType = TaskType.RETRIEVAL_QUERY,
        output_dimensionality: Optional[int] = None,
        api_key: Optional[str] = None,
        max_retries: int = 3,
        retry_initial_delay: float = 1.0
    ):
        """
        Initialize the Gemini embedding provider.

        Args:
            model_name: The name of the Gemini embedding model to use.
            document_task_type: Task type for batch (document) requests.
            query_task_type: Task type for single (query) requests.
            output_dimensionality: The desired dimension of the output embeddings.
            api_key: The Gemini API key.
            max_retries: Retries for transient API errors.
            retry_initial_delay: First backoff delay in seconds.
        """
        if not api_key:
            raise ValueError("Gemini API key not provided (set GEMINI_API_KEY).")

        self._model_name = model_name
        self._document_task_type = document_task_type.value
        self._query_task_type = query_task_type.value
        self._output_dimensionality = output_dimensionality
        self._max_retries = max_retries
        self._retry_initial_delay = retry_initial_delay

        genai.configure(api_key=api_key)

    async def _embed(self, texts: List[str], task_type: str) -> List[List[float]]:
        kwargs = {
            "model": self._model_name,
            "content": texts,
            "task_type": task_type,
        }
        if self._output_dimensionality:
            kwargs["output_dimensionality"] = self._output_dimensionality

        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self._max_retries + 1),
            wait=(wait_exponential(multiplier=self._retry_initial_delay, max=30.0)
                  + wait_random(0, self._retry_initial_delay)),
            retry=retry_if_exception_type(TRANSIENT_ERRORS),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        ):
            with attempt:
                result = await asyncio.to_thread(genai.embed_content, **kwargs)

        embeddings = result["embedding"]
        if embeddings and not isinstance(embeddings[0], list):  # Handle single text case
            embeddings = [embeddings]
        return embeddings

    async def generate_embedding(self, text: str) -> EmbeddingResult:
        """
        Generate a query embedding.

        Raises:
            EmbeddingGenerationError: If the embedding generation fails.
        """
        return await self._generate([text], self._query_task_type)

    async def generate_embeddings(self, texts: List[str]) -> EmbeddingResult:
        """
        Generate document embeddings for a batch of texts in one request.

        Raises:
            EmbeddingGenerationError: If the request fails or the response
                does not hold exactly one vector per text.
        """
        return await self._generate(texts, self._document_task_type)

    async def _generate(self, texts: List[str], task_type: str) -> EmbeddingResult:
        if not texts:
            return EmbeddingResult(embeddings=[], dimension=0, model_name=self._model_name)

        start_time = time.time()
        try:
            embeddings = await self._embed(texts, task_type)
        except Exception as e:
            raise EmbeddingGenerationError(f"Gemini embedding generation failed: {e}") from e

        if len(embeddings) != len(texts):
            raise EmbeddingGenerationError(
                f"Gemini returned {len(embeddings)} embeddings for {len(texts)} texts"
            )

        processing_time_ms = (time.time() - start_time) * 1000
        logger.debug(
            f"Gemini embeddings generated - texts: {len(texts)}, "
            f"task: {task_type}, time: {processing_time_ms:.2f}ms"
        )

        return EmbeddingResult(
            embeddings=embeddings,
            dimension=len(embeddings[0]),
            model_name=self._model_name,
            processing_time_ms=processing_time_ms,
        )

    def get_dimension(self) -> int:
        """Configured output dimension, or the model's native dimension."""
        if self._output_dimensionality:
            return self._output_dimensionality
        return MODEL_DIMENSIONS.get(self._model_name, 768)

    def get_model_name(self) -> str:
        """Get the name of the embedding model."""
        return self._model_name
