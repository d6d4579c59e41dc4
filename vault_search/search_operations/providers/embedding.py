"""
Embedding Provider Interface

This module defines the contract every embedding provider implements and the
result container it returns, plus a deterministic offline provider.
"""

import hashlib
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List

import numpy as np

from ...utils.text import tokenize


@dataclass
class EmbeddingResult:
    """
    Result of an embedding request.

    Attributes:
        embeddings: One vector per input text, in input order
        dimension: Dimension of each vector
        model_name: Model that produced the vectors
        processing_time_ms: Wall time of the request
    """
    embeddings: List[List[float]]
    dimension: int
    model_name: str
    processing_time_ms: float = 0.0

    @property
    def embedding(self) -> List[float]:
        """The single vector of a one-text request."""
        return self.embeddings[0]


class EmbeddingProvider(ABC):
    """
    Abstract embedding provider.

    Implementations must preserve input order and return exactly one vector
    per input text, raising EmbeddingGenerationError on any failure.
    """

    @abstractmethod
    async def generate_embedding(self, text: str) -> EmbeddingResult:
        """Embed a single query text."""
        pass

    @abstractmethod
    async def generate_embeddings(self, texts: List[str]) -> EmbeddingResult:
        """Embed a batch of document texts in one request."""
        pass

    @abstractmethod
    def get_dimension(self) -> int:
        pass

    @abstractmethod
    def get_model_name(self) -> str:
        pass


class HashEmbeddingProvider(EmbeddingProvider):
    """
    Deterministic feature-hashing provider for development and tests.

    Each word token is hashed into one of `dimension` buckets, so texts that
    share words get positive cosine similarity. No network access.
    """

    def __init__(self, dimension: int = 256, model_name: str = "hash-bow"):
        if dimension <= 0:
            raise ValueError(f"dimension must be positive, got {dimension}")
        self._dimension = dimension
        self._model_name = model_name

    def _embed(self, text: str) -> List[float]:
        vector = np.zeros(self._dimension, dtype=np.float64)
        for token in tokenize(text):
            digest = hashlib.sha256(token.encode("utf-8")).digest()
            bucket = int.from_bytes(digest[:4], "big") % self._dimension
            sign = 1.0 if digest[4] % 2 == 0 else -1.0
            vector[bucket] += sign
        norm = np.linalg.norm(vector)
        if norm > 0:
            vector /= norm
        return vector.tolist()

    async def generate_embedding(self, text: str) -> EmbeddingResult:
        return await self.generate_embeddings([text])

    async def generate_embeddings(self, texts: List[str]) -> EmbeddingResult:
        start_time = time.time()
        embeddings = [self._embed(text) for text in texts]
        return EmbeddingResult(
            embeddings=embeddings,
            dimension=self._dimension,
            model_name=self._model_name,
            processing_time_ms=(time.time() - start_time) * 1000,
        )

    def get_dimension(self) -> int:
        return self._dimension

    def get_model_name(self) -> str:
        return self._model_name
