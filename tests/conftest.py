"""
Shared fixtures: corpora written to tmp_path and counting fake embedding
providers, so no test touches the network.
"""

import asyncio
import sys
from pathlib import Path
from typing import Dict, List, Optional

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from vault_search.corpus_operations.models import Document, document_id_for_path
from vault_search.search_operations.core.search_ops_exceptions import EmbeddingGenerationError
from vault_search.search_operations.providers.embedding import (
    EmbeddingProvider,
    EmbeddingResult,
    HashEmbeddingProvider,
)


def write_file(root: Path, relative_path: str, content: str) -> Path:
    path = root / relative_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def make_document(relative_path: str, body: str, title: Optional[str] = None) -> Document:
    return Document(
        id=document_id_for_path(relative_path),
        title=title if title is not None else Path(relative_path).stem,
        body=body,
        timestamp="2024-01-01T00:00:00.000Z",
        source_path=relative_path,
    )


class CountingEmbeddingProvider(EmbeddingProvider):
    """
    Deterministic provider that records every request.

    Vectors come from a HashEmbeddingProvider unless a fixed mapping of text
    to vector is given. fail_on_batch makes the n-th batch call (1-based)
    raise; delay makes every call sleep first.
    """

    def __init__(
        self,
        vectors: Optional[Dict[str, List[float]]] = None,
        dimension: int = 64,
        fail_on_batch: Optional[int] = None,
        fail_query: bool = False,
        delay: float = 0.0
    ):
        self._hash = HashEmbeddingProvider(dimension=dimension)
        self.vectors = vectors or {}
        self.dimension = dimension
        self.fail_on_batch = fail_on_batch
        self.fail_query = fail_query
        self.delay = delay
        self.batch_calls: List[List[str]] = []
        self.query_calls: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    def _vector(self, text: str) -> List[float]:
        if text in self.vectors:
            return list(self.vectors[text])
        return self._hash._embed(text)

    async def generate_embedding(self, text: str) -> EmbeddingResult:
        self.query_calls.append(text)
        if self.fail_query:
            raise EmbeddingGenerationError("query embedding unavailable")
        vector = self._vector(text)
        return EmbeddingResult(embeddings=[vector], dimension=len(vector), model_name="counting")

    async def generate_embeddings(self, texts: List[str]) -> EmbeddingResult:
        self.batch_calls.append(list(texts))
        call_number = len(self.batch_calls)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if self.fail_on_batch is not None and call_number == self.fail_on_batch:
                raise EmbeddingGenerationError(f"batch {call_number} rejected")
            vectors = [self._vector(text) for text in texts]
        finally:
            self.in_flight -= 1
        return EmbeddingResult(embeddings=vectors, dimension=self.dimension, model_name="counting")

    def get_dimension(self) -> int:
        return self.dimension

    def get_model_name(self) -> str:
        return "counting"


@pytest.fixture
def vault(tmp_path):
    """Three notes plus a non-document file in a subfolder."""
    root = tmp_path / "vault"
    write_file(root, "apple.md", "apple banana")
    write_file(root, "banana.md", "banana cherry")
    write_file(root, "date.md", "date")
    write_file(root, "notes/readme.txt", "not a document")
    return root


@pytest.fixture
def documents():
    return [
        make_document("a.md", "apple banana", title="A"),
        make_document("b.md", "banana cherry", title="B"),
        make_document("c.md", "date", title="C"),
    ]


@pytest.fixture
def provider():
    return CountingEmbeddingProvider()
