"""
Embedding Cache

Serves document embeddings from the file store and generates the missing
ones through the embedding provider in bounded batches, processed by a
bounded pool of concurrent workers.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from tqdm import tqdm

from ..config.settings import CacheKeyStrategy, EmbeddingProviderType, VaultSearchSettings
from ..corpus_operations.models import Document
from ..search_operations.core.search_ops_exceptions import EmbeddingGenerationError
from ..search_operations.providers.embedding import EmbeddingProvider
from ..utils.rate_limiter import TokenBucketRateLimiter
from ..vault_search_exceptions import CacheCorruptionError
from .storage import EmbeddingVector, FileEmbeddingStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_BATCH_SIZE = 99


@dataclass
class CacheStats:
    """Counters accumulated over the lifetime of a cache instance."""
    hits: int = 0
    misses: int = 0
    corrupt_records: int = 0
    batches: int = 0
    write_failures: int = 0

    def to_dict(self) -> dict:
        total = self.hits + self.misses
        return {
            "hits": self.hits,
            "misses": self.misses,
            "hit_rate": round(self.hits / total, 3) if total else 0.0,
            "corrupt_records": self.corrupt_records,
            "batches": self.batches,
            "write_failures": self.write_failures,
        }


class EmbeddingCache:
    """
    Persistent embedding cache keyed by (model_key, record key).

    Cache misses are grouped into batches of at most max_batch_size and each
    batch is one provider request. At most max_concurrent_batches requests
    are in flight. Every vector of a batch is written to disk before any of
    them is returned.

    A failing batch cancels the remaining batches and fails the whole call;
    batches that completed before the failure stay persisted.

    Example:
        ```python
        cache = EmbeddingCache(
            storage=FileEmbeddingStore("data/embeddings"),
            provider=provider,
            model_key="google-text-embedding-004",
        )
        vectors = await cache.get_or_create_embeddings(documents)
        ```
    """

    def __init__(
        self,
        storage: FileEmbeddingStore,
        provider: EmbeddingProvider,
        model_key: str,
        key_strategy: CacheKeyStrategy = CacheKeyStrategy.CONTENT,
        max_batch_size: int = DEFAULT_MAX_BATCH_SIZE,
        max_concurrent_batches: int = 4,
        rate_limiter: Optional[TokenBucketRateLimiter] = None,
        show_progress: bool = False
    ):
        """
        Initialize the embedding cache.

        Args:
            storage: Record store
            provider: Provider used for cache misses
            model_key: Identifier of the embedding model the records belong to
            key_strategy: Key records by content hash or by document id
            max_batch_size: Maximum texts per provider request
            max_concurrent_batches: Maximum provider requests in flight
            rate_limiter: Optional request pacing for the provider
            show_progress: Show a progress bar over batches
        """
        if max_batch_size <= 0:
            raise ValueError(f"max_batch_size must be positive, got {max_batch_size}")
        if max_concurrent_batches <= 0:
            raise ValueError(f"max_concurrent_batches must be positive, got {max_concurrent_batches}")

        self.storage = storage
        self.provider = provider
        self.model_key = model_key
        self.key_strategy = CacheKeyStrategy(key_strategy)
        self.max_batch_size = max_batch_size
        self.max_concurrent_batches = max_concurrent_batches
        self.rate_limiter = rate_limiter
        self.show_progress = show_progress
        self._stats = CacheStats()

        logger.info(
            f"EmbeddingCache initialized - dir: {storage.cache_dir}, "
            f"model_key: {model_key}, key_strategy: {self.key_strategy.value}, "
            f"batch_size: {max_batch_size}, concurrency: {max_concurrent_batches}"
        )

    @classmethod
    def from_settings(
        cls,
        settings: VaultSearchSettings,
        provider: EmbeddingProvider
    ) -> "EmbeddingCache":
        """
        Build the cache from settings.

        Records of the offline hash provider are keyed by its own model name so
        they never mix with records of the remote model.
        """
        model_key = settings.cache.model_key
        if settings.embedding.provider != EmbeddingProviderType.GEMINI:
            model_key = f"{provider.get_model_name()}-{provider.get_dimension()}"

        rate_limiter = None
        if settings.embedding.requests_per_second > 0:
            rate_limiter = TokenBucketRateLimiter(rate=settings.embedding.requests_per_second)

        return cls(
            storage=FileEmbeddingStore(settings.cache.cache_dir),
            provider=provider,
            model_key=model_key,
            key_strategy=settings.cache.key_strategy,
            max_batch_size=settings.embedding.max_batch_size,
            max_concurrent_batches=settings.embedding.max_concurrent_batches,
            rate_limiter=rate_limiter,
            show_progress=settings.cache.show_progress,
        )

    def record_key(self, document: Document) -> str:
        if self.key_strategy == CacheKeyStrategy.CONTENT:
            return document.content_hash
        return document.id

    def _read_cached(self, document: Document) -> Optional[EmbeddingVector]:
        try:
            cached = self.storage.read(self.model_key, self.record_key(document))
        except CacheCorruptionError as e:
            self._stats.corrupt_records += 1
            logger.warning(f"Regenerating corrupt cache record for {document.source_path}: {e}")
            return None

        if cached is None:
            return None
        return EmbeddingVector(document_id=document.id, model_key=self.model_key, vector=cached.vector)

    def _scan(self, documents: List[Document]) -> Tuple[Dict[str, EmbeddingVector], List[Document]]:
        results: Dict[str, EmbeddingVector] = {}
        misses: List[Document] = []
        for document in documents:
            cached = self._read_cached(document)
            if cached is not None:
                results[document.id] = cached
            else:
                misses.append(document)
        return results, misses

    async def get_or_create_embeddings(
        self,
        documents: Sequence[Document]
    ) -> Dict[str, EmbeddingVector]:
        """
        Return an embedding for every document, generating the missing ones.

        Args:
            documents: Documents to embed

        Returns:
            Mapping of document id to EmbeddingVector

        Raises:
            EmbeddingGenerationError: If any provider batch fails
        """
        unique: Dict[str, Document] = {}
        for document in documents:
            unique.setdefault(document.id, document)

        # record reads are blocking file I/O
        results, misses = await asyncio.to_thread(self._scan, list(unique.values()))

        self._stats.hits += len(results)
        self._stats.misses += len(misses)

        if misses:
            batches = [
                misses[i:i + self.max_batch_size]
                for i in range(0, len(misses), self.max_batch_size)
            ]
            logger.info(
                f"Generating embeddings for {len(misses)} documents "
                f"in {len(batches)} batches ({len(results)} cached)"
            )
            await self._run_batches(batches, results)
        else:
            logger.debug(f"All {len(results)} embeddings served from cache")

        return results

    async def _run_batches(
        self,
        batches: List[List[Document]],
        results: Dict[str, EmbeddingVector]
    ) -> None:
        semaphore = asyncio.Semaphore(self.max_concurrent_batches)
        progress = tqdm(
            total=len(batches),
            desc="Embedding batches",
            unit="batch",
            disable=not self.show_progress,
        )

        async def worker(index: int, batch: List[Document]) -> None:
            async with semaphore:
                if self.rate_limiter:
                    await self.rate_limiter.acquire()
                logger.debug(f"Processing batch {index + 1}/{len(batches)} ({len(batch)} documents)")
                vectors = await self._embed_batch(batch)

                generated = [
                    EmbeddingVector(document_id=document.id, model_key=self.model_key, vector=vector)
                    for document, vector in zip(batch, vectors)
                ]
                await asyncio.to_thread(self._persist_batch, batch, generated)
                for embedding in generated:
                    results[embedding.document_id] = embedding

                self._stats.batches += 1
                progress.update(1)

        tasks = [
            asyncio.create_task(worker(index, batch))
            for index, batch in enumerate(batches)
        ]
        try:
            await asyncio.gather(*tasks)
        except (Exception, asyncio.CancelledError):
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        finally:
            progress.close()

    async def _embed_batch(self, batch: List[Document]) -> List[List[float]]:
        try:
            result = await self.provider.generate_embeddings([document.search_text for document in batch])
        except EmbeddingGenerationError:
            raise
        except Exception as e:
            raise EmbeddingGenerationError(f"Embedding provider request failed: {e}") from e

        if len(result.embeddings) != len(batch):
            raise EmbeddingGenerationError(
                f"Embedding provider returned {len(result.embeddings)} vectors "
                f"for a batch of {len(batch)}"
            )
        for vector in result.embeddings:
            if not vector:
                raise EmbeddingGenerationError("Embedding provider returned an empty vector")
        return [list(vector) for vector in result.embeddings]

    def _persist_batch(self, batch: List[Document], generated: List[EmbeddingVector]) -> None:
        for document, embedding in zip(batch, generated):
            self._persist(document, embedding)

    def _persist(self, document: Document, embedding: EmbeddingVector) -> None:
        """Write a generated vector; a failed write is logged and the vector still served."""
        try:
            self.storage.write(embedding, self.record_key(document), content_hash=document.content_hash)
        except OSError as e:
            self._stats.write_failures += 1
            logger.error(f"Failed to persist embedding for {document.source_path}: {e}")

    def get_stats(self) -> dict:
        return self._stats.to_dict()
