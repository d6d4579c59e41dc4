"""
Hybrid Search Engine

This module composes the corpus loader, the lexical (keyword + BM25) path and
the semantic (embedding) path into one ranked answer per query, fused with
Reciprocal Rank Fusion, with graceful degradation when one path fails and
per-query metrics.
"""

import time
import asyncio
import hashlib
import logging
from collections.abc import Sequence
from typing import Any, Callable, Dict, List, Optional, Tuple

from .....config.settings import (
    EmbeddingProviderType,
    KeywordExtractorType,
    VaultSearchSettings,
    load_settings,
)
from .....corpus_operations.loader import CorpusLoader
from .....corpus_operations.models import Document
from .....embedding_cache.cache import EmbeddingCache
from .....vault_search_exceptions import ConfigurationError, CorpusLoadError
from ....core.base import FusedResult, RankedList
from ....core.search_ops_exceptions import (
    SearchError,
    HybridSearchError,
    InvalidSearchParametersError,
    SearchTimeoutError,
)
from ....providers.embedding import EmbeddingProvider, HashEmbeddingProvider
from ....providers.gemini_embedding import GeminiEmbeddingProvider
from ....providers.keywords import (
    GeminiKeywordExtractor,
    KeywordExtractor,
    SimpleKeywordExtractor,
)
from ...lexical.bm25 import BM25Scorer
from ...semantic.engine import SemanticScorer

from .fusion import fuse_results_rrf
from ..resilience.fallback import LEXICAL, SEMANTIC, handle_fallback
from ..utils.metrics import HybridSearchMetrics, SearchStatus
from ..utils.config import HybridSearchConfig

logger = logging.getLogger(__name__)


class HybridSearchResult(Sequence):
    """
    Ranked answer of a hybrid search.

    Behaves as a read-only sequence of FusedResult, rank 0 first, and carries
    the outcome of the query alongside the results.

    Attributes:
        query: The query as received
        status: SUCCESS, or DEGRADED when one path failed
        errors: Path name to the exception that failed it
        keywords: Keywords the lexical path ranked with (empty if it did not run)
        metrics: Metrics recorded for the query
    """

    def __init__(
        self,
        results: List[FusedResult],
        query: str,
        status: SearchStatus = SearchStatus.SUCCESS,
        errors: Optional[Dict[str, BaseException]] = None,
        keywords: Optional[List[str]] = None,
        metrics: Optional[HybridSearchMetrics] = None
    ):
        self._results = tuple(results)
        self.query = query
        self.status = status
        self.errors = dict(errors or {})
        self.keywords = list(keywords or [])
        self.metrics = metrics

    def __getitem__(self, index):
        return self._results[index]

    def __len__(self) -> int:
        return len(self._results)

    @property
    def degraded(self) -> bool:
        return self.status == SearchStatus.DEGRADED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "query": self.query,
            "status": self.status.value,
            "errors": {path: str(error) for path, error in self.errors.items()},
            "keywords": self.keywords,
            "results": [result.to_dict() for result in self._results],
        }

    def __repr__(self) -> str:
        return f"HybridSearchResult(status={self.status.value}, results={len(self._results)})"


class HybridSearch:
    """
    Hybrid lexical + semantic search over a document corpus.

    Features:
    - Corpus snapshot loaded per query in a worker thread
    - Lexical and semantic paths run concurrently
    - Reciprocal Rank Fusion over truncated candidate lists
    - Graceful degradation to a single path
    - Whole-query timeout with cancellation of in-flight work
    - Per-query metrics history and optional metrics callback

    Example:
        ```python
        search = create_hybrid_search(settings)
        result = await search.search("notes about vector databases")
        for hit in result:
            print(hit.document.title, hit.fused_score)
        ```
    """

    def __init__(
        self,
        corpus_loader: CorpusLoader,
        keyword_extractor: Optional[KeywordExtractor] = None,
        semantic_scorer: Optional[SemanticScorer] = None,
        config: Optional[HybridSearchConfig] = None,
        metrics_callback: Optional[Callable[[HybridSearchMetrics], None]] = None,
        enable_metrics: bool = True,
        max_metrics_history: int = 1000
    ):
        """
        Initialize hybrid search.

        Args:
            corpus_loader: Loader producing the document snapshot of each query
            keyword_extractor: Query keyword extractor for the lexical path
            semantic_scorer: Scorer for the semantic path
            config: Hybrid search configuration (uses defaults if not provided)
            metrics_callback: Optional callback for metrics reporting
            enable_metrics: Whether per-query metrics are recorded
            max_metrics_history: Maximum metrics history to retain
        """
        self.config = config or HybridSearchConfig()
        if self.config.enable_lexical and keyword_extractor is None:
            raise ValueError("keyword_extractor is required when the lexical path is enabled")
        if self.config.enable_semantic and semantic_scorer is None:
            raise ValueError("semantic_scorer is required when the semantic path is enabled")

        self.corpus_loader = corpus_loader
        self.keyword_extractor = keyword_extractor
        self.semantic_scorer = semantic_scorer
        self.bm25_scorer = BM25Scorer(self.config.bm25)
        self.metrics_callback = metrics_callback
        self.enable_metrics = enable_metrics
        self.max_metrics_history = max_metrics_history

        self._metrics_history: List[HybridSearchMetrics] = []
        self._lock = asyncio.Lock()

        logger.info(
            f"HybridSearch initialized - "
            f"mode: {self.config.search_mode.value}, "
            f"top_k: {self.config.top_k}, "
            f"candidate_pool: {self.config.candidate_pool_size}, "
            f"fallback: {self.config.fallback_enabled}"
        )

    async def search(self, query: str, top_k: Optional[int] = None) -> HybridSearchResult:
        """
        Perform a hybrid search.

        Args:
            query: Natural-language query
            top_k: Override of the configured number of results

        Returns:
            HybridSearchResult with fused hits, status and metrics

        Raises:
            InvalidSearchParametersError: If the query or top_k is invalid
            SearchTimeoutError: If the search exceeds the configured timeout
            HybridSearchError: If the corpus cannot be loaded or no path succeeds
        """
        start_time = time.time()
        metrics = HybridSearchMetrics(
            query_hash=hashlib.sha256((query or "").encode("utf-8")).hexdigest()[:16],
            search_mode=self.config.search_mode.value
        )

        try:
            if not query or not query.strip():
                raise InvalidSearchParametersError("Query cannot be empty")
            limit = self.config.top_k if top_k is None else top_k
            if limit < 1:
                raise InvalidSearchParametersError(f"top_k must be at least 1, got {limit}")

            return await asyncio.wait_for(
                self._search(query, limit, metrics),
                timeout=self.config.timeout
            )

        except asyncio.TimeoutError as e:
            metrics.status = SearchStatus.TIMEOUT
            metrics.error_message = f"Search exceeded timeout of {self.config.timeout}s"
            logger.error(f"Search timed out after {self.config.timeout}s")
            raise SearchTimeoutError(metrics.error_message) from e

        except SearchError as e:
            metrics.status = SearchStatus.FAILURE
            metrics.error_message = str(e)
            logger.error(f"Hybrid search failed: {str(e)}")
            raise

        except Exception as e:
            metrics.status = SearchStatus.FAILURE
            metrics.error_message = str(e)
            error_msg = f"Hybrid search failed: {str(e)}"
            logger.error(error_msg, exc_info=True)
            raise HybridSearchError(error_msg) from e

        finally:
            metrics.total_time_ms = (time.time() - start_time) * 1000
            await self._record_metrics(metrics)

    async def _search(
        self,
        query: str,
        top_k: int,
        metrics: HybridSearchMetrics
    ) -> HybridSearchResult:
        documents = await self._load_documents(metrics)
        if not documents:
            logger.warning("Corpus is empty, returning no results")
            return HybridSearchResult([], query, metrics=metrics)

        paths = []
        if self.config.enable_lexical:
            paths.append((LEXICAL, self._run_lexical(query, documents, metrics)))
        if self.config.enable_semantic:
            paths.append((SEMANTIC, self._run_semantic(query, documents, metrics)))

        outcomes = await asyncio.gather(*(coro for _, coro in paths), return_exceptions=True)

        errors: Dict[str, BaseException] = {}
        keywords: List[str] = []
        lexical_results: Optional[RankedList] = None
        semantic_results: Optional[RankedList] = None
        for (path, _), outcome in zip(paths, outcomes):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                logger.warning(f"{path.capitalize()} search path failed: {outcome}")
                errors[path] = outcome
            elif path == LEXICAL:
                keywords, lexical_results = outcome
            else:
                semantic_results = outcome

        (lexical_results, semantic_results), status = handle_fallback(
            lexical_results,
            semantic_results,
            errors,
            self.config.fallback_enabled
        )

        candidates: List[RankedList] = []
        if lexical_results is not None:
            lexical_candidates = [scored for scored in lexical_results if scored.score > 0]
            candidates.append(lexical_candidates[:self.config.candidate_pool_size])
            metrics.lexical_results = len(candidates[-1])
        if semantic_results is not None:
            candidates.append(semantic_results[:self.config.candidate_pool_size])
            metrics.semantic_results = len(candidates[-1])

        fusion_start = time.time()
        fused = fuse_results_rrf(candidates, k=self.config.rrf_k)
        results = [result for result in fused if result.fused_score > 0][:top_k]
        metrics.fusion_time_ms = (time.time() - fusion_start) * 1000

        metrics.results_count = len(results)
        metrics.status = status
        if errors:
            metrics.error_message = "; ".join(f"{path}: {error}" for path, error in errors.items())

        logger.info(
            f"Hybrid search completed - status: {status.value}, "
            f"documents: {metrics.documents_count}, results: {len(results)}, "
            f"lexical: {metrics.lexical_time_ms:.2f}ms, "
            f"semantic: {metrics.semantic_time_ms:.2f}ms, "
            f"fusion: {metrics.fusion_time_ms:.2f}ms"
        )

        return HybridSearchResult(
            results,
            query,
            status=status,
            errors=errors,
            keywords=keywords,
            metrics=metrics
        )

    async def _load_documents(self, metrics: HybridSearchMetrics) -> List[Document]:
        corpus_start = time.time()
        try:
            documents = await asyncio.to_thread(self.corpus_loader.load)
        except CorpusLoadError as e:
            raise HybridSearchError(f"Corpus load failed: {str(e)}") from e
        metrics.corpus_time_ms = (time.time() - corpus_start) * 1000
        metrics.documents_count = len(documents)
        return documents

    async def _run_lexical(
        self,
        query: str,
        documents: List[Document],
        metrics: HybridSearchMetrics
    ) -> Tuple[List[str], RankedList]:
        start = time.time()
        keywords = await self.keyword_extractor.extract_keywords(query)
        metrics.keyword_time_ms = (time.time() - start) * 1000
        logger.debug(f"Query keywords: {keywords}")

        ranked = await asyncio.to_thread(self.bm25_scorer.score, keywords, documents)
        metrics.lexical_time_ms = (time.time() - start) * 1000
        return keywords, ranked

    async def _run_semantic(
        self,
        query: str,
        documents: List[Document],
        metrics: HybridSearchMetrics
    ) -> RankedList:
        start = time.time()
        ranked = await self.semantic_scorer.score(query, documents)
        metrics.semantic_time_ms = (time.time() - start) * 1000
        return ranked

    async def lexical_search(self, query: str, limit: Optional[int] = None) -> RankedList:
        """
        Keyword-only search without any provider call.

        The raw query is split on whitespace and every token is a keyword.
        Documents matching none of them are dropped.

        Args:
            query: Space separated search terms
            limit: Optional maximum number of results

        Returns:
            Matching documents by descending BM25 score

        Raises:
            InvalidSearchParametersError: If the query is empty
            CorpusLoadError: If the corpus cannot be loaded
        """
        if not query or not query.strip():
            raise InvalidSearchParametersError("Query cannot be empty")

        documents = await asyncio.to_thread(self.corpus_loader.load)
        ranked = await asyncio.to_thread(self.bm25_scorer.score, query.split(), documents)
        matches = [scored for scored in ranked if scored.score > 0]

        logger.info(f"Lexical search completed - documents: {len(documents)}, matches: {len(matches)}")
        return matches[:limit] if limit else matches

    async def index(self) -> Dict[str, Any]:
        """
        Load the corpus and make sure every document has a cached embedding.

        Returns:
            Summary with the document count and embedding cache statistics

        Raises:
            CorpusLoadError: If the corpus cannot be loaded
            EmbeddingGenerationError: If embedding generation fails
        """
        if self.semantic_scorer is None:
            raise ConfigurationError("Indexing requires the semantic search path")

        documents = await asyncio.to_thread(self.corpus_loader.load)
        cache = self.semantic_scorer.cache
        await cache.get_or_create_embeddings(documents)

        stats = cache.get_stats()
        logger.info(f"Indexed {len(documents)} documents - cache: {stats}")
        return {"documents": len(documents), "cache": stats}

    async def _record_metrics(self, metrics: HybridSearchMetrics) -> None:
        if not self.enable_metrics:
            return

        async with self._lock:
            self._metrics_history.append(metrics)
            if len(self._metrics_history) > self.max_metrics_history:
                self._metrics_history = self._metrics_history[-self.max_metrics_history:]

        if self.metrics_callback:
            try:
                self.metrics_callback(metrics)
            except Exception as e:
                logger.error(f"Metrics callback failed: {str(e)}")

    async def get_metrics_summary(self) -> Dict[str, Any]:
        """
        Get summary of search metrics.

        Returns:
            Dictionary with status counts and average timings
        """
        async with self._lock:
            if not self._metrics_history:
                return {"message": "No metrics available"}

            total_searches = len(self._metrics_history)
            counts = {status: 0 for status in SearchStatus}
            for m in self._metrics_history:
                counts[m.status] += 1

            return {
                "total_searches": total_searches,
                "successful": counts[SearchStatus.SUCCESS],
                "degraded": counts[SearchStatus.DEGRADED],
                "failed": counts[SearchStatus.FAILURE],
                "timed_out": counts[SearchStatus.TIMEOUT],
                "success_rate": counts[SearchStatus.SUCCESS] / total_searches,
                "avg_corpus_time_ms": round(
                    sum(m.corpus_time_ms for m in self._metrics_history) / total_searches, 2),
                "avg_lexical_time_ms": round(
                    sum(m.lexical_time_ms for m in self._metrics_history) / total_searches, 2),
                "avg_semantic_time_ms": round(
                    sum(m.semantic_time_ms for m in self._metrics_history) / total_searches, 2),
                "avg_total_time_ms": round(
                    sum(m.total_time_ms for m in self._metrics_history) / total_searches, 2),
            }

    def get_metrics_history(self) -> List[HybridSearchMetrics]:
        return list(self._metrics_history)


def create_embedding_provider(settings: VaultSearchSettings) -> EmbeddingProvider:
    """
    Build the configured embedding provider.

    Raises:
        ConfigurationError: If the provider cannot be configured
    """
    embedding = settings.embedding
    if embedding.provider == EmbeddingProviderType.HASH:
        return HashEmbeddingProvider(dimension=embedding.output_dimensionality or 256)

    try:
        return GeminiEmbeddingProvider(
            model_name=embedding.model_name,
            output_dimensionality=embedding.output_dimensionality,
            api_key=embedding.api_key,
            max_retries=embedding.max_retries,
            retry_initial_delay=embedding.retry_initial_delay,
        )
    except ValueError as e:
        raise ConfigurationError(str(e)) from e


def create_keyword_extractor(settings: VaultSearchSettings) -> KeywordExtractor:
    """
    Build the configured query keyword extractor.

    Raises:
        ConfigurationError: If the extractor cannot be configured
    """
    search = settings.search
    if search.keyword_extractor == KeywordExtractorType.SIMPLE:
        return SimpleKeywordExtractor(max_keywords=search.max_keywords)

    try:
        return GeminiKeywordExtractor(
            model_name=search.keyword_model_name,
            api_key=settings.embedding.api_key,
            max_keywords=search.max_keywords,
        )
    except ValueError as e:
        raise ConfigurationError(str(e)) from e


def create_hybrid_search(
    settings: Optional[VaultSearchSettings] = None,
    metrics_callback: Optional[Callable[[HybridSearchMetrics], None]] = None
) -> HybridSearch:
    """
    Wire a HybridSearch from settings.

    Only the collaborators of enabled paths are built, so a lexical-only
    configuration needs no API key.

    Args:
        settings: Settings to use (loaded from the environment if not provided)
        metrics_callback: Optional callback for metrics reporting

    Returns:
        Configured HybridSearch

    Raises:
        ConfigurationError: If settings are inconsistent or incomplete
    """
    settings = settings or load_settings()

    try:
        config = HybridSearchConfig.from_settings(settings.search)
    except ValueError as e:
        raise ConfigurationError(f"Invalid search settings: {e}") from e

    keyword_extractor = None
    if config.enable_lexical:
        keyword_extractor = create_keyword_extractor(settings)

    semantic_scorer = None
    if config.enable_semantic:
        provider = create_embedding_provider(settings)
        cache = EmbeddingCache.from_settings(settings, provider)
        semantic_scorer = SemanticScorer(provider, cache)

    return HybridSearch(
        corpus_loader=CorpusLoader.from_settings(settings.corpus),
        keyword_extractor=keyword_extractor,
        semantic_scorer=semantic_scorer,
        config=config,
        metrics_callback=metrics_callback,
        enable_metrics=settings.monitoring.enable_metrics,
    )
