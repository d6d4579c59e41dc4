"""
Pydantic Settings for Vault Search

This module provides strongly-typed configuration settings using Pydantic,
with support for environment variables and YAML configuration files.
"""

from typing import List, Optional, Union
from enum import Enum
from pathlib import Path
import os

import yaml
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_yaml import to_yaml_file


class EmbeddingProviderType(str, Enum):
    """
    Embedding provider options.

    - GEMINI calls the Google Gemini embedding API
    - HASH produces deterministic offline vectors (development and tests)
    """
    GEMINI = "gemini"
    HASH = "hash"


class CacheKeyStrategy(str, Enum):
    """
    How persisted embedding records are keyed within a model key.

    - CONTENT keys by a hash of the embedded text; edited documents get new records
    - PATH keys by document id; edited documents keep their first vector
    """
    CONTENT = "content"
    PATH = "path"


class KeywordExtractorType(str, Enum):
    """Keyword extractor options for the lexical search path."""
    SIMPLE = "simple"  # Deterministic tokenizer with stopword removal
    GEMINI = "gemini"  # Generative model call


class CorpusSettings(BaseSettings):
    """
    Corpus settings describing where documents live and which files count.
    """
    root_path: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("VAULT_SEARCH_CORPUS_ROOT_PATH", "WORKING_KNOWLEDGE_VAULT"),
        description="Directory tree holding the documents to search",
    )
    extensions: List[str] = Field(
        default_factory=lambda: [".md", ".mdx"],
        description="Recognized document extensions (matched case-insensitively)",
    )

    model_config = SettingsConfigDict(env_prefix="VAULT_SEARCH_CORPUS_", case_sensitive=False, extra="ignore",
                                      populate_by_name=True)


class EmbeddingSettings(BaseSettings):
    """
    Embedding provider settings.

    These settings control how document and query embeddings are requested:
    - Which provider and model produce the vectors
    - How cache misses are batched and how many batches run at once
    - Request pacing and retry behavior for the remote API
    """
    provider: EmbeddingProviderType = Field(EmbeddingProviderType.GEMINI,
                                            description="Embedding provider implementation")
    model_name: str = Field("models/text-embedding-004",
                            description="Embedding model name passed to the provider")
    api_key: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("VAULT_SEARCH_EMBEDDING_API_KEY", "GEMINI_API_KEY"),
        description="API key for the embedding provider",
    )
    output_dimensionality: Optional[int] = Field(None,
                                                 description="Requested embedding dimension (provider default if unset)")
    max_batch_size: int = Field(99, gt=0,
                                description="Maximum number of texts sent in one provider request")
    max_concurrent_batches: int = Field(4, gt=0,
                                        description="Maximum provider batch requests in flight")
    requests_per_second: float = Field(0.0, ge=0.0,
                                       description="Provider request rate limit (0=disabled)")
    max_retries: int = Field(3, ge=0,
                             description="Retries for transient provider errors")
    retry_initial_delay: float = Field(1.0, gt=0.0,
                                       description="Initial backoff delay in seconds between retries")

    model_config = SettingsConfigDict(env_prefix="VAULT_SEARCH_EMBEDDING_", case_sensitive=False,
                                      extra="ignore", populate_by_name=True)


class CacheSettings(BaseSettings):
    """
    Embedding cache settings.

    Vectors are stored one JSON record per file under cache_dir. The model key
    namespaces records so that switching models never overwrites old vectors.
    """
    cache_dir: str = Field("data/embeddings",
                           description="Directory holding persisted embedding records")
    model_key: str = Field("google-text-embedding-004",
                           description="Identifier of the embedding model the records belong to")
    key_strategy: CacheKeyStrategy = Field(CacheKeyStrategy.CONTENT,
                                           description="Record keying strategy (content hash or document id)")
    show_progress: bool = Field(False,
                                description="Show a progress bar while generating missing embeddings")

    model_config = SettingsConfigDict(env_prefix="VAULT_SEARCH_CACHE_", case_sensitive=False, extra="ignore")


class SearchSettings(BaseSettings):
    """
    Hybrid search settings.

    These settings determine how the lexical and semantic rankings are
    produced, truncated and fused into the final result list.
    """
    top_k: int = Field(10, gt=0, description="Number of fused results returned")
    candidate_pool_size: int = Field(30, gt=0,
                                     description="Entries kept from each ranked list before fusion")
    rrf_k: int = Field(60, gt=0, description="Reciprocal rank fusion constant")
    bm25_k1: float = Field(1.2, gt=0.0, description="BM25 term frequency saturation")
    bm25_b: float = Field(0.75, ge=0.0, le=1.0, description="BM25 length normalization")
    timeout: float = Field(60.0, gt=0.0, description="Deadline in seconds for one query")
    fallback_enabled: bool = Field(True,
                                   description="Return single-path results when the other path fails")
    enable_lexical: bool = Field(True, description="Run the keyword (BM25) path")
    enable_semantic: bool = Field(True, description="Run the embedding path")
    keyword_extractor: KeywordExtractorType = Field(KeywordExtractorType.SIMPLE,
                                                    description="Keyword extractor implementation")
    keyword_model_name: str = Field("gemini-1.5-flash",
                                    description="Generative model used by the Gemini keyword extractor")
    max_keywords: int = Field(7, gt=0, description="Upper bound on extracted keywords")

    model_config = SettingsConfigDict(env_prefix="VAULT_SEARCH_SEARCH_", case_sensitive=False, extra="ignore")


class MonitoringSettings(BaseSettings):
    """
    Logging and metrics settings.
    """
    log_level: str = Field("INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)")
    enable_metrics: bool = Field(True, description="Record per-query search metrics")

    model_config = SettingsConfigDict(env_prefix="VAULT_SEARCH_MONITORING_", case_sensitive=False, extra="ignore")


class VaultSearchSettings(BaseSettings):
    """
    Main settings class that consolidates all configuration categories.

    Usage:
        # Load from environment variables and defaults
        settings = VaultSearchSettings()

        # Load from YAML file
        settings = VaultSearchSettings.from_yaml('config.yaml')

        # Access nested settings
        root = settings.corpus.root_path
        batch_size = settings.embedding.max_batch_size
    """
    corpus: CorpusSettings = Field(default_factory=CorpusSettings,
                                   description="Corpus location and file filtering")
    embedding: EmbeddingSettings = Field(default_factory=EmbeddingSettings,
                                         description="Embedding provider configuration")
    cache: CacheSettings = Field(default_factory=CacheSettings,
                                 description="Embedding cache configuration")
    search: SearchSettings = Field(default_factory=SearchSettings,
                                   description="Hybrid search parameters")
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings,
                                           description="Logging and metrics configuration")

    model_config = SettingsConfigDict(env_prefix="VAULT_SEARCH_", case_sensitive=False,
                                      env_nested_delimiter="__", extra="ignore")

    @classmethod
    def from_yaml(cls, yaml_file: Union[str, Path]) -> "VaultSearchSettings":
        """Load settings from YAML file"""
        with open(yaml_file, 'r') as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    def to_yaml(self, yaml_file: Union[str, Path]) -> None:
        """Write settings to a YAML file (secrets excluded)"""
        to_yaml_file(yaml_file, self, exclude={"embedding": {"api_key"}})


def load_settings(config_path: Optional[str] = None) -> VaultSearchSettings:
    """
    Load settings from file and/or environment variables.

    - If config_path is provided and exists, loads settings from the YAML file
    - Otherwise, creates a new settings instance with values from environment variables

    Args:
        config_path: Path to YAML configuration file. If None or file doesn't exist,
                    falls back to environment variables and default values.

    Returns:
        VaultSearchSettings object with loaded configuration
    """
    if config_path and os.path.exists(config_path):
        return VaultSearchSettings.from_yaml(config_path)
    return VaultSearchSettings()
