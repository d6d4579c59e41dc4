"""
File Embedding Store

Persists embedding vectors as one JSON record per file.

Directory structure:
    cache_dir/
    ├── {model_key}-{record_key}.json
    └── ...

Record body:
    {"id": document_id, "model_key": ..., "content_hash": ..., "embedding": [...]}

Writes go to a temporary file in the same directory followed by an atomic
rename, so concurrent writers of different records never interfere and
readers never observe a partially written record.
"""

import json
import os
import re
import logging
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from ..vault_search_exceptions import CacheCorruptionError

logger = logging.getLogger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9._-]")


@dataclass
class EmbeddingVector:
    """
    A persisted embedding.

    Attributes:
        document_id: Id of the document the vector was computed for
        model_key: Identifier of the embedding model
        vector: The embedding
    """
    document_id: str
    model_key: str
    vector: List[float] = field(repr=False)


def _safe_key(key: str) -> str:
    return _UNSAFE_KEY_CHARS.sub("_", key)


class FileEmbeddingStore:
    """
    Disk-backed key/value store for embedding vectors.

    Records are addressed by (model_key, record_key). Records are never
    expired; a record is only rewritten when it was found corrupt.
    """

    def __init__(self, cache_dir: Union[str, Path]):
        """
        Initialize the store, creating the cache directory if needed.

        Args:
            cache_dir: Directory holding the records
        """
        self.cache_dir = Path(cache_dir)
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        logger.debug(f"FileEmbeddingStore initialized at {self.cache_dir}")

    def record_path(self, model_key: str, record_key: str) -> Path:
        """Deterministic path of the record for (model_key, record_key)."""
        return self.cache_dir / f"{_safe_key(model_key)}-{_safe_key(record_key)}.json"

    def read(self, model_key: str, record_key: str) -> Optional[EmbeddingVector]:
        """
        Read a record.

        Returns:
            The stored vector, or None when no record exists

        Raises:
            CacheCorruptionError: If the record exists but cannot be read or parsed
        """
        path = self.record_path(model_key, record_key)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            raise CacheCorruptionError(f"Unreadable cache record {path}: {e}") from e

        if not isinstance(data, dict):
            raise CacheCorruptionError(f"Cache record {path} is not an object")

        document_id = data.get("id")
        embedding = data.get("embedding")
        if not isinstance(document_id, str) or not isinstance(embedding, list) or not embedding:
            raise CacheCorruptionError(f"Cache record {path} is missing id or embedding")
        if not all(isinstance(value, (int, float)) and not isinstance(value, bool) for value in embedding):
            raise CacheCorruptionError(f"Cache record {path} holds a non-numeric embedding")

        return EmbeddingVector(
            document_id=document_id,
            model_key=model_key,
            vector=[float(value) for value in embedding],
        )

    def write(
        self,
        vector: EmbeddingVector,
        record_key: str,
        content_hash: Optional[str] = None
    ) -> Path:
        """
        Atomically write a record.

        Args:
            vector: Vector to persist
            record_key: Key of the record within the model key
            content_hash: Hash of the embedded text, stored for diagnostics

        Returns:
            Path of the written record
        """
        path = self.record_path(vector.model_key, record_key)
        payload = {
            "id": vector.document_id,
            "model_key": vector.model_key,
            "content_hash": content_hash,
            "embedding": vector.vector,
        }

        fd, tmp_path = tempfile.mkstemp(dir=self.cache_dir, prefix=".", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f)
            os.replace(tmp_path, path)
        except BaseException:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise

        return path
