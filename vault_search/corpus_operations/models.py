"""
Corpus Data Models

This module defines the Document entity produced by the corpus loader and
consumed by every scorer.
"""

import hashlib
from dataclasses import dataclass

# Length of the hex document id derived from the relative path
DOCUMENT_ID_LENGTH = 32

PREVIEW_LENGTH = 100


def document_id_for_path(relative_path: str) -> str:
    """
    Derive a stable document id from a corpus-relative path.

    The id depends only on the path, so it survives content edits and
    changes only when a file is added, removed or renamed.

    Args:
        relative_path: Path relative to the corpus root, with '/' separators

    Returns:
        Truncated SHA-256 hex digest
    """
    return hashlib.sha256(relative_path.encode("utf-8")).hexdigest()[:DOCUMENT_ID_LENGTH]


@dataclass(frozen=True)
class Document:
    """
    A document loaded from the corpus.

    Attributes:
        id: Stable hash of the relative path
        title: Metadata title, first heading, or file stem
        body: Full file content
        timestamp: File modification time as ISO-8601 UTC
        source_path: Path relative to the corpus root
    """
    id: str
    title: str
    body: str
    timestamp: str
    source_path: str

    @property
    def search_text(self) -> str:
        """Text scored by both the lexical and semantic paths."""
        return f"{self.title} {self.body}"

    @property
    def content_hash(self) -> str:
        """SHA-256 of the searchable text, used to key content-addressed cache records."""
        return hashlib.sha256(self.search_text.encode("utf-8")).hexdigest()

    @property
    def preview(self) -> str:
        return self.body[:PREVIEW_LENGTH] + "..."

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "title": self.title,
            "timestamp": self.timestamp,
            "source_path": self.source_path,
            "preview": self.preview,
        }
