"""
Corpus Loader

Walks a directory tree of text documents and turns every recognized file into
a Document with a stable, path-derived id. Symbolic links are followed once
per canonical target, so link cycles and links to already visited files never
produce duplicates.
"""

import os
import stat
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional, Set

from ..config.settings import CorpusSettings
from ..vault_search_exceptions import CorpusLoadError
from .frontmatter import extract_title
from .models import Document, document_id_for_path

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = (".md", ".mdx")


def _format_timestamp(mtime: float) -> str:
    """Format a modification time as ISO-8601 UTC with millisecond precision."""
    moment = datetime.fromtimestamp(mtime, tz=timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class CorpusLoader:
    """
    Loads the document set of a corpus root.

    Traversal is depth-first with directory entries in name order, so two loads
    of an unchanged tree return the same documents in the same order. Every
    canonical path is visited at most once per load.

    Example:
        ```python
        loader = CorpusLoader("/path/to/vault")
        documents = loader.load()
        ```
    """

    def __init__(
        self,
        root_path: Optional[str] = None,
        extensions: Optional[Iterable[str]] = None
    ):
        """
        Initialize the loader.

        Args:
            root_path: Default corpus root used when load() gets no root
            extensions: Recognized document extensions (case-insensitive)
        """
        self.root_path = root_path
        self.extensions = frozenset(
            ext.lower() if ext.startswith(".") else f".{ext.lower()}"
            for ext in (extensions or DEFAULT_EXTENSIONS)
        )
        self._skipped = 0

    @classmethod
    def from_settings(cls, settings: CorpusSettings) -> "CorpusLoader":
        return cls(root_path=settings.root_path, extensions=settings.extensions)

    def is_document(self, path: str) -> bool:
        """Check whether a file name carries a recognized extension."""
        return os.path.splitext(path)[1].lower() in self.extensions

    def load(self, root: Optional[str] = None) -> List[Document]:
        """
        Load every recognized document under the root.

        Args:
            root: Corpus root (defaults to the configured root_path)

        Returns:
            List of Documents in traversal order

        Raises:
            CorpusLoadError: If the root is missing, not a directory or unreadable
        """
        root = root or self.root_path
        if not root:
            raise CorpusLoadError("No corpus root configured")

        resolved_root = os.path.realpath(root)
        if not os.path.isdir(resolved_root):
            raise CorpusLoadError(f"Corpus root does not exist or is not a directory: {root}")

        visited: Set[str] = {resolved_root}
        documents: List[Document] = []
        self._skipped = 0

        self._walk(resolved_root, resolved_root, visited, documents, is_root=True)

        logger.info(
            f"Loaded {len(documents)} documents from {resolved_root} "
            f"(skipped entries: {self._skipped})"
        )
        return documents

    def _walk(
        self,
        directory: str,
        root: str,
        visited: Set[str],
        documents: List[Document],
        is_root: bool = False
    ) -> None:
        try:
            with os.scandir(directory) as iterator:
                entries = sorted(iterator, key=lambda entry: entry.name)
        except OSError as e:
            if is_root:
                raise CorpusLoadError(f"Cannot read corpus root {directory}: {e}") from e
            logger.warning(f"Skipping unreadable directory {directory}: {e}")
            self._skipped += 1
            return

        for entry in entries:
            try:
                if entry.is_symlink():
                    self._visit_link(entry.path, root, visited, documents)
                elif entry.is_dir(follow_symlinks=False):
                    canonical = os.path.realpath(entry.path)
                    if canonical in visited:
                        continue
                    visited.add(canonical)
                    self._walk(canonical, root, visited, documents)
                elif entry.is_file(follow_symlinks=False) and self.is_document(entry.name):
                    self._add_file(os.path.realpath(entry.path), root, visited, documents)
            except OSError as e:
                logger.warning(f"Skipping {entry.path}: {e}")
                self._skipped += 1

    def _visit_link(
        self,
        link_path: str,
        root: str,
        visited: Set[str],
        documents: List[Document]
    ) -> None:
        """Follow a symbolic link unless its target was already visited."""
        real_path = os.path.realpath(link_path)
        if real_path in visited:
            logger.debug(f"Skipping already visited link target {link_path} -> {real_path}")
            return

        try:
            target_stat = os.stat(real_path)
        except OSError as e:
            logger.warning(f"Skipping broken symbolic link {link_path}: {e}")
            self._skipped += 1
            return

        if stat.S_ISDIR(target_stat.st_mode):
            visited.add(real_path)
            self._walk(real_path, root, visited, documents)
        elif stat.S_ISREG(target_stat.st_mode) and self.is_document(real_path):
            self._add_file(real_path, root, visited, documents, target_stat)

    def _add_file(
        self,
        canonical_path: str,
        root: str,
        visited: Set[str],
        documents: List[Document],
        file_stat: Optional[os.stat_result] = None
    ) -> None:
        if canonical_path in visited:
            return
        visited.add(canonical_path)

        try:
            file_stat = file_stat or os.stat(canonical_path)
            with open(canonical_path, "r", encoding="utf-8", errors="replace") as f:
                content = f.read()
        except OSError as e:
            logger.warning(f"Skipping unreadable file {canonical_path}: {e}")
            self._skipped += 1
            return

        documents.append(self._create_document(canonical_path, root, content, file_stat))

    def _create_document(
        self,
        canonical_path: str,
        root: str,
        content: str,
        file_stat: os.stat_result
    ) -> Document:
        relative_path = Path(os.path.relpath(canonical_path, root)).as_posix()
        return Document(
            id=document_id_for_path(relative_path),
            title=extract_title(content, canonical_path),
            body=content,
            timestamp=_format_timestamp(file_stat.st_mtime),
            source_path=relative_path,
        )


def load_corpus(
    root_directory: str,
    extensions: Optional[Iterable[str]] = None
) -> List[Document]:
    """
    Load the document set under a corpus root.

    Args:
        root_directory: Corpus root directory
        extensions: Recognized document extensions (defaults to .md and .mdx)

    Returns:
        List of Documents

    Raises:
        CorpusLoadError: If the root cannot be opened
    """
    return CorpusLoader(extensions=extensions).load(root_directory)
