"""
Corpus Operations Module

This module turns a directory tree of text documents into a stable,
addressable document set:
- Depth-first traversal with symbolic link cycle protection
- Recognized extension filtering
- Title extraction from metadata blocks and headings
- Path-derived document ids that survive content edits
"""

from .models import Document, document_id_for_path
from .frontmatter import extract_title
from .loader import CorpusLoader, load_corpus

__all__ = [
    "Document",
    "document_id_for_path",
    "extract_title",
    "CorpusLoader",
    "load_corpus",
]
