"""
Title Extraction

Resolves a document title from its leading metadata block, its first
heading, or its file name, in that order.
"""

import re
from pathlib import Path
from typing import Optional, Tuple

METADATA_MARKER = "---"

_METADATA_BLOCK = re.compile(r"^---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|$)", re.DOTALL)
_HEADING_PREFIX = re.compile(r"^#+\s*")


def _strip_quotes(value: str) -> str:
    """Strip a single layer of matching quote characters."""
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1].strip()
    return value


def split_metadata(content: str) -> Tuple[Optional[str], str]:
    """
    Split a leading metadata block from the rest of the content.

    Args:
        content: Raw file content

    Returns:
        Tuple of (metadata block body or None, remaining content)
    """
    match = _METADATA_BLOCK.match(content)
    if not match:
        return None, content
    return match.group(1), content[match.end():]


def extract_metadata_title(content: str) -> Optional[str]:
    """
    Find a `title:` entry in the leading metadata block.

    Keys are matched case-insensitively and the first non-empty title wins.
    """
    block, _ = split_metadata(content)
    if block is None:
        return None

    for line in block.splitlines():
        stripped = line.strip()
        if not stripped or ":" not in stripped:
            continue
        key, _, value = stripped.partition(":")
        if key.strip().lower() != "title":
            continue
        value = _strip_quotes(value.strip())
        if value:
            return value
    return None


def extract_heading_title(content: str) -> Optional[str]:
    """
    Use the first non-blank line after any metadata block when it is a heading.
    """
    _, rest = split_metadata(content)
    for line in rest.splitlines():
        stripped = line.strip()
        if not stripped:
            continue
        if stripped.startswith("#"):
            return _HEADING_PREFIX.sub("", stripped).strip() or None
        break
    return None


def extract_title(content: str, file_path: str) -> str:
    """
    Resolve the display title of a document.

    Args:
        content: Raw file content
        file_path: Path of the file, used for the fallback title

    Returns:
        Metadata title, first heading, or file name without extension
    """
    return (
        extract_metadata_title(content)
        or extract_heading_title(content)
        or Path(file_path).stem
    )
