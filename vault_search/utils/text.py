"""
Text Tokenization Utilities

Shared word tokenizer used by the BM25 scorer, the keyword extractor and the
offline hashing embedding provider.
"""

import re
from typing import FrozenSet, List, Optional

_TOKEN_PATTERN = re.compile(r"\w+")

# Common English stopwords
DEFAULT_STOPWORDS: FrozenSet[str] = frozenset({
    'a', 'an', 'and', 'are', 'as', 'at', 'be', 'by', 'for', 'from',
    'has', 'he', 'in', 'is', 'it', 'its', 'of', 'on', 'that', 'the',
    'to', 'was', 'will', 'with', 'this', 'but', 'they', 'have',
    'had', 'what', 'when', 'where', 'who', 'which', 'why', 'how'
})


def tokenize(
    text: str,
    min_term_length: int = 1,
    max_term_length: int = 50,
    stopwords: Optional[FrozenSet[str]] = None
) -> List[str]:
    """
    Tokenize text into lowercase word terms.

    Args:
        text: Input text to tokenize
        min_term_length: Minimum token length kept
        max_term_length: Maximum token length kept
        stopwords: Tokens to drop (None keeps everything)

    Returns:
        List of tokens in text order
    """
    tokens = [
        t for t in _TOKEN_PATTERN.findall(text.lower())
        if min_term_length <= len(t) <= max_term_length
    ]
    if stopwords:
        tokens = [t for t in tokens if t not in stopwords]
    return tokens
