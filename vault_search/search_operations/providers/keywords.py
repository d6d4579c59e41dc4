"""
Keyword Extractors

This module turns a free-text query into the short keyword list the BM25
scorer ranks against. Two implementations are provided: a deterministic
tokenizer and a generative-model extractor.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import List, Optional

import google.generativeai as genai
from pydantic import BaseModel, Field, ValidationError

from ..core.search_ops_exceptions import KeywordExtractionError
from ...utils.text import DEFAULT_STOPWORDS, tokenize

logger = logging.getLogger(__name__)

KEYWORD_PROMPT = (
    "You turn search queries into keywords for a BM25 keyword search over a "
    "personal knowledge base. Return between 3 and {max_keywords} keywords, "
    "including likely synonyms and related terms, as JSON of the form "
    '{{"keywords": ["..."]}}.\n\nQuery: {query}'
)


class KeywordList(BaseModel):
    """Structured keyword response expected from the generative model."""
    keywords: List[str] = Field(default_factory=list)


class KeywordExtractor(ABC):
    """Abstract query keyword extractor."""

    @abstractmethod
    async def extract_keywords(self, query: str) -> List[str]:
        """
        Extract keywords from a query.

        Raises:
            KeywordExtractionError: If extraction fails
        """
        pass


def _deduplicate(keywords: List[str], limit: int) -> List[str]:
    seen = set()
    result = []
    for keyword in keywords:
        normalized = keyword.strip()
        if not normalized or normalized.lower() in seen:
            continue
        seen.add(normalized.lower())
        result.append(normalized)
        if len(result) >= limit:
            break
    return result


class SimpleKeywordExtractor(KeywordExtractor):
    """
    Deterministic extractor: word tokens minus stopwords, first occurrence
    order, at most max_keywords.
    """

    def __init__(self, max_keywords: int = 7):
        self.max_keywords = max_keywords

    async def extract_keywords(self, query: str) -> List[str]:
        tokens = tokenize(query, stopwords=DEFAULT_STOPWORDS)
        if not tokens:
            # A query made only of stopwords still searches for its words
            tokens = tokenize(query)
        return _deduplicate(tokens, self.max_keywords)


class GeminiKeywordExtractor(KeywordExtractor):
    """
    Keyword extractor backed by a Gemini generative model.

    The model is asked for a JSON object that is validated with pydantic;
    any API, parsing or validation failure raises KeywordExtractionError.
    """

    def __init__(
        self,
        model_name: str = "gemini-1.5-flash",
        api_key: Optional[str] = None,
        max_keywords: int = 7
    ):
        if not api_key:
            raise ValueError("Gemini API key not provided (set GEMINI_API_KEY).")
        genai.configure(api_key=api_key)
        self.max_keywords = max_keywords
        self._model = genai.GenerativeModel(
            model_name,
            generation_config={"response_mime_type": "application/json"},
        )

    async def extract_keywords(self, query: str) -> List[str]:
        prompt = KEYWORD_PROMPT.format(max_keywords=self.max_keywords, query=query)
        try:
            response = await asyncio.to_thread(self._model.generate_content, prompt)
            parsed = KeywordList.model_validate_json(response.text)
        except ValidationError as e:
            raise KeywordExtractionError(f"Malformed keyword response: {e}") from e
        except Exception as e:
            raise KeywordExtractionError(f"Keyword generation failed: {e}") from e

        keywords = _deduplicate(parsed.keywords, self.max_keywords)
        if not keywords:
            raise KeywordExtractionError(f"No keywords generated for query: {query!r}")

        logger.debug(f"Generated keywords for query: {keywords}")
        return keywords
