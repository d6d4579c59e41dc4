"""
Fallback Module

This module provides graceful degradation logic for handling partial
failures of the scoring paths in hybrid search operations.
"""

import logging
from typing import Dict, Optional, Tuple

from ....core.base import RankedList
from ....core.search_ops_exceptions import HybridSearchError
from ..utils.metrics import SearchStatus

logger = logging.getLogger(__name__)

LEXICAL = "lexical"
SEMANTIC = "semantic"


def handle_fallback(
    lexical_results: Optional[RankedList],
    semantic_results: Optional[RankedList],
    errors: Dict[str, BaseException],
    fallback_enabled: bool = True
) -> Tuple[Tuple[Optional[RankedList], Optional[RankedList]], SearchStatus]:
    """
    Decide what a search returns when one of its paths failed.

    A path is failed when its name is a key of errors; a path that was not
    run has no results and no error.

    Args:
        lexical_results: Results from the lexical path (None if failed or disabled)
        semantic_results: Results from the semantic path (None if failed or disabled)
        errors: Path name to the exception that failed it
        fallback_enabled: Whether single-path results may be returned

    Returns:
        Tuple of ((lexical_results, semantic_results), status)

    Raises:
        HybridSearchError: If no path produced results, or a path failed
            with fallback disabled
    """
    if not errors:
        logger.debug("All enabled search paths successful")
        return (lexical_results, semantic_results), SearchStatus.SUCCESS

    first_error = next(iter(errors.values()))
    summary = "; ".join(f"{path}: {error}" for path, error in errors.items())

    if lexical_results is None and semantic_results is None:
        logger.error(f"All search paths failed - {summary}")
        raise HybridSearchError(f"All search paths failed - {summary}") from first_error

    if not fallback_enabled:
        logger.error(f"Search path failed and fallback is disabled - {summary}")
        raise HybridSearchError(f"Search path failed and fallback is disabled - {summary}") from first_error

    surviving = LEXICAL if lexical_results is not None else SEMANTIC
    logger.warning(f"Search degraded to {surviving}-only results - {summary}")
    return (lexical_results, semantic_results), SearchStatus.DEGRADED
