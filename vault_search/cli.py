#!/usr/bin/env python3
"""
Command line interface for vault search.

Usage:
    vault-search search "how do I rotate api keys" --top-k 5
    vault-search search "docker compose" --lexical-only
    vault-search index
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional

from dotenv import load_dotenv

from .config import KeywordExtractorType, VaultSearchSettings, load_settings
from .search_operations.search.hybrid import create_hybrid_search
from .vault_search_exceptions import VaultSearchError

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s] - %(message)s"

# Google SDK loggers are chatty at INFO
NOISY_LOGGERS = ("google", "absl", "urllib3", "grpc")


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vault-search",
        description="Hybrid keyword and semantic search over a markdown vault"
    )
    parser.add_argument("--config", help="Path to a YAML settings file")
    parser.add_argument("--root", help="Corpus root directory (overrides settings)")
    parser.add_argument("--log-level", help="Logging level (overrides settings)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    search_parser = subparsers.add_parser("search", help="Search the vault")
    search_parser.add_argument("query", help="Natural-language query")
    search_parser.add_argument("--top-k", type=int, help="Number of results to return")
    search_parser.add_argument("--lexical-only", action="store_true",
                               help="Keyword search over the raw query, no API calls")
    search_parser.add_argument("--json", action="store_true", help="Print results as JSON")

    subparsers.add_parser("index", help="Load the vault and warm the embedding cache")
    return parser


def _print_hits(hits: List[dict]) -> None:
    if not hits:
        print("No results.")
        return
    for rank, hit in enumerate(hits, start=1):
        print(f"{rank:>2}. {hit['title']}  [{hit['score']:.4f}]")
        print(f"    {hit['source_path']}")
        print(f"    {hit['preview']}")


async def run_search(settings: VaultSearchSettings, args: argparse.Namespace) -> int:
    if args.lexical_only:
        # raw query terms are scored directly, no extractor call
        settings.search.enable_semantic = False
        settings.search.enable_lexical = True
        settings.search.keyword_extractor = KeywordExtractorType.SIMPLE

    search = create_hybrid_search(settings)

    if args.lexical_only:
        matches = await search.lexical_search(args.query, limit=args.top_k or settings.search.top_k)
        hits = [dict(scored.document.to_dict(), score=scored.score) for scored in matches]
        if args.json:
            print(json.dumps({"query": args.query, "results": hits}, indent=2))
        else:
            _print_hits(hits)
        return 0

    result = await search.search(args.query, top_k=args.top_k)
    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        if result.degraded:
            failed = ", ".join(result.errors)
            print(f"Warning: results are degraded ({failed} search failed)")
        _print_hits([hit.to_dict() for hit in result])
    return 0


async def run_index(settings: VaultSearchSettings) -> int:
    settings.search.enable_semantic = True
    search = create_hybrid_search(settings)
    summary = await search.index()
    cache = summary["cache"]
    print(
        f"Indexed {summary['documents']} documents "
        f"({cache['hits']} cached, {cache['misses']} embedded in {cache['batches']} batches)"
    )
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args.config)
    except (OSError, ValueError) as e:
        print(f"Error: could not load settings: {e}", file=sys.stderr)
        return 2

    if args.root:
        settings.corpus.root_path = args.root
    if args.command == "index":
        settings.cache.show_progress = True
    configure_logging(args.log_level or settings.monitoring.log_level)

    try:
        if args.command == "search":
            return asyncio.run(run_search(settings, args))
        return asyncio.run(run_index(settings))
    except VaultSearchError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nOperation cancelled by user.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
