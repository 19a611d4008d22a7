"""
Catalog RAG - Command-Line Search
===================================
CLI entry point that runs one query through the full pipeline without
the HTTP server:
    1. Load settings (fail-fast on a missing ``GOOGLE_API_KEY``).
    2. Load the product catalog.
    3. Build the vector index (skipped with ``--no-rag``).
    4. Run the query and print the matches, the answer, and timings.

Flags:
    --no-rag     Skip index initialisation; the LLM answers without context.
    --top-k N    Products retrieved as context (default: settings.SEARCH_TOP_K).

Usage:
    python -m catalog_rag.scripts.search_catalog "wireless headphones"
    python -m catalog_rag.scripts.search_catalog "gift for a runner" --top-k 5
    python -m catalog_rag.scripts.search_catalog "hello" --no-rag
"""

from __future__ import annotations

import argparse
import asyncio
import sys
import time
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from catalog_rag.src.core.rag_engine import SearchOutcome


# ── CLI Argument Parsing ───────────────────────────────────────────────

def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {number}")
    return number


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="search_catalog", description="Catalog RAG — run one product query end to end.")
    parser.add_argument("query", help="Free-text product question.")
    parser.add_argument("--no-rag", action="store_true", default=False, help="Do not build the index; answer without product context.")
    parser.add_argument("--top-k", type=_non_negative_int, default=None, help="Number of products retrieved as context.")
    return parser.parse_args(argv)


# ── Main Orchestration ─────────────────────────────────────────────────

def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    t_start = time.perf_counter()

    # ── 0. Load settings + .env ────────────────────────────────────────
    try:
        from catalog_rag.config.settings import settings
    except Exception as exc:
        print("\n[FATAL] Configuration error — check your .env file:\n")
        print(f"  {exc}")
        print()
        return 1

    # Now that settings is loaded, we can safely import the logger
    from catalog_rag.src.core.catalog import load_catalog
    from catalog_rag.src.core.exceptions import CatalogRAGError
    from catalog_rag.src.core.rag_engine import CatalogQueryService
    from catalog_rag.src.database.vector_store import RAGState, create_embedder
    from catalog_rag.src.utils.logger import get_logger

    logger = get_logger(__name__)

    # ── 1. Catalog ─────────────────────────────────────────────────────
    try:
        products = load_catalog(settings.CATALOG_PATH)
    except CatalogRAGError as exc:
        logger.error("%s", exc)
        return 1

    # ── 2. Index (timed) ───────────────────────────────────────────────
    state = RAGState()
    init_ms = 0.0
    if not args.no_rag:
        t_init = time.perf_counter()
        try:
            state.initialize(products, create_embedder())
        except CatalogRAGError as exc:
            logger.error("Index initialisation failed: %s", exc)
            return 1
        init_ms = (time.perf_counter() - t_init) * 1000

    # ── 3. Query (timed) ───────────────────────────────────────────────
    service = CatalogQueryService(state, top_k=args.top_k)
    t_query = time.perf_counter()
    outcome = asyncio.run(service.handle_search(args.query))
    query_ms = (time.perf_counter() - t_query) * 1000

    _print_outcome(args.query, outcome, len(products), init_ms, query_ms, time.perf_counter() - t_start)
    return 1 if outcome.failed else 0


# ── Pretty-print helpers ──────────────────────────────────────────────

def _print_outcome(query: str, outcome: SearchOutcome, catalog_size: int, init_ms: float, query_ms: float, elapsed: float) -> None:
    print()
    print("=" * 60)
    print(f"  Query      : {query}")
    print(f"  Catalog    : {catalog_size} products")
    print(f"  RAG ready  : {outcome.rag_ready}")
    print("-" * 60)
    products = outcome.products
    if products:
        for i, product in enumerate(products, 1):
            print(f"  [{i}] {product['name']}  (${product['price']}, similarity={product['similarity']:.4f})")
    else:
        print("  (no matched products)")
    print("-" * 60)
    print(outcome.response)
    print("-" * 60)
    print(f"  Index build : {init_ms:>8.1f}ms")
    print(f"  Query       : {query_ms:>8.1f}ms")
    print(f"  Total       : {elapsed:>8.2f}s")
    print("=" * 60)
    print()


# ── Entry point ────────────────────────────────────────────────────────

if __name__ == "__main__":
    sys.exit(main())
