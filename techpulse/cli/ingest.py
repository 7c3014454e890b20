"""Standalone CLI for ingestion, seeding and search.

Usage::

    python -m techpulse.cli ingest
    python -m techpulse.cli ingest --batch-size 10
    python -m techpulse.cli seed
    python -m techpulse.cli search "open source language models"

Each command builds only the providers it needs; the CLI does not go
through the web app's lifespan.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from datetime import datetime, timezone

import httpx

from techpulse.config.loader import load_config
from techpulse.config.settings import Settings
from techpulse.models.news import NewsItemCreate
from techpulse.utils.errors import DuplicateItemError
from techpulse.utils.logging import configure_logging

SAMPLE_ITEMS: list[NewsItemCreate] = [
    NewsItemCreate(
        title="OpenAI Announces GPT-5 with Reasoning Capabilities",
        url="https://example.com/gpt5-announcement",
        summary=(
            "OpenAI reveals GPT-5, featuring advanced reasoning and reduced "
            "hallucinations. The model shows significant improvements in "
            "complex problem-solving."
        ),
        sentiment_score=9,
        category="AI",
        published_at=datetime(2025, 1, 10, tzinfo=timezone.utc),  # noqa: UP017
    ),
    NewsItemCreate(
        title="Apple Vision Pro 2 Leaks Suggest 50% Weight Reduction",
        url="https://example.com/vision-pro-2-leaks",
        summary=(
            "Leaked schematics reveal Apple's next VR headset will be "
            "significantly lighter. Industry analysts predict a Q4 2025 release."
        ),
        sentiment_score=7,
        category="Hardware",
        published_at=datetime(2025, 1, 9, tzinfo=timezone.utc),  # noqa: UP017
    ),
]


def _build_store(config: dict):  # noqa: ANN202
    from techpulse.providers.store.sqlite_news_store import SQLiteNewsStore

    return SQLiteNewsStore(db_path=config["storage"]["database_path"])


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


async def _handle_ingest(args: argparse.Namespace, app_settings: Settings, config: dict) -> int:
    """Run one ingestion pass against Hacker News and print the counts."""
    from techpulse.pipeline.orchestrator import IngestionPipeline
    from techpulse.providers.embedding.openai_embedding_provider import OpenAIEmbeddingProvider
    from techpulse.providers.llm.openai_provider import OpenAILLMProvider
    from techpulse.providers.source.hacker_news_provider import DEFAULT_HEADERS, HackerNewsProvider
    from techpulse.services.classifier import StoryClassifier

    llm = OpenAILLMProvider(settings=app_settings)
    if not llm.is_available():
        print("Error: OPENAI_API_KEY is not set.", file=sys.stderr)
        return 1

    store = _build_store(config)
    await store.initialize()
    embedder = OpenAIEmbeddingProvider(settings=app_settings)

    async with httpx.AsyncClient(timeout=10.0, headers=DEFAULT_HEADERS, follow_redirects=True) as http_client:
        pipeline = IngestionPipeline(
            source=HackerNewsProvider(
                base_url=app_settings.hacker_news_base_url,
                http_client=http_client,
            ),
            store=store,
            classifier=StoryClassifier(
                llm_provider=llm,
                temperature=config["classifier"]["temperature"],
                max_tokens=config["classifier"]["max_tokens"],
            ),
            embedding_provider=embedder,
            batch_size=args.batch_size or config["ingestion"]["batch_size"],
        )
        outcome = await pipeline.run()

    print("Ingestion complete:")
    print(f"  New:     {outcome.new_count}")
    print(f"  Skipped: {outcome.skipped_count}")
    print(f"  Failed:  {outcome.failed_count}")
    return 0


async def _handle_seed(config: dict) -> int:
    """Insert the sample items, leaving any that already exist untouched."""
    store = _build_store(config)
    await store.initialize()

    inserted = 0
    for item in SAMPLE_ITEMS:
        try:
            await store.insert_item(item)
            inserted += 1
        except DuplicateItemError:
            print(f"  Already present: {item.url}")

    print(f"Seeding complete: inserted {inserted} of {len(SAMPLE_ITEMS)} sample items.")
    return 0


async def _handle_search(args: argparse.Namespace, app_settings: Settings, config: dict) -> int:
    """Print the closest stored items for a free-text query."""
    from techpulse.providers.embedding.openai_embedding_provider import OpenAIEmbeddingProvider
    from techpulse.services.search_service import SearchService

    embedder = OpenAIEmbeddingProvider(settings=app_settings)
    if not embedder.is_available():
        print("Error: OPENAI_API_KEY is not set.", file=sys.stderr)
        return 1

    store = _build_store(config)
    await store.initialize()
    service = SearchService(store=store, embedding_provider=embedder, limit=args.limit)
    matches = await service.search(args.query)

    if not matches:
        print("No matches.")
        return 0

    for rank, match in enumerate(matches, start=1):
        item = match.item
        print(f"{rank}. [{match.similarity:.3f}] {item.title}")
        print(f"   {item.category or '-'} | sentiment {item.sentiment_score or '-'} | {item.url}")
    return 0


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the TechPulse CLI."""
    parser = argparse.ArgumentParser(
        prog="python -m techpulse.cli",
        description="Ingest, seed and search the TechPulse news store.",
    )
    parser.add_argument(
        "--config",
        default="config/config.yaml",
        help="Path to the YAML config file (default: config/config.yaml)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    ingest_parser = subparsers.add_parser("ingest", help="Run one ingestion pass")
    ingest_parser.add_argument(
        "--batch-size",
        type=int,
        default=None,
        dest="batch_size",
        help="Number of top stories to consider (default: from config)",
    )

    subparsers.add_parser("seed", help="Insert two sample news items")

    search_parser = subparsers.add_parser("search", help="Semantic search over stored items")
    search_parser.add_argument("query", help="Free-text query")
    search_parser.add_argument("--limit", type=int, default=5, help="Maximum results (default: 5)")

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """Parse the subcommand and dispatch to its handler."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    app_settings = Settings()
    configure_logging(log_level=app_settings.log_level)
    config = load_config(args.config, settings=app_settings)

    if args.command == "ingest":
        exit_code = asyncio.run(_handle_ingest(args, app_settings, config))
    elif args.command == "seed":
        exit_code = asyncio.run(_handle_seed(config))
    else:
        exit_code = asyncio.run(_handle_search(args, app_settings, config))

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
