"""
Fetch random users from the randomuser.me API and store them in the database.

Usage:
    python -m scripts.fetch_users            # settings.INGEST_DEFAULT_COUNT users
    python -m scripts.fetch_users 20 --concurrency 4
"""

import argparse
import asyncio
import sys
import os
import logging

# Add current directory to path to allow imports from core, models, etc.
sys.path.append(os.getcwd())

from core.config import settings
from core.database import build_engine, build_session_maker
from core.logging import setup_logging
from ingestion.extractors.randomuser_extractor import RandomUserSource
from ingestion.loaders.profile_store import ProfileStore
from ingestion.runner import IngestionRunner, IngestionSummary

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Fetch random users from the randomuser.me API and store them"
    )
    parser.add_argument(
        "count",
        nargs="?",
        type=int,
        default=settings.INGEST_DEFAULT_COUNT,
        help=f"Number of users to fetch (default: {settings.INGEST_DEFAULT_COUNT})"
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        default=settings.INGEST_CONCURRENCY,
        help="Maximum attempts in flight at once (default: 1, sequential)"
    )
    return parser


async def fetch_users(count: int, concurrency: int) -> IngestionSummary:
    """Run one ingestion with a dedicated engine"""
    engine = build_engine(settings.DATABASE_URL)

    try:
        runner = IngestionRunner(
            source=RandomUserSource(
                api_url=settings.RANDOMUSER_API_URL,
                timeout=settings.RANDOMUSER_TIMEOUT
            ),
            store=ProfileStore(build_session_maker(engine)),
            max_concurrency=concurrency
        )
        return await runner.run(count)
    finally:
        await engine.dispose()


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    if args.count < 0:
        print("count must not be negative", file=sys.stderr)
        return 2
    if args.concurrency < 1:
        print("--concurrency must be at least 1", file=sys.stderr)
        return 2

    setup_logging()
    print(f"Fetching {args.count} random users...")

    summary = asyncio.run(fetch_users(args.count, args.concurrency))

    for failure in summary.failures:
        print(f"Failed attempt #{failure.attempt} ({failure.stage}): {failure.error['message']}")
    print(f"Completed: {summary.succeeded}/{summary.attempted} users fetched and stored")
    return 0


if __name__ == "__main__":
    sys.exit(main())
