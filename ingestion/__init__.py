"""
Ingestion pipeline: fetch random profiles and persist them.

Modules:
    base: ProfileSource abstract base class
    runner: IngestionRunner, fans out independent fetch+store attempts
    scheduler: APScheduler integration for periodic ingestion

Subpackages:
    extractors: RandomUserSource (randomuser.me client)
    loaders: ProfileStore (transactional three-table repository)

Architecture:
    Each attempt is one fetch followed by one store:

    1. Fetch - one HTTP call, no retries, failures returned as Result
    2. Store - user, detail and location in a single transaction

    A failed attempt is logged with its payload and counted; the run
    always continues to the next attempt.

Example:
    source = RandomUserSource(api_url=settings.RANDOMUSER_API_URL)
    store = ProfileStore(async_session_maker)
    runner = IngestionRunner(source, store)

    summary = await runner.run(5)
    print(f"{summary.succeeded}/{summary.attempted} stored")
"""

__all__ = [
    "ProfileSource",
    "IngestionRunner",
    "IngestionSummary",
    "IngestionScheduler",
    "RandomUserSource",
    "ProfileStore",
]
