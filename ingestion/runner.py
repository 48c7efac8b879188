# ============================================================================
# File: ingestion/runner.py
# Description: Fan-out of independent fetch+store attempts
# ============================================================================
"""
Ingestion Runner - Orchestrates N fetch+store attempts.

This module provides:
- Per-attempt failure isolation (a failed attempt never stops the others)
- No retries: a failed fetch or store is logged and counted
- Optional bounded concurrency; each store is its own transaction
- An accurate summary of attempted and succeeded counts
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import asyncio
import logging

from ingestion.base import ProfileSource
from ingestion.loaders.profile_store import ProfileStore

logger = logging.getLogger(__name__)


@dataclass
class AttemptFailure:
    """One failed attempt"""
    attempt: int
    stage: str  # "fetch" or "store"
    error: Dict[str, Any]


@dataclass
class IngestionSummary:
    attempted: int = 0
    succeeded: int = 0
    failures: List[AttemptFailure] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.failures)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "attempted": self.attempted,
            "succeeded": self.succeeded,
            "failed": self.failed,
        }


class IngestionRunner:
    """
    Ingestion orchestrator

    Responsibilities:
    - Run `count` fetch+store attempts
    - Isolate failures per attempt
    - Report an accurate summary
    """

    def __init__(
        self,
        source: ProfileSource,
        store: ProfileStore,
        max_concurrency: int = 1
    ):
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.source = source
        self.store = store
        self.max_concurrency = max_concurrency

    async def run(self, count: int) -> IngestionSummary:
        """
        Run `count` independent attempts.

        Args:
            count: Number of profiles to fetch and store

        Returns:
            IngestionSummary with attempted == count

        Raises:
            ValueError: If count is negative
        """
        if count < 0:
            raise ValueError("count must not be negative")

        summary = IngestionSummary(attempted=count)
        if count == 0:
            return summary

        logger.info(
            f"Starting ingestion of {count} profiles from {self.source.source_name} "
            f"(concurrency={self.max_concurrency})"
        )

        # A fixed pool of workers drains one shared iterator of attempt numbers
        attempts = iter(range(count))
        failures: List[AttemptFailure] = []

        async def worker() -> None:
            for attempt in attempts:
                outcome = await self._attempt(attempt)
                if outcome is None:
                    summary.succeeded += 1
                else:
                    failures.append(outcome)

        workers = min(self.max_concurrency, count)
        if workers == 1:
            await worker()
        else:
            await asyncio.gather(*(worker() for _ in range(workers)))

        summary.failures = sorted(failures, key=lambda f: f.attempt)

        logger.info(f"Completed: {summary.succeeded}/{count} users fetched and stored")
        return summary

    async def _attempt(self, attempt: int) -> Optional[AttemptFailure]:
        """Run one fetch+store cycle; returns None on success"""
        try:
            fetched = await self.source.fetch_one()
            if not fetched.ok:
                return self._record(attempt, "fetch", fetched.error.to_dict())

            stored = await self.store.save(fetched.value)
            if not stored.ok:
                return self._record(attempt, "store", stored.error.to_dict())
        except Exception as e:
            # Anything the source or store failed to turn into a Result
            logger.exception(f"Unexpected error in attempt #{attempt}")
            return AttemptFailure(
                attempt=attempt,
                stage="unexpected",
                error={"error_type": type(e).__name__, "message": str(e)}
            )

        logger.info(f"User #{attempt} stored successfully (user_id={stored.value})")
        return None

    @staticmethod
    def _record(attempt: int, stage: str, error: Dict[str, Any]) -> AttemptFailure:
        failure = AttemptFailure(attempt=attempt, stage=stage, error=error)
        logger.error(
            f"Attempt #{attempt} failed during {stage}: {error['message']}",
            extra={"error_context": error}
        )
        return failure
