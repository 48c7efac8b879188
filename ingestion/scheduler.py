import logging
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from ingestion.runner import IngestionRunner

logger = logging.getLogger(__name__)


class IngestionScheduler:
    """Periodically ingests a fixed number of profiles"""

    def __init__(self, runner: IngestionRunner, count: int, interval_minutes: int = 30):
        self.scheduler = AsyncIOScheduler()
        self.runner = runner
        self.count = count
        self.interval_minutes = interval_minutes

    async def run_ingestion_job(self):
        """Job to run one ingestion"""
        logger.info(f"Scheduler: Starting ingestion of {self.count} profiles")
        try:
            summary = await self.runner.run(self.count)
            logger.info(f"Scheduler: Ingestion finished - {summary.to_dict()}")
        except Exception as e:
            logger.error(f"Scheduler: Ingestion job failed - {e}")

    def start(self):
        """Start the scheduler"""
        self.scheduler.add_job(
            self.run_ingestion_job,
            trigger=IntervalTrigger(minutes=self.interval_minutes),
            id="ingestion_job",
            replace_existing=True
        )
        self.scheduler.start()
        logger.info(f"Ingestion scheduler started (every {self.interval_minutes} minutes)")

    def stop(self):
        if self.scheduler.running:
            self.scheduler.shutdown()
        logger.info("Ingestion scheduler stopped")
