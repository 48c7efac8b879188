import pytest
from unittest.mock import AsyncMock, Mock
from ingestion.runner import IngestionSummary
from ingestion.scheduler import IngestionScheduler


def test_scheduler_initialization():
    scheduler = IngestionScheduler(Mock(), count=5, interval_minutes=15)
    assert scheduler.scheduler is not None
    assert scheduler.count == 5
    assert scheduler.interval_minutes == 15


@pytest.mark.asyncio
async def test_scheduler_job_execution():
    runner = Mock()
    runner.run = AsyncMock(return_value=IngestionSummary(attempted=5, succeeded=4))

    scheduler = IngestionScheduler(runner, count=5)
    await scheduler.run_ingestion_job()

    runner.run.assert_awaited_once_with(5)


@pytest.mark.asyncio
async def test_scheduler_job_survives_runner_error():
    runner = Mock()
    runner.run = AsyncMock(side_effect=RuntimeError("database down"))

    scheduler = IngestionScheduler(runner, count=3)

    # Must not raise into APScheduler
    await scheduler.run_ingestion_job()

    runner.run.assert_awaited_once_with(3)


@pytest.mark.asyncio
async def test_scheduler_start_registers_job():
    scheduler = IngestionScheduler(Mock(), count=1, interval_minutes=10)

    scheduler.start()
    try:
        job = scheduler.scheduler.get_job("ingestion_job")
        assert job is not None
    finally:
        scheduler.stop()
