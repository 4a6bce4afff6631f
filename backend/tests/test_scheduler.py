"""
Unit Tests for the live-scores warmup scheduler
"""

import asyncio

from src.domain.exceptions import UpstreamFetchException
from src.scheduler import LiveWarmupScheduler


class StubSource:
    def __init__(self, payload=None, error=None):
        self.payload = payload
        self.error = error
        self.calls = 0

    async def refresh_live_scores(self):
        self.calls += 1
        if self.error:
            raise self.error
        return self.payload


def test_warmup_counts_fixtures(raw_fixture):
    source = StubSource(payload={"1001": raw_fixture, "1002": raw_fixture})
    scheduler = LiveWarmupScheduler(source, interval_seconds=15)

    assert asyncio.run(scheduler.run_warmup_job()) == 2
    assert source.calls == 1


def test_warmup_failure_is_logged_not_raised():
    source = StubSource(error=UpstreamFetchException("feed down"))
    scheduler = LiveWarmupScheduler(source)

    assert asyncio.run(scheduler.run_warmup_job()) is None
    # The in-progress flag is released after a failure
    assert scheduler._job_in_progress is False


def test_overlapping_run_is_skipped():
    source = StubSource(payload=[])
    scheduler = LiveWarmupScheduler(source)
    scheduler._job_in_progress = True

    assert asyncio.run(scheduler.run_warmup_job()) is None
    assert source.calls == 0


def test_shutdown_before_start_is_noop():
    scheduler = LiveWarmupScheduler(StubSource(payload=[]))
    scheduler.shutdown()
    assert not scheduler.scheduler.running
