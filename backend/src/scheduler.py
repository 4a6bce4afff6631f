import logging
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from src.domain.exceptions import UpstreamFetchException
from src.infrastructure.data_sources.betmines import BetminesSource
from src.infrastructure.data_sources.feed_parser import iter_live_fixtures
from src.utils.time_utils import get_app_timezone

logger = logging.getLogger(__name__)


class LiveWarmupScheduler:
    """Keeps the live-score cache warm so API reads rarely wait on the feed."""

    JOB_ID = "live_scores_warmup"

    def __init__(self, source: BetminesSource, interval_seconds: int = 30):
        self.source = source
        self.interval_seconds = interval_seconds
        self.scheduler = AsyncIOScheduler(timezone=get_app_timezone())
        self._job_in_progress = False

    async def run_warmup_job(self) -> Optional[int]:
        """
        Refresh the cached live scores.

        Returns:
            Number of fixtures in the refreshed batch, or None when skipped or failed
        """
        if self._job_in_progress:
            logger.warning("Warmup already in progress, skipping scheduled run")
            return None

        try:
            self._job_in_progress = True
            payload = await self.source.refresh_live_scores()
            count = len(iter_live_fixtures(payload))
            logger.info(f"Live scores warmed: {count} fixtures")
            return count
        except UpstreamFetchException as e:
            logger.error(f"Live scores warmup failed: {e}")
            return None
        finally:
            self._job_in_progress = False

    def start(self):
        """Start the interval job."""
        self.scheduler.add_job(
            self.run_warmup_job,
            trigger=IntervalTrigger(seconds=self.interval_seconds),
            id=self.JOB_ID,
            name=f"Live scores warmup every {self.interval_seconds}s",
            replace_existing=True,
            max_instances=1,
        )
        self.scheduler.start()
        logger.info(f"Scheduler started. Live scores refresh every {self.interval_seconds}s")

    def shutdown(self):
        """Shutdown the scheduler gracefully."""
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Scheduler shutdown successfully")
