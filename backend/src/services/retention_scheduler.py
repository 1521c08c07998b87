"""
Retention scheduler for expired posts.

This scheduler runs daily at 2 AM UTC to delete posts older than the
retention window together with their video files (see RetentionSweeper).
"""

import logging
from typing import Optional
from apscheduler.schedulers.asyncio import AsyncIOScheduler  # type: ignore
from apscheduler.triggers.cron import CronTrigger  # type: ignore

from core.constants import (
    CLEANUP_CRON_EXPRESSION,
    CLEANUP_JOB_ID,
    CLEANUP_MISFIRE_GRACE_SECONDS,
    CLEANUP_TIMEZONE,
)
from core.firebase import get_blob_store, get_record_store
from services.retention_sweeper import RetentionSweeper
from shared_types.sweep import SweepResult

logger = logging.getLogger(__name__)

# Global singleton instance
_retention_scheduler: Optional['RetentionScheduler'] = None


class RetentionScheduler:
    """
    Scheduler for running the retention sweep.

    Runs daily at 2 AM UTC. Overlapping runs are not coordinated here;
    APScheduler skips a firing while the previous one is still running.
    """

    def __init__(self):
        self.scheduler = AsyncIOScheduler(timezone=CLEANUP_TIMEZONE)
        self._is_started = False

    async def start_scheduler(self) -> None:
        """
        Start the background scheduler for the retention sweep.

        This should be called during application startup.
        """
        if self._is_started:
            logger.warning("Retention scheduler is already started")
            return

        self.scheduler.add_job(  # type: ignore
            self._run_cleanup,
            CronTrigger.from_crontab(CLEANUP_CRON_EXPRESSION, timezone=CLEANUP_TIMEZONE),
            id=CLEANUP_JOB_ID,
            name="Delete expired posts",
            replace_existing=True,
            misfire_grace_time=CLEANUP_MISFIRE_GRACE_SECONDS,
        )

        self.scheduler.start()
        self._is_started = True
        logger.info(f"Retention scheduler started (cron '{CLEANUP_CRON_EXPRESSION}' UTC)")

    async def stop_scheduler(self) -> None:
        """
        Stop the background scheduler.

        This should be called during application shutdown.
        """
        if self._is_started:
            self.scheduler.shutdown(wait=True)
            self._is_started = False
            logger.info("Retention scheduler stopped")

    async def _run_cleanup(self) -> Optional[SweepResult]:
        """
        Run one retention sweep against the process-wide Firebase stores.

        This method is called by the scheduler daily at 2 AM UTC.
        """
        try:
            sweeper = RetentionSweeper(get_record_store(), get_blob_store())
            result = await sweeper.run_sweep()
        except Exception as e:
            # Don't re-raise - allow scheduler to continue
            logger.exception(f"❌ Error during scheduled retention sweep: {e}")
            return None

        logger.info(f"Retention sweep result: {result.to_dict()}")
        return result


def get_retention_scheduler() -> RetentionScheduler:
    """
    Get the global retention scheduler instance.

    Returns:
        RetentionScheduler: The global scheduler instance
    """
    global _retention_scheduler
    if _retention_scheduler is None:
        _retention_scheduler = RetentionScheduler()
    return _retention_scheduler


async def start_retention_scheduler() -> None:
    """Start the global retention scheduler."""
    scheduler = get_retention_scheduler()
    await scheduler.start_scheduler()


async def stop_retention_scheduler() -> None:
    """Stop the global retention scheduler."""
    global _retention_scheduler
    if _retention_scheduler:
        await _retention_scheduler.stop_scheduler()
