# pyright: reportMissingTypeStubs=false
"""
Post Retention Sweeper

A long-running maintenance process that deletes expired posts and their
video files once a day at 02:00 UTC.

Features:
- APScheduler cron trigger
- Firebase Realtime Database and Cloud Storage via firebase-admin
"""

import asyncio
import logging
import signal

from core.config import LOG_LEVEL
from services.retention_scheduler import start_retention_scheduler, stop_retention_scheduler

# Configure logging
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler()],
)

logger = logging.getLogger(__name__)


async def run() -> None:
    """Start the scheduler and block until SIGINT/SIGTERM."""
    logger.info("🚀 Starting Post Retention Sweeper")

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except NotImplementedError:
            # Windows event loops don't support signal handlers
            pass

    await start_retention_scheduler()
    logger.info("✅ Retention scheduler started")

    try:
        await stop_event.wait()
    finally:
        await stop_retention_scheduler()
        logger.info("🛑 Shutting down Post Retention Sweeper")


def main() -> None:
    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
