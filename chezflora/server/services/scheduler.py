"""
Background publisher for scheduled blog posts.

Runs ``BlogService.publish_scheduled_posts`` on an APScheduler interval
trigger inside the application's event loop, each run with its own session.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from chezflora.core.monitoring import log_error

from .blog import BlogService

logger = logging.getLogger(__name__)

JOB_ID = "publish-scheduled-posts"


class BlogPublicationScheduler:
    """Owns the AsyncIOScheduler that publishes due posts."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession] | Callable, interval_seconds: int = 60):
        self.session_factory = session_factory
        self.interval_seconds = interval_seconds
        self.scheduler: Optional[AsyncIOScheduler] = None
        self.last_published = 0

    async def run_once(self) -> int:
        """Publish due posts once; errors are logged so the job keeps running."""
        try:
            async with self.session_factory() as session:
                self.last_published = await BlogService(session).publish_scheduled_posts()
        except Exception as e:
            logger.error(f"Scheduled post publication failed: {e}", exc_info=True)
            log_error(type(e).__name__, str(e), {"job": JOB_ID})
            return 0
        return self.last_published

    def start(self) -> None:
        if self.scheduler is not None and self.scheduler.running:
            return
        self.scheduler = AsyncIOScheduler(timezone="UTC")
        self.scheduler.add_job(
            self.run_once,
            trigger=IntervalTrigger(seconds=self.interval_seconds),
            id=JOB_ID,
            name="Publish scheduled blog posts",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        self.scheduler.start()
        logger.info(f"Blog publication scheduler started (every {self.interval_seconds}s)")

    def shutdown(self) -> None:
        if self.scheduler is not None and self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Blog publication scheduler stopped")
        self.scheduler = None

    @property
    def running(self) -> bool:
        return self.scheduler is not None and self.scheduler.running
