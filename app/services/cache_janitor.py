"""
Background worker purging expired summary cache entries.
"""
import asyncio
from typing import Optional

from loguru import logger

from app.core.config import settings
from app.core.db import get_db_session
from app.repositories.summary_cache import SummaryCacheRepository


class CacheJanitor:
    """
    Background worker that deletes expired rows from the summary cache.

    Runs as an asyncio task. Reads already ignore expired rows, so purging
    only reclaims space and can lag behind without affecting correctness.
    """

    def __init__(
        self,
        interval_seconds: int = 3600,
    ) -> None:
        """
        Initialize the CacheJanitor.

        Args:
            interval_seconds: Seconds between purge runs.
        """
        self.interval_seconds = interval_seconds
        self._running = False
        self._task: Optional[asyncio.Task] = None

    async def start(self) -> None:
        """Start the purge loop as a background task."""
        if self._running:
            logger.warning("CacheJanitor already running")
            return

        self._running = True
        self._task = asyncio.create_task(self._run_loop())
        logger.info("CacheJanitor started")

    async def stop(self) -> None:
        """Gracefully stop the worker."""
        if not self._running:
            return

        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        logger.info("CacheJanitor stopped")

    async def _run_loop(self) -> None:
        """Main worker loop."""
        while self._running:
            try:
                await self.purge_once()
            except Exception as e:
                logger.error(f"Error in cache janitor loop: {e}")

            await asyncio.sleep(self.interval_seconds)

    async def purge_once(self) -> int:
        """
        Run a single purge against the database.

        Returns:
            Number of expired entries removed.
        """
        removed = 0
        async for db in get_db_session():
            repository = SummaryCacheRepository(db, ttl_days=settings.SUMMARY_CACHE_TTL_DAYS)
            removed = await repository.purge_expired()
        if removed:
            logger.info(f"Purged {removed} expired cache entries")
        return removed


_janitor_instance: Optional[CacheJanitor] = None


def get_cache_janitor() -> CacheJanitor:
    """Get or create the singleton CacheJanitor instance."""
    global _janitor_instance
    if _janitor_instance is None:
        _janitor_instance = CacheJanitor(interval_seconds=settings.CACHE_PURGE_INTERVAL_SECONDS)
    return _janitor_instance
