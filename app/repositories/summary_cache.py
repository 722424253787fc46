"""
Repository layer for managing SummaryCacheModel data.
"""
from datetime import datetime
from typing import Optional

from loguru import logger
from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import CacheUnavailableError
from app.core.providers.cache_store import SummaryCacheStore
from app.core.timestamps import ensure_utc, utc_now
from app.models.sql import SummaryCacheModel
from app.models.summary import CacheEntry


class SummaryCacheRepository(SummaryCacheStore):
    """
    Database-backed summary cache.

    Expired rows are invisible to reads and are physically removed by
    purge_expired (run periodically by the CacheJanitor).
    """

    def __init__(self, db: AsyncSession, ttl_days: int = 90) -> None:
        """
        Initialize the SummaryCacheRepository.

        Args:
            db: Async database session.
            ttl_days: Lifetime of an entry after its last write or hit.
        """
        super().__init__(ttl_days=ttl_days)
        self.db = db

    async def get(self, fingerprint: str) -> Optional[CacheEntry]:
        """
        Retrieve an unexpired cache entry by fingerprint.

        Args:
            fingerprint: SHA-256 hex of the source URL.

        Returns:
            The CacheEntry if found, None otherwise.
        """
        logger.debug(f"Checking cache for summary {fingerprint[:12]}")
        query = select(SummaryCacheModel).where(SummaryCacheModel.url_hash == fingerprint)
        try:
            result = await self.db.execute(query)
            row = result.scalars().first()
            entry = self._to_entry(row) if row is not None else None
            # Release the connection; the backend call that follows can take minutes
            await self.db.rollback()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise CacheUnavailableError(f"Cache read failed: {e}") from e

        if entry is None:
            return None
        if entry.expires_at <= utc_now():
            return None
        return entry

    async def put(
        self,
        fingerprint: str,
        source_url: str,
        freshness_timestamp: Optional[datetime],
        summary: Optional[str],
    ) -> None:
        """
        Insert or overwrite the cache entry for a fingerprint.

        Args:
            fingerprint: SHA-256 hex of the source URL.
            source_url: The exact source URL.
            freshness_timestamp: Last-modified instant of the source.
            summary: The Markdown summary.
        """
        if freshness_timestamp is None:
            logger.warning("Freshness timestamp is missing. Not caching the summary.")
            return
        if not summary:
            logger.warning("Summary is empty. Not caching the summary.")
            return

        logger.info(f"Caching summary for {source_url}")
        row = SummaryCacheModel(
            url_hash=fingerprint,
            url=source_url,
            last_modified=ensure_utc(freshness_timestamp),
            summary=summary,
            expire_at=self.next_expiry(),
        )
        try:
            await self.db.merge(row)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise CacheUnavailableError(f"Cache write failed: {e}") from e

    async def refresh_expiry(self, fingerprint: str) -> None:
        """
        Push back the expiry of an existing entry.

        Args:
            fingerprint: SHA-256 hex of the source URL.
        """
        logger.debug(f"Updating cache expiry for {fingerprint[:12]}")
        query = (
            update(SummaryCacheModel)
            .where(SummaryCacheModel.url_hash == fingerprint)
            .values(expire_at=self.next_expiry())
        )
        try:
            result = await self.db.execute(query)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise CacheUnavailableError(f"Cache expiry update failed: {e}") from e

        if not result.rowcount:
            logger.debug(f"No cache entry {fingerprint[:12]} to refresh")

    async def purge_expired(self) -> int:
        """
        Delete all expired entries (cleanup task).

        Returns:
            Number of entries deleted.
        """
        query = delete(SummaryCacheModel).where(SummaryCacheModel.expire_at <= utc_now())
        try:
            result = await self.db.execute(query)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise CacheUnavailableError(f"Cache purge failed: {e}") from e
        return result.rowcount or 0

    @staticmethod
    def _to_entry(row: SummaryCacheModel) -> CacheEntry:
        # SQLite drops tzinfo on the way back; PostgreSQL keeps it
        return CacheEntry(
            fingerprint=row.url_hash,
            source_url=row.url,
            freshness_timestamp=ensure_utc(row.last_modified),
            summary=row.summary,
            expires_at=ensure_utc(row.expire_at),
        )
