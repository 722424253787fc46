"""
Summary cache keys and the in-process cache backend.
"""
import hashlib
import time
from datetime import datetime
from typing import Optional

from cachetools import TLRUCache
from loguru import logger

from app.core.exceptions import InvalidInputError
from app.core.providers.cache_store import SummaryCacheStore
from app.core.timestamps import ensure_utc
from app.models.summary import CacheEntry


def fingerprint(source_url: str) -> str:
    """
    Generate a cache key from a URL.

    The exact string is hashed: trailing slashes, query order and case
    all produce different keys.
    """
    if not source_url:
        raise InvalidInputError("Source URL is missing.")
    return hashlib.sha256(source_url.encode("utf-8")).hexdigest()


def _entry_deadline(_key: str, entry: CacheEntry, _now: float) -> float:
    return entry.expires_at.timestamp()


class InMemorySummaryCache(SummaryCacheStore):
    """
    Process-local summary cache with per-entry expiry.

    Entries vanish once their expires_at passes, like the database backend's
    purged rows. Content is lost on restart; meant for local development
    and tests.
    """

    def __init__(self, ttl_days: int = 90, maxsize: int = 1000):
        super().__init__(ttl_days=ttl_days)
        self._entries: TLRUCache[str, CacheEntry] = TLRUCache(
            maxsize=maxsize, ttu=_entry_deadline, timer=time.time
        )

    async def get(self, fingerprint: str) -> Optional[CacheEntry]:
        return self._entries.get(fingerprint)

    async def put(
        self,
        fingerprint: str,
        source_url: str,
        freshness_timestamp: Optional[datetime],
        summary: Optional[str],
    ) -> None:
        if freshness_timestamp is None:
            logger.warning("Freshness timestamp is missing. Not caching the summary.")
            return
        if not summary:
            logger.warning("Summary is empty. Not caching the summary.")
            return

        logger.info(f"Caching summary for {source_url}")
        self._entries[fingerprint] = CacheEntry(
            fingerprint=fingerprint,
            source_url=source_url,
            freshness_timestamp=ensure_utc(freshness_timestamp),
            summary=summary,
            expires_at=self.next_expiry(),
        )

    async def refresh_expiry(self, fingerprint: str) -> None:
        entry = self._entries.get(fingerprint)
        if entry is None:
            logger.debug(f"No cache entry {fingerprint[:12]} to refresh")
            return
        self._entries[fingerprint] = entry.model_copy(update={"expires_at": self.next_expiry()})

    async def purge_expired(self) -> int:
        before = len(self._entries)
        self._entries.expire()
        return before - len(self._entries)
