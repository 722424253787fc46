"""
Abstract base class for summary cache stores.

This module defines a backend-neutral interface for the persistent summary
cache. Concrete implementations (SQL database, in-process memory) must
implement this interface.
"""
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Optional

from app.core.timestamps import utc_now
from app.models.summary import CacheEntry


class SummaryCacheStore(ABC):
    """
    Abstract interface for summary cache stores keyed by URL fingerprint.

    Implementations must provide:
    - get: Read an unexpired entry
    - put: Create or overwrite an entry and reset its expiry
    - refresh_expiry: Push back the expiry of an existing entry
    - purge_expired: Physically drop entries whose expiry has passed

    Store failures are raised as CacheUnavailableError.

    Example:
        store = SummaryCacheRepository(db=session)
        await store.put(key, url, last_modified, "# Title")
        entry = await store.get(key)
    """

    def __init__(self, ttl_days: int = 90):
        """
        Args:
            ttl_days: Lifetime of an entry after its last write or hit.
        """
        self.ttl = timedelta(days=ttl_days)

    def next_expiry(self) -> datetime:
        """Expiry instant for an entry written or hit right now."""
        return utc_now() + self.ttl

    @abstractmethod
    async def get(self, fingerprint: str) -> Optional[CacheEntry]:
        """
        Retrieve the cached summary for a fingerprint.

        Args:
            fingerprint: The cache key.

        Returns:
            The entry if present and unexpired, None otherwise.
        """
        ...

    @abstractmethod
    async def put(
        self,
        fingerprint: str,
        source_url: str,
        freshness_timestamp: Optional[datetime],
        summary: Optional[str],
    ) -> None:
        """
        Store a summary, overwriting any existing entry.

        A missing freshness timestamp or empty summary makes the call a
        logged no-op: such an entry could never be invalidated correctly.

        Args:
            fingerprint: The cache key.
            source_url: The exact source URL.
            freshness_timestamp: When the source was last modified.
            summary: The Markdown summary.
        """
        ...

    @abstractmethod
    async def refresh_expiry(self, fingerprint: str) -> None:
        """
        Extend the expiry of an existing entry, leaving its content untouched.

        Args:
            fingerprint: The cache key. Unknown keys are ignored.
        """
        ...

    @abstractmethod
    async def purge_expired(self) -> int:
        """
        Remove entries whose expiry has passed.

        Returns:
            Number of entries removed.
        """
        ...
