"""
Pipeline controller tying the summary cache to the summarization backend.

Per request:

    Start -> CacheCheck -> {HitFresh, HitStale, Miss}
          -> Summarize (stale/miss) -> Persist -> Done
    any backend failure -> Failed (error propagated, nothing written)
"""
from datetime import datetime
from typing import Optional

from loguru import logger

from app.core.cache import fingerprint
from app.core.exceptions import CacheUnavailableError, InvalidInputError
from app.core.providers.cache_store import SummaryCacheStore
from app.core.timestamps import ensure_utc
from app.models.enums import CacheStatus
from app.models.summary import CacheEntry, SummarizationRequest
from app.services.summarization import SummarizationService
from app.services.youtube import VideoMetadataService


class SummaryPipeline:
    """
    Serves summaries from the cache while the source is unchanged and
    recomputes them otherwise.

    A cached summary is fresh when its freshness timestamp is at or after the
    request's (ties go to the cache). Cache failures never fail a request: a
    failed read counts as a miss, a failed write or expiry refresh is logged.
    """

    def __init__(
        self,
        cache_store: SummaryCacheStore,
        summarization_service: SummarizationService,
        video_metadata_service: VideoMetadataService,
    ):
        """
        Initialize the pipeline.

        Args:
            cache_store: Persistent summary cache.
            summarization_service: Orchestrator for backend calls.
            video_metadata_service: Resolves freshness for videos without one.
        """
        self.cache_store = cache_store
        self.summarization_service = summarization_service
        self.video_metadata_service = video_metadata_service

    async def run(self, request: SummarizationRequest) -> str:
        """
        Return a summary for the request, from cache or freshly computed.

        Args:
            request: Source URL, optional freshness timestamp and payload.

        Returns:
            The summary as Markdown text.

        Raises:
            InvalidInputError: Missing URL or unresolvable video timestamp.
            ExhaustedRetriesError: Backend kept failing transiently.
            PermanentBackendError: Backend failed permanently.
        """
        if not request.source_url:
            raise InvalidInputError("Source URL is missing.")
        logger.info(f"Got the following URL for summarization: {request.source_url}")

        freshness = await self._resolve_freshness(request)
        key = fingerprint(request.source_url)

        if freshness is None:
            logger.info("No freshness timestamp for this page. Skipping the cache lookup.")
            status = CacheStatus.BYPASSED
        else:
            cached = await self._read_cache(key)
            status = self._classify(cached, freshness)
            if status == CacheStatus.HIT_FRESH:
                logger.info("Returning cached summary as the page has not changed since then")
                await self._refresh_expiry(key)
                return cached.summary  # type: ignore[union-attr]

        logger.info(f"Cache status {status.value}. Summarizing {request.payload.kind.value}.")
        summary = await self.summarization_service.summarize(request.payload)

        await self._write_cache(key, request.source_url, freshness, summary)
        return summary

    async def _resolve_freshness(self, request: SummarizationRequest) -> Optional[datetime]:
        if request.freshness_timestamp is not None:
            return ensure_utc(request.freshness_timestamp)

        if not request.payload.is_video:
            return None

        logger.info("No freshness timestamp supplied for a video. Looking up its publish date.")
        published_at = await self.video_metadata_service.get_published_at(request.source_url)
        if published_at is None:
            raise InvalidInputError("Could not determine when the video was published.")
        return ensure_utc(published_at)

    @staticmethod
    def _classify(cached: Optional[CacheEntry], freshness: datetime) -> CacheStatus:
        if cached is None:
            return CacheStatus.MISS
        if cached.freshness_timestamp >= freshness:
            return CacheStatus.HIT_FRESH
        return CacheStatus.HIT_STALE

    async def _read_cache(self, key: str) -> Optional[CacheEntry]:
        try:
            return await self.cache_store.get(key)
        except CacheUnavailableError as e:
            logger.warning(f"Cache read failed, recomputing the summary: {e}")
            return None

    async def _refresh_expiry(self, key: str) -> None:
        try:
            await self.cache_store.refresh_expiry(key)
        except CacheUnavailableError as e:
            logger.warning(f"Could not extend cache expiry: {e}")

    async def _write_cache(
        self, key: str, source_url: str, freshness: Optional[datetime], summary: str
    ) -> None:
        try:
            await self.cache_store.put(key, source_url, freshness, summary)
        except CacheUnavailableError as e:
            logger.error(f"Summary computed but not cached: {e}")
