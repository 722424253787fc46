"""
Tests for the cache-aware summary pipeline.
"""
from datetime import datetime, timedelta, timezone

import pytest
from unittest.mock import AsyncMock

from app.core.cache import fingerprint
from app.core.exceptions import (
    CacheUnavailableError,
    ExhaustedRetriesError,
    InvalidInputError,
    PermanentBackendError,
)
from app.core.providers.cache_store import SummaryCacheStore
from app.core.providers.llm_provider import ProviderError
from app.core.timestamps import utc_now
from app.models.summary import CacheEntry, SummarizationRequest, SummaryPayload
from app.services.pipeline import SummaryPipeline
from tests.utils.payloads import SAMPLE_SUMMARY

DOC_URL = "https://a.example/doc"
VIDEO_URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
JAN_1 = datetime(2024, 1, 1, tzinfo=timezone.utc)
JUN_1 = datetime(2024, 6, 1, tzinfo=timezone.utc)


def document_request(freshness=JAN_1, url=DOC_URL):
    return SummarizationRequest(
        source_url=url,
        freshness_timestamp=freshness,
        payload=SummaryPayload.for_document(b"%PDF-1.7 page"),
    )


def video_request(freshness=None):
    return SummarizationRequest(
        source_url=VIDEO_URL,
        freshness_timestamp=freshness,
        payload=SummaryPayload.for_video(VIDEO_URL),
    )


def seed_entry(cache, url, freshness, summary, expires_in=timedelta(days=1)):
    """Place an entry directly, with an expiry we can tell apart from a refreshed one."""
    key = fingerprint(url)
    cache._entries[key] = CacheEntry(
        fingerprint=key,
        source_url=url,
        freshness_timestamp=freshness,
        summary=summary,
        expires_at=utc_now() + expires_in,
    )
    return key


def assert_about_90_days_out(instant):
    assert abs(instant - (utc_now() + timedelta(days=90))) < timedelta(minutes=1)


@pytest.mark.asyncio
async def test_miss_summarizes_and_caches(pipeline, memory_cache, mock_llm_provider):
    """No entry: backend called once, summary returned and persisted for 90 days."""
    result = await pipeline.run(document_request())

    assert result == SAMPLE_SUMMARY
    mock_llm_provider.generate_summary.assert_awaited_once()

    entry = await memory_cache.get(fingerprint(DOC_URL))
    assert entry is not None
    assert entry.summary == SAMPLE_SUMMARY
    assert entry.source_url == DOC_URL
    assert entry.freshness_timestamp == JAN_1
    assert_about_90_days_out(entry.expires_at)


@pytest.mark.asyncio
async def test_equal_timestamp_serves_cache_and_extends_expiry(pipeline, memory_cache, mock_llm_provider):
    """Ties go to the cache: backend untouched, expiry pushed back, content kept."""
    key = seed_entry(memory_cache, DOC_URL, JAN_1, "# Cached")

    result = await pipeline.run(document_request(freshness=JAN_1))

    assert result == "# Cached"
    mock_llm_provider.generate_summary.assert_not_awaited()
    entry = await memory_cache.get(key)
    assert entry.summary == "# Cached"
    assert entry.freshness_timestamp == JAN_1
    assert_about_90_days_out(entry.expires_at)


@pytest.mark.asyncio
async def test_newer_cached_timestamp_serves_cache(pipeline, memory_cache, mock_llm_provider):
    seed_entry(memory_cache, DOC_URL, JUN_1, "# Cached")

    result = await pipeline.run(document_request(freshness=JAN_1))

    assert result == "# Cached"
    mock_llm_provider.generate_summary.assert_not_awaited()


@pytest.mark.asyncio
async def test_stale_entry_is_recomputed_and_overwritten(pipeline, memory_cache, mock_llm_provider):
    """Source changed since the cached summary: recompute and overwrite."""
    key = seed_entry(memory_cache, DOC_URL, JAN_1, "# Old")

    result = await pipeline.run(document_request(freshness=JUN_1))

    assert result == SAMPLE_SUMMARY
    mock_llm_provider.generate_summary.assert_awaited_once()
    entry = await memory_cache.get(key)
    assert entry.summary == SAMPLE_SUMMARY
    assert entry.freshness_timestamp == JUN_1
    assert_about_90_days_out(entry.expires_at)


@pytest.mark.asyncio
async def test_urls_differing_only_by_trailing_slash_are_separate(pipeline, memory_cache, mock_llm_provider):
    seed_entry(memory_cache, DOC_URL, JUN_1, "# Cached")

    result = await pipeline.run(document_request(url=DOC_URL + "/"))

    assert result == SAMPLE_SUMMARY
    mock_llm_provider.generate_summary.assert_awaited_once()


@pytest.mark.asyncio
async def test_backend_failure_writes_nothing(pipeline, memory_cache, mock_llm_provider):
    mock_llm_provider.generate_summary.side_effect = ProviderError("not found", status_code=404)

    with pytest.raises(PermanentBackendError):
        await pipeline.run(document_request())

    assert await memory_cache.get(fingerprint(DOC_URL)) is None


@pytest.mark.asyncio
async def test_exhausted_retries_propagate_and_keep_stale_entry(pipeline, memory_cache, mock_llm_provider):
    key = seed_entry(memory_cache, DOC_URL, JAN_1, "# Old")
    mock_llm_provider.generate_summary.side_effect = ProviderError("overloaded", status_code=503)

    with pytest.raises(ExhaustedRetriesError):
        await pipeline.run(document_request(freshness=JUN_1))

    assert mock_llm_provider.generate_summary.await_count == 3
    entry = await memory_cache.get(key)
    assert entry.summary == "# Old"
    assert entry.freshness_timestamp == JAN_1


@pytest.mark.asyncio
async def test_video_without_timestamp_uses_publish_date(
    pipeline, memory_cache, mock_llm_provider, mock_video_metadata_service
):
    mock_video_metadata_service.get_published_at.return_value = JUN_1

    result = await pipeline.run(video_request())

    assert result == SAMPLE_SUMMARY
    mock_video_metadata_service.get_published_at.assert_awaited_once_with(VIDEO_URL)
    sent_payload = mock_llm_provider.generate_summary.call_args.args[0]
    assert sent_payload.is_video
    assert sent_payload.video_url == VIDEO_URL
    entry = await memory_cache.get(fingerprint(VIDEO_URL))
    assert entry.freshness_timestamp == JUN_1


@pytest.mark.asyncio
async def test_cached_video_is_served_after_metadata_lookup(
    pipeline, memory_cache, mock_llm_provider, mock_video_metadata_service
):
    seed_entry(memory_cache, VIDEO_URL, JUN_1, "# Cached video")
    mock_video_metadata_service.get_published_at.return_value = JUN_1

    result = await pipeline.run(video_request())

    assert result == "# Cached video"
    mock_llm_provider.generate_summary.assert_not_awaited()


@pytest.mark.asyncio
async def test_video_with_explicit_timestamp_skips_lookup(
    pipeline, mock_video_metadata_service
):
    await pipeline.run(video_request(freshness=JAN_1))

    mock_video_metadata_service.get_published_at.assert_not_awaited()


@pytest.mark.asyncio
async def test_unresolvable_video_timestamp_is_fatal(
    pipeline, memory_cache, mock_llm_provider, mock_video_metadata_service
):
    mock_video_metadata_service.get_published_at.side_effect = InvalidInputError("Invalid YouTube URL")

    with pytest.raises(InvalidInputError):
        await pipeline.run(video_request())

    mock_llm_provider.generate_summary.assert_not_awaited()
    assert await memory_cache.get(fingerprint(VIDEO_URL)) is None


@pytest.mark.asyncio
async def test_document_without_timestamp_bypasses_cache(summarization_service, mock_video_metadata_service):
    """Without a freshness anchor the summary is computed but never cached."""
    store = AsyncMock(spec=SummaryCacheStore)
    pipeline = SummaryPipeline(store, summarization_service, mock_video_metadata_service)

    result = await pipeline.run(document_request(freshness=None))

    assert result == SAMPLE_SUMMARY
    store.get.assert_not_awaited()
    store.put.assert_awaited_once_with(fingerprint(DOC_URL), DOC_URL, None, SAMPLE_SUMMARY)
    mock_video_metadata_service.get_published_at.assert_not_awaited()


@pytest.mark.asyncio
async def test_cache_read_failure_falls_through_to_backend(
    summarization_service, mock_llm_provider, mock_video_metadata_service
):
    store = AsyncMock(spec=SummaryCacheStore)
    store.get.side_effect = CacheUnavailableError("connection refused")
    pipeline = SummaryPipeline(store, summarization_service, mock_video_metadata_service)

    result = await pipeline.run(document_request())

    assert result == SAMPLE_SUMMARY
    mock_llm_provider.generate_summary.assert_awaited_once()
    store.refresh_expiry.assert_not_awaited()
    store.put.assert_awaited_once()


@pytest.mark.asyncio
async def test_cache_write_failure_still_returns_summary(
    summarization_service, mock_video_metadata_service
):
    store = AsyncMock(spec=SummaryCacheStore)
    store.get.return_value = None
    store.put.side_effect = CacheUnavailableError("disk full")
    pipeline = SummaryPipeline(store, summarization_service, mock_video_metadata_service)

    assert await pipeline.run(document_request()) == SAMPLE_SUMMARY


@pytest.mark.asyncio
async def test_expiry_refresh_failure_still_serves_hit(
    summarization_service, mock_llm_provider, mock_video_metadata_service
):
    key = fingerprint(DOC_URL)
    store = AsyncMock(spec=SummaryCacheStore)
    store.get.return_value = CacheEntry(
        fingerprint=key,
        source_url=DOC_URL,
        freshness_timestamp=JAN_1,
        summary="# Cached",
        expires_at=utc_now() + timedelta(days=3),
    )
    store.refresh_expiry.side_effect = CacheUnavailableError("timeout")
    pipeline = SummaryPipeline(store, summarization_service, mock_video_metadata_service)

    assert await pipeline.run(document_request()) == "# Cached"
    store.refresh_expiry.assert_awaited_once_with(key)
    mock_llm_provider.generate_summary.assert_not_awaited()
    store.put.assert_not_awaited()


@pytest.mark.asyncio
async def test_missing_source_url_is_invalid_input(pipeline, mock_llm_provider):
    with pytest.raises(InvalidInputError):
        await pipeline.run(document_request(url=""))

    mock_llm_provider.generate_summary.assert_not_awaited()


@pytest.mark.asyncio
async def test_naive_request_timestamp_is_treated_as_utc(pipeline, memory_cache, mock_llm_provider):
    seed_entry(memory_cache, DOC_URL, JAN_1, "# Cached")

    result = await pipeline.run(document_request(freshness=datetime(2024, 1, 1)))

    assert result == "# Cached"
    mock_llm_provider.generate_summary.assert_not_awaited()

