"""
Dependency injection factories for FastAPI.

This module provides factory functions for creating service instances
with proper dependency injection. Backends are selected based on config.
"""
from functools import lru_cache
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.cache import InMemorySummaryCache
from app.core.config import settings
from app.core.db import get_db_session

# Provider interfaces
from app.core.providers.cache_store import SummaryCacheStore
from app.core.providers.llm_provider import LLMProvider

# Backend type enums
from app.models.enums import SummaryCacheType

# Concrete providers
from app.core.providers.gemini_provider import GeminiProvider
from app.repositories.summary_cache import SummaryCacheRepository

# Services
from app.services.pipeline import SummaryPipeline
from app.services.summarization import SummarizationService
from app.services.youtube import VideoMetadataService


# =============================================================================
# PROVIDER FACTORIES
# =============================================================================

@lru_cache
def get_summary_llm_provider() -> LLMProvider:
    """Get the Gemini provider used for summarization."""
    return GeminiProvider(
        api_key=settings.GEMINI_API_KEY,
        model_name=settings.GEMINI_MODEL_NAME,
        timeout_seconds=settings.GEMINI_TIMEOUT_SECONDS,
    )


@lru_cache
def get_memory_cache_store() -> InMemorySummaryCache:
    """Process-wide in-memory cache (SUMMARY_CACHE_BACKEND=memory)."""
    return InMemorySummaryCache(
        ttl_days=settings.SUMMARY_CACHE_TTL_DAYS,
        maxsize=settings.SUMMARY_CACHE_MAX_ENTRIES,
    )


def get_summary_cache_store(
    db: AsyncSession = Depends(get_db_session),
) -> SummaryCacheStore:
    """
    Get the summary cache store.

    Default: database (configured in settings.SUMMARY_CACHE_BACKEND)
    """
    backend = settings.SUMMARY_CACHE_BACKEND

    if backend == SummaryCacheType.DATABASE:
        return SummaryCacheRepository(db, ttl_days=settings.SUMMARY_CACHE_TTL_DAYS)
    elif backend == SummaryCacheType.MEMORY:
        return get_memory_cache_store()
    else:
        raise ValueError(f"Unknown summary cache backend: {backend}")


# =============================================================================
# SERVICE FACTORIES
# =============================================================================

@lru_cache
def get_video_metadata_service() -> VideoMetadataService:
    """Get the YouTube metadata service (shared so its lookup cache is reused)."""
    return VideoMetadataService(cache_ttl_seconds=settings.VIDEO_METADATA_CACHE_TTL_SECONDS)


def get_summarization_service(
    llm_provider: LLMProvider = Depends(get_summary_llm_provider),
) -> SummarizationService:
    """Get the retrying summarization orchestrator."""
    return SummarizationService(
        llm_provider=llm_provider,
        max_retries=settings.MAX_RETRIES,
        backoff_seconds=settings.RETRY_BACKOFF_SECONDS,
        temperature=settings.GEMINI_TEMPERATURE,
    )


def get_summary_pipeline(
    cache_store: SummaryCacheStore = Depends(get_summary_cache_store),
    summarization_service: SummarizationService = Depends(get_summarization_service),
    video_metadata_service: VideoMetadataService = Depends(get_video_metadata_service),
) -> SummaryPipeline:
    """
    Get the summary pipeline.

    Wires together:
    - SummaryCacheStore for cached summaries
    - SummarizationService for backend calls with retries
    - VideoMetadataService for video freshness timestamps
    """
    return SummaryPipeline(
        cache_store=cache_store,
        summarization_service=summarization_service,
        video_metadata_service=video_metadata_service,
    )
