"""
Shared pytest fixtures and configuration.
"""
import pytest
from unittest.mock import AsyncMock

from app.main import app
from app.api.dependencies import get_summary_pipeline
from app.core.cache import InMemorySummaryCache
from app.core.providers.llm_provider import LLMProvider, LLMResponse
from app.services.pipeline import SummaryPipeline
from app.services.summarization import SummarizationService
from app.services.youtube import VideoMetadataService

from tests.utils.payloads import SAMPLE_SUMMARY


@pytest.fixture
def mock_pipeline():
    """Create a mock SummaryPipeline."""
    return AsyncMock(spec=SummaryPipeline)


@pytest.fixture
def override_dependencies(mock_pipeline):
    """Override FastAPI dependencies for testing."""
    def override_get_summary_pipeline():
        return mock_pipeline

    app.dependency_overrides[get_summary_pipeline] = override_get_summary_pipeline

    yield

    app.dependency_overrides.clear()


@pytest.fixture
def mock_llm_provider():
    provider = AsyncMock(spec=LLMProvider)
    provider.generate_summary.return_value = LLMResponse(content=SAMPLE_SUMMARY, model="test-model")
    return provider


@pytest.fixture
def mock_sleep():
    """Stand-in for asyncio.sleep so retry backoff costs no wall time."""
    return AsyncMock()


@pytest.fixture
def summarization_service(mock_llm_provider, mock_sleep):
    return SummarizationService(
        llm_provider=mock_llm_provider,
        max_retries=3,
        backoff_seconds=1.0,
        sleep=mock_sleep,
    )


@pytest.fixture
def memory_cache():
    return InMemorySummaryCache(ttl_days=90)


@pytest.fixture
def mock_video_metadata_service():
    return AsyncMock(spec=VideoMetadataService)


@pytest.fixture
def pipeline(memory_cache, summarization_service, mock_video_metadata_service):
    return SummaryPipeline(
        cache_store=memory_cache,
        summarization_service=summarization_service,
        video_metadata_service=mock_video_metadata_service,
    )
