"""
Provider abstraction layer for the summarization backend and the summary cache.
"""
from app.core.providers.llm_provider import (
    LLMProvider,
    LLMResponse,
    ProviderError,
    MalformedResponseError,
    StructuredSummary,
)
from app.core.providers.cache_store import (
    SummaryCacheStore,
)

__all__ = [
    # LLM
    "LLMProvider",
    "LLMResponse",
    "ProviderError",
    "MalformedResponseError",
    "StructuredSummary",
    # Cache
    "SummaryCacheStore",
]
