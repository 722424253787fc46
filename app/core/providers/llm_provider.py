"""
Abstract base class for summarization backends.

This module defines a vendor-neutral interface for generative models that
turn a document or a video into a Markdown summary. Concrete implementations
(Gemini) must implement this interface and report failures as ProviderError.
"""
from abc import ABC, abstractmethod
from typing import Optional

from pydantic import BaseModel, ConfigDict

from app.core.constants import RetryConfig
from app.models.summary import SummaryPayload


class StructuredSummary(BaseModel):
    """The only shape a backend reply may take."""

    summary: str

    model_config = ConfigDict(extra="forbid")


class LLMResponse(BaseModel):
    """Standardized response from a summarization provider."""

    content: str
    model: str
    usage: Optional[dict[str, int]] = None

    model_config = ConfigDict(frozen=True)


class ProviderError(Exception):
    """
    A backend call failed.

    Attributes:
        status_code: HTTP-style status reported by the backend, if any.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)

    @property
    def is_transient(self) -> bool:
        """Whether retrying the same call may succeed."""
        return self.status_code in RetryConfig.TRANSIENT_STATUS_CODES


class MalformedResponseError(ProviderError):
    """The backend answered but the reply is not a StructuredSummary."""


class LLMProvider(ABC):
    """
    Abstract interface for summarization providers.

    Implementations must provide:
    - generate_summary: One backend call returning the parsed summary

    Example:
        provider = GeminiProvider(api_key="...", model_name="gemini-2.0-flash")
        response = await provider.generate_summary(SummaryPayload.for_video(url))
        print(response.content)
    """

    @abstractmethod
    async def generate_summary(
        self,
        payload: SummaryPayload,
        temperature: float = 0.3,
    ) -> LLMResponse:
        """
        Summarize a document or video in a single backend call.

        Args:
            payload: The document bytes or video URL.
            temperature: Sampling temperature (0.0-1.0).

        Returns:
            LLMResponse whose content is the `summary` field of the reply.

        Raises:
            ProviderError: The backend reported a failure.
            MalformedResponseError: The reply could not be parsed.
        """
        ...
