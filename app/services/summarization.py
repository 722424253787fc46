"""
Summarization orchestrator for web pages and YouTube videos.

This module provides the SummarizationService class that wraps a single
backend call in a bounded retry loop:

1. Transient backend failures (rate limiting, overload, gateway timeouts) are
   retried with a linear backoff of `attempt x backoff_seconds`.
2. Any other failure, including a reply that does not match the structured
   summary schema, is surfaced immediately as a PermanentBackendError.
3. Running out of attempts yields an ExhaustedRetriesError that hints at the
   most likely cause (oversized page vs. overlong video).
"""
import asyncio
from typing import Awaitable, Callable

from loguru import logger
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception,
    stop_after_attempt,
    wait_incrementing,
)

from app.core.constants import SummaryLimitConfig
from app.core.exceptions import ExhaustedRetriesError, PermanentBackendError
from app.core.providers.llm_provider import LLMProvider, MalformedResponseError, ProviderError
from app.models.summary import SummaryPayload


def is_transient_failure(exc: BaseException) -> bool:
    """Retry predicate: only backend errors with a transient status code."""
    return isinstance(exc, ProviderError) and exc.is_transient


class SummarizationService:
    """
    Turns a document or video payload into a Markdown summary.

    Holds no state between calls; each summarize() builds its own retry
    controller, so concurrent calls are independent.

    Attributes:
        max_retries: Total number of backend attempts per summary.
        backoff_seconds: Unit of the linear backoff between attempts.
    """

    def __init__(
        self,
        llm_provider: LLMProvider,
        max_retries: int = 3,
        backoff_seconds: float = 1.0,
        temperature: float = 0.3,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Initialize the summarization service.

        Args:
            llm_provider: Backend used for the actual summarization call.
            max_retries: Total attempts before giving up on transient failures.
            backoff_seconds: Delay after the first failure; grows linearly.
            temperature: Sampling temperature forwarded to the backend.
            sleep: Awaitable used between attempts (replaceable in tests).
        """
        self.llm_provider = llm_provider
        self.max_retries = max_retries
        self.backoff_seconds = backoff_seconds
        self.temperature = temperature
        self._sleep = sleep

    async def summarize(self, payload: SummaryPayload) -> str:
        """
        Summarize a payload, retrying transient backend failures.

        Args:
            payload: The document bytes or video URL to summarize.

        Returns:
            The summary as Markdown text.

        Raises:
            ExhaustedRetriesError: Every attempt failed transiently.
            PermanentBackendError: Non-transient failure, malformed reply or empty summary.
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_incrementing(start=self.backoff_seconds, increment=self.backoff_seconds),
            retry=retry_if_exception(is_transient_failure),
            before_sleep=self._log_retry,
            sleep=self._sleep,
        )

        try:
            response = await retrying(
                self.llm_provider.generate_summary,
                payload,
                temperature=self.temperature,
            )
        except RetryError as e:
            cause = e.last_attempt.exception()
            logger.error(f"generateContent attempt {self.max_retries} failed: {cause}")
            raise ExhaustedRetriesError(
                self._exhausted_message(payload), attempts=self.max_retries
            ) from cause
        except MalformedResponseError as e:
            logger.error(f"Unusable reply from summarization backend: {e}")
            raise PermanentBackendError(str(e)) from e
        except ProviderError as e:
            logger.error(f"Summarization backend failed with status {e.status_code}: {e}")
            raise PermanentBackendError(str(e), backend_status=e.status_code) from e

        if not response.content.strip():
            raise PermanentBackendError(
                "There was an issue with generating the summary. Try again later."
            )

        return response.content

    def _exhausted_message(self, payload: SummaryPayload) -> str:
        if payload.is_video:
            return (
                f"Failed to summarize video even after {self.max_retries} attempts. "
                f"{SummaryLimitConfig.VIDEO_HINT}"
            )
        return (
            f"Failed to summarize web page even after {self.max_retries} attempts. "
            f"{SummaryLimitConfig.WEB_PAGE_HINT}"
        )

    def _log_retry(self, retry_state: RetryCallState) -> None:
        attempt = retry_state.attempt_number
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(f"generateContent attempt {attempt} failed: {exc}")
        logger.info(f"Retrying... ({attempt}/{self.max_retries})")
