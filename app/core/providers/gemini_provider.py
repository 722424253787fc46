"""
Google Gemini implementation of LLMProvider.

This module provides a vendor-specific implementation for the Gemini API
while conforming to the LLMProvider interface.
"""
from typing import Any, Optional

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions
from loguru import logger
from pydantic import ValidationError

from app.core.prompts import SummarizationPrompts
from app.core.providers.llm_provider import (
    LLMProvider,
    LLMResponse,
    MalformedResponseError,
    ProviderError,
    StructuredSummary,
)
from app.models.summary import SummaryPayload


# {"summary": "<markdown>"} and nothing else
SUMMARY_RESPONSE_SCHEMA = genai.protos.Schema(
    type=genai.protos.Type.OBJECT,
    properties={
        "summary": genai.protos.Schema(
            type=genai.protos.Type.STRING,
            description="Summary in Markdown format",
            nullable=False,
        ),
    },
    required=["summary"],
)


class GeminiProvider(LLMProvider):
    """
    Google Gemini implementation of LLMProvider.

    Uses the google-generativeai SDK with a JSON response schema so the reply
    is a single `summary` field. Web pages are sent inline as PDF bytes;
    YouTube videos are passed by URL and fetched by Gemini itself.

    Example:
        provider = GeminiProvider(
            api_key="your-api-key",
            model_name="gemini-2.0-flash",
        )
        response = await provider.generate_summary(payload)
    """

    def __init__(
        self,
        api_key: str,
        model_name: str = "gemini-2.0-flash",
        timeout_seconds: float = 840.0,
    ):
        """
        Initialize the Gemini provider.

        Args:
            api_key: Google AI API key.
            model_name: Gemini model to use (e.g., "gemini-2.0-flash").
            timeout_seconds: Deadline for a single generate_content call.
        """
        genai.configure(api_key=api_key)
        self.model_name = model_name
        self.timeout_seconds = timeout_seconds
        self._model = genai.GenerativeModel(model_name)

    async def generate_summary(
        self,
        payload: SummaryPayload,
        temperature: float = 0.3,
    ) -> LLMResponse:
        """Summarize a PDF document or a YouTube video with one Gemini call."""
        config = genai.GenerationConfig(
            temperature=temperature,
            response_mime_type="application/json",
            response_schema=SUMMARY_RESPONSE_SCHEMA,
        )

        logger.debug(f"Sending {payload.kind.value} to Gemini ({self.model_name})")
        try:
            response = await self._model.generate_content_async(
                self._build_contents(payload),
                generation_config=config,
                request_options={"timeout": self.timeout_seconds},
            )
        except google_exceptions.GoogleAPICallError as e:
            status_code = int(e.code) if e.code is not None else None
            raise ProviderError(f"Gemini request failed: {e}", status_code=status_code) from e
        except (google_exceptions.GoogleAPIError, TimeoutError) as e:
            # SDK-side retry exhaustion and transport timeouts carry no status
            raise ProviderError(f"Gemini request failed: {e!r}") from e

        usage = None
        if response.usage_metadata:
            usage = {
                "prompt_tokens": response.usage_metadata.prompt_token_count,
                "completion_tokens": response.usage_metadata.candidates_token_count,
                "total_tokens": response.usage_metadata.total_token_count,
            }
            logger.info(f"Gemini token usage: {usage}")

        return LLMResponse(
            content=self._parse_summary(response),
            model=self.model_name,
            usage=usage,
        )

    def _build_contents(self, payload: SummaryPayload) -> list[Any]:
        """Order matters: Gemini reads the video before the prompt, the prompt before the PDF."""
        if payload.is_video:
            return [
                genai.protos.Part(file_data=genai.protos.FileData(file_uri=payload.video_url)),
                SummarizationPrompts.VIDEO,
            ]
        return [
            SummarizationPrompts.WEB_PAGE,
            {"mime_type": "application/pdf", "data": payload.document},
        ]

    @staticmethod
    def _parse_summary(response: Any) -> str:
        """
        Extract the `summary` field from a structured reply.

        Raises:
            MalformedResponseError: Blocked/empty candidates or non-conforming JSON.
        """
        try:
            text: Optional[str] = response.text
        except ValueError as e:
            # Raised by the SDK when no candidate carries text (e.g. safety block)
            raise MalformedResponseError(f"Gemini returned no text: {e}") from e

        try:
            return StructuredSummary.model_validate_json(text or "").summary
        except ValidationError as e:
            raise MalformedResponseError(
                f"Gemini reply is not a structured summary: {e.error_count()} validation error(s)"
            ) from e
