"""
Tests for the Gemini provider's request building and reply parsing.
"""
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from google.api_core import exceptions as google_exceptions

from app.core.prompts import SummarizationPrompts
from app.core.providers.gemini_provider import GeminiProvider
from app.core.providers.llm_provider import MalformedResponseError, ProviderError
from app.models.summary import SummaryPayload


class BlockedResponse:
    usage_metadata = None

    @property
    def text(self):
        raise ValueError("The response was blocked")


def make_response(text, usage_metadata=None):
    return SimpleNamespace(text=text, usage_metadata=usage_metadata)


@pytest.fixture
def provider():
    provider = GeminiProvider(api_key="test-key", model_name="gemini-test")
    provider._model = SimpleNamespace(generate_content_async=AsyncMock())
    return provider


def test_document_contents_put_prompt_before_pdf(provider):
    contents = provider._build_contents(SummaryPayload.for_document(b"%PDF"))

    assert contents[0] == SummarizationPrompts.WEB_PAGE
    assert contents[1] == {"mime_type": "application/pdf", "data": b"%PDF"}


def test_video_contents_put_video_before_prompt(provider):
    contents = provider._build_contents(SummaryPayload.for_video("https://youtu.be/abc"))

    assert contents[0].file_data.file_uri == "https://youtu.be/abc"
    assert contents[1] == SummarizationPrompts.VIDEO


@pytest.mark.asyncio
async def test_generate_summary_returns_summary_field(provider):
    usage = SimpleNamespace(prompt_token_count=10, candidates_token_count=5, total_token_count=15)
    provider._model.generate_content_async.return_value = make_response(
        '{"summary": "# Title"}', usage_metadata=usage
    )

    response = await provider.generate_summary(SummaryPayload.for_document(b"%PDF"), temperature=0.3)

    assert response.content == "# Title"
    assert response.model == "gemini-test"
    assert response.usage == {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15}
    kwargs = provider._model.generate_content_async.await_args.kwargs
    assert kwargs["generation_config"].temperature == 0.3
    assert kwargs["generation_config"].response_mime_type == "application/json"
    assert kwargs["request_options"] == {"timeout": provider.timeout_seconds}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error, status",
    [
        (google_exceptions.TooManyRequests("slow down"), 429),
        (google_exceptions.ServiceUnavailable("overloaded"), 503),
        (google_exceptions.NotFound("no such model"), 404),
    ],
)
async def test_api_errors_carry_status(provider, error, status):
    provider._model.generate_content_async.side_effect = error

    with pytest.raises(ProviderError) as exc_info:
        await provider.generate_summary(SummaryPayload.for_video("https://youtu.be/abc"))

    assert exc_info.value.status_code == status
    assert exc_info.value.is_transient == (status != 404)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        google_exceptions.RetryError("Deadline of 840.0s exceeded", cause=None),
        TimeoutError("read timed out"),
    ],
)
async def test_statusless_sdk_failures_become_provider_errors(provider, error):
    provider._model.generate_content_async.side_effect = error

    with pytest.raises(ProviderError) as exc_info:
        await provider.generate_summary(SummaryPayload.for_document(b"%PDF"))

    assert exc_info.value.status_code is None
    assert not exc_info.value.is_transient


@pytest.mark.parametrize(
    "response",
    [
        make_response("not json"),
        make_response('{"text": "# Title"}'),
        make_response('{"summary": "# Title", "extra": 1}'),
        make_response(""),
        BlockedResponse(),
    ],
)
def test_unusable_replies_are_malformed(response):
    with pytest.raises(MalformedResponseError) as exc_info:
        GeminiProvider._parse_summary(response)

    assert not exc_info.value.is_transient
