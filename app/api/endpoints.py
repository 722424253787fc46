"""
API endpoints for web page and video summarization.
"""
import asyncio
import time

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from loguru import logger

from app.api.dependencies import get_summary_pipeline
from app.core.config import settings
from app.core.exceptions import PipelineTimeoutError
from app.models.api import SummarizeRequest
from app.models.summary import SummarizationRequest, SummaryPayload
from app.services.payload import decompress_payload
from app.services.pipeline import SummaryPipeline


router = APIRouter()


def build_summarization_request(payload: SummarizeRequest) -> SummarizationRequest:
    """
    Translate the extension's request body into a pipeline request.

    Decompresses web page content; videos are passed by URL.
    """
    if payload.is_video:
        content = SummaryPayload.for_video(payload.source_url)
    else:
        content = SummaryPayload.for_document(decompress_payload(payload.content or ""))

    return SummarizationRequest(
        source_url=payload.source_url,
        freshness_timestamp=payload.last_modified,
        payload=content,
    )


@router.post(
    "/summarize",
    response_class=PlainTextResponse,
    responses={200: {"content": {"text/markdown": {}}}},
)
async def summarize(
    payload: SummarizeRequest,
    pipeline: SummaryPipeline = Depends(get_summary_pipeline),
):
    """
    Summarizes a rendered web page or a YouTube video.

    Args:
        payload: The request body with the source URL and optional content.
        pipeline: The cache-aware summarization pipeline.

    Returns:
        The summary as literal Markdown text.
    """
    source = "video" if payload.is_video else "web page"
    logger.info(f"Incoming {source} summarization request for URL: {payload.source_url}")

    request = build_summarization_request(payload)

    start_time = time.perf_counter()
    try:
        summary = await asyncio.wait_for(
            pipeline.run(request),
            timeout=settings.PIPELINE_TIMEOUT_SECONDS,
        )
    except asyncio.TimeoutError:
        raise PipelineTimeoutError(settings.PIPELINE_TIMEOUT_SECONDS)
    duration = time.perf_counter() - start_time
    logger.info(f"Summarization completed in {duration:.2f}s")

    return PlainTextResponse(summary, media_type="text/markdown")
