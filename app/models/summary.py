"""
Core data models for the summary cache and retrieval pipeline.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator

from app.models.enums import PayloadKind


class SummaryPayload(BaseModel):
    """
    Content handed to the summarization backend.

    Documents carry the decompressed PDF bytes; videos carry the URL the
    backend fetches itself.
    """

    kind: PayloadKind
    document: Optional[bytes] = None
    video_url: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def check_content(self) -> "SummaryPayload":
        if self.kind == PayloadKind.DOCUMENT and not self.document:
            raise ValueError("document payload requires non-empty content")
        if self.kind == PayloadKind.VIDEO and not self.video_url:
            raise ValueError("video payload requires a video URL")
        return self

    @property
    def is_video(self) -> bool:
        return self.kind == PayloadKind.VIDEO

    @classmethod
    def for_document(cls, document: bytes) -> "SummaryPayload":
        return cls(kind=PayloadKind.DOCUMENT, document=document)

    @classmethod
    def for_video(cls, video_url: str) -> "SummaryPayload":
        return cls(kind=PayloadKind.VIDEO, video_url=video_url)


class SummarizationRequest(BaseModel):
    """One summarization invocation, owned by the pipeline for its duration."""

    source_url: str
    freshness_timestamp: Optional[datetime] = None
    payload: SummaryPayload

    model_config = ConfigDict(frozen=True)


class CacheEntry(BaseModel):
    """
    A persisted summary.

    Attributes:
        fingerprint: SHA-256 hex of the source URL (cache key).
        source_url: The exact URL the summary was produced for.
        freshness_timestamp: When the source was last modified at summarization time.
        summary: The Markdown summary.
        expires_at: When the store may drop the entry.
    """

    fingerprint: str
    source_url: str
    freshness_timestamp: datetime
    summary: str
    expires_at: datetime

    model_config = ConfigDict(frozen=True, from_attributes=True)
