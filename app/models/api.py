"""
Pydantic models for API request/response schemas.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.core.timestamps import parse_instant


class SummarizeRequest(BaseModel):
    """
    Request body sent by the browser extension.

    Web pages arrive as ``webUrl`` plus ``content`` (base64 of a gzip-compressed
    PDF rendering) and usually ``lastModified``. YouTube videos arrive as a bare
    ``videoUrl``; their freshness is resolved from the video metadata.
    """

    web_url: Optional[str] = Field(default=None, alias="webUrl")
    video_url: Optional[str] = Field(default=None, alias="videoUrl")
    content: Optional[str] = None
    last_modified: Optional[datetime] = Field(default=None, alias="lastModified")

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    @field_validator("web_url", "video_url")
    @classmethod
    def validate_http_url(cls, v: Optional[str]) -> Optional[str]:
        """Keep the URL byte-for-byte (it is the cache key) but insist on http(s)."""
        if v is None:
            return v
        if not v.strip():
            raise ValueError("URL must not be empty")
        if not v.startswith(("http://", "https://")):
            raise ValueError("URL must start with http:// or https://")
        return v

    @field_validator("last_modified", mode="before")
    @classmethod
    def parse_last_modified(cls, v):
        if v is None or v == "":
            return None
        return parse_instant(v)

    @model_validator(mode="after")
    def check_source(self) -> "SummarizeRequest":
        if bool(self.web_url) == bool(self.video_url):
            raise ValueError("Exactly one of webUrl or videoUrl must be provided")
        if self.web_url and not self.content:
            raise ValueError("content is required when summarizing a web page")
        if self.video_url and self.content:
            raise ValueError("content is not accepted for videos")
        return self

    @property
    def source_url(self) -> str:
        return self.web_url or self.video_url  # type: ignore[return-value]

    @property
    def is_video(self) -> bool:
        return self.video_url is not None
