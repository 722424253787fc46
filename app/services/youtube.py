"""
YouTube service for resolving the freshness timestamp of a video.
"""
import asyncio
from datetime import datetime
from typing import Optional
from urllib.parse import parse_qs, urlparse

from cachetools import TTLCache
from loguru import logger
from pydantic import ValidationError
from yt_dlp import YoutubeDL
from yt_dlp.utils import DownloadError

from app.core.constants import VideoConfig
from app.core.exceptions import InvalidInputError
from app.models.youtube import YtDlpVideoInfo


def extract_video_id(url: str) -> Optional[str]:
    """
    Pull the video ID out of a YouTube URL.

    Supports watch?v=, /shorts/, /live/ and /embed/ URLs on youtube.com hosts
    and youtu.be short links.

    Args:
        url: The video URL as opened in the browser.

    Returns:
        The video ID, or None if the URL does not point at a YouTube video.
    """
    try:
        parsed = urlparse(url)
    except ValueError:
        return None

    host = (parsed.hostname or "").lower()

    if host in VideoConfig.SHORT_HOSTS:
        return parsed.path.lstrip("/").split("/")[0] or None

    if host in VideoConfig.WATCH_HOSTS:
        if parsed.path == "/watch":
            ids = parse_qs(parsed.query).get("v")
            return ids[0] if ids and ids[0] else None
        for prefix in VideoConfig.PATH_PREFIXES:
            if parsed.path.startswith(prefix):
                return parsed.path[len(prefix):].split("/")[0] or None

    return None


class VideoMetadataService:
    """
    Resolves when a YouTube video was published.

    Videos carry no Last-Modified signal, so their publish instant is used as
    the freshness timestamp. Lookups go through yt-dlp (metadata only, no
    download) and are cached per video ID.
    """

    def __init__(self, cache_ttl_seconds: int = 3600):
        """
        Initialize the VideoMetadataService.

        Args:
            cache_ttl_seconds: How long a resolved publish instant is reused.
        """
        self._published_cache: TTLCache = TTLCache(
            maxsize=VideoConfig.METADATA_CACHE_MAX_ENTRIES, ttl=cache_ttl_seconds
        )

    def _extract_video_info_sync(self, video_url: str) -> Optional[dict]:
        """
        Synchronous helper to extract video metadata using yt-dlp.

        Args:
            video_url: Canonical watch URL of the video.

        Returns:
            The raw info dict from yt-dlp.
        """
        ydl_opts = {
            "quiet": True,
            "no_warnings": True,
            "skip_download": True,
        }

        with YoutubeDL(ydl_opts) as ydl:
            return ydl.extract_info(video_url, download=False)

    async def get_published_at(self, url: str) -> datetime:
        """
        Look up the publish instant of the video behind a URL.

        The blocking yt-dlp call runs in a thread pool to keep the event
        loop free.

        Args:
            url: Any supported YouTube video URL.

        Returns:
            The publish instant as an aware UTC datetime.

        Raises:
            InvalidInputError: If the URL is not a YouTube video, the video
                cannot be found, or it has no publish date.
        """
        video_id = extract_video_id(url)
        if not video_id:
            raise InvalidInputError("Invalid YouTube URL")

        cached = self._published_cache.get(video_id)
        if cached is not None:
            logger.debug(f"Video {video_id}: publish date served from metadata cache")
            return cached

        logger.info(f"Extracted videoId: {video_id}")
        watch_url = f"https://www.youtube.com/watch?v={video_id}"
        try:
            info_dict = await asyncio.to_thread(self._extract_video_info_sync, watch_url)
        except DownloadError as e:
            logger.warning(f"yt-dlp could not read video {video_id}: {e}")
            raise InvalidInputError(f"No YouTube video found with ID: {video_id}") from e

        if not info_dict:
            raise InvalidInputError(f"No YouTube video found with ID: {video_id}")

        try:
            info = YtDlpVideoInfo(**info_dict)
        except ValidationError as e:
            raise InvalidInputError(f"Unreadable metadata for YouTube video {video_id}") from e

        published_at = info.published_at
        if published_at is None:
            raise InvalidInputError(f"YouTube video {video_id} has no publish date")

        logger.info(f"Video {video_id} was published at {published_at.isoformat()}")
        self._published_cache[video_id] = published_at
        return published_at
