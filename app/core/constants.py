"""
Application-wide constants and configuration limits.

Refactored into static classes for better namespace management and discoverability.
"""


class RetryConfig:
    """Backend failure classification for the summarization retry loop."""
    # Rate limited, client closed, internal error, unavailable, gateway timeout
    TRANSIENT_STATUS_CODES = frozenset({429, 499, 500, 503, 504})


class CacheConfig:
    """Configuration for the persistent summary cache."""
    TABLE_NAME = "summary_cache"
    FINGERPRINT_LENGTH = 64  # SHA-256 hex digest


class SummaryLimitConfig:
    """Human-readable input limits quoted in exhausted-retry errors."""
    VIDEO_HINT = "Check if the video is too long (over 1 hour)."
    WEB_PAGE_HINT = "Check if the page is too long (over 20MB)."


class VideoConfig:
    """Configuration for YouTube metadata lookups."""
    METADATA_CACHE_MAX_ENTRIES = 500
    WATCH_HOSTS = frozenset({"www.youtube.com", "youtube.com", "m.youtube.com"})
    SHORT_HOSTS = frozenset({"youtu.be"})
    PATH_PREFIXES = ("/shorts/", "/live/", "/embed/")
