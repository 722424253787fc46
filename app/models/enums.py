"""
Enums for type-safe values across the application.
"""
from enum import Enum


class PayloadKind(str, Enum):
    """What the summarization backend receives for a source."""
    DOCUMENT = "document"
    VIDEO = "video"


class CacheStatus(str, Enum):
    """Outcome of the cache check for one pipeline run."""
    HIT_FRESH = "hit_fresh"
    HIT_STALE = "hit_stale"
    MISS = "miss"
    BYPASSED = "bypassed"


class SummaryCacheType(str, Enum):
    """Supported summary cache backends for configuration."""
    DATABASE = "database"
    MEMORY = "memory"
