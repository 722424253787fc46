"""
Helpers for the instants exchanged with the browser extension and the cache.

Freshness timestamps arrive as ISO-8601 strings (``og:updated_time``,
``article:published_time``, plain ``YYYY-MM-DD`` fallbacks) or as RFC 1123
``Last-Modified`` header values. Everything is normalized to aware UTC.
"""
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Union


def utc_now() -> datetime:
    """Current instant as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_instant(value: Union[str, datetime]) -> datetime:
    """
    Parse a freshness timestamp into an aware UTC datetime.

    Args:
        value: ISO-8601 string, RFC 1123 HTTP date, or a datetime.

    Returns:
        The parsed instant in UTC.

    Raises:
        ValueError: If the value is empty or in no recognised format.
    """
    if isinstance(value, datetime):
        return ensure_utc(value)

    text = value.strip()
    if not text:
        raise ValueError("timestamp is empty")

    try:
        # fromisoformat() rejects a trailing "Z" before Python 3.11
        return ensure_utc(datetime.fromisoformat(text.replace("Z", "+00:00")))
    except ValueError:
        pass

    try:
        return ensure_utc(parsedate_to_datetime(text))
    except (TypeError, ValueError):
        raise ValueError(f"Unrecognised timestamp format: {value!r}") from None
