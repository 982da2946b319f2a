"""UTC datetime utilities."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def utc_now_ms() -> datetime:
    """Return timezone-aware UTC now, truncated to whole milliseconds.

    Coin timestamps are stored at millisecond resolution so the value read
    back from PostgreSQL or from the cache compares equal to the one written.
    """
    now = utc_now()
    return now.replace(microsecond=now.microsecond - now.microsecond % 1000)
