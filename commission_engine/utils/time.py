"""
Time helpers.

Timestamps are timezone-aware UTC. SQLite returns naive datetimes, which
are treated as UTC.
"""

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Current UTC time."""
    return datetime.now(UTC)


def ensure_utc(value: datetime) -> datetime:
    """
    Make datetime timezone-aware.

    Args:
        value: Naive (assumed UTC) or aware datetime

    Returns:
        Aware datetime in UTC
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def days_since(value: datetime, now: datetime | None = None) -> int:
    """
    Whole days elapsed since value.

    Args:
        value: Past timestamp
        now: Reference time (default: current time)

    Returns:
        Floor of elapsed days (0 for future timestamps)
    """
    reference = ensure_utc(now) if now else utcnow()
    elapsed = reference - ensure_utc(value)
    return max(elapsed.days, 0)
