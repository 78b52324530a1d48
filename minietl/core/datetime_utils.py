"""Datetime helpers for launch timestamps.

Launch dates travel as ISO-8601 strings with millisecond precision and a
``Z`` suffix (``2025-01-01T00:00:00.000Z``). All datetimes handled here are
timezone-aware UTC.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Get current UTC time as an aware datetime."""
    return datetime.now(UTC)


def ensure_utc(dt: datetime) -> datetime:
    """Convert a datetime to aware UTC.

    Naive datetimes are assumed to already be UTC.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def to_iso_z(dt: datetime) -> str:
    """Format a datetime as canonical ISO-8601 UTC with milliseconds.

    Args:
        dt: Datetime to format (aware or naive UTC)

    Returns:
        String like ``2025-01-12T14:30:00.000Z``
    """
    dt = ensure_utc(dt)
    return f"{dt:%Y-%m-%dT%H:%M:%S}.{dt.microsecond // 1000:03d}Z"


def parse_iso(value: str) -> datetime:
    """Parse an ISO-8601 string (``Z`` suffix allowed) into aware UTC."""
    return ensure_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
