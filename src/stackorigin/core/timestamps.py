"""UTC timestamp helpers (stdlib-only)."""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(UTC)


def utc_now_iso() -> str:
    """Return current UTC time in ISO-8601 format with millisecond precision and Z suffix."""
    return to_iso8601(utc_now())


def to_iso8601(dt: datetime) -> str:
    """Format a datetime as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


__all__ = ["utc_now", "utc_now_iso", "to_iso8601"]
