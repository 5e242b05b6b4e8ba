"""Common helpers shared across the incident models.

- utc_now(): timezone-aware current time
- to_iso_z(): ISO 8601 rendering with 'Z' suffix (millisecond precision)
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_iso_z(value: datetime) -> str:
    """Render a datetime the way the stored data expects it.

    Returns:
        str: UTC timestamp with millisecond precision and 'Z' suffix
             (e.g. "2024-01-15T14:30:00.123Z")
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")

