"""Timestamp normalization.

Times enter the model from commands, routing proposals and stored JSON.
Naive values are taken to be UTC so that every comparison is between aware
datetimes.
"""

from datetime import UTC, datetime


def as_utc(value: datetime | None) -> datetime | None:
    """Return ``value`` as an aware UTC datetime, or None."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
