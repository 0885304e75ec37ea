# src/viet_kconnect/db/time.py
"""Time utilities for database models."""

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Return the current UTC time as a naive datetime.

    Timestamps are stored without a zone so SQLite and PostgreSQL compare them
    the same way; every stored value is UTC.
    """
    return datetime.now(UTC).replace(tzinfo=None)


def as_utc_naive(value: datetime) -> datetime:
    """Normalize an aware datetime to naive UTC; naive values pass through."""
    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


def isoformat_utc(value: datetime) -> str:
    """Render a stored UTC timestamp as ISO-8601 with a trailing ``Z``."""
    if value.tzinfo is not None:
        value = as_utc_naive(value)
    return value.isoformat(timespec="milliseconds") + "Z"
