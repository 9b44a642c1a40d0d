"""UTC helpers shared by promotions, order numbers and order queries."""

from datetime import UTC, datetime


def utc_now() -> datetime:
    return datetime.now(UTC)


def as_utc(value):
    """Treat naive datetimes as UTC so comparisons never mix the two."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
