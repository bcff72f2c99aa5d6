"""Time utility helpers."""

from __future__ import annotations

from datetime import UTC, datetime


def now_utc() -> datetime:
    """Return current timezone-aware UTC datetime."""
    return datetime.now(tz=UTC)


def ensure_aware(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so they compare with aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def parse_timestamp(value: str | datetime | None) -> datetime:
    """Parse a Postgres/ISO timestamp into an aware datetime."""
    if value is None:
        raise ValueError("Missing required timestamp value")
    if isinstance(value, datetime):
        return ensure_aware(value)
    normalized = value.replace("Z", "+00:00")
    return ensure_aware(datetime.fromisoformat(normalized))
