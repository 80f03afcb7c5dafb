"""Timestamp helpers with an explicit timezone parameter.

Nothing in the engine reads the host's local timezone.  Every
conversion takes the target zone (or offset) as an argument; naive
timestamps are treated as UTC.
"""

from __future__ import annotations

from datetime import date, datetime, timezone, tzinfo

from .errors import InvalidTimestampError


def parse_timestamp(value: object) -> datetime:
    """Parse an ISO-8601 string (``Z`` suffix allowed) into a datetime.

    Datetimes pass through unchanged.  Anything else fails fast with
    :class:`InvalidTimestampError`.
    """
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        raise InvalidTimestampError(value, "expected ISO-8601 string or datetime")
    text = value.strip()
    if not text:
        raise InvalidTimestampError(value, "empty string")
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError as exc:
        raise InvalidTimestampError(value, str(exc)) from exc


def as_utc(ts: datetime) -> datetime:
    """Aware UTC view of *ts* (naive input is taken to be UTC)."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def calendar_day(ts: datetime, tz: tzinfo) -> date:
    """Calendar day of *ts* as seen on a wall clock in *tz*."""
    return as_utc(ts).astimezone(tz).date()


def wall_clock_hhmm(ts: datetime, tz: tzinfo) -> str:
    """Zero-padded 24h ``HH:MM`` of *ts* in *tz*."""
    local = as_utc(ts).astimezone(tz)
    return f"{local.hour:02d}:{local.minute:02d}"
