"""Shared service-layer helper functions."""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta

from graphtoll.domain.errors import InvalidFilter


def now_iso() -> str:
    """Current UTC time as ISO 8601 with fixed microsecond precision.

    The fixed width keeps lexicographic order equal to chronological order
    for the timestamp columns.
    """
    return datetime.now(UTC).isoformat(timespec="microseconds")


def to_iso(moment: datetime) -> str:
    """Normalize *moment* to the stored timestamp format (naive means UTC)."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC).isoformat(timespec="microseconds")


def parse_time_bound(value: str, *, upper: bool = False) -> tuple[str, bool]:
    """Parse a ``YYYY-MM-DD`` date or ISO 8601 datetime filter bound.

    Returns ``(iso_timestamp, exclusive)``. A bare date used as an upper
    bound covers the whole day, so it becomes the exclusive start of the
    following day.

    Raises:
        InvalidFilter: If *value* is neither a date nor a datetime.

    Examples:
        >>> parse_time_bound("2025-01-31", upper=True)
        ('2025-02-01T00:00:00.000000+00:00', True)
        >>> parse_time_bound("2025-01-31")
        ('2025-01-31T00:00:00.000000+00:00', False)
    """
    try:
        if len(value) == 10:
            day = date.fromisoformat(value)
            start = datetime(day.year, day.month, day.day, tzinfo=UTC)
            if upper:
                return to_iso(start + timedelta(days=1)), True
            return to_iso(start), False
        return to_iso(datetime.fromisoformat(value)), False
    except ValueError as exc:
        raise InvalidFilter(
            f"Invalid date {value!r} (use YYYY-MM-DD or an ISO 8601 datetime)",
            value=value,
        ) from exc
