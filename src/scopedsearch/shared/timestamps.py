"""Canonical timestamp formatting and parsing.

Every temporal value leaving the engine goes through ``format_timestamp`` or
``format_date`` so that all responses share one representation:
``2024-05-01T08:30:00.000Z`` for instants and ``2024-05-01`` for calendar dates.
"""

from datetime import UTC, date, datetime

from scopedsearch.shared.exceptions import ValidationError


def _as_utc(value: datetime) -> datetime:
    # Naive values are stored as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def format_timestamp(value: datetime | date | None) -> str | None:
    """Format an instant as ISO-8601 UTC with millisecond precision."""
    if value is None:
        return None
    if not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day, tzinfo=UTC)
    utc = _as_utc(value)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def format_date(value: datetime | date | None) -> str | None:
    """Format a calendar date as ``YYYY-MM-DD``."""
    if value is None:
        return None
    if isinstance(value, datetime):
        value = _as_utc(value).date()
    return value.isoformat()


def parse_timestamp(raw: object, field: str | None = None) -> datetime:
    """Parse a filter value into an aware UTC datetime.

    Raises:
        ValidationError: If the value is not a date, datetime or ISO-8601 string.
    """
    if isinstance(raw, datetime):
        return _as_utc(raw)
    if isinstance(raw, date):
        return datetime(raw.year, raw.month, raw.day, tzinfo=UTC)
    if isinstance(raw, str):
        text = raw.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            return _as_utc(datetime.fromisoformat(text))
        except ValueError:
            pass
    raise ValidationError(f"Invalid timestamp: {raw!r}", field=field)


def parse_date(raw: object, field: str | None = None) -> date:
    """Parse a filter value into a calendar date."""
    if isinstance(raw, datetime):
        return _as_utc(raw).date()
    if isinstance(raw, date):
        return raw
    if isinstance(raw, str):
        try:
            return date.fromisoformat(raw.strip())
        except ValueError:
            return parse_timestamp(raw, field).date()
    raise ValidationError(f"Invalid date: {raw!r}", field=field)
