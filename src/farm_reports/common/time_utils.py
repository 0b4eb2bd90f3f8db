"""Time utilities for consistent timestamp handling."""

from datetime import UTC, date, datetime


def utc_now() -> datetime:
    """Get current UTC datetime.

    Returns:
        Current datetime in UTC timezone.
    """
    return datetime.now(UTC)


def parse_datetime(value: str | date | datetime | None) -> datetime | None:
    """Parse a record timestamp into an aware UTC datetime.

    Accepts ISO 8601 strings (with or without a trailing 'Z'), dates and
    datetimes. Naive values are assumed to be UTC. Unparseable input yields None.

    Args:
        value: Raw timestamp value.

    Returns:
        Aware datetime or None.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def in_window(moment: datetime | None, start: datetime, end: datetime) -> bool:
    """Check whether a moment falls within the inclusive window [start, end].

    Missing moments are never in a window.
    """
    if moment is None:
        return False
    return parse_datetime(start) <= moment <= parse_datetime(end)


def format_iso_date(dt: datetime) -> str:
    """Format datetime as an ISO 8601 date (YYYY-MM-DD)."""
    return dt.date().isoformat()
