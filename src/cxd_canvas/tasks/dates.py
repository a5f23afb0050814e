"""
Date handling for task queries.

Task dates arrive as ISO strings (date-only or full timestamps). Everything is
normalised to timezone-aware UTC datetimes before comparison; date-only values and
naive timestamps are read as UTC.
"""

from datetime import date, datetime, timezone
from typing import Optional, Union

DateLike = Union[date, datetime, str]


def to_utc(value: Union[date, datetime]) -> datetime:
    """Normalise a date or datetime to an aware UTC datetime."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)


def parse_date(value: Optional[DateLike]) -> Optional[datetime]:
    """Parse an ISO string (or pass through a date/datetime) as UTC.

    Returns None for missing or unparseable values.
    """
    if value is None:
        return None
    if isinstance(value, (date, datetime)):
        return to_utc(value)

    text = value.strip()
    if not text:
        return None
    try:
        return to_utc(datetime.fromisoformat(text.replace("Z", "+00:00")))
    except ValueError:
        return None


def utc_day(value: DateLike) -> Optional[str]:
    """YYYY-MM-DD of a value in UTC, or None if it cannot be parsed."""
    parsed = parse_date(value)
    return parsed.date().isoformat() if parsed else None
