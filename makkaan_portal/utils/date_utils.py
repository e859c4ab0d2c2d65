"""Date manipulation utilities"""

from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional


def to_iso_date(value: Any) -> str:
    """
    Normalize a date-like value to an ISO YYYY-MM-DD string.

    Accepts date/datetime objects and strings carrying a time suffix
    ("2024-01-01T00:00:00.000Z"). Returns "" for missing or unparseable input.
    """
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()

    text = str(value).strip()[:10]
    try:
        return date.fromisoformat(text).isoformat()
    except ValueError:
        return ""


def parse_iso_date(value: Any) -> Optional[date]:
    """Parse a date-like value, returning None when it cannot be read"""
    iso = to_iso_date(value)
    return date.fromisoformat(iso) if iso else None


def reference_today(utc_offset_hours: float = 5.0, now: datetime | None = None) -> date:
    """Current calendar date at a fixed UTC offset, independent of host timezone"""
    tz = timezone(timedelta(hours=utc_offset_hours))
    current = now or datetime.now(timezone.utc)
    return current.astimezone(tz).date()


def days_between(start: date, end: date) -> int:
    """Whole days from start to end (negative when end precedes start)"""
    return (end - start).days
