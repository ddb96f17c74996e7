from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta, timezone
from typing import Iterator, Optional

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(str(value or "").strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date {value!r}, expected YYYY-MM-DD")


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    v = str(value or "").strip()
    if v.endswith("Z"):
        v = v[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(v)
    except ValueError:
        raise ValidationError(f"Invalid timestamp {value!r}")
    return as_utc(parsed)


def now_utc() -> datetime:
    """Current UTC time.

    Note: Wrapped so tests can patch it.
    """
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_day(value: datetime) -> date:
    """Calendar day of a timestamp, normalized to UTC midnight."""
    return as_utc(value).date()


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last calendar day of a month (both inclusive)."""
    last = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last)


def iter_days(start: date, end: date) -> Iterator[date]:
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def business_days(year: int, month: int) -> list[date]:
    """Monday-Friday days of the month, in order."""
    start, end = month_bounds(year, month)
    return [d for d in iter_days(start, end) if d.weekday() < 5]


def inclusive_days(start: date, end: date) -> int:
    return (end - start).days + 1


def hours_between(start: datetime, end: Optional[datetime]) -> float:
    if end is None:
        return 0.0
    return (as_utc(end) - as_utc(start)).total_seconds() / 3600
