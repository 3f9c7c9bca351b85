from __future__ import annotations

from datetime import date, datetime, timedelta

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date {value!r} (expected YYYY-MM-DD)")


def as_date(value) -> date:
    """Accept a date, a datetime or an ISO string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_iso_date(str(value))


def today_local() -> date:
    """Current local date.

    Note: Wrapped so tests can patch it.
    """
    return date.today()


def week_bounds(day: date, *, week_starts_on: int = 0) -> tuple[date, date]:
    """First and last day of the week containing ``day``.

    ``week_starts_on`` follows ``date.weekday()``: 0 is Monday, 6 is Sunday.
    """
    offset = (day.weekday() - week_starts_on) % 7
    start = day - timedelta(days=offset)
    return start, start + timedelta(days=6)
