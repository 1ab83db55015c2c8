from __future__ import annotations

import calendar
from datetime import date, datetime


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def inclusive_days(start: date, end: date) -> int:
    """Calendar days between start and end, both included."""
    return (end - start).days + 1


def is_last_day_of_month(d: date) -> bool:
    return d.day == calendar.monthrange(d.year, d.month)[1]


def commercial_days(start: date, end: date, cap: int) -> int:
    """Days paid for a period under the 30-day commercial month.

    A period that starts on the 1st or 16th and closes its month is paid in
    full (Feb 16-28 is a whole quincena), anything else is calendar days
    limited to ``cap``.
    """
    days = inclusive_days(start, end)
    if (
        start.year == end.year
        and start.month == end.month
        and start.day in (1, 16)
        and is_last_day_of_month(end)
    ):
        return cap
    return min(days, cap)


def months_before(d: date, months: int) -> date:
    month_index = d.year * 12 + (d.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)
