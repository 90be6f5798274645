from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta
from typing import Callable, Optional

from ..core.constants import DATE_FORMAT, TIME_FORMAT

Clock = Callable[[], datetime]


def parse_iso_date(value: "str | date") -> date:
    """Parse YYYY-MM-DD string into date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(str(value).strip(), DATE_FORMAT).date()


def parse_hhmm(value: "str | time") -> time:
    """Parse 24h HH:MM string into time."""
    if isinstance(value, time):
        return value
    return datetime.strptime(str(value).strip(), TIME_FORMAT).time()


def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def format_time(value: Optional[time]) -> Optional[str]:
    return value.strftime(TIME_FORMAT) if value else None


def month_days(year: int, month: int) -> list[date]:
    """Every calendar day of the month, in order."""
    _, last = calendar.monthrange(int(year), int(month))
    first = date(int(year), int(month), 1)
    return [first + timedelta(days=i) for i in range(last)]


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
