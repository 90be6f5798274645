"""Recurrence evaluation for caterings.

All functions here are pure and total: dates outside a catering's range are
simply inactive.
"""

from __future__ import annotations

from datetime import date, timedelta

from ..core.enums import Weekday
from .model import Catering


def is_active_day(catering: Catering, day: date) -> bool:
    if day < catering.start_date or day > catering.end_date:
        return False
    return Weekday.of(day) in catering.active_weekdays


def active_days(catering: Catering, start: date, end: date) -> list[date]:
    """Active days within [start, end], clipped to the catering range."""
    lo = max(start, catering.start_date)
    hi = min(end, catering.end_date)
    out: list[date] = []
    day = lo
    while day <= hi:
        if Weekday.of(day) in catering.active_weekdays:
            out.append(day)
        day += timedelta(days=1)
    return out
