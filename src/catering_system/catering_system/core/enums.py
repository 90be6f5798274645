from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Iterable


class Weekday(str, Enum):
    """Canonical Monday-first weekday, independent of locale week start."""

    MON = "Mon"
    TUE = "Tue"
    WED = "Wed"
    THU = "Thu"
    FRI = "Fri"
    SAT = "Sat"
    SUN = "Sun"

    @property
    def position(self) -> int:
        return _WEEKDAY_ORDER.index(self)

    @classmethod
    def of(cls, day: date) -> "Weekday":
        return _WEEKDAY_ORDER[day.weekday()]

    @classmethod
    def parse(cls, value: "str | Weekday") -> "Weekday":
        """Accept "Mon" or "Monday" in any case."""
        if isinstance(value, Weekday):
            return value
        key = str(value).strip().lower()
        for wd, full in zip(_WEEKDAY_ORDER, _WEEKDAY_NAMES):
            if key in (wd.value.lower(), full):
                return wd
        raise ValueError(f"Unknown weekday: {value!r}")

    @staticmethod
    def to_mask(days: Iterable["Weekday"]) -> int:
        """Bit 0 is Monday, bit 6 is Sunday."""
        mask = 0
        for d in days:
            mask |= 1 << d.position
        return mask

    @staticmethod
    def from_mask(mask: int) -> frozenset["Weekday"]:
        return frozenset(wd for i, wd in enumerate(_WEEKDAY_ORDER) if (int(mask) >> i) & 1)


_WEEKDAY_ORDER = tuple(Weekday)
_WEEKDAY_NAMES = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


class ErrorKind(str, Enum):
    """Machine-readable error kinds returned to the calling layer."""

    INVALID_DATE_RANGE = "InvalidDateRange"
    MISSING_MEALS = "MissingMeals"
    NO_WEEKDAYS_SELECTED = "NoWeekdaysSelected"
    INVALID_CUTOFF_TIME = "InvalidCutoffTime"
    MISSING_REQUIRED_FIELD = "MissingRequiredField"
    DUPLICATE_NAME = "DuplicateName"
    INVALID_GROUP_MOVE = "InvalidGroupMove"
    HAS_ENROLLED_STUDENTS = "HasEnrolledStudents"
    INACTIVE_DATE = "InactiveDate"
    PAST_CUTOFF = "PastCutoff"
    NO_CUTOFF_CONFIGURED = "NoCutoffConfigured"
    NOT_FOUND = "NotFound"
    CONCURRENCY_CONFLICT = "ConcurrencyConflict"


class StoreBackend(str, Enum):
    MEMORY = "memory"
    MYSQL = "mysql"
