from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..caterings.model import Catering
from ..groups.model import Group
from ..students.model import Student


@dataclass(frozen=True)
class DailyAttendance:
    """Expected headcount per meal for one day (derived, never stored)."""

    day: date
    active: bool
    meals: dict[str, int]

    def count(self, meal: str) -> int:
        return self.meals.get(meal, 0)


@dataclass(frozen=True)
class MonthView:
    catering_id: int
    year: int
    month: int
    meals: tuple[str, ...]
    days: tuple[DailyAttendance, ...]
    group_id: Optional[int] = None

    def for_day(self, day: date) -> DailyAttendance:
        for d in self.days:
            if d.day == day:
                return d
        raise KeyError(day)


@dataclass(frozen=True)
class MonthSnapshot:
    """Consistent read of everything a view needs for one catering window."""

    catering: Catering
    groups: dict[int, Group]
    students: tuple[Student, ...]
    cancelled: frozenset[tuple[int, date]] = field(default_factory=frozenset)

    def is_cancelled(self, student_id: int, day: date) -> bool:
        return (student_id, day) in self.cancelled


@dataclass(frozen=True)
class BreakdownRow:
    """Read-model for one direct child of a group on a given day."""

    kind: str
    ref_id: int
    name: str
    expected: int
    enrolled: int


@dataclass(frozen=True)
class StudentMonthSummary:
    student_id: int
    first_name: str
    last_name: str
    group: str
    attended_days: int
