from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Sequence

from ..caterings.calendar import active_days, is_active_day
from ..common.datetime_utils import month_days, parse_iso_date
from ..core.enums import ErrorKind
from ..core.exceptions import NotFoundError, ValidationError
from ..groups.model import Group
from ..groups.repository import GroupRepository
from ..students.model import Student
from .model import BreakdownRow, DailyAttendance, MonthSnapshot, MonthView, StudentMonthSummary
from .repository import AttendanceReader


def subtree(groups: dict[int, Group], root_id: int) -> set[int]:
    children: dict[int, list[int]] = {}
    for g in groups.values():
        if g.parent_id is not None:
            children.setdefault(g.parent_id, []).append(g.group_id)

    out: set[int] = set()
    stack = [root_id]
    while stack:
        gid = stack.pop()
        if gid not in out:
            out.add(gid)
            stack.extend(children.get(gid, ()))
    return out


class AttendanceService:
    """Read side: expected headcounts derived from the current store state."""

    def __init__(self, reader: AttendanceReader, groups: GroupRepository):
        self._reader = reader
        self._groups = groups

    def get_month_view(self, *, catering_id: int, year: int, month: int) -> MonthView:
        days = self._month(year, month)
        snapshot = self._snapshot(int(catering_id), days[0], days[-1])
        return self._build_view(snapshot, days, snapshot.students)

    def get_group_month_view(self, *, group_id: int, year: int, month: int) -> MonthView:
        days = self._month(year, month)
        group = self._group(group_id)
        snapshot = self._snapshot(group.catering_id, days[0], days[-1])

        scope = subtree(snapshot.groups, group.group_id)
        students = [s for s in snapshot.students if s.group_id in scope]
        return self._build_view(snapshot, days, students, group_id=group.group_id)

    def get_day_breakdown(self, *, group_id: int, day: "str | date") -> list[BreakdownRow]:
        try:
            day = parse_iso_date(day)
        except (TypeError, ValueError):
            raise ValidationError("Invalid date (YYYY-MM-DD)", kind=ErrorKind.INVALID_DATE_RANGE)

        group = self._group(group_id)
        snapshot = self._snapshot(group.catering_id, day, day)
        active = is_active_day(snapshot.catering, day)

        rows: list[BreakdownRow] = []
        children = sorted(
            (g for g in snapshot.groups.values() if g.parent_id == group.group_id),
            key=lambda g: g.name.casefold(),
        )
        for child in children:
            scope = subtree(snapshot.groups, child.group_id)
            members = [s for s in snapshot.students if s.group_id in scope]
            rows.append(
                BreakdownRow(
                    kind="group",
                    ref_id=child.group_id,
                    name=child.name,
                    expected=self._expected(snapshot, members, day) if active else 0,
                    enrolled=len(members),
                )
            )

        direct = sorted(
            (s for s in snapshot.students if s.group_id == group.group_id),
            key=lambda s: (s.last_name.casefold(), s.first_name.casefold()),
        )
        for s in direct:
            rows.append(
                BreakdownRow(
                    kind="student",
                    ref_id=s.student_id,
                    name=s.full_name,
                    expected=self._expected(snapshot, [s], day) if active else 0,
                    enrolled=1,
                )
            )
        return rows

    def get_monthly_summary(self, *, catering_id: int, year: int, month: int) -> list[StudentMonthSummary]:
        days = self._month(year, month)
        snapshot = self._snapshot(int(catering_id), days[0], days[-1])
        served = active_days(snapshot.catering, days[0], days[-1])

        out: list[StudentMonthSummary] = []
        for s in snapshot.students:
            group = snapshot.groups.get(s.group_id)
            out.append(
                StudentMonthSummary(
                    student_id=s.student_id,
                    first_name=s.first_name,
                    last_name=s.last_name,
                    group=group.name if group else "-",
                    attended_days=sum(1 for d in served if not snapshot.is_cancelled(s.student_id, d)),
                )
            )
        out.sort(key=lambda r: (r.last_name.casefold(), r.first_name.casefold(), r.student_id))
        return out

    @staticmethod
    def _expected(snapshot: MonthSnapshot, students: Iterable[Student], day: date) -> int:
        return sum(1 for s in students if not snapshot.is_cancelled(s.student_id, day))

    def _build_view(
        self,
        snapshot: MonthSnapshot,
        days: Sequence[date],
        students: Iterable[Student],
        *,
        group_id: Optional[int] = None,
    ) -> MonthView:
        catering = snapshot.catering
        students = list(students)

        out: list[DailyAttendance] = []
        for day in days:
            active = is_active_day(catering, day)
            count = self._expected(snapshot, students, day) if active else 0
            # Cancellation is per day, so every meal of the day gets the same count.
            out.append(DailyAttendance(day=day, active=active, meals={meal: count for meal in catering.meals}))

        return MonthView(
            catering_id=catering.catering_id,
            year=days[0].year,
            month=days[0].month,
            meals=catering.meals,
            days=tuple(out),
            group_id=group_id,
        )

    def _snapshot(self, catering_id: int, start: date, end: date) -> MonthSnapshot:
        snapshot = self._reader.load_snapshot(catering_id=catering_id, start=start, end=end)
        if not snapshot:
            raise NotFoundError("Catering not found")
        return snapshot

    def _group(self, group_id: int) -> Group:
        group = self._groups.get_by_id(int(group_id))
        if not group:
            raise NotFoundError("Group not found")
        return group

    @staticmethod
    def _month(year: int, month: int) -> list[date]:
        try:
            year, month = int(year), int(month)
            if not 1 <= month <= 12:
                raise ValueError(month)
            return month_days(year, month)
        except (TypeError, ValueError):
            raise ValidationError("Invalid year or month", kind=ErrorKind.INVALID_DATE_RANGE)
