from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..caterings.calendar import active_days, is_active_day
from ..caterings.model import Catering
from ..caterings.repository import CateringRepository
from ..common.datetime_utils import Clock, now_local, parse_iso_date
from ..core.enums import ErrorKind
from ..core.exceptions import CancellationError, NotFoundError, ValidationError
from ..groups.repository import GroupRepository
from ..students.model import Student
from ..students.repository import StudentRepository
from .model import CancellationEvent, CancellationRecord
from .repository import CancellationRepository


def cutoff_instant(catering: Catering, day: date) -> Optional[datetime]:
    """Moment after which the day can no longer be changed."""
    if catering.cutoff_time is None:
        return None
    return datetime.combine(day, catering.cutoff_time)


def is_open(catering: Catering, day: date, now: datetime) -> bool:
    """Whether ``day`` still accepts changes at ``now``.

    Without a cutoff a day closes at its start, so only future days are open.
    """
    deadline = cutoff_instant(catering, day)
    if deadline is None:
        return now.date() < day
    return now < deadline


class CancellationService:
    """Per student, per catering, per day cancellation ledger.

    A day moves from open to locked at its cutoff instant; only open, active
    days accept writes.
    """

    def __init__(
        self,
        cancellations: CancellationRepository,
        caterings: CateringRepository,
        students: StudentRepository,
        groups: GroupRepository,
        *,
        clock: Clock = now_local,
    ):
        self._cancellations = cancellations
        self._caterings = caterings
        self._students = students
        self._groups = groups
        self._clock = clock

    def _load(self, student_id: int, catering_id: int) -> tuple[Student, Catering]:
        catering = self._caterings.get_by_id(int(catering_id))
        if not catering:
            raise NotFoundError("Catering not found")
        student = self._students.get_by_id(int(student_id))
        if not student or student.removed:
            raise NotFoundError("Student not found")

        group = self._groups.get_by_id(student.group_id)
        if not group or group.catering_id != catering.catering_id:
            raise NotFoundError("Student is not enrolled in this catering")
        return student, catering

    @staticmethod
    def _check_open(catering: Catering, day: date, now: datetime) -> None:
        if not is_active_day(catering, day):
            raise CancellationError("Day is not an active catering day", kind=ErrorKind.INACTIVE_DATE)

        if is_open(catering, day, now):
            return
        if catering.cutoff_time is None:
            raise CancellationError(
                "Catering has no cancellation cutoff; same-day changes are not allowed",
                kind=ErrorKind.NO_CUTOFF_CONFIGURED,
            )
        raise CancellationError("Cancellation cutoff has passed", kind=ErrorKind.PAST_CUTOFF)

    def set_cancellation(
        self,
        *,
        student_id: int,
        catering_id: int,
        day: "str | date",
        cancelled: bool,
        now: Optional[datetime] = None,
    ) -> None:
        day = self._parse_day(day)
        now = now or self._clock()

        student, catering = self._load(student_id, catering_id)
        self._check_open(catering, day, now)

        self._cancellations.upsert(
            student_id=student.student_id,
            catering_id=catering.catering_id,
            day=day,
            cancelled=bool(cancelled),
            recorded_at=now,
        )

    def cancel_range(
        self,
        *,
        student_id: int,
        catering_id: int,
        start: "str | date",
        end: "str | date",
        cancelled: bool = True,
        now: Optional[datetime] = None,
    ) -> list[date]:
        """Apply ``cancelled`` to every open active day in [start, end].

        Days already locked (past their cutoff, or same-day when the catering has
        no cutoff) are skipped. Returns the days whose state changed.
        """

        start = self._parse_day(start)
        end = self._parse_day(end)
        if start > end:
            raise ValidationError("Start date must not be after end date", kind=ErrorKind.INVALID_DATE_RANGE)
        now = now or self._clock()

        student, catering = self._load(student_id, catering_id)

        changed: list[date] = []
        for day in active_days(catering, start, end):
            if not is_open(catering, day, now):
                continue
            if self._cancellations.upsert(
                student_id=student.student_id,
                catering_id=catering.catering_id,
                day=day,
                cancelled=bool(cancelled),
                recorded_at=now,
            ):
                changed.append(day)
        return changed

    def get_cancellation(
        self,
        *,
        student_id: int,
        catering_id: int,
        day: "str | date",
    ) -> Optional[CancellationRecord]:
        return self._cancellations.get(
            student_id=int(student_id),
            catering_id=int(catering_id),
            day=self._parse_day(day),
        )

    def history(self, *, student_id: int, catering_id: int, day: "str | date") -> Sequence[CancellationEvent]:
        return self._cancellations.history(
            student_id=int(student_id),
            catering_id=int(catering_id),
            day=self._parse_day(day),
        )

    @staticmethod
    def _parse_day(value: "str | date") -> date:
        try:
            return parse_iso_date(value)
        except (TypeError, ValueError):
            raise ValidationError("Invalid date (YYYY-MM-DD)", kind=ErrorKind.INVALID_DATE_RANGE)
