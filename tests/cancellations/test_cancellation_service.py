from __future__ import annotations

from datetime import date, datetime

import pytest

from src.catering_system.catering_system.core.enums import ErrorKind
from src.catering_system.catering_system.core.exceptions import CancellationError, NotFoundError, ValidationError


@pytest.fixture
def kid(container, catering):
    return container.student_service.add_student(
        group_id=catering.root_group_id, first_name="Ana", last_name="Novak"
    )


def _set(container, catering, kid, day, cancelled=True, now=None):
    container.cancellation_service.set_cancellation(
        student_id=kid.student_id,
        catering_id=catering.catering_id,
        day=day,
        cancelled=cancelled,
        now=now,
    )


def _is_cancelled(container, catering, kid, day) -> bool:
    record = container.cancellation_service.get_cancellation(
        student_id=kid.student_id, catering_id=catering.catering_id, day=day
    )
    return bool(record and record.cancelled)


def test_cancel_before_cutoff(container, catering, kid):
    _set(container, catering, kid, "2025-10-01")

    assert _is_cancelled(container, catering, kid, date(2025, 10, 1))


def _month(container, catering):
    return container.attendance_service.get_month_view(catering_id=catering.catering_id, year=2025, month=10)


def test_cancel_at_or_after_cutoff_is_rejected(container, catering, kid):
    before = _month(container, catering)

    with pytest.raises(CancellationError) as e:
        _set(container, catering, kid, "2025-10-01", now=datetime(2025, 10, 1, 8, 0, 0))
    assert e.value.kind == ErrorKind.PAST_CUTOFF
    assert _month(container, catering) == before

    _set(container, catering, kid, "2025-10-01", now=datetime(2025, 10, 1, 7, 59, 59))
    assert _is_cancelled(container, catering, kid, "2025-10-01")


def test_uncancel_after_cutoff_is_rejected(container, catering, kid):
    _set(container, catering, kid, "2025-10-01")
    before = _month(container, catering)

    with pytest.raises(CancellationError) as e:
        _set(container, catering, kid, "2025-10-01", cancelled=False, now=datetime(2025, 10, 1, 9, 0))
    assert e.value.kind == ErrorKind.PAST_CUTOFF
    assert _is_cancelled(container, catering, kid, "2025-10-01")
    assert _month(container, catering) == before


def test_inactive_day_is_checked_before_cutoff(container, catering, kid):
    before = _month(container, catering)

    for day in ("2025-10-04", "2025-09-27", "2026-01-05"):  # Sat, past Sat, after end
        with pytest.raises(CancellationError) as e:
            _set(container, catering, kid, day)
        assert e.value.kind == ErrorKind.INACTIVE_DATE

    assert _month(container, catering) == before
    assert container.cancellation_service.get_cancellation(
        student_id=kid.student_id, catering_id=catering.catering_id, day="2025-10-04"
    ) is None


@pytest.fixture
def no_cutoff(container):
    c = container.catering_service.create_catering(
        name="No Cutoff",
        start_date="2025-09-01",
        end_date="2025-10-31",
        meals=["Lunch"],
        active_weekdays=["Tue", "Wed"],
    )
    kid = container.student_service.add_student(group_id=c.root_group_id, first_name="Ivo", last_name="Horvat")
    return c, kid


def test_catering_without_cutoff_accepts_future_days(container, no_cutoff):
    c, kid = no_cutoff

    _set(container, c, kid, "2025-10-08")
    _set(container, c, kid, "2025-10-01", now=datetime(2025, 9, 30, 23, 59, 59))

    assert _is_cancelled(container, c, kid, "2025-10-08")
    assert _is_cancelled(container, c, kid, "2025-10-01")


def test_catering_without_cutoff_rejects_same_day_and_past(container, no_cutoff):
    c, kid = no_cutoff

    for day in ("2025-09-30", "2025-09-24"):  # today (Tue), last Wednesday
        with pytest.raises(CancellationError) as e:
            _set(container, c, kid, day)
        assert e.value.kind == ErrorKind.NO_CUTOFF_CONFIGURED
        assert not _is_cancelled(container, c, kid, day)


def test_cancel_range_without_cutoff_skips_today(container, no_cutoff):
    c, kid = no_cutoff

    changed = container.cancellation_service.cancel_range(
        student_id=kid.student_id,
        catering_id=c.catering_id,
        start="2025-09-30",
        end="2025-10-07",
    )

    assert changed == [date(2025, 10, 1), date(2025, 10, 7)]


def test_unknown_or_unenrolled_student(container, catering, kid):
    other = container.catering_service.create_catering(
        name="Other",
        start_date="2025-10-01",
        end_date="2025-10-31",
        meals=["Lunch"],
        active_weekdays=["Wed"],
        cutoff_time="08:00",
    )

    with pytest.raises(NotFoundError):
        _set(container, other, kid, "2025-10-08")
    with pytest.raises(NotFoundError):
        container.cancellation_service.set_cancellation(
            student_id=999, catering_id=catering.catering_id, day="2025-10-01", cancelled=True
        )

    container.student_service.remove_student(student_id=kid.student_id)
    with pytest.raises(NotFoundError):
        _set(container, catering, kid, "2025-10-01")


def test_invalid_day_string(container, catering, kid):
    with pytest.raises(ValidationError) as e:
        _set(container, catering, kid, "01.10.2025")
    assert e.value.kind == ErrorKind.INVALID_DATE_RANGE


def test_repeated_set_is_idempotent_and_history_records_changes(container, catering, kid):
    _set(container, catering, kid, "2025-10-01", now=datetime(2025, 9, 29, 10, 0))
    _set(container, catering, kid, "2025-10-01", now=datetime(2025, 9, 29, 11, 0))
    _set(container, catering, kid, "2025-10-01", cancelled=False, now=datetime(2025, 9, 30, 9, 0))

    events = container.cancellation_service.history(
        student_id=kid.student_id, catering_id=catering.catering_id, day="2025-10-01"
    )

    assert [(e.cancelled, e.recorded_at) for e in events] == [
        (True, datetime(2025, 9, 29, 10, 0)),
        (False, datetime(2025, 9, 30, 9, 0)),
    ]
    assert not _is_cancelled(container, catering, kid, "2025-10-01")


def test_cancel_range_skips_locked_and_inactive_days(container, catering, kid):
    changed = container.cancellation_service.cancel_range(
        student_id=kid.student_id,
        catering_id=catering.catering_id,
        start="2025-09-29",
        end="2025-10-05",
    )

    assert changed == [date(2025, 10, 1), date(2025, 10, 2), date(2025, 10, 3)]
    assert not _is_cancelled(container, catering, kid, "2025-09-30")


def test_cancel_range_is_clamped_to_catering(container, catering, kid):
    changed = container.cancellation_service.cancel_range(
        student_id=kid.student_id,
        catering_id=catering.catering_id,
        start="2025-12-15",
        end="2026-01-10",
    )

    assert changed == [date(2025, 12, d) for d in range(15, 20)]

    again = container.cancellation_service.cancel_range(
        student_id=kid.student_id,
        catering_id=catering.catering_id,
        start="2025-12-15",
        end="2026-01-10",
    )
    assert again == []


def test_cancel_range_rejects_reversed_window(container, catering, kid):
    with pytest.raises(ValidationError) as e:
        container.cancellation_service.cancel_range(
            student_id=kid.student_id,
            catering_id=catering.catering_id,
            start="2025-10-10",
            end="2025-10-01",
        )
    assert e.value.kind == ErrorKind.INVALID_DATE_RANGE
