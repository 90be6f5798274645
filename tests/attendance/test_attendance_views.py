from __future__ import annotations

from datetime import date

import pytest

from src.catering_system.catering_system.core.enums import ErrorKind
from src.catering_system.catering_system.core.exceptions import NotFoundError, ValidationError

OCT_1 = date(2025, 10, 1)
OCT_4 = date(2025, 10, 4)  # Saturday
OCT_WEEKDAYS = 23


def _cancel(container, catering, student, day, cancelled=True):
    container.cancellation_service.set_cancellation(
        student_id=student.student_id,
        catering_id=catering.catering_id,
        day=day,
        cancelled=cancelled,
    )


def _month(container, catering):
    return container.attendance_service.get_month_view(catering_id=catering.catering_id, year=2025, month=10)


def test_empty_catering_has_zero_counts(container, catering):
    view = _month(container, catering)

    assert len(view.days) == 31
    assert view.meals == ("Breakfast", "Lunch")
    assert sum(1 for d in view.days if d.active) == OCT_WEEKDAYS
    assert all(d.count(m) == 0 for d in view.days for m in view.meals)


def test_each_student_adds_one_on_active_days(container, catering):
    before = _month(container, catering)
    container.student_service.add_student(group_id=catering.root_group_id, first_name="Ana", last_name="Novak")

    after = _month(container, catering)

    for old, new in zip(before.days, after.days):
        for meal in after.meals:
            assert new.count(meal) == old.count(meal) + (1 if new.active else 0)
    assert after.for_day(OCT_4).count("Lunch") == 0


def test_cancellation_applies_to_every_meal_of_the_day(container, catering):
    kid = container.student_service.add_student(group_id=catering.root_group_id, first_name="Ana", last_name="Novak")
    container.student_service.add_student(group_id=catering.root_group_id, first_name="Ivo", last_name="Horvat")

    _cancel(container, catering, kid, OCT_1)
    view = _month(container, catering)

    assert view.for_day(OCT_1).meals == {"Breakfast": 1, "Lunch": 1}
    assert view.for_day(date(2025, 10, 2)).meals == {"Breakfast": 2, "Lunch": 2}


def test_cancel_then_uncancel_restores_view(container, catering):
    kid = container.student_service.add_student(group_id=catering.root_group_id, first_name="Ana", last_name="Novak")
    original = _month(container, catering)

    _cancel(container, catering, kid, OCT_1)
    assert _month(container, catering) != original

    _cancel(container, catering, kid, OCT_1, cancelled=False)
    assert _month(container, catering) == original


def test_removed_students_are_not_counted(container, catering):
    kid = container.student_service.add_student(group_id=catering.root_group_id, first_name="Ana", last_name="Novak")
    container.student_service.remove_student(student_id=kid.student_id)

    assert _month(container, catering).for_day(OCT_1).count("Lunch") == 0


@pytest.fixture
def school(container, catering):
    gs, ss = container.group_service, container.student_service
    a = gs.add_group(parent_group_id=catering.root_group_id, name="Class A")
    a1 = gs.add_group(parent_group_id=a.group_id, name="Table 1")
    b = gs.add_group(parent_group_id=catering.root_group_id, name="Class B")
    kids = {
        "a_direct": ss.add_student(group_id=a.group_id, first_name="Ana", last_name="Novak"),
        "a_nested": ss.add_student(group_id=a1.group_id, first_name="Ivo", last_name="Horvat"),
        "b": ss.add_student(group_id=b.group_id, first_name="Mia", last_name="Babić"),
        "root": ss.add_student(group_id=catering.root_group_id, first_name="Luka", last_name="Marić"),
    }
    return a, a1, b, kids


def test_group_view_counts_whole_subtree(container, catering, school):
    a, _, b, kids = school
    _cancel(container, catering, kids["a_nested"], OCT_1)

    view_a = container.attendance_service.get_group_month_view(group_id=a.group_id, year=2025, month=10)
    view_b = container.attendance_service.get_group_month_view(group_id=b.group_id, year=2025, month=10)

    assert view_a.group_id == a.group_id
    assert view_a.for_day(OCT_1).count("Lunch") == 1
    assert view_a.for_day(date(2025, 10, 2)).count("Lunch") == 2
    assert view_b.for_day(OCT_1).count("Lunch") == 1
    assert _month(container, catering).for_day(date(2025, 10, 2)).count("Lunch") == 4


def test_day_breakdown_lists_child_groups_then_students(container, catering, school):
    a, _, b, kids = school
    _cancel(container, catering, kids["b"], OCT_1)

    rows = container.attendance_service.get_day_breakdown(group_id=catering.root_group_id, day="2025-10-01")

    assert [(r.kind, r.ref_id, r.expected, r.enrolled) for r in rows] == [
        ("group", a.group_id, 2, 2),
        ("group", b.group_id, 0, 1),
        ("student", kids["root"].student_id, 1, 1),
    ]


def test_day_breakdown_on_inactive_day(container, catering, school):
    rows = container.attendance_service.get_day_breakdown(group_id=catering.root_group_id, day=OCT_4)

    assert all(r.expected == 0 for r in rows)
    assert sum(r.enrolled for r in rows) == 4


def test_monthly_summary(container, catering, school):
    _, _, _, kids = school
    _cancel(container, catering, kids["b"], OCT_1)
    _cancel(container, catering, kids["b"], date(2025, 10, 2))

    summary = container.attendance_service.get_monthly_summary(catering_id=catering.catering_id, year=2025, month=10)

    by_id = {r.student_id: r for r in summary}
    assert [r.last_name for r in summary] == ["Babić", "Horvat", "Marić", "Novak"]
    assert by_id[kids["b"].student_id].attended_days == OCT_WEEKDAYS - 2
    assert by_id[kids["b"].student_id].group == "Class B"
    assert by_id[kids["a_direct"].student_id].attended_days == OCT_WEEKDAYS


def test_invalid_month_and_unknown_ids(container, catering):
    with pytest.raises(ValidationError) as e:
        container.attendance_service.get_month_view(catering_id=catering.catering_id, year=2025, month=13)
    assert e.value.kind == ErrorKind.INVALID_DATE_RANGE

    with pytest.raises(NotFoundError):
        container.attendance_service.get_month_view(catering_id=999, year=2025, month=10)
    with pytest.raises(NotFoundError):
        container.attendance_service.get_group_month_view(group_id=999, year=2025, month=10)
