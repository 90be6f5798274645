from __future__ import annotations

import pytest

from src.catering_system.catering_system.core.enums import ErrorKind
from src.catering_system.catering_system.core.exceptions import NotFoundError, ValidationError


def test_add_student_cleans_input(container, catering):
    kid = container.student_service.add_student(
        group_id=catering.root_group_id,
        first_name="  Ana ",
        last_name="Novak",
        allergies="  ",
        guardians=["Marko Novak", "", "  Iva Novak "],
    )

    assert kid.full_name == "Ana Novak"
    assert kid.allergies is None
    assert kid.guardians == ("Marko Novak", "Iva Novak")


def test_add_student_validation(container, catering):
    with pytest.raises(ValidationError) as e:
        container.student_service.add_student(group_id=catering.root_group_id, first_name="", last_name="Novak")
    assert e.value.kind == ErrorKind.MISSING_REQUIRED_FIELD

    with pytest.raises(NotFoundError):
        container.student_service.add_student(group_id=999, first_name="Ana", last_name="Novak")


def test_enrollment_covers_nested_groups(container, catering):
    a = container.group_service.add_group(parent_group_id=catering.root_group_id, name="Class A")
    a1 = container.group_service.add_group(parent_group_id=a.group_id, name="Table 1")
    top = container.student_service.add_student(group_id=catering.root_group_id, first_name="Ana", last_name="Novak")
    nested = container.student_service.add_student(group_id=a1.group_id, first_name="Ivo", last_name="Horvat")

    assert container.student_service.list_enrolled(catering_id=catering.catering_id) == frozenset({top, nested})
    assert list(container.student_service.list_in_group(group_id=a1.group_id)) == [nested]


def test_update_and_move_student(container, catering):
    a = container.group_service.add_group(parent_group_id=catering.root_group_id, name="Class A")
    kid = container.student_service.add_student(group_id=catering.root_group_id, first_name="Ana", last_name="Novak")

    updated = container.student_service.update_student(
        student_id=kid.student_id, first_name="Ana", last_name="Kovač", allergies="nuts"
    )
    moved = container.student_service.move_student(student_id=kid.student_id, group_id=a.group_id)

    assert updated.last_name == "Kovač"
    assert updated.allergies == "nuts"
    assert moved.group_id == a.group_id

    with pytest.raises(NotFoundError):
        container.student_service.move_student(student_id=kid.student_id, group_id=999)


def test_removed_student_is_not_enrolled(container, catering):
    kid = container.student_service.add_student(group_id=catering.root_group_id, first_name="Ana", last_name="Novak")

    container.student_service.remove_student(student_id=kid.student_id)

    assert container.student_service.list_enrolled(catering_id=catering.catering_id) == frozenset()
    assert container.student_service.get_student(kid.student_id).removed
