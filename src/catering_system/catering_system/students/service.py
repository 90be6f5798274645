from __future__ import annotations

from typing import Optional, Sequence

from ..caterings.repository import CateringRepository
from ..common.validators import clean_list, optional_text, require_non_empty
from ..core.exceptions import NotFoundError
from ..groups.repository import GroupRepository
from .model import Student
from .repository import StudentRepository


class StudentService:
    """Use cases: manage students and resolve enrollment."""

    def __init__(self, students: StudentRepository, groups: GroupRepository, caterings: CateringRepository):
        self._students = students
        self._groups = groups
        self._caterings = caterings

    def add_student(
        self,
        *,
        group_id: int,
        first_name: str,
        last_name: str,
        allergies: Optional[str] = None,
        guardians: Sequence[str] = (),
    ) -> Student:
        first_name = require_non_empty(first_name, "First name")
        last_name = require_non_empty(last_name, "Last name")

        student = self._students.create(
            group_id=int(group_id),
            first_name=first_name,
            last_name=last_name,
            allergies=optional_text(allergies),
            guardians=clean_list(guardians),
        )
        if not student:
            raise NotFoundError("Group not found or closed to new students")
        return student

    def update_student(
        self,
        *,
        student_id: int,
        first_name: str,
        last_name: str,
        allergies: Optional[str] = None,
        guardians: Sequence[str] = (),
    ) -> Student:
        first_name = require_non_empty(first_name, "First name")
        last_name = require_non_empty(last_name, "Last name")

        student = self._students.update(
            student_id=int(student_id),
            first_name=first_name,
            last_name=last_name,
            allergies=optional_text(allergies),
            guardians=clean_list(guardians),
        )
        if not student:
            raise NotFoundError("Student not found")
        return student

    def move_student(self, *, student_id: int, group_id: int) -> Student:
        student = self.get_student(student_id)
        if not self._groups.get_by_id(int(group_id)):
            raise NotFoundError("Group not found")
        if not self._students.move(student_id=student.student_id, group_id=int(group_id)):
            raise NotFoundError("Group not found or closed to new students")
        return self.get_student(student.student_id)

    def remove_student(self, *, student_id: int) -> None:
        student = self.get_student(student_id)
        if not self._students.set_removed(student_id=student.student_id, removed=True):
            raise NotFoundError("Student not found")

    def get_student(self, student_id: int) -> Student:
        student = self._students.get_by_id(int(student_id))
        if not student:
            raise NotFoundError("Student not found")
        return student

    def list_enrolled(self, *, catering_id: int) -> frozenset[Student]:
        if not self._caterings.get_by_id(int(catering_id)):
            raise NotFoundError("Catering not found")
        return frozenset(self._students.list_for_catering(int(catering_id)))

    def list_in_group(self, *, group_id: int) -> Sequence[Student]:
        if not self._groups.get_by_id(int(group_id)):
            raise NotFoundError("Group not found")
        return self._students.list_in_group(int(group_id))
