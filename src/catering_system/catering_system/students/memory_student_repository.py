from __future__ import annotations

from dataclasses import replace
from typing import Optional, Sequence

from ..database.memory_store import MemoryStore
from .model import Student
from .repository import StudentRepository


class MemoryStudentRepository(StudentRepository):
    def __init__(self, store: MemoryStore):
        self._store = store

    def create(
        self,
        *,
        group_id: int,
        first_name: str,
        last_name: str,
        allergies: Optional[str],
        guardians: Sequence[str],
    ) -> Optional[Student]:
        with self._store.lock:
            if not self._store.open_group(group_id):
                return None
            student = Student(
                student_id=self._store.next_id("students"),
                first_name=first_name,
                last_name=last_name,
                group_id=int(group_id),
                guardians=tuple(guardians),
                allergies=allergies,
            )
            self._store.students[student.student_id] = student
            return student

    def get_by_id(self, student_id: int) -> Optional[Student]:
        with self._store.lock:
            return self._store.students.get(int(student_id))

    def update(
        self,
        *,
        student_id: int,
        first_name: str,
        last_name: str,
        allergies: Optional[str],
        guardians: Sequence[str],
    ) -> Optional[Student]:
        with self._store.keys.hold(("student", int(student_id))), self._store.lock:
            current = self._store.students.get(int(student_id))
            if not current:
                return None
            updated = replace(
                current,
                first_name=first_name,
                last_name=last_name,
                allergies=allergies,
                guardians=tuple(guardians),
            )
            self._store.students[current.student_id] = updated
            return updated

    def move(self, *, student_id: int, group_id: int) -> bool:
        with self._store.keys.hold(("student", int(student_id))), self._store.lock:
            current = self._store.students.get(int(student_id))
            if not current or not self._store.open_group(group_id):
                return False
            self._store.students[current.student_id] = replace(current, group_id=int(group_id))
            return True

    def set_removed(self, *, student_id: int, removed: bool) -> bool:
        with self._store.keys.hold(("student", int(student_id))), self._store.lock:
            current = self._store.students.get(int(student_id))
            if not current:
                return False
            self._store.students[current.student_id] = replace(current, removed=bool(removed))
            return True

    def list_for_catering(self, catering_id: int) -> Sequence[Student]:
        with self._store.lock:
            group_ids = {g.group_id for g in self._store.groups.values() if g.catering_id == int(catering_id)}
            items = [s for s in self._store.students.values() if s.group_id in group_ids and not s.removed]
        return sorted(items, key=lambda s: (s.last_name.casefold(), s.first_name.casefold(), s.student_id))

    def list_in_group(self, group_id: int) -> Sequence[Student]:
        with self._store.lock:
            items = [s for s in self._store.students.values() if s.group_id == int(group_id) and not s.removed]
        return sorted(items, key=lambda s: (s.last_name.casefold(), s.first_name.casefold(), s.student_id))
