from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Student


class StudentRepository(Protocol):
    def create(
        self,
        *,
        group_id: int,
        first_name: str,
        last_name: str,
        allergies: Optional[str],
        guardians: Sequence[str],
    ) -> Optional[Student]:
        """Returns None if the group is missing, removed or in an archived catering."""

        raise NotImplementedError

    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def update(
        self,
        *,
        student_id: int,
        first_name: str,
        last_name: str,
        allergies: Optional[str],
        guardians: Sequence[str],
    ) -> Optional[Student]:
        raise NotImplementedError

    def move(self, *, student_id: int, group_id: int) -> bool:
        raise NotImplementedError

    def set_removed(self, *, student_id: int, removed: bool) -> bool:
        raise NotImplementedError

    def list_for_catering(self, catering_id: int) -> Sequence[Student]:
        """Enrolled (not removed) students of the catering's group tree."""

        raise NotImplementedError

    def list_in_group(self, group_id: int) -> Sequence[Student]:
        """Students placed directly in the group."""

        raise NotImplementedError
