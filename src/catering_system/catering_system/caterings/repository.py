from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Catering, ValidCatering


class CateringRepository(Protocol):
    def create(self, *, data: ValidCatering) -> Catering:
        """Persist a catering together with its root group.

        Raises ValidationError(DuplicateName) if the name is taken.
        """

        raise NotImplementedError

    def update(self, *, catering_id: int, data: ValidCatering) -> Optional[Catering]:
        raise NotImplementedError

    def get_by_id(self, catering_id: int) -> Optional[Catering]:
        raise NotImplementedError

    def get_by_name(self, name: str) -> Optional[Catering]:
        """Case-insensitive lookup."""

        raise NotImplementedError

    def list_all(self, *, include_archived: bool = False) -> Sequence[Catering]:
        raise NotImplementedError

    def set_archived(self, *, catering_id: int, archived: bool) -> bool:
        """Flip the archived flag; False if the catering does not exist.

        Archiving checks for enrolled students in the same atomic step and
        raises ValidationError(HasEnrolledStudents) if any remain.
        """

        raise NotImplementedError
