from __future__ import annotations

from datetime import date, time
from typing import Optional, Sequence

from ..core.enums import ErrorKind, Weekday
from ..core.exceptions import NotFoundError, ValidationError
from .model import Catering, CateringDraft
from .repository import CateringRepository
from .validator import CateringValidator


class CateringService:
    """Use cases: define, change and archive caterings."""

    def __init__(
        self,
        caterings: CateringRepository,
        *,
        validator: Optional[CateringValidator] = None,
    ):
        self._caterings = caterings
        self._validator = validator or CateringValidator()

    def create_catering(
        self,
        *,
        name: Optional[str],
        start_date: "str | date | None",
        end_date: "str | date | None",
        meals: Optional[Sequence[str]],
        active_weekdays: Optional[Sequence["str | Weekday"]],
        cutoff_time: "str | time | None" = None,
    ) -> Catering:
        data = self._validator.validate(
            CateringDraft(
                name=name,
                start_date=start_date,
                end_date=end_date,
                meals=meals,
                active_weekdays=active_weekdays,
                cutoff_time=cutoff_time,
            )
        )

        if self._caterings.get_by_name(data.name):
            raise ValidationError("Catering with this name already exists", kind=ErrorKind.DUPLICATE_NAME)

        return self._caterings.create(data=data)

    def update_catering(
        self,
        *,
        catering_id: int,
        name: Optional[str],
        start_date: "str | date | None",
        end_date: "str | date | None",
        meals: Optional[Sequence[str]],
        active_weekdays: Optional[Sequence["str | Weekday"]],
        cutoff_time: "str | time | None" = None,
    ) -> Catering:
        current = self.get_catering(catering_id)
        data = self._validator.validate(
            CateringDraft(
                name=name,
                start_date=start_date,
                end_date=end_date,
                meals=meals,
                active_weekdays=active_weekdays,
                cutoff_time=cutoff_time,
            )
        )

        other = self._caterings.get_by_name(data.name)
        if other and other.catering_id != current.catering_id:
            raise ValidationError("Catering with this name already exists", kind=ErrorKind.DUPLICATE_NAME)

        updated = self._caterings.update(catering_id=current.catering_id, data=data)
        if not updated:
            raise NotFoundError("Catering not found")
        return updated

    def get_catering(self, catering_id: int) -> Catering:
        catering = self._caterings.get_by_id(int(catering_id))
        if not catering:
            raise NotFoundError("Catering not found")
        return catering

    def list_caterings(self, *, include_archived: bool = False) -> Sequence[Catering]:
        return self._caterings.list_all(include_archived=include_archived)

    def archive_catering(self, *, catering_id: int) -> None:
        catering = self.get_catering(catering_id)
        # The repository refuses with HasEnrolledStudents in the same step.
        if not self._caterings.set_archived(catering_id=catering.catering_id, archived=True):
            raise NotFoundError("Catering not found")
