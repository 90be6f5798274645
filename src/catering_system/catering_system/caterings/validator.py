from __future__ import annotations

from datetime import date, time
from typing import Optional

from ..common.datetime_utils import parse_hhmm, parse_iso_date
from ..common.validators import unique_names
from ..core.enums import ErrorKind, Weekday
from ..core.exceptions import ValidationError
from .model import CateringDraft, ValidCatering


def _is_list(value: object) -> bool:
    # A bare string would otherwise be read as a sequence of one-letter names.
    return value is None or isinstance(value, (list, tuple, set, frozenset))


class CateringValidator:
    """Checks a catering draft.

    Every check runs; the failure with the highest priority is raised and the
    remaining ones are attached to it as ``errors``. Priority: date range,
    meals, weekdays, cutoff time, name.
    """

    def validate(self, draft: CateringDraft) -> ValidCatering:
        errors: list[ValidationError] = []

        start, end = self._check_range(draft, errors)
        meals = self._check_meals(draft, errors)
        weekdays = self._check_weekdays(draft, errors)
        cutoff = self._check_cutoff(draft, errors)
        name = (draft.name or "").strip()
        if not name:
            errors.append(ValidationError("Catering must have a name", kind=ErrorKind.MISSING_REQUIRED_FIELD))

        if errors:
            first = errors[0]
            raise ValidationError(first.message, kind=first.kind, errors=errors)

        return ValidCatering(
            name=name,
            start_date=start,
            end_date=end,
            meals=meals,
            active_weekdays=weekdays,
            cutoff_time=cutoff,
        )

    @staticmethod
    def _check_range(draft: CateringDraft, errors: list[ValidationError]) -> tuple[Optional[date], Optional[date]]:
        try:
            if draft.start_date is None or draft.end_date is None:
                raise ValueError("missing date")
            start = parse_iso_date(draft.start_date)
            end = parse_iso_date(draft.end_date)
        except (TypeError, ValueError):
            errors.append(ValidationError("Invalid start or end date", kind=ErrorKind.INVALID_DATE_RANGE))
            return None, None

        if start > end:
            errors.append(ValidationError("Start date must not be after end date", kind=ErrorKind.INVALID_DATE_RANGE))
            return None, None
        return start, end

    @staticmethod
    def _check_meals(draft: CateringDraft, errors: list[ValidationError]) -> tuple[str, ...]:
        if not _is_list(draft.meals):
            errors.append(ValidationError("Meals must be a list of names", kind=ErrorKind.MISSING_MEALS))
            return ()
        meals = unique_names(draft.meals or ())
        if not meals:
            errors.append(ValidationError("Catering needs at least one meal", kind=ErrorKind.MISSING_MEALS))
        return meals

    @staticmethod
    def _check_weekdays(draft: CateringDraft, errors: list[ValidationError]) -> frozenset[Weekday]:
        if not _is_list(draft.active_weekdays):
            errors.append(ValidationError("Weekdays must be a list", kind=ErrorKind.NO_WEEKDAYS_SELECTED))
            return frozenset()
        try:
            weekdays = frozenset(Weekday.parse(d) for d in (draft.active_weekdays or ()))
        except ValueError as e:
            errors.append(ValidationError(str(e), kind=ErrorKind.NO_WEEKDAYS_SELECTED))
            return frozenset()

        if not weekdays:
            errors.append(
                ValidationError(
                    "Catering needs to specify at least one day of week",
                    kind=ErrorKind.NO_WEEKDAYS_SELECTED,
                )
            )
        return weekdays

    @staticmethod
    def _check_cutoff(draft: CateringDraft, errors: list[ValidationError]) -> Optional[time]:
        raw = draft.cutoff_time
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            return None
        try:
            return parse_hhmm(raw)
        except (TypeError, ValueError):
            errors.append(ValidationError("Invalid cutoff time (HH:MM)", kind=ErrorKind.INVALID_CUTOFF_TIME))
            return None
