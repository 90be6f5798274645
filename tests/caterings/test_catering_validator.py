from __future__ import annotations

from datetime import date, time

import pytest

from src.catering_system.catering_system.caterings.model import CateringDraft
from src.catering_system.catering_system.caterings.validator import CateringValidator
from src.catering_system.catering_system.core.enums import ErrorKind, Weekday
from src.catering_system.catering_system.core.exceptions import ValidationError


def _draft(**overrides) -> CateringDraft:
    data = dict(
        name="Lunch club",
        start_date="2025-10-01",
        end_date="2025-10-31",
        meals=["Lunch"],
        active_weekdays=["Mon", "Wed"],
        cutoff_time="08:30",
    )
    data.update(overrides)
    return CateringDraft(**data)


def test_valid_draft_is_normalized():
    valid = CateringValidator().validate(_draft(name="  Lunch club  ", meals=["Lunch", " lunch ", "Snack", ""]))

    assert valid.name == "Lunch club"
    assert valid.start_date == date(2025, 10, 1)
    assert valid.meals == ("Lunch", "Snack")
    assert valid.active_weekdays == frozenset({Weekday.MON, Weekday.WED})
    assert valid.cutoff_time == time(8, 30)


def test_start_equal_to_end_is_allowed():
    valid = CateringValidator().validate(_draft(start_date="2025-10-08", end_date="2025-10-08"))
    assert valid.start_date == valid.end_date


def test_missing_cutoff_is_allowed():
    assert CateringValidator().validate(_draft(cutoff_time=None)).cutoff_time is None


@pytest.mark.parametrize(
    "overrides, kind",
    [
        ({"start_date": "2025-11-01"}, ErrorKind.INVALID_DATE_RANGE),
        ({"start_date": "2025-13-01"}, ErrorKind.INVALID_DATE_RANGE),
        ({"end_date": None}, ErrorKind.INVALID_DATE_RANGE),
        ({"meals": []}, ErrorKind.MISSING_MEALS),
        ({"meals": ["  "]}, ErrorKind.MISSING_MEALS),
        ({"meals": "Obiad"}, ErrorKind.MISSING_MEALS),
        ({"active_weekdays": []}, ErrorKind.NO_WEEKDAYS_SELECTED),
        ({"active_weekdays": ["Funday"]}, ErrorKind.NO_WEEKDAYS_SELECTED),
        ({"active_weekdays": "Mon"}, ErrorKind.NO_WEEKDAYS_SELECTED),
        ({"active_weekdays": ["Monkey"]}, ErrorKind.NO_WEEKDAYS_SELECTED),
        ({"cutoff_time": "25:00"}, ErrorKind.INVALID_CUTOFF_TIME),
        ({"name": "   "}, ErrorKind.MISSING_REQUIRED_FIELD),
    ],
)
def test_rejects_invalid_drafts(overrides, kind):
    with pytest.raises(ValidationError) as e:
        CateringValidator().validate(_draft(**overrides))
    assert e.value.kind == kind


def test_no_weekdays_message():
    with pytest.raises(ValidationError) as e:
        CateringValidator().validate(_draft(active_weekdays=[]))
    assert e.value.message == "Catering needs to specify at least one day of week"


def test_first_error_follows_priority_and_all_are_attached():
    with pytest.raises(ValidationError) as e:
        CateringValidator().validate(_draft(name="", active_weekdays=[], start_date="2025-12-01"))

    assert e.value.kind == ErrorKind.INVALID_DATE_RANGE
    assert [err.kind for err in e.value.errors] == [
        ErrorKind.INVALID_DATE_RANGE,
        ErrorKind.NO_WEEKDAYS_SELECTED,
        ErrorKind.MISSING_REQUIRED_FIELD,
    ]
