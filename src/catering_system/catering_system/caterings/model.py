from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time
from typing import Optional, Sequence

from ..core.enums import Weekday


@dataclass(frozen=True)
class Catering:
    """Recurring meal-service schedule."""

    catering_id: int
    name: str
    start_date: date
    end_date: date
    meals: tuple[str, ...]
    active_weekdays: frozenset[Weekday]
    root_group_id: int
    cutoff_time: Optional[time] = None
    archived: bool = False


@dataclass(frozen=True)
class CateringDraft:
    """Raw create/update input, before validation."""

    name: Optional[str] = None
    start_date: "str | date | None" = None
    end_date: "str | date | None" = None
    meals: Optional[Sequence[str]] = None
    active_weekdays: Optional[Sequence["str | Weekday"]] = None
    cutoff_time: "str | time | None" = None


@dataclass(frozen=True)
class ValidCatering:
    name: str
    start_date: date
    end_date: date
    meals: tuple[str, ...]
    active_weekdays: frozenset[Weekday] = field(default_factory=frozenset)
    cutoff_time: Optional[time] = None
