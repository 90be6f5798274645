from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime


@dataclass(frozen=True)
class CancellationRecord:
    """Latest cancellation state for (student, catering, day)."""

    student_id: int
    catering_id: int
    day: date
    cancelled: bool
    recorded_at: datetime


@dataclass(frozen=True)
class CancellationEvent:
    """One accepted change of a cancellation key, kept for history."""

    event_id: int
    student_id: int
    catering_id: int
    day: date
    cancelled: bool
    recorded_at: datetime
