from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import CancellationEvent, CancellationRecord


class CancellationRepository(Protocol):
    def get(self, *, student_id: int, catering_id: int, day: date) -> Optional[CancellationRecord]:
        raise NotImplementedError

    def upsert(
        self,
        *,
        student_id: int,
        catering_id: int,
        day: date,
        cancelled: bool,
        recorded_at: datetime,
    ) -> bool:
        """Last-write-wins upsert, serialized per key.

        Returns True if the stored value changed (a history event was
        appended), False if the key already held ``cancelled``.
        """

        raise NotImplementedError

    def history(self, *, student_id: int, catering_id: int, day: date) -> Sequence[CancellationEvent]:
        raise NotImplementedError
