from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..database.memory_store import MemoryStore
from .model import CancellationEvent, CancellationRecord
from .repository import CancellationRepository


class MemoryCancellationRepository(CancellationRepository):
    def __init__(self, store: MemoryStore):
        self._store = store

    def get(self, *, student_id: int, catering_id: int, day: date) -> Optional[CancellationRecord]:
        with self._store.lock:
            return self._store.cancellations.get((int(student_id), int(catering_id), day))

    def upsert(
        self,
        *,
        student_id: int,
        catering_id: int,
        day: date,
        cancelled: bool,
        recorded_at: datetime,
    ) -> bool:
        key = (int(student_id), int(catering_id), day)
        with self._store.keys.hold(("cancellation",) + key):
            with self._store.lock:
                current = self._store.cancellations.get(key)
            # A missing record already means "not cancelled".
            previous = current.cancelled if current else False
            if previous == bool(cancelled):
                return False

            record = CancellationRecord(
                student_id=key[0],
                catering_id=key[1],
                day=day,
                cancelled=bool(cancelled),
                recorded_at=recorded_at,
            )
            event = CancellationEvent(
                event_id=self._store.next_id("cancellation_history"),
                student_id=key[0],
                catering_id=key[1],
                day=day,
                cancelled=bool(cancelled),
                recorded_at=recorded_at,
            )
            with self._store.lock:
                self._store.cancellations[key] = record
                self._store.history.setdefault(key, []).append(event)
            return True

    def history(self, *, student_id: int, catering_id: int, day: date) -> Sequence[CancellationEvent]:
        with self._store.lock:
            return list(self._store.history.get((int(student_id), int(catering_id), day), ()))
