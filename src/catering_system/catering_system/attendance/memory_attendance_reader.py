from __future__ import annotations

from datetime import date
from typing import Optional

from ..database.memory_store import MemoryStore
from .model import MonthSnapshot
from .repository import AttendanceReader


class MemoryAttendanceReader(AttendanceReader):
    def __init__(self, store: MemoryStore):
        self._store = store

    def load_snapshot(self, *, catering_id: int, start: date, end: date) -> Optional[MonthSnapshot]:
        with self._store.lock:
            catering = self._store.caterings.get(int(catering_id))
            if not catering:
                return None

            groups = {g.group_id: g for g in self._store.groups.values() if g.catering_id == catering.catering_id and not g.removed}
            students = tuple(
                s for s in self._store.students.values() if s.group_id in groups and not s.removed
            )
            cancelled = frozenset(
                (sid, day)
                for (sid, cid, day), rec in self._store.cancellations.items()
                if cid == catering.catering_id and start <= day <= end and rec.cancelled
            )
        return MonthSnapshot(catering=catering, groups=groups, students=students, cancelled=cancelled)
