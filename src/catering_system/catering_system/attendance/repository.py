from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from .model import MonthSnapshot


class AttendanceReader(Protocol):
    def load_snapshot(self, *, catering_id: int, start: date, end: date) -> Optional[MonthSnapshot]:
        """Read catering, groups, enrolled students and cancelled keys in
        [start, end] from one consistent view. None if the catering is unknown.
        """

        raise NotImplementedError
