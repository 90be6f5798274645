from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Student:
    student_id: int
    first_name: str
    last_name: str
    group_id: int
    guardians: tuple[str, ...] = ()
    allergies: Optional[str] = None
    removed: bool = False

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
