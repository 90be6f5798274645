from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Group:
    """Node of a catering's group tree. The root has no parent."""

    group_id: int
    name: str
    catering_id: int
    parent_id: Optional[int] = None
    removed: bool = False

    @property
    def is_root(self) -> bool:
        return self.parent_id is None


@dataclass(frozen=True)
class GroupRemoval:
    """How many groups and students a subtree removal took out."""

    groups: int
    students: int
