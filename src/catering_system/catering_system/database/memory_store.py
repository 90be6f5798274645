"""Process-local store backing the in-memory repositories.

Writers serialize per entity key through ``KeyedLocks`` and publish their
change under the short ``lock``; readers copy what they need under the same
lock, so a read never observes half of a write.
"""

from __future__ import annotations

import itertools
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import date
from typing import Hashable, Iterator, Optional

from ..cancellations.model import CancellationEvent, CancellationRecord
from ..caterings.model import Catering
from ..groups.model import Group
from ..students.model import Student

CancellationKey = tuple[int, int, date]


class _KeyLock:
    __slots__ = ("lock", "users")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.users = 0


class KeyedLocks:
    """One lock per key, kept only while some thread holds or waits for it."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[Hashable, _KeyLock] = {}

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = self._locks[key] = _KeyLock()
            entry.users += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._guard:
                entry.users -= 1
                if entry.users == 0:
                    del self._locks[key]

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


@dataclass
class MemoryStore:
    caterings: dict[int, Catering] = field(default_factory=dict)
    groups: dict[int, Group] = field(default_factory=dict)
    students: dict[int, Student] = field(default_factory=dict)
    cancellations: dict[CancellationKey, CancellationRecord] = field(default_factory=dict)
    history: dict[CancellationKey, list[CancellationEvent]] = field(default_factory=dict)

    lock: threading.RLock = field(default_factory=threading.RLock, repr=False)
    keys: KeyedLocks = field(default_factory=KeyedLocks, repr=False)
    _sequences: dict[str, "itertools.count[int]"] = field(default_factory=dict, repr=False)

    def next_id(self, table: str) -> int:
        with self.lock:
            seq = self._sequences.get(table)
            if seq is None:
                seq = self._sequences[table] = itertools.count(1)
            return next(seq)

    def subtree_ids(self, group_id: int) -> set[int]:
        """Caller must hold ``lock``."""
        children: dict[int, list[int]] = {}
        for g in self.groups.values():
            if g.parent_id is not None:
                children.setdefault(g.parent_id, []).append(g.group_id)

        out: set[int] = set()
        stack = [group_id]
        while stack:
            gid = stack.pop()
            if gid in out:
                continue
            out.add(gid)
            stack.extend(children.get(gid, ()))
        return out

    def open_group(self, group_id: int) -> Optional[Group]:
        """Group that can take new members: not removed, catering not archived.

        Caller must hold ``lock``.
        """
        group = self.groups.get(int(group_id))
        if group is None or group.removed:
            return None
        catering = self.caterings.get(group.catering_id)
        if catering is None or catering.archived:
            return None
        return group
