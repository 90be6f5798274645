from __future__ import annotations

from dataclasses import replace
from typing import Optional, Sequence

from ..core.enums import ErrorKind
from ..core.exceptions import ValidationError
from ..database.memory_store import MemoryStore
from .model import Group, GroupRemoval
from .repository import GroupRepository


class MemoryGroupRepository(GroupRepository):
    def __init__(self, store: MemoryStore):
        self._store = store

    def create(self, *, name: str, parent_id: int) -> Optional[Group]:
        with self._store.lock:
            parent = self._store.open_group(parent_id)
            if not parent:
                return None
            group = Group(
                group_id=self._store.next_id("groups"),
                name=name,
                catering_id=parent.catering_id,
                parent_id=parent.group_id,
            )
            self._store.groups[group.group_id] = group
            return group

    def get_by_id(self, group_id: int) -> Optional[Group]:
        with self._store.lock:
            group = self._store.groups.get(int(group_id))
            return group if group and not group.removed else None

    def list_children(self, group_id: int) -> Sequence[Group]:
        with self._store.lock:
            items = [
                g for g in self._store.groups.values()
                if g.parent_id == int(group_id) and not g.removed
            ]
        return sorted(items, key=lambda g: g.name.casefold())

    def rename(self, *, group_id: int, name: str) -> bool:
        with self._store.keys.hold(("group", int(group_id))), self._store.lock:
            current = self._store.groups.get(int(group_id))
            if not current or current.removed:
                return False
            self._store.groups[current.group_id] = replace(current, name=name)
            return True

    def move(self, *, group_id: int, new_parent_id: int) -> bool:
        # Moves touch the shape of the whole tree, so they run under the store lock.
        with self._store.lock:
            group = self._store.groups.get(int(group_id))
            parent = self._store.open_group(new_parent_id)
            if not group or group.removed or not parent:
                return False

            subtree = self._store.subtree_ids(group.group_id)
            if parent.group_id in subtree:
                raise ValidationError("Cannot move a group into its own subtree", kind=ErrorKind.INVALID_GROUP_MOVE)

            self._store.groups[group.group_id] = replace(group, parent_id=parent.group_id)
            for gid in subtree:
                g = self._store.groups[gid]
                self._store.groups[gid] = replace(g, catering_id=parent.catering_id)
            return True

    def remove_subtree(self, *, group_id: int) -> Optional[GroupRemoval]:
        with self._store.lock:
            group = self._store.groups.get(int(group_id))
            if not group or group.removed:
                return None

            subtree = self._store.subtree_ids(group.group_id)
            groups = 0
            for gid in subtree:
                g = self._store.groups[gid]
                if not g.removed:
                    self._store.groups[gid] = replace(g, removed=True)
                    groups += 1

            students = 0
            for sid, s in list(self._store.students.items()):
                if s.group_id in subtree and not s.removed:
                    self._store.students[sid] = replace(s, removed=True)
                    students += 1
            return GroupRemoval(groups=groups, students=students)

    def ancestors(self, group_id: int) -> Sequence[Group]:
        trail: list[Group] = []
        with self._store.lock:
            current = self._store.groups.get(int(group_id))
            while current is not None and len(trail) <= len(self._store.groups):
                trail.append(current)
                current = self._store.groups.get(current.parent_id) if current.parent_id is not None else None
        trail.reverse()
        return trail

    def subtree_ids(self, group_id: int) -> set[int]:
        with self._store.lock:
            if int(group_id) not in self._store.groups:
                return set()
            return self._store.subtree_ids(int(group_id))
