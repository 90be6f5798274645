from __future__ import annotations

from dataclasses import replace
from typing import Optional, Sequence

from ..core.enums import ErrorKind
from ..core.exceptions import ValidationError
from ..database.memory_store import MemoryStore
from ..groups.model import Group
from .model import Catering, ValidCatering
from .repository import CateringRepository


class MemoryCateringRepository(CateringRepository):
    def __init__(self, store: MemoryStore):
        self._store = store

    def _name_taken(self, name: str, *, exclude_id: Optional[int] = None) -> bool:
        key = name.casefold()
        return any(c.name.casefold() == key and c.catering_id != exclude_id for c in self._store.caterings.values())

    def create(self, *, data: ValidCatering) -> Catering:
        with self._store.keys.hold(("catering-name", data.name.casefold())), self._store.lock:
            if self._name_taken(data.name):
                raise ValidationError("Catering with this name already exists", kind=ErrorKind.DUPLICATE_NAME)

            catering_id = self._store.next_id("caterings")
            root_id = self._store.next_id("groups")
            catering = Catering(
                catering_id=catering_id,
                name=data.name,
                start_date=data.start_date,
                end_date=data.end_date,
                meals=data.meals,
                active_weekdays=data.active_weekdays,
                root_group_id=root_id,
                cutoff_time=data.cutoff_time,
            )
            self._store.groups[root_id] = Group(group_id=root_id, name=data.name, catering_id=catering_id)
            self._store.caterings[catering_id] = catering
            return catering

    def update(self, *, catering_id: int, data: ValidCatering) -> Optional[Catering]:
        with self._store.keys.hold(("catering", int(catering_id))), self._store.lock:
            current = self._store.caterings.get(int(catering_id))
            if not current:
                return None
            if self._name_taken(data.name, exclude_id=current.catering_id):
                raise ValidationError("Catering with this name already exists", kind=ErrorKind.DUPLICATE_NAME)

            updated = replace(
                current,
                name=data.name,
                start_date=data.start_date,
                end_date=data.end_date,
                meals=data.meals,
                active_weekdays=data.active_weekdays,
                cutoff_time=data.cutoff_time,
            )
            self._store.caterings[current.catering_id] = updated
            root = self._store.groups[current.root_group_id]
            self._store.groups[root.group_id] = replace(root, name=data.name)
            return updated

    def get_by_id(self, catering_id: int) -> Optional[Catering]:
        with self._store.lock:
            return self._store.caterings.get(int(catering_id))

    def get_by_name(self, name: str) -> Optional[Catering]:
        key = (name or "").strip().casefold()
        with self._store.lock:
            for c in self._store.caterings.values():
                if c.name.casefold() == key:
                    return c
        return None

    def list_all(self, *, include_archived: bool = False) -> Sequence[Catering]:
        with self._store.lock:
            items = [c for c in self._store.caterings.values() if include_archived or not c.archived]
        return sorted(items, key=lambda c: c.name.casefold())

    def set_archived(self, *, catering_id: int, archived: bool) -> bool:
        # Student writes publish under the store lock, so the check and the flip cannot be split.
        with self._store.keys.hold(("catering", int(catering_id))), self._store.lock:
            current = self._store.caterings.get(int(catering_id))
            if not current:
                return False
            if archived and self._has_enrolled(current.catering_id):
                raise ValidationError("Catering still has enrolled students", kind=ErrorKind.HAS_ENROLLED_STUDENTS)
            self._store.caterings[current.catering_id] = replace(current, archived=bool(archived))
            return True

    def _has_enrolled(self, catering_id: int) -> bool:
        """Caller must hold the store lock."""
        group_ids = {g.group_id for g in self._store.groups.values() if g.catering_id == catering_id}
        return any(s.group_id in group_ids and not s.removed for s in self._store.students.values())
