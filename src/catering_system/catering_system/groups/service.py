from __future__ import annotations

from typing import Sequence

from ..caterings.model import Catering
from ..caterings.repository import CateringRepository
from ..common.validators import require_non_empty
from ..core.enums import ErrorKind
from ..core.exceptions import NotFoundError, ValidationError
from .model import Group, GroupRemoval
from .repository import GroupRepository


class GroupService:
    def __init__(self, groups: GroupRepository, caterings: CateringRepository):
        self._groups = groups
        self._caterings = caterings

    def add_group(self, *, parent_group_id: int, name: str) -> Group:
        name = require_non_empty(name, "Group name")
        group = self._groups.create(name=name, parent_id=int(parent_group_id))
        if not group:
            raise NotFoundError("Parent group not found")
        return group

    def rename_group(self, *, group_id: int, name: str) -> Group:
        name = require_non_empty(name, "Group name")
        group = self.get_group(group_id)
        if group.is_root:
            # The root carries the catering's name; rename the catering instead.
            raise ValidationError("Cannot rename a catering root group", kind=ErrorKind.INVALID_GROUP_MOVE)
        if not self._groups.rename(group_id=group.group_id, name=name):
            raise NotFoundError("Group not found")
        return self.get_group(group.group_id)

    def move_group(self, *, group_id: int, new_parent_id: int) -> Group:
        group = self.get_group(group_id)
        parent = self.get_group(new_parent_id)
        if group.is_root:
            raise ValidationError("Cannot move a catering root group", kind=ErrorKind.INVALID_GROUP_MOVE)
        if parent.group_id == group.group_id:
            raise ValidationError("Cannot move a group under itself", kind=ErrorKind.INVALID_GROUP_MOVE)

        if not self._groups.move(group_id=group.group_id, new_parent_id=parent.group_id):
            raise NotFoundError("Group not found")
        return self.get_group(group.group_id)

    def remove_group(self, *, group_id: int) -> GroupRemoval:
        """Soft-remove a group with its subtree; its students leave enrollment."""
        group = self.get_group(group_id)
        if group.is_root:
            raise ValidationError("Cannot remove a catering root group", kind=ErrorKind.INVALID_GROUP_MOVE)
        removal = self._groups.remove_subtree(group_id=group.group_id)
        if removal is None:
            raise NotFoundError("Group not found")
        return removal

    def get_group(self, group_id: int) -> Group:
        group = self._groups.get_by_id(int(group_id))
        if not group:
            raise NotFoundError("Group not found")
        return group

    def list_children(self, *, group_id: int) -> Sequence[Group]:
        group = self.get_group(group_id)
        return self._groups.list_children(group.group_id)

    def breadcrumb(self, *, group_id: int) -> Sequence[Group]:
        group = self.get_group(group_id)
        return self._groups.ancestors(group.group_id)

    def catering_for_group(self, *, group_id: int) -> Catering:
        group = self.get_group(group_id)
        catering = self._caterings.get_by_id(group.catering_id)
        if not catering:
            raise NotFoundError("Catering not found")
        return catering
