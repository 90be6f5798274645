from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Group, GroupRemoval


class GroupRepository(Protocol):
    def create(self, *, name: str, parent_id: int) -> Optional[Group]:
        """Create a child group; returns None if the parent cannot take new members."""

        raise NotImplementedError

    def get_by_id(self, group_id: int) -> Optional[Group]:
        raise NotImplementedError

    def list_children(self, group_id: int) -> Sequence[Group]:
        raise NotImplementedError

    def rename(self, *, group_id: int, name: str) -> bool:
        raise NotImplementedError

    def move(self, *, group_id: int, new_parent_id: int) -> bool:
        """Re-parent a group; the subtree takes the new parent's catering.

        Raises ValidationError(InvalidGroupMove) if the new parent lies inside
        the moved subtree.
        """

        raise NotImplementedError

    def remove_subtree(self, *, group_id: int) -> Optional[GroupRemoval]:
        """Soft-remove the group, its descendants and their students.

        Returns None if the group does not exist or is already removed.
        """

        raise NotImplementedError

    def ancestors(self, group_id: int) -> Sequence[Group]:
        """Trail from the root down to (and including) the group."""

        raise NotImplementedError

    def subtree_ids(self, group_id: int) -> set[int]:
        raise NotImplementedError
