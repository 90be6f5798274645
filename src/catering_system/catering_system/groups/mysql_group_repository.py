from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import ErrorKind
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, placeholders, with_conflict_retry
from .model import Group, GroupRemoval
from .repository import GroupRepository

_SUBTREE_SQL = """
    WITH RECURSIVE subtree AS (
        SELECT group_id FROM student_groups WHERE group_id=%s
        UNION ALL
        SELECT g.group_id FROM student_groups g JOIN subtree s ON g.parent_id = s.group_id
    )
    SELECT group_id FROM subtree
"""

# A group takes new members only while it is live and its catering is not archived.
OPEN_GROUP_SQL = """
    SELECT g.group_id, g.catering_id
    FROM student_groups g JOIN caterings c ON c.catering_id = g.catering_id
    WHERE g.group_id=%s AND g.removed=0 AND c.archived=0
    LOCK IN SHARE MODE
"""


def _to_group(r: dict) -> Group:
    return Group(
        group_id=int(r["group_id"]),
        name=r["name"],
        catering_id=int(r["catering_id"]),
        parent_id=int(r["parent_id"]) if r.get("parent_id") is not None else None,
        removed=bool(r.get("removed", 0)),
    )


class MySQLGroupRepository(GroupRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, name: str, parent_id: int) -> Optional[Group]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(OPEN_GROUP_SQL, (int(parent_id),))
            parent = fetchone(cur)
            if not parent:
                return None
            cur.execute(
                "INSERT INTO student_groups(name, parent_id, catering_id) VALUES(%s,%s,%s)",
                (name, int(parent_id), int(parent["catering_id"])),
            )
            return Group(
                group_id=int(cur.lastrowid),
                name=name,
                catering_id=int(parent["catering_id"]),
                parent_id=int(parent_id),
            )

    def get_by_id(self, group_id: int) -> Optional[Group]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT group_id, name, parent_id, catering_id FROM student_groups WHERE group_id=%s AND removed=0",
                (int(group_id),),
            )
            r = fetchone(cur)
            return _to_group(r) if r else None

    def list_children(self, group_id: int) -> Sequence[Group]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT group_id, name, parent_id, catering_id FROM student_groups "
                "WHERE parent_id=%s AND removed=0 ORDER BY name",
                (int(group_id),),
            )
            return [_to_group(r) for r in fetchall(cur)]

    def rename(self, *, group_id: int, name: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT group_id FROM student_groups WHERE group_id=%s AND removed=0 FOR UPDATE",
                (int(group_id),),
            )
            if not fetchone(cur):
                return False
            cur.execute("UPDATE student_groups SET name=%s WHERE group_id=%s", (name, int(group_id)))
            return True

    def move(self, *, group_id: int, new_parent_id: int) -> bool:
        def op() -> bool:
            with db_cursor(self._conn_factory) as (_, cur):
                # Lock both rows so two crossing moves cannot build a cycle.
                cur.execute(
                    "SELECT group_id, catering_id FROM student_groups "
                    "WHERE group_id IN (%s,%s) AND removed=0 FOR UPDATE",
                    (int(group_id), int(new_parent_id)),
                )
                rows = {int(r["group_id"]): r for r in fetchall(cur)}
                if int(group_id) not in rows or int(new_parent_id) not in rows:
                    return False
                cur.execute(OPEN_GROUP_SQL, (int(new_parent_id),))
                if not fetchone(cur):
                    return False

                cur.execute(_SUBTREE_SQL, (int(group_id),))
                subtree = [int(r["group_id"]) for r in fetchall(cur)]
                if int(new_parent_id) in subtree:
                    raise ValidationError("Cannot move a group into its own subtree", kind=ErrorKind.INVALID_GROUP_MOVE)

                cur.execute("UPDATE student_groups SET parent_id=%s WHERE group_id=%s", (int(new_parent_id), int(group_id)))
                cur.execute(
                    f"UPDATE student_groups SET catering_id=%s WHERE group_id IN ({placeholders(len(subtree))})",
                    (int(rows[int(new_parent_id)]["catering_id"]), *subtree),
                )
                return True

        return with_conflict_retry(op)

    def remove_subtree(self, *, group_id: int) -> Optional[GroupRemoval]:
        def op() -> Optional[GroupRemoval]:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "SELECT group_id FROM student_groups WHERE group_id=%s AND removed=0 FOR UPDATE",
                    (int(group_id),),
                )
                if not fetchone(cur):
                    return None

                cur.execute(_SUBTREE_SQL, (int(group_id),))
                subtree = [int(r["group_id"]) for r in fetchall(cur)]
                marks = placeholders(len(subtree))
                cur.execute(f"UPDATE student_groups SET removed=1 WHERE group_id IN ({marks}) AND removed=0", tuple(subtree))
                groups = cur.rowcount
                cur.execute(f"UPDATE students SET removed=1 WHERE group_id IN ({marks}) AND removed=0", tuple(subtree))
                return GroupRemoval(groups=groups, students=cur.rowcount)

        return with_conflict_retry(op)

    def ancestors(self, group_id: int) -> Sequence[Group]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                WITH RECURSIVE trail AS (
                    SELECT group_id, name, parent_id, catering_id, 0 AS depth FROM student_groups WHERE group_id=%s
                    UNION ALL
                    SELECT g.group_id, g.name, g.parent_id, g.catering_id, t.depth + 1
                    FROM student_groups g JOIN trail t ON g.group_id = t.parent_id
                )
                SELECT group_id, name, parent_id, catering_id FROM trail ORDER BY depth DESC
                """,
                (int(group_id),),
            )
            return [_to_group(r) for r in fetchall(cur)]

    def subtree_ids(self, group_id: int) -> set[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SUBTREE_SQL, (int(group_id),))
            return {int(r["group_id"]) for r in fetchall(cur)}
