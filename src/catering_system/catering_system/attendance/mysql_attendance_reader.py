from __future__ import annotations

from datetime import date
from typing import Optional

from ..caterings.mysql_catering_repository import hydrate_caterings
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..groups.model import Group
from ..students.mysql_student_repository import load_students
from .model import MonthSnapshot
from .repository import AttendanceReader


class MySQLAttendanceReader(AttendanceReader):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def load_snapshot(self, *, catering_id: int, start: date, end: date) -> Optional[MonthSnapshot]:
        with db_cursor(self._conn_factory, snapshot=True) as (_, cur):
            cur.execute(
                """
                SELECT catering_id, name, start_date, end_date, dow, cutoff_time, root_group_id, archived
                FROM caterings WHERE catering_id=%s
                """,
                (int(catering_id),),
            )
            row = fetchone(cur)
            if not row:
                return None
            catering = hydrate_caterings(cur, [row])[0]

            cur.execute(
                "SELECT group_id, name, parent_id, catering_id FROM student_groups WHERE catering_id=%s AND removed=0",
                (catering.catering_id,),
            )
            groups = {
                int(r["group_id"]): Group(
                    group_id=int(r["group_id"]),
                    name=r["name"],
                    catering_id=int(r["catering_id"]),
                    parent_id=int(r["parent_id"]) if r.get("parent_id") is not None else None,
                )
                for r in fetchall(cur)
            }

            students = load_students(cur, "g.catering_id=%s AND s.removed=0", (catering.catering_id,))

            cur.execute(
                """
                SELECT student_id, day FROM cancellations
                WHERE catering_id=%s AND day BETWEEN %s AND %s AND cancelled=1
                """,
                (catering.catering_id, start, end),
            )
            cancelled = frozenset((int(r["student_id"]), r["day"]) for r in fetchall(cur))

        return MonthSnapshot(catering=catering, groups=groups, students=tuple(students), cancelled=cancelled)
