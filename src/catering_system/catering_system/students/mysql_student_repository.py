from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, placeholders, with_conflict_retry
from ..groups.mysql_group_repository import OPEN_GROUP_SQL
from .model import Student
from .repository import StudentRepository

_COLUMNS = "s.student_id, s.first_name, s.last_name, s.allergies, s.group_id, s.removed"


def load_students(cur, where: str, params: tuple) -> list[Student]:
    """Run a students SELECT and attach guardians in order."""

    cur.execute(
        f"""
        SELECT {_COLUMNS}
        FROM students s
        JOIN student_groups g ON g.group_id = s.group_id
        WHERE {where}
        ORDER BY s.last_name, s.first_name, s.student_id
        """,
        params,
    )
    rows = fetchall(cur)
    if not rows:
        return []

    ids = [int(r["student_id"]) for r in rows]
    cur.execute(
        f"""
        SELECT student_id, full_name
        FROM student_guardians
        WHERE student_id IN ({placeholders(len(ids))})
        ORDER BY student_id, position
        """,
        tuple(ids),
    )
    guardians: dict[int, list[str]] = {}
    for g in fetchall(cur):
        guardians.setdefault(int(g["student_id"]), []).append(g["full_name"])

    return [
        Student(
            student_id=int(r["student_id"]),
            first_name=r["first_name"],
            last_name=r["last_name"],
            group_id=int(r["group_id"]),
            guardians=tuple(guardians.get(int(r["student_id"]), ())),
            allergies=r.get("allergies"),
            removed=bool(r["removed"]),
        )
        for r in rows
    ]


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _write_guardians(cur, student_id: int, guardians: Sequence[str]) -> None:
        cur.execute("DELETE FROM student_guardians WHERE student_id=%s", (student_id,))
        cur.executemany(
            "INSERT INTO student_guardians(student_id, position, full_name) VALUES(%s,%s,%s)",
            [(student_id, i, name) for i, name in enumerate(guardians)],
        )

    def create(
        self,
        *,
        group_id: int,
        first_name: str,
        last_name: str,
        allergies: Optional[str],
        guardians: Sequence[str],
    ) -> Optional[Student]:
        def op() -> Optional[Student]:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(OPEN_GROUP_SQL, (int(group_id),))
                if not fetchone(cur):
                    return None
                cur.execute(
                    "INSERT INTO students(first_name, last_name, allergies, group_id) VALUES(%s,%s,%s,%s)",
                    (first_name, last_name, allergies, int(group_id)),
                )
                student_id = int(cur.lastrowid)
                self._write_guardians(cur, student_id, guardians)
                return Student(
                    student_id=student_id,
                    first_name=first_name,
                    last_name=last_name,
                    group_id=int(group_id),
                    guardians=tuple(guardians),
                    allergies=allergies,
                )

        return with_conflict_retry(op)

    def get_by_id(self, student_id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            items = load_students(cur, "s.student_id=%s", (int(student_id),))
            return items[0] if items else None

    def update(
        self,
        *,
        student_id: int,
        first_name: str,
        last_name: str,
        allergies: Optional[str],
        guardians: Sequence[str],
    ) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT student_id FROM students WHERE student_id=%s FOR UPDATE", (int(student_id),))
            if not fetchone(cur):
                return None
            cur.execute(
                "UPDATE students SET first_name=%s, last_name=%s, allergies=%s WHERE student_id=%s",
                (first_name, last_name, allergies, int(student_id)),
            )
            self._write_guardians(cur, int(student_id), guardians)
            items = load_students(cur, "s.student_id=%s", (int(student_id),))
            return items[0] if items else None

    def move(self, *, student_id: int, group_id: int) -> bool:
        def op() -> bool:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(OPEN_GROUP_SQL, (int(group_id),))
                if not fetchone(cur):
                    return False
                cur.execute("SELECT student_id FROM students WHERE student_id=%s FOR UPDATE", (int(student_id),))
                if not fetchone(cur):
                    return False
                cur.execute("UPDATE students SET group_id=%s WHERE student_id=%s", (int(group_id), int(student_id)))
                return True

        return with_conflict_retry(op)

    def set_removed(self, *, student_id: int, removed: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT student_id FROM students WHERE student_id=%s FOR UPDATE", (int(student_id),))
            if not fetchone(cur):
                return False
            cur.execute("UPDATE students SET removed=%s WHERE student_id=%s", (int(bool(removed)), int(student_id)))
            return True

    def list_for_catering(self, catering_id: int) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            return load_students(cur, "g.catering_id=%s AND s.removed=0", (int(catering_id),))

    def list_in_group(self, group_id: int) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            return load_students(cur, "s.group_id=%s AND s.removed=0", (int(group_id),))
