from __future__ import annotations

from typing import Optional, Sequence

import mysql.connector

from ..core.enums import ErrorKind, Weekday
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    db_cursor,
    fetchall,
    fetchone,
    normalize_mysql_time,
    placeholders,
    raise_duplicate_name,
    with_conflict_retry,
)
from .model import Catering, ValidCatering
from .repository import CateringRepository

_COLUMNS = "catering_id, name, start_date, end_date, dow, cutoff_time, root_group_id, archived"


def hydrate_caterings(cur, rows: list[dict]) -> list[Catering]:
    """Build caterings from rows, loading their meals in order."""

    if not rows:
        return []
    ids = [int(r["catering_id"]) for r in rows]
    cur.execute(
        f"""
        SELECT catering_id, name
        FROM catering_meals
        WHERE catering_id IN ({placeholders(len(ids))})
        ORDER BY catering_id, meal_order
        """,
        tuple(ids),
    )
    meals: dict[int, list[str]] = {}
    for m in fetchall(cur):
        meals.setdefault(int(m["catering_id"]), []).append(m["name"])

    return [
        Catering(
            catering_id=int(r["catering_id"]),
            name=r["name"],
            start_date=r["start_date"],
            end_date=r["end_date"],
            meals=tuple(meals.get(int(r["catering_id"]), ())),
            active_weekdays=Weekday.from_mask(int(r["dow"])),
            root_group_id=int(r["root_group_id"]),
            cutoff_time=normalize_mysql_time(r.get("cutoff_time")),
            archived=bool(r["archived"]),
        )
        for r in rows
    ]


class MySQLCateringRepository(CateringRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _write_meals(cur, catering_id: int, meals: Sequence[str]) -> None:
        cur.execute("DELETE FROM catering_meals WHERE catering_id=%s", (catering_id,))
        cur.executemany(
            "INSERT INTO catering_meals(catering_id, meal_order, name) VALUES(%s,%s,%s)",
            [(catering_id, i, name) for i, name in enumerate(meals)],
        )

    def create(self, *, data: ValidCatering) -> Catering:
        def op() -> Catering:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute("INSERT INTO student_groups(name) VALUES(%s)", (data.name,))
                root_id = int(cur.lastrowid)
                cur.execute(
                    """
                    INSERT INTO caterings(name, name_key, start_date, end_date, dow, cutoff_time, root_group_id)
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        data.name,
                        data.name.casefold(),
                        data.start_date,
                        data.end_date,
                        Weekday.to_mask(data.active_weekdays),
                        data.cutoff_time,
                        root_id,
                    ),
                )
                catering_id = int(cur.lastrowid)
                cur.execute("UPDATE student_groups SET catering_id=%s WHERE group_id=%s", (catering_id, root_id))
                self._write_meals(cur, catering_id, data.meals)

                cur.execute(f"SELECT {_COLUMNS} FROM caterings WHERE catering_id=%s", (catering_id,))
                return hydrate_caterings(cur, [fetchone(cur)])[0]

        try:
            return with_conflict_retry(op)
        except mysql.connector.IntegrityError as e:
            raise_duplicate_name(e)
            raise

    def update(self, *, catering_id: int, data: ValidCatering) -> Optional[Catering]:
        def op() -> Optional[Catering]:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"SELECT {_COLUMNS} FROM caterings WHERE catering_id=%s FOR UPDATE",
                    (int(catering_id),),
                )
                row = fetchone(cur)
                if not row:
                    return None
                cur.execute(
                    """
                    UPDATE caterings
                    SET name=%s, name_key=%s, start_date=%s, end_date=%s, dow=%s, cutoff_time=%s
                    WHERE catering_id=%s
                    """,
                    (
                        data.name,
                        data.name.casefold(),
                        data.start_date,
                        data.end_date,
                        Weekday.to_mask(data.active_weekdays),
                        data.cutoff_time,
                        int(catering_id),
                    ),
                )
                cur.execute("UPDATE student_groups SET name=%s WHERE group_id=%s", (data.name, row["root_group_id"]))
                self._write_meals(cur, int(catering_id), data.meals)

                cur.execute(f"SELECT {_COLUMNS} FROM caterings WHERE catering_id=%s", (int(catering_id),))
                return hydrate_caterings(cur, [fetchone(cur)])[0]

        try:
            return with_conflict_retry(op)
        except mysql.connector.IntegrityError as e:
            raise_duplicate_name(e)
            raise

    def get_by_id(self, catering_id: int) -> Optional[Catering]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM caterings WHERE catering_id=%s", (int(catering_id),))
            r = fetchone(cur)
            if not r:
                return None
            return hydrate_caterings(cur, [r])[0]

    def get_by_name(self, name: str) -> Optional[Catering]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM caterings WHERE name_key=%s", ((name or "").strip().casefold(),))
            r = fetchone(cur)
            if not r:
                return None
            return hydrate_caterings(cur, [r])[0]

    def list_all(self, *, include_archived: bool = False) -> Sequence[Catering]:
        where = "" if include_archived else "WHERE archived=0"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM caterings {where} ORDER BY name_key")
            return hydrate_caterings(cur, fetchall(cur))

    def set_archived(self, *, catering_id: int, archived: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT catering_id FROM caterings WHERE catering_id=%s FOR UPDATE", (int(catering_id),))
            if not fetchone(cur):
                return False
            if archived:
                # Locking the catering's groups blocks student inserts (FK check) until commit.
                cur.execute("SELECT group_id FROM student_groups WHERE catering_id=%s FOR UPDATE", (int(catering_id),))
                fetchall(cur)
                cur.execute(
                    """
                    SELECT COUNT(*) AS enrolled
                    FROM students s
                    JOIN student_groups g ON g.group_id = s.group_id
                    WHERE g.catering_id=%s AND s.removed=0
                    FOR UPDATE
                    """,
                    (int(catering_id),),
                )
                if int(fetchone(cur)["enrolled"]):
                    raise ValidationError(
                        "Catering still has enrolled students",
                        kind=ErrorKind.HAS_ENROLLED_STUDENTS,
                    )
            cur.execute("UPDATE caterings SET archived=%s WHERE catering_id=%s", (int(bool(archived)), int(catering_id)))
            return True
