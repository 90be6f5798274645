from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, with_conflict_retry
from .model import CancellationEvent, CancellationRecord
from .repository import CancellationRepository


class MySQLCancellationRepository(CancellationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, *, student_id: int, catering_id: int, day: date) -> Optional[CancellationRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT student_id, catering_id, day, cancelled, recorded_at
                FROM cancellations
                WHERE student_id=%s AND catering_id=%s AND day=%s
                """,
                (int(student_id), int(catering_id), day),
            )
            r = fetchone(cur)
            if not r:
                return None
            return CancellationRecord(
                student_id=int(r["student_id"]),
                catering_id=int(r["catering_id"]),
                day=r["day"],
                cancelled=bool(r["cancelled"]),
                recorded_at=r["recorded_at"],
            )

    def upsert(
        self,
        *,
        student_id: int,
        catering_id: int,
        day: date,
        cancelled: bool,
        recorded_at: datetime,
    ) -> bool:
        key = (int(student_id), int(catering_id), day)

        def op() -> bool:
            with db_cursor(self._conn_factory) as (_, cur):
                # Row lock serializes writers of the same key.
                cur.execute(
                    "SELECT cancelled FROM cancellations WHERE student_id=%s AND catering_id=%s AND day=%s FOR UPDATE",
                    key,
                )
                r = fetchone(cur)
                previous = bool(r["cancelled"]) if r else False
                if previous == bool(cancelled):
                    return False

                cur.execute(
                    """
                    INSERT INTO cancellations(student_id, catering_id, day, cancelled, recorded_at)
                    VALUES(%s,%s,%s,%s,%s)
                    ON DUPLICATE KEY UPDATE cancelled=VALUES(cancelled), recorded_at=VALUES(recorded_at)
                    """,
                    (*key, int(bool(cancelled)), recorded_at),
                )
                cur.execute(
                    """
                    INSERT INTO cancellation_history(student_id, catering_id, day, cancelled, recorded_at)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (*key, int(bool(cancelled)), recorded_at),
                )
                return True

        return with_conflict_retry(op)

    def history(self, *, student_id: int, catering_id: int, day: date) -> Sequence[CancellationEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT event_id, student_id, catering_id, day, cancelled, recorded_at
                FROM cancellation_history
                WHERE student_id=%s AND catering_id=%s AND day=%s
                ORDER BY event_id
                """,
                (int(student_id), int(catering_id), day),
            )
            return [
                CancellationEvent(
                    event_id=int(r["event_id"]),
                    student_id=int(r["student_id"]),
                    catering_id=int(r["catering_id"]),
                    day=r["day"],
                    cancelled=bool(r["cancelled"]),
                    recorded_at=r["recorded_at"],
                )
                for r in fetchall(cur)
            ]
