from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import time, timedelta
from typing import Any, Callable, Dict, List, Optional, TypeVar

import mysql.connector
from mysql.connector import errorcode

from ..core.constants import CONFLICT_RETRIES, MYSQL_DEADLOCK_ERRNO, MYSQL_LOCK_WAIT_TIMEOUT_ERRNO
from ..core.enums import ErrorKind
from ..core.exceptions import ConcurrencyConflict, ValidationError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

T = TypeVar("T")

_CONFLICT_ERRNOS = {MYSQL_DEADLOCK_ERRNO, MYSQL_LOCK_WAIT_TIMEOUT_ERRNO}


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True, snapshot: bool = False):
    """Yield (conn, cursor) inside one transaction.

    ``snapshot=True`` opens a read-only transaction with a consistent snapshot,
    so several SELECTs observe the same committed state.
    """

    conn = conn_factory.connect()
    try:
        if snapshot:
            conn.start_transaction(consistent_snapshot=True, readonly=True)
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def with_conflict_retry(operation: Callable[[], T], *, retries: int = CONFLICT_RETRIES) -> T:
    """Run a write, retrying on deadlock / lock wait timeout.

    Raises ConcurrencyConflict once the retries are used up.
    """

    attempt = 0
    while True:
        try:
            return operation()
        except mysql.connector.Error as e:
            if e.errno not in _CONFLICT_ERRNOS:
                raise
            if attempt >= retries:
                raise ConcurrencyConflict("Write conflicted with a concurrent update") from e
            attempt += 1
            logger.warning("retrying write after conflict errno=%s attempt=%s", e.errno, attempt)


def is_duplicate_key(error: mysql.connector.Error) -> bool:
    return error.errno == errorcode.ER_DUP_ENTRY


def raise_duplicate_name(error: mysql.connector.Error) -> None:
    if is_duplicate_key(error):
        raise ValidationError("Catering with this name already exists", kind=ErrorKind.DUPLICATE_NAME) from error
    raise error


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def placeholders(n: int) -> str:
    return ",".join(["%s"] * int(n))


def normalize_mysql_time(value: Any) -> Optional[time]:
    """Normalize MySQL TIME values across connector implementations.

    mysql-connector can return TIME as:
    - datetime.time
    - datetime.timedelta
    - string (e.g. '08:30:00')
    """

    if value is None:
        return None

    if isinstance(value, time):
        return value

    if isinstance(value, timedelta):
        total_seconds = int(value.total_seconds()) % 86400
        hours = total_seconds // 3600
        minutes = (total_seconds % 3600) // 60
        seconds = total_seconds % 60
        return time(hour=hours, minute=minutes, second=seconds)

    if isinstance(value, str):
        parts = value.strip().split(":")
        if len(parts) < 2:
            raise ValueError(f"Invalid time string: {value!r}")
        hours = int(parts[0])
        minutes = int(parts[1])
        seconds = int(parts[2]) if len(parts) >= 3 and parts[2] else 0
        return time(hour=hours, minute=minutes, second=seconds)

    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")
