from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import errorcode

from .connection import DatabaseConnection


class DuplicateKeyError(Exception):
    """A write hit a UNIQUE constraint (employee/date pair, email)."""


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.IntegrityError as exc:
        conn.rollback()
        if exc.errno == errorcode.ER_DUP_ENTRY:
            raise DuplicateKeyError(str(exc)) from exc
        raise
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])
