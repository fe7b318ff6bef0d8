from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = (
    "attendance_id, employee_id, work_date, check_in_time, check_out_time, "
    "working_hours, status, attendance_photo, created_at"
)


def _row_to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=r["employee_id"],
        work_date=str(r["work_date"]),
        check_in_time=r["check_in_time"],
        check_out_time=r.get("check_out_time"),
        working_hours=float(r.get("working_hours") or 0),
        status=AttendanceStatus(r["status"]),
        attendance_photo=r["attendance_photo"],
        created_at=r.get("created_at"),
    )


def _employee_filter(employee_id: str, month: Optional[str]) -> tuple[str, list[object]]:
    clauses = ["employee_id=%s"]
    params: list[object] = [employee_id]
    if month:
        clauses.append("work_date LIKE %s")
        params.append(f"{month}-%")
    return " AND ".join(clauses), params


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee_and_date(self, employee_id: str, work_date: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE employee_id=%s AND work_date=%s",
                (employee_id, work_date),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def create_checkin(
        self,
        *,
        employee_id: str,
        work_date: str,
        check_in_time: datetime,
        status: AttendanceStatus,
        attendance_photo: str,
    ) -> AttendanceRecord:
        # uq_attendance_employee_date raises DuplicateKeyError on a racing insert
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(employee_id, work_date, check_in_time, status, attendance_photo, working_hours)
                VALUES(%s,%s,%s,%s,%s,0)
                """,
                (employee_id, work_date, check_in_time, status.value, attendance_photo),
            )
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s",
                (int(cur.lastrowid),),
            )
            return _row_to_record(fetchone(cur))

    def update_checkout(self, *, attendance_id: int, check_out_time: datetime, working_hours: float) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s, working_hours=%s
                WHERE attendance_id=%s AND check_out_time IS NULL
                """,
                (check_out_time, working_hours, int(attendance_id)),
            )
            return cur.rowcount > 0

    def find_for_employee(
        self,
        employee_id: str,
        *,
        month: Optional[str] = None,
        offset: int = 0,
        limit: int = 10,
    ) -> Sequence[AttendanceRecord]:
        where, params = _employee_filter(employee_id, month)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE {where}
                ORDER BY work_date DESC
                LIMIT %s OFFSET %s
                """,
                tuple(params + [int(limit), int(offset)]),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def count_for_employee(self, employee_id: str, *, month: Optional[str] = None) -> int:
        where, params = _employee_filter(employee_id, month)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM attendance_records WHERE {where}", tuple(params))
            row = fetchone(cur)
            return int(row["total"]) if row else 0

    def list_between(self, employee_id: str, start_date: str, end_date: str) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date ASC
                """,
                (employee_id, start_date, end_date),
            )
            return [_row_to_record(r) for r in fetchall(cur)]
