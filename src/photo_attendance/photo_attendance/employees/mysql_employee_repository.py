from __future__ import annotations

import json
from typing import Optional, Sequence

from ..core.constants import MAX_REFERENCE_PHOTOS
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = "employee_id, name, email, role, face_images, created_at, updated_at"


def _row_to_employee(row: dict) -> Employee:
    raw_images = row.get("face_images") or "[]"
    if isinstance(raw_images, (bytes, bytearray)):
        raw_images = raw_images.decode("utf-8")
    return Employee(
        employee_id=row["employee_id"],
        name=row["name"],
        email=row["email"],
        role=row["role"],
        face_images=tuple(json.loads(raw_images)),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (employee_id,))
            row = fetchone(cur)
            return _row_to_employee(row) if row else None

    def get_by_email(self, email: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE email=%s", (email.lower(),))
            row = fetchone(cur)
            return _row_to_employee(row) if row else None

    def create(self, *, employee_id: str, name: str, email: str, role: str) -> Employee:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employees(employee_id, name, email, role, face_images)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (employee_id, name, email.lower(), role, "[]"),
            )
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (employee_id,))
            return _row_to_employee(fetchone(cur))

    def update_face_images(self, employee_id: str, face_images: Sequence[str]) -> Optional[Employee]:
        if len(face_images) > MAX_REFERENCE_PHOTOS:
            raise ValidationError(f"Maximum {MAX_REFERENCE_PHOTOS} face images allowed")

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET face_images=%s WHERE employee_id=%s",
                (json.dumps(list(face_images)), employee_id),
            )
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (employee_id,))
            row = fetchone(cur)
            return _row_to_employee(row) if row else None
