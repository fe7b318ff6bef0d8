from __future__ import annotations

import logging
from typing import Optional

from ..common.identifiers import new_object_id
from ..core.constants import DEFAULT_ROLE, DEMO_EMPLOYEE_EMAIL
from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)

# Idempotent: safe to run on every startup.
SCHEMA_STATEMENTS = (
    """
    CREATE TABLE IF NOT EXISTS employees (
        employee_id CHAR(24) NOT NULL PRIMARY KEY,
        name VARCHAR(255) NOT NULL,
        email VARCHAR(255) NOT NULL,
        role VARCHAR(100) NOT NULL DEFAULT 'Employee',
        face_images TEXT NOT NULL,
        created_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP,
        updated_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP,
        UNIQUE KEY uq_employees_email (email)
    ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_unicode_ci
    """,
    """
    CREATE TABLE IF NOT EXISTS attendance_records (
        attendance_id INT NOT NULL AUTO_INCREMENT PRIMARY KEY,
        employee_id CHAR(24) NOT NULL,
        work_date CHAR(10) NOT NULL,
        check_in_time DATETIME NOT NULL,
        check_out_time DATETIME NULL DEFAULT NULL,
        working_hours DECIMAL(6,2) NOT NULL DEFAULT 0,
        status ENUM('Present','Late','Absent') NOT NULL,
        attendance_photo VARCHAR(1024) NOT NULL,
        created_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP,
        updated_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP,
        UNIQUE KEY uq_attendance_employee_date (employee_id, work_date),
        KEY ix_attendance_work_date (work_date),
        CONSTRAINT fk_attendance_employee FOREIGN KEY (employee_id) REFERENCES employees (employee_id),
        CONSTRAINT ck_attendance_hours CHECK (working_hours >= 0)
    ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_unicode_ci
    """,
)


def ensure_database_exists(db_config: dict) -> None:
    config = DBConfig.from_dict(db_config)
    conn = DatabaseConnection(config).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict) -> None:
    ensure_database_exists(db_config)
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        for stmt in SCHEMA_STATEMENTS:
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_demo_employee(db_config: dict, *, employee_id: Optional[str] = None) -> str:
    """Create the demo employee if missing and return its id."""
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor(dictionary=True)
        cur.execute("SELECT employee_id FROM employees WHERE email=%s", (DEMO_EMPLOYEE_EMAIL,))
        existing = cur.fetchone()
        if existing:
            return existing["employee_id"]

        new_id = employee_id or new_object_id()
        cur.execute(
            """
            INSERT INTO employees(employee_id, name, email, role, face_images)
            VALUES(%s,%s,%s,%s,%s)
            """,
            (new_id, "Demo Employee", DEMO_EMPLOYEE_EMAIL, DEFAULT_ROLE, "[]"),
        )
        conn.commit()
        logger.info("demo employee created: %s", new_id)
        return new_id
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
