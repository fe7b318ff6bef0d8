from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    """Attendance store keyed by (employee_id, work_date).

    ``create_checkin`` must raise ``DuplicateKeyError`` when a record for the
    pair already exists, whatever the caller checked beforehand.
    """

    def get_for_employee_and_date(self, employee_id: str, work_date: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_checkin(
        self,
        *,
        employee_id: str,
        work_date: str,
        check_in_time: datetime,
        status: AttendanceStatus,
        attendance_photo: str,
    ) -> AttendanceRecord:
        raise NotImplementedError

    def update_checkout(self, *, attendance_id: int, check_out_time: datetime, working_hours: float) -> bool:
        """Set check-out and hours together; False if already checked out."""

        raise NotImplementedError

    def find_for_employee(
        self,
        employee_id: str,
        *,
        month: Optional[str] = None,
        offset: int = 0,
        limit: int = 10,
    ) -> Sequence[AttendanceRecord]:
        """Records sorted by work_date descending."""

        raise NotImplementedError

    def count_for_employee(self, employee_id: str, *, month: Optional[str] = None) -> int:
        raise NotImplementedError

    def list_between(self, employee_id: str, start_date: str, end_date: str) -> Sequence[AttendanceRecord]:
        """Records with start_date <= work_date <= end_date (inclusive keys)."""

        raise NotImplementedError
