from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus, CalendarDayStatus


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance record per employee per calendar day."""

    attendance_id: int
    employee_id: str
    work_date: str
    check_in_time: datetime
    check_out_time: Optional[datetime]
    status: AttendanceStatus
    attendance_photo: str
    working_hours: float = 0.0
    created_at: Optional[datetime] = None

    @property
    def is_checked_out(self) -> bool:
        return self.check_out_time is not None

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "employeeId": self.employee_id,
            "date": self.work_date,
            "checkIn": _iso(self.check_in_time),
            "checkOut": _iso(self.check_out_time),
            "workingHours": self.working_hours,
            "status": self.status.value,
            "attendancePhoto": self.attendance_photo,
            "createdAt": _iso(self.created_at),
        }


@dataclass(frozen=True)
class MarkAttendanceResult:
    record: AttendanceRecord
    confidence: float


@dataclass(frozen=True)
class CheckoutResult:
    check_out_time: datetime
    working_hours: float

    def to_dict(self) -> dict:
        return {"checkOut": _iso(self.check_out_time), "workingHours": self.working_hours}


@dataclass(frozen=True)
class HistoryPage:
    records: Sequence[AttendanceRecord]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    def to_dict(self) -> dict:
        return {
            "records": [r.to_dict() for r in self.records],
            "pagination": {
                "total": self.total,
                "page": self.page,
                "limit": self.limit,
                "totalPages": self.total_pages,
            },
        }


@dataclass(frozen=True)
class MonthlySummary:
    """Read-model for the dashboard monthly card."""

    month: str
    present_days: int
    late_days: int
    total_days: int
    average_hours: float
    percentage: int

    def to_dict(self) -> dict:
        return {
            "month": self.month,
            "presentDays": self.present_days,
            "lateDays": self.late_days,
            "totalDays": self.total_days,
            "avgHours": self.average_hours,
            "percentage": self.percentage,
        }


@dataclass(frozen=True)
class WeeklyDay:
    day: str
    date: str
    present: int
    late: int
    absent: int

    def to_dict(self) -> dict:
        return {"day": self.day, "date": self.date, "present": self.present, "late": self.late, "absent": self.absent}


@dataclass(frozen=True)
class CalendarDay:
    date: str
    status: CalendarDayStatus
    record: Optional[AttendanceRecord] = None

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "status": self.status.value,
            "record": self.record.to_dict() if self.record else None,
        }
