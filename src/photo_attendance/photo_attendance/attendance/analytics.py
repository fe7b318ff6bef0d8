from __future__ import annotations

from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional, Sequence

from ..common.datetime_utils import days_of_month, format_date, format_month, is_weekend, now_local, validate_month
from ..common.validators import require_object_id
from ..core.enums import AttendanceStatus, CalendarDayStatus
from .model import AttendanceRecord, CalendarDay, MonthlySummary, WeeklyDay
from .repository import AttendanceRepository


def _half_up(value: float, places: int = 0) -> Decimal:
    return Decimal(str(value)).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


class AttendanceAnalyticsService:
    """Dashboard and calendar read-models built from stored records.

    ABSENT is inferred here for past weekdays without a record; it is never
    written to the store.
    """

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def _records_by_date(self, employee_id: str, start: date, end: date) -> dict[str, AttendanceRecord]:
        rows: Sequence[AttendanceRecord] = self._attendance.list_between(employee_id, format_date(start), format_date(end))
        return {r.work_date: r for r in rows}

    def monthly_summary(self, employee_id: Any, *, month: Optional[str] = None, today: date | None = None) -> MonthlySummary:
        employee_id = require_object_id(employee_id, "Employee ID")
        month = validate_month(month) if month else format_month(today or now_local())
        days = days_of_month(month)
        records = list(self._records_by_date(employee_id, days[0], days[-1]).values())

        present = sum(1 for r in records if r.status == AttendanceStatus.PRESENT)
        late = sum(1 for r in records if r.status == AttendanceStatus.LATE)
        total = len(records)
        avg_hours = sum(r.working_hours for r in records) / total if total else 0.0

        return MonthlySummary(
            month=month,
            present_days=present,
            late_days=late,
            total_days=total,
            average_hours=float(_half_up(avg_hours, 1)),
            percentage=int(_half_up(present / total * 100)) if total else 0,
        )

    def weekly_breakdown(self, employee_id: Any, *, today: date | None = None) -> list[WeeklyDay]:
        """The 7 days ending today; weekends never count as absent."""
        employee_id = require_object_id(employee_id, "Employee ID")
        today = today or now_local().date()
        days = [today - timedelta(days=offset) for offset in range(6, -1, -1)]
        by_date = self._records_by_date(employee_id, days[0], days[-1])

        out: list[WeeklyDay] = []
        for d in days:
            record = by_date.get(format_date(d))
            status = record.status if record else None
            out.append(
                WeeklyDay(
                    day=d.strftime("%a"),
                    date=format_date(d),
                    present=int(status == AttendanceStatus.PRESENT),
                    late=int(status == AttendanceStatus.LATE),
                    absent=0 if is_weekend(d) or (record and status != AttendanceStatus.ABSENT) else 1,
                )
            )
        return out

    def calendar(self, employee_id: Any, *, month: Optional[str] = None, today: date | None = None) -> list[CalendarDay]:
        employee_id = require_object_id(employee_id, "Employee ID")
        today = today or now_local().date()
        month = validate_month(month) if month else format_month(today)
        days = days_of_month(month)
        by_date = self._records_by_date(employee_id, days[0], days[-1])

        out: list[CalendarDay] = []
        for d in days:
            key = format_date(d)
            record = by_date.get(key)
            if is_weekend(d):
                status = CalendarDayStatus.WEEKEND
            elif record:
                status = CalendarDayStatus(record.status.value)
            elif d < today:
                status = CalendarDayStatus.ABSENT
            else:
                status = CalendarDayStatus.NONE
            out.append(CalendarDay(date=key, status=status, record=record))
        return out
