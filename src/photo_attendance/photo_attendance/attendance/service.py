from __future__ import annotations

import logging
from datetime import datetime, time
from typing import Any, Optional

from ..common.datetime_utils import (
    calculate_working_hours,
    derive_attendance_status,
    format_date,
    now_local,
    validate_month,
)
from ..common.validators import require_int_in_range, require_object_id
from ..core.constants import DEFAULT_HISTORY_LIMIT, DEFAULT_HISTORY_PAGE, DEFAULT_LATE_AFTER, MAX_HISTORY_LIMIT
from ..core.enums import PhotoCategory
from ..core.exceptions import (
    ConflictError,
    NotFoundError,
    PreconditionFailedError,
    UpstreamError,
    ValidationError,
    VerificationFailedError,
)
from ..database.mysql_base import DuplicateKeyError
from ..employees.repository import EmployeeRepository
from ..photos.storage import PhotoStorage
from ..verification.verifier import PhotoVerifier
from .model import AttendanceRecord, CheckoutResult, HistoryPage, MarkAttendanceResult
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

ALREADY_MARKED = "Attendance already marked for today"
ALREADY_CHECKED_OUT = "Already checked out for today"


class AttendanceService:
    """Check-in / check-out lifecycle, one record per employee per day.

    NoRecord -> CheckedIn (mark_attendance) -> CheckedOut (mark_checkout).
    The existence checks here are a fast path; the store's unique
    (employee_id, work_date) key is what actually prevents duplicates.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        verifier: PhotoVerifier,
        photos: PhotoStorage,
        *,
        late_after: time = DEFAULT_LATE_AFTER,
    ):
        self._attendance = attendance
        self._employees = employees
        self._verifier = verifier
        self._photos = photos
        self._late_after = late_after

    def mark_attendance(self, employee_id: Any, photo: Any, *, now: datetime | None = None) -> MarkAttendanceResult:
        employee_id = require_object_id(employee_id, "Employee ID")
        if not photo:
            raise ValidationError("Photo is required")

        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        if not employee.face_images:
            raise PreconditionFailedError("Please register your face photos first")

        check_in = now or now_local()
        today = format_date(check_in)
        if self._attendance.get_for_employee_and_date(employee_id, today):
            raise ConflictError(ALREADY_MARKED)

        match = self._verifier.verify(photo, employee.face_images)
        if not match.matched:
            logger.warning("face verification failed for %s (confidence=%s)", employee_id, match.confidence)
            raise VerificationFailedError("Face verification failed. Please try again.", confidence=match.confidence)

        photo_url = self._photos.upload(photo, employee_id, PhotoCategory.ATTENDANCE)

        status = derive_attendance_status(check_in, late_after=self._late_after)
        try:
            record = self._attendance.create_checkin(
                employee_id=employee_id,
                work_date=today,
                check_in_time=check_in,
                status=status,
                attendance_photo=photo_url,
            )
        except DuplicateKeyError:
            logger.warning("concurrent check-in for %s on %s rejected by store", employee_id, today)
            self._discard_photo(photo_url)
            raise ConflictError(ALREADY_MARKED)

        logger.info("employee %s checked in on %s (%s)", employee_id, today, status.value)
        return MarkAttendanceResult(record=record, confidence=match.confidence)

    def mark_checkout(self, employee_id: Any, *, now: datetime | None = None) -> CheckoutResult:
        employee_id = require_object_id(employee_id, "Employee ID")
        now = now or now_local()
        today = format_date(now)

        record = self._attendance.get_for_employee_and_date(employee_id, today)
        if not record:
            raise NotFoundError("No check-in record found for today")
        if record.is_checked_out:
            raise ConflictError(ALREADY_CHECKED_OUT)

        working_hours = calculate_working_hours(record.check_in_time, now)
        if not self._attendance.update_checkout(
            attendance_id=record.attendance_id,
            check_out_time=now,
            working_hours=working_hours,
        ):
            raise ConflictError(ALREADY_CHECKED_OUT)

        logger.info("employee %s checked out on %s (%.2fh)", employee_id, today, working_hours)
        return CheckoutResult(check_out_time=now, working_hours=working_hours)

    def get_today_record(self, employee_id: Any, *, now: datetime | None = None) -> Optional[AttendanceRecord]:
        employee_id = require_object_id(employee_id, "Employee ID")
        return self._attendance.get_for_employee_and_date(employee_id, format_date(now or now_local()))

    def get_history(
        self,
        employee_id: Any,
        *,
        month: Optional[str] = None,
        page: Any = DEFAULT_HISTORY_PAGE,
        limit: Any = DEFAULT_HISTORY_LIMIT,
    ) -> HistoryPage:
        """Page of records sorted by date descending, optionally for one YYYY-MM month."""
        employee_id = require_object_id(employee_id, "Employee ID")
        month = validate_month(month) if month else None
        page = require_int_in_range(page, "Page", minimum=1)
        limit = require_int_in_range(limit, "Limit", minimum=1, maximum=MAX_HISTORY_LIMIT)

        records = self._attendance.find_for_employee(employee_id, month=month, offset=(page - 1) * limit, limit=limit)
        total = self._attendance.count_for_employee(employee_id, month=month)
        return HistoryPage(records=list(records), total=total, page=page, limit=limit)

    def _discard_photo(self, photo_url: str) -> None:
        try:
            self._photos.delete(photo_url)
        except UpstreamError as exc:
            logger.warning("could not discard orphaned photo %s: %s", photo_url, exc)
