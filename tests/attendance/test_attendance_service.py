from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime

import pytest

from photo_attendance.attendance.service import AttendanceService
from photo_attendance.core.enums import AttendanceStatus
from photo_attendance.core.exceptions import (
    ConflictError,
    NotFoundError,
    PreconditionFailedError,
    ValidationError,
    VerificationFailedError,
)
from tests.fakes import (
    EMPLOYEE_ID,
    MISSING_EMPLOYEE_ID,
    OTHER_EMPLOYEE_ID,
    FakePhotoStorage,
    FakeVerifier,
    InMemoryAttendance,
    InMemoryEmployees,
    make_employee,
    make_record,
)

MORNING = datetime(2026, 1, 5, 8, 45, 0)


def build(*, photos: int = 3, verifier: FakeVerifier | None = None):
    attendance = InMemoryAttendance()
    storage = FakePhotoStorage()
    verifier = verifier or FakeVerifier()
    svc = AttendanceService(attendance, InMemoryEmployees(make_employee(photos=photos)), verifier, storage)
    return svc, attendance, storage, verifier


def test_mark_attendance_creates_present_record():
    svc, attendance, storage, _ = build()

    result = svc.mark_attendance(EMPLOYEE_ID, "photo", now=MORNING)

    assert result.confidence == 88.5
    rec = attendance.get_for_employee_and_date(EMPLOYEE_ID, "2026-01-05")
    assert rec == result.record
    assert rec.status == AttendanceStatus.PRESENT
    assert rec.check_in_time == MORNING
    assert rec.check_out_time is None
    assert rec.working_hours == 0
    assert rec.attendance_photo.endswith("/attendance/1.jpg")
    assert storage.uploads == [(EMPLOYEE_ID, "attendance")]


def test_mark_attendance_after_cutoff_is_late():
    svc, _, _, _ = build()
    result = svc.mark_attendance(EMPLOYEE_ID, "photo", now=datetime(2026, 1, 5, 9, 30, 1))
    assert result.record.status == AttendanceStatus.LATE


def test_mark_attendance_rejects_malformed_id_before_lookup():
    svc, _, _, verifier = build()
    with pytest.raises(ValidationError):
        svc.mark_attendance("not-an-id", "photo", now=MORNING)
    assert verifier.calls == 0


def test_mark_attendance_requires_photo():
    svc, _, _, _ = build()
    with pytest.raises(ValidationError, match="Photo is required"):
        svc.mark_attendance(EMPLOYEE_ID, "", now=MORNING)


def test_mark_attendance_unknown_employee():
    svc, _, _, _ = build()
    with pytest.raises(NotFoundError):
        svc.mark_attendance(MISSING_EMPLOYEE_ID, "photo", now=MORNING)


def test_mark_attendance_without_reference_photos_never_verifies():
    svc, attendance, storage, verifier = build(photos=0)

    with pytest.raises(PreconditionFailedError):
        svc.mark_attendance(EMPLOYEE_ID, "photo", now=MORNING)

    assert verifier.calls == 0
    assert storage.uploads == []
    assert attendance.count_for_employee(EMPLOYEE_ID) == 0


def test_failed_verification_is_unauthorized_with_zero_confidence():
    svc, attendance, storage, _ = build(verifier=FakeVerifier(matched=False))

    with pytest.raises(VerificationFailedError) as excinfo:
        svc.mark_attendance(EMPLOYEE_ID, "photo", now=MORNING)

    assert excinfo.value.confidence == 0
    assert excinfo.value.category == "unauthorized"
    assert storage.uploads == []
    assert attendance.count_for_employee(EMPLOYEE_ID) == 0


def test_second_check_in_same_day_conflicts():
    svc, _, storage, verifier = build()
    svc.mark_attendance(EMPLOYEE_ID, "photo", now=MORNING)

    with pytest.raises(ConflictError, match="already marked"):
        svc.mark_attendance(EMPLOYEE_ID, "photo", now=MORNING.replace(hour=11))

    assert verifier.calls == 1
    assert len(storage.uploads) == 1


def test_check_in_next_day_is_allowed():
    svc, attendance, _, _ = build()
    svc.mark_attendance(EMPLOYEE_ID, "photo", now=MORNING)
    svc.mark_attendance(EMPLOYEE_ID, "photo", now=MORNING.replace(day=6))
    assert attendance.count_for_employee(EMPLOYEE_ID) == 2


def test_store_duplicate_is_mapped_to_same_conflict_and_photo_discarded():
    svc, attendance, storage, _ = build()
    svc.mark_attendance(EMPLOYEE_ID, "photo", now=MORNING)
    # The pre-check misses the existing row, as in a race between two requests.
    attendance.hide_existing = True

    with pytest.raises(ConflictError) as excinfo:
        svc.mark_attendance(EMPLOYEE_ID, "photo", now=MORNING)

    assert str(excinfo.value) == "Attendance already marked for today"
    assert len(storage.uploads) == 2
    assert len(storage.deleted) == 1
    assert storage.deleted[0].endswith("/attendance/2.jpg")


def test_concurrent_check_ins_yield_exactly_one_record():
    svc, attendance, _, _ = build()
    workers = 8
    barrier = threading.Barrier(workers)
    outcomes: list[str] = []
    lock = threading.Lock()

    def attempt():
        barrier.wait()
        try:
            svc.mark_attendance(EMPLOYEE_ID, "photo", now=MORNING)
            outcome = "ok"
        except ConflictError:
            outcome = "conflict"
        with lock:
            outcomes.append(outcome)

    threads = [threading.Thread(target=attempt) for _ in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert outcomes.count("ok") == 1
    assert outcomes.count("conflict") == workers - 1
    assert attendance.count_for_employee(EMPLOYEE_ID) == 1


def test_checkout_computes_working_hours():
    svc, attendance, _, _ = build()
    svc.mark_attendance(EMPLOYEE_ID, "photo", now=datetime(2026, 1, 5, 9, 0, 0))

    result = svc.mark_checkout(EMPLOYEE_ID, now=datetime(2026, 1, 5, 17, 30, 0))

    assert result.working_hours == 8.5
    assert result.check_out_time == datetime(2026, 1, 5, 17, 30, 0)
    rec = attendance.get_for_employee_and_date(EMPLOYEE_ID, "2026-01-05")
    assert rec.working_hours == 8.5
    assert rec.check_out_time == datetime(2026, 1, 5, 17, 30, 0)
    assert rec.status == AttendanceStatus.PRESENT


def test_checkout_without_check_in_is_not_found():
    svc, _, _, _ = build()
    with pytest.raises(NotFoundError):
        svc.mark_checkout(EMPLOYEE_ID, now=MORNING)


def test_checkout_twice_conflicts_and_keeps_first_hours():
    svc, attendance, _, _ = build()
    svc.mark_attendance(EMPLOYEE_ID, "photo", now=datetime(2026, 1, 5, 9, 0))
    svc.mark_checkout(EMPLOYEE_ID, now=datetime(2026, 1, 5, 12, 0))

    with pytest.raises(ConflictError, match="Already checked out"):
        svc.mark_checkout(EMPLOYEE_ID, now=datetime(2026, 1, 5, 18, 0))

    assert attendance.get_for_employee_and_date(EMPLOYEE_ID, "2026-01-05").working_hours == 3.0


def test_get_today_record():
    svc, _, _, _ = build()
    assert svc.get_today_record(EMPLOYEE_ID, now=MORNING) is None
    svc.mark_attendance(EMPLOYEE_ID, "photo", now=MORNING)
    assert svc.get_today_record(EMPLOYEE_ID, now=MORNING.replace(hour=15)).work_date == "2026-01-05"


def test_history_filters_by_month_sorted_descending_and_paginated():
    svc, attendance, _, _ = build()
    for d in ("2025-12-30", "2025-12-31", "2026-01-02", "2026-01-05", "2026-01-06", "2026-01-07", "2026-02-02"):
        attendance.add(make_record(d))

    first = svc.get_history(EMPLOYEE_ID, month="2026-01", page=1, limit=2)
    assert [r.work_date for r in first.records] == ["2026-01-07", "2026-01-06"]
    assert (first.total, first.page, first.limit, first.total_pages) == (4, 1, 2, 2)

    second = svc.get_history(EMPLOYEE_ID, month="2026-01", page=2, limit=2)
    assert [r.work_date for r in second.records] == ["2026-01-05", "2026-01-02"]

    everything = svc.get_history(EMPLOYEE_ID, limit=3)
    assert everything.total == 7
    assert everything.total_pages == 3
    assert everything.to_dict()["pagination"] == {"total": 7, "page": 1, "limit": 3, "totalPages": 3}


def test_history_only_returns_own_records():
    svc, attendance, _, _ = build()
    attendance.add(make_record("2026-01-05"))
    attendance.add(make_record("2026-01-05", employee_id=OTHER_EMPLOYEE_ID))
    assert svc.get_history(EMPLOYEE_ID).total == 1


@pytest.mark.parametrize("kwargs", [{"month": "2026-1"}, {"page": 0}, {"limit": 0}, {"limit": 101}, {"page": "x"}])
def test_history_rejects_bad_query(kwargs):
    svc, _, _, _ = build()
    with pytest.raises(ValidationError):
        svc.get_history(EMPLOYEE_ID, **kwargs)


class StaleReadAttendance(InMemoryAttendance):
    """Serves the record as it was before a concurrent checkout closed it."""

    def get_for_employee_and_date(self, employee_id, work_date):
        record = super().get_for_employee_and_date(employee_id, work_date)
        if record is None:
            return None
        return replace(record, check_out_time=None, working_hours=0.0)


def test_checkout_losing_race_to_concurrent_checkout_conflicts():
    attendance = StaleReadAttendance()
    svc = AttendanceService(attendance, InMemoryEmployees(make_employee()), FakeVerifier(), FakePhotoStorage())
    svc.mark_attendance(EMPLOYEE_ID, "photo", now=datetime(2026, 1, 5, 9, 0))
    record = InMemoryAttendance.get_for_employee_and_date(attendance, EMPLOYEE_ID, "2026-01-05")
    assert attendance.update_checkout(
        attendance_id=record.attendance_id, check_out_time=datetime(2026, 1, 5, 12, 0), working_hours=3.0
    )

    with pytest.raises(ConflictError, match="Already checked out"):
        svc.mark_checkout(EMPLOYEE_ID, now=datetime(2026, 1, 5, 18, 0))

    stored = InMemoryAttendance.get_for_employee_and_date(attendance, EMPLOYEE_ID, "2026-01-05")
    assert stored.working_hours == 3.0
    assert stored.check_out_time == datetime(2026, 1, 5, 12, 0)
