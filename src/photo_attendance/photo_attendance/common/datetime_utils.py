from __future__ import annotations

import calendar
import logging
import re
from datetime import date, datetime, time

from ..core.constants import DEFAULT_LATE_AFTER
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError

logger = logging.getLogger(__name__)

_MONTH_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


def parse_clock_time(value: str) -> time:
    """Parse HH:MM or HH:MM:SS into time."""
    for fmt in ("%H:%M:%S", "%H:%M"):
        try:
            return datetime.strptime(value.strip(), fmt).time()
        except ValueError:
            continue
    raise ValueError(f"Invalid clock time: {value!r}")


def now_local() -> datetime:
    """Local wall-clock time; dates and the late cutoff are local."""
    return datetime.now()


def format_date(value: date | datetime) -> str:
    """Zero-padded YYYY-MM-DD key in local time."""
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def format_month(value: date | datetime) -> str:
    return f"{value.year:04d}-{value.month:02d}"


def calculate_working_hours(check_in: datetime, check_out: datetime) -> float:
    """Hours between check-in and check-out, rounded to 2 decimals.

    A check-out earlier than the check-in (clock skew, edited rows) yields 0.
    """
    seconds = (check_out - check_in).total_seconds()
    if seconds < 0:
        logger.warning("check-out %s is before check-in %s, working hours clamped to 0", check_out, check_in)
        return 0.0
    return round(seconds / 3600, 2)


def derive_attendance_status(check_in: datetime, *, late_after: time = DEFAULT_LATE_AFTER) -> AttendanceStatus:
    """LATE when the local check-in time is strictly after ``late_after``."""
    if check_in.time() > late_after:
        return AttendanceStatus.LATE
    return AttendanceStatus.PRESENT


def is_weekend(value: date | datetime) -> bool:
    return value.weekday() >= 5


def validate_month(value: str) -> str:
    """Check a YYYY-MM month key."""
    value = (value or "").strip()
    if not _MONTH_RE.match(value):
        raise ValidationError("Month must be in YYYY-MM format")
    return value


def days_of_month(month: str) -> list[date]:
    year, mon = (int(p) for p in validate_month(month).split("-"))
    _, last_day = calendar.monthrange(year, mon)
    return [date(year, mon, d) for d in range(1, last_day + 1)]
