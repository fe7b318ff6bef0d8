from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Status stored on an attendance record.

    ABSENT is only ever produced by the calendar/analytics views.
    """

    PRESENT = "Present"
    LATE = "Late"
    ABSENT = "Absent"


class CalendarDayStatus(str, Enum):
    PRESENT = "Present"
    LATE = "Late"
    ABSENT = "Absent"
    WEEKEND = "Weekend"
    NONE = "None"


class PhotoCategory(str, Enum):
    """Folder a stored photo belongs to."""

    REGISTRATION = "registration"
    ATTENDANCE = "attendance"
