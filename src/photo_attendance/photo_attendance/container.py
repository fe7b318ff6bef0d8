from __future__ import annotations

from dataclasses import dataclass
from datetime import time

from .attendance.analytics import AttendanceAnalyticsService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_LATE_AFTER
from .database.connection import DatabaseConnection, DBConfig
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService
from .photos.cloudinary_storage import CloudinaryPhotoStorage, CloudinarySettings
from .photos.storage import PhotoStorage
from .verification.verifier import PhotoVerifier, SimulatedPhotoVerifier


@dataclass(frozen=True)
class Container:
    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository
    photo_storage: PhotoStorage
    verifier: PhotoVerifier

    employee_service: EmployeeService
    attendance_service: AttendanceService
    analytics_service: AttendanceAnalyticsService


def wire_container(
    *,
    employees_repo: EmployeeRepository,
    attendance_repo: AttendanceRepository,
    photo_storage: PhotoStorage,
    verifier: PhotoVerifier,
    late_after: time = DEFAULT_LATE_AFTER,
) -> Container:
    """Build the services on top of already-constructed collaborators."""
    return Container(
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        photo_storage=photo_storage,
        verifier=verifier,
        employee_service=EmployeeService(employees_repo, photo_storage),
        attendance_service=AttendanceService(
            attendance_repo,
            employees_repo,
            verifier,
            photo_storage,
            late_after=late_after,
        ),
        analytics_service=AttendanceAnalyticsService(attendance_repo),
    )


def build_container(*, db_config: dict, cloudinary: dict, late_after: time = DEFAULT_LATE_AFTER) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire_container(
        employees_repo=MySQLEmployeeRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        photo_storage=CloudinaryPhotoStorage(CloudinarySettings.from_dict(cloudinary)),
        verifier=SimulatedPhotoVerifier(),
        late_after=late_after,
    )
