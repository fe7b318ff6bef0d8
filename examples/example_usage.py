"""Example: use the service layer directly (no Flask).

Controllers stay thin; the attendance rules live in the services.
"""

import importlib
import sys

from config import get_settings_module

from photo_attendance.container import build_container


def main(employee_id: str):
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, cloudinary=settings.CLOUDINARY)

    today = container.attendance_service.get_today_record(employee_id)
    print("today:", today.to_dict() if today else None)
    print(container.analytics_service.monthly_summary(employee_id).to_dict())
    print(container.attendance_service.get_history(employee_id, limit=5).to_dict()["pagination"])


if __name__ == "__main__":
    main(sys.argv[1])
