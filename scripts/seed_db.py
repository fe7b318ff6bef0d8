"""Create the demo employee and print the id to put in DEMO_EMPLOYEE_ID."""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from photo_attendance.database.bootstrap import ensure_demo_employee


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    employee_id = ensure_demo_employee(db_config, employee_id=getattr(settings, "DEMO_EMPLOYEE_ID", "") or None)
    print(f"OK: Demo employee ready -> {db_config.get('database')}")
    print(f"Add this to your .env file:\nDEMO_EMPLOYEE_ID={employee_id}")


if __name__ == "__main__":
    main()
