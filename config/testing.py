import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "photo_attendance_test"),
}

CLOUDINARY = {
    "cloud_name": "test-cloud",
    "api_key": "test-key",
    "api_secret": "test-secret",
    "upload_preset": "",
    "folder": "employee-attendance-test",
    "timeout": 5.0,
}

LATE_AFTER = "09:30:00"

DEMO_EMPLOYEE_ID = ""

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
