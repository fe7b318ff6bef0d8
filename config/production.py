import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "photo_attendance"),
}

CLOUDINARY = {
    "cloud_name": os.getenv("CLOUDINARY_CLOUD_NAME", ""),
    "api_key": os.getenv("CLOUDINARY_API_KEY", ""),
    "api_secret": os.getenv("CLOUDINARY_API_SECRET", ""),
    "upload_preset": os.getenv("CLOUDINARY_UPLOAD_PRESET", ""),
    "folder": os.getenv("CLOUDINARY_FOLDER", "employee-attendance"),
    "timeout": float(os.getenv("CLOUDINARY_TIMEOUT", "30")),
}

LATE_AFTER = os.getenv("LATE_AFTER", "09:30:00")

DEMO_EMPLOYEE_ID = os.getenv("DEMO_EMPLOYEE_ID", "")

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
