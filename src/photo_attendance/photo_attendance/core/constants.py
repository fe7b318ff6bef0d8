"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

DEFAULT_ROLE = "Employee"
DEFAULT_LATE_AFTER = time(9, 30, 0)

MIN_REGISTRATION_PHOTOS = 3
MAX_REFERENCE_PHOTOS = 5

DEFAULT_HISTORY_PAGE = 1
DEFAULT_HISTORY_LIMIT = 10
MAX_HISTORY_LIMIT = 100

MIN_MATCH_CONFIDENCE = 70.0
MAX_MATCH_CONFIDENCE = 100.0

DEMO_EMPLOYEE_EMAIL = "demo@example.com"
