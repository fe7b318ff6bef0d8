from __future__ import annotations

import re
from typing import Any

from ..core.exceptions import ValidationError

_OBJECT_ID_RE = re.compile(r"^[0-9a-fA-F]{24}$")
_EMAIL_RE = re.compile(r"^\S+@\S+\.\S+$")


def require_non_empty(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def is_valid_object_id(value: Any) -> bool:
    return isinstance(value, str) and bool(_OBJECT_ID_RE.match(value))


def require_object_id(value: Any, field_name: str = "ID") -> str:
    """Reject missing or malformed identifiers before any store lookup."""
    if not value:
        raise ValidationError(f"{field_name} is required")
    if not is_valid_object_id(value):
        raise ValidationError(f"Invalid {field_name} format. Must be a 24-character hexadecimal string")
    return value.lower()


def normalize_email(value: Any) -> str:
    email = require_non_empty(value, "Email").lower()
    if not _EMAIL_RE.match(email):
        raise ValidationError("Please enter a valid email")
    return email


def require_int_in_range(value: Any, field_name: str, *, minimum: int, maximum: int | None = None) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")
    if number < minimum:
        raise ValidationError(f"{field_name} must be at least {minimum}")
    if maximum is not None and number > maximum:
        raise ValidationError(f"{field_name} must be at most {maximum}")
    return number
