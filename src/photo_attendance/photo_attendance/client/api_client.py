from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

import requests

from ..core.exceptions import (
    ConflictError,
    DomainError,
    NotFoundError,
    PreconditionFailedError,
    StorageConfigurationError,
    StorageUnavailableError,
    UpstreamError,
    ValidationError,
    VerificationFailedError,
)

logger = logging.getLogger(__name__)

_ERRORS_BY_CATEGORY = {
    "validation_error": ValidationError,
    "not_found": NotFoundError,
    "precondition_failed": PreconditionFailedError,
    "conflict": ConflictError,
}


def error_from_body(body: dict, status_code: int) -> DomainError:
    """Rebuild the server-side error from an ``{"success": false, ...}`` body."""
    message = str(body.get("error") or f"Request failed ({status_code})")
    category = body.get("category")

    if category == "unauthorized":
        return VerificationFailedError(message, confidence=float(body.get("confidence") or 0))
    if category == "upstream_failure":
        if body.get("kind") == "configuration":
            return StorageConfigurationError(message)
        return StorageUnavailableError(message)
    error_cls = _ERRORS_BY_CATEGORY.get(category)
    if error_cls:
        return error_cls(message)
    return DomainError(message)


class AttendanceApiClient:
    """Thin ``requests`` wrapper over the JSON API; returns the ``data`` payloads."""

    def __init__(self, base_url: str, *, session: Optional[requests.Session] = None, timeout: float = 10.0):
        self._base_url = base_url.rstrip("/")
        self._session = session or requests.Session()
        self._timeout = timeout

    def _request(self, method: str, path: str, *, params: Optional[dict] = None, json: Optional[dict] = None) -> dict:
        url = f"{self._base_url}{path}"
        try:
            resp = self._session.request(method, url, params=params, json=json, timeout=self._timeout)
        except requests.RequestException as exc:
            raise UpstreamError(f"Attendance API is unreachable: {exc}") from exc

        try:
            body = resp.json()
        except ValueError as exc:
            raise DomainError(f"Unexpected response from {path} ({resp.status_code})") from exc

        if not isinstance(body, dict) or not body.get("success"):
            raise error_from_body(body if isinstance(body, dict) else {}, resp.status_code)
        return body

    def get_employee(self, employee_id: Optional[str] = None) -> dict:
        params = {"id": employee_id} if employee_id else None
        return self._request("GET", "/api/employee", params=params)["data"]

    def create_employee(self, name: str, email: str, role: Optional[str] = None) -> dict:
        payload: dict[str, Any] = {"name": name, "email": email}
        if role:
            payload["role"] = role
        return self._request("POST", "/api/employee", json=payload)["data"]

    def register_photos(self, employee_id: str, photos: Sequence[str]) -> list[str]:
        body = self._request("POST", "/api/employee/photos", json={"employeeId": employee_id, "photos": list(photos)})
        return body["data"]["faceImages"]

    def remove_photo(self, employee_id: str, photo_url: str) -> list[str]:
        body = self._request("DELETE", "/api/employee/photos", params={"employeeId": employee_id, "photoUrl": photo_url})
        return body["data"]["faceImages"]

    def mark_attendance(self, employee_id: str, photo: str) -> dict:
        body = self._request("POST", "/api/attendance", json={"employeeId": employee_id, "photo": photo})
        return {"record": body["data"], "confidence": body.get("confidence")}

    def mark_checkout(self, employee_id: str) -> dict:
        return self._request("POST", "/api/attendance/checkout", json={"employeeId": employee_id})["data"]

    def get_today(self, employee_id: str) -> Optional[dict]:
        return self._request("GET", "/api/attendance/today", params={"employeeId": employee_id})["data"]

    def get_history(self, employee_id: str, *, month: Optional[str] = None, page: int = 1, limit: int = 10) -> dict:
        params: dict[str, Any] = {"employeeId": employee_id, "page": page, "limit": limit}
        if month:
            params["month"] = month
        return self._request("GET", "/api/attendance/history", params=params)["data"]

    def get_summary(self, employee_id: str, *, month: Optional[str] = None) -> dict:
        params = {"employeeId": employee_id}
        if month:
            params["month"] = month
        return self._request("GET", "/api/attendance/summary", params=params)["data"]

    def get_calendar(self, employee_id: str, *, month: Optional[str] = None) -> list[dict]:
        params = {"employeeId": employee_id}
        if month:
            params["month"] = month
        return self._request("GET", "/api/attendance/calendar", params=params)["data"]
