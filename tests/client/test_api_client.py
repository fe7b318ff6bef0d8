from __future__ import annotations

import pytest
import requests

from photo_attendance.client.api_client import AttendanceApiClient, error_from_body
from photo_attendance.client.notifications import Notifier
from photo_attendance.client.session import AttendanceSession
from photo_attendance.core.exceptions import (
    ConflictError,
    DomainError,
    NotFoundError,
    StorageConfigurationError,
    StorageUnavailableError,
    UpstreamError,
    VerificationFailedError,
)
from tests.fakes import EMPLOYEE_ID

RECORD = {"id": 1, "employeeId": EMPLOYEE_ID, "date": "2024-01-02", "status": "Present", "checkOut": None}


class FakeResponse:
    def __init__(self, status_code: int, body):
        self.status_code = status_code
        self._body = body

    def json(self):
        if isinstance(self._body, Exception):
            raise self._body
        return self._body


class FakeSession:
    """Routes ``(method, path)`` to canned responses and records each call."""

    def __init__(self, routes: dict):
        self.routes = routes
        self.calls: list[tuple[str, str, dict]] = []

    def request(self, method, url, params=None, json=None, timeout=None):
        path = url.split("://", 1)[1].split("/", 1)[1]
        self.calls.append((method, "/" + path, {"params": params, "json": json, "timeout": timeout}))
        response = self.routes[(method, "/" + path)]
        if isinstance(response, Exception):
            raise response
        if isinstance(response, list):
            return response.pop(0)
        return response


def success(data, status_code: int = 200, **extra) -> FakeResponse:
    return FakeResponse(status_code, {"success": True, "data": data, **extra})


def failure(message: str, category: str, status_code: int, **extra) -> FakeResponse:
    return FakeResponse(status_code, {"success": False, "error": message, "category": category, **extra})


def test_client_sends_request_and_unwraps_data():
    session = FakeSession({("GET", "/api/attendance/history"): success({"records": [], "pagination": {}})})
    client = AttendanceApiClient("http://api.local/", session=session, timeout=3)

    assert client.get_history(EMPLOYEE_ID, month="2024-01", page=2, limit=5) == {"records": [], "pagination": {}}
    method, path, kwargs = session.calls[0]
    assert (method, path) == ("GET", "/api/attendance/history")
    assert kwargs["params"] == {"employeeId": EMPLOYEE_ID, "page": 2, "limit": 5, "month": "2024-01"}
    assert kwargs["timeout"] == 3


def test_mark_attendance_returns_record_and_confidence():
    session = FakeSession({("POST", "/api/attendance"): success(RECORD, 201, confidence=91.2)})

    result = AttendanceApiClient("http://api.local", session=session).mark_attendance(EMPLOYEE_ID, "photo")

    assert result == {"record": RECORD, "confidence": 91.2}
    assert session.calls[0][2]["json"] == {"employeeId": EMPLOYEE_ID, "photo": "photo"}


@pytest.mark.parametrize(
    "body, expected",
    [
        ({"error": "x", "category": "conflict"}, ConflictError),
        ({"error": "x", "category": "not_found"}, NotFoundError),
        ({"error": "x", "category": "upstream_failure", "kind": "configuration"}, StorageConfigurationError),
        ({"error": "x", "category": "upstream_failure", "kind": "transient"}, StorageUnavailableError),
        ({"error": "x", "category": "internal"}, DomainError),
    ],
)
def test_error_from_body(body, expected):
    error = error_from_body(body, 500)
    assert type(error) is expected
    assert error.message == "x"


def test_unauthorized_keeps_confidence():
    error = error_from_body({"error": "Face verification failed", "category": "unauthorized", "confidence": 0}, 401)

    assert isinstance(error, VerificationFailedError)
    assert error.confidence == 0.0


def test_network_failure_is_upstream_error():
    session = FakeSession({("GET", "/api/attendance/today"): requests.ConnectionError("down")})

    with pytest.raises(UpstreamError):
        AttendanceApiClient("http://api.local", session=session).get_today(EMPLOYEE_ID)


def test_non_json_response():
    session = FakeSession({("GET", "/api/employee"): FakeResponse(502, ValueError("not json"))})

    with pytest.raises(DomainError, match="502"):
        AttendanceApiClient("http://api.local", session=session).get_employee()


def test_notifier_subscribe_and_unsubscribe():
    notifier = Notifier()
    seen = []
    unsubscribe = notifier.subscribe(seen.append)

    notifier.notify("hello", "success")
    unsubscribe()
    notifier.notify("ignored")

    assert [(n.message, n.kind) for n in seen] == [("hello", "success")]
    with pytest.raises(ValueError):
        notifier.notify("bad", "warning")


def test_session_caches_until_mutation():
    session = FakeSession(
        {
            ("GET", "/api/attendance/today"): [success(None), success(RECORD)],
            ("POST", "/api/attendance"): success(RECORD, 201, confidence=88.5),
        }
    )
    state = AttendanceSession(AttendanceApiClient("http://api.local", session=session))
    seen = []
    state.notifier.subscribe(seen.append)

    assert state.today(EMPLOYEE_ID) is None
    assert state.today(EMPLOYEE_ID) is None
    state.mark_attendance(EMPLOYEE_ID, "photo")
    assert state.today(EMPLOYEE_ID) == RECORD

    assert [c[1] for c in session.calls].count("/api/attendance/today") == 2
    assert seen[-1].kind == "success"
    assert "Present" in seen[-1].message


def test_session_reports_failures_and_keeps_cache():
    session = FakeSession(
        {
            ("GET", "/api/attendance/today"): success(RECORD),
            ("POST", "/api/attendance"): failure("Attendance already marked for today", "conflict", 409),
        }
    )
    state = AttendanceSession(AttendanceApiClient("http://api.local", session=session))
    seen = []
    state.notifier.subscribe(seen.append)
    state.today(EMPLOYEE_ID)

    with pytest.raises(ConflictError):
        state.mark_attendance(EMPLOYEE_ID, "photo")

    assert (seen[-1].message, seen[-1].kind) == ("Attendance already marked for today", "error")
    state.today(EMPLOYEE_ID)
    assert [c[1] for c in session.calls].count("/api/attendance/today") == 1


def test_session_mismatch_notification_includes_confidence():
    session = FakeSession(
        {("POST", "/api/attendance"): failure("Face verification failed", "unauthorized", 401, confidence=0)}
    )
    state = AttendanceSession(AttendanceApiClient("http://api.local", session=session))
    seen = []
    state.notifier.subscribe(seen.append)

    with pytest.raises(VerificationFailedError):
        state.mark_attendance(EMPLOYEE_ID, "photo")

    assert seen[-1].message == "Face verification failed (confidence 0.00%)"


def test_session_history_is_dropped_after_checkout():
    session = FakeSession(
        {
            ("GET", "/api/attendance/history"): [success({"records": []}), success({"records": [RECORD]})],
            ("POST", "/api/attendance/checkout"): success({"checkOut": "2024-01-02T17:00:00", "workingHours": 8.0}),
        }
    )
    state = AttendanceSession(AttendanceApiClient("http://api.local", session=session))

    assert state.history(EMPLOYEE_ID) == {"records": []}
    state.mark_checkout(EMPLOYEE_ID)

    assert state.history(EMPLOYEE_ID) == {"records": [RECORD]}
    assert session.calls[0][2]["params"]["limit"] == 100
