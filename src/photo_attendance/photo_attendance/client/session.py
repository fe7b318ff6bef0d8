from __future__ import annotations

from typing import Callable, Dict, Optional, Sequence, Tuple, TypeVar

from ..core.exceptions import DomainError, VerificationFailedError
from .api_client import AttendanceApiClient
from .notifications import Notifier

T = TypeVar("T")


class AttendanceSession:
    """Client-side read-through cache over the API.

    Not authoritative: every successful mutation drops the entries it may
    have changed, and each failure is reported through the notifier and
    re-raised.
    """

    def __init__(self, client: AttendanceApiClient, notifier: Optional[Notifier] = None):
        self._client = client
        self.notifier = notifier or Notifier()
        self._employees: Dict[str, dict] = {}
        self._today: Dict[str, Optional[dict]] = {}
        self._history: Dict[Tuple[str, Optional[str], int, int], dict] = {}

    def employee(self, employee_id: str, *, refresh: bool = False) -> dict:
        if refresh or employee_id not in self._employees:
            self._employees[employee_id] = self._client.get_employee(employee_id)
        return self._employees[employee_id]

    def today(self, employee_id: str, *, refresh: bool = False) -> Optional[dict]:
        if refresh or employee_id not in self._today:
            self._today[employee_id] = self._client.get_today(employee_id)
        return self._today[employee_id]

    def history(self, employee_id: str, *, month: Optional[str] = None, page: int = 1, limit: int = 100, refresh: bool = False) -> dict:
        key = (employee_id, month, page, limit)
        if refresh or key not in self._history:
            self._history[key] = self._client.get_history(employee_id, month=month, page=page, limit=limit)
        return self._history[key]

    def invalidate(self, employee_id: str) -> None:
        self._employees.pop(employee_id, None)
        self._today.pop(employee_id, None)
        for key in [k for k in self._history if k[0] == employee_id]:
            del self._history[key]

    def _mutate(self, employee_id: str, action: Callable[[], T], success_message: Callable[[T], str]) -> T:
        try:
            result = action()
        except VerificationFailedError as exc:
            self.notifier.notify(f"{exc.message} (confidence {exc.confidence:.2f}%)", "error")
            raise
        except DomainError as exc:
            self.notifier.notify(exc.message, "error")
            raise
        self.invalidate(employee_id)
        self.notifier.notify(success_message(result), "success")
        return result

    def create_employee(self, name: str, email: str, role: Optional[str] = None) -> dict:
        try:
            employee = self._client.create_employee(name, email, role)
        except DomainError as exc:
            self.notifier.notify(exc.message, "error")
            raise
        self._employees[employee["id"]] = employee
        self.notifier.notify(f"Employee {employee['name']} created", "success")
        return employee

    def register_photos(self, employee_id: str, photos: Sequence[str]) -> list[str]:
        return self._mutate(
            employee_id,
            lambda: self._client.register_photos(employee_id, photos),
            lambda urls: f"{len(urls)} photos registered",
        )

    def remove_photo(self, employee_id: str, photo_url: str) -> list[str]:
        return self._mutate(
            employee_id,
            lambda: self._client.remove_photo(employee_id, photo_url),
            lambda urls: "Photo removed",
        )

    def mark_attendance(self, employee_id: str, photo: str) -> dict:
        return self._mutate(
            employee_id,
            lambda: self._client.mark_attendance(employee_id, photo),
            lambda res: f"Attendance marked ({res['record']['status']}, confidence {float(res['confidence'] or 0):.2f}%)",
        )

    def mark_checkout(self, employee_id: str) -> dict:
        return self._mutate(
            employee_id,
            lambda: self._client.mark_checkout(employee_id),
            lambda res: f"Checked out after {float(res['workingHours']):.2f} hours",
        )
