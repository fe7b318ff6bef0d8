from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    """Employee store interface.

    Note (DIP): services depend on this interface, not on a concrete DB.
    Implementations enforce a unique email and at most 5 reference photos,
    raising ``DuplicateKeyError`` / ``ValidationError`` respectively.
    """

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Employee]:
        raise NotImplementedError

    def create(self, *, employee_id: str, name: str, email: str, role: str) -> Employee:
        raise NotImplementedError

    def update_face_images(self, employee_id: str, face_images: Sequence[str]) -> Optional[Employee]:
        raise NotImplementedError
