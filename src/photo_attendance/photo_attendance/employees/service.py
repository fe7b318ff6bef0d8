from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from ..common.identifiers import new_object_id
from ..common.validators import normalize_email, require_non_empty, require_object_id
from ..core.constants import DEFAULT_ROLE, MAX_REFERENCE_PHOTOS, MIN_REGISTRATION_PHOTOS
from ..core.enums import PhotoCategory
from ..core.exceptions import ConflictError, DomainError, NotFoundError, UpstreamError, ValidationError
from ..database.mysql_base import DuplicateKeyError
from ..photos.storage import PhotoStorage
from .model import Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)

EMAIL_TAKEN = "Employee with this email already exists"


class EmployeeService:
    """Use cases: employee profile and reference photo management."""

    def __init__(self, employees: EmployeeRepository, photos: PhotoStorage):
        self._employees = employees
        self._photos = photos

    def create_employee(self, *, name: Any, email: Any, role: Optional[str] = None) -> Employee:
        if not name or not email:
            raise ValidationError("Name and email are required")
        name = require_non_empty(name, "Name")
        email = normalize_email(email)
        role = (role or "").strip() or DEFAULT_ROLE

        if self._employees.get_by_email(email):
            raise ConflictError(EMAIL_TAKEN)

        try:
            employee = self._employees.create(employee_id=new_object_id(), name=name, email=email, role=role)
        except DuplicateKeyError:
            logger.warning("duplicate email %s caught by store", email)
            raise ConflictError(EMAIL_TAKEN)

        logger.info("employee %s created (%s)", employee.employee_id, email)
        return employee

    def get_employee(self, employee_id: Any) -> Employee:
        employee_id = require_object_id(employee_id, "Employee ID")
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def register_photos(self, employee_id: Any, photos: Any) -> Employee:
        """Replace the reference photos with 3-5 freshly uploaded ones."""
        employee_id = require_object_id(employee_id, "Employee ID")
        if photos is None or not isinstance(photos, (list, tuple)):
            raise ValidationError("Photos array is required")
        if not MIN_REGISTRATION_PHOTOS <= len(photos) <= MAX_REFERENCE_PHOTOS:
            raise ValidationError(f"Please provide {MIN_REGISTRATION_PHOTOS}-{MAX_REFERENCE_PHOTOS} photos")

        employee = self.get_employee(employee_id)
        urls: list[str] = []
        try:
            for photo in photos:
                urls.append(self._photos.upload(photo, employee.employee_id, PhotoCategory.REGISTRATION))
        except DomainError:
            logger.warning("photo registration for %s failed after %d uploads", employee.employee_id, len(urls))
            self._discard_photos(urls)
            raise

        updated = self._employees.update_face_images(employee.employee_id, urls)
        if not updated:
            self._discard_photos(urls)
            raise NotFoundError("Employee not found")
        self._discard_photos([url for url in employee.face_images if url not in urls])
        logger.info("employee %s registered %d photos", employee.employee_id, len(urls))
        return updated

    def remove_photo(self, employee_id: Any, photo_url: Any) -> Employee:
        employee_id = require_object_id(employee_id, "Employee ID")
        if not photo_url or not isinstance(photo_url, str):
            raise ValidationError("Photo URL is required")

        employee = self.get_employee(employee_id)
        remaining = [url for url in employee.face_images if url != photo_url]
        updated = self._employees.update_face_images(employee.employee_id, remaining)
        if not updated:
            raise NotFoundError("Employee not found")

        if len(remaining) != len(employee.face_images):
            self._discard_photos([photo_url])
            logger.info("employee %s removed a photo (%d left)", employee.employee_id, len(remaining))
        return updated

    def _discard_photos(self, urls: Sequence[str]) -> None:
        for url in urls:
            try:
                self._photos.delete(url)
            except UpstreamError as exc:
                logger.warning("could not delete stored photo %s: %s", url, exc)
