from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.constants import DEFAULT_ROLE


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee and their reference photos.

    Plain data object, no DB access.
    """

    employee_id: str
    name: str
    email: str
    role: str = DEFAULT_ROLE
    face_images: tuple[str, ...] = field(default_factory=tuple)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.employee_id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "faceImages": list(self.face_images),
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
