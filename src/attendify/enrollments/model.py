from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime

from ..classes.model import Class
from ..common.serialization import format_timestamp
from ..users.model import User


@dataclass(frozen=True)
class Enrollment:
    id: uuid.UUID
    class_id: uuid.UUID
    student_id: uuid.UUID
    enrolled_at: datetime

    def to_response(self) -> dict:
        return {
            "id": str(self.id),
            "class_id": str(self.class_id),
            "student_id": str(self.student_id),
            "enrolled_at": format_timestamp(self.enrolled_at),
        }


@dataclass(frozen=True)
class EnrollmentWithClass:
    """A student's enrollment joined with the class it points to."""

    id: uuid.UUID
    class_: Class
    enrolled_at: datetime

    def to_response(self) -> dict:
        return {
            "id": str(self.id),
            "class": self.class_.to_response(),
            "enrolled_at": format_timestamp(self.enrolled_at),
        }


@dataclass(frozen=True)
class StudentInClass:
    """One roster line: the enrollment joined with the student's profile."""

    id: uuid.UUID
    student: User
    enrolled_at: datetime

    def to_response(self) -> dict:
        return {
            "id": str(self.id),
            "student": self.student.to_response(),
            "enrolled_at": format_timestamp(self.enrolled_at),
        }
