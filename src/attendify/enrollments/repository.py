from __future__ import annotations

import uuid
from typing import Protocol, Sequence

from .model import Enrollment, EnrollmentWithClass, StudentInClass


class EnrollmentRepository(Protocol):
    def create(self, enrollment: Enrollment) -> None:
        raise NotImplementedError

    def list_by_class(self, class_id: uuid.UUID) -> Sequence[Enrollment]:
        raise NotImplementedError

    def list_by_student(self, student_id: uuid.UUID) -> Sequence[Enrollment]:
        raise NotImplementedError

    def is_enrolled(self, class_id: uuid.UUID, student_id: uuid.UUID) -> bool:
        raise NotImplementedError

    def delete(self, class_id: uuid.UUID, student_id: uuid.UUID) -> None:
        raise NotImplementedError

    def list_classes_for_student(self, student_id: uuid.UUID) -> Sequence[EnrollmentWithClass]:
        """Most recent enrollment first."""

        raise NotImplementedError

    def list_students_for_class(self, class_id: uuid.UUID) -> Sequence[StudentInClass]:
        """Ordered by student name."""

        raise NotImplementedError
