from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Callable, Sequence

from ..classes.model import Class
from ..classes.repository import ClassRepository
from ..core.exceptions import AlreadyEnrolledError, ClassNotFoundError, NotEnrolledError
from ..database.errors import DuplicateKey, ForeignKeyViolation, RecordNotFound
from .model import Enrollment, EnrollmentWithClass, StudentInClass
from .repository import EnrollmentRepository


class EnrollmentService:
    """Use cases: join a class by code, leave it, list memberships.

    Role-agnostic: who may call what is decided by the HTTP layer.
    """

    def __init__(
        self,
        enrollments: EnrollmentRepository,
        classes: ClassRepository,
        *,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self._enrollments = enrollments
        self._classes = classes
        self._clock = clock

    def enroll_by_code(self, *, class_code: str, student_id: uuid.UUID) -> Enrollment:
        try:
            cls = self._classes.get_by_code(class_code)
        except RecordNotFound:
            raise ClassNotFoundError()

        if self._enrollments.is_enrolled(cls.id, student_id):
            raise AlreadyEnrolledError()

        enrollment = Enrollment(
            id=uuid.uuid4(),
            class_id=cls.id,
            student_id=student_id,
            enrolled_at=self._clock(),
        )
        try:
            self._enrollments.create(enrollment)
        except DuplicateKey:
            # a concurrent request for the same pair won the insert
            raise AlreadyEnrolledError()
        except ForeignKeyViolation:
            # class deleted between the code lookup and the insert
            raise ClassNotFoundError()
        return enrollment

    def get_student_classes(self, student_id: uuid.UUID) -> Sequence[EnrollmentWithClass]:
        return list(self._enrollments.list_classes_for_student(student_id))

    def get_class_students(self, class_id: uuid.UUID) -> Sequence[StudentInClass]:
        try:
            cls = self._classes.get_by_id(class_id)
        except RecordNotFound:
            raise ClassNotFoundError()
        return self.get_class_roster(cls)

    def get_class_roster(self, cls: Class) -> Sequence[StudentInClass]:
        """Roster of a class the caller has already loaded."""

        return list(self._enrollments.list_students_for_class(cls.id))

    def unenroll(self, *, class_id: uuid.UUID, student_id: uuid.UUID) -> None:
        try:
            self._enrollments.delete(class_id, student_id)
        except RecordNotFound:
            raise NotEnrolledError()

    def is_enrolled(self, *, class_id: uuid.UUID, student_id: uuid.UUID) -> bool:
        return self._enrollments.is_enrolled(class_id, student_id)
