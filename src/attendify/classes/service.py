from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Callable, Sequence

from ..common.validators import require_length_between
from ..core.constants import CLASS_CODE_MAX_ATTEMPTS
from ..core.exceptions import ClassNotFoundError, CodeGenerationError, NotClassOwnerError
from ..database.errors import DuplicateKey, RecordNotFound
from .codes import generate_code
from .model import Class
from .repository import ClassRepository


class ClassService:
    """Use cases: create, read and delete classes."""

    def __init__(
        self,
        classes: ClassRepository,
        *,
        code_generator: Callable[[], str] = generate_code,
        max_attempts: int = CLASS_CODE_MAX_ATTEMPTS,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self._classes = classes
        self._generate_code = code_generator
        self._max_attempts = int(max_attempts)
        self._clock = clock

    def create_class(self, *, teacher_id: uuid.UUID, name: str) -> Class:
        """Insert a class under a fresh join code.

        A code that is already taken (seen by the pre-check, or by the unique
        index when two inserts race) costs one attempt. Store failures other
        than "not found" / "duplicate" propagate immediately.
        """

        require_length_between(name, "name", 2, 100)

        for _ in range(self._max_attempts):
            try:
                code = self._generate_code()
            except OSError:
                continue

            try:
                self._classes.get_by_code(code)
                continue
            except RecordNotFound:
                pass

            cls = Class(
                id=uuid.uuid4(),
                name=name,
                code=code,
                teacher_id=teacher_id,
                created_at=self._clock(),
            )
            try:
                self._classes.create(cls)
            except DuplicateKey:
                continue
            return cls

        raise CodeGenerationError()

    def get_class(self, class_id: uuid.UUID) -> Class:
        try:
            return self._classes.get_by_id(class_id)
        except RecordNotFound:
            raise ClassNotFoundError()

    def get_class_by_code(self, code: str) -> Class:
        try:
            return self._classes.get_by_code(code)
        except RecordNotFound:
            raise ClassNotFoundError()

    def get_teacher_classes(self, teacher_id: uuid.UUID) -> Sequence[Class]:
        return list(self._classes.list_by_teacher(teacher_id))

    def delete_class(self, *, teacher_id: uuid.UUID, class_id: uuid.UUID) -> None:
        cls = self.get_class(class_id)
        if cls.teacher_id != teacher_id:
            raise NotClassOwnerError()

        try:
            self._classes.delete(class_id)
        except RecordNotFound:
            # deleted by a concurrent request after the ownership check
            raise ClassNotFoundError()
