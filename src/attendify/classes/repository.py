from __future__ import annotations

import uuid
from typing import Protocol, Sequence

from .model import Class


class ClassRepository(Protocol):
    def create(self, cls: Class) -> None:
        raise NotImplementedError

    def get_by_id(self, class_id: uuid.UUID) -> Class:
        raise NotImplementedError

    def get_by_code(self, code: str) -> Class:
        raise NotImplementedError

    def list_by_teacher(self, teacher_id: uuid.UUID) -> Sequence[Class]:
        """Newest first."""

        raise NotImplementedError

    def delete(self, class_id: uuid.UUID) -> None:
        """Remove the class together with its enrollments."""

        raise NotImplementedError
