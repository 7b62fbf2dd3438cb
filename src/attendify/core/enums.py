from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles used for authorization."""

    TEACHER = "teacher"
    STUDENT = "student"

    @classmethod
    def values(cls) -> list[str]:
        return [r.value for r in cls]
