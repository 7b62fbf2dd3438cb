from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime

from ..common.serialization import format_timestamp


@dataclass(frozen=True)
class Class:
    """A class owned by one teacher; students join it with `code`."""

    id: uuid.UUID
    name: str
    code: str
    teacher_id: uuid.UUID
    created_at: datetime

    def to_response(self) -> dict:
        return {
            "id": str(self.id),
            "name": self.name,
            "code": self.code,
            "teacher_id": str(self.teacher_id),
            "created_at": format_timestamp(self.created_at),
        }
