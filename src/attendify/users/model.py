from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime

from ..common.serialization import format_timestamp
from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Plain data object, no DB access. `password_hash` stays out of `repr` and of
    every outward projection.
    """

    id: uuid.UUID
    email: str
    password_hash: str = field(repr=False)
    name: str
    role: Role
    created_at: datetime

    def to_response(self) -> dict:
        return {
            "id": str(self.id),
            "email": self.email,
            "name": self.name,
            "role": self.role.value,
            "created_at": format_timestamp(self.created_at),
        }


@dataclass(frozen=True)
class TokenClaims:
    user_id: uuid.UUID
    role: Role
    issued_at: datetime
    not_before: datetime
    expires_at: datetime
    subject: str


@dataclass(frozen=True)
class AuthResult:
    token: str
    user: User

    def to_response(self) -> dict:
        return {"token": self.token, "user": self.user.to_response()}
