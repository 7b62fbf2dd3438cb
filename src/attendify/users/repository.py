from __future__ import annotations

import uuid
from typing import Protocol

from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Services depend on this interface, not on a concrete store. Lookups raise
    RecordNotFound, a taken email raises DuplicateKey on create.
    """

    def create(self, user: User) -> None:
        raise NotImplementedError

    def get_by_email(self, email: str) -> User:
        raise NotImplementedError

    def get_by_id(self, user_id: uuid.UUID) -> User:
        raise NotImplementedError
