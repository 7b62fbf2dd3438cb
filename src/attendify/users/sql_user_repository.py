from __future__ import annotations

import uuid

from sqlalchemy import insert, select

from ..core.enums import Role
from ..database.base import db_transaction, from_db_datetime, to_db_datetime
from ..database.connection import DatabaseConnection
from ..database.errors import RecordNotFound
from ..database.tables import users
from .model import User
from .repository import UserRepository

_COLUMNS = (users.c.id, users.c.email, users.c.password_hash, users.c.name, users.c.role, users.c.created_at)


def row_to_user(row) -> User:
    return User(
        id=row.id,
        email=row.email,
        password_hash=row.password_hash,
        name=row.name,
        role=Role(row.role),
        created_at=from_db_datetime(row.created_at),
    )


class SQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, user: User) -> None:
        with db_transaction(self._conn_factory, "create user") as conn:
            conn.execute(
                insert(users).values(
                    id=user.id,
                    email=user.email,
                    password_hash=user.password_hash,
                    name=user.name,
                    role=user.role.value,
                    created_at=to_db_datetime(user.created_at),
                )
            )

    def get_by_email(self, email: str) -> User:
        with db_transaction(self._conn_factory, "get user by email") as conn:
            row = conn.execute(select(*_COLUMNS).where(users.c.email == email)).first()
            if row is None:
                raise RecordNotFound(f"user {email!r}")
            return row_to_user(row)

    def get_by_id(self, user_id: uuid.UUID) -> User:
        with db_transaction(self._conn_factory, "get user by id") as conn:
            row = conn.execute(select(*_COLUMNS).where(users.c.id == user_id)).first()
            if row is None:
                raise RecordNotFound(f"user {user_id}")
            return row_to_user(row)
