from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, Optional

from sqlalchemy.engine import Connection
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .connection import DatabaseConnection
from .errors import DuplicateKey, ForeignKeyViolation, StoreError

# MySQL ER_DUP_ENTRY; PostgreSQL unique_violation
_MYSQL_DUP_ENTRY = 1062
_PG_UNIQUE_VIOLATION = "23505"
# MySQL ER_NO_REFERENCED_ROW_2; PostgreSQL foreign_key_violation
_MYSQL_NO_REFERENCED_ROW = 1452
_PG_FOREIGN_KEY_VIOLATION = "23503"


@contextmanager
def db_transaction(conn_factory: DatabaseConnection, action: str) -> Iterator[Connection]:
    """Run a block inside one transaction and translate store errors.

    Unique-index violations become DuplicateKey, dangling references become
    ForeignKeyViolation, anything else SQLAlchemy raises is wrapped in StoreError
    with `action` as context.
    """

    try:
        with conn_factory.engine.begin() as conn:
            yield conn
    except IntegrityError as e:
        if is_duplicate_key(e):
            raise DuplicateKey(f"{action}: duplicate key") from e
        if is_foreign_key_violation(e):
            raise ForeignKeyViolation(f"{action}: referenced row missing") from e
        raise StoreError(f"failed to {action}: {e.orig}") from e
    except SQLAlchemyError as e:
        raise StoreError(f"failed to {action}: {e}") from e


def is_duplicate_key(exc: IntegrityError) -> bool:
    orig = getattr(exc, "orig", None)
    if orig is None:
        return False

    if getattr(orig, "errno", None) == _MYSQL_DUP_ENTRY:
        return True
    if getattr(orig, "pgcode", None) == _PG_UNIQUE_VIOLATION or getattr(orig, "sqlstate", None) == _PG_UNIQUE_VIOLATION:
        return True

    message = str(orig).lower()
    return "unique constraint failed" in message or "duplicate entry" in message or "duplicate key" in message


def is_foreign_key_violation(exc: IntegrityError) -> bool:
    orig = getattr(exc, "orig", None)
    if orig is None:
        return False

    if getattr(orig, "errno", None) == _MYSQL_NO_REFERENCED_ROW:
        return True
    if getattr(orig, "pgcode", None) == _PG_FOREIGN_KEY_VIOLATION or getattr(orig, "sqlstate", None) == _PG_FOREIGN_KEY_VIOLATION:
        return True

    message = str(orig).lower()
    return "foreign key constraint failed" in message or "foreign key constraint fails" in message


def to_db_datetime(value: datetime) -> datetime:
    """Store timestamps as naive UTC."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def from_db_datetime(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
