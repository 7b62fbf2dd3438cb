from __future__ import annotations

import uuid
from typing import Sequence

from sqlalchemy import delete, insert, select

from ..database.base import db_transaction, from_db_datetime, to_db_datetime
from ..database.connection import DatabaseConnection
from ..database.errors import RecordNotFound
from ..database.tables import classes, enrollments
from .model import Class
from .repository import ClassRepository

_COLUMNS = (classes.c.id, classes.c.name, classes.c.code, classes.c.teacher_id, classes.c.created_at)


def row_to_class(row) -> Class:
    return Class(
        id=row.id,
        name=row.name,
        code=row.code,
        teacher_id=row.teacher_id,
        created_at=from_db_datetime(row.created_at),
    )


class SQLClassRepository(ClassRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, cls: Class) -> None:
        with db_transaction(self._conn_factory, "create class") as conn:
            conn.execute(
                insert(classes).values(
                    id=cls.id,
                    name=cls.name,
                    code=cls.code,
                    teacher_id=cls.teacher_id,
                    created_at=to_db_datetime(cls.created_at),
                )
            )

    def get_by_id(self, class_id: uuid.UUID) -> Class:
        with db_transaction(self._conn_factory, "get class by id") as conn:
            row = conn.execute(select(*_COLUMNS).where(classes.c.id == class_id)).first()
            if row is None:
                raise RecordNotFound(f"class {class_id}")
            return row_to_class(row)

    def get_by_code(self, code: str) -> Class:
        with db_transaction(self._conn_factory, "get class by code") as conn:
            row = conn.execute(select(*_COLUMNS).where(classes.c.code == code)).first()
            if row is None:
                raise RecordNotFound(f"class code {code!r}")
            return row_to_class(row)

    def list_by_teacher(self, teacher_id: uuid.UUID) -> Sequence[Class]:
        with db_transaction(self._conn_factory, "list teacher classes") as conn:
            rows = conn.execute(
                select(*_COLUMNS)
                .where(classes.c.teacher_id == teacher_id)
                .order_by(classes.c.created_at.desc(), classes.c.id)
            ).all()
            return [row_to_class(r) for r in rows]

    def delete(self, class_id: uuid.UUID) -> None:
        # Enrollments go in the same transaction; the FK cascade is not relied on.
        with db_transaction(self._conn_factory, "delete class") as conn:
            conn.execute(delete(enrollments).where(enrollments.c.class_id == class_id))
            result = conn.execute(delete(classes).where(classes.c.id == class_id))
            if result.rowcount == 0:
                raise RecordNotFound(f"class {class_id}")
