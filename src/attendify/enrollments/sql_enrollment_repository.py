from __future__ import annotations

import uuid
from typing import Sequence

from sqlalchemy import delete, exists, insert, select

from ..classes.model import Class
from ..core.enums import Role
from ..database.base import db_transaction, from_db_datetime, to_db_datetime
from ..database.connection import DatabaseConnection
from ..database.errors import RecordNotFound
from ..database.tables import classes, enrollments, users
from ..users.model import User
from .model import Enrollment, EnrollmentWithClass, StudentInClass
from .repository import EnrollmentRepository

_COLUMNS = (enrollments.c.id, enrollments.c.class_id, enrollments.c.student_id, enrollments.c.enrolled_at)


def row_to_enrollment(row) -> Enrollment:
    return Enrollment(
        id=row.id,
        class_id=row.class_id,
        student_id=row.student_id,
        enrolled_at=from_db_datetime(row.enrolled_at),
    )


class SQLEnrollmentRepository(EnrollmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, enrollment: Enrollment) -> None:
        with db_transaction(self._conn_factory, "create enrollment") as conn:
            conn.execute(
                insert(enrollments).values(
                    id=enrollment.id,
                    class_id=enrollment.class_id,
                    student_id=enrollment.student_id,
                    enrolled_at=to_db_datetime(enrollment.enrolled_at),
                )
            )

    def list_by_class(self, class_id: uuid.UUID) -> Sequence[Enrollment]:
        with db_transaction(self._conn_factory, "list class enrollments") as conn:
            rows = conn.execute(
                select(*_COLUMNS)
                .where(enrollments.c.class_id == class_id)
                .order_by(enrollments.c.enrolled_at.desc(), enrollments.c.id)
            ).all()
            return [row_to_enrollment(r) for r in rows]

    def list_by_student(self, student_id: uuid.UUID) -> Sequence[Enrollment]:
        with db_transaction(self._conn_factory, "list student enrollments") as conn:
            rows = conn.execute(
                select(*_COLUMNS)
                .where(enrollments.c.student_id == student_id)
                .order_by(enrollments.c.enrolled_at.desc(), enrollments.c.id)
            ).all()
            return [row_to_enrollment(r) for r in rows]

    def is_enrolled(self, class_id: uuid.UUID, student_id: uuid.UUID) -> bool:
        with db_transaction(self._conn_factory, "check enrollment") as conn:
            stmt = select(
                exists().where(
                    enrollments.c.class_id == class_id,
                    enrollments.c.student_id == student_id,
                )
            )
            return bool(conn.execute(stmt).scalar())

    def delete(self, class_id: uuid.UUID, student_id: uuid.UUID) -> None:
        with db_transaction(self._conn_factory, "delete enrollment") as conn:
            result = conn.execute(
                delete(enrollments).where(
                    enrollments.c.class_id == class_id,
                    enrollments.c.student_id == student_id,
                )
            )
            if result.rowcount == 0:
                raise RecordNotFound(f"enrollment {class_id}/{student_id}")

    def list_classes_for_student(self, student_id: uuid.UUID) -> Sequence[EnrollmentWithClass]:
        stmt = (
            select(
                enrollments.c.id.label("enrollment_id"),
                enrollments.c.enrolled_at,
                classes.c.id.label("class_id"),
                classes.c.name,
                classes.c.code,
                classes.c.teacher_id,
                classes.c.created_at,
            )
            .select_from(enrollments.join(classes, enrollments.c.class_id == classes.c.id))
            .where(enrollments.c.student_id == student_id)
            .order_by(enrollments.c.enrolled_at.desc(), enrollments.c.id)
        )
        with db_transaction(self._conn_factory, "list classes for student") as conn:
            rows = conn.execute(stmt).all()

        return [
            EnrollmentWithClass(
                id=r.enrollment_id,
                class_=Class(
                    id=r.class_id,
                    name=r.name,
                    code=r.code,
                    teacher_id=r.teacher_id,
                    created_at=from_db_datetime(r.created_at),
                ),
                enrolled_at=from_db_datetime(r.enrolled_at),
            )
            for r in rows
        ]

    def list_students_for_class(self, class_id: uuid.UUID) -> Sequence[StudentInClass]:
        stmt = (
            select(
                enrollments.c.id.label("enrollment_id"),
                enrollments.c.enrolled_at,
                users.c.id.label("user_id"),
                users.c.email,
                users.c.name,
                users.c.role,
                users.c.created_at,
            )
            .select_from(enrollments.join(users, enrollments.c.student_id == users.c.id))
            .where(enrollments.c.class_id == class_id)
            .order_by(users.c.name.asc(), enrollments.c.id)
        )
        with db_transaction(self._conn_factory, "list students for class") as conn:
            rows = conn.execute(stmt).all()

        return [
            StudentInClass(
                id=r.enrollment_id,
                student=User(
                    id=r.user_id,
                    email=r.email,
                    password_hash="",  # roster rows never carry the hash
                    name=r.name,
                    role=Role(r.role),
                    created_at=from_db_datetime(r.created_at),
                ),
                enrolled_at=from_db_datetime(r.enrolled_at),
            )
            for r in rows
        ]
