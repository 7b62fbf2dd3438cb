from __future__ import annotations

from dataclasses import dataclass

from .classes.repository import ClassRepository
from .classes.service import ClassService
from .classes.sql_class_repository import SQLClassRepository
from .database.connection import DBConfig, DatabaseConnection
from .enrollments.repository import EnrollmentRepository
from .enrollments.service import EnrollmentService
from .enrollments.sql_enrollment_repository import SQLEnrollmentRepository
from .users.repository import UserRepository
from .users.security import TokenCodec
from .users.service import AuthService
from .users.sql_user_repository import SQLUserRepository


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    users_repo: UserRepository
    classes_repo: ClassRepository
    enrollments_repo: EnrollmentRepository

    auth_service: AuthService
    class_service: ClassService
    enrollment_service: EnrollmentService


def build_container(*, db_config: DBConfig, jwt_secret: str, bcrypt_rounds: int) -> Container:
    conn = DatabaseConnection(db_config)

    users_repo = SQLUserRepository(conn)
    classes_repo = SQLClassRepository(conn)
    enrollments_repo = SQLEnrollmentRepository(conn)

    auth_service = AuthService(users_repo, TokenCodec(jwt_secret), bcrypt_rounds=bcrypt_rounds)
    class_service = ClassService(classes_repo)
    enrollment_service = EnrollmentService(enrollments_repo, classes_repo)

    return Container(
        conn=conn,
        users_repo=users_repo,
        classes_repo=classes_repo,
        enrollments_repo=enrollments_repo,
        auth_service=auth_service,
        class_service=class_service,
        enrollment_service=enrollment_service,
    )
