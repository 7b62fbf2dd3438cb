from __future__ import annotations

import logging

from flask import Flask

from ..classes.codes import normalize_code
from ..common.auth import AuthGuard, current_user_id
from ..common.requests import json_body
from ..common.responses import domain_error, error, success
from ..common.validators import parse_uuid, require_field, require_length_between
from ..core.exceptions import DomainError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    guard = AuthGuard(container.auth_service)

    @app.route("/api/enrollments", methods=["POST"], endpoint="enroll")
    @guard.student_required
    def enroll():
        try:
            data = json_body()
            code = normalize_code(require_field(data, "class_code"))
            require_length_between(code, "class_code", 4, 10)
            enrollment = container.enrollment_service.enroll_by_code(
                class_code=code,
                student_id=current_user_id(),
            )
        except DomainError as e:
            return domain_error(e)

        logger.info(
            "student enrolled",
            extra={"student_id": str(enrollment.student_id), "class_id": str(enrollment.class_id)},
        )
        return success(enrollment.to_response(), 201)

    @app.route("/api/enrollments", methods=["GET"], endpoint="my_enrollments")
    @guard.student_required
    def my_enrollments():
        items = container.enrollment_service.get_student_classes(current_user_id())
        return success([e.to_response() for e in items])

    @app.route("/api/enrollments/<class_id>", methods=["DELETE"], endpoint="unenroll")
    @guard.student_required
    def unenroll(class_id: str):
        try:
            cid = parse_uuid(class_id, "invalid class id")
            container.enrollment_service.unenroll(class_id=cid, student_id=current_user_id())
        except DomainError as e:
            return domain_error(e)

        logger.info("student unenrolled", extra={"student_id": str(current_user_id()), "class_id": class_id})
        return success()

    @app.route("/api/classes/<class_id>/students", methods=["GET"], endpoint="class_students")
    @guard.teacher_required
    def class_students(class_id: str):
        try:
            cid = parse_uuid(class_id, "invalid class id")
            cls = container.class_service.get_class(cid)
            if cls.teacher_id != current_user_id():
                return error("access denied", 403)
            students = container.enrollment_service.get_class_roster(cls)
        except DomainError as e:
            return domain_error(e)

        return success([s.to_response() for s in students])
