from __future__ import annotations

import logging

from flask import Flask

from ..common.auth import AuthGuard, current_user_id
from ..common.requests import json_body
from ..common.responses import domain_error, success
from ..common.validators import parse_uuid, require_field, require_length_between
from ..core.exceptions import CodeGenerationError, DomainError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    guard = AuthGuard(container.auth_service)

    @app.route("/api/classes", methods=["POST"], endpoint="create_class")
    @guard.teacher_required
    def create_class():
        try:
            data = json_body()
            name = require_length_between(require_field(data, "name"), "name", 2, 100)
            cls = container.class_service.create_class(teacher_id=current_user_id(), name=name)
        except DomainError as e:
            if isinstance(e, CodeGenerationError):
                logger.error("class code generation exhausted", extra={"teacher_id": str(current_user_id())})
            return domain_error(e)

        logger.info("class created", extra={"class_id": str(cls.id), "teacher_id": str(cls.teacher_id)})
        return success(cls.to_response(), 201)

    @app.route("/api/classes", methods=["GET"], endpoint="list_classes")
    @guard.teacher_required
    def list_classes():
        classes = container.class_service.get_teacher_classes(current_user_id())
        return success([c.to_response() for c in classes])

    @app.route("/api/classes/<class_id>", methods=["GET"], endpoint="get_class")
    @guard.login_required
    def get_class(class_id: str):
        # Any authenticated user may read a class by id
        try:
            cls = container.class_service.get_class(parse_uuid(class_id, "invalid class id"))
        except DomainError as e:
            return domain_error(e)
        return success(cls.to_response())

    @app.route("/api/classes/<class_id>", methods=["DELETE"], endpoint="delete_class")
    @guard.teacher_required
    def delete_class(class_id: str):
        try:
            cid = parse_uuid(class_id, "invalid class id")
            container.class_service.delete_class(teacher_id=current_user_id(), class_id=cid)
        except DomainError as e:
            return domain_error(e)

        logger.info("class deleted", extra={"class_id": class_id, "teacher_id": str(current_user_id())})
        return success({"message": "class deleted"})
