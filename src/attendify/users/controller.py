from __future__ import annotations

import logging
from typing import Any, Mapping

from flask import Flask

from ..common.requests import json_body
from ..common.responses import domain_error, success
from ..common.validators import (
    require_byte_length_between,
    require_email,
    require_field,
    require_length_between,
    require_one_of,
)
from ..core.constants import PASSWORD_MAX_BYTES, PASSWORD_MIN_LENGTH
from ..core.enums import Role
from ..core.exceptions import DomainError
from ..container import Container

logger = logging.getLogger(__name__)


def _registration_input(data: Mapping[str, Any]) -> dict:
    # Field by field, so the message names the first offending field
    email = require_email(require_field(data, "email"))
    password = require_byte_length_between(
        require_field(data, "password"), "password", PASSWORD_MIN_LENGTH, PASSWORD_MAX_BYTES
    )
    name = require_length_between(require_field(data, "name"), "name", 2, 100)
    role = require_one_of(require_field(data, "role"), "role", Role.values())
    return {"email": email, "password": password, "name": name, "role": Role(role)}


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/register", methods=["POST"], endpoint="auth_register")
    def auth_register():
        try:
            user = container.auth_service.register(**_registration_input(json_body()))
        except DomainError as e:
            return domain_error(e)

        logger.info("user registered", extra={"user_id": str(user.id), "role": user.role.value})
        return success(user.to_response(), 201)

    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def auth_login():
        try:
            data = json_body()
            email = require_email(require_field(data, "email"))
            password = require_field(data, "password")
            result = container.auth_service.login(email=email, password=password)
        except DomainError as e:
            return domain_error(e)

        return success(result.to_response())
