from __future__ import annotations

import importlib
import logging
import time
from types import ModuleType
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, g, request
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from .classes.controller import register as register_classes
from .common.responses import error, internal_error, success
from .config import get_settings_module
from .container import Container, build_container
from .core.constants import JWT_SECRET_MIN_BYTES
from .database.bootstrap import apply_schema, list_tables
from .database.connection import DBConfig
from .enrollments.controller import register as register_enrollments
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def load_settings() -> ModuleType:
    load_dotenv(override=False)
    return importlib.import_module(get_settings_module())


def create_app(settings: Optional[ModuleType] = None, *, container: Optional[Container] = None) -> Flask:
    settings = settings or load_settings()
    app = Flask(__name__)

    app.config["ENVIRONMENT"] = getattr(settings, "ENVIRONMENT", "development")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["APP_HOST"] = getattr(settings, "APP_HOST", "0.0.0.0")
    app.config["APP_PORT"] = int(getattr(settings, "APP_PORT", 8080))

    if container is None:
        jwt_secret = _check_jwt_secret(settings)
        db_config = DBConfig(
            url=settings.DATABASE_URL,
            pool=dict(getattr(settings, "DB_POOL", {})),
            statement_timeout_ms=int(getattr(settings, "DB_STATEMENT_TIMEOUT_MS", 0)),
        )
        container = build_container(
            db_config=db_config,
            jwt_secret=jwt_secret,
            bcrypt_rounds=int(getattr(settings, "BCRYPT_ROUNDS", 12)),
        )
        logger.info("database configured", extra={"db": container.conn.describe()})

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(container.conn)
            logger.info("schema ready", extra={"tables": len(list_tables(container.conn))})

    app.extensions["attendify"] = container

    _register_health(app, container)
    register_users(app, container)
    register_classes(app, container)
    register_enrollments(app, container)
    _register_hooks(app)

    return app


def _check_jwt_secret(settings: ModuleType) -> str:
    secret = getattr(settings, "JWT_SECRET", "") or ""
    if not secret:
        raise RuntimeError("JWT_SECRET must be set")
    if len(secret.encode("utf-8")) < JWT_SECRET_MIN_BYTES:
        logger.warning("JWT_SECRET is shorter than %d bytes", JWT_SECRET_MIN_BYTES)
    return secret


def _register_health(app: Flask, container: Container) -> None:
    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        try:
            container.conn.ping()
        except SQLAlchemyError:
            logger.warning("health check: database unreachable", exc_info=True)
            return error("database unavailable", 503)
        return success({"status": "ok"})


def _register_hooks(app: Flask) -> None:
    @app.before_request
    def _start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def _log_request(response):
        started = g.get("request_started")
        duration_ms = round((time.perf_counter() - started) * 1000, 2) if started else None
        logger.info(
            "request",
            extra={
                "method": request.method,
                "path": request.path,
                "status": response.status_code,
                "duration_ms": duration_ms,
            },
        )
        return response

    @app.errorhandler(HTTPException)
    def _http_error(e: HTTPException):
        return error((e.name or "error").lower(), e.code or 500)

    @app.errorhandler(Exception)
    def _unhandled(e: Exception):
        # Details stay in the log, the client gets the generic body
        logger.exception("unhandled error", extra={"method": request.method, "path": request.path})
        return internal_error()
