"""Uniform JSON envelope: {"success": bool, "data"?: any, "error"?: str}.

This is the only place that knows which domain error maps to which status.
"""

from __future__ import annotations

from typing import Any

from flask import jsonify

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    ResourceNotFoundError,
    ValidationError,
)

INTERNAL_ERROR_MESSAGE = "internal server error"

_NO_DATA = object()

# Checked in order, first isinstance match wins
_STATUS_BY_ERROR: tuple[tuple[type[DomainError], int], ...] = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (ResourceNotFoundError, 404),
    (ConflictError, 409),
)


def success(data: Any = _NO_DATA, status: int = 200):
    body: dict[str, Any] = {"success": True}
    if data is not _NO_DATA and data is not None:
        body["data"] = data
    return jsonify(body), status


def error(message: str, status: int):
    return jsonify({"success": False, "error": message}), status


def internal_error():
    return error(INTERNAL_ERROR_MESSAGE, 500)


def status_for(exc: DomainError) -> int:
    for kind, status in _STATUS_BY_ERROR:
        if isinstance(exc, kind):
            return status
    return 500


def domain_error(exc: DomainError):
    """Render an expected domain failure. Unmapped kinds get the generic 500 body."""

    status = status_for(exc)
    if status == 500:
        return internal_error()
    return error(str(exc), status)
