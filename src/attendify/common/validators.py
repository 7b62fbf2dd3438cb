from __future__ import annotations

import re
import uuid
from typing import Any, Iterable, Mapping

from ..core.exceptions import ValidationError

# Basic RFC 5322 shape: local@domain.tld, no whitespace, one "@".
_EMAIL_RE = re.compile(r"^[A-Za-z0-9.!#$%&'*+/=?^_`{|}~-]+@[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?)+$")


def require_field(data: Mapping[str, Any], field_name: str) -> str:
    value = data.get(field_name)
    if value is not None and not isinstance(value, str):
        raise ValidationError("invalid request body")
    if not value:
        raise ValidationError(f"{field_name} is required")
    return value


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} is too short")
    return value


def require_max_length(value: str, field_name: str, max_len: int) -> str:
    if len(value) > max_len:
        raise ValidationError(f"{field_name} is too long")
    return value


def require_length_between(value: str, field_name: str, min_len: int, max_len: int) -> str:
    require_min_length(value, field_name, min_len)
    return require_max_length(value, field_name, max_len)


def require_byte_length_between(value: str, field_name: str, min_len: int, max_bytes: int) -> str:
    """Like require_length_between, but the upper bound counts UTF-8 bytes."""

    require_min_length(value, field_name, min_len)
    if len(value.encode("utf-8")) > max_bytes:
        raise ValidationError(f"{field_name} is too long")
    return value


def require_email(value: str, field_name: str = "email", max_len: int = 255) -> str:
    if not is_valid_email(value):
        raise ValidationError("invalid email format")
    return require_max_length(value, field_name, max_len)


def require_one_of(value: str, field_name: str, allowed: Iterable[str]) -> str:
    allowed = list(allowed)
    if value not in allowed:
        raise ValidationError(f"{field_name} must be one of: {' '.join(allowed)}")
    return value


def is_valid_email(value: str) -> bool:
    return bool(value) and _EMAIL_RE.match(value) is not None


def parse_uuid(value: str, message: str = "invalid id") -> uuid.UUID:
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        raise ValidationError(message)
