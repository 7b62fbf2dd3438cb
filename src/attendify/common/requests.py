from __future__ import annotations

from typing import Any, Dict

from flask import request

from ..core.exceptions import ValidationError


def json_body() -> Dict[str, Any]:
    """Decode the request body as a JSON object or fail with a 400-class error."""

    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("invalid request body")
    return data
