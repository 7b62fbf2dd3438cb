"""Bearer-token guard and role gates for Flask views.

The guard stores the caller's identity in `flask.g` (`user_id`, `role`);
views read it back through `current_user_id()` / `current_role()`.
"""

from __future__ import annotations

import uuid
from functools import wraps
from typing import Callable, Optional

from flask import g, request

from ..core.enums import Role
from ..core.exceptions import InvalidTokenError
from ..users.service import AuthService
from .responses import error


class AuthGuard:
    def __init__(self, auth_service: AuthService):
        self._auth = auth_service

    def login_required(self, view: Callable):
        @wraps(view)
        def wrapper(*args, **kwargs):
            header = request.headers.get("Authorization", "")
            if not header:
                return error("authorization header required", 401)

            parts = header.split(" ", 1)
            if len(parts) != 2 or parts[0].lower() != "bearer":
                return error("invalid authorization header format", 401)

            token = parts[1].strip()
            if not token:
                return error("token required", 401)

            try:
                claims = self._auth.validate_token(token)
            except InvalidTokenError as e:
                return error(str(e), 401)

            g.user_id = claims.user_id
            g.role = claims.role
            return view(*args, **kwargs)

        return wrapper

    def roles_required(self, *allowed: Role):
        """Authenticate, then let through only callers holding one of `allowed`."""

        def decorator(view: Callable):
            @wraps(view)
            def gate(*args, **kwargs):
                role = current_role()
                if role is None:
                    return error("role not found in context", 403)
                if role not in allowed:
                    return error("insufficient permissions", 403)
                return view(*args, **kwargs)

            return self.login_required(gate)

        return decorator

    def teacher_required(self, view: Callable):
        return self.roles_required(Role.TEACHER)(view)

    def student_required(self, view: Callable):
        return self.roles_required(Role.STUDENT)(view)


def current_user_id() -> uuid.UUID:
    return g.user_id


def current_role() -> Optional[Role]:
    return g.get("role")
