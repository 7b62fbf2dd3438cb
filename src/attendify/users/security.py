"""Password hashing (bcrypt) and bearer token helpers (JWT, HS256)."""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
from jose import JWTError, jwt

from ..core.constants import BCRYPT_ROUNDS, JWT_ALGORITHM, PASSWORD_MAX_BYTES, TOKEN_TTL_HOURS
from ..core.enums import Role
from ..core.exceptions import InvalidTokenError
from .model import TokenClaims, User


def hash_password(password: str, *, rounds: int = BCRYPT_ROUNDS) -> str:
    password_bytes = password.encode("utf-8")
    if len(password_bytes) > PASSWORD_MAX_BYTES:
        # Callers validate first; bcrypt would silently ignore the tail otherwise
        raise ValueError(f"password exceeds {PASSWORD_MAX_BYTES} bytes")
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password_bytes, salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    password_bytes = plain_password.encode("utf-8")
    if len(password_bytes) > PASSWORD_MAX_BYTES:
        return False
    try:
        return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))
    except ValueError:
        # malformed or placeholder hash in the store
        return False


class TokenCodec:
    """Issues and verifies signed bearer tokens carrying user id and role."""

    def __init__(self, secret: str, *, ttl: timedelta = timedelta(hours=TOKEN_TTL_HOURS)):
        if not secret:
            raise ValueError("token secret must not be empty")
        self._secret = secret
        self._ttl = ttl

    def issue(self, user: User, *, now: Optional[datetime] = None) -> str:
        now = now or datetime.now(timezone.utc)
        issued_at = int(now.timestamp())
        to_encode: Dict[str, Any] = {
            "user_id": str(user.id),
            "role": user.role.value,
            "sub": str(user.id),
            "iat": issued_at,
            "nbf": issued_at,
            "exp": issued_at + int(self._ttl.total_seconds()),
        }
        return jwt.encode(to_encode, self._secret, algorithm=JWT_ALGORITHM)

    def decode(self, token: str, *, now: Optional[datetime] = None) -> TokenClaims:
        now = now or datetime.now(timezone.utc)
        try:
            # `algorithms` pins HS256; tokens signed with anything else are rejected.
            # The time window is checked below against `now`.
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[JWT_ALGORITHM],
                options={
                    "verify_exp": False,
                    "verify_nbf": False,
                    "require_exp": True,
                    "require_iat": True,
                    "require_nbf": True,
                    "require_sub": True,
                },
            )
        except JWTError:
            raise InvalidTokenError()

        try:
            user_id = uuid.UUID(str(payload["user_id"]))
            role = Role(payload["role"])
            claims = TokenClaims(
                user_id=user_id,
                role=role,
                issued_at=datetime.fromtimestamp(int(payload["iat"]), tz=timezone.utc),
                not_before=datetime.fromtimestamp(int(payload["nbf"]), tz=timezone.utc),
                expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc),
                subject=str(payload["sub"]),
            )
        except (KeyError, TypeError, ValueError):
            raise InvalidTokenError()

        if claims.subject != str(claims.user_id):
            raise InvalidTokenError()

        # validity window is [nbf, exp), so a token is dead at exp itself
        if not claims.not_before <= now < claims.expires_at:
            raise InvalidTokenError()
        return claims
