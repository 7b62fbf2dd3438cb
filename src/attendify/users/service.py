from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Callable, Optional

from ..common.validators import require_byte_length_between, require_email, require_length_between, require_one_of
from ..core.constants import BCRYPT_ROUNDS, PASSWORD_MAX_BYTES, PASSWORD_MIN_LENGTH
from ..core.enums import Role
from ..core.exceptions import EmailTakenError, InvalidCredentialsError
from ..database.errors import DuplicateKey, RecordNotFound
from .model import AuthResult, TokenClaims, User
from .repository import UserRepository
from .security import TokenCodec, hash_password, verify_password


class AuthService:
    """Use cases: register, login, token validation."""

    def __init__(
        self,
        users: UserRepository,
        tokens: TokenCodec,
        *,
        bcrypt_rounds: int = BCRYPT_ROUNDS,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self._users = users
        self._tokens = tokens
        self._rounds = int(bcrypt_rounds)
        self._clock = clock
        # verified against on logins with an unknown email
        self._dummy_hash = hash_password(uuid.uuid4().hex, rounds=self._rounds)

    def register(self, *, email: str, password: str, name: str, role: Role | str) -> User:
        require_email(email)
        require_byte_length_between(password, "password", PASSWORD_MIN_LENGTH, PASSWORD_MAX_BYTES)
        require_length_between(name, "name", 2, 100)
        role_value = role.value if isinstance(role, Role) else str(role)
        require_one_of(role_value, "role", Role.values())

        user = User(
            id=uuid.uuid4(),
            email=email,
            password_hash=hash_password(password, rounds=self._rounds),
            name=name,
            role=Role(role_value),
            created_at=self._clock(),
        )

        try:
            self._users.create(user)
        except DuplicateKey:
            raise EmailTakenError()
        return user

    def login(self, *, email: str, password: str) -> AuthResult:
        try:
            user = self._users.get_by_email(email)
        except RecordNotFound:
            # Burn the same bcrypt work as a real check so response time does
            # not reveal whether the account exists.
            verify_password(password, self._dummy_hash)
            raise InvalidCredentialsError()

        if not verify_password(password, user.password_hash):
            raise InvalidCredentialsError()

        return AuthResult(token=self.issue_token(user), user=user)

    def issue_token(self, user: User, now: Optional[datetime] = None) -> str:
        return self._tokens.issue(user, now=now or self._clock())

    def validate_token(self, token: str) -> TokenClaims:
        return self._tokens.decode(token, now=self._clock())

