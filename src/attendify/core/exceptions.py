from __future__ import annotations


class DomainError(Exception):
    """Base exception for business rule violations."""

    default_message = "domain error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    default_message = "validation failed"


class AuthenticationError(DomainError):
    """Raised when the caller cannot be authenticated."""


class InvalidCredentialsError(AuthenticationError):
    """Unknown email or wrong password. Both cases look the same to callers."""

    default_message = "invalid email or password"


class InvalidTokenError(AuthenticationError):
    default_message = "invalid or expired token"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    default_message = "insufficient permissions"


class NotClassOwnerError(AuthorizationError):
    default_message = "not the owner of this class"


class ResourceNotFoundError(DomainError):
    default_message = "not found"


class ClassNotFoundError(ResourceNotFoundError):
    default_message = "class not found"


class NotEnrolledError(ResourceNotFoundError):
    default_message = "not enrolled in this class"


class ConflictError(DomainError):
    default_message = "conflict"


class EmailTakenError(ConflictError):
    default_message = "email already registered"


class AlreadyEnrolledError(ConflictError):
    default_message = "already enrolled in this class"


class CodeGenerationError(DomainError):
    """No free class code was found within the attempt budget."""

    default_message = "failed to generate unique class code"
