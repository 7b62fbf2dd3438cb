"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

CLASS_CODE_LENGTH = 6
CLASS_CODE_MAX_ATTEMPTS = 5

BCRYPT_ROUNDS = 12
PASSWORD_MIN_LENGTH = 8
# bcrypt only looks at the first 72 bytes of its input
PASSWORD_MAX_BYTES = 72

TOKEN_TTL_HOURS = 24
JWT_ALGORITHM = "HS256"
JWT_SECRET_MIN_BYTES = 32

SHUTDOWN_TIMEOUT_SECONDS = 5
