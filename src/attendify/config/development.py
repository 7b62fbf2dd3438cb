import os

from .base import *  # noqa: F401,F403

ENVIRONMENT = "development"

JWT_SECRET = os.getenv("JWT_SECRET", "dev-secret-change-me-dev-secret-change-me")

DEBUG = True

# Create missing tables on startup (idempotent)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
