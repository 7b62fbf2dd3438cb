import os

from .base import *  # noqa: F401,F403

ENVIRONMENT = "production"

# No default: the app factory refuses to start without a secret
JWT_SECRET = os.getenv("JWT_SECRET", "")

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
