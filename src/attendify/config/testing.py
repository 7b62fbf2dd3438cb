import os

from .base import *  # noqa: F401,F403

ENVIRONMENT = "testing"

JWT_SECRET = "test-secret-test-secret-test-secret!"

DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+pysqlite:///:memory:")

BCRYPT_ROUNDS = 4

DEBUG = False
TESTING = True

AUTO_INIT_DB = True
