from __future__ import annotations

import importlib

import pytest

from attendify.classes.service import ClassService
from attendify.container import Container
from attendify.enrollments.service import EnrollmentService
from attendify.main import create_app
from attendify.users.security import TokenCodec
from attendify.users.service import AuthService
from tests.fakes import StubConnection, make_stores

TEST_SECRET = "test-secret-test-secret-test-secret!"


@pytest.fixture
def settings():
    return importlib.import_module("attendify.config.testing")


@pytest.fixture
def container():
    users, classes, enrollments = make_stores()
    return Container(
        conn=StubConnection(),
        users_repo=users,
        classes_repo=classes,
        enrollments_repo=enrollments,
        auth_service=AuthService(users, TokenCodec(TEST_SECRET), bcrypt_rounds=4),
        class_service=ClassService(classes),
        enrollment_service=EnrollmentService(enrollments, classes),
    )


@pytest.fixture
def app(settings, container):
    return create_app(settings, container=container)


@pytest.fixture
def client(app):
    return app.test_client()
