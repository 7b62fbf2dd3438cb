from __future__ import annotations

import dataclasses
import re
import uuid

import pytest
from sqlalchemy.exc import OperationalError

from attendify.main import create_app
from tests.fakes import StubConnection

CODE_RE = re.compile(r"^[A-Z2-7]{6}$")


def register(client, email, role, name="Ada", password="password1"):
    return client.post(
        "/api/auth/register",
        json={"email": email, "password": password, "name": name, "role": role},
    )


def login(client, email, password="password1"):
    resp = client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.get_json()
    return resp.get_json()["data"]["token"]


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


def signed_up(client, email, role, name="Ada"):
    assert register(client, email, role, name=name).status_code == 201
    return bearer(login(client, email))


def create_class(client, headers, name="Algebra"):
    resp = client.post("/api/classes", json={"name": name}, headers=headers)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()["data"]


def run_scenarios(client):
    # 1. register, login, list classes
    resp = register(client, "a@x.io", "teacher")
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["success"] is True
    assert body["data"]["email"] == "a@x.io"
    assert body["data"]["role"] == "teacher"
    assert "password_hash" not in body["data"]

    resp = client.post("/api/auth/login", json={"email": "a@x.io", "password": "password1"})
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["token"]
    assert data["user"]["email"] == "a@x.io"
    teacher = bearer(data["token"])

    resp = client.get("/api/classes", headers=teacher)
    assert resp.status_code == 200
    assert resp.get_json() == {"success": True, "data": []}

    # 2. duplicate email
    resp = register(client, "a@x.io", "teacher")
    assert resp.status_code == 409
    assert resp.get_json() == {"success": False, "error": "email already registered"}

    # 3. create and join
    cls = create_class(client, teacher)
    assert CODE_RE.match(cls["code"])
    student = signed_up(client, "s@x.io", "student", name="Sam")

    resp = client.post("/api/enrollments", json={"class_code": cls["code"]}, headers=student)
    assert resp.status_code == 201
    assert resp.get_json()["data"]["class_id"] == cls["id"]

    resp = client.post("/api/enrollments", json={"class_code": cls["code"]}, headers=student)
    assert resp.status_code == 409
    assert resp.get_json()["error"] == "already enrolled in this class"

    # 4. wrong role
    resp = client.post("/api/classes", json={"name": "X"}, headers=student)
    assert resp.status_code == 403

    # 5. non-owner delete
    other_teacher = signed_up(client, "t2@x.io", "teacher", name="Tom")
    resp = client.delete(f"/api/classes/{cls['id']}", headers=other_teacher)
    assert resp.status_code == 403
    assert resp.get_json()["error"] == "not the owner of this class"

    # 6. cascade
    resp = client.get("/api/enrollments", headers=student)
    assert [e["class"]["id"] for e in resp.get_json()["data"]] == [cls["id"]]

    resp = client.delete(f"/api/classes/{cls['id']}", headers=teacher)
    assert resp.status_code == 200
    assert resp.get_json()["data"] == {"message": "class deleted"}

    resp = client.get("/api/enrollments", headers=student)
    assert resp.status_code == 200
    assert cls["id"] not in [e["class"]["id"] for e in resp.get_json()["data"]]


def test_end_to_end_scenarios(client):
    run_scenarios(client)


def test_end_to_end_scenarios_on_sqlite(settings):
    app = create_app(settings)
    try:
        run_scenarios(app.test_client())
    finally:
        app.extensions["attendify"].conn.dispose()


def test_health_ok(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.get_json() == {"success": True, "data": {"status": "ok"}}


def test_health_reports_unreachable_database(settings, container):
    broken = dataclasses.replace(container, conn=StubConnection(OperationalError("SELECT 1", {}, Exception("down"))))
    resp = create_app(settings, container=broken).test_client().get("/health")

    assert resp.status_code == 503
    assert resp.get_json() == {"success": False, "error": "database unavailable"}


@pytest.mark.parametrize(
    "headers,message",
    [
        ({}, "authorization header required"),
        ({"Authorization": "Token abc"}, "invalid authorization header format"),
        ({"Authorization": "Bearer"}, "invalid authorization header format"),
        ({"Authorization": "Bearer   "}, "token required"),
        ({"Authorization": "Bearer not-a-jwt"}, "invalid or expired token"),
    ],
)
def test_auth_header_errors(client, headers, message):
    resp = client.get("/api/classes", headers=headers)
    assert resp.status_code == 401
    assert resp.get_json() == {"success": False, "error": message}


def test_bearer_scheme_is_case_insensitive(client):
    register(client, "a@x.io", "teacher")
    token = login(client, "a@x.io")

    resp = client.get("/api/classes", headers={"Authorization": f"bearer {token}"})
    assert resp.status_code == 200


@pytest.mark.parametrize(
    "payload,message",
    [
        ({}, "email is required"),
        ({"email": "bad", "password": "password1", "name": "Ada", "role": "teacher"}, "invalid email format"),
        ({"email": "a@x.io", "name": "Ada", "role": "teacher"}, "password is required"),
        ({"email": "a@x.io", "password": "short", "name": "Ada", "role": "teacher"}, "password is too short"),
        ({"email": "a@x.io", "password": "p" * 73, "name": "Ada", "role": "teacher"}, "password is too long"),
        ({"email": "a@x.io", "password": "password1", "name": "A", "role": "teacher"}, "name is too short"),
        ({"email": "a@x.io", "password": "password1", "name": "Ada", "role": "admin"}, "role must be one of: teacher student"),
        ({"email": 5, "password": "password1", "name": "Ada", "role": "teacher"}, "invalid request body"),
    ],
)
def test_register_validation(client, payload, message):
    resp = client.post("/api/auth/register", json=payload)
    assert resp.status_code == 400
    assert resp.get_json() == {"success": False, "error": message}


def test_malformed_body_is_rejected(client):
    resp = client.post("/api/auth/login", data="{not json", content_type="application/json")
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "invalid request body"

    resp = client.post("/api/auth/login", json=["a@x.io"])
    assert resp.status_code == 400


def test_login_failures_share_one_message(client):
    register(client, "a@x.io", "teacher")

    wrong = client.post("/api/auth/login", json={"email": "a@x.io", "password": "password2"})
    unknown = client.post("/api/auth/login", json={"email": "b@x.io", "password": "password1"})

    assert wrong.status_code == unknown.status_code == 401
    assert wrong.get_json() == unknown.get_json() == {"success": False, "error": "invalid email or password"}


def test_get_class_open_to_any_authenticated_user(client):
    teacher = signed_up(client, "a@x.io", "teacher")
    student = signed_up(client, "s@x.io", "student", name="Sam")
    cls = create_class(client, teacher)

    resp = client.get(f"/api/classes/{cls['id']}", headers=student)
    assert resp.status_code == 200
    assert resp.get_json()["data"]["code"] == cls["code"]

    resp = client.get(f"/api/classes/{uuid.uuid4()}", headers=student)
    assert resp.status_code == 404
    assert resp.get_json()["error"] == "class not found"

    resp = client.get("/api/classes/not-a-uuid", headers=student)
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "invalid class id"


def test_enroll_code_is_normalized(client):
    teacher = signed_up(client, "a@x.io", "teacher")
    student = signed_up(client, "s@x.io", "student", name="Sam")
    cls = create_class(client, teacher)

    resp = client.post("/api/enrollments", json={"class_code": f"  {cls['code'].lower()} "}, headers=student)
    assert resp.status_code == 201

    resp = client.post("/api/enrollments", json={"class_code": "ZZZZZZ"}, headers=student)
    assert resp.status_code == 404
    assert resp.get_json()["error"] == "class not found"


def test_roster_requires_owner(client):
    teacher = signed_up(client, "a@x.io", "teacher")
    other = signed_up(client, "t2@x.io", "teacher", name="Tom")
    student = signed_up(client, "s@x.io", "student", name="Sam")
    cls = create_class(client, teacher)
    client.post("/api/enrollments", json={"class_code": cls["code"]}, headers=student)

    resp = client.get(f"/api/classes/{cls['id']}/students", headers=teacher)
    assert resp.status_code == 200
    roster = resp.get_json()["data"]
    assert [r["student"]["email"] for r in roster] == ["s@x.io"]
    assert "password_hash" not in roster[0]["student"]

    resp = client.get(f"/api/classes/{cls['id']}/students", headers=other)
    assert resp.status_code == 403
    assert resp.get_json()["error"] == "access denied"

    resp = client.get(f"/api/classes/{cls['id']}/students", headers=student)
    assert resp.status_code == 403
    assert resp.get_json()["error"] == "insufficient permissions"


def test_unenroll(client):
    teacher = signed_up(client, "a@x.io", "teacher")
    student = signed_up(client, "s@x.io", "student", name="Sam")
    cls = create_class(client, teacher)
    client.post("/api/enrollments", json={"class_code": cls["code"]}, headers=student)

    resp = client.delete(f"/api/enrollments/{cls['id']}", headers=student)
    assert resp.status_code == 200
    assert resp.get_json() == {"success": True}

    resp = client.delete(f"/api/enrollments/{cls['id']}", headers=student)
    assert resp.status_code == 404
    assert resp.get_json()["error"] == "not enrolled in this class"


def test_unknown_route_and_method(client):
    resp = client.get("/api/nope")
    assert resp.status_code == 404
    assert resp.get_json() == {"success": False, "error": "not found"}

    resp = client.put("/api/classes")
    assert resp.status_code == 405
    assert resp.get_json() == {"success": False, "error": "method not allowed"}


def test_unexpected_error_returns_generic_body(settings, container):
    class Exploding:
        def get_teacher_classes(self, teacher_id):
            raise RuntimeError("boom")

    app = create_app(settings, container=container)
    client = app.test_client()
    teacher = signed_up(client, "a@x.io", "teacher")

    object.__setattr__(container, "class_service", Exploding())
    resp = client.get("/api/classes", headers=teacher)

    assert resp.status_code == 500
    assert resp.get_json() == {"success": False, "error": "internal server error"}


def test_enroll_code_length_checked_after_trimming(client):
    student = signed_up(client, "s@x.io", "student", name="Sam")

    resp = client.post("/api/enrollments", json={"class_code": "  AB  "}, headers=student)

    assert resp.status_code == 400
    assert resp.get_json() == {"success": False, "error": "class_code is too short"}
