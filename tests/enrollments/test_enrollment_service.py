from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from attendify.classes.service import ClassService
from attendify.core.enums import Role
from attendify.core.exceptions import AlreadyEnrolledError, ClassNotFoundError, NotEnrolledError
from attendify.database.errors import DuplicateKey, ForeignKeyViolation
from attendify.enrollments.service import EnrollmentService
from attendify.users.model import User
from tests.fakes import make_stores


def add_user(users, name, role=Role.STUDENT):
    user = User(
        id=uuid.uuid4(),
        email=f"{name.lower()}@x.io",
        password_hash="x",
        name=name,
        role=role,
        created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
    )
    users.create(user)
    return user


@pytest.fixture
def world():
    users, classes, enrollments = make_stores()
    teacher = add_user(users, "Teacher", Role.TEACHER)
    cls = ClassService(classes).create_class(teacher_id=teacher.id, name="Algebra")
    return users, classes, enrollments, teacher, cls


def test_enroll_by_code_creates_enrollment(world):
    users, classes, enrollments, _, cls = world
    student = add_user(users, "Sam")

    enrollment = EnrollmentService(enrollments, classes).enroll_by_code(class_code=cls.code, student_id=student.id)

    assert enrollment.class_id == cls.id
    assert enrollment.student_id == student.id
    assert enrollments.is_enrolled(cls.id, student.id)


def test_enroll_twice_raises_already_enrolled(world):
    users, classes, enrollments, _, cls = world
    student = add_user(users, "Sam")
    svc = EnrollmentService(enrollments, classes)
    svc.enroll_by_code(class_code=cls.code, student_id=student.id)

    with pytest.raises(AlreadyEnrolledError) as exc:
        svc.enroll_by_code(class_code=cls.code, student_id=student.id)
    assert str(exc.value) == "already enrolled in this class"
    assert len(enrollments.list_by_class(cls.id)) == 1


def test_racing_enrollment_insert_maps_to_already_enrolled(world):
    users, classes, enrollments, _, cls = world
    student = add_user(users, "Sam")

    class RacyEnrollments:
        def is_enrolled(self, class_id, student_id):
            return False

        def create(self, enrollment):
            raise DuplicateKey("enrollments.class_id_student_id")

    with pytest.raises(AlreadyEnrolledError):
        EnrollmentService(RacyEnrollments(), classes).enroll_by_code(class_code=cls.code, student_id=student.id)


def test_enroll_unknown_code_raises_class_not_found(world):
    users, classes, enrollments, _, _ = world
    student = add_user(users, "Sam")

    with pytest.raises(ClassNotFoundError):
        EnrollmentService(enrollments, classes).enroll_by_code(class_code="ZZZZZZ", student_id=student.id)


def test_student_classes_most_recent_first(world):
    users, classes, enrollments, teacher, first = world
    second = ClassService(classes).create_class(teacher_id=teacher.id, name="Geometry")
    student = add_user(users, "Sam")
    start = datetime(2026, 2, 1, tzinfo=timezone.utc)
    ticks = iter(start + timedelta(minutes=i) for i in range(2))
    svc = EnrollmentService(enrollments, classes, clock=lambda: next(ticks))

    svc.enroll_by_code(class_code=first.code, student_id=student.id)
    svc.enroll_by_code(class_code=second.code, student_id=student.id)

    items = svc.get_student_classes(student.id)
    assert [i.class_.id for i in items] == [second.id, first.id]
    assert items[0].to_response()["class"]["name"] == "Geometry"


def test_class_students_sorted_by_name(world):
    users, classes, enrollments, _, cls = world
    svc = EnrollmentService(enrollments, classes)
    for name in ("Zoe", "Ann", "Max"):
        svc.enroll_by_code(class_code=cls.code, student_id=add_user(users, name).id)

    roster = svc.get_class_students(cls.id)

    assert [r.student.name for r in roster] == ["Ann", "Max", "Zoe"]
    assert "password_hash" not in roster[0].to_response()["student"]


def test_class_students_for_missing_class(world):
    _, classes, enrollments, _, _ = world
    with pytest.raises(ClassNotFoundError):
        EnrollmentService(enrollments, classes).get_class_students(uuid.uuid4())


def test_unenroll(world):
    users, classes, enrollments, _, cls = world
    student = add_user(users, "Sam")
    svc = EnrollmentService(enrollments, classes)
    svc.enroll_by_code(class_code=cls.code, student_id=student.id)

    svc.unenroll(class_id=cls.id, student_id=student.id)

    assert not svc.is_enrolled(class_id=cls.id, student_id=student.id)
    with pytest.raises(NotEnrolledError):
        svc.unenroll(class_id=cls.id, student_id=student.id)


def test_deleting_class_removes_its_enrollments(world):
    users, classes, enrollments, teacher, cls = world
    student = add_user(users, "Sam")
    svc = EnrollmentService(enrollments, classes)
    svc.enroll_by_code(class_code=cls.code, student_id=student.id)

    ClassService(classes).delete_class(teacher_id=teacher.id, class_id=cls.id)

    assert svc.get_student_classes(student.id) == []
    with pytest.raises(ClassNotFoundError):
        svc.get_class_students(cls.id)


def test_class_deleted_before_insert_maps_to_class_not_found(world):
    users, classes, enrollments, teacher, cls = world
    student = add_user(users, "Sam")

    class VanishingClassEnrollments:
        def is_enrolled(self, class_id, student_id):
            return False

        def create(self, enrollment):
            ClassService(classes).delete_class(teacher_id=teacher.id, class_id=cls.id)
            enrollments.create(enrollment)

    with pytest.raises(ClassNotFoundError):
        EnrollmentService(VanishingClassEnrollments(), classes).enroll_by_code(class_code=cls.code, student_id=student.id)


def test_foreign_key_violation_on_insert_is_class_not_found(world):
    users, classes, _, _, cls = world
    student = add_user(users, "Sam")

    class DanglingEnrollments:
        def is_enrolled(self, class_id, student_id):
            return False

        def create(self, enrollment):
            raise ForeignKeyViolation("enrollments.class_id")

    with pytest.raises(ClassNotFoundError):
        EnrollmentService(DanglingEnrollments(), classes).enroll_by_code(class_code=cls.code, student_id=student.id)


def test_class_roster_reads_only_enrollments(world):
    users, classes, enrollments, _, cls = world
    svc = EnrollmentService(enrollments, classes)
    svc.enroll_by_code(class_code=cls.code, student_id=add_user(users, "Sam").id)

    class NoClassLookups:
        def get_by_id(self, class_id):
            raise AssertionError("class already loaded")

    roster = EnrollmentService(enrollments, NoClassLookups()).get_class_roster(cls)

    assert [r.student.name for r in roster] == ["Sam"]
