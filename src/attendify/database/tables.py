"""Table definitions shared by the SQL repositories and the bootstrap script."""

from __future__ import annotations

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    MetaData,
    String,
    Table,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.dialects import mysql

metadata = MetaData()

# MySQL DATETIME drops fractional seconds unless fsp is set; ordering by
# enrollment time needs them.
Timestamp = DateTime(timezone=False).with_variant(mysql.DATETIME(fsp=6), "mysql")

users = Table(
    "users",
    metadata,
    Column("id", Uuid(as_uuid=True), primary_key=True),
    Column("email", String(255), nullable=False),
    Column("password_hash", String(255), nullable=False),
    Column("name", String(100), nullable=False),
    Column("role", String(20), nullable=False),
    Column("created_at", Timestamp, nullable=False),
    UniqueConstraint("email", name="uq_users_email"),
)

classes = Table(
    "classes",
    metadata,
    Column("id", Uuid(as_uuid=True), primary_key=True),
    Column("name", String(100), nullable=False),
    Column("code", String(10), nullable=False),
    Column(
        "teacher_id",
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("created_at", Timestamp, nullable=False),
    UniqueConstraint("code", name="uq_classes_code"),
)

enrollments = Table(
    "enrollments",
    metadata,
    Column("id", Uuid(as_uuid=True), primary_key=True),
    Column("class_id", Uuid(as_uuid=True), ForeignKey("classes.id", ondelete="CASCADE"), nullable=False),
    Column("student_id", Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("enrolled_at", Timestamp, nullable=False),
    UniqueConstraint("class_id", "student_id", name="uq_enrollments_class_student"),
)
