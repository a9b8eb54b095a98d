# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Initial SchoolHub schema.

Revision ID: 001_initial
Revises: None
Create Date: 2025-06-02
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id_column() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=False),
        server_default=sa.text("gen_random_uuid()"),
        primary_key=True,
    )


def _timestamp_columns() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    ]


def _fk(column: str, target: str, ondelete: str, nullable: bool) -> sa.Column:
    return sa.Column(
        column,
        postgresql.UUID(as_uuid=False),
        sa.ForeignKey(target, ondelete=ondelete),
        nullable=nullable,
    )


def upgrade() -> None:
    """Create SchoolHub tables."""
    op.execute('CREATE EXTENSION IF NOT EXISTS "pgcrypto"')

    # =========================================================================
    # USERS
    # =========================================================================

    op.create_table(
        "users",
        _id_column(),
        sa.Column("full_name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("image", sa.Text, nullable=True),
        sa.Column("role", sa.String(20), nullable=False, server_default="STUDENT"),
        *_timestamp_columns(),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    # =========================================================================
    # SCHOOLS
    # =========================================================================

    op.create_table(
        "schools",
        _id_column(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("username", sa.String(100), nullable=False),
        _fk("creator_id", "users.id", "SET NULL", nullable=True),
        sa.Column("logo", sa.Text, nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("school_type", sa.String(30), nullable=True),
        sa.Column("website_url", sa.String(500), nullable=True),
        sa.Column("contact", postgresql.JSONB, nullable=True),
        sa.Column("student_invitation_code", sa.String(255), nullable=True),
        sa.Column("teacher_invitation_code", sa.String(255), nullable=True),
        sa.Column("staff_invitation_code", sa.String(255), nullable=True),
        sa.Column("parent_invitation_code", sa.String(255), nullable=True),
        sa.Column("academic_profile", postgresql.JSONB, nullable=True),
        sa.Column("total_classes", sa.Integer, nullable=False, server_default="0"),
        sa.Column("total_modules", sa.Integer, nullable=False, server_default="0"),
        *_timestamp_columns(),
        sa.UniqueConstraint("username", name="uq_schools_username"),
    )
    op.create_index("ix_schools_creator_id", "schools", ["creator_id"])

    op.create_table(
        "teachers",
        _id_column(),
        _fk("user_id", "users.id", "CASCADE", nullable=False),
        _fk("school_id", "schools.id", "SET NULL", nullable=True),
        sa.Column("teacher_bio", sa.Text, nullable=True),
        sa.Column("teacher_email", sa.String(255), nullable=True),
        sa.Column("teacher_image", sa.Text, nullable=True),
        *_timestamp_columns(),
    )
    op.create_index("ix_teachers_user_id", "teachers", ["user_id"])
    op.create_index("ix_teachers_school_id", "teachers", ["school_id"])

    op.create_table(
        "school_staff",
        _id_column(),
        _fk("user_id", "users.id", "CASCADE", nullable=False),
        _fk("school_id", "schools.id", "CASCADE", nullable=False),
        sa.Column("staff_full_name", sa.String(200), nullable=True),
        sa.Column("staff_email", sa.String(255), nullable=True),
        sa.Column("staff_image", sa.Text, nullable=True),
        *_timestamp_columns(),
    )
    op.create_index("ix_school_staff_user_id", "school_staff", ["user_id"])
    op.create_index("ix_school_staff_school_id", "school_staff", ["school_id"])

    op.create_table(
        "students",
        _id_column(),
        _fk("user_id", "users.id", "CASCADE", nullable=False),
        _fk("school_id", "schools.id", "CASCADE", nullable=False),
        *_timestamp_columns(),
    )
    op.create_index("ix_students_user_id", "students", ["user_id"])
    op.create_index("ix_students_school_id", "students", ["school_id"])

    op.create_table(
        "school_join_requests",
        _id_column(),
        _fk("school_id", "schools.id", "CASCADE", nullable=False),
        sa.Column("requested_role", sa.String(20), nullable=False),
        sa.Column("requester_name", sa.String(200), nullable=True),
        sa.Column("requester_email", sa.String(255), nullable=True),
        sa.Column("requester_phone", sa.String(50), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        _fk("user_id", "users.id", "SET NULL", nullable=True),
        *_timestamp_columns(),
    )
    op.create_index(
        "ix_school_join_requests_school_id", "school_join_requests", ["school_id"]
    )

    # =========================================================================
    # CLASSES
    # =========================================================================

    op.create_table(
        "classes",
        _id_column(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("class_code", sa.String(32), nullable=False),
        sa.Column(
            "class_type",
            sa.String(30),
            nullable=False,
            server_default="MAIN_SCHOOL_CLASS",
        ),
        sa.Column("class_image", sa.Text, nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        _fk("school_id", "schools.id", "CASCADE", nullable=True),
        _fk("creator_id", "users.id", "SET NULL", nullable=True),
        _fk("primary_teacher_id", "teachers.id", "SET NULL", nullable=True),
        *_timestamp_columns(),
        sa.UniqueConstraint("username", name="uq_classes_username"),
        sa.UniqueConstraint("class_code", name="uq_classes_class_code"),
    )
    op.create_index("ix_classes_school_id", "classes", ["school_id"])

    op.create_table(
        "class_members",
        _id_column(),
        _fk("class_id", "classes.id", "CASCADE", nullable=False),
        _fk("user_id", "users.id", "CASCADE", nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        _fk("teacher_id", "teachers.id", "SET NULL", nullable=True),
        *_timestamp_columns(),
    )
    op.create_index("ix_class_members_class_id", "class_members", ["class_id"])
    op.create_index("ix_class_members_user_id", "class_members", ["user_id"])

    op.create_table(
        "course_content_modules",
        _id_column(),
        _fk("class_id", "classes.id", "CASCADE", nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("module_code", sa.String(32), nullable=False),
        sa.Column(
            "module_type",
            sa.String(20),
            nullable=False,
            server_default="CORE_CONTENT",
        ),
        sa.Column("order_in_class", sa.Integer, nullable=True),
        *_timestamp_columns(),
    )
    op.create_index(
        "ix_course_content_modules_class_id", "course_content_modules", ["class_id"]
    )


def downgrade() -> None:
    """Drop SchoolHub tables."""
    op.drop_table("course_content_modules")
    op.drop_table("class_members")
    op.drop_table("classes")
    op.drop_table("school_join_requests")
    op.drop_table("students")
    op.drop_table("school_staff")
    op.drop_table("teachers")
    op.drop_table("schools")
    op.drop_table("users")
