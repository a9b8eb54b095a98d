# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User accounts and their school membership profiles."""

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.dialects import postgresql
from sqlalchemy.orm import Mapped, mapped_column, relationship

from schoolhub.infrastructure.database.models.base import (
    Base,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
)
from schoolhub.models.enums import UserRole

if TYPE_CHECKING:
    from schoolhub.infrastructure.database.models.school import School


class User(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A person with an account on the platform."""

    __tablename__ = "users"

    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    image: Mapped[str | None] = mapped_column(Text, nullable=True)
    role: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=UserRole.STUDENT.value,
    )


class Teacher(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Teacher profile of a user, optionally attached to a school."""

    __tablename__ = "teachers"

    user_id: Mapped[str] = mapped_column(
        postgresql.UUID(as_uuid=False),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    school_id: Mapped[str | None] = mapped_column(
        postgresql.UUID(as_uuid=False),
        ForeignKey("schools.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    teacher_bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    teacher_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    teacher_image: Mapped[str | None] = mapped_column(Text, nullable=True)

    user: Mapped[User] = relationship(User)
    school: Mapped["School | None"] = relationship("School", back_populates="teachers")


class SchoolStaff(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Non-teaching staff member of a school."""

    __tablename__ = "school_staff"

    user_id: Mapped[str] = mapped_column(
        postgresql.UUID(as_uuid=False),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    school_id: Mapped[str] = mapped_column(
        postgresql.UUID(as_uuid=False),
        ForeignKey("schools.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    staff_full_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    staff_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    staff_image: Mapped[str | None] = mapped_column(Text, nullable=True)

    user: Mapped[User] = relationship(User)
    school: Mapped["School"] = relationship("School", back_populates="staff_members")


class Student(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Student profile of a user within a school."""

    __tablename__ = "students"

    user_id: Mapped[str] = mapped_column(
        postgresql.UUID(as_uuid=False),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    school_id: Mapped[str] = mapped_column(
        postgresql.UUID(as_uuid=False),
        ForeignKey("schools.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    user: Mapped[User] = relationship(User)
    school: Mapped["School"] = relationship("School", back_populates="students")
