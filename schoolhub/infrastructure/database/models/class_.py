# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Class, class membership and course content module models."""

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.dialects import postgresql
from sqlalchemy.orm import Mapped, mapped_column, relationship

from schoolhub.infrastructure.database.models.base import (
    Base,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
)
from schoolhub.infrastructure.database.models.school import School
from schoolhub.infrastructure.database.models.user import Teacher, User
from schoolhub.models.enums import ClassType, ModuleType


class Class(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A class, either part of a school or standalone (e.g. private tutoring)."""

    __tablename__ = "classes"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    class_code: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    class_type: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
        default=ClassType.MAIN_SCHOOL_CLASS.value,
    )
    class_image: Mapped[str | None] = mapped_column(Text, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    school_id: Mapped[str | None] = mapped_column(
        postgresql.UUID(as_uuid=False),
        ForeignKey("schools.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    creator_id: Mapped[str | None] = mapped_column(
        postgresql.UUID(as_uuid=False),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    primary_teacher_id: Mapped[str | None] = mapped_column(
        postgresql.UUID(as_uuid=False),
        ForeignKey("teachers.id", ondelete="SET NULL"),
        nullable=True,
    )

    school: Mapped[School | None] = relationship(School, back_populates="classes")
    creator: Mapped[User | None] = relationship(User)
    primary_teacher: Mapped[Teacher | None] = relationship(Teacher)
    members: Mapped[list["ClassMember"]] = relationship(
        "ClassMember",
        back_populates="class_",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    modules: Mapped[list["CourseContentModule"]] = relationship(
        "CourseContentModule",
        back_populates="class_",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="CourseContentModule.order_in_class",
    )


class ClassMember(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Membership of a user in a class."""

    __tablename__ = "class_members"

    class_id: Mapped[str] = mapped_column(
        postgresql.UUID(as_uuid=False),
        ForeignKey("classes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[str] = mapped_column(
        postgresql.UUID(as_uuid=False),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    teacher_id: Mapped[str | None] = mapped_column(
        postgresql.UUID(as_uuid=False),
        ForeignKey("teachers.id", ondelete="SET NULL"),
        nullable=True,
    )

    class_: Mapped[Class] = relationship(Class, back_populates="members")
    user: Mapped[User] = relationship(User)
    teacher_role: Mapped[Teacher | None] = relationship(Teacher)


class CourseContentModule(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A unit of course content belonging to exactly one class."""

    __tablename__ = "course_content_modules"

    class_id: Mapped[str] = mapped_column(
        postgresql.UUID(as_uuid=False),
        ForeignKey("classes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    module_code: Mapped[str] = mapped_column(String(32), nullable=False)
    module_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ModuleType.CORE_CONTENT.value,
    )
    order_in_class: Mapped[int | None] = mapped_column(Integer, nullable=True)

    class_: Mapped[Class] = relationship(Class, back_populates="modules")
