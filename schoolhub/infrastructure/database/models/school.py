# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""School and school join request models."""

from typing import TYPE_CHECKING, Any

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.dialects import postgresql
from sqlalchemy.orm import Mapped, mapped_column, relationship

from schoolhub.infrastructure.database.models.base import (
    Base,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
)
from schoolhub.infrastructure.database.models.user import (
    SchoolStaff,
    Student,
    Teacher,
    User,
)
from schoolhub.models.enums import JoinRequestStatus

if TYPE_CHECKING:
    from schoolhub.infrastructure.database.models.class_ import Class

INVITATION_CODE_COLUMNS = {
    "STUDENT": "student_invitation_code",
    "TEACHER": "teacher_invitation_code",
    "STAFF": "staff_invitation_code",
    "PARENT": "parent_invitation_code",
}


class School(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A school (tenant).

    Invitation code columns hold bcrypt hashes, never plain codes.
    """

    __tablename__ = "schools"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    creator_id: Mapped[str | None] = mapped_column(
        postgresql.UUID(as_uuid=False),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    logo: Mapped[str | None] = mapped_column(Text, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    school_type: Mapped[str | None] = mapped_column(String(30), nullable=True)
    website_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    contact: Mapped[dict[str, Any] | None] = mapped_column(postgresql.JSONB, nullable=True)

    student_invitation_code: Mapped[str | None] = mapped_column(String(255), nullable=True)
    teacher_invitation_code: Mapped[str | None] = mapped_column(String(255), nullable=True)
    staff_invitation_code: Mapped[str | None] = mapped_column(String(255), nullable=True)
    parent_invitation_code: Mapped[str | None] = mapped_column(String(255), nullable=True)

    academic_profile: Mapped[dict[str, Any] | None] = mapped_column(
        postgresql.JSONB, nullable=True
    )
    total_classes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_modules: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    creator: Mapped[User | None] = relationship(User)
    staff_members: Mapped[list[SchoolStaff]] = relationship(
        SchoolStaff, back_populates="school"
    )
    teachers: Mapped[list[Teacher]] = relationship(Teacher, back_populates="school")
    students: Mapped[list[Student]] = relationship(Student, back_populates="school")
    join_requests: Mapped[list["SchoolJoinRequest"]] = relationship(
        "SchoolJoinRequest", back_populates="school"
    )
    classes: Mapped[list["Class"]] = relationship("Class", back_populates="school")


class SchoolJoinRequest(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Pending request of a contact to join a school in a given role."""

    __tablename__ = "school_join_requests"

    school_id: Mapped[str] = mapped_column(
        postgresql.UUID(as_uuid=False),
        ForeignKey("schools.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    requested_role: Mapped[str] = mapped_column(String(20), nullable=False)
    requester_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    requester_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    requester_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=JoinRequestStatus.PENDING.value,
        server_default=JoinRequestStatus.PENDING.value,
    )
    user_id: Mapped[str | None] = mapped_column(
        postgresql.UUID(as_uuid=False),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    school: Mapped[School] = relationship(School, back_populates="join_requests")
