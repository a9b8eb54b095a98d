# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy ORM models.

Importing this package registers every table on ``Base.metadata``.
"""

from schoolhub.infrastructure.database.models.base import (
    Base,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
)
from schoolhub.infrastructure.database.models.class_ import (
    Class,
    ClassMember,
    CourseContentModule,
)
from schoolhub.infrastructure.database.models.school import (
    INVITATION_CODE_COLUMNS,
    School,
    SchoolJoinRequest,
)
from schoolhub.infrastructure.database.models.user import (
    SchoolStaff,
    Student,
    Teacher,
    User,
)

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    # Users
    "User",
    "Teacher",
    "SchoolStaff",
    "Student",
    # Schools
    "School",
    "SchoolJoinRequest",
    "INVITATION_CODE_COLUMNS",
    # Classes
    "Class",
    "ClassMember",
    "CourseContentModule",
]
