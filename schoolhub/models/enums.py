# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enumerations shared by the ORM models and the API schemas.

Values are stored as plain strings in the database.
"""

from enum import Enum


class UserRole(str, Enum):
    """Platform-level role of a user account."""

    STUDENT = "STUDENT"
    TEACHER = "TEACHER"
    STAFF = "STAFF"
    PARENT = "PARENT"
    SCHOOL_ADMIN = "SCHOOL_ADMIN"
    ADMIN = "ADMIN"


class SchoolType(str, Enum):
    PRIMARY = "PRIMARY"
    SECONDARY = "SECONDARY"
    TVET = "TVET"
    UNIVERSITY = "UNIVERSITY"
    OTHER = "OTHER"


class ClassType(str, Enum):
    """Kind of class.

    PRIVATE_TUTORING classes never expose their join code.
    """

    MAIN_SCHOOL_CLASS = "MAIN_SCHOOL_CLASS"
    TECHNICAL_SKILL_CLASS = "TECHNICAL_SKILL_CLASS"
    PRIVATE_TUTORING = "PRIVATE_TUTORING"
    OTHER = "OTHER"


class ModuleType(str, Enum):
    CORE_CONTENT = "CORE_CONTENT"
    SUPPLEMENTARY = "SUPPLEMENTARY"


class JoinRequestRole(str, Enum):
    """Role requested when asking to join a school."""

    STUDENT = "STUDENT"
    TEACHER = "TEACHER"
    STAFF = "STAFF"
    PARENT = "PARENT"


class JoinRequestStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
