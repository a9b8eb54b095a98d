# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pydantic request/response schemas and shared enumerations."""

from schoolhub.models.class_ import (
    ClassCreateRequest,
    ClassDetailResponse,
    ClassListItem,
    ClassResponse,
    ClassSummary,
    ClassUpdateRequest,
)
from schoolhub.models.common import ErrorResponse, MessageResponse
from schoolhub.models.enums import (
    ClassType,
    JoinRequestRole,
    JoinRequestStatus,
    ModuleType,
    SchoolType,
    UserRole,
)
from schoolhub.models.school import (
    AcademicStructureResult,
    InvitationCodeResponse,
    JoinRequestsResult,
    SchoolAcademicRequest,
    SchoolAdministrationRequest,
    SchoolCreateRequest,
    SchoolDetailResponse,
    SchoolResponse,
    SchoolUpdateRequest,
)

__all__ = [
    # Enums
    "UserRole",
    "SchoolType",
    "ClassType",
    "ModuleType",
    "JoinRequestRole",
    "JoinRequestStatus",
    # Common
    "ErrorResponse",
    "MessageResponse",
    # Schools
    "SchoolCreateRequest",
    "SchoolUpdateRequest",
    "SchoolResponse",
    "SchoolDetailResponse",
    "SchoolAcademicRequest",
    "AcademicStructureResult",
    "SchoolAdministrationRequest",
    "JoinRequestsResult",
    "InvitationCodeResponse",
    # Classes
    "ClassCreateRequest",
    "ClassUpdateRequest",
    "ClassResponse",
    "ClassListItem",
    "ClassDetailResponse",
    "ClassSummary",
]
