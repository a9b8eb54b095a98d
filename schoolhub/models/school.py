# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""School request and response schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from schoolhub.models.enums import (
    JoinRequestRole,
    JoinRequestStatus,
    SchoolType,
)


class SchoolCreateRequest(BaseModel):
    """Request to create a school.

    A missing or already taken username is replaced by a generated one.
    ``logo`` may be a URL or a base64 image data URI.
    """

    name: str = Field(min_length=1, max_length=200)
    creator_id: str = Field(min_length=1)
    username: str | None = Field(default=None, min_length=3, max_length=100)
    logo: str | None = None
    description: str | None = None
    school_type: SchoolType | None = None
    website_url: str | None = Field(default=None, max_length=500)
    contact: dict[str, Any] | None = None


class SchoolUpdateRequest(BaseModel):
    """Partial school update. Only provided fields are written.

    ``logo`` accepts a base64 data URI (uploaded), an http(s) URL (stored
    as is) or an empty string (clears the logo).
    """

    name: str | None = Field(default=None, min_length=1, max_length=200)
    username: str | None = Field(default=None, min_length=3, max_length=100)
    logo: str | None = None
    description: str | None = None
    school_type: SchoolType | None = None
    website_url: str | None = Field(default=None, max_length=500)
    contact: dict[str, Any] | None = None


class SchoolResponse(BaseModel):
    """School as returned to clients. Invitation code hashes are never included."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    username: str
    creator_id: str | None = None
    logo: str | None = None
    description: str | None = None
    school_type: SchoolType | None = None
    website_url: str | None = None
    contact: dict[str, Any] | None = None
    academic_profile: dict[str, Any] | None = None
    total_classes: int | None = 0
    total_modules: int | None = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


class SchoolStaffSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    staff_full_name: str | None = None
    staff_image: str | None = None
    staff_email: str | None = None


class SchoolTeacherSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    teacher_bio: str | None = None
    teacher_email: str | None = None
    teacher_image: str | None = None


class SchoolStudentSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    school_id: str
    created_at: datetime | None = None


class JoinRequestResponse(BaseModel):
    """A request to join a school in a given role."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    school_id: str
    requested_role: JoinRequestRole
    requester_name: str | None = None
    requester_email: str | None = None
    requester_phone: str | None = None
    status: JoinRequestStatus
    user_id: str | None = None
    created_at: datetime | None = None


class SchoolDetailResponse(SchoolResponse):
    """School with its members and pending join requests."""

    staff_members: list[SchoolStaffSummary] = []
    teachers: list[SchoolTeacherSummary] = []
    students: list[SchoolStudentSummary] = []
    join_requests: list[JoinRequestResponse] = []


class SchoolAcademicRequest(BaseModel):
    """Curriculum selections used to generate a school's classes and modules.

    A track is generated only when its main subject list is non-empty:
    primary subjects, O-level core subjects, A-level combinations or TVET
    specializations.
    """

    school_id: str = Field(min_length=1)
    default_grading_scale_description: str | None = None

    primary_subjects_offered: list[str] | None = None
    primary_pass_mark: float | None = Field(default=None, ge=0, le=100)

    o_level_core_subjects: list[str] | None = None
    o_level_option_subjects: list[str] | None = None
    o_level_examination_types: list[str] | None = None
    o_level_assessment: list[str] | None = None

    a_level_subject_combination: list[str] | None = None
    a_level_option_subjects: list[str] | None = None
    a_level_pass_mark: float | None = Field(default=None, ge=0, le=100)

    tvet_specialization: list[str] | None = None
    tvet_option_subjects: list[str] | None = None


class AcademicStructureResult(BaseModel):
    total_classes: int
    total_modules: int


class AdministratorContact(BaseModel):
    """Additional administrator to invite. Entries without email are skipped."""

    name: str | None = None
    email: EmailStr | None = None
    phone: str | None = None
    role: JoinRequestRole = JoinRequestRole.STAFF


class SchoolAdministrationRequest(BaseModel):
    """Administration contacts to invite to a school."""

    school_id: str = Field(min_length=1)
    headmaster_name: str | None = None
    headmaster_email: EmailStr | None = None
    headmaster_phone: str | None = None
    director_of_studies: str | None = None
    principal_email: EmailStr | None = None
    principal_phone: str | None = None
    additional_administration: list[AdministratorContact] | None = None


class JoinRequestsResult(BaseModel):
    attempted: int
    created: int
    message: str


class InvitationCodeResponse(BaseModel):
    """A freshly generated invitation code. The plain code is shown only once."""

    role: JoinRequestRole
    code: str


class InvitationCodeVerifyRequest(BaseModel):
    role: JoinRequestRole
    code: str = Field(min_length=1)


class InvitationCodeVerifyResponse(BaseModel):
    valid: bool
