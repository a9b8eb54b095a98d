# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Class request and response schemas."""

from datetime import datetime
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializerFunctionWrapHandler,
    model_serializer,
)

from schoolhub.models.common import TeacherBrief, UserBrief
from schoolhub.models.enums import ClassType


class ClassCreateRequest(BaseModel):
    """Request to create a class.

    At least one of ``school_id``, ``creator_id`` or ``class_teacher_id``
    must be given. ``image`` may be a URL or a base64 image data URI.
    """

    name: str = Field(min_length=1, max_length=200)
    username: str | None = Field(default=None, min_length=3, max_length=100)
    school_id: str | None = None
    creator_id: str | None = None
    class_teacher_id: str | None = None
    image: str | None = None
    description: str | None = None
    class_type: ClassType | None = None


class ClassUpdateRequest(BaseModel):
    """Partial class update.

    Fields left out are not touched. ``image`` set to null or an empty
    string removes the current image; ``class_type`` set to null is ignored.
    """

    name: str | None = Field(default=None, min_length=1, max_length=200)
    username: str | None = Field(default=None, min_length=3, max_length=100)
    code: str | None = Field(default=None, min_length=1, max_length=32)
    school_id: str | None = None
    creator_id: str | None = None
    class_teacher_id: str | None = None
    image: str | None = None
    description: str | None = None
    class_type: ClassType | None = None


class ClassCodeVisibilityMixin(BaseModel):
    """Drops ``class_code`` from the serialized output when it is hidden."""

    class_code: str | None = None

    @model_serializer(mode="wrap")
    def _hide_class_code(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = handler(self)
        if self.class_code is None:
            data.pop("class_code", None)
        return data


class ClassResponse(ClassCodeVisibilityMixin):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    username: str
    class_type: ClassType
    class_image: str | None = None
    description: str | None = None
    school_id: str | None = None
    creator_id: str | None = None
    primary_teacher_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class SchoolBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    logo: str | None = None


class ClassSchoolDetail(SchoolBrief):
    username: str
    website_url: str | None = None
    contact: dict[str, Any] | None = None


class ClassListItem(ClassResponse):
    """Class with its school and primary teacher, as listed by find-all."""

    school: SchoolBrief | None = None
    primary_teacher: TeacherBrief | None = None


class ModuleSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    order_in_class: int | None = None


class ClassMemberResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    role: str
    user: UserBrief | None = None
    teacher_role: TeacherBrief | None = None


class ClassDetailResponse(ClassResponse):
    """Class with modules, members, school and primary teacher."""

    modules: list[ModuleSummary] = []
    members: list[ClassMemberResponse] = []
    school: ClassSchoolDetail | None = None
    primary_teacher: TeacherBrief | None = None


class ClassTeacherBrief(BaseModel):
    full_name: str
    image: str | None = None


class ClassSummary(BaseModel):
    """Lightweight class listing for a school."""

    id: str
    name: str
    class_image: str | None = None
    class_type: ClassType
    member_count: int = 0
    primary_teacher: ClassTeacherBrief | None = None
