# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Class management API endpoints.

This module provides endpoints for class management:
- POST / - Create a new class
- GET / - List classes with filtering
- GET /school/{school_id} - Lightweight class listing for a school
- GET /find - Get class details by id, code or username
- PATCH /{class_id} - Update class
- DELETE /{class_id} - Delete class

Example:
    POST /api/v1/classes
    {
        "name": "Chemistry Revision",
        "creator_id": "6f1c...",
        "class_type": "PRIVATE_TUTORING"
    }
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Query, status

from schoolhub.api.dependencies import ClassServiceDep
from schoolhub.models.class_ import (
    ClassDetailResponse,
    ClassListItem,
    ClassResponse,
    ClassSummary,
)
from schoolhub.models.common import MessageResponse
from schoolhub.models.enums import ClassType

router = APIRouter()

JsonBody = Annotated[dict[str, Any], Body()]


@router.post(
    "",
    response_model=ClassResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create class",
)
async def create_class(data: JsonBody, service: ClassServiceDep) -> ClassResponse:
    """Create a new class. The class code is not returned."""
    return await service.create(data)


@router.get(
    "",
    response_model=list[ClassListItem],
    summary="List classes",
)
async def list_classes(
    service: ClassServiceDep,
    school_id: str | None = Query(None, description="Filter by school"),
    creator_id: str | None = Query(None, description="Filter by creator"),
    class_type: ClassType | None = Query(None, description="Filter by class type"),
) -> list[ClassListItem]:
    """List classes with school and primary teacher, newest first."""
    return await service.find_all(
        school_id=school_id,
        creator_id=creator_id,
        class_type=class_type,
    )


@router.get(
    "/school/{school_id}",
    response_model=list[ClassSummary],
    summary="List school classes",
)
async def list_school_classes(school_id: str, service: ClassServiceDep) -> list[ClassSummary]:
    """List a school's classes with member counts."""
    return await service.find_all_by_school(school_id)


@router.get(
    "/find",
    response_model=ClassDetailResponse,
    summary="Get class",
)
async def get_class(
    service: ClassServiceDep,
    id: str | None = Query(None, description="Class ID"),
    username: str | None = Query(None, description="Class username"),
    code: str | None = Query(None, description="Class join code"),
) -> ClassDetailResponse:
    """Get a class with modules, members, school and primary teacher."""
    return await service.find_one(id=id, username=username, code=code)


@router.patch(
    "/{class_id}",
    response_model=ClassResponse,
    summary="Update class",
)
async def update_class(class_id: str, data: JsonBody, service: ClassServiceDep) -> ClassResponse:
    """Update a class. Only provided fields are changed."""
    return await service.update(class_id, data)


@router.delete(
    "/{class_id}",
    response_model=MessageResponse,
    summary="Delete class",
)
async def delete_class(class_id: str, service: ClassServiceDep) -> MessageResponse:
    """Delete a class and its image."""
    return await service.remove(class_id)
