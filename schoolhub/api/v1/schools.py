# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""School management API endpoints.

This module provides endpoints for school management:
- POST / - Create a new school
- GET / - List schools with filtering
- GET /find - Get school details by id or username
- PATCH /{school_id} - Update school
- POST /academic-structure - Generate classes and modules
- POST /administration-requests - Invite administration contacts
- POST /{school_id}/invitation-codes/{role}/regenerate - New invitation code
- POST /{school_id}/invitation-codes/verify - Check an invitation code

Request bodies are passed to SchoolService unchanged; the service
validates them and raises ServiceError subclasses on failure.

Example:
    POST /api/v1/schools
    {
        "name": "Green Hills Academy",
        "creator_id": "6f1c...",
        "school_type": "SECONDARY"
    }
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Query, status

from schoolhub.api.dependencies import SchoolServiceDep
from schoolhub.models.enums import JoinRequestRole, SchoolType
from schoolhub.models.school import (
    AcademicStructureResult,
    InvitationCodeResponse,
    InvitationCodeVerifyRequest,
    InvitationCodeVerifyResponse,
    JoinRequestsResult,
    SchoolDetailResponse,
    SchoolResponse,
)

router = APIRouter()

JsonBody = Annotated[dict[str, Any], Body()]


@router.post(
    "",
    response_model=SchoolResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create school",
)
async def create_school(data: JsonBody, service: SchoolServiceDep) -> SchoolResponse:
    """Create a new school."""
    return await service.create(data)


@router.get(
    "",
    response_model=list[SchoolResponse],
    summary="List schools",
)
async def list_schools(
    service: SchoolServiceDep,
    school_type: SchoolType | None = Query(None, description="Filter by school type"),
    creator_id: str | None = Query(None, description="Filter by creator"),
) -> list[SchoolResponse]:
    """List schools, newest first."""
    return await service.find_all(school_type=school_type, creator_id=creator_id)


@router.get(
    "/find",
    response_model=SchoolDetailResponse,
    summary="Get school",
)
async def get_school(
    service: SchoolServiceDep,
    id: str | None = Query(None, description="School ID"),
    username: str | None = Query(None, description="School username"),
) -> SchoolDetailResponse:
    """Get a school with its members and join requests."""
    return await service.find_one(id=id, username=username)


@router.patch(
    "/{school_id}",
    response_model=SchoolResponse,
    summary="Update school",
)
async def update_school(
    school_id: str,
    data: JsonBody,
    service: SchoolServiceDep,
) -> SchoolResponse:
    """Update a school. Only provided fields are changed."""
    return await service.update(school_id, data)


@router.post(
    "/academic-structure",
    response_model=AcademicStructureResult,
    status_code=status.HTTP_201_CREATED,
    summary="Set up academic structure",
)
async def setup_academic_structure(
    data: JsonBody,
    service: SchoolServiceDep,
) -> AcademicStructureResult:
    """Generate the school's classes and course modules."""
    return await service.setup_academic_structure(data)


@router.post(
    "/administration-requests",
    response_model=JoinRequestsResult,
    status_code=status.HTTP_201_CREATED,
    summary="Invite administration",
)
async def send_administration_join_requests(
    data: JsonBody,
    service: SchoolServiceDep,
) -> JoinRequestsResult:
    """Create pending join requests for the school's administration."""
    return await service.send_administration_join_requests(data)


@router.post(
    "/{school_id}/invitation-codes/{role}/regenerate",
    response_model=InvitationCodeResponse,
    summary="Regenerate invitation code",
)
async def regenerate_invitation_code(
    school_id: str,
    role: JoinRequestRole,
    service: SchoolServiceDep,
) -> InvitationCodeResponse:
    """Replace the invitation code for a role and return it once."""
    return await service.regenerate_invitation_code(school_id, role)


@router.post(
    "/{school_id}/invitation-codes/verify",
    response_model=InvitationCodeVerifyResponse,
    summary="Verify invitation code",
)
async def verify_invitation_code(
    school_id: str,
    data: InvitationCodeVerifyRequest,
    service: SchoolServiceDep,
) -> InvitationCodeVerifyResponse:
    """Check an invitation code for a role."""
    valid = await service.verify_invitation_code(school_id, data.role, data.code)
    return InvitationCodeVerifyResponse(valid=valid)
