# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

This module provides dependency functions for FastAPI endpoints.
Dependencies are used to:
- Get database sessions
- Get the shared image upload client
- Get service instances

Example:
    @router.get("/schools")
    async def list_schools(
        service: SchoolService = Depends(get_school_service),
    ):
        ...
"""

import logging
from typing import Annotated, AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.core.config import get_settings
from schoolhub.domains.class_.service import ClassService
from schoolhub.domains.school.service import SchoolService
from schoolhub.infrastructure.database.connection import (
    close_database,
    get_session,
    init_database,
)
from schoolhub.services.upload import UploadService
from schoolhub.utils.codes import CodeHasher

logger = logging.getLogger(__name__)

# Upload client singleton, shares one HTTP connection pool
_upload_service: UploadService | None = None


async def init_db() -> None:
    """Initialize the database connection pool and the upload client."""
    global _upload_service
    settings = get_settings()

    await init_database(settings)
    _upload_service = UploadService(settings.upload)


async def close_db() -> None:
    """Close the upload client and the database connection pool."""
    global _upload_service

    if _upload_service is not None:
        await _upload_service.close()
        _upload_service = None

    await close_database()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get a database session for the current request.

    Yields:
        AsyncSession bound to the application database.
    """
    async with get_session() as session:
        yield session


def get_upload_service() -> UploadService:
    """Get the shared upload client, creating it on first use."""
    global _upload_service

    if _upload_service is None:
        _upload_service = UploadService(get_settings().upload)
    return _upload_service


def get_school_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    uploads: Annotated[UploadService, Depends(get_upload_service)],
) -> SchoolService:
    """Get a school service bound to the request session."""
    codes = get_settings().codes
    return SchoolService(
        db=db,
        upload_service=uploads,
        code_hasher=CodeHasher(rounds=codes.hash_rounds),
        code_length=codes.length,
    )


def get_class_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    uploads: Annotated[UploadService, Depends(get_upload_service)],
) -> ClassService:
    """Get a class service bound to the request session."""
    return ClassService(
        db=db,
        upload_service=uploads,
        code_length=get_settings().codes.length,
    )


SchoolServiceDep = Annotated[SchoolService, Depends(get_school_service)]
ClassServiceDep = Annotated[ClassService, Depends(get_class_service)]
