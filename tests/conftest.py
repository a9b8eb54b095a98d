# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across unit and API tests:
- A mocked async database session with scripted ``execute`` results
- A mocked image upload service
- Sample ORM entities
"""

from typing import Any
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from schoolhub.infrastructure.database.models import School, Teacher, User
from schoolhub.services.upload import UploadedImage, UploadService


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (requires services)"
    )


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def mock_db() -> AsyncMock:
    """Create mock database session.

    ``refresh`` assigns an id to entities that have none, as the database
    would on insert.
    """

    async def refresh(entity: Any) -> None:
        if getattr(entity, "id", None) is None:
            entity.id = str(uuid4())

    db = AsyncMock()
    db.add = MagicMock()
    db.add_all = MagicMock()
    db.delete = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.refresh = AsyncMock(side_effect=refresh)
    db.execute = AsyncMock()
    return db


@pytest.fixture
def mock_uploads() -> AsyncMock:
    """Create mock upload service returning a fixed delivery URL."""
    uploads = AsyncMock(spec=UploadService)
    uploads.upload_base64_image.return_value = UploadedImage(
        secure_url="https://res.cloudinary.com/schoolhub/image/upload/v1/logos/abc.png",
        public_id="logos/abc",
    )
    uploads.delete_image.return_value = True
    return uploads


# =============================================================================
# Sample Entities
# =============================================================================


@pytest.fixture
def base64_image() -> str:
    """Provide a small inline image data URI."""
    return "data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="


@pytest.fixture
def school_admin() -> User:
    """Provide a user allowed to create schools."""
    return User(
        id=str(uuid4()),
        full_name="Alice Uwase",
        email="alice@greenhills.rw",
        role="SCHOOL_ADMIN",
    )


@pytest.fixture
def student_user() -> User:
    """Provide a user without school or class creation rights."""
    return User(
        id=str(uuid4()),
        full_name="Eric Mugisha",
        email="eric@greenhills.rw",
        role="STUDENT",
    )


@pytest.fixture
def sample_school(school_admin: User) -> School:
    """Provide a persisted-looking school."""
    return School(
        id=str(uuid4()),
        name="Green Hills Academy",
        username="greenhillsacademy-a1b2c3",
        creator_id=school_admin.id,
        logo=None,
        description="Day and boarding school",
        school_type="SECONDARY",
        total_classes=0,
        total_modules=0,
    )


@pytest.fixture
def sample_teacher(sample_school: School) -> Teacher:
    """Provide a teacher with a user account."""
    user = User(
        id=str(uuid4()),
        full_name="Jean Habimana",
        email="jean@greenhills.rw",
        image="https://res.cloudinary.com/schoolhub/image/upload/v1/avatars/jean.png",
        role="TEACHER",
    )
    return Teacher(
        id=str(uuid4()),
        user_id=user.id,
        user=user,
        school_id=sample_school.id,
        teacher_bio="Chemistry teacher",
        teacher_email="jean@greenhills.rw",
    )
