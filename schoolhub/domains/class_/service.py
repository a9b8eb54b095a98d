# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Class service for managing class operations.

This module provides the ClassService class for:
- Class CRUD operations
- Connecting classes to a school, a creator and a primary teacher
- Class image management
- Hiding the join code of private tutoring classes
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from schoolhub.domains.errors import ServiceError, validate_payload
from schoolhub.infrastructure.database.integrity import unique_violation_target
from schoolhub.infrastructure.database.models import (
    Class,
    ClassMember,
    School,
    Teacher,
    User,
)
from schoolhub.models.class_ import (
    ClassCreateRequest,
    ClassDetailResponse,
    ClassListItem,
    ClassResponse,
    ClassSummary,
    ClassTeacherBrief,
    ClassUpdateRequest,
)
from schoolhub.models.common import MessageResponse
from schoolhub.models.enums import ClassType, UserRole
from schoolhub.services.upload import UploadError, UploadService
from schoolhub.utils.codes import generate_code, generate_username, is_base64_image

logger = logging.getLogger(__name__)

CLASS_IMAGE_FOLDER = "class-images"
CLASS_CREATOR_ROLES = {
    UserRole.TEACHER.value,
    UserRole.SCHOOL_ADMIN.value,
    UserRole.ADMIN.value,
}
# Update request field -> Class column
UPDATABLE_FIELDS = {
    "school_id": "school_id",
    "creator_id": "creator_id",
    "code": "class_code",
    "name": "name",
    "username": "username",
    "description": "description",
    "class_type": "class_type",
}

ResponseT = TypeVar("ResponseT", bound=ClassResponse)


class ClassServiceError(ServiceError):
    """Base exception for class service errors."""

    status_code = 400


class ClassValidationError(ClassServiceError):
    """Raised when class input is invalid."""

    status_code = 400


class ClassNotFoundError(ClassServiceError):
    """Raised when a class, or an entity it links to, is not found."""

    status_code = 404


class ClassConflictError(ClassServiceError):
    """Raised when class username or code already exists."""

    status_code = 400


class ClassPermissionError(ClassServiceError):
    """Raised when a user may not create classes."""

    status_code = 400


def hides_class_code(class_: Class) -> bool:
    """Private tutoring classes never expose their join code."""
    return class_.class_type == ClassType.PRIVATE_TUTORING.value


class ClassService:
    """Service for managing classes.

    Attributes:
        db: Async database session.
        uploads: Image upload service used for class images.
    """

    def __init__(
        self,
        db: AsyncSession,
        upload_service: UploadService,
        code_length: int = 8,
    ) -> None:
        """Initialize class service.

        Args:
            db: Async database session.
            upload_service: Image upload service.
            code_length: Length of generated class codes.
        """
        self.db = db
        self.uploads = upload_service
        self.code_length = code_length

    async def create(self, payload: ClassCreateRequest | dict[str, Any]) -> ClassResponse:
        """Create a new class.

        Args:
            payload: Class creation data.

        Returns:
            Created class, without its class code.

        Raises:
            ClassValidationError: If the payload is invalid or links nothing.
            ClassNotFoundError: If a linked school, user or teacher is missing.
            ClassPermissionError: If the creator may not create classes.
            ClassConflictError: If the username or generated code is taken.
            ClassServiceError: If the class could not be created.
        """
        request = validate_payload(
            ClassCreateRequest, payload, ClassValidationError, "Invalid class data provided"
        )

        if not request.school_id and not request.creator_id and not request.class_teacher_id:
            raise ClassValidationError("Invalid class creation - missing required connections")

        try:
            if request.school_id:
                school = await self._get_school(request.school_id)
                if not school:
                    raise ClassNotFoundError(f'School with ID "{request.school_id}" not found')

            if request.creator_id:
                creator = await self._get_user(request.creator_id)
                if not creator:
                    raise ClassNotFoundError(f'User with ID "{request.creator_id}" not found')
                if creator.role not in CLASS_CREATOR_ROLES:
                    raise ClassPermissionError("You do not have permission to create a class")

            if request.class_teacher_id:
                teacher = await self._get_teacher(request.class_teacher_id)
                if not teacher:
                    raise ClassNotFoundError(
                        f'Teacher with ID "{request.class_teacher_id}" not found'
                    )

            image = request.image
            if is_base64_image(image):
                try:
                    uploaded = await self.uploads.upload_base64_image(image, CLASS_IMAGE_FOLDER)
                except UploadError as e:
                    logger.error("Class image upload failed: %s", str(e))
                    raise ClassServiceError("Failed to upload class image", str(e)) from e
                image = uploaded.secure_url

            class_ = Class(
                name=request.name,
                username=request.username or generate_username(request.name),
                class_code=generate_code(self.code_length),
                class_type=(request.class_type or ClassType.MAIN_SCHOOL_CLASS).value,
                class_image=image,
                description=request.description,
                school_id=request.school_id,
                creator_id=request.creator_id,
                primary_teacher_id=request.class_teacher_id,
            )

            self.db.add(class_)
            await self.db.commit()
            await self.db.refresh(class_)
        except ClassServiceError:
            raise
        except IntegrityError as e:
            await self.db.rollback()
            target = unique_violation_target(e)
            if target is not None and "username" in target:
                raise ClassConflictError("Class with this username already exists") from e
            if target is not None and "class_code" in target:
                raise ClassConflictError(
                    "Generated class code is not unique, please try again"
                ) from e
            raise ClassServiceError(
                "Something went wrong while creating the class", str(e)
            ) from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise ClassServiceError(
                "Something went wrong while creating the class", str(e)
            ) from e

        logger.info("Class created: %s (username=%s)", class_.id, class_.username)

        return self._to_response(ClassResponse, class_, hide_code=True)

    async def find_all(
        self,
        school_id: str | None = None,
        creator_id: str | None = None,
        class_type: ClassType | str | None = None,
    ) -> list[ClassListItem]:
        """List classes, newest first, with school and primary teacher.

        Raises:
            ClassNotFoundError: If classes could not be retrieved.
        """
        stmt = select(Class).options(
            selectinload(Class.school),
            selectinload(Class.primary_teacher).selectinload(Teacher.user),
        )
        if school_id:
            stmt = stmt.where(Class.school_id == school_id)
        if creator_id:
            stmt = stmt.where(Class.creator_id == creator_id)
        if class_type:
            try:
                class_type = ClassType(class_type)
            except ValueError as e:
                raise ClassValidationError(f"Invalid class type: {class_type}") from e
            stmt = stmt.where(Class.class_type == class_type.value)
        stmt = stmt.order_by(Class.created_at.desc())

        try:
            result = await self.db.execute(stmt)
            classes = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Error retrieving classes: %s", str(e))
            raise ClassNotFoundError(
                "Something went wrong while retrieving classes", str(e)
            ) from e

        return [self._to_response(ClassListItem, class_) for class_ in classes]

    async def find_all_by_school(self, school_id: str) -> list[ClassSummary]:
        """List a school's classes with member counts, newest first.

        Args:
            school_id: School identifier.

        Returns:
            Lightweight class summaries.

        Raises:
            ClassNotFoundError: If classes could not be retrieved.
        """
        member_count = func.count(ClassMember.id).label("member_count")
        stmt = (
            select(Class, member_count)
            .outerjoin(ClassMember, ClassMember.class_id == Class.id)
            .where(Class.school_id == school_id)
            .group_by(Class.id)
            .options(selectinload(Class.primary_teacher).selectinload(Teacher.user))
            .order_by(Class.created_at.desc())
        )

        try:
            result = await self.db.execute(stmt)
            rows = result.all()
        except SQLAlchemyError as e:
            logger.error("Error retrieving classes by school ID: %s", str(e))
            raise ClassNotFoundError(
                "Something went wrong while retrieving classes by school ID", str(e)
            ) from e

        summaries = []
        for class_, count in rows:
            teacher = class_.primary_teacher
            summaries.append(
                ClassSummary(
                    id=class_.id,
                    name=class_.name,
                    class_image=class_.class_image,
                    class_type=class_.class_type,
                    member_count=count or 0,
                    primary_teacher=(
                        ClassTeacherBrief(full_name=teacher.user.full_name, image=teacher.user.image)
                        if teacher is not None and teacher.user is not None
                        else None
                    ),
                )
            )
        return summaries

    async def find_one(
        self,
        id: str | None = None,
        username: str | None = None,
        code: str | None = None,
    ) -> ClassDetailResponse:
        """Get a class with modules, members, school and primary teacher.

        Lookup priority is id, then code, then username.

        Raises:
            ClassValidationError: If no identifier is given.
            ClassNotFoundError: If the class does not exist or cannot be retrieved.
        """
        if not id and not code and not username:
            raise ClassValidationError("You must provide id, code, or username to find a class")

        stmt = select(Class).options(
            selectinload(Class.modules),
            selectinload(Class.members).selectinload(ClassMember.user),
            selectinload(Class.members)
            .selectinload(ClassMember.teacher_role)
            .selectinload(Teacher.user),
            selectinload(Class.school),
            selectinload(Class.primary_teacher).selectinload(Teacher.user),
        )
        if id:
            stmt = stmt.where(Class.id == id)
        elif code:
            stmt = stmt.where(Class.class_code == code)
        else:
            stmt = stmt.where(Class.username == username)

        try:
            result = await self.db.execute(stmt)
            class_ = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Error retrieving class: %s", str(e))
            raise ClassNotFoundError(
                "Something went wrong while retrieving class", str(e)
            ) from e

        if not class_:
            raise ClassNotFoundError(f"Class not found with identifier: {id or code or username}")

        return self._to_response(ClassDetailResponse, class_)

    async def update(
        self,
        class_id: str,
        payload: ClassUpdateRequest | dict[str, Any],
    ) -> ClassResponse:
        """Update a class.

        Lookups run before the image host is contacted. A replaced or
        cleared image is deleted only once the new row is committed.

        Args:
            class_id: Class identifier.
            payload: Fields to change.

        Returns:
            Updated class.

        Raises:
            ClassValidationError: If the payload is invalid.
            ClassNotFoundError: If the class or the new primary teacher is missing.
            ClassConflictError: If the new username is taken.
            ClassServiceError: If the image upload or the update fails.
        """
        request = validate_payload(
            ClassUpdateRequest, payload, ClassValidationError, "Invalid class update data provided"
        )

        changes: dict[str, Any] = {}
        uploaded_image: str | None = None
        stale_image: str | None = None

        try:
            class_ = await self._get_by_id(class_id)
            if not class_:
                raise ClassNotFoundError(f'Class with ID "{class_id}" not found')

            if request.class_teacher_id:
                teacher = await self._get_teacher(request.class_teacher_id)
                if not teacher:
                    raise ClassNotFoundError(
                        f'Teacher with ID "{request.class_teacher_id}" not found'
                    )
                changes["primary_teacher_id"] = teacher.id

            for field, column in UPDATABLE_FIELDS.items():
                value = getattr(request, field)
                if value is not None:
                    changes[column] = value.value if isinstance(value, ClassType) else value

            if "image" in request.model_fields_set:
                if is_base64_image(request.image):
                    try:
                        uploaded = await self.uploads.upload_base64_image(
                            request.image, CLASS_IMAGE_FOLDER
                        )
                    except UploadError as e:
                        logger.error("Class image upload for update failed: %s", str(e))
                        raise ClassServiceError(
                            "Failed to upload updated class image", str(e)
                        ) from e
                    uploaded_image = uploaded.secure_url
                    changes["class_image"] = uploaded_image
                    stale_image = class_.class_image
                elif not request.image:
                    changes["class_image"] = None
                    stale_image = class_.class_image
                else:
                    changes["class_image"] = request.image

            if changes:
                for column, value in changes.items():
                    setattr(class_, column, value)
                await self.db.commit()
                await self.db.refresh(class_)
        except ClassServiceError:
            raise
        except IntegrityError as e:
            await self.db.rollback()
            await self._discard_image(uploaded_image)
            target = unique_violation_target(e)
            if target is not None and "username" in target:
                raise ClassConflictError("Class with this username already exists") from e
            raise ClassServiceError(
                f'Something went wrong while updating class with ID "{class_id}"', str(e)
            ) from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            await self._discard_image(uploaded_image)
            logger.error('Error updating class with ID "%s": %s', class_id, str(e))
            raise ClassServiceError(
                f'Something went wrong while updating class with ID "{class_id}"', str(e)
            ) from e

        await self._discard_image(stale_image)

        if changes:
            logger.info("Class updated: %s (%s)", class_id, ", ".join(sorted(changes)))

        return self._to_response(ClassResponse, class_)

    async def remove(self, class_id: str) -> MessageResponse:
        """Delete a class, then its stored image.

        Raises:
            ClassNotFoundError: If the class does not exist.
            ClassServiceError: If the class could not be removed.
        """
        try:
            class_ = await self._get_by_id(class_id)
            if not class_:
                raise ClassNotFoundError(f'Class with ID "{class_id}" not found')

            image = class_.class_image
            await self.db.delete(class_)
            await self.db.commit()
        except ClassServiceError:
            raise
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error('Error removing class with ID "%s": %s', class_id, str(e))
            raise ClassServiceError(
                f'Something went wrong while removing class with ID "{class_id}"', str(e)
            ) from e

        await self._discard_image(image)

        logger.info("Class deleted: %s", class_id)

        return MessageResponse(message=f'Class with ID "{class_id}" has been deleted successfully')

    # =========================================================================
    # Private helpers
    # =========================================================================

    @staticmethod
    def _to_response(
        response_model: type[ResponseT],
        class_: Class,
        hide_code: bool = False,
    ) -> ResponseT:
        response = response_model.model_validate(class_)
        if hide_code or hides_class_code(class_):
            response = response.model_copy(update={"class_code": None})
        return response

    async def _get_by_id(self, class_id: str) -> Class | None:
        result = await self.db.execute(select(Class).where(Class.id == class_id))
        return result.scalar_one_or_none()

    async def _get_school(self, school_id: str) -> School | None:
        result = await self.db.execute(select(School).where(School.id == school_id))
        return result.scalar_one_or_none()

    async def _get_user(self, user_id: str) -> User | None:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def _get_teacher(self, teacher_id: str) -> Teacher | None:
        result = await self.db.execute(select(Teacher).where(Teacher.id == teacher_id))
        return result.scalar_one_or_none()

    async def _discard_image(self, url: str | None) -> None:
        if not url:
            return
        try:
            await self.uploads.delete_image(url)
        except UploadError as e:
            logger.warning("Could not delete class image %s: %s", url, str(e))
