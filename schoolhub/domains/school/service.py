# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""School service for school management.

This module provides the SchoolService that handles:
- School creation, listing, lookup and updates
- Hashed invitation codes per role
- Academic structure generation (classes and course modules)
- Administration join requests

Example:
    >>> school_service = SchoolService(db_session, upload_service)
    >>> school = await school_service.create({"name": "Green Hills", "creator_id": uid})
    >>> result = await school_service.setup_academic_structure(academic_payload)
"""

import logging
from datetime import date
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from schoolhub.domains.errors import ServiceError, validate_payload
from schoolhub.domains.school.academic import (
    academic_year_label,
    build_academic_profile,
    plan_academic_structure,
)
from schoolhub.infrastructure.database.integrity import unique_violation_target
from schoolhub.infrastructure.database.models import (
    INVITATION_CODE_COLUMNS,
    Class,
    CourseContentModule,
    School,
    SchoolJoinRequest,
    User,
)
from schoolhub.models.enums import (
    ClassType,
    JoinRequestRole,
    JoinRequestStatus,
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
from schoolhub.services.upload import UploadError, UploadService
from schoolhub.utils.codes import (
    CodeHasher,
    generate_code,
    generate_username,
    is_base64_image,
)

logger = logging.getLogger(__name__)

LOGO_FOLDER = "logos"
SCHOOL_CREATOR_ROLES = {UserRole.SCHOOL_ADMIN.value, UserRole.ADMIN.value}
UPDATABLE_FIELDS = ("name", "description", "school_type", "website_url", "contact")


class SchoolServiceError(ServiceError):
    """Base exception for school service errors."""

    status_code = 400


class SchoolValidationError(SchoolServiceError):
    """Raised when school input is invalid."""

    status_code = 400


class SchoolNotFoundError(SchoolServiceError):
    """Raised when a school is not found or cannot be retrieved."""

    status_code = 404


class SchoolConflictError(SchoolServiceError):
    """Raised when a unique value (username, code) is already taken."""

    status_code = 400


class SchoolPermissionError(SchoolServiceError):
    """Raised when a user may not perform a school operation."""

    status_code = 400


class SchoolInternalError(SchoolServiceError):
    """Raised when a school operation fails unexpectedly."""

    status_code = 500


def _enum_value(value: Any) -> Any:
    return value.value if isinstance(value, SchoolType) else value


class SchoolService:
    """Service for managing schools.

    Attributes:
        _db: Async database session.
        _uploads: Image upload service used for logos.
        _hasher: Hasher for invitation codes.
        _code_length: Length of generated codes.

    Example:
        >>> service = SchoolService(db, uploads)
        >>> school = await service.find_one(username="greenhills-4k2j9x")
    """

    def __init__(
        self,
        db: AsyncSession,
        upload_service: UploadService,
        code_hasher: CodeHasher | None = None,
        code_length: int = 8,
    ) -> None:
        """Initialize the school service.

        Args:
            db: Async database session.
            upload_service: Image upload service.
            code_hasher: Hasher for invitation codes.
            code_length: Length of generated invitation, class and module codes.
        """
        self._db = db
        self._uploads = upload_service
        self._hasher = code_hasher or CodeHasher()
        self._code_length = code_length

    async def create(self, payload: SchoolCreateRequest | dict[str, Any]) -> SchoolResponse:
        """Create a new school.

        The creator must be a school admin or platform admin. A requested
        username that is missing or already taken is replaced by a generated
        one. Four invitation codes are generated and only their hashes stored.

        Args:
            payload: School creation data.

        Returns:
            Created school, without invitation code hashes.

        Raises:
            SchoolValidationError: If the payload is invalid.
            SchoolPermissionError: If the creator may not create schools.
            SchoolConflictError: If the username or a code is not unique.
            SchoolServiceError: If the school could not be created.
        """
        request = validate_payload(
            SchoolCreateRequest, payload, SchoolValidationError, "Invalid school data provided"
        )

        try:
            creator = await self._get_user(request.creator_id)
            taken = await self._get_by_username(request.username) if request.username else None

            if not creator or creator.role not in SCHOOL_CREATOR_ROLES:
                raise SchoolPermissionError("You cannot create a school")

            username = request.username
            if taken or not username:
                username = generate_username(request.name)

            logo = request.logo
            if is_base64_image(logo):
                uploaded = await self._uploads.upload_base64_image(logo, LOGO_FOLDER)
                logo = uploaded.secure_url

            school = School(
                name=request.name,
                username=username,
                creator_id=request.creator_id,
                logo=logo,
                description=request.description,
                school_type=_enum_value(request.school_type),
                website_url=request.website_url,
                contact=request.contact,
                total_classes=0,
                total_modules=0,
                **{
                    column: self._hasher.hash(generate_code(self._code_length))
                    for column in INVITATION_CODE_COLUMNS.values()
                },
            )

            self._db.add(school)
            await self._db.commit()
            await self._db.refresh(school)
        except SchoolServiceError:
            raise
        except IntegrityError as e:
            await self._db.rollback()
            target = unique_violation_target(e)
            if target is not None and "username" in target:
                raise SchoolConflictError("School with this username already exists.") from e
            if target is not None and "code" in target:
                raise SchoolConflictError(
                    "Generated school code is not unique, please try again."
                ) from e
            raise SchoolServiceError(
                "Something went wrong while creating the school", str(e)
            ) from e
        except (SQLAlchemyError, UploadError) as e:
            await self._db.rollback()
            raise SchoolServiceError(
                "Something went wrong while creating the school", str(e)
            ) from e

        logger.info("School created: %s (username=%s)", school.id, school.username)

        return SchoolResponse.model_validate(school)

    async def find_all(
        self,
        school_type: SchoolType | str | None = None,
        creator_id: str | None = None,
    ) -> list[SchoolResponse]:
        """List schools, newest first.

        Args:
            school_type: Only schools of this type.
            creator_id: Only schools created by this user.

        Returns:
            Schools without invitation code hashes.

        Raises:
            SchoolValidationError: If ``school_type`` is not a known type.
            SchoolNotFoundError: If schools could not be retrieved.
        """
        stmt = select(School)
        if school_type:
            try:
                school_type = SchoolType(school_type)
            except ValueError as e:
                raise SchoolValidationError(f"Invalid school type: {school_type}") from e
            stmt = stmt.where(School.school_type == school_type.value)
        if creator_id:
            stmt = stmt.where(School.creator_id == creator_id)
        stmt = stmt.order_by(School.created_at.desc())

        try:
            result = await self._db.execute(stmt)
            schools = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Error retrieving schools: %s", str(e))
            raise SchoolNotFoundError(
                "Something went wrong while retrieving schools", str(e)
            ) from e

        return [SchoolResponse.model_validate(school) for school in schools]

    async def find_one(
        self,
        id: str | None = None,
        username: str | None = None,
    ) -> SchoolDetailResponse:
        """Get a school with its staff, teachers, students and join requests.

        Args:
            id: School identifier. Takes precedence over username.
            username: School username.

        Returns:
            School detail response.

        Raises:
            SchoolValidationError: If neither id nor username is given.
            SchoolNotFoundError: If the school does not exist or cannot be retrieved.
        """
        if not id and not username:
            raise SchoolValidationError("You must provide id or username to find a school")

        stmt = select(School).options(
            selectinload(School.staff_members),
            selectinload(School.teachers),
            selectinload(School.students),
            selectinload(School.join_requests),
        )
        stmt = stmt.where(School.id == id) if id else stmt.where(School.username == username)

        try:
            result = await self._db.execute(stmt)
            school = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Error retrieving school: %s", str(e))
            raise SchoolNotFoundError(
                "Something went wrong while retrieving school", str(e)
            ) from e

        if not school:
            raise SchoolNotFoundError(f"School not found with identifier: {id or username}")

        return SchoolDetailResponse.model_validate(school)

    async def update(
        self,
        school_id: str,
        payload: SchoolUpdateRequest | dict[str, Any],
    ) -> SchoolResponse:
        """Update a school.

        Only fields present in the payload are written. A request that
        changes nothing returns the school untouched.

        Args:
            school_id: School identifier.
            payload: Fields to change.

        Returns:
            Updated school response.

        Raises:
            SchoolValidationError: If the payload is invalid.
            SchoolNotFoundError: If the school does not exist.
            SchoolConflictError: If the new username is taken.
            SchoolServiceError: If the update fails.
        """
        request = validate_payload(
            SchoolUpdateRequest,
            payload,
            SchoolValidationError,
            "Invalid school data provided for update",
        )

        try:
            school = await self._get_by_id(school_id)
            if not school:
                raise SchoolNotFoundError("School not found.")

            changes: dict[str, Any] = {}

            if request.username and request.username != school.username:
                other = await self._get_by_username(request.username)
                if other and other.id != school.id:
                    raise SchoolConflictError(f"Username '{request.username}' is already taken.")
                changes["username"] = request.username

            if request.logo is not None:
                if is_base64_image(request.logo):
                    uploaded = await self._uploads.upload_base64_image(request.logo, LOGO_FOLDER)
                    changes["logo"] = uploaded.secure_url
                elif request.logo.startswith(("http://", "https://")):
                    changes["logo"] = request.logo
                elif request.logo == "":
                    changes["logo"] = None

            for field in UPDATABLE_FIELDS:
                value = getattr(request, field)
                if value is not None:
                    changes[field] = _enum_value(value)

            changes = {
                field: value
                for field, value in changes.items()
                if getattr(school, field) != value
            }
            if not changes:
                logger.debug("No changes to apply for school: %s", school_id)
                return SchoolResponse.model_validate(school)

            for field, value in changes.items():
                setattr(school, field, value)

            await self._db.commit()
            await self._db.refresh(school)
        except SchoolServiceError:
            raise
        except IntegrityError as e:
            await self._db.rollback()
            target = unique_violation_target(e)
            if target is not None and "username" in target:
                raise SchoolConflictError("School with this username already exists.") from e
            raise SchoolServiceError(
                "Something went wrong while updating the school", str(e)
            ) from e
        except (SQLAlchemyError, UploadError) as e:
            await self._db.rollback()
            logger.error("Update school error: %s", str(e))
            raise SchoolServiceError(
                "Something went wrong while updating the school", str(e)
            ) from e

        logger.info("School updated: %s (%s)", school.id, ", ".join(sorted(changes)))

        return SchoolResponse.model_validate(school)

    async def setup_academic_structure(
        self,
        payload: SchoolAcademicRequest | dict[str, Any],
    ) -> AcademicStructureResult:
        """Generate classes and course modules from curriculum selections.

        All classes and their modules are written in a single unit of work
        together with the school's academic profile and totals.

        Args:
            payload: Curriculum selections for the school.

        Returns:
            Number of classes and modules created.

        Raises:
            SchoolValidationError: If the payload is invalid.
            SchoolNotFoundError: If the school does not exist.
            SchoolConflictError: If a generated value collides with an existing one.
            SchoolInternalError: If the structure could not be written.
        """
        request = validate_payload(
            SchoolAcademicRequest,
            payload,
            SchoolValidationError,
            "Invalid school academic data provided",
        )

        try:
            school = await self._get_by_id(request.school_id)
            if not school:
                raise SchoolNotFoundError(f'School with ID "{request.school_id}" not found')

            academic_year = academic_year_label(date.today().year)
            plan = plan_academic_structure(school.name, request, academic_year)

            classes = [
                Class(
                    name=planned.name,
                    username=generate_username(planned.name),
                    class_code=generate_code(self._code_length),
                    class_type=ClassType.MAIN_SCHOOL_CLASS.value,
                    school_id=school.id,
                    modules=[
                        CourseContentModule(
                            title=module.title,
                            module_code=generate_code(self._code_length),
                            module_type=module.module_type.value,
                            order_in_class=position,
                        )
                        for position, module in enumerate(planned.modules, start=1)
                    ],
                )
                for planned in plan
            ]
            total_classes = len(classes)
            total_modules = sum(len(class_.modules) for class_ in classes)

            self._db.add_all(classes)
            school.academic_profile = build_academic_profile(request)
            school.total_classes = total_classes
            school.total_modules = total_modules

            await self._db.commit()
        except SchoolServiceError:
            raise
        except IntegrityError as e:
            await self._db.rollback()
            target = unique_violation_target(e)
            if target is not None:
                raise SchoolConflictError(
                    f"A unique constraint violation occurred on {target or 'a generated value'}. "
                    "Please try again or check data."
                ) from e
            raise SchoolInternalError(
                "Something went wrong while setting up the school academic structure.", str(e)
            ) from e
        except SQLAlchemyError as e:
            await self._db.rollback()
            logger.error("Error in setup_academic_structure: %s", str(e))
            raise SchoolInternalError(
                "Something went wrong while setting up the school academic structure.", str(e)
            ) from e

        logger.info(
            "Academic structure created for school %s: %d classes, %d modules",
            request.school_id,
            total_classes,
            total_modules,
        )

        return AcademicStructureResult(total_classes=total_classes, total_modules=total_modules)

    async def send_administration_join_requests(
        self,
        payload: SchoolAdministrationRequest | dict[str, Any],
    ) -> JoinRequestsResult:
        """Create pending join requests for a school's administration contacts.

        The headmaster and the director of studies are invited as teachers;
        additional administrators are invited with their own role. Contacts
        without an email are skipped.

        Args:
            payload: Administration contacts.

        Returns:
            Attempted and created request counts.

        Raises:
            SchoolValidationError: If the payload is invalid or has no email.
            SchoolNotFoundError: If the school does not exist.
            SchoolInternalError: If the requests could not be written.
        """
        request = validate_payload(
            SchoolAdministrationRequest,
            payload,
            SchoolValidationError,
            "Invalid school administration data provided",
        )

        try:
            school = await self._get_by_id(request.school_id)
            if not school:
                raise SchoolNotFoundError(f'School with ID "{request.school_id}" not found')

            join_requests: list[SchoolJoinRequest] = []

            if request.headmaster_email:
                join_requests.append(
                    self._join_request(
                        school.id,
                        JoinRequestRole.TEACHER,
                        request.headmaster_name,
                        request.headmaster_email,
                        request.headmaster_phone,
                    )
                )

            if request.principal_email:
                join_requests.append(
                    self._join_request(
                        school.id,
                        JoinRequestRole.TEACHER,
                        request.director_of_studies,
                        request.principal_email,
                        request.principal_phone,
                    )
                )

            for admin in request.additional_administration or []:
                if admin.email:
                    join_requests.append(
                        self._join_request(school.id, admin.role, admin.name, admin.email, admin.phone)
                    )

            if not join_requests:
                raise SchoolValidationError(
                    "No valid administration contact emails provided to send join requests."
                )

            try:
                self._db.add_all(join_requests)
                await self._db.commit()
            except SQLAlchemyError as e:
                await self._db.rollback()
                logger.error("Error during bulk creation of administration join requests: %s", str(e))
                raise SchoolInternalError(
                    "Something went wrong during the bulk creation of administration join requests."
                ) from e
        except SchoolServiceError:
            raise
        except SQLAlchemyError as e:
            logger.error("Unexpected error in send_administration_join_requests: %s", str(e))
            raise SchoolInternalError(
                "An unexpected error occurred while processing administration join requests."
            ) from e

        attempted = len(join_requests)
        logger.info("Created %d administration join requests for school %s", attempted, school.id)

        return JoinRequestsResult(
            attempted=attempted,
            created=attempted,
            message=f"Attempted to create {attempted} administration join requests.",
        )

    async def regenerate_invitation_code(
        self,
        school_id: str,
        role: JoinRequestRole | str,
    ) -> InvitationCodeResponse:
        """Replace a school's invitation code for a role.

        Args:
            school_id: School identifier.
            role: Role the code admits.

        Returns:
            The new plain code. It is not stored and cannot be shown again.

        Raises:
            SchoolValidationError: If the role is unknown.
            SchoolNotFoundError: If the school does not exist.
        """
        role = self._parse_role(role)
        school = await self._get_by_id(school_id)
        if not school:
            raise SchoolNotFoundError(f'School with ID "{school_id}" not found')

        code = generate_code(self._code_length)
        setattr(school, INVITATION_CODE_COLUMNS[role.value], self._hasher.hash(code))
        try:
            await self._db.commit()
        except SQLAlchemyError as e:
            await self._db.rollback()
            raise SchoolInternalError(
                "Something went wrong while regenerating the invitation code", str(e)
            ) from e

        logger.info("Invitation code regenerated: school=%s, role=%s", school_id, role.value)

        return InvitationCodeResponse(role=role, code=code)

    async def verify_invitation_code(
        self,
        school_id: str,
        role: JoinRequestRole | str,
        code: str,
    ) -> bool:
        """Check a plain invitation code against the stored hash for a role.

        Raises:
            SchoolValidationError: If the role is unknown.
            SchoolNotFoundError: If the school does not exist.
        """
        role = self._parse_role(role)
        school = await self._get_by_id(school_id)
        if not school:
            raise SchoolNotFoundError(f'School with ID "{school_id}" not found')

        code_hash = getattr(school, INVITATION_CODE_COLUMNS[role.value])
        return self._hasher.verify(code, code_hash)

    # =========================================================================
    # Private helpers
    # =========================================================================

    @staticmethod
    def _parse_role(role: JoinRequestRole | str) -> JoinRequestRole:
        try:
            return JoinRequestRole(role)
        except ValueError as e:
            raise SchoolValidationError(f"Invalid invitation role: {role}") from e

    @staticmethod
    def _join_request(
        school_id: str,
        role: JoinRequestRole,
        name: str | None,
        email: str,
        phone: str | None,
    ) -> SchoolJoinRequest:
        return SchoolJoinRequest(
            school_id=school_id,
            requested_role=role.value,
            requester_name=name,
            requester_email=email,
            requester_phone=phone,
            status=JoinRequestStatus.PENDING.value,
            user_id=None,
        )

    async def _get_by_id(self, school_id: str) -> School | None:
        """Get school by ID."""
        stmt = select(School).where(School.id == school_id)
        result = await self._db.execute(stmt)
        return result.scalar_one_or_none()

    async def _get_by_username(self, username: str) -> School | None:
        """Get school by username."""
        stmt = select(School).where(School.username == username)
        result = await self._db.execute(stmt)
        return result.scalar_one_or_none()

    async def _get_user(self, user_id: str) -> User | None:
        stmt = select(User).where(User.id == user_id)
        result = await self._db.execute(stmt)
        return result.scalar_one_or_none()
