# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for ClassService."""

from unittest.mock import MagicMock, call
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from schoolhub.domains.class_.service import (
    ClassConflictError,
    ClassNotFoundError,
    ClassPermissionError,
    ClassService,
    ClassServiceError,
    ClassValidationError,
)
from schoolhub.infrastructure.database.models import (
    Class,
    ClassMember,
    CourseContentModule,
    User,
)
from schoolhub.services.upload import UploadAPIError


class FakeUniqueViolation(Exception):
    """Driver error carrying a unique violation SQLSTATE."""

    sqlstate = "23505"

    def __init__(self, constraint_name: str | None = None) -> None:
        super().__init__("duplicate key value violates unique constraint")
        self.constraint_name = constraint_name


def create_mock_result(value):
    """Create a mock result with scalar_one_or_none."""
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


@pytest.fixture
def class_service(mock_db, mock_uploads):
    """Create class service with mock database."""
    return ClassService(db=mock_db, upload_service=mock_uploads)


@pytest.fixture
def teacher_user():
    """Create a user allowed to create classes."""
    return User(id=str(uuid4()), full_name="Jean", email="jean@example.com", role="TEACHER")


@pytest.fixture
def sample_class(sample_school):
    """Create a school class."""
    return Class(
        id=str(uuid4()),
        name="S1 GreenHillsAcademy 2025-2026",
        username="s1greenhillsacademy2-x1y2z3",
        class_code="K3Q9ZP2A",
        class_type="MAIN_SCHOOL_CLASS",
        school_id=sample_school.id,
    )


@pytest.fixture
def tutoring_class(teacher_user):
    """Create a private tutoring class."""
    return Class(
        id=str(uuid4()),
        name="Chemistry Revision",
        username="chemistryrevision-q1w2e3",
        class_code="PRIV4TE1",
        class_type="PRIVATE_TUTORING",
        creator_id=teacher_user.id,
        class_image="https://res.cloudinary.com/schoolhub/image/upload/v1/class-images/chem.png",
    )


class TestClassServiceCreate:
    """Tests for class creation."""

    @pytest.mark.asyncio
    async def test_create_requires_a_connection(self, class_service, mock_db):
        """Test that a class must link to a school, creator or teacher."""
        with pytest.raises(ClassValidationError) as exc_info:
            await class_service.create({"name": "Orphan"})

        assert exc_info.value.message == "Invalid class creation - missing required connections"
        mock_db.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_school_class(self, class_service, mock_db, sample_school):
        """Test creating a class in a school."""
        mock_db.execute.side_effect = [create_mock_result(sample_school)]

        response = await class_service.create({"name": "S1 A", "school_id": sample_school.id})

        class_ = mock_db.add.call_args[0][0]
        assert class_.class_type == "MAIN_SCHOOL_CLASS"
        assert len(class_.class_code) == 8
        assert class_.username.startswith("s1a-")
        assert response.school_id == sample_school.id
        assert "class_code" not in response.model_dump()

    @pytest.mark.asyncio
    async def test_create_private_tutoring_class(
        self, class_service, mock_db, mock_uploads, teacher_user, base64_image
    ):
        """Test creating a standalone class with an uploaded image."""
        mock_db.execute.side_effect = [create_mock_result(teacher_user)]

        response = await class_service.create(
            {
                "name": "Chemistry Revision",
                "creator_id": teacher_user.id,
                "class_type": "PRIVATE_TUTORING",
                "image": base64_image,
            }
        )

        mock_uploads.upload_base64_image.assert_awaited_once_with(base64_image, "class-images")
        assert response.class_image == mock_uploads.upload_base64_image.return_value.secure_url
        assert response.class_code is None

    @pytest.mark.asyncio
    async def test_create_school_not_found(self, class_service, mock_db):
        """Test that a linked school must exist."""
        mock_db.execute.side_effect = [create_mock_result(None)]
        school_id = str(uuid4())

        with pytest.raises(ClassNotFoundError) as exc_info:
            await class_service.create({"name": "S1 A", "school_id": school_id})

        assert exc_info.value.message == f'School with ID "{school_id}" not found'
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_create_student_creator_refused(self, class_service, mock_db, student_user):
        """Test that students cannot create classes."""
        mock_db.execute.side_effect = [create_mock_result(student_user)]

        with pytest.raises(ClassPermissionError) as exc_info:
            await class_service.create({"name": "Study Group", "creator_id": student_user.id})

        assert exc_info.value.message == "You do not have permission to create a class"

    @pytest.mark.asyncio
    async def test_create_teacher_not_found(self, class_service, mock_db):
        """Test that a linked teacher must exist."""
        mock_db.execute.side_effect = [create_mock_result(None)]

        with pytest.raises(ClassNotFoundError):
            await class_service.create({"name": "S1 A", "class_teacher_id": str(uuid4())})

    @pytest.mark.asyncio
    async def test_create_image_upload_failure(
        self, class_service, mock_db, mock_uploads, teacher_user, base64_image
    ):
        """Test that upload failures abort creation."""
        mock_db.execute.side_effect = [create_mock_result(teacher_user)]
        mock_uploads.upload_base64_image.side_effect = UploadAPIError("bad image", 400)

        with pytest.raises(ClassServiceError) as exc_info:
            await class_service.create(
                {"name": "Chemistry", "creator_id": teacher_user.id, "image": base64_image}
            )

        assert exc_info.value.message == "Failed to upload class image"
        mock_db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_username_conflict(self, class_service, mock_db, sample_school):
        """Test that a username collision is a conflict."""
        mock_db.execute.side_effect = [create_mock_result(sample_school)]
        mock_db.commit.side_effect = IntegrityError(
            "INSERT", {}, FakeUniqueViolation("uq_classes_username")
        )

        with pytest.raises(ClassConflictError) as exc_info:
            await class_service.create(
                {"name": "S1 A", "username": "s1-a", "school_id": sample_school.id}
            )

        assert exc_info.value.message == "Class with this username already exists"
        mock_db.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_create_class_code_conflict(self, class_service, mock_db, sample_school):
        """Test that a colliding generated class code asks for a retry."""
        mock_db.execute.side_effect = [create_mock_result(sample_school)]
        mock_db.commit.side_effect = IntegrityError(
            "INSERT", {}, FakeUniqueViolation("uq_classes_class_code")
        )

        with pytest.raises(ClassConflictError) as exc_info:
            await class_service.create({"name": "S1 A", "school_id": sample_school.id})

        assert exc_info.value.message == "Generated class code is not unique, please try again"


class TestClassServiceFind:
    """Tests for class lookup."""

    @pytest.mark.asyncio
    async def test_find_all_hides_private_tutoring_codes(
        self, class_service, mock_db, sample_class, tutoring_class
    ):
        """Test that only private tutoring classes hide their code."""
        result = MagicMock()
        result.scalars.return_value.all.return_value = [sample_class, tutoring_class]
        mock_db.execute.return_value = result

        classes = await class_service.find_all()

        assert classes[0].class_code == "K3Q9ZP2A"
        assert classes[1].class_code is None
        assert "class_code" not in classes[1].model_dump()

    @pytest.mark.asyncio
    async def test_find_all_invalid_class_type(self, class_service, mock_db):
        """Test that an unknown class type is refused."""
        with pytest.raises(ClassValidationError):
            await class_service.find_all(class_type="LECTURE_HALL")

        mock_db.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_find_all_by_school(
        self, class_service, mock_db, sample_school, sample_class, sample_teacher
    ):
        """Test the lightweight listing with member counts."""
        sample_class.primary_teacher = sample_teacher
        result = MagicMock()
        result.all.return_value = [(sample_class, 12)]
        mock_db.execute.return_value = result

        summaries = await class_service.find_all_by_school(sample_school.id)

        assert summaries[0].member_count == 12
        assert summaries[0].primary_teacher.full_name == "Jean Habimana"

    @pytest.mark.asyncio
    async def test_find_all_by_school_database_error(self, class_service, mock_db):
        """Test that query failures are retrieval errors."""
        mock_db.execute.side_effect = OperationalError("SELECT", {}, Exception("down"))

        with pytest.raises(ClassNotFoundError) as exc_info:
            await class_service.find_all_by_school(str(uuid4()))

        assert exc_info.value.message == (
            "Something went wrong while retrieving classes by school ID"
        )

    @pytest.mark.asyncio
    async def test_find_one_requires_identifier(self, class_service):
        """Test that an identifier is required."""
        with pytest.raises(ClassValidationError):
            await class_service.find_one()

    @pytest.mark.asyncio
    async def test_find_one_detail(
        self, class_service, mock_db, sample_school, sample_class, sample_teacher, student_user
    ):
        """Test the detail response with modules, members and school."""
        sample_class.school = sample_school
        sample_class.primary_teacher = sample_teacher
        sample_class.modules = [
            CourseContentModule(
                id=str(uuid4()), title="Mathematics", module_code="M4TH0001", order_in_class=1
            )
        ]
        sample_class.members = [
            ClassMember(
                id=str(uuid4()),
                user_id=student_user.id,
                user=student_user,
                role="STUDENT",
            )
        ]
        mock_db.execute.return_value = create_mock_result(sample_class)

        detail = await class_service.find_one(code="K3Q9ZP2A")

        assert detail.class_code == "K3Q9ZP2A"
        assert detail.school.username == sample_school.username
        assert detail.modules[0].title == "Mathematics"
        assert detail.members[0].user.full_name == "Eric Mugisha"
        assert detail.primary_teacher.user.full_name == "Jean Habimana"

    @pytest.mark.asyncio
    async def test_find_one_not_found(self, class_service, mock_db):
        """Test lookup of a missing class."""
        mock_db.execute.return_value = create_mock_result(None)

        with pytest.raises(ClassNotFoundError) as exc_info:
            await class_service.find_one(username="ghost")

        assert exc_info.value.message == "Class not found with identifier: ghost"

    @pytest.mark.asyncio
    async def test_find_one_hides_private_tutoring_code(
        self, class_service, mock_db, tutoring_class
    ):
        """Test that a private tutoring class never exposes its code."""
        tutoring_class.modules = []
        tutoring_class.members = []
        mock_db.execute.return_value = create_mock_result(tutoring_class)

        detail = await class_service.find_one(id=tutoring_class.id)

        assert detail.class_code is None
        assert "class_code" not in detail.model_dump()


class TestClassServiceUpdate:
    """Tests for class updates."""

    @pytest.mark.asyncio
    async def test_update_not_found(self, class_service, mock_db):
        """Test updating a missing class."""
        mock_db.execute.return_value = create_mock_result(None)

        with pytest.raises(ClassNotFoundError):
            await class_service.update(str(uuid4()), {"name": "New"})

    @pytest.mark.asyncio
    async def test_update_fields_and_code(self, class_service, mock_db, sample_class):
        """Test that code maps to class_code."""
        mock_db.execute.return_value = create_mock_result(sample_class)

        response = await class_service.update(
            sample_class.id, {"name": "S1 B", "code": "NEWC0DE1"}
        )

        assert sample_class.class_code == "NEWC0DE1"
        assert response.name == "S1 B"
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_update_replaces_image(
        self, class_service, mock_db, mock_uploads, tutoring_class, base64_image
    ):
        """Test that a new base64 image replaces the old one."""
        old_image = tutoring_class.class_image
        mock_db.execute.return_value = create_mock_result(tutoring_class)

        response = await class_service.update(tutoring_class.id, {"image": base64_image})

        mock_uploads.delete_image.assert_awaited_once_with(old_image)
        assert response.class_image == mock_uploads.upload_base64_image.return_value.secure_url
        assert response.class_code is None

    @pytest.mark.asyncio
    async def test_update_null_image_removes_it(
        self, class_service, mock_db, mock_uploads, tutoring_class
    ):
        """Test that a null image deletes the stored image."""
        old_image = tutoring_class.class_image
        mock_db.execute.return_value = create_mock_result(tutoring_class)

        await class_service.update(tutoring_class.id, {"image": None})

        mock_uploads.delete_image.assert_awaited_once_with(old_image)
        assert tutoring_class.class_image is None

    @pytest.mark.asyncio
    async def test_update_without_image_keeps_it(
        self, class_service, mock_db, mock_uploads, tutoring_class
    ):
        """Test that omitting image leaves it untouched."""
        mock_db.execute.return_value = create_mock_result(tutoring_class)

        await class_service.update(tutoring_class.id, {"description": "Weekly sessions"})

        mock_uploads.delete_image.assert_not_awaited()
        assert tutoring_class.class_image is not None

    @pytest.mark.asyncio
    async def test_update_upload_failure(
        self, class_service, mock_db, mock_uploads, sample_class, base64_image
    ):
        """Test that a failed upload aborts the update."""
        mock_db.execute.return_value = create_mock_result(sample_class)
        mock_uploads.upload_base64_image.side_effect = UploadAPIError("bad image", 400)

        with pytest.raises(ClassServiceError) as exc_info:
            await class_service.update(sample_class.id, {"image": base64_image})

        assert exc_info.value.message == "Failed to upload updated class image"
        mock_db.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_sets_primary_teacher(
        self, class_service, mock_db, sample_class, sample_teacher
    ):
        """Test that class_teacher_id sets the primary teacher."""
        mock_db.execute.side_effect = [
            create_mock_result(sample_class),
            create_mock_result(sample_teacher),
        ]

        response = await class_service.update(
            sample_class.id, {"class_teacher_id": sample_teacher.id}
        )

        assert response.primary_teacher_id == sample_teacher.id

    @pytest.mark.asyncio
    async def test_update_username_conflict(self, class_service, mock_db, sample_class):
        """Test that a username collision on update is a conflict."""
        mock_db.execute.return_value = create_mock_result(sample_class)
        mock_db.commit.side_effect = IntegrityError(
            "UPDATE", {}, FakeUniqueViolation("uq_classes_username")
        )

        with pytest.raises(ClassConflictError) as exc_info:
            await class_service.update(sample_class.id, {"username": "taken"})

        assert exc_info.value.message == "Class with this username already exists"
        mock_db.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_update_unknown_teacher_leaves_image_alone(
        self, class_service, mock_db, mock_uploads, tutoring_class, base64_image
    ):
        """Test that a missing teacher stops the update before any image work."""
        old_image = tutoring_class.class_image
        mock_db.execute.side_effect = [
            create_mock_result(tutoring_class),
            create_mock_result(None),
        ]

        with pytest.raises(ClassNotFoundError):
            await class_service.update(
                tutoring_class.id, {"image": base64_image, "class_teacher_id": "nope"}
            )

        mock_uploads.upload_base64_image.assert_not_awaited()
        mock_uploads.delete_image.assert_not_awaited()
        mock_db.commit.assert_not_awaited()
        assert tutoring_class.class_image == old_image

    @pytest.mark.asyncio
    async def test_update_commit_failure_keeps_old_image(
        self, class_service, mock_db, mock_uploads, tutoring_class, base64_image
    ):
        """Test that a failed commit removes the new upload and keeps the old image."""
        old_image = tutoring_class.class_image
        new_image = mock_uploads.upload_base64_image.return_value.secure_url
        mock_db.execute.return_value = create_mock_result(tutoring_class)
        mock_db.commit.side_effect = OperationalError("UPDATE", {}, Exception("down"))

        with pytest.raises(ClassServiceError) as exc_info:
            await class_service.update(tutoring_class.id, {"image": base64_image})

        assert exc_info.value.message == (
            f'Something went wrong while updating class with ID "{tutoring_class.id}"'
        )
        mock_uploads.delete_image.assert_awaited_once_with(new_image)
        assert call(old_image) not in mock_uploads.delete_image.await_args_list

    @pytest.mark.asyncio
    async def test_update_old_image_deleted_after_commit(
        self, class_service, mock_db, mock_uploads, tutoring_class, base64_image
    ):
        """Test that the replaced image is deleted only after the commit."""
        old_image = tutoring_class.class_image
        order = []
        mock_db.commit.side_effect = lambda: order.append("commit")
        mock_uploads.delete_image.side_effect = lambda url: order.append(("delete", url))
        mock_db.execute.return_value = create_mock_result(tutoring_class)

        await class_service.update(tutoring_class.id, {"image": base64_image})

        assert order == ["commit", ("delete", old_image)]

    @pytest.mark.asyncio
    async def test_update_image_delete_failure_is_logged(
        self, class_service, mock_db, mock_uploads, tutoring_class, base64_image
    ):
        """Test that failing to delete the old image does not fail the update."""
        mock_db.execute.return_value = create_mock_result(tutoring_class)
        mock_uploads.delete_image.side_effect = UploadAPIError("not found", 404)

        response = await class_service.update(tutoring_class.id, {"image": base64_image})

        assert response.class_image == mock_uploads.upload_base64_image.return_value.secure_url
        mock_db.commit.assert_awaited_once()


class TestClassServiceRemove:
    """Tests for class removal."""

    @pytest.mark.asyncio
    async def test_remove_class(self, class_service, mock_db, mock_uploads, tutoring_class):
        """Test deleting a class and its image."""
        mock_db.execute.return_value = create_mock_result(tutoring_class)

        response = await class_service.remove(tutoring_class.id)

        mock_uploads.delete_image.assert_awaited_once()
        mock_db.delete.assert_awaited_once_with(tutoring_class)
        assert response.message == (
            f'Class with ID "{tutoring_class.id}" has been deleted successfully'
        )

    @pytest.mark.asyncio
    async def test_remove_class_not_found(self, class_service, mock_db):
        """Test deleting a missing class."""
        mock_db.execute.return_value = create_mock_result(None)

        with pytest.raises(ClassNotFoundError):
            await class_service.remove(str(uuid4()))

        mock_db.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_remove_commit_failure_keeps_image(
        self, class_service, mock_db, mock_uploads, tutoring_class
    ):
        """Test that the image survives when the class row does."""
        mock_db.execute.return_value = create_mock_result(tutoring_class)
        mock_db.commit.side_effect = OperationalError("DELETE", {}, Exception("down"))

        with pytest.raises(ClassServiceError) as exc_info:
            await class_service.remove(tutoring_class.id)

        assert exc_info.value.message == (
            f'Something went wrong while removing class with ID "{tutoring_class.id}"'
        )
        mock_uploads.delete_image.assert_not_awaited()
        mock_db.rollback.assert_awaited_once()
