# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for integrity error inspection."""

from sqlalchemy.exc import IntegrityError, OperationalError

from schoolhub.infrastructure.database.integrity import (
    is_unique_violation,
    unique_violation_target,
)


class DriverError(Exception):
    """Stand-in for a DBAPI error with PostgreSQL diagnostics."""

    def __init__(
        self,
        message: str,
        sqlstate: str | None = None,
        constraint_name: str | None = None,
        detail: str | None = None,
    ) -> None:
        super().__init__(message)
        self.sqlstate = sqlstate
        self.constraint_name = constraint_name
        self.detail = detail


def integrity_error(orig: Exception) -> IntegrityError:
    return IntegrityError("INSERT INTO classes ...", {}, orig)


class TestIsUniqueViolation:
    """Tests for is_unique_violation."""

    def test_unique_sqlstate(self) -> None:
        assert is_unique_violation(integrity_error(DriverError("dup", sqlstate="23505")))

    def test_other_sqlstate(self) -> None:
        error = integrity_error(DriverError("null value", sqlstate="23502"))

        assert not is_unique_violation(error)

    def test_sqlstate_on_wrapped_driver_error(self) -> None:
        """Test that the native error behind the DBAPI adapter is inspected."""
        orig = DriverError("adapter error")
        orig.__cause__ = DriverError("dup", sqlstate="23505")

        assert is_unique_violation(integrity_error(orig))

    def test_message_fallback(self) -> None:
        error = integrity_error(Exception("UNIQUE constraint failed: classes.username"))

        assert is_unique_violation(error)

    def test_non_integrity_error(self) -> None:
        assert not is_unique_violation(OperationalError("SELECT", {}, Exception("unique")))
        assert not is_unique_violation(ValueError("unique"))


class TestUniqueViolationTarget:
    """Tests for unique_violation_target."""

    def test_constraint_name(self) -> None:
        error = integrity_error(
            DriverError("dup", sqlstate="23505", constraint_name="uq_classes_class_code")
        )

        assert unique_violation_target(error) == "uq_classes_class_code"

    def test_detail_columns(self) -> None:
        error = integrity_error(
            DriverError(
                "dup",
                sqlstate="23505",
                detail="Key (username)=(s1-abc123) already exists.",
            )
        )

        assert unique_violation_target(error) == "username"

    def test_message_constraint(self) -> None:
        error = integrity_error(
            DriverError(
                'duplicate key value violates unique constraint "uq_schools_username"',
                sqlstate="23505",
            )
        )

        assert unique_violation_target(error) == "uq_schools_username"

    def test_unknown_target(self) -> None:
        error = integrity_error(DriverError("dup", sqlstate="23505"))

        assert unique_violation_target(error) == ""

    def test_not_a_unique_violation(self) -> None:
        error = integrity_error(DriverError("fk", sqlstate="23503"))

        assert unique_violation_target(error) is None
