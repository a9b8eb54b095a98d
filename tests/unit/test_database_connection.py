# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for database connection management without a database."""

import pytest

from schoolhub.infrastructure.database import connection
from schoolhub.infrastructure.database.connection import (
    DatabaseError,
    check_database_connection,
    get_session,
    get_sessionmaker,
)


@pytest.fixture(autouse=True)
def uninitialized(monkeypatch):
    """Run each test with no engine configured."""
    monkeypatch.setattr(connection, "_engine", None)
    monkeypatch.setattr(connection, "_sessionmaker", None)


class TestUninitializedDatabase:
    """Tests for behaviour before init_database is called."""

    def test_get_sessionmaker_raises(self) -> None:
        with pytest.raises(DatabaseError) as exc_info:
            get_sessionmaker()

        assert "init_database" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_get_session_raises(self) -> None:
        with pytest.raises(DatabaseError):
            async with get_session():
                pass

    @pytest.mark.asyncio
    async def test_check_connection_is_false(self) -> None:
        assert await check_database_connection() is False


class TestDatabaseError:
    """Tests for DatabaseError formatting."""

    def test_includes_original_error(self) -> None:
        error = DatabaseError("Database operation failed", ValueError("boom"))

        assert str(error) == "Database operation failed: boom"
