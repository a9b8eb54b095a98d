# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database infrastructure for PostgreSQL connections.

Example:
    from schoolhub.infrastructure.database import get_session

    async with get_session() as session:
        result = await session.execute(select(School))
"""

from schoolhub.infrastructure.database.connection import (
    DatabaseError,
    check_database_connection,
    close_database,
    get_session,
    get_sessionmaker,
    init_database,
)
from schoolhub.infrastructure.database.integrity import (
    is_unique_violation,
    unique_violation_target,
)

__all__ = [
    "DatabaseError",
    "check_database_connection",
    "close_database",
    "get_session",
    "get_sessionmaker",
    "init_database",
    # Integrity errors
    "is_unique_violation",
    "unique_violation_target",
]
