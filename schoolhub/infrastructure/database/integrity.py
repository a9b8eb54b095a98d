# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Helpers for inspecting database integrity errors.

Uniqueness is enforced by the database. Services insert optimistically
and translate the resulting ``IntegrityError`` into a user-facing error
based on which constraint or column was violated.

Example:
    try:
        await db.commit()
    except IntegrityError as e:
        target = unique_violation_target(e)
        if target and "username" in target:
            ...
"""

import re

from sqlalchemy.exc import IntegrityError

UNIQUE_VIOLATION = "23505"

_KEY_DETAIL = re.compile(r"Key \((?P<columns>[^)]+)\)=")
_CONSTRAINT_NAME = re.compile(r'constraint "(?P<name>[^"]+)"')


def _driver_errors(error: IntegrityError) -> list[object]:
    """Return the DBAPI error and the native driver error it wraps."""
    errors: list[object] = []
    orig = error.orig
    if orig is not None:
        errors.append(orig)
        cause = getattr(orig, "__cause__", None)
        if cause is not None:
            errors.append(cause)
    return errors


def _sqlstate(error: IntegrityError) -> str | None:
    for err in _driver_errors(error):
        code = getattr(err, "sqlstate", None) or getattr(err, "pgcode", None)
        if code:
            return str(code)
    return None


def is_unique_violation(error: Exception) -> bool:
    """Check whether an exception is a unique constraint violation.

    Args:
        error: Any exception raised by a flush or commit.

    Returns:
        True for an ``IntegrityError`` carrying SQLSTATE 23505, or one whose
        message mentions a unique constraint when no SQLSTATE is available.
    """
    if not isinstance(error, IntegrityError):
        return False

    code = _sqlstate(error)
    if code is not None:
        return code == UNIQUE_VIOLATION

    message = str(error.orig or error).lower()
    return "unique" in message or "duplicate key" in message


def unique_violation_target(error: Exception) -> str | None:
    """Describe which constraint or columns a unique violation hit.

    The driver's ``constraint_name`` is preferred, then the columns listed
    in the error detail (``Key (username)=(...)``), then whatever can be
    parsed from the error text.

    Args:
        error: Any exception raised by a flush or commit.

    Returns:
        Constraint name or comma separated column names, an empty string
        when the violation target cannot be determined, or None when the
        error is not a unique violation.
    """
    if not is_unique_violation(error):
        return None

    assert isinstance(error, IntegrityError)
    drivers = _driver_errors(error)

    for err in drivers:
        name = getattr(err, "constraint_name", None)
        if name:
            return str(name)

    for err in drivers:
        detail = getattr(err, "detail", None)
        if detail:
            match = _KEY_DETAIL.search(str(detail))
            if match:
                return match.group("columns")

    message = str(error.orig or error)
    match = _CONSTRAINT_NAME.search(message)
    if match:
        return match.group("name")
    match = _KEY_DETAIL.search(message)
    if match:
        return match.group("columns")
    return ""
