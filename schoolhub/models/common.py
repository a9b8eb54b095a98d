# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Response schemas shared across domains."""

from typing import Any

from pydantic import BaseModel, ConfigDict


class MessageResponse(BaseModel):
    """Simple acknowledgement."""

    message: str


class ErrorResponse(BaseModel):
    """Body returned for every handled service error.

    Attributes:
        message: Human-readable error description.
        error: Additional context such as field errors or the underlying
            error text.
    """

    message: str
    error: Any = None


class UserBrief(BaseModel):
    """Public subset of a user account embedded in other responses."""

    model_config = ConfigDict(from_attributes=True)

    id: str | None = None
    full_name: str
    image: str | None = None
    email: str | None = None


class TeacherBrief(BaseModel):
    """Teacher profile with its user account."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    teacher_bio: str | None = None
    teacher_email: str | None = None
    teacher_image: str | None = None
    user: UserBrief | None = None


def validation_error_details(errors: list[dict[str, Any]]) -> dict[str, list[str]]:
    """Group pydantic validation errors by field.

    Args:
        errors: Output of ``ValidationError.errors()``.

    Returns:
        Mapping of dotted field path to its error messages. Model level
        errors are listed under ``"_root"``.
    """
    grouped: dict[str, list[str]] = {}
    for error in errors:
        field = ".".join(str(part) for part in error.get("loc", ())) or "_root"
        grouped.setdefault(field, []).append(error.get("msg", "Invalid value"))
    return grouped
