# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Class domain package.

This package provides class management functionality including:
- Class CRUD operations
- Class image management
- Class code visibility by class type
"""

from schoolhub.domains.class_.service import (
    ClassConflictError,
    ClassNotFoundError,
    ClassPermissionError,
    ClassService,
    ClassServiceError,
    ClassValidationError,
    hides_class_code,
)

__all__ = [
    "ClassService",
    "ClassServiceError",
    "ClassValidationError",
    "ClassNotFoundError",
    "ClassConflictError",
    "ClassPermissionError",
    "hides_class_code",
]
