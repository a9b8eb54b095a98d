# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""School domain package.

This package provides school management functionality including:
- School CRUD operations
- Invitation codes
- Academic structure generation
- Administration join requests
"""

from schoolhub.domains.school.academic import (
    PlannedClass,
    PlannedModule,
    academic_year_label,
    build_academic_profile,
    plan_academic_structure,
)
from schoolhub.domains.school.service import (
    SchoolConflictError,
    SchoolInternalError,
    SchoolNotFoundError,
    SchoolPermissionError,
    SchoolService,
    SchoolServiceError,
    SchoolValidationError,
)

__all__ = [
    "SchoolService",
    "SchoolServiceError",
    "SchoolValidationError",
    "SchoolNotFoundError",
    "SchoolConflictError",
    "SchoolPermissionError",
    "SchoolInternalError",
    # Academic structure
    "PlannedClass",
    "PlannedModule",
    "academic_year_label",
    "build_academic_profile",
    "plan_academic_structure",
]
