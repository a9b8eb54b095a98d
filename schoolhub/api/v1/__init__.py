# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

Modules:
    schools: School management endpoints.
    classes: Class management endpoints.
"""

from fastapi import APIRouter

from schoolhub.api.v1 import classes, schools

# Create the main v1 router
router = APIRouter(prefix="/api/v1")

router.include_router(schools.router, prefix="/schools", tags=["Schools"])
router.include_router(classes.router, prefix="/classes", tags=["Classes"])

__all__ = ["router"]
