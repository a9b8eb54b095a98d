# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Health and readiness endpoints.

``/health`` reports service metadata and database status and always
answers 200. ``/ready`` tells the orchestrator whether traffic may be
routed here, which requires a reachable database.
"""

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel, Field

from schoolhub import __version__
from schoolhub.core.config import get_settings
from schoolhub.infrastructure.database.connection import check_database_connection

logger = logging.getLogger(__name__)

router = APIRouter()

_started_at = time.monotonic()


class DatabaseStatus(BaseModel):
    """Result of a database round trip."""

    status: str = Field(description="healthy or unhealthy")
    latency_ms: float | None = Field(None, description="Round trip time of SELECT 1")


class HealthResponse(BaseModel):
    status: str = Field(description="healthy when every component is healthy")
    timestamp: datetime
    version: str
    environment: str
    uptime_seconds: int
    database: DatabaseStatus


class ReadinessResponse(BaseModel):
    ready: bool
    database: DatabaseStatus


async def probe_database() -> DatabaseStatus:
    """Run ``SELECT 1`` and time it."""
    started = time.perf_counter()
    if not await check_database_connection():
        logger.error("Database health check failed")
        return DatabaseStatus(status="unhealthy")
    elapsed = (time.perf_counter() - started) * 1000
    return DatabaseStatus(status="healthy", latency_ms=round(elapsed, 2))


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Report version, environment, uptime and database status."""
    database = await probe_database()
    return HealthResponse(
        status=database.status,
        timestamp=datetime.now(timezone.utc),
        version=__version__,
        environment=get_settings().environment,
        uptime_seconds=int(time.monotonic() - _started_at),
        database=database,
    )


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check() -> ReadinessResponse:
    """Report whether the database is reachable."""
    database = await probe_database()
    return ReadinessResponse(ready=database.status == "healthy", database=database)
