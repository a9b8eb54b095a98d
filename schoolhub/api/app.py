# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI Application Factory.

This module provides the main application factory for the SchoolHub API.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from schoolhub import __version__
from schoolhub.api.dependencies import close_db, init_db
from schoolhub.api.middleware import RequestLoggingMiddleware
from schoolhub.api.routes import health
from schoolhub.api.v1 import router as v1_router
from schoolhub.core.config import get_settings
from schoolhub.domains.errors import ServiceError
from schoolhub.models.common import ErrorResponse
from schoolhub.utils.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Initializes the database pool and upload client on startup and
    releases them on shutdown.

    Args:
        app: The FastAPI application instance.

    Yields:
        None during application runtime.
    """
    settings = get_settings()
    logger.info(
        "Starting SchoolHub API",
        extra={"environment": settings.environment, "debug": settings.debug},
    )

    await init_db()
    logger.info("Database connections initialized")

    yield

    try:
        await close_db()
        logger.info("Database connections closed")
    except Exception as e:
        logger.warning("Error closing database connections: %s", str(e))

    logger.info("Shutting down SchoolHub API")


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Translate a service error into its HTTP response.

    Args:
        request: The request that failed.
        exc: The service error raised by a domain service.

    Returns:
        JSON response ``{"message": ..., "error": ...}`` with the error's status.
    """
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, str(exc))
    body = ErrorResponse(message=exc.message, error=exc.details)
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(body))


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()
    setup_logging(settings)

    app = FastAPI(
        title="SchoolHub API",
        description="School management backend",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
        redirect_slashes=False,
    )

    # =========================================================================
    # Exception handlers
    # =========================================================================
    app.add_exception_handler(ServiceError, service_error_handler)

    # =========================================================================
    # Middleware
    # =========================================================================
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.origins_list,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allow_methods,
        allow_headers=settings.cors.allow_headers,
    )
    app.add_middleware(RequestLoggingMiddleware)

    # =========================================================================
    # Routes
    # =========================================================================
    app.include_router(health.router, tags=["Health"])
    app.include_router(v1_router)

    return app
