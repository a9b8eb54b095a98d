# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Request logging middleware.

Binds the request method and path to the structlog context so every log
line written while handling the request carries them, and logs one line
per completed request.
"""

import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from schoolhub.utils.logging import bind_context, clear_context, get_logger

logger = get_logger(__name__)

# Paths that are not logged
QUIET_PATHS = frozenset({"/health", "/ready"})


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request with its status and duration."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Response],
    ) -> Response:
        """Process the request with method and path bound to the log context.

        Args:
            request: Incoming HTTP request.
            call_next: Next middleware/handler.

        Returns:
            HTTP response.
        """
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        clear_context()
        bind_context(method=request.method, path=request.url.path)
        started = time.perf_counter()
        try:
            response = await call_next(request)
            logger.info(
                "Request completed",
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            return response
        finally:
            clear_context()
