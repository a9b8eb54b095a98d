# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Structured logging configuration using structlog.

Development and debug runs get colored console lines; every other
environment emits one JSON object per line for the log shipper.
Service modules keep using ``logging.getLogger(__name__)``; structlog
loggers from ``get_logger`` are used where request context matters.

Example:
    >>> from schoolhub.utils.logging import setup_logging, get_logger
    >>> from schoolhub.core.config import get_settings
    >>> setup_logging(get_settings())
    >>> logger = get_logger(__name__)
    >>> logger.info("School created", school_id="123")
"""

import logging
import sys
from typing import TYPE_CHECKING

import structlog
from structlog.types import Processor

if TYPE_CHECKING:
    from schoolhub.core.config.settings import Settings

APP_LOGGER = "schoolhub"
STDLIB_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Third-party loggers capped at WARNING
NOISY_LOGGERS = (
    "uvicorn",
    "uvicorn.access",
    "uvicorn.error",
    "httpx",
    "httpcore",
    "sqlalchemy",
    "asyncio",
)


def _processors(json_output: bool) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if json_output:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    return processors


def setup_logging(settings: "Settings") -> None:
    """Configure structlog and the standard library root logger.

    Args:
        settings: Application settings; ``log_level``, ``debug`` and
            ``environment`` are used.
    """
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    structlog.configure(
        processors=_processors(json_output=not (settings.is_development or settings.debug)),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format=STDLIB_FORMAT, stream=sys.stdout, level=level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.getLogger(APP_LOGGER).setLevel(level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger named after the calling module."""
    return structlog.get_logger(name)


def bind_context(**kwargs: object) -> None:
    """Attach key-value pairs to every log line written in the current context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Drop all values bound with ``bind_context``."""
    structlog.contextvars.clear_contextvars()
