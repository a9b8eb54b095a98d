# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for logging configuration."""

import logging

import structlog

from schoolhub.core.config.settings import Settings
from schoolhub.utils.logging import bind_context, clear_context, setup_logging


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_levels(self) -> None:
        setup_logging(Settings(log_level="INFO"))

        assert logging.getLogger("schoolhub").level == logging.INFO
        assert logging.getLogger("sqlalchemy").level == logging.WARNING
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_context_binding(self) -> None:
        clear_context()
        bind_context(method="GET", path="/api/v1/schools")

        assert structlog.contextvars.get_contextvars() == {
            "method": "GET",
            "path": "/api/v1/schools",
        }

        clear_context()
        assert structlog.contextvars.get_contextvars() == {}
