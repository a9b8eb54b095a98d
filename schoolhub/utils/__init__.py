# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Utility functions and helpers for SchoolHub.

This package contains cross-cutting utilities:
- logging: Structured logging with structlog
- codes: Random codes, usernames and invitation code hashing
"""

from schoolhub.utils.codes import (
    CodeHasher,
    generate_code,
    generate_username,
    is_base64_image,
)
from schoolhub.utils.logging import bind_context, clear_context, get_logger, setup_logging

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    # Codes
    "CodeHasher",
    "generate_code",
    "generate_username",
    "is_base64_image",
]
