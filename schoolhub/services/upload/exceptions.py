# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Errors raised by the image upload client."""

from typing import Any


class UploadError(Exception):
    """An image could not be stored.

    Attributes:
        message: What went wrong, suitable for a 500 response body.
        details: Extra context for logs, never shown to callers.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class UploadAPIError(UploadError):
    """The image host answered with an error or could not be reached.

    ``status_code`` is None when no response was received.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)
        self.status_code = status_code
        self.response_body = response_body

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"image host returned {self.status_code}: {self.message}"
