# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Base exception for domain services.

Every service error carries the HTTP status it maps to, so the API layer
translates all of them with a single exception handler.
"""

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from schoolhub.models.common import validation_error_details

ModelT = TypeVar("ModelT", bound=BaseModel)


class ServiceError(Exception):
    """Base exception for all domain service errors.

    Attributes:
        message: Human-readable error description.
        details: Optional extra context (field errors, underlying error text).
        status_code: HTTP status code the error maps to.
    """

    status_code: int = 500

    def __init__(self, message: str, details: Any = None) -> None:
        """Initialize the service error.

        Args:
            message: Human-readable error description.
            details: Optional extra context returned to the client.
        """
        self.message = message
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


def validate_payload(
    model: type[ModelT],
    payload: Any,
    error_class: type[ServiceError],
    message: str,
) -> ModelT:
    """Validate a raw payload against a request schema.

    Args:
        model: Pydantic request model.
        payload: Dict (or an already validated model instance).
        error_class: Service error raised on failure.
        message: Error message used on failure.

    Returns:
        The validated request model.

    Raises:
        ServiceError: ``error_class`` with field errors as details.
    """
    if isinstance(payload, model):
        return payload
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise error_class(message, validation_error_details(e.errors())) from e
