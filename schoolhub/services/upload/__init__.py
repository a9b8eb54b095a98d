# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Image upload service (Cloudinary-compatible image host)."""

from schoolhub.services.upload.client import (
    UploadedImage,
    UploadService,
    public_id_from_url,
    sign_params,
)
from schoolhub.services.upload.exceptions import UploadAPIError, UploadError

__all__ = [
    "UploadService",
    "UploadedImage",
    "UploadError",
    "UploadAPIError",
    "public_id_from_url",
    "sign_params",
]
