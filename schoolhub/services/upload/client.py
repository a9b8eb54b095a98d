# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Image upload client for a Cloudinary-compatible image host.

School logos and class images arrive as base64 data URIs. They are
uploaded to the image host and only the returned delivery URL is stored.

Example:
    service = UploadService(get_settings().upload)
    uploaded = await service.upload_base64_image(data_uri, "logos")
    print(uploaded.secure_url)
    await service.delete_image(uploaded.secure_url)
    await service.close()
"""

import hashlib
import logging
import re
import time
from dataclasses import dataclass
from typing import Any

import httpx

from schoolhub.core.config.settings import UploadSettings
from schoolhub.services.upload.exceptions import UploadAPIError, UploadError

logger = logging.getLogger(__name__)

_VERSION_SEGMENT = re.compile(r"^v\d+$")


@dataclass(frozen=True)
class UploadedImage:
    """Result of a successful upload.

    Attributes:
        secure_url: HTTPS delivery URL of the stored image.
        public_id: Identifier of the image on the host, used for deletion.
    """

    secure_url: str
    public_id: str


def sign_params(params: dict[str, Any], api_secret: str) -> str:
    """Sign request parameters.

    Parameters are sorted by key, joined as ``key=value`` pairs with ``&``
    and the API secret is appended before taking the SHA-1 hex digest.
    Empty values are not signed.

    Args:
        params: Parameters to sign, excluding file, api_key and signature.
        api_secret: Account API secret.

    Returns:
        Hex encoded signature.
    """
    to_sign = "&".join(
        f"{key}={params[key]}"
        for key in sorted(params)
        if params[key] is not None and params[key] != ""
    )
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


def public_id_from_url(url: str) -> str | None:
    """Extract the public id from a delivery URL.

    ``https://res.cloudinary.com/demo/image/upload/v1712/logos/abc.png``
    yields ``logos/abc``.

    Returns:
        The public id, or None if the URL is not a delivery URL.
    """
    if not url or "/upload/" not in url:
        return None

    path = url.split("/upload/", 1)[1].split("?", 1)[0]
    segments = [segment for segment in path.split("/") if segment]
    if segments and _VERSION_SEGMENT.match(segments[0]):
        segments = segments[1:]
    if not segments:
        return None

    segments[-1] = segments[-1].rsplit(".", 1)[0]
    return "/".join(segments)


class UploadService:
    """Async client for the image host.

    Attributes:
        settings: Upload configuration (account, credentials, timeout).
    """

    def __init__(
        self,
        settings: UploadSettings,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the upload service.

        Args:
            settings: Upload configuration.
            client: Optional preconfigured HTTP client.
        """
        self.settings = settings
        self._client = client or httpx.AsyncClient(timeout=settings.timeout)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    def _signed_form(self, params: dict[str, Any]) -> dict[str, Any]:
        params = {**params, "timestamp": int(time.time())}
        signature = sign_params(params, self.settings.api_secret.get_secret_value())
        return {**params, "api_key": self.settings.api_key, "signature": signature}

    async def _post(self, action: str, form: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.settings.image_api_url}/{action}"
        try:
            response = await self._client.post(url, data=form)
        except httpx.HTTPError as e:
            logger.error("Image host connection error: %s", str(e))
            raise UploadAPIError(
                message=f"Failed to connect to image host: {str(e)}",
                details={"error_type": type(e).__name__},
            ) from e

        if response.is_success:
            try:
                data = response.json()
            except ValueError as e:
                raise UploadAPIError(
                    message="Image host returned a response that is not JSON",
                    status_code=response.status_code,
                    response_body=response.text,
                ) from e
            if not isinstance(data, dict):
                raise UploadAPIError(
                    message="Image host returned an unexpected response",
                    status_code=response.status_code,
                    response_body=response.text,
                )
            return data

        message = "Image host request failed"
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            message = body["error"].get("message", message)

        raise UploadAPIError(
            message=message,
            status_code=response.status_code,
            response_body=response.text,
        )

    async def upload_base64_image(self, data_uri: str, folder: str) -> UploadedImage:
        """Upload a base64 data URI image.

        Args:
            data_uri: Image as ``data:image/<type>;base64,<payload>``.
            folder: Destination folder on the host (e.g. ``"logos"``).

        Returns:
            The uploaded image's delivery URL and public id.

        Raises:
            UploadError: If the input is not an image data URI.
            UploadAPIError: If the image host rejects the upload or is unreachable.
        """
        if not data_uri or not data_uri.startswith("data:image"):
            raise UploadError("Only base64 image data URIs can be uploaded")

        form = self._signed_form({"folder": folder})
        form["file"] = data_uri

        data = await self._post("upload", form)
        secure_url = data.get("secure_url")
        if not secure_url:
            raise UploadAPIError(
                message="Image host response did not include a secure_url",
                response_body=str(data),
            )

        logger.info("Uploaded image to %s: %s", folder, data.get("public_id"))
        return UploadedImage(secure_url=secure_url, public_id=data.get("public_id", ""))

    async def delete_image(self, url: str) -> bool:
        """Delete a previously uploaded image by its delivery URL.

        Args:
            url: Delivery URL returned by a previous upload.

        Returns:
            True if the host reports the image as deleted, False if the URL
            is not one of ours or the host no longer has it.

        Raises:
            UploadAPIError: If the image host returns an error or is unreachable.
        """
        public_id = public_id_from_url(url)
        if public_id is None:
            logger.warning("Cannot derive public id from image URL: %s", url)
            return False

        data = await self._post("destroy", self._signed_form({"public_id": public_id}))
        deleted = data.get("result") == "ok"
        logger.info("Deleted image %s: %s", public_id, data.get("result"))
        return deleted
