"""Image uploads to the Cloudinary asset host.

Images arrive from the client as data URLs (or remote URLs) and are pushed
to Cloudinary with its SDK; only the returned ``secure_url`` is stored.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from functools import lru_cache
from typing import Any, Protocol

import cloudinary.exceptions
import cloudinary.uploader

from chatline.core.errors import ConfigError, DependencyError, InvalidInputError
from chatline.core.settings import settings

logger = logging.getLogger(__name__)


class AssetUploader(Protocol):
    """Anything that can turn an image payload into a hosted URL."""

    async def upload(
        self,
        data: str,
        *,
        folder: str | None = None,
        allowed_formats: Sequence[str] | None = None,
    ) -> str: ...


class CloudinaryUploader:
    """Signed image uploads through the Cloudinary SDK.

    Credentials are passed with each call rather than through the SDK's
    global ``cloudinary.config`` so separate uploaders do not interfere.
    """

    def __init__(
        self,
        cloud_name: str | None,
        api_key: str | None,
        api_secret: str | None,
        *,
        timeout_seconds: float = 10.0,
    ) -> None:
        self.cloud_name = cloud_name
        self.api_key = api_key
        self._api_secret = api_secret
        self.timeout_seconds = timeout_seconds

    @property
    def configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self._api_secret)

    def _upload_options(
        self, folder: str | None, allowed_formats: Sequence[str] | None
    ) -> dict[str, Any]:
        options: dict[str, Any] = {
            "cloud_name": self.cloud_name,
            "api_key": self.api_key,
            "api_secret": self._api_secret,
            "resource_type": "image",
            "timeout": self.timeout_seconds,
        }
        if folder:
            options["folder"] = folder
        if allowed_formats:
            options["allowed_formats"] = list(allowed_formats)
        return options

    async def upload(
        self,
        data: str,
        *,
        folder: str | None = None,
        allowed_formats: Sequence[str] | None = None,
    ) -> str:
        """Upload ``data`` and return the hosted HTTPS URL."""
        if not self.configured:
            raise ConfigError("Image uploads are not configured")

        options = self._upload_options(folder, allowed_formats)
        try:
            # The SDK does blocking HTTP; keep it off the event loop.
            result = await asyncio.to_thread(cloudinary.uploader.upload, data, **options)
        except cloudinary.exceptions.BadRequest as err:
            logger.warning("Cloudinary rejected upload: %s", err)
            raise InvalidInputError("Image could not be processed") from err
        except cloudinary.exceptions.Error as err:
            logger.error("Cloudinary upload failed: %s", err, exc_info=True)
            raise DependencyError() from err

        secure_url = result.get("secure_url") if isinstance(result, dict) else None
        if not secure_url:
            logger.error("Cloudinary response did not include secure_url: %r", result)
            raise DependencyError()
        return str(secure_url)


@lru_cache(maxsize=1)
def get_asset_uploader() -> CloudinaryUploader:
    """Return the shared uploader configured from settings."""
    return CloudinaryUploader(
        settings.cloudinary_cloud_name,
        settings.cloudinary_api_key,
        settings.cloudinary_api_secret,
        timeout_seconds=settings.http_timeout_seconds,
    )
