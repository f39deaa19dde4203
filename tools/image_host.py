"""Image host abstractions and implementations for piece and profile photos."""

from __future__ import annotations

import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional

import cloudinary
import cloudinary.exceptions
import cloudinary.uploader
from pydantic import BaseModel, ValidationError

from fitlockr_app.config import AppConfig
from tools.observability import instrument_tool

LOGGER = logging.getLogger(__name__)

HOSTED_PREFIX = "https://res.cloudinary.com/"
PIECES_FOLDER = "fitlockr/pieces"
USERS_FOLDER = "fitlockr/users"


class ImageUploadError(RuntimeError):
    """Raised when the image host rejects or cannot receive an upload."""


class ImageHostNotConfiguredError(ImageUploadError):
    """Raised when uploads are attempted without host credentials."""


class _UploadResponse(BaseModel):
    secure_url: str
    public_id: str


@dataclass
class UploadedImage:
    """Location of an image stored on the host."""

    url: str
    public_id: str

    def to_dict(self) -> Dict[str, str]:
        return {"url": self.url, "public_id": self.public_id}


def is_hosted(source: str) -> bool:
    return source.startswith(HOSTED_PREFIX)


class ImageHost(ABC):
    """Abstract image host interface."""

    @abstractmethod
    def upload(self, source: str, folder: str = PIECES_FOLDER) -> UploadedImage:
        """Store ``source`` (a data URL or remote URL) and return where it landed."""

    def upload_if_needed(self, source: Optional[str], folder: str = PIECES_FOLDER) -> Optional[str]:
        """Return a hosted URL for ``source``, uploading only when it is not hosted yet."""

        if not source:
            return None
        if is_hosted(source):
            return source
        return self.upload(source, folder=folder).url

    def upload_many(self, sources: List[str], folder: str = PIECES_FOLDER) -> List[str]:
        hosted: List[str] = []
        for source in sources:
            url = self.upload_if_needed(source, folder=folder)
            if url:
                hosted.append(url)
        return hosted


class CloudinaryImageHost(ImageHost):
    """Cloudinary image host backed by the official SDK uploader."""

    def __init__(
        self,
        cloud_name: str | None,
        api_key: str | None,
        api_secret: str | None,
        timeout_seconds: float = 30.0,
    ) -> None:
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.timeout_seconds = timeout_seconds
        if self.configured:
            cloudinary.config(cloud_name=cloud_name, api_key=api_key, api_secret=api_secret, secure=True)

    @classmethod
    def from_config(cls, config: AppConfig) -> "CloudinaryImageHost":
        return cls(config.cloudinary_cloud_name, config.cloudinary_api_key, config.cloudinary_api_secret)

    @property
    def configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)

    @instrument_tool("upload_image")
    def upload(self, source: str, folder: str = PIECES_FOLDER) -> UploadedImage:
        if not source:
            raise ValueError("Image is required")
        if not self.configured:
            raise ImageHostNotConfiguredError("Cloudinary credentials are not configured")

        try:
            result = cloudinary.uploader.upload(
                source,
                folder=folder,
                resource_type="image",
                timeout=self.timeout_seconds,
            )
        except cloudinary.exceptions.Error as exc:
            LOGGER.error("Image host rejected upload", exc_info=exc)
            raise ImageUploadError(f"Image upload failed: {exc}") from exc

        try:
            parsed = _UploadResponse.model_validate(result)
        except ValidationError as exc:
            LOGGER.error("Image host payload schema validation failed", exc_info=exc)
            raise ImageUploadError("Image upload returned an unexpected payload") from exc
        return UploadedImage(url=parsed.secure_url, public_id=parsed.public_id)


class MockImageHost(ImageHost):
    """Offline image host that records uploads instead of storing them."""

    def __init__(self, cloud_name: str = "demo") -> None:
        self.cloud_name = cloud_name
        self.uploads: List[Dict[str, str]] = []

    def upload(self, source: str, folder: str = PIECES_FOLDER) -> UploadedImage:
        if not source:
            raise ValueError("Image is required")
        public_id = f"{folder}/{uuid.uuid4().hex[:20]}"
        url = f"{HOSTED_PREFIX}{self.cloud_name}/image/upload/{public_id}.jpg"
        self.uploads.append({"source": source, "folder": folder, "url": url})
        LOGGER.info("Returning mock upload", extra={"folder": folder})
        return UploadedImage(url=url, public_id=public_id)


def build_image_host(config: AppConfig) -> ImageHost:
    """Return the configured host; the mock is used only when ``image_host`` is ``mock``."""

    if config.image_host == "mock":
        LOGGER.warning("Using mock image host; uploaded images are not stored")
        return MockImageHost()
    if not config.cloudinary_configured:
        LOGGER.warning("Cloudinary credentials missing; image uploads will fail")
    return CloudinaryImageHost.from_config(config)


__all__ = [
    "CloudinaryImageHost",
    "HOSTED_PREFIX",
    "ImageHost",
    "ImageHostNotConfiguredError",
    "ImageUploadError",
    "MockImageHost",
    "PIECES_FOLDER",
    "USERS_FOLDER",
    "UploadedImage",
    "build_image_host",
    "is_hosted",
]
