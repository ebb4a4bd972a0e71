"""Photo storage backed by Cloudinary."""

import io
import logging
from dataclasses import dataclass

import cloudinary
import cloudinary.exceptions
import cloudinary.uploader

from src.config import get_settings
from src.exceptions import ValidationError

logger = logging.getLogger(__name__)


@dataclass
class StoredFile:
    url: str
    public_id: str


class FileStore:
    """Uploads images to Cloudinary and hands back their delivery URLs."""

    def __init__(self, uploader=None, folder: str | None = None):
        settings = get_settings()
        self.folder = folder or settings.cloudinary_folder
        self.max_bytes = settings.max_upload_bytes

        if uploader is None and settings.cloudinary_url:
            cloudinary.config(cloudinary_url=settings.cloudinary_url)
        self.configured = uploader is not None or bool(settings.cloudinary_url)
        self.uploader = uploader or cloudinary.uploader

    @property
    def is_configured(self) -> bool:
        return self.configured

    def save(self, data: bytes, content_type: str | None) -> StoredFile:
        """Upload an image.

        Raises:
            ValidationError: not an image, empty, or over ``max_upload_bytes``.
            cloudinary.exceptions.Error: the upload itself failed.
        """
        if not content_type or not content_type.startswith("image/"):
            raise ValidationError("Only image uploads are allowed")
        if not data:
            raise ValidationError("Uploaded file is empty")
        if len(data) > self.max_bytes:
            raise ValidationError(
                f"File too large. Maximum size is {self.max_bytes // (1024 * 1024)}MB."
            )

        result = self.uploader.upload(io.BytesIO(data), folder=self.folder, resource_type="image")
        url = result.get("secure_url")
        if not url:
            raise cloudinary.exceptions.Error("Upload returned no URL")

        stored = StoredFile(url=url, public_id=result.get("public_id", ""))
        logger.info(f"Stored upload {stored.public_id} ({len(data)} bytes)")
        return stored
