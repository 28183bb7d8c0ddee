"""
Image validation for uploaded menu photos.

Rejects uploads that are not images before any OCR call is made.
"""

import logging
from typing import Optional
from PIL import Image, UnidentifiedImageError
import io
import hashlib

from app.core.exceptions import (
    ErrorCode,
    ImageValidationError,
    ImageTooLargeError,
)
from app.models import ImagePayload


class ImageProcessor:
    """
    Upload validation service.

    Checks the declared content type, the payload size and that Pillow
    can identify and verify the bytes as an image.
    """

    DEFAULT_MAX_FILE_SIZE_MB = 10
    IMAGE_CONTENT_TYPE_PREFIX = "image/"

    def __init__(
        self,
        max_file_size_mb: Optional[int] = None,
        content_type_prefix: Optional[str] = None
    ):
        """Initialize image processor"""
        self.logger = logging.getLogger(__name__)
        self.max_file_size_mb = max_file_size_mb or self.DEFAULT_MAX_FILE_SIZE_MB
        self.content_type_prefix = content_type_prefix or self.IMAGE_CONTENT_TYPE_PREFIX

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size_mb * 1024 * 1024

    def validate_content_type(self, content_type: Optional[str], filename: Optional[str] = None) -> None:
        """
        Validate the declared MIME type of an upload.

        Raises:
            ImageValidationError: If the upload does not declare an image type
        """
        if not content_type or not content_type.startswith(self.content_type_prefix):
            raise ImageValidationError(
                "Please upload an image file",
                ErrorCode.INVALID_IMAGE_FORMAT,
                details={"filename": filename, "content_type": content_type}
            )

    def validate_size(self, image_data: bytes) -> None:
        """
        Validate payload size.

        Raises:
            ImageValidationError: If the payload is empty
            ImageTooLargeError: If the payload exceeds the configured limit
        """
        if not image_data:
            raise ImageValidationError("Image file is empty", ErrorCode.IMAGE_CORRUPTED)

        if len(image_data) > self.max_file_size_bytes:
            raise ImageTooLargeError(len(image_data) / (1024 * 1024), self.max_file_size_mb)

    def validate_integrity(self, image_data: bytes) -> str:
        """
        Validate that the bytes decode as an image.

        Returns:
            The image format Pillow detected

        Raises:
            ImageValidationError: If the image is corrupted or not an image
        """
        try:
            image = Image.open(io.BytesIO(image_data))
            image_format = image.format
            image.verify()
        except UnidentifiedImageError as e:
            raise ImageValidationError(
                f"Cannot determine image format: {str(e)}",
                ErrorCode.INVALID_IMAGE_FORMAT
            )
        except (IOError, OSError, ValueError, SyntaxError) as e:
            raise ImageValidationError(
                f"Image is corrupted or invalid: {str(e)}",
                ErrorCode.IMAGE_CORRUPTED
            )

        self.logger.debug(f"Image integrity validation passed: {image_format}")
        return image_format

    async def validate_image(self, payload: ImagePayload) -> str:
        """
        Comprehensive validation of one upload.

        Args:
            payload: Uploaded image

        Returns:
            Detected image format

        Raises:
            ImageValidationError: If any validation fails
        """
        self.validate_content_type(payload.content_type, payload.filename)
        self.validate_size(payload.data)
        image_format = self.validate_integrity(payload.data)

        self.logger.info(
            f"Image validation successful: {payload.filename} "
            f"{image_format}, {payload.size_bytes} bytes"
        )
        return image_format

    def calculate_image_hash(self, image_data: bytes) -> str:
        """SHA-256 of the image bytes, used to tag log lines."""
        return hashlib.sha256(image_data).hexdigest()

