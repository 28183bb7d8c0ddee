"""
Custom exceptions for the menu modifier extractor.

Input validation errors are raised before any processing starts,
collaborator errors are captured per image by the batch pipeline, and
every exception carries the status code the HTTP layer reports.
"""

from typing import Optional, Dict, Any, List
from enum import Enum


class ErrorCode(str, Enum):
    """Standardized error codes for the application."""

    # Input validation errors
    NO_IMAGES_PROVIDED = "NO_IMAGES_PROVIDED"
    INVALID_IMAGE_FORMAT = "INVALID_IMAGE_FORMAT"
    IMAGE_TOO_LARGE = "IMAGE_TOO_LARGE"
    IMAGE_CORRUPTED = "IMAGE_CORRUPTED"
    BATCH_TOO_LARGE = "BATCH_TOO_LARGE"

    # Collaborator errors
    NO_TEXT_DETECTED = "NO_TEXT_DETECTED"
    OCR_PROCESSING_FAILED = "OCR_PROCESSING_FAILED"
    ALL_IMAGES_FAILED = "ALL_IMAGES_FAILED"

    # Curation errors
    MODIFIER_NOT_FOUND = "MODIFIER_NOT_FOUND"

    # Generic errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


class ModifierExtractorException(Exception):
    """Base exception for the modifier extractor."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code


class NoImagesProvidedError(ModifierExtractorException):
    """Raised when an extraction request carries no image at all."""

    def __init__(self, message: str = "No images provided"):
        super().__init__(
            message=message,
            error_code=ErrorCode.NO_IMAGES_PROVIDED,
            status_code=400
        )


class ImageValidationError(ModifierExtractorException):
    """Raised when an upload is not a readable image."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INVALID_IMAGE_FORMAT,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
            status_code=400
        )


class ImageTooLargeError(ModifierExtractorException):
    """Raised when uploaded image exceeds size limits."""

    def __init__(self, size_mb: float, max_size_mb: int):
        super().__init__(
            message=f"Image size {size_mb:.1f}MB exceeds maximum allowed size of {max_size_mb}MB",
            error_code=ErrorCode.IMAGE_TOO_LARGE,
            details={"size_mb": size_mb, "max_size_mb": max_size_mb},
            status_code=413
        )


class BatchTooLargeError(ModifierExtractorException):
    """Raised when a batch carries more images than allowed."""

    def __init__(self, image_count: int, max_batch_size: int):
        super().__init__(
            message=f"Batch size ({image_count}) exceeds maximum allowed ({max_batch_size})",
            error_code=ErrorCode.BATCH_TOO_LARGE,
            details={"image_count": image_count, "max_batch_size": max_batch_size},
            status_code=413
        )


class OCRProcessingError(ModifierExtractorException):
    """Raised when the OCR collaborator call itself fails."""

    def __init__(
        self,
        message: str = "Failed to perform OCR on image",
        details: Optional[Dict[str, Any]] = None,
        error_code: ErrorCode = ErrorCode.OCR_PROCESSING_FAILED
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
            status_code=422
        )


class NoTextDetectedError(OCRProcessingError):
    """Raised when OCR succeeds but finds no text in the image."""

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="No text found in image",
            details=details,
            error_code=ErrorCode.NO_TEXT_DETECTED
        )


class AllImagesFailedError(ModifierExtractorException):
    """
    Raised when every image of a batch failed.

    Partial failures never raise; they are reported alongside the
    successful results instead.
    """

    def __init__(self, failures: List[Dict[str, Any]]):
        super().__init__(
            message=f"All {len(failures)} images failed to process",
            error_code=ErrorCode.ALL_IMAGES_FAILED,
            details={"failures": failures},
            status_code=422
        )


class ModifierNotFoundError(ModifierExtractorException):
    """Raised when toggling a modifier that was never consolidated."""

    def __init__(self, category: str, text: str):
        super().__init__(
            message=f"Modifier '{text}' not found in category '{category}'",
            error_code=ErrorCode.MODIFIER_NOT_FOUND,
            details={"category": category, "text": text},
            status_code=404
        )


class ServiceUnavailableError(ModifierExtractorException):
    """Raised when a collaborator is not configured or not reachable."""

    def __init__(self, service_name: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=f"Service '{service_name}' is temporarily unavailable",
            error_code=ErrorCode.SERVICE_UNAVAILABLE,
            details=details or {"service_name": service_name},
            status_code=503
        )
