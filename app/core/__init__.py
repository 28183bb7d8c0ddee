"""
Core infrastructure for the menu modifier extractor.
Provides the exception hierarchy, error handlers, logging setup,
dependency injection and the extraction pipeline.
"""

from .exceptions import (
    ErrorCode,
    ModifierExtractorException,
    NoImagesProvidedError,
    ImageValidationError,
    ImageTooLargeError,
    BatchTooLargeError,
    OCRProcessingError,
    NoTextDetectedError,
    AllImagesFailedError,
    ModifierNotFoundError,
    ServiceUnavailableError,
)

__all__ = [
    "ErrorCode",
    "ModifierExtractorException",
    "NoImagesProvidedError",
    "ImageValidationError",
    "ImageTooLargeError",
    "BatchTooLargeError",
    "OCRProcessingError",
    "NoTextDetectedError",
    "AllImagesFailedError",
    "ModifierNotFoundError",
    "ServiceUnavailableError",
]
