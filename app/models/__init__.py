"""
Models package for the menu modifier extractor.

This package contains all data models used throughout the application,
including API models for requests/responses and internal models for
pipeline context and classifier configuration.
"""

# Internal Models
from .internal_models import (
    ModifierCategory,
    OCRBackend,
    ErrorCode,
    ProcessingStage,
    CategoryKeywords,
    ImagePayload,
    ExtractionContext,
)

# API Models
from .api_models import (
    ModifierGroup,
    MenuItem,
    ModifierOption,
    ConsolidatedModifiers,
    SelectionUpdateRequest,
    ImageExtractionResult,
    BatchExtractionResponse,
    HealthCheckResponse,
    StandardErrorResponse,
)

__all__ = [
    # Internal Models
    "ModifierCategory",
    "OCRBackend",
    "ErrorCode",
    "ProcessingStage",
    "CategoryKeywords",
    "ImagePayload",
    "ExtractionContext",

    # API Models
    "ModifierGroup",
    "MenuItem",
    "ModifierOption",
    "ConsolidatedModifiers",
    "SelectionUpdateRequest",
    "ImageExtractionResult",
    "BatchExtractionResponse",
    "HealthCheckResponse",
    "StandardErrorResponse",
]
