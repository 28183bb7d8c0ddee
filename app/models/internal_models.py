"""
Internal data models and enums for the menu modifier extractor.

This module contains internal data structures used for pipeline context,
classifier configuration, error codes and upload payloads.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple
from enum import Enum
import time

from app.core.exceptions import ErrorCode


class ModifierCategory(str, Enum):
    """Fixed modifier categories, in classification precedence order"""
    SAUCES = "Sauces"
    CHEESES = "Cheeses"
    MEATS = "Meats"
    VEGETABLES = "Vegetables"
    SEASONINGS = "Seasonings"


class OCRBackend(str, Enum):
    """OCR collaborators the service can be wired to"""
    GOOGLE_VISION = "google_vision"
    GEMINI = "gemini"
    MOCK = "mock"


class ProcessingStage(str, Enum):
    """Extraction pipeline stages for tracking"""
    INITIALIZED = "initialized"
    IMAGE_VALIDATION = "image_validation"
    OCR_PROCESSING = "ocr_processing"
    SEGMENTATION = "segmentation"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class CategoryKeywords:
    """One row of the classifier's keyword table"""
    category: ModifierCategory
    keywords: Tuple[str, ...]

    def matches(self, fragment: str) -> bool:
        return any(keyword in fragment for keyword in self.keywords)


@dataclass
class ImagePayload:
    """An uploaded image handed from the HTTP layer to the pipeline"""
    image_id: str
    filename: Optional[str]
    content_type: Optional[str]
    data: bytes

    @property
    def size_bytes(self) -> int:
        return len(self.data)


@dataclass
class ExtractionContext:
    """Context object for tracking a single image through the pipeline"""
    image_id: str
    start_time: float = field(default_factory=time.time)
    processing_stage: ProcessingStage = ProcessingStage.INITIALIZED
    errors: List[str] = field(default_factory=list)

    def add_error(self, stage: ProcessingStage, error: str) -> None:
        """Add error with stage information for debugging"""
        self.errors.append(f"{stage.value}: {error}")

    def update_stage(self, stage: ProcessingStage) -> None:
        self.processing_stage = stage

    def get_processing_time_ms(self) -> int:
        """Calculate processing time so far in milliseconds"""
        return int((time.time() - self.start_time) * 1000)
