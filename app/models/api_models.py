"""
API request and response models for the menu modifier extractor.

This module contains Pydantic models for the extracted menu structure,
the curated modifier selection, batch responses and the error envelope.
"""

from pydantic import BaseModel, Field, field_validator, ValidationInfo
from typing import List, Optional, Dict, Any
from datetime import datetime
import uuid

from app.core.exceptions import ModifierNotFoundError


class ModifierGroup(BaseModel):
    """Modifier phrases detected for one category of a menu item"""
    category: str
    items: List[str] = Field(default_factory=list)


class MenuItem(BaseModel):
    """A dish recovered from OCR text with its categorized modifiers"""
    name: str
    description: str = ""
    modifiers: List[ModifierGroup] = Field(default_factory=list)

    @field_validator('modifiers')
    @classmethod
    def validate_no_empty_groups(cls, v):
        """A menu item never carries a category without matches"""
        if any(not group.items for group in v):
            raise ValueError("modifier groups must contain at least one item")
        return v


class ModifierOption(BaseModel):
    """A consolidated modifier phrase with its caller-driven selection flag"""
    text: str
    selected: bool = False


class ConsolidatedModifiers(BaseModel):
    """Category -> ordered unique modifier options across every processed item"""
    modifiers: Dict[str, List[ModifierOption]] = Field(default_factory=dict)

    model_config = {"extra": "forbid"}

    def categories(self) -> List[str]:
        return list(self.modifiers.keys())

    def set_selected(self, category: str, text: str, selected: bool = True) -> ModifierOption:
        """
        Toggle the selection flag of one option.

        Text is matched case-insensitively.

        Raises:
            ModifierNotFoundError: If the category or option does not exist
        """
        options = self.modifiers.get(category)
        if options is None:
            raise ModifierNotFoundError(category, text)

        wanted = text.lower()
        for option in options:
            if option.text.lower() == wanted:
                option.selected = selected
                return option

        raise ModifierNotFoundError(category, text)

    def selected_count(self) -> int:
        return sum(
            1 for options in self.modifiers.values() for option in options if option.selected
        )


class SelectionUpdateRequest(BaseModel):
    """Request model for toggling a single option in a consolidated set"""
    modifiers: ConsolidatedModifiers
    category: str
    text: str
    selected: bool = True


class ImageExtractionResult(BaseModel):
    """Per-image outcome of the extraction pipeline"""
    image_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    filename: Optional[str] = None
    success: bool
    items: List[MenuItem] = Field(default_factory=list)
    raw_text: Optional[str] = None
    error: Optional[str] = Field(default=None, validate_default=True)
    error_code: Optional[str] = None
    processing_time_ms: int = Field(default=0, ge=0)

    @field_validator('error')
    @classmethod
    def validate_error_present_on_failure(cls, v, info: ValidationInfo):
        """Failed results must say why they failed"""
        if info.data.get('success') is False and not v:
            raise ValueError("failed results must carry an error message")
        return v


class BatchExtractionResponse(BaseModel):
    """Response model for multi-image extraction"""
    batch_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    results: List[ImageExtractionResult]
    total_processed: int = Field(ge=0, description="Total number of images processed")
    successful_processed: int = Field(ge=0, description="Number of images that produced text")
    modifiers: ConsolidatedModifiers = Field(default_factory=ConsolidatedModifiers)
    processing_time_ms: int = Field(default=0, ge=0, description="Total batch processing time")

    @property
    def success(self) -> bool:
        return self.successful_processed > 0

    @field_validator('total_processed')
    @classmethod
    def validate_total_processed(cls, v, info: ValidationInfo):
        """Validate total processed matches results"""
        results = info.data.get('results', [])
        if v != len(results):
            raise ValueError("total_processed must match the number of results")
        return v

    @field_validator('successful_processed')
    @classmethod
    def validate_successful_processed(cls, v, info: ValidationInfo):
        """Validate successful count matches successful results"""
        results = info.data.get('results', [])
        actual_successful = sum(1 for result in results if result.success)
        if v != actual_successful:
            raise ValueError("successful_processed must match the number of successful results")
        return v


class HealthCheckResponse(BaseModel):
    """Response model for health check endpoint"""
    status: str = Field(description="Overall system status: healthy, degraded, unhealthy")
    version: str
    ocr_backend: str
    ocr_healthy: bool
    uptime_seconds: int = Field(ge=0)
    error_statistics: Dict[str, Any] = Field(default_factory=dict)

    @field_validator('status')
    @classmethod
    def validate_status(cls, v):
        valid_statuses = {"healthy", "degraded", "unhealthy"}
        if v not in valid_statuses:
            raise ValueError(f"status must be one of: {valid_statuses}")
        return v


class StandardErrorResponse(BaseModel):
    """Standardized error response format"""
    error_code: str
    message: str
    details: Optional[Dict[str, Any]] = None
    request_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = Field(default_factory=datetime.utcnow)

    @field_validator('error_code')
    @classmethod
    def validate_error_code(cls, v):
        """Validate error code format"""
        if not v or not v.isupper():
            raise ValueError("error_code must be a non-empty uppercase string")
        return v
