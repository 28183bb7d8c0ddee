"""
Dependency injection setup for FastAPI.
Provides dependency providers for core services with lifecycle management.
"""

from fastapi import Depends, Request
from typing import Optional
import logging
import asyncio

from app.config.settings import Settings, get_settings
from app.core.exceptions import ServiceUnavailableError
from app.core.extraction_pipeline import ModifierExtractionPipeline
from app.services import (
    ImageProcessor,
    OCRService,
    BaseOCRModel,
    create_ocr_model,
)


logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Container for managing application services with lifecycle management.
    """

    def __init__(self, ocr_model: Optional[BaseOCRModel] = None):
        self._ocr_model_override = ocr_model
        self._ocr_service: Optional[OCRService] = None
        self._image_processor: Optional[ImageProcessor] = None
        self._pipeline: Optional[ModifierExtractionPipeline] = None
        self._initialized = False
        self._initialization_lock = asyncio.Lock()

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def initialize_services(self, settings: Optional[Settings] = None) -> None:
        """
        Initialize all services with proper dependency order.
        """
        async with self._initialization_lock:
            if self._initialized:
                return

            settings = settings or get_settings()
            logger.info("Initializing service container")

            try:
                ocr_model = self._ocr_model_override or create_ocr_model(settings.ocr)
                self._ocr_service = OCRService(ocr_model)
                self._image_processor = ImageProcessor(
                    settings.upload.max_image_size_mb,
                    settings.upload.allowed_content_type_prefix,
                )
                self._pipeline = ModifierExtractionPipeline(
                    ocr_service=self._ocr_service,
                    image_processor=self._image_processor,
                    max_batch_size=settings.upload.max_batch_size,
                )

                self._initialized = True
                logger.info(
                    f"Service container initialization completed "
                    f"(OCR backend: {self._ocr_service.backend_name})"
                )

            except Exception as e:
                logger.error(f"Service container initialization failed: {e}", exc_info=True)
                raise

    async def cleanup_services(self) -> None:
        """
        Cleanup all services in reverse dependency order.
        """
        logger.info("Cleaning up service container")

        self._pipeline = None
        self._image_processor = None
        self._ocr_service = None
        self._initialized = False

        logger.info("Service container cleanup completed")

    def get_ocr_service(self) -> OCRService:
        """Get OCR service instance."""
        if not self._initialized or self._ocr_service is None:
            raise RuntimeError("Service container not initialized")
        return self._ocr_service

    def get_pipeline(self) -> ModifierExtractionPipeline:
        """Get extraction pipeline instance."""
        if not self._initialized or self._pipeline is None:
            raise RuntimeError("Service container not initialized")
        return self._pipeline


# Global service container
service_container = ServiceContainer()


def get_service_container(request: Request) -> ServiceContainer:
    """
    Get the service container from application state.

    Raises:
        ServiceUnavailableError: If service container is not available
    """
    if not hasattr(request.app.state, 'service_container'):
        logger.error("Service container not initialized")
        raise ServiceUnavailableError("service_container")

    return request.app.state.service_container


def get_extraction_pipeline(
    container: ServiceContainer = Depends(get_service_container)
) -> ModifierExtractionPipeline:
    """
    Dependency provider for ModifierExtractionPipeline.

    Raises:
        ServiceUnavailableError: If the pipeline is not available
    """
    try:
        return container.get_pipeline()
    except RuntimeError as e:
        logger.error(f"Extraction pipeline not available: {e}")
        raise ServiceUnavailableError("extraction_pipeline", details={"reason": str(e)})


def get_request_id(request: Request) -> str:
    """
    Get request ID from request state.
    """
    return getattr(request.state, 'request_id', 'unknown')
