"""
Extraction pipeline for menu modifier processing.

Orchestrates the workflow from uploaded images to consolidated modifiers:
1. Upload validation (all images, before any OCR call)
2. OCR text extraction, one concurrent task per image
3. Menu segmentation and modifier classification per image
4. Consolidation across every successful image

Per-image collaborator failures are reported alongside successes; the
batch only fails when every image failed.
"""

import asyncio
import logging
import time
import uuid
from typing import List, Optional, Sequence

from app.core.exceptions import (
    ErrorCode,
    ModifierExtractorException,
    NoImagesProvidedError,
    BatchTooLargeError,
    AllImagesFailedError,
)
from app.models import (
    BatchExtractionResponse,
    ExtractionContext,
    ImageExtractionResult,
    ImagePayload,
    ProcessingStage,
)
from app.services import (
    ImageProcessor,
    MenuSegmenter,
    OCRService,
    consolidate,
    default_segmenter,
)

logger = logging.getLogger(__name__)


class ModifierExtractionPipeline:
    """
    Orchestrates OCR, segmentation and consolidation for uploaded menus.

    Segmentation and consolidation are synchronous; only the OCR calls
    suspend, and they share no state, so the fan-out needs no locking.
    """

    def __init__(
        self,
        ocr_service: OCRService,
        image_processor: ImageProcessor,
        segmenter: Optional[MenuSegmenter] = None,
        max_batch_size: int = 10
    ):
        self.ocr_service = ocr_service
        self.image_processor = image_processor
        self.segmenter = segmenter or default_segmenter
        self.max_batch_size = max_batch_size
        self.logger = logging.getLogger(__name__)

    async def validate_images(self, images: Sequence[ImagePayload]) -> None:
        """
        Validate every upload of a request.

        Raises:
            NoImagesProvidedError: If the collection is empty
            BatchTooLargeError: If there are more images than allowed
            ImageValidationError: On the first upload that is not an image
        """
        if not images:
            raise NoImagesProvidedError()

        if len(images) > self.max_batch_size:
            raise BatchTooLargeError(len(images), self.max_batch_size)

        for index, payload in enumerate(images):
            try:
                await self.image_processor.validate_image(payload)
            except ModifierExtractorException as e:
                e.details.setdefault("image_index", index)
                e.details.setdefault("filename", payload.filename)
                raise

    async def extract_image(
        self,
        payload: ImagePayload,
        context: Optional[ExtractionContext] = None
    ) -> ImageExtractionResult:
        """
        Run OCR and segmentation for one validated image.

        Raises:
            NoTextDetectedError: If OCR finds no text
            OCRProcessingError: If the OCR call fails
        """
        context = context or ExtractionContext(image_id=payload.image_id)

        context.update_stage(ProcessingStage.OCR_PROCESSING)
        raw_text = await self.ocr_service.extract_text(
            payload.data, payload.content_type or "image/jpeg"
        )

        context.update_stage(ProcessingStage.SEGMENTATION)
        items = self.segmenter.segment(raw_text)

        context.update_stage(ProcessingStage.COMPLETED)
        self.logger.info(
            f"Extracted {len(items)} menu items from {payload.filename or payload.image_id}",
            extra={
                'image_id': payload.image_id,
                'image_hash': self.image_processor.calculate_image_hash(payload.data)[:12],
                'items_found': len(items),
                'processing_time_ms': context.get_processing_time_ms(),
            }
        )

        return ImageExtractionResult(
            image_id=payload.image_id,
            filename=payload.filename,
            success=True,
            items=items,
            raw_text=raw_text,
            processing_time_ms=context.get_processing_time_ms(),
        )

    async def process_image(self, payload: ImagePayload) -> ImageExtractionResult:
        """
        Process one image, turning collaborator failures into a failed result.
        """
        context = ExtractionContext(image_id=payload.image_id)
        try:
            return await self.extract_image(payload, context)
        except ModifierExtractorException as e:
            context.add_error(context.processing_stage, e.message)
            self.logger.warning(
                f"Image {payload.filename or payload.image_id} failed: {e.message}",
                extra={
                    'image_id': payload.image_id,
                    'error_code': e.error_code.value,
                    'stage': context.processing_stage.value,
                    'errors': context.errors,
                }
            )
            context.update_stage(ProcessingStage.FAILED)
            return self._failed_result(
                payload, e.message, e.error_code.value, context.start_time
            )

    async def process_single(self, payload: ImagePayload) -> ImageExtractionResult:
        """Validate and extract one image; every failure propagates."""
        context = ExtractionContext(image_id=payload.image_id)
        context.update_stage(ProcessingStage.IMAGE_VALIDATION)
        await self.validate_images([payload])
        return await self.extract_image(payload, context)

    async def process_batch(self, images: Sequence[ImagePayload]) -> BatchExtractionResponse:
        """
        Process a batch of menu images concurrently.

        Args:
            images: Uploaded images, in request order

        Returns:
            BatchExtractionResponse with per-image results and the
            consolidated modifiers of every successful image

        Raises:
            NoImagesProvidedError: If no images were supplied
            ImageValidationError: If any upload is not an image
            AllImagesFailedError: If every image failed
        """
        batch_id = str(uuid.uuid4())
        start_time = time.time()

        await self.validate_images(images)

        self.logger.info(
            f"Processing batch {batch_id} with {len(images)} images",
            extra={'batch_id': batch_id, 'image_count': len(images)}
        )

        # Every task settles; one failure never cancels its siblings
        outcomes = await asyncio.gather(
            *[self.process_image(payload) for payload in images],
            return_exceptions=True
        )

        results: List[ImageExtractionResult] = []
        for payload, outcome in zip(images, outcomes):
            if isinstance(outcome, BaseException):
                self.logger.error(
                    f"Unexpected error processing {payload.filename or payload.image_id}: {outcome}",
                    extra={'batch_id': batch_id, 'image_id': payload.image_id},
                    exc_info=outcome
                )
                results.append(self._failed_result(
                    payload,
                    f"Processing failed: {outcome}",
                    ErrorCode.INTERNAL_SERVER_ERROR.value,
                    start_time
                ))
            else:
                results.append(outcome)

        successful = [result for result in results if result.success]
        if not successful:
            raise AllImagesFailedError([
                {
                    "image_id": result.image_id,
                    "filename": result.filename,
                    "error": result.error,
                    "error_code": result.error_code,
                }
                for result in results
            ])

        modifiers = consolidate(
            (item for result in successful for item in result.items),
            category_order=self.segmenter.classifier.category_order(),
        )

        total_processing_time = int((time.time() - start_time) * 1000)
        self.logger.info(
            f"Batch processing completed for {batch_id}",
            extra={
                'batch_id': batch_id,
                'total_processed': len(results),
                'successful_processed': len(successful),
                'processing_time_ms': total_processing_time,
            }
        )

        return BatchExtractionResponse(
            batch_id=batch_id,
            results=results,
            total_processed=len(results),
            successful_processed=len(successful),
            modifiers=modifiers,
            processing_time_ms=total_processing_time,
        )

    def _failed_result(
        self,
        payload: ImagePayload,
        error: str,
        error_code: str,
        start_time: float
    ) -> ImageExtractionResult:
        return ImageExtractionResult(
            image_id=payload.image_id,
            filename=payload.filename,
            success=False,
            error=error,
            error_code=error_code,
            processing_time_ms=int((time.time() - start_time) * 1000),
        )
