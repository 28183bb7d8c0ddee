"""
Menu modifier API endpoints.

Implements the modifier extraction tool:
- POST /extract: Single menu image -> menu items and modifiers
- POST /extract-batch: Multiple menu images processed concurrently,
  with modifiers consolidated across all of them
- POST /consolidate: Merge menu items into one curated option list
- POST /select: Toggle one option of a consolidated list
- POST /export: Selected options -> modifiers.csv download
"""

from fastapi import APIRouter, UploadFile, File, Depends, Body
from fastapi.responses import Response
from typing import List, Optional
import logging
import time

from app.core.dependencies import get_extraction_pipeline, get_request_id
from app.core.exceptions import NoImagesProvidedError
from app.core.extraction_pipeline import ModifierExtractionPipeline
from app.models import (
    BatchExtractionResponse,
    ConsolidatedModifiers,
    ImageExtractionResult,
    ImagePayload,
    MenuItem,
    SelectionUpdateRequest,
    StandardErrorResponse,
)
from app.services import (
    consolidate,
    default_classifier,
    export_csv_bytes,
    EXPORT_FILENAME,
    EXPORT_MEDIA_TYPE,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/modifiers", tags=["modifiers"])

ERROR_RESPONSES = {
    400: {"model": StandardErrorResponse, "description": "No image provided or not an image"},
    413: {"model": StandardErrorResponse, "description": "Image or batch too large"},
    422: {"model": StandardErrorResponse, "description": "OCR failed or no text detected"},
    500: {"model": StandardErrorResponse, "description": "Internal server error"},
}


async def _read_upload(upload: UploadFile, image_id: str) -> ImagePayload:
    """Read an UploadFile into the payload the pipeline works on."""
    data = await upload.read()
    return ImagePayload(
        image_id=image_id,
        filename=upload.filename,
        content_type=upload.content_type,
        data=data,
    )


@router.post("/extract", response_model=ImageExtractionResult, responses=ERROR_RESPONSES)
async def extract_modifiers(
    image: Optional[UploadFile] = File(None, description="Menu image file"),
    pipeline: ModifierExtractionPipeline = Depends(get_extraction_pipeline),
    request_id: str = Depends(get_request_id)
) -> ImageExtractionResult:
    """
    Extract menu items and their modifiers from one menu image.

    Validation and OCR failures are reported as errors rather than as a
    failed result, since there is nothing else to return.
    """
    if image is None or not image.filename:
        raise NoImagesProvidedError("No image file provided")

    start_time = time.time()
    payload = await _read_upload(image, request_id)

    logger.info(
        f"Extracting modifiers for request {request_id}",
        extra={
            'request_id': request_id,
            'image_filename': image.filename,
            'image_content_type': image.content_type,
        }
    )

    result = await pipeline.process_single(payload)
    result.processing_time_ms = int((time.time() - start_time) * 1000)
    return result


@router.post("/extract-batch", response_model=BatchExtractionResponse, responses=ERROR_RESPONSES)
async def extract_modifiers_batch(
    images: Optional[List[UploadFile]] = File(None, description="Menu image files"),
    pipeline: ModifierExtractionPipeline = Depends(get_extraction_pipeline),
    request_id: str = Depends(get_request_id)
) -> BatchExtractionResponse:
    """
    Extract and consolidate modifiers across several menu images.

    Each image is processed concurrently; a failed image is reported
    alongside the successful ones and only a fully failed batch errors.
    """
    if not images:
        raise NoImagesProvidedError()

    payloads = [
        await _read_upload(upload, f"{request_id}_{index + 1}")
        for index, upload in enumerate(images)
    ]

    logger.info(
        f"Processing batch request {request_id} with {len(payloads)} images",
        extra={'request_id': request_id, 'image_count': len(payloads)}
    )

    return await pipeline.process_batch(payloads)


@router.post("/consolidate", response_model=ConsolidatedModifiers)
async def consolidate_modifiers(
    items: List[MenuItem] = Body(..., description="Menu items from one or more images"),
) -> ConsolidatedModifiers:
    """Merge menu items' modifier groups into one deduplicated, sorted option list."""
    return consolidate(items, category_order=default_classifier.category_order())


@router.post("/select", response_model=ConsolidatedModifiers, responses={404: {"model": StandardErrorResponse}})
async def select_modifier(update: SelectionUpdateRequest) -> ConsolidatedModifiers:
    """Set the selection flag of one option and return the updated list."""
    modifiers = update.modifiers
    modifiers.set_selected(update.category, update.text, update.selected)
    return modifiers


@router.post("/export", response_class=Response)
async def export_modifiers(
    modifiers: ConsolidatedModifiers,
    request_id: str = Depends(get_request_id)
) -> Response:
    """
    Export the selected options as a CSV download.

    Every selected option yields its own row plus a "HOLD" row.
    """
    content = export_csv_bytes(modifiers)

    logger.info(
        f"Exporting {modifiers.selected_count()} selected modifiers",
        extra={'request_id': request_id, 'selected_count': modifiers.selected_count()}
    )

    return Response(
        content=content,
        media_type=EXPORT_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )
