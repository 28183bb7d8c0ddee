"""
OCR Service for menu text extraction.

This module wraps the OCR collaborator that turns an uploaded menu photo
into full-page text. Google Cloud Vision, Gemini and a mock backend are
supported; the rest of the pipeline only sees a plain string.
"""

import asyncio
import base64
import logging
import time
from abc import ABC, abstractmethod
from typing import Optional

import httpx
from google import genai
from google.genai import types

from app.config.settings import OCRSettings
from app.core.exceptions import OCRProcessingError, NoTextDetectedError
from app.models import OCRBackend


class BaseOCRModel(ABC):
    """Abstract base class for OCR backends"""

    name: str = "base"

    @abstractmethod
    async def extract_text(self, image_data: bytes, mime_type: str = "image/jpeg") -> str:
        """Extract the full-page text of an image"""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the backend is configured and ready"""
        pass


class GoogleVisionOCRModel(BaseOCRModel):
    """Google Cloud Vision TEXT_DETECTION over the REST API"""

    name = OCRBackend.GOOGLE_VISION.value

    def __init__(self, api_key: str, endpoint: str, timeout_seconds: int = 30):
        self.logger = logging.getLogger(__name__)
        self.api_key = api_key
        self.endpoint = endpoint
        self.timeout = timeout_seconds

    def _build_request(self, image_data: bytes) -> dict:
        return {
            "requests": [
                {
                    "image": {"content": base64.b64encode(image_data).decode("ascii")},
                    "features": [{"type": "TEXT_DETECTION"}],
                }
            ]
        }

    async def extract_text(self, image_data: bytes, mime_type: str = "image/jpeg") -> str:
        """Return the first text annotation, which holds the whole page"""
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(
                self.endpoint,
                params={"key": self.api_key},
                json=self._build_request(image_data),
            )

        if response.status_code != 200:
            raise OCRProcessingError(
                details={"status_code": response.status_code, "backend": self.name}
            )

        responses = response.json().get("responses", [])
        if not responses:
            return ""

        result = responses[0]
        if "error" in result:
            raise OCRProcessingError(
                details={"backend": self.name, "reason": result["error"].get("message")}
            )

        annotations = result.get("textAnnotations") or []
        if not annotations:
            return ""
        return annotations[0].get("description", "")

    async def health_check(self) -> bool:
        return bool(self.api_key)


class GeminiOCRModel(BaseOCRModel):
    """Google Gemini vision model prompted for verbatim page text"""

    name = OCRBackend.GEMINI.value

    PROMPT = (
        "Transcribe all text visible in this menu image exactly as printed. "
        "Keep one printed line per output line, keep prices and punctuation, "
        "and return only the transcribed text with no commentary or markdown."
    )

    def __init__(self, api_key: str, model: str = "gemini-2.0-flash"):
        self.logger = logging.getLogger(__name__)
        self.client = genai.Client(api_key=api_key)
        self.model = model

    async def extract_text(self, image_data: bytes, mime_type: str = "image/jpeg") -> str:
        # The SDK call is blocking; keep it off the event loop
        response = await asyncio.to_thread(
            self.client.models.generate_content,
            model=self.model,
            contents=[
                self.PROMPT,
                types.Part.from_bytes(data=image_data, mime_type=mime_type),
            ],
        )

        content = (response.text or "").strip()
        if content.startswith("```"):
            lines = content.split("\n")
            content = "\n".join(lines[1:-1]).strip()
        return content

    async def health_check(self) -> bool:
        return self.client is not None


class MockOCRModel(BaseOCRModel):
    """Mock OCR backend for development and tests"""

    name = OCRBackend.MOCK.value

    SAMPLE_MENU_TEXT = "\n".join([
        "PIZZA MENU",
        "MARGHERITA",
        "tomato sauce, mozzarella, basil",
        "$18",
        "CAPRICCIOSA",
        "tomato sauce, mozzarella, ham, mushrooms and olives",
        "$22",
        "Garlic Prawns",
        "prawns, garlic oil, chili, oregano",
        "$24",
    ])

    def __init__(self, text: Optional[str] = None, error: Optional[Exception] = None):
        self.logger = logging.getLogger(__name__)
        self.text = self.SAMPLE_MENU_TEXT if text is None else text
        self.error = error
        self.is_healthy = True

    async def extract_text(self, image_data: bytes, mime_type: str = "image/jpeg") -> str:
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return self.text

    async def health_check(self) -> bool:
        return self.is_healthy


def create_ocr_model(ocr_settings: OCRSettings) -> BaseOCRModel:
    """
    Build the configured OCR backend.

    Falls back to the mock backend when a real backend is selected but no
    API key is configured.
    """
    logger = logging.getLogger(__name__)

    if ocr_settings.backend == OCRBackend.MOCK:
        return MockOCRModel()

    if not ocr_settings.google_api_key:
        logger.warning(
            f"OCR backend '{ocr_settings.backend.value}' selected but OCR_GOOGLE_API_KEY "
            f"is not set, falling back to mock"
        )
        return MockOCRModel()

    if ocr_settings.backend == OCRBackend.GEMINI:
        return GeminiOCRModel(ocr_settings.google_api_key, ocr_settings.gemini_model)

    return GoogleVisionOCRModel(
        ocr_settings.google_api_key,
        ocr_settings.vision_endpoint,
        ocr_settings.timeout_seconds,
    )


class OCRService:
    """
    OCR collaborator facade.

    Normalizes every backend failure into OCRProcessingError and an empty
    page into NoTextDetectedError.
    """

    def __init__(self, ocr_model: Optional[BaseOCRModel] = None):
        """Initialize OCR service with optional model"""
        self.ocr_model = ocr_model or MockOCRModel()
        self.logger = logging.getLogger(__name__)

    @property
    def backend_name(self) -> str:
        return self.ocr_model.name

    async def extract_text(self, image_data: bytes, mime_type: str = "image/jpeg") -> str:
        """
        Extract full-page text from image bytes.

        Args:
            image_data: Raw image bytes
            mime_type: Declared content type of the upload

        Returns:
            Extracted UTF-8 text

        Raises:
            NoTextDetectedError: If the image contains no text
            OCRProcessingError: If the OCR call itself fails
        """
        start_time = time.time()

        try:
            text = await self.ocr_model.extract_text(image_data, mime_type)
        except OCRProcessingError:
            raise
        except Exception as e:
            self.logger.error(f"OCR processing failed: {str(e)}")
            raise OCRProcessingError(details={"backend": self.backend_name, "reason": str(e)})

        if not text or not text.strip():
            raise NoTextDetectedError(details={"backend": self.backend_name})

        processing_time = int((time.time() - start_time) * 1000)
        self.logger.info(
            f"OCR extraction completed: {len(text)} characters in {processing_time}ms"
        )
        return text

    async def health_check(self) -> bool:
        """
        Check if OCR service is healthy and ready.

        Returns:
            True if service is healthy, False otherwise
        """
        try:
            return await self.ocr_model.health_check()
        except Exception as e:
            self.logger.error(f"OCR service health check failed: {str(e)}")
            return False
