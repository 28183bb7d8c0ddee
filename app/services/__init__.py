# Business logic services

from .text_normalizer import normalize
from .modifier_classifier import (
    ModifierClassifier,
    CATEGORY_KEYWORDS,
    FILLER_WORDS,
    classify,
    default_classifier,
)
from .menu_segmenter import MenuSegmenter, segment, default_segmenter
from .modifier_consolidator import consolidate
from .csv_exporter import export_csv, export_csv_bytes, EXPORT_FILENAME, EXPORT_MEDIA_TYPE
from .image_processor import ImageProcessor
from .ocr_service import (
    OCRService,
    BaseOCRModel,
    GoogleVisionOCRModel,
    GeminiOCRModel,
    MockOCRModel,
    create_ocr_model,
)


__all__ = [
    'normalize',
    'ModifierClassifier',
    'CATEGORY_KEYWORDS',
    'FILLER_WORDS',
    'classify',
    'default_classifier',
    'MenuSegmenter',
    'segment',
    'default_segmenter',
    'consolidate',
    'export_csv',
    'export_csv_bytes',
    'EXPORT_FILENAME',
    'EXPORT_MEDIA_TYPE',
    'ImageProcessor',
    'OCRService',
    'BaseOCRModel',
    'GoogleVisionOCRModel',
    'GeminiOCRModel',
    'MockOCRModel',
    'create_ocr_model',
]
