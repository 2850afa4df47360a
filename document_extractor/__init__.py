"""Document text extraction with standard (PDF/OCR) and AI pipelines."""

from document_extractor.ai_client import AIClient, UpstreamError, classify_error
from document_extractor.ai_extractor import AIExtractor
from document_extractor.config import AIConfig, ExtractorConfig, OCRConfig
from document_extractor.detector import SUPPORTED_MIME_TYPES, DocumentDetector
from document_extractor.exceptions import (
    AIConfigurationError,
    AIExtractionError,
    DocumentExtractorError,
    DocumentNotFoundError,
    ErrorKind,
    ExtractionError,
    InvalidMethodError,
    LoadFailureError,
    NoContentError,
    OCRFailureError,
    UnsupportedTypeError,
)
from document_extractor.extractor import StandardExtractor
from document_extractor.handler import DocumentHandler
from document_extractor.logger import setup_logging
from document_extractor.models import (
    AIExtractionResult,
    ExtractionInput,
    ExtractionMethod,
    MergedResult,
    PageText,
)
from document_extractor.ocr import OCRExtractor, OCRWorker
from document_extractor.parser import process_document
from document_extractor.pdf import PDFTextExtractor

__version__ = "0.1.0"

__all__ = [
    # High-level API
    "process_document",
    "setup_logging",
    # Core classes
    "DocumentHandler",
    "StandardExtractor",
    "AIExtractor",
    "PDFTextExtractor",
    "OCRExtractor",
    "OCRWorker",
    "AIClient",
    "DocumentDetector",
    "SUPPORTED_MIME_TYPES",
    # Error classification
    "UpstreamError",
    "classify_error",
    # Data models
    "ExtractionInput",
    "ExtractionMethod",
    "PageText",
    "AIExtractionResult",
    "MergedResult",
    # Configuration
    "OCRConfig",
    "AIConfig",
    "ExtractorConfig",
    # Exceptions
    "ErrorKind",
    "DocumentExtractorError",
    "UnsupportedTypeError",
    "InvalidMethodError",
    "ExtractionError",
    "NoContentError",
    "LoadFailureError",
    "DocumentNotFoundError",
    "OCRFailureError",
    "AIExtractionError",
    "AIConfigurationError",
]
