"""Standard (local, deterministic) extraction pipeline."""

from pathlib import Path
from typing import Optional

from document_extractor.config import OCRConfig
from document_extractor.detector import DocumentDetector, DocumentKind
from document_extractor.exceptions import DocumentExtractorError
from document_extractor.logger import get_logger
from document_extractor.ocr import OCRExtractor
from document_extractor.pdf import PDFTextExtractor

logger = get_logger(__name__)

STANDARD_ERROR_PREFIX = "Failed to extract text: "


class StandardExtractor:
    """Dispatches a document to PDF text-layer parsing or Tesseract OCR.

    No remote dependency is involved. Every failure is re-raised with the
    same exception class, a ``"Failed to extract text: "`` message prefix
    and ``stage="standard"``.
    """

    def __init__(
        self,
        pdf_extractor: Optional[PDFTextExtractor] = None,
        ocr_extractor: Optional[OCRExtractor] = None,
        detector: Optional[DocumentDetector] = None,
        ocr_config: Optional[OCRConfig] = None,
    ):
        """Initialize the pipeline.

        Args:
            pdf_extractor: PDF text extractor. If None, creates default.
            ocr_extractor: Image OCR extractor. If None, creates default with ocr_config.
            detector: MIME type dispatcher. If None, creates default.
            ocr_config: OCR configuration. Only used if ocr_extractor is None.
        """
        self.pdf_extractor = pdf_extractor or PDFTextExtractor()
        self.ocr_extractor = ocr_extractor or OCRExtractor(config=ocr_config)
        self.detector = detector or DocumentDetector()

    def extract(self, file_path: str, mime_type: str) -> str:
        """Extract text from a document.

        Args:
            file_path: Path to the stored document
            mime_type: Declared MIME type

        Returns:
            Non-empty, trimmed text

        Raises:
            UnsupportedTypeError: If the MIME type has no standard extractor
            ExtractionError: If extraction fails (NoContent/LoadFailure/OCRFailure)
        """
        logger.debug(
            "Starting standard extraction",
            extra_data={"file_name": Path(file_path).name, "mime_type": mime_type},
        )

        try:
            kind = self.detector.dispatch(mime_type)
            if kind is DocumentKind.PDF:
                return self.pdf_extractor.extract(file_path)
            return self.ocr_extractor.extract(file_path)
        except DocumentExtractorError as exc:
            logger.error(
                "Standard extraction failed",
                extra_data={
                    "file_name": Path(file_path).name,
                    "mime_type": mime_type,
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
            )
            raise exc.with_prefix(STANDARD_ERROR_PREFIX, stage="standard") from exc
