"""AI extraction pipeline."""

import base64
from pathlib import Path
from typing import Optional

from document_extractor.ai_client import AIClient
from document_extractor.detector import DocumentDetector, DocumentKind, read_document
from document_extractor.logger import Timer, get_logger
from document_extractor.models import AIExtractionResult
from document_extractor.pdf import PDFTextExtractor

logger = get_logger(__name__)


class AIExtractor:
    """Runs a document through the remote model.

    Images go to the model directly: a raw-text pass, then a structured pass.
    PDFs are parsed locally first because the model cannot read them, and only
    their text is sent for the structured pass.
    """

    def __init__(
        self,
        client: AIClient,
        pdf_extractor: Optional[PDFTextExtractor] = None,
        detector: Optional[DocumentDetector] = None,
    ):
        self.client = client
        self.pdf_extractor = pdf_extractor or PDFTextExtractor()
        self.detector = detector or DocumentDetector()

    def extract(self, file_path: str, mime_type: str) -> AIExtractionResult:
        """Extract raw text and structured data.

        Raises:
            UnsupportedTypeError: If the MIME type has no AI path
            NoContentError, LoadFailureError: If PDF pre-extraction fails
            AIExtractionError: If a model call fails (classified)
        """
        kind = self.detector.dispatch(mime_type)

        with Timer("ai_extraction") as timer:
            if kind is DocumentKind.PDF:
                result = self._extract_pdf(file_path)
            else:
                result = self._extract_image(file_path, mime_type)

        logger.info(
            "AI extraction completed",
            extra_data={
                "file_name": Path(file_path).name,
                "mime_type": mime_type,
                "structured_fields": len(result.structured_data),
                "raw_text_characters": len(result.raw_text),
                "extraction_time_ms": timer.get_elapsed_ms(),
            },
        )
        return result

    def _extract_pdf(self, file_path: str) -> AIExtractionResult:
        text = self.pdf_extractor.extract(file_path)
        structured_data = self.client.extract_structured_data(text)
        return AIExtractionResult(structured_data=structured_data, raw_text=text)

    def _extract_image(self, file_path: str, mime_type: str) -> AIExtractionResult:
        image_base64 = base64.b64encode(read_document(file_path)).decode("ascii")

        raw_text = self.client.extract_raw_text(image_base64, mime_type)
        structured_data = self.client.extract_structured_data(image_base64, mime_type)
        return AIExtractionResult(structured_data=structured_data, raw_text=raw_text.strip())

