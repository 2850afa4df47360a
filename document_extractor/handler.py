"""Extraction orchestration."""

from pathlib import Path
from typing import Optional

from document_extractor.ai_client import AIClient
from document_extractor.ai_extractor import AIExtractor
from document_extractor.config import ExtractorConfig
from document_extractor.detector import DocumentDetector
from document_extractor.exceptions import (
    AIConfigurationError,
    DocumentExtractorError,
    ErrorKind,
)
from document_extractor.extractor import StandardExtractor
from document_extractor.logger import Timer, get_logger
from document_extractor.models import (
    AIExtractionResult,
    ExtractionInput,
    ExtractionMethod,
    MergedResult,
)
from document_extractor.pdf import PDFTextExtractor

logger = get_logger(__name__)

AI_NOT_CONFIGURED_REASON = "AI extraction is not configured. Set OPENAI_API_KEY to enable it."


class DocumentHandler:
    """Runs standard extraction and, on request, AI extraction for one document.

    Standard extraction is the baseline: if it fails, the whole call fails.
    AI extraction is an enhancement: any failure there is absorbed into a
    fallback result that carries the standard text. The handler never deletes
    the input file.
    """

    def __init__(
        self,
        standard_extractor: Optional[StandardExtractor] = None,
        ai_extractor: Optional[AIExtractor] = None,
        detector: Optional[DocumentDetector] = None,
    ) -> None:
        """Initialize document handler.

        Args:
            standard_extractor: Standard pipeline. If None, creates default.
            ai_extractor: AI pipeline. If None, AI requests fall back to standard text.
            detector: MIME type validator. If None, creates default.
        """
        self.detector = detector or DocumentDetector()
        self.standard_extractor = standard_extractor or StandardExtractor(detector=self.detector)
        self.ai_extractor = ai_extractor

    @classmethod
    def from_config(cls, config: Optional[ExtractorConfig] = None) -> "DocumentHandler":
        """Wire default extractors; the AI pipeline is built only when a key is configured."""
        config = config or ExtractorConfig.from_env()
        detector = DocumentDetector()
        pdf_extractor = PDFTextExtractor()
        standard_extractor = StandardExtractor(
            pdf_extractor=pdf_extractor,
            detector=detector,
            ocr_config=config.ocr_config,
        )

        try:
            client = AIClient.from_config(config.ai_config)
        except AIConfigurationError as exc:
            logger.warning("AI extraction disabled", extra_data={"reason": str(exc)})
            ai_extractor = None
        else:
            ai_extractor = AIExtractor(client, pdf_extractor=pdf_extractor, detector=detector)

        return cls(
            standard_extractor=standard_extractor,
            ai_extractor=ai_extractor,
            detector=detector,
        )

    def process(self, request: ExtractionInput) -> MergedResult:
        """Extract text from a document and merge the pipeline results.

        Args:
            request: File path, declared MIME type and processing method

        Returns:
            MergedResult with standard text, optional AI data and timing

        Raises:
            UnsupportedTypeError: If the MIME type is not supported
            ExtractionError: If standard extraction fails, whatever the method
        """
        file_name = Path(request.file_path).name

        with Timer("processing") as timer:
            mime_type = self.detector.validate(request.mime_type)
            self.detector.check_signature(request.file_path, mime_type)

            logger.info(
                "Processing document",
                extra_data={
                    "file_name": file_name,
                    "mime_type": mime_type,
                    "method": request.method.value,
                },
            )

            standard_text = self.standard_extractor.extract(request.file_path, mime_type)

            if request.method is ExtractionMethod.AI:
                ai_result = self._run_ai(request.file_path, mime_type, standard_text)
                if ai_result.error_occurred:
                    raw_text = standard_text
                else:
                    raw_text = ai_result.raw_text or standard_text
            else:
                ai_result = None
                raw_text = standard_text

        result = MergedResult(
            standard_extracted_text=standard_text,
            ai_extracted_data=ai_result,
            raw_extracted_text=raw_text,
            processing_time=timer.get_elapsed_ms(),
        )

        logger.info(
            "Document processed",
            extra_data={
                "file_name": file_name,
                "method": request.method.value,
                "ai_error": ai_result.error_occurred if ai_result else None,
                "characters_extracted": len(raw_text),
                "processing_time_ms": result.processing_time,
            },
        )
        return result

    def _run_ai(self, file_path: str, mime_type: str, standard_text: str) -> AIExtractionResult:
        if self.ai_extractor is None:
            logger.warning(
                "AI extraction requested but not configured, using standard text",
                extra_data={"file_name": Path(file_path).name},
            )
            return self._fallback(standard_text, AI_NOT_CONFIGURED_REASON, ErrorKind.AI_NOT_CONFIGURED)

        try:
            return self.ai_extractor.extract(file_path, mime_type)
        except DocumentExtractorError as exc:
            logger.warning(
                "AI extraction failed, using standard text",
                extra_data={
                    "file_name": Path(file_path).name,
                    "error_kind": exc.kind.value,
                    "error": str(exc),
                },
            )
            return self._fallback(standard_text, str(exc), exc.kind)
        except Exception as exc:
            logger.error(
                "Unexpected AI extraction error, using standard text",
                extra_data={
                    "file_name": Path(file_path).name,
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
                exc_info=True,
            )
            return self._fallback(
                standard_text,
                f"AI extraction failed: {exc}. Try using Standard Extraction as an alternative.",
                ErrorKind.GENERIC_FAILURE,
            )

    @staticmethod
    def _fallback(standard_text: str, reason: str, kind: ErrorKind) -> AIExtractionResult:
        return AIExtractionResult(
            structured_data={
                "error": "AI extraction failed",
                "reason": reason,
                "errorKind": kind.value,
                "fallback": "Using standard extraction as fallback",
            },
            raw_text=standard_text,
            error_occurred=True,
        )
