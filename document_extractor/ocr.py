"""Tesseract OCR extraction with scoped recognition workers."""

import os
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, Optional

import pytesseract
from PIL import Image, UnidentifiedImageError

from document_extractor.config import OCRConfig
from document_extractor.exceptions import (
    DocumentNotFoundError,
    ExtractionError,
    LoadFailureError,
    NoContentError,
    OCRFailureError,
)
from document_extractor.logger import Timer, get_logger

logger = get_logger(__name__)


class OCRWorker:
    """A recognition worker bound to one language model.

    A worker is single-use: ``start()`` it, call ``recognize()``, then
    ``terminate()`` it. Images opened by the worker stay referenced until
    termination so their memory is released in one place.
    """

    def __init__(self, config: OCRConfig):
        self.config = config
        self.started = False
        self.terminated = False
        self._images: list[Image.Image] = []

    def start(self) -> None:
        """Point pytesseract at the configured binary and check the language model."""
        if self.config.tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = self.config.tesseract_cmd
        if self.config.tessdata_prefix:
            os.environ["TESSDATA_PREFIX"] = self.config.tessdata_prefix

        try:
            version = pytesseract.get_tesseract_version()
            available = set(pytesseract.get_languages(config=""))
        except (pytesseract.TesseractNotFoundError, pytesseract.TesseractError, OSError) as exc:
            raise OCRFailureError(f"Tesseract is not available: {exc}") from exc

        missing = [lang for lang in self.config.languages.split("+") if lang not in available]
        if missing:
            raise OCRFailureError(
                f"Tesseract language data not installed: {', '.join(missing)}"
            )

        self.started = True
        logger.debug(
            "OCR worker started",
            extra_data={"tesseract_version": version, "languages": self.config.languages},
        )

    def recognize(self, file_path: str) -> str:
        if not self.started or self.terminated:
            raise OCRFailureError("OCR worker is not running")

        try:
            image = Image.open(file_path)
        except FileNotFoundError as exc:
            raise DocumentNotFoundError(f"File not found: {file_path}") from exc
        except (UnidentifiedImageError, OSError) as exc:
            raise LoadFailureError(f"Failed to load image: {exc}") from exc
        self._images.append(image)

        logger.debug(
            "Starting OCR on image",
            extra_data={
                "file_name": Path(file_path).name,
                "image_format": image.format,
                "image_dimensions": f"{image.size[0]}x{image.size[1]}",
            },
        )

        try:
            return pytesseract.image_to_string(
                image,
                lang=self.config.languages,
                config=f"--psm {self.config.psm_mode}",
                timeout=self.config.timeout_seconds,
            )
        except pytesseract.TesseractError as exc:
            raise OCRFailureError(f"Tesseract failed: {exc}") from exc
        except RuntimeError as exc:
            # pytesseract signals a timeout with a bare RuntimeError
            raise OCRFailureError(f"OCR timed out after {self.config.timeout_seconds}s") from exc

    def terminate(self) -> None:
        for image in self._images:
            image.close()
        self._images.clear()
        self.started = False
        self.terminated = True


class OCRExtractor:
    """Extracts text from images, one dedicated worker per call."""

    def __init__(
        self,
        config: Optional[OCRConfig] = None,
        worker_factory: Optional[Callable[[OCRConfig], OCRWorker]] = None,
    ):
        self.config = config or OCRConfig()
        self.worker_factory = worker_factory or OCRWorker

    @contextmanager
    def acquire_worker(self) -> Iterator[OCRWorker]:
        """Yield a started worker and terminate it on every exit path."""
        worker = self.worker_factory(self.config)
        try:
            worker.start()
            yield worker
        finally:
            worker.terminate()

    def extract(self, file_path: str) -> str:
        """Extract text from an image file.

        Raises:
            DocumentNotFoundError: If the file does not exist
            LoadFailureError: If the file is not a readable image
            OCRFailureError: If recognition fails or times out
            NoContentError: If no text is recognised
        """
        file_name = Path(file_path).name

        try:
            with Timer("image_ocr") as timer, self.acquire_worker() as worker:
                text = worker.recognize(file_path).strip()
        except ExtractionError as exc:
            logger.error(
                "Image OCR failed",
                extra_data={
                    "file_name": file_name,
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
            )
            raise
        except Exception as exc:
            logger.error(
                "Image OCR failed",
                extra_data={
                    "file_name": file_name,
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
                exc_info=True,
            )
            raise OCRFailureError(f"Failed to extract text from image using OCR: {exc}") from exc

        if not text:
            raise NoContentError("No text content recognised in image")

        logger.info(
            "Image OCR completed",
            extra_data={
                "file_name": file_name,
                "characters_extracted": len(text),
                "ocr_time_ms": timer.get_elapsed_ms(),
            },
        )
        return text
