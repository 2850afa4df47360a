"""PyMuPDF-based PDF text-layer extraction."""

from pathlib import Path

import fitz  # PyMuPDF

from document_extractor.detector import read_document
from document_extractor.exceptions import LoadFailureError, NoContentError
from document_extractor.logger import Timer, get_logger
from document_extractor.models import PageText

logger = get_logger(__name__)


class PDFTextExtractor:
    """Extracts the text layer of a PDF page by page.

    Pages are read sequentially so the output keeps document order. A page
    that fails is logged and skipped; only a document that cannot be opened,
    or that yields no text at all, is an error.
    """

    def extract(self, file_path: str) -> str:
        """Extract text from all pages, one line group per page.

        Raises:
            DocumentNotFoundError: If the file does not exist
            LoadFailureError: If the file cannot be read or parsed as a PDF
            NoContentError: If no page yields any text
        """
        file_name = Path(file_path).name

        with Timer("pdf_extraction") as timer:
            pages = self.extract_pages(file_path)

        page_texts = [page.text.strip() for page in pages if page.succeeded and page.text.strip()]
        text = "\n".join(page_texts)

        failed_pages = [page.page_number for page in pages if not page.succeeded]
        if not text:
            logger.warning(
                "No text content found in PDF",
                extra_data={
                    "file_name": file_name,
                    "page_count": len(pages),
                    "failed_pages": failed_pages,
                },
            )
            raise NoContentError("No text content found in PDF document")

        logger.info(
            "PDF text extraction completed",
            extra_data={
                "file_name": file_name,
                "page_count": len(pages),
                "pages_with_text": len(page_texts),
                "failed_pages": failed_pages,
                "characters_extracted": len(text),
                "extraction_time_ms": timer.get_elapsed_ms(),
            },
        )
        return text

    def extract_pages(self, file_path: str) -> list[PageText]:
        """Return one PageText per page, in page order."""
        file_bytes = read_document(file_path)
        file_name = Path(file_path).name

        try:
            document = fitz.open(stream=file_bytes, filetype="pdf")
        except Exception as exc:
            logger.error(
                "Failed to open PDF",
                extra_data={
                    "file_name": file_name,
                    "file_size_bytes": len(file_bytes),
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
            )
            raise LoadFailureError(f"Failed to load PDF document: {exc}") from exc

        with document:
            page_count = document.page_count
            logger.debug(
                "PDF loaded",
                extra_data={
                    "file_name": file_name,
                    "file_size_bytes": len(file_bytes),
                    "page_count": page_count,
                },
            )
            # A document without pages falls through to NoContentError in extract()
            return [
                self._read_page(document, page_number, file_name)
                for page_number in range(1, page_count + 1)
            ]

    def _read_page(self, document: fitz.Document, page_number: int, file_name: str) -> PageText:
        try:
            page = document.load_page(page_number - 1)
            text = " ".join(self._page_fragments(page))
        except Exception as exc:
            logger.warning(
                f"Failed to extract text from page {page_number}",
                extra_data={
                    "file_name": file_name,
                    "page_number": page_number,
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
            )
            return PageText(page_number=page_number, text="", succeeded=False)

        return PageText(page_number=page_number, text=text)

    @staticmethod
    def _page_fragments(page: fitz.Page) -> list[str]:
        """Text fragments of a page in content-stream order."""
        # Each entry is (x0, y0, x1, y1, word, block_no, line_no, word_no)
        return [word[4] for word in page.get_text("words")]

