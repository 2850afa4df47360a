"""Document type validation and dispatch."""

from enum import Enum
from pathlib import Path

from document_extractor.exceptions import (
    DocumentNotFoundError,
    LoadFailureError,
    UnsupportedTypeError,
)
from document_extractor.logger import get_logger

logger = get_logger(__name__)


PDF_MIME_TYPE = "application/pdf"
SUPPORTED_MIME_TYPES = frozenset(
    {
        PDF_MIME_TYPE,
        "image/jpeg",
        "image/jpg",
        "image/png",
    }
)

PDF_SIGNATURE = b"%PDF"
PNG_SIGNATURE = b"\x89PNG"
JPEG_SIGNATURE = b"\xff\xd8\xff"


class DocumentKind(str, Enum):
    PDF = "pdf"
    IMAGE = "image"


def normalize_mime_type(mime_type: str) -> str:
    """Lower-case a MIME type and drop parameters such as ``; charset=``."""
    return (mime_type or "").split(";", 1)[0].strip().lower()


class DocumentDetector:
    """Validates declared MIME types and picks the extractor family."""

    def validate(self, mime_type: str) -> str:
        """Return the normalised MIME type or raise for anything unsupported."""
        normalized = normalize_mime_type(mime_type)
        if normalized not in SUPPORTED_MIME_TYPES:
            logger.warning(
                "Unsupported MIME type rejected",
                extra_data={"mime_type": mime_type},
            )
            raise UnsupportedTypeError(
                f"Unsupported file type: {mime_type}. "
                f"Supported types: {', '.join(sorted(SUPPORTED_MIME_TYPES))}",
                mime_type=mime_type,
            )
        return normalized

    def dispatch(self, mime_type: str) -> DocumentKind:
        """Map a declared MIME type to the extractor family that handles it."""
        normalized = normalize_mime_type(mime_type)
        if normalized == PDF_MIME_TYPE:
            return DocumentKind.PDF
        if normalized.startswith("image/"):
            return DocumentKind.IMAGE
        raise UnsupportedTypeError(f"Unsupported file type: {mime_type}", mime_type=mime_type)

    def check_signature(self, file_path: str, mime_type: str) -> bool:
        """Compare the file's magic bytes with the declared type.

        A mismatch is only logged; dispatch always trusts the declared type.
        Returns True when the signature agrees or cannot be determined.
        """
        try:
            with open(file_path, "rb") as f:
                head = f.read(8)
        except OSError:
            # Missing files are reported by the extractors with a typed error
            return True

        sniffed = self._sniff_mime(head)
        declared = normalize_mime_type(mime_type)
        if declared == "image/jpg":
            declared = "image/jpeg"

        if sniffed is None or sniffed == declared:
            return True

        logger.warning(
            "Declared MIME type does not match file signature",
            extra_data={
                "file_name": Path(file_path).name,
                "declared_mime_type": mime_type,
                "sniffed_mime_type": sniffed,
            },
        )
        return False

    @staticmethod
    def _sniff_mime(head: bytes) -> str | None:
        """Detect MIME type from file signature/magic bytes."""
        if head.startswith(PDF_SIGNATURE):
            return PDF_MIME_TYPE
        if head.startswith(PNG_SIGNATURE):
            return "image/png"
        if head.startswith(JPEG_SIGNATURE):
            return "image/jpeg"
        return None


def read_document(file_path: str) -> bytes:
    """Read a stored document, raising typed errors at the point of failure."""
    try:
        return Path(file_path).read_bytes()
    except FileNotFoundError as exc:
        raise DocumentNotFoundError(f"File not found: {file_path}") from exc
    except OSError as exc:
        raise LoadFailureError(f"Failed to read file {file_path}: {exc}") from exc
