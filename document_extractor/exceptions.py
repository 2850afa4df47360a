"""Custom exceptions for document extractor."""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Stable identifiers for every failure the extractor can report."""

    UNSUPPORTED_TYPE = "unsupported_type"
    INVALID_METHOD = "invalid_method"
    NO_CONTENT = "no_content"
    LOAD_FAILURE = "load_failure"
    OCR_FAILURE = "ocr_failure"
    QUOTA_EXCEEDED = "quota_exceeded"
    AUTH_FAILURE = "auth_failure"
    SERVICE_UNAVAILABLE = "service_unavailable"
    CONTENT_TOO_LARGE = "content_too_large"
    GENERIC_FAILURE = "generic_failure"
    AI_NOT_CONFIGURED = "ai_not_configured"


class DocumentExtractorError(Exception):
    """Base exception for document extractor errors."""

    kind: ErrorKind = ErrorKind.GENERIC_FAILURE

    def __init__(self, message: str, stage: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.stage = stage

    def with_prefix(self, prefix: str, stage: str) -> "DocumentExtractorError":
        """Return a copy of this error with a prefixed message and a stage tag."""
        wrapped = type(self).__new__(type(self))
        wrapped.__dict__.update(self.__dict__)
        DocumentExtractorError.__init__(wrapped, f"{prefix}{self.message}", stage=stage)
        return wrapped


class UnsupportedTypeError(DocumentExtractorError):
    """Raised when document type is not supported."""

    kind = ErrorKind.UNSUPPORTED_TYPE

    def __init__(self, message: str, mime_type: Optional[str] = None, stage: Optional[str] = None):
        super().__init__(message, stage=stage)
        self.mime_type = mime_type


class InvalidMethodError(DocumentExtractorError):
    """Raised when the requested processing method is unknown."""

    kind = ErrorKind.INVALID_METHOD


class ExtractionError(DocumentExtractorError):
    """Raised when standard text extraction fails."""

    pass


class NoContentError(ExtractionError):
    """Raised when a document yields no usable text."""

    kind = ErrorKind.NO_CONTENT


class LoadFailureError(ExtractionError):
    """Raised when a file cannot be read or parsed as its declared format."""

    kind = ErrorKind.LOAD_FAILURE


class DocumentNotFoundError(LoadFailureError):
    """Raised when the input file does not exist."""

    pass


class OCRFailureError(ExtractionError):
    """Raised when the recognition engine fails."""

    kind = ErrorKind.OCR_FAILURE


class AIExtractionError(DocumentExtractorError):
    """Raised when a remote model call fails.

    ``kind`` is decided per instance by the AI client's error classification.
    ``upstream`` holds the normalised upstream error, if any.
    """

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.GENERIC_FAILURE,
        upstream=None,
        stage: Optional[str] = None,
    ):
        super().__init__(message, stage=stage)
        self.kind = kind
        self.upstream = upstream


class AIConfigurationError(DocumentExtractorError):
    """Raised when an AI client is requested without credentials."""

    kind = ErrorKind.AI_NOT_CONFIGURED
