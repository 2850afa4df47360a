"""Data models for document extractor."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from document_extractor.exceptions import InvalidMethodError


class ExtractionMethod(str, Enum):
    STANDARD = "standard"
    AI = "ai"

    @classmethod
    def parse(cls, value: "str | ExtractionMethod") -> "ExtractionMethod":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            allowed = ", ".join(m.value for m in cls)
            raise InvalidMethodError(
                f"Unknown processing method: {value!r} (expected one of: {allowed})"
            ) from exc


@dataclass
class ExtractionInput:
    """A single extraction request. The caller owns ``file_path``."""

    file_path: str
    mime_type: str
    method: ExtractionMethod = ExtractionMethod.STANDARD

    def __post_init__(self):
        self.method = ExtractionMethod.parse(self.method)


@dataclass
class PageText:
    """Text recovered from one PDF page."""

    page_number: int  # 1-based
    text: str
    succeeded: bool = True


@dataclass
class AIExtractionResult:
    """Result of the AI pipeline."""

    structured_data: dict[str, Any] = field(default_factory=dict)
    raw_text: str = ""
    error_occurred: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "structuredData": self.structured_data,
            "rawText": self.raw_text,
            "errorOccurred": self.error_occurred,
        }


@dataclass
class MergedResult:
    """Result of one orchestration call, handed to the caller as-is."""

    standard_extracted_text: str
    ai_extracted_data: Optional[AIExtractionResult]
    raw_extracted_text: str
    processing_time: int  # milliseconds

    def to_dict(self) -> dict[str, Any]:
        return {
            "standardExtractedText": self.standard_extracted_text,
            "aiExtractedData": (
                self.ai_extracted_data.to_dict() if self.ai_extracted_data is not None else None
            ),
            "rawExtractedText": self.raw_extracted_text,
            "processingTime": self.processing_time,
        }
