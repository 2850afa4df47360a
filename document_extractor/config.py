"""Configuration classes for document extractor."""

import os
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class OCRConfig:
    """Configuration for OCR processing.

    Examples:
        >>> # Default configuration (English, automatic page segmentation)
        >>> config = OCRConfig()

        >>> # Custom Tesseract install with a shorter timeout
        >>> config = OCRConfig(tesseract_cmd="/opt/tesseract/bin/tesseract", timeout_seconds=30)
    """

    tesseract_cmd: str = "tesseract"
    """Path to tesseract binary. Default: "tesseract" (assumes in PATH)."""

    tessdata_prefix: Optional[str] = None
    """Optional path to tessdata directory. If None, uses system default."""

    languages: str = "eng"
    """OCR languages in Tesseract format (e.g., "eng", "eng+fra")."""

    psm_mode: int = 3
    """Page segmentation mode (0-13). Default: 3 (fully automatic).

    Common modes:
    - 3: Fully automatic page segmentation
    - 6: Uniform block of text (good for dense documents)
    - 11: Sparse text (for documents with few words)
    """

    timeout_seconds: int = 120
    """Upper bound for a single recognition run. 0 disables the timeout."""


@dataclass
class AIConfig:
    """Configuration for the remote language-model client."""

    api_key: Optional[str] = None
    model: str = "gpt-4o"
    base_url: Optional[str] = None
    timeout_seconds: float = 60.0
    """Per-request timeout for each model call."""

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def from_env(cls) -> "AIConfig":
        return cls(
            api_key=os.getenv("OPENAI_API_KEY") or None,
            model=os.getenv("OPENAI_MODEL", cls.model),
            base_url=os.getenv("OPENAI_BASE_URL") or None,
            timeout_seconds=float(os.getenv("AI_REQUEST_TIMEOUT", cls.timeout_seconds)),
        )


@dataclass
class ExtractorConfig:
    """Configuration for document extraction."""

    ocr_config: OCRConfig = field(default_factory=OCRConfig)
    ai_config: AIConfig = field(default_factory=AIConfig)

    @classmethod
    def from_env(cls) -> "ExtractorConfig":
        """Build configuration from environment variables.

        Recognised variables:
            TESSERACT_CMD, TESSDATA_PREFIX, OCR_LANGUAGES, OCR_TIMEOUT,
            OPENAI_API_KEY, OPENAI_MODEL, OPENAI_BASE_URL, AI_REQUEST_TIMEOUT
        """
        ocr_config = OCRConfig(
            tesseract_cmd=os.getenv("TESSERACT_CMD", OCRConfig.tesseract_cmd),
            tessdata_prefix=os.getenv("TESSDATA_PREFIX") or None,
            languages=os.getenv("OCR_LANGUAGES", OCRConfig.languages),
            timeout_seconds=int(os.getenv("OCR_TIMEOUT", OCRConfig.timeout_seconds)),
        )
        return cls(
            ocr_config=ocr_config,
            ai_config=AIConfig.from_env(),
        )
