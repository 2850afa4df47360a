"""OpenAI-backed client for AI text and structured-data extraction."""

import json
from dataclasses import dataclass
from typing import Any, Optional

import openai
from openai import OpenAI

from document_extractor.config import AIConfig
from document_extractor.exceptions import (
    AIConfigurationError,
    AIExtractionError,
    ErrorKind,
)
from document_extractor.logger import Timer, get_logger

logger = get_logger(__name__)


RAW_TEXT_PROMPT = (
    "Extract all text content from this image. Return only the extracted text "
    "without any formatting or additional commentary."
)

STRUCTURED_DATA_PROMPT = (
    "You are an expert at extracting structured information from {source}. "
    "Analyze the {subject} and extract any structured information such as names, "
    "titles, positions, dates, addresses, phone numbers, emails, company/organization "
    "names, ID numbers, reference numbers, and any other structured data. Return the "
    "result as a JSON object with clear key-value pairs. If no structured data is "
    "found, return an empty object."
)

QUOTA_SIGNALS = frozenset({"insufficient_quota", "rate_limit_exceeded", "rate_limit_error"})
CONTENT_TOO_LARGE_SIGNALS = frozenset({"context_length_exceeded", "string_above_max_length"})
AUTH_SIGNALS = frozenset({"invalid_request_error", "invalid_api_key", "authentication_error"})

GUIDANCE = {
    ErrorKind.QUOTA_EXCEEDED: (
        "AI service quota exceeded. Please check your account usage limits "
        "or try using Standard Extraction instead."
    ),
    ErrorKind.AUTH_FAILURE: (
        "AI service authentication failed. Please check your API key configuration."
    ),
    ErrorKind.SERVICE_UNAVAILABLE: (
        "AI service temporarily unavailable. Please try Standard Extraction or try again later."
    ),
    ErrorKind.CONTENT_TOO_LARGE: (
        "Content too large for AI processing. Please try with a smaller document."
    ),
}


@dataclass(frozen=True)
class UpstreamError:
    """Normalised view of a failed remote call."""

    message: str
    status_code: Optional[int] = None
    error_type: Optional[str] = None
    error_code: Optional[str] = None
    timed_out: bool = False

    @classmethod
    def from_exception(cls, exc: BaseException) -> "UpstreamError":
        status_code = getattr(exc, "status_code", None)
        if status_code is None:
            status_code = getattr(exc, "status", None)
        error_type = getattr(exc, "type", None)
        error_code = getattr(exc, "code", None)

        return cls(
            message=getattr(exc, "message", None) or str(exc) or type(exc).__name__,
            status_code=status_code if isinstance(status_code, int) else None,
            error_type=str(error_type) if error_type else None,
            error_code=str(error_code) if error_code else None,
            timed_out=isinstance(exc, (openai.APITimeoutError, TimeoutError)),
        )

    @property
    def signals(self) -> set[str]:
        return {s for s in (self.error_type, self.error_code) if s}


def classify_error(upstream: UpstreamError) -> ErrorKind:
    """Map an upstream failure to exactly one error kind."""
    status = upstream.status_code
    signals = upstream.signals

    if status == 429 or signals & QUOTA_SIGNALS:
        return ErrorKind.QUOTA_EXCEEDED
    if status == 413 or (status in (None, 400) and signals & CONTENT_TOO_LARGE_SIGNALS):
        return ErrorKind.CONTENT_TOO_LARGE
    if status == 401 or signals & AUTH_SIGNALS:
        return ErrorKind.AUTH_FAILURE
    if upstream.timed_out or (status is not None and status >= 500):
        return ErrorKind.SERVICE_UNAVAILABLE
    return ErrorKind.GENERIC_FAILURE


def describe_error(kind: ErrorKind, upstream: UpstreamError) -> str:
    """User-facing guidance for a classified failure."""
    if kind in GUIDANCE:
        return GUIDANCE[kind]
    return (
        f"AI extraction failed: {upstream.message}. "
        "Try using Standard Extraction as an alternative."
    )


def parse_structured_response(content: Optional[str]) -> dict[str, Any]:
    """Parse a structured-data response, degrading to an empty mapping."""
    if not content:
        return {}

    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        logger.warning(
            "Failed to parse structured data JSON",
            extra_data={"error": str(exc), "response_length": len(content)},
        )
        return {}

    if not isinstance(data, dict):
        logger.warning(
            "Structured data response is not a JSON object",
            extra_data={"response_type": type(data).__name__},
        )
        return {}

    return data


class AIClient:
    """Wraps the chat-completions API for the raw-text and structured passes.

    Requests are never retried here; ``max_retries`` is pinned to 0.
    """

    def __init__(self, config: AIConfig, client: Optional[OpenAI] = None):
        if client is None:
            if not config.enabled:
                raise AIConfigurationError(
                    "AI extraction is not configured. Set OPENAI_API_KEY to enable it."
                )
            client = OpenAI(
                api_key=config.api_key,
                base_url=config.base_url,
                timeout=config.timeout_seconds,
                max_retries=0,
            )
        self.config = config
        self.client = client

    @classmethod
    def from_config(cls, config: Optional[AIConfig] = None) -> "AIClient":
        """Build a client from configuration, reading the environment if none is given.

        Raises:
            AIConfigurationError: If no API key is configured
        """
        return cls(config or AIConfig.from_env())

    def extract_raw_text(self, image_base64: str, mime_type: str) -> str:
        """Ask the model for the plain text of an image."""
        messages = [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": RAW_TEXT_PROMPT},
                    _image_part(image_base64, mime_type),
                ],
            }
        ]
        return self._complete(messages, pass_name="raw_text")

    def extract_structured_data(self, content: str, mime_type: Optional[str] = None) -> dict[str, Any]:
        """Ask the model for a flat JSON object of structured fields.

        Args:
            content: Base64 image data when ``mime_type`` is given, plain text otherwise
            mime_type: Image MIME type, or None for text input

        Returns:
            The parsed mapping, or ``{}`` if the response is not a JSON object
        """
        if mime_type:
            messages = [
                {
                    "role": "system",
                    "content": STRUCTURED_DATA_PROMPT.format(source="images", subject="image"),
                },
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": "Analyze this image and extract structured information:"},
                        _image_part(content, mime_type),
                    ],
                },
            ]
        else:
            messages = [
                {
                    "role": "system",
                    "content": STRUCTURED_DATA_PROMPT.format(source="text", subject="text"),
                },
                {"role": "user", "content": f"Text to analyze:\n{content}"},
            ]

        response_text = self._complete(messages, pass_name="structured_data", json_mode=True)
        return parse_structured_response(response_text)

    def _complete(self, messages: list[dict[str, Any]], pass_name: str, json_mode: bool = False) -> str:
        request: dict[str, Any] = {"model": self.config.model, "messages": messages}
        if json_mode:
            request["response_format"] = {"type": "json_object"}

        with Timer(pass_name) as timer:
            try:
                response = self.client.chat.completions.create(**request)
            except openai.OpenAIError as exc:
                raise self._classify(exc, pass_name) from exc

        content = response.choices[0].message.content if response.choices else None

        logger.info(
            "AI model call completed",
            extra_data={
                "pass": pass_name,
                "model": self.config.model,
                "characters_returned": len(content or ""),
                "call_time_ms": timer.get_elapsed_ms(),
            },
        )
        return content or ""

    @staticmethod
    def _classify(exc: Exception, pass_name: str) -> AIExtractionError:
        upstream = UpstreamError.from_exception(exc)
        kind = classify_error(upstream)

        logger.error(
            "AI model call failed",
            extra_data={
                "pass": pass_name,
                "error_kind": kind.value,
                "status_code": upstream.status_code,
                "error_type": upstream.error_type,
                "error_code": upstream.error_code,
                "error": upstream.message,
            },
        )
        return AIExtractionError(describe_error(kind, upstream), kind=kind, upstream=upstream)


def _image_part(image_base64: str, mime_type: str) -> dict[str, Any]:
    # image/jpg is not a registered type; data URLs need image/jpeg
    if mime_type == "image/jpg":
        mime_type = "image/jpeg"
    return {
        "type": "image_url",
        "image_url": {"url": f"data:{mime_type};base64,{image_base64}"},
    }
