"""High-level API for document extraction."""

import mimetypes
from pathlib import Path
from typing import Optional, Union

from document_extractor.config import ExtractorConfig
from document_extractor.handler import DocumentHandler
from document_extractor.logger import request_context
from document_extractor.models import ExtractionInput, ExtractionMethod, MergedResult


def process_document(
    file_path: Union[str, Path],
    mime_type: Optional[str] = None,
    method: Union[str, ExtractionMethod] = ExtractionMethod.STANDARD,
    config: Optional[ExtractorConfig] = None,
    handler: Optional[DocumentHandler] = None,
    request_id: Optional[str] = None,
) -> MergedResult:
    """Extract text from a stored document.

    Convenience wrapper around ``DocumentHandler.process``. The file is only
    read; deleting it stays the caller's job.

    Args:
        file_path: Path to the document
        mime_type: Declared MIME type (guessed from the extension if not provided)
        method: "standard" or "ai"
        config: Extractor configuration (read from the environment if not provided)
        handler: Pre-built handler to reuse across calls
        request_id: Correlation ID for log lines (generated if not provided)

    Returns:
        MergedResult; call ``to_dict()`` for the JSON shape

    Raises:
        InvalidMethodError: If method is neither "standard" nor "ai"
        UnsupportedTypeError: If the document type is not supported
        ExtractionError: If standard extraction fails

    Examples:
        >>> result = process_document("invoice.jpg", method="ai")
        >>> result.ai_extracted_data.structured_data
        {'invoiceId': 'INV-001', 'date': 'Jan 5'}
    """
    path = str(file_path)
    if not mime_type:
        mime_type, _ = mimetypes.guess_type(path)

    request = ExtractionInput(file_path=path, mime_type=mime_type or "", method=method)
    handler = handler or DocumentHandler.from_config(config)

    with request_context(request_id):
        return handler.process(request)
