"""Shared fixtures for document-extractor tests.

Tesseract and the OpenAI API are never called: OCR goes through a recording
worker factory and model calls through a mocked ``chat.completions.create``.
PDFs and images are generated on the fly with PyMuPDF and Pillow.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock

import fitz
import httpx
import pytest
from PIL import Image

from document_extractor.ai_client import AIClient
from document_extractor.config import AIConfig

OPENAI_URL = "https://api.openai.com/v1/chat/completions"


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "OPENAI_API_KEY",
        "OPENAI_MODEL",
        "OPENAI_BASE_URL",
        "AI_REQUEST_TIMEOUT",
        "TESSERACT_CMD",
        "TESSDATA_PREFIX",
        "OCR_LANGUAGES",
        "OCR_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_pdf(tmp_path):
    """Build a PDF with one page per entry; ``None`` makes a blank page."""

    def _make(pages, name="document.pdf"):
        path = tmp_path / name
        document = fitz.open()
        for text in pages:
            page = document.new_page()
            if text:
                page.insert_text((72, 72), text)
        document.save(str(path))
        document.close()
        return str(path)

    return _make


@pytest.fixture
def make_image(tmp_path):
    def _make(name="scan.jpg", fmt="JPEG"):
        path = tmp_path / name
        Image.new("RGB", (32, 16), color="white").save(path, fmt)
        return str(path)

    return _make


class RecordingWorker:
    def __init__(self, factory, config):
        self.factory = factory
        self.config = config

    def start(self):
        if self.factory.start_error is not None:
            raise self.factory.start_error

    def recognize(self, file_path):
        self.factory.recognized.append(file_path)
        if self.factory.recognize_error is not None:
            raise self.factory.recognize_error
        return self.factory.text

    def terminate(self):
        self.factory.released += 1


class RecordingWorkerFactory:
    """Worker factory that counts acquisitions and releases."""

    def __init__(self, text="  Recognised text  \n", recognize_error=None, start_error=None):
        self.text = text
        self.recognize_error = recognize_error
        self.start_error = start_error
        self.acquired = 0
        self.released = 0
        self.recognized = []

    def __call__(self, config):
        self.acquired += 1
        return RecordingWorker(self, config)


@pytest.fixture
def worker_factory():
    return RecordingWorkerFactory()


def completion(content):
    """Minimal stand-in for a ChatCompletion response."""
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def status_error(error_cls, status_code, body=None, message="upstream error"):
    response = httpx.Response(status_code, request=httpx.Request("POST", OPENAI_URL))
    return error_cls(message, response=response, body=body)


@pytest.fixture
def openai_client():
    client = MagicMock()
    client.chat.completions.create.return_value = completion("")
    return client


@pytest.fixture
def ai_client(openai_client):
    return AIClient(AIConfig(api_key="sk-test", model="gpt-test"), client=openai_client)
