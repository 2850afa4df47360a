import pytesseract
import pytest

from document_extractor.config import OCRConfig
from document_extractor.exceptions import (
    DocumentNotFoundError,
    LoadFailureError,
    NoContentError,
    OCRFailureError,
)
from document_extractor.ocr import OCRExtractor, OCRWorker


@pytest.fixture
def fake_tesseract(monkeypatch):
    """Stub out the tesseract binary behind pytesseract."""
    calls = {}

    def image_to_string(image, lang=None, config="", timeout=0):
        calls.update(lang=lang, config=config, timeout=timeout, size=image.size)
        return calls.get("text", " Scanned text \n")

    monkeypatch.setattr(pytesseract, "get_tesseract_version", lambda: "5.3.0")
    monkeypatch.setattr(pytesseract, "get_languages", lambda config="": ["eng", "osd"])
    monkeypatch.setattr(pytesseract, "image_to_string", image_to_string)
    return calls


class TrackingWorker(OCRWorker):
    terminations = 0

    def terminate(self):
        TrackingWorker.terminations += 1
        super().terminate()


@pytest.fixture
def tracking_factory():
    TrackingWorker.terminations = 0
    return TrackingWorker


def test_extract_returns_trimmed_text(make_image, worker_factory):
    extractor = OCRExtractor(worker_factory=worker_factory)

    assert extractor.extract(make_image()) == "Recognised text"
    assert worker_factory.acquired == worker_factory.released == 1


def test_worker_released_when_recognition_fails(make_image, worker_factory):
    worker_factory.recognize_error = RuntimeError("engine crashed")
    extractor = OCRExtractor(worker_factory=worker_factory)

    with pytest.raises(OCRFailureError):
        extractor.extract(make_image())

    assert worker_factory.acquired == worker_factory.released == 1


def test_worker_released_when_start_fails(make_image, worker_factory):
    worker_factory.start_error = OCRFailureError("language data missing")
    extractor = OCRExtractor(worker_factory=worker_factory)

    with pytest.raises(OCRFailureError, match="language data missing"):
        extractor.extract(make_image())

    assert worker_factory.acquired == worker_factory.released == 1
    assert worker_factory.recognized == []


def test_each_call_gets_its_own_worker(make_image, worker_factory):
    extractor = OCRExtractor(worker_factory=worker_factory)
    path = make_image()

    extractor.extract(path)
    extractor.extract(path)
    worker_factory.recognize_error = ValueError("bad pixels")
    with pytest.raises(OCRFailureError):
        extractor.extract(path)

    assert worker_factory.acquired == worker_factory.released == 3


def test_empty_recognition_is_no_content(make_image, worker_factory):
    worker_factory.text = "   \n"

    with pytest.raises(NoContentError):
        OCRExtractor(worker_factory=worker_factory).extract(make_image())


def test_real_worker_passes_config_to_tesseract(make_image, fake_tesseract, tracking_factory):
    config = OCRConfig(psm_mode=6, timeout_seconds=15)
    extractor = OCRExtractor(config=config, worker_factory=tracking_factory)

    assert extractor.extract(make_image()) == "Scanned text"
    assert fake_tesseract["lang"] == "eng"
    assert fake_tesseract["config"] == "--psm 6"
    assert fake_tesseract["timeout"] == 15
    assert fake_tesseract["size"] == (32, 16)
    assert TrackingWorker.terminations == 1


def test_real_worker_released_when_tesseract_errors(make_image, fake_tesseract, monkeypatch, tracking_factory):
    def failing(*args, **kwargs):
        raise pytesseract.TesseractError(1, "Error during processing")

    monkeypatch.setattr(pytesseract, "image_to_string", failing)

    with pytest.raises(OCRFailureError, match="Tesseract failed"):
        OCRExtractor(worker_factory=tracking_factory).extract(make_image())

    assert TrackingWorker.terminations == 1


def test_recognition_timeout_is_ocr_failure(make_image, fake_tesseract, monkeypatch, tracking_factory):
    def slow(*args, **kwargs):
        raise RuntimeError("Tesseract process timeout")

    monkeypatch.setattr(pytesseract, "image_to_string", slow)

    with pytest.raises(OCRFailureError, match="timed out"):
        OCRExtractor(worker_factory=tracking_factory).extract(make_image())

    assert TrackingWorker.terminations == 1


def test_missing_language_model_fails_start(make_image, fake_tesseract, monkeypatch, tracking_factory):
    monkeypatch.setattr(pytesseract, "get_languages", lambda config="": ["osd"])

    with pytest.raises(OCRFailureError, match="eng"):
        OCRExtractor(worker_factory=tracking_factory).extract(make_image())

    assert TrackingWorker.terminations == 1


def test_tesseract_not_installed(make_image, monkeypatch, tracking_factory):
    def missing():
        raise pytesseract.TesseractNotFoundError()

    monkeypatch.setattr(pytesseract, "get_tesseract_version", missing)

    with pytest.raises(OCRFailureError, match="not available"):
        OCRExtractor(worker_factory=tracking_factory).extract(make_image())

    assert TrackingWorker.terminations == 1


def test_missing_image_file(tmp_path, fake_tesseract, tracking_factory):
    with pytest.raises(DocumentNotFoundError):
        OCRExtractor(worker_factory=tracking_factory).extract(str(tmp_path / "gone.png"))

    assert TrackingWorker.terminations == 1


def test_unreadable_image_is_load_failure(tmp_path, fake_tesseract, tracking_factory):
    path = tmp_path / "broken.png"
    path.write_bytes(b"not an image")

    with pytest.raises(LoadFailureError):
        OCRExtractor(worker_factory=tracking_factory).extract(str(path))


def test_terminated_worker_cannot_recognize(make_image):
    worker = OCRWorker(OCRConfig())
    worker.terminate()

    with pytest.raises(OCRFailureError, match="not running"):
        worker.recognize(make_image())
