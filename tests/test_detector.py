import pytest

from document_extractor.detector import (
    DocumentDetector,
    DocumentKind,
    normalize_mime_type,
    read_document,
)
from document_extractor.exceptions import (
    DocumentNotFoundError,
    LoadFailureError,
    UnsupportedTypeError,
)


@pytest.mark.parametrize(
    "mime_type, expected",
    [
        ("application/pdf", "application/pdf"),
        ("IMAGE/PNG", "image/png"),
        (" image/jpeg ; charset=binary", "image/jpeg"),
        ("image/jpg", "image/jpg"),
    ],
)
def test_validate_accepts_supported_types(mime_type, expected):
    assert DocumentDetector().validate(mime_type) == expected


@pytest.mark.parametrize("mime_type", ["application/zip", "image/gif", "text/plain", "", None])
def test_validate_rejects_everything_else(mime_type):
    with pytest.raises(UnsupportedTypeError) as excinfo:
        DocumentDetector().validate(mime_type)

    assert excinfo.value.mime_type == mime_type


def test_dispatch():
    detector = DocumentDetector()

    assert detector.dispatch("application/pdf") is DocumentKind.PDF
    assert detector.dispatch("image/png") is DocumentKind.IMAGE
    # Dispatch alone only looks at the image/ prefix
    assert detector.dispatch("image/tiff") is DocumentKind.IMAGE
    with pytest.raises(UnsupportedTypeError, match="application/zip"):
        detector.dispatch("application/zip")


def test_normalize_mime_type():
    assert normalize_mime_type(None) == ""
    assert normalize_mime_type("Image/JPEG;q=1") == "image/jpeg"


def test_check_signature(make_pdf, make_image, tmp_path):
    detector = DocumentDetector()

    assert detector.check_signature(make_pdf(["Hello"]), "application/pdf")
    assert detector.check_signature(make_image(), "image/jpg")
    assert detector.check_signature(make_image("scan.png", "PNG"), "image/png")
    assert not detector.check_signature(make_image("scan.png", "PNG"), "application/pdf")
    # Unknown or missing content is not treated as a mismatch
    assert detector.check_signature(str(tmp_path / "missing.pdf"), "application/pdf")


def test_read_document(tmp_path):
    path = tmp_path / "blob.bin"
    path.write_bytes(b"\x00\x01")

    assert read_document(str(path)) == b"\x00\x01"
    with pytest.raises(DocumentNotFoundError):
        read_document(str(tmp_path / "missing.bin"))
    with pytest.raises(LoadFailureError):
        read_document(str(tmp_path))
