"""Tests for input validation."""
import pytest

from sarvam_gateway.services.validators import (
    TEXT_REQUIRED_MESSAGE,
    ValidationError,
    describe_extensions,
    file_extension,
    validate_document_upload,
    validate_text,
)

ALLOWED = (".pdf", ".zip")
MAX = 1024


class TestValidateText:
    """Tests for validate_text()."""

    def test_valid_text_is_stripped(self):
        assert validate_text("  Hello  ") == "Hello"

    @pytest.mark.parametrize("value", [None, "", "   ", "\n\t", 123, ["Hello"], {"text": "x"}])
    def test_rejects_missing_blank_or_non_string(self, value):
        with pytest.raises(ValidationError) as exc_info:
            validate_text(value)
        assert exc_info.value.message == TEXT_REQUIRED_MESSAGE
        assert exc_info.value.code == "TEXT_REQUIRED"

    def test_unicode_text(self):
        assert validate_text("नमस्ते") == "नमस्ते"


class TestDocumentUpload:
    """Tests for validate_document_upload()."""

    def test_accepts_pdf_and_zip(self):
        assert validate_document_upload("report.pdf", 10, ALLOWED, MAX) == ".pdf"
        assert validate_document_upload("bundle.zip", 10, ALLOWED, MAX) == ".zip"

    def test_extension_case_insensitive(self):
        assert validate_document_upload("REPORT.PDF", 10, ALLOWED, MAX) == ".pdf"

    def test_missing_file(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_document_upload(None, None, ALLOWED, MAX)
        assert exc_info.value.code == "FILE_REQUIRED"
        assert exc_info.value.message == "No file uploaded. Please upload a PDF (.pdf) or ZIP (.zip) file."

    @pytest.mark.parametrize("name", ["notes.txt", "image.png", "archive.tar.gz", "pdf", "report.pdf.exe"])
    def test_disallowed_extension(self, name):
        with pytest.raises(ValidationError) as exc_info:
            validate_document_upload(name, 10, ALLOWED, MAX)
        assert exc_info.value.code == "FILE_TYPE_NOT_ALLOWED"
        assert exc_info.value.message == "Only PDF (.pdf) or ZIP (.zip) files are allowed"

    def test_too_large(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_document_upload("report.pdf", MAX + 1, ALLOWED, MAX)
        assert exc_info.value.code == "FILE_TOO_LARGE"

    def test_exactly_at_limit(self):
        assert validate_document_upload("report.pdf", MAX, ALLOWED, MAX) == ".pdf"

    def test_unknown_size_is_accepted(self):
        assert validate_document_upload("report.pdf", None, ALLOWED, MAX) == ".pdf"


class TestHelpers:
    def test_describe_extensions(self):
        assert describe_extensions(ALLOWED) == "PDF (.pdf) or ZIP (.zip)"

    def test_file_extension_ignores_directories(self):
        assert file_extension("C:\\docs\\Report.Pdf") == ".pdf"
        assert file_extension("dir.zip/readme") == ""
