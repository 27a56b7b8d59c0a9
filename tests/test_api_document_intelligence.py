"""Tests for the document intelligence HTTP routes."""
import pytest

from conftest import StubProvider

PROCESS = "/api/document-intelligence/process"
PDF = b"%PDF-1.4\n%test document\n"


def temp_files(tmp_path):
    uploads = tmp_path / "uploads"
    return list(uploads.glob("temp_*")) if uploads.exists() else []


class TestProcess:
    def test_success(self, client, provider, tmp_path):
        r = client.post(
            PROCESS,
            files={"file": ("report.pdf", PDF, "application/pdf")},
            data={"language": "hi-IN", "output_format": "md"},
        )
        assert r.status_code == 200
        body = r.json()
        assert body["success"] is True
        assert body["message"] == "Document processed successfully"
        assert body["data"]["jobId"] == "job_123"
        assert body["data"]["jobState"] == "Completed"
        assert body["data"]["pageMetrics"]["total_pages"] == 2
        assert "output.zip" in body["data"]["downloadLinks"]["download_urls"]

        assert provider.calls[0] == ("create_document_job", {"language": "hi-IN", "output_format": "md"})
        assert provider.job.uploaded_content == PDF
        assert temp_files(tmp_path) == []

    def test_defaults(self, client, provider):
        client.post(PROCESS, files={"file": ("report.pdf", PDF, "application/pdf")})
        assert provider.calls[0][1] == {"language": "en-IN", "output_format": "html"}

    def test_empty_form_values_use_defaults(self, client, provider):
        client.post(
            PROCESS,
            files={"file": ("report.pdf", PDF, "application/pdf")},
            data={"language": "", "output_format": ""},
        )
        assert provider.calls[0][1] == {"language": "en-IN", "output_format": "html"}

    @pytest.mark.parametrize("name", ["notes.txt", "photo.png", "report.docx"])
    def test_disallowed_extension(self, client, provider, name):
        r = client.post(PROCESS, files={"file": (name, b"data", "application/octet-stream")})
        assert r.status_code == 400
        body = r.json()
        assert body["success"] is False
        assert body["message"] == "Only PDF (.pdf) or ZIP (.zip) files are allowed"
        assert provider.calls == []

    def test_uppercase_extension(self, client, provider):
        r = client.post(PROCESS, files={"file": ("SCAN.PDF", PDF, "application/pdf")})
        assert r.status_code == 200

    def test_missing_file(self, client, provider):
        r = client.post(PROCESS, data={"language": "en-IN"})
        assert r.status_code == 400
        assert r.json()["message"] == "No file uploaded. Please upload a PDF (.pdf) or ZIP (.zip) file."
        assert provider.calls == []

    def test_failure(self, make_client, settings, tmp_path):
        provider = StubProvider(settings, job_kwargs={"fail_on": "wait_until_complete"})
        client = make_client(settings, provider)
        r = client.post(PROCESS, files={"file": ("report.pdf", PDF, "application/pdf")})
        assert r.status_code == 500
        body = r.json()
        assert body["success"] is False
        assert body["message"] == "Failed to process document"
        assert body["error"] == "wait_until_complete failed"
        assert temp_files(tmp_path) == []

    def test_upload_failure_removes_temp(self, make_client, settings, tmp_path):
        provider = StubProvider(settings, job_kwargs={"fail_on": "upload_file"})
        client = make_client(settings, provider)
        r = client.post(PROCESS, files={"file": ("bundle.zip", b"PK\x03\x04", "application/zip")})
        assert r.status_code == 500
        assert temp_files(tmp_path) == []
        assert "start" not in provider.call_names()


class TestHealth:
    def test_health(self, client):
        r = client.get("/api/document-intelligence/health")
        assert r.status_code == 200
        assert r.json() == {"success": True, "message": "Document Intelligence route is healthy"}
