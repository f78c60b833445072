"""
Tests for the HTTP API - /api/analyze, /api/analyze/text, /health and the upload page.

Test Categories:
1. Health and static page
2. Multipart analyze endpoint (validation, inline text, uploads, per-item errors)
3. JSON analyze endpoint
"""

import logging

import pytest
from fastapi.testclient import TestClient

from analysis_router import EMPTY_REQUEST_MESSAGE
from config import config


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def client():
    from core.app_state import app
    return TestClient(app)


# ============================================================================
# Health & static page
# ============================================================================

class TestHealthEndpoint:
    def test_health_returns_ok(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_upload_page_served_at_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert "Repetition Finder" in response.text


# ============================================================================
# Multipart analyze endpoint
# ============================================================================

class TestAnalyzeEndpoint:
    def test_rejects_request_without_text_or_files(self, client):
        """
        Given: A form with blank text and no files
        When: POST /api/analyze
        Then: 400 with the exact error message
        """
        response = client.post("/api/analyze", data={"text": "   "})
        assert response.status_code == 400
        assert response.json() == {"error": EMPTY_REQUEST_MESSAGE}
        assert EMPTY_REQUEST_MESSAGE == "Upload at least one file or provide inline text."

    def test_inline_text(self, client, cat_text, cat_text_total_repeated):
        response = client.post("/api/analyze", data={"text": cat_text})
        assert response.status_code == 200

        body = response.json()
        assert body["totalRepetitions"] == cat_text_total_repeated
        assert len(body["results"]) == 1

        item = body["results"][0]
        assert item["source"] == "Inline text"
        assert item["kind"] == "text"
        assert item["error"] is None
        assert item["analysis"]["totalRepeated"] == cat_text_total_repeated
        assert item["analysis"]["sentences"] == [
            {"text": "The cat sat on the old wooden mat quietly.", "count": 2, "lines": [1, 3]}
        ]
        assert len(item["analysis"]["phrases"]) == 23

    def test_files_and_text_keep_order_and_isolate_errors(self, client, cat_text, html_bytes):
        """
        Given: Inline text plus a .txt, a .pdf and an .html upload
        When: POST /api/analyze
        Then: Inline text comes first, the .pdf carries an error, totals skip it
        """
        files = [
            ("files", ("notes.txt", cat_text.encode("utf-8"), "text/plain")),
            ("files", ("slides.pdf", b"%PDF-1.7", "application/pdf")),
            ("files", ("page.html", html_bytes, "text/html")),
        ]
        response = client.post("/api/analyze", data={"text": cat_text}, files=files)
        assert response.status_code == 200

        body = response.json()
        sources = [item["source"] for item in body["results"]]
        assert sources == ["Inline text", "notes.txt", "slides.pdf", "page.html"]

        inline, txt, pdf, html = body["results"]
        assert txt["kind"] == "txt"
        assert txt["analysis"]["totalRepeated"] == 24
        assert pdf["kind"] == "pdf"
        assert pdf["analysis"] is None
        assert pdf["error"] == "Unsupported file type."
        assert html["error"] is None
        assert html["analysis"]["sentences"][0]["text"] == "Our team shipped the new release on time."

        expected_total = sum(
            item["analysis"]["totalRepeated"] for item in body["results"] if item["analysis"]
        )
        assert body["totalRepetitions"] == expected_total

    def test_files_only(self, client, docx_bytes):
        files = [("files", ("report.docx", docx_bytes, "application/octet-stream"))]
        response = client.post("/api/analyze", files=files)
        assert response.status_code == 200
        item = response.json()["results"][0]
        assert item["source"] == "report.docx"
        assert item["kind"] == "docx"
        assert item["analysis"]["sentences"][0]["lines"] == [1, 3]

    def test_too_many_files(self, client, monkeypatch):
        monkeypatch.setattr(config.UPLOADS, "max_files_per_request", 1)
        files = [
            ("files", ("a.txt", b"one", "text/plain")),
            ("files", ("b.txt", b"two", "text/plain")),
        ]
        response = client.post("/api/analyze", files=files)
        assert response.status_code == 400
        assert "Too many files" in response.json()["error"]

    def test_oversized_file_is_item_error(self, client, monkeypatch):
        monkeypatch.setattr(config.UPLOADS, "max_size_bytes", 8)
        files = [("files", ("big.txt", b"0123456789abcdef", "text/plain"))]
        response = client.post("/api/analyze", files=files)
        assert response.status_code == 200
        item = response.json()["results"][0]
        assert item["analysis"] is None
        assert "File too large" in item["error"]

    def test_input_limit_is_item_error(self, client, monkeypatch):
        monkeypatch.setattr(config.ANALYZER, "max_input_chars", 10)
        response = client.post("/api/analyze", data={"text": "word " * 10})
        assert response.status_code == 200
        body = response.json()
        assert body["totalRepetitions"] == 0
        assert "Input too large" in body["results"][0]["error"]


# ============================================================================
# JSON analyze endpoint
# ============================================================================

class TestAnalyzeTextEndpoint:
    def test_analyzes_json_text(self, client, cat_text):
        response = client.post("/api/analyze/text", json={"text": cat_text})
        assert response.status_code == 200
        body = response.json()
        assert body["totalRepetitions"] == 24
        assert body["results"][0]["source"] == "Inline text"

    def test_blank_text_rejected(self, client):
        response = client.post("/api/analyze/text", json={"text": " \n "})
        assert response.status_code == 400
        assert response.json() == {"error": EMPTY_REQUEST_MESSAGE}

    def test_missing_field_is_validation_error(self, client):
        response = client.post("/api/analyze/text", json={})
        assert response.status_code == 422


class TestPhaseLogging:
    def test_verbose_flag_reaches_batch_logging(self, client, cat_text, caplog, monkeypatch):
        monkeypatch.setattr(config, "VERBOSE_PHASE_LOGS", True)
        with caplog.at_level(logging.INFO, logger="logging_utils"):
            response = client.post("/api/analyze", data={"text": cat_text})
        assert response.status_code == 200
        assert "REPETITION_ANALYSIS" in caplog.text
        assert "TOTAL TIME" in caplog.text

    def test_phase_headers_off_by_default(self, client, cat_text, caplog, monkeypatch):
        monkeypatch.setattr(config, "VERBOSE_PHASE_LOGS", False)
        with caplog.at_level(logging.INFO, logger="logging_utils"):
            client.post("/api/analyze", data={"text": cat_text})
        assert "REPETITION_ANALYSIS" not in caplog.text
