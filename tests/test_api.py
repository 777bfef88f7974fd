"""Tests for the /api/urlvalidation endpoints.

Most tests swap the application validator for an ``AsyncMock`` through
``app.dependency_overrides`` so the transport layer is tested on its own.
The end-to-end tests at the bottom go through the real engine with
``respx`` standing in for the network.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
import respx
from fastapi.testclient import TestClient

from urlscan.config import settings
from urlscan.main import app
from urlscan.models.result import Category, ValidationResult, ValidationStatus
from urlscan.routers.validate import get_validator

client = TestClient(app)

_VALIDATE = "/api/urlvalidation/validate"
_UPLOAD = "/api/urlvalidation/upload"


@pytest.fixture(autouse=True)
def reset_state():
    """Clear rate-limit counters, the shared cache and overrides around every test."""
    app.state.limiter._storage.reset()
    app.state.validator.cache.clear()
    yield
    app.dependency_overrides.clear()


def _stub_validator(results=None, side_effect=None) -> MagicMock:
    stub = MagicMock()
    stub.validate = AsyncMock(return_value=results or [], side_effect=side_effect)
    app.dependency_overrides[get_validator] = lambda: stub
    return stub


_RESULTS = [
    ValidationResult(
        url="https://x.test/blog/a",
        status=ValidationStatus.NO_INDEX,
        details="Page contains 'noindex' meta tag",
        category=Category.ARTICLES,
        meta_tags={"robots": "noindex"},
    ),
    ValidationResult(
        url="https://x.test/",
        status=ValidationStatus.INDEXED,
        details="Page is NOT noindexed",
    ),
]


# ---------------------------------------------------------------------------
# POST /api/urlvalidation/validate
# ---------------------------------------------------------------------------

class TestValidateEndpoint:
    def test_returns_results_in_engine_order(self):
        stub = _stub_validator(_RESULTS)
        resp = client.post(_VALIDATE, json=["https://x.test/", "https://x.test/blog/a"])

        assert resp.status_code == 200
        data = resp.json()
        assert [item["url"] for item in data] == ["https://x.test/blog/a", "https://x.test/"]
        stub.validate.assert_awaited_once_with(["https://x.test/", "https://x.test/blog/a"])

    def test_response_fields(self):
        _stub_validator(_RESULTS)
        data = client.post(_VALIDATE, json=["https://x.test/blog/a"]).json()

        assert data[0] == {
            "url": "https://x.test/blog/a",
            "status": "NoIndex Found",
            "details": "Page contains 'noindex' meta tag",
            "category": "Articles",
            "meta_tags": {"robots": "noindex"},
        }

    def test_empty_list_returns_400(self):
        stub = _stub_validator()
        resp = client.post(_VALIDATE, json=[])

        assert resp.status_code == 400
        assert resp.json()["detail"] == "No URLs provided"
        stub.validate.assert_not_awaited()

    def test_non_list_body_returns_422(self):
        _stub_validator()
        resp = client.post(_VALIDATE, json={"urls": ["https://x.test/"]})
        assert resp.status_code == 422

    def test_null_entries_are_accepted(self):
        stub = _stub_validator(_RESULTS[1:])
        resp = client.post(_VALIDATE, json=[None, "https://x.test/"])

        assert resp.status_code == 200
        stub.validate.assert_awaited_once_with([None, "https://x.test/"])

    def test_too_many_urls_returns_413(self):
        stub = _stub_validator()
        with patch.object(settings, "max_urls", 2):
            resp = client.post(_VALIDATE, json=["https://a.test/", "https://b.test/", "https://c.test/"])

        assert resp.status_code == 413
        stub.validate.assert_not_awaited()

    def test_batch_timeout_returns_504(self):
        async def slow(urls):
            await asyncio.sleep(1)
            return []

        _stub_validator(side_effect=slow)
        with patch.object(settings, "batch_timeout", 0.01):
            resp = client.post(_VALIDATE, json=["https://x.test/"])

        assert resp.status_code == 504
        assert resp.json()["detail"] == "The request took too long and was canceled."

    def test_unexpected_error_returns_500(self):
        _stub_validator(side_effect=RuntimeError("boom"))
        failing_client = TestClient(app, raise_server_exceptions=False)
        resp = failing_client.post(_VALIDATE, json=["https://x.test/"])

        assert resp.status_code == 500
        assert resp.json() == {"detail": "An unexpected error occurred."}


# ---------------------------------------------------------------------------
# POST /api/urlvalidation/upload
# ---------------------------------------------------------------------------

class TestUploadEndpoint:
    def test_text_upload(self):
        stub = _stub_validator(_RESULTS)
        files = {"file": ("urls.txt", b"https://x.test/\nhttps://x.test/blog/a\n\n", "text/plain")}
        resp = client.post(_UPLOAD, files=files)

        assert resp.status_code == 200
        data = resp.json()
        assert data["filename"] == "urls.txt"
        assert data["urls_found"] == 2
        assert [r["url"] for r in data["results"]] == ["https://x.test/blog/a", "https://x.test/"]
        assert data["summary"] == {
            "total": 2,
            "indexed": 1,
            "no_index": 1,
            "not_found": 0,
            "errors": 0,
        }
        stub.validate.assert_awaited_once_with(["https://x.test/", "https://x.test/blog/a"])

    def test_csv_upload_uses_first_column(self):
        stub = _stub_validator(_RESULTS[1:])
        content = b"\xef\xbb\xbfurl,title\nhttps://x.test/,Home\n"
        resp = client.post(_UPLOAD, files={"file": ("export.csv", content, "text/csv")})

        assert resp.status_code == 200
        stub.validate.assert_awaited_once_with(["https://x.test/"])

    def test_file_without_urls_returns_400(self):
        _stub_validator()
        resp = client.post(_UPLOAD, files={"file": ("urls.txt", b"\n\nnothing here\n", "text/plain")})

        assert resp.status_code == 400
        assert resp.json()["detail"] == "File is empty or contains no valid URLs."

    def test_wrong_extension_returns_422(self):
        _stub_validator()
        resp = client.post(_UPLOAD, files={"file": ("urls.pdf", b"https://x.test/", "application/pdf")})
        assert resp.status_code == 422


# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------

class TestHealthCheck:
    def test_root(self):
        resp = client.get("/")
        assert resp.status_code == 200
        assert resp.json()["message"] == "Hello from URLScan"


# ---------------------------------------------------------------------------
# End-to-end through the real engine
# ---------------------------------------------------------------------------

class TestValidateEndToEnd:
    def test_mixed_batch(self):
        with respx.mock:
            respx.get("http://x.test/500").mock(return_value=httpx.Response(500))
            respx.get("http://x.test/404").mock(return_value=httpx.Response(404))
            respx.get("http://x.test/ok").mock(
                return_value=httpx.Response(200, html='<meta name="robots" content="noindex">')
            )
            resp = client.post(
                _VALIDATE,
                json=["http://x.test/500", "http://x.test/404", "not a url", "http://x.test/ok", ""],
            )

        assert resp.status_code == 200
        assert [(r["url"], r["status"]) for r in resp.json()] == [
            ("http://x.test/ok", "NoIndex Found"),
            ("not a url", "Invalid URL"),
            ("http://x.test/404", "404 Not Found"),
            ("http://x.test/500", "Server Error"),
        ]

    def test_repeat_request_is_served_from_cache(self):
        with respx.mock:
            route = respx.get("https://x.test/").mock(return_value=httpx.Response(200, html="<p>ok</p>"))
            first = client.post(_VALIDATE, json=["https://x.test/"])
            second = client.post(_VALIDATE, json=["https://x.test/"])

        assert route.call_count == 1
        assert first.json() == second.json()
