"""HTTP surface, with the pool and service injected into the app factory."""

import pytest
from fastapi.testclient import TestClient

from docgen.main import create_app
from docgen.services.pdf.browser_pool import BrowserPool, PoolConfig
from docgen.services.pdf.cache import PDFCache
from docgen.services.pdf.renderer import PDFRenderer
from docgen.services.pdf.service import PDFService
from docgen.services.pdf.storage import LocalArtifactStorage

BACKLOG = {"documentType": "backlog", "content": {}, "projectName": "Acme", "companyName": "Acme Corp"}


@pytest.fixture
def client(tmp_path, settings, launcher):
    pool = BrowserPool(PoolConfig(max_browsers=1, max_pages_per_browser=2), launcher=launcher)
    service = PDFService(PDFRenderer(pool, settings), PDFCache(LocalArtifactStorage(tmp_path / "cache")))
    with TestClient(create_app(browser_pool=pool, pdf_service=service)) as client:
        yield client


class TestHealth:

    def test_health(self, client):
        assert client.get("/api/health").json() == {"status": "ok"}

    def test_browser_health_before_first_render(self, client):
        body = client.get("/api/health/browser").json()
        assert body == {"status": "ok", "browsers": 0, "connected": False}

    def test_version(self, client):
        body = client.get("/api/version").json()
        assert body["version"] == "0.1.0"
        assert body["license"] == "AGPL-3.0"


class TestDocumentTypes:

    def test_lists_every_type(self, client):
        types = client.get("/api/pdf/types").json()
        assert len(types) == 12
        assert {"document_type": "pid", "title": "Project Initiation Document"} in types


class TestGenerate:

    def test_pdf_response(self, client):
        response = client.post("/api/pdf/generate", json=BACKLOG)
        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.headers["content-disposition"] == 'attachment; filename="acme-backlog.pdf"'
        assert response.headers["x-pdf-cached"] == "false"
        assert int(response.headers["x-pdf-page-count"]) >= 1
        assert response.content.startswith(b"%PDF")

    def test_second_request_cached(self, client, launcher):
        client.post("/api/pdf/generate", json=BACKLOG)
        response = client.post("/api/pdf/generate", json=BACKLOG)
        assert response.headers["x-pdf-cached"] == "true"
        assert len(launcher.renders) == 1

    def test_snake_case_body(self, client):
        response = client.post("/api/pdf/generate", json={"document_type": "kanban", "options": {"user_tier": "premium"}})
        assert response.status_code == 200

    def test_unknown_type(self, client):
        response = client.post("/api/pdf/generate", json={"documentType": "memo"})
        assert response.status_code == 404
        body = response.json()
        assert body["code"] == "NOT_FOUND"
        assert body["details"]["identifier"] == "memo"

    def test_validation_error(self, client):
        response = client.post("/api/pdf/generate", json={"content": {}})
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_render_failure(self, client, launcher):
        launcher.fail = True
        response = client.post("/api/pdf/generate", json=BACKLOG)
        assert response.status_code == 502
        body = response.json()
        assert body["code"] == "RENDER_FAILED"
        assert body["details"] == {"document_type": "backlog"}


class TestHtml:

    def test_fragment(self, client):
        response = client.post("/api/pdf/html", json={"documentType": "charter", "projectName": "Apollo"})
        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "Project Charter"
        assert "Apollo" in body["html"]

    def test_unknown_type(self, client):
        assert client.post("/api/pdf/html", json={"documentType": "memo"}).status_code == 404


class TestPoolStats:

    def test_stats_after_render(self, client):
        client.post("/api/pdf/generate", json=BACKLOG)
        stats = client.get("/api/pdf/pool/stats").json()
        assert stats["browsers"] == 1
        assert stats["active_pages"] == 0
        assert stats["memory_estimate_mb"] == 200
        assert stats["launches"] == 1
