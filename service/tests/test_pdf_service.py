"""End-to-end generation through the service with the fake browser."""

import pytest

from docgen.schemas.pdf import HTMLFormatterOptions, PDFOptions
from docgen.services.documents.formatters import CharterFormatter
from docgen.services.pdf.exceptions import PDFRenderError
from docgen.services.pdf.service import PDFService, count_pages

from conftest import fake_pdf


class TestCountPages:

    def test_counts_page_objects_not_page_tree(self):
        assert count_pages(fake_pdf(3)) == 3

    def test_minimum_one(self):
        assert count_pages(b"%PDF-1.4 garbage") == 1
        assert count_pages(b"") == 1


class TestGeneratePdf:

    async def test_backlog_with_empty_content(self, pdf_service):
        result = await pdf_service.generate_pdf("backlog", {}, "Acme", "Acme Corp")
        assert result.success
        assert result.pdf.page_count >= 1
        assert result.pdf.data.startswith(b"%PDF")
        assert result.pdf.filename == "acme-backlog.pdf"
        assert result.pdf.metadata.company_name == "Acme Corp"
        assert not result.cached

    async def test_second_identical_request_served_from_cache(self, pdf_service, launcher):
        options = PDFOptions(user_id="u1", document_id="d1")
        first = await pdf_service.generate_pdf("backlog", {}, "Acme", "Acme Corp", options=options)
        second = await pdf_service.generate_pdf("backlog", {}, "Acme", "Acme Corp", options=options)

        assert first.success and second.success
        assert second.cached
        assert second.pdf.data == first.pdf.data
        assert second.pdf.page_count == first.pdf.page_count
        assert len(launcher.renders) == 1

    async def test_changed_content_renders_again(self, pdf_service, launcher):
        await pdf_service.generate_pdf("charter", {"scope": "A"}, "Apollo")
        result = await pdf_service.generate_pdf("charter", {"scope": "B"}, "Apollo")
        assert not result.cached
        assert len(launcher.renders) == 2

    async def test_force_regenerate_skips_lookup(self, pdf_service, launcher):
        await pdf_service.generate_pdf("kanban", {}, "Apollo")
        result = await pdf_service.generate_pdf("kanban", {}, "Apollo", options=PDFOptions(force_regenerate=True))
        assert not result.cached
        assert len(launcher.renders) == 2

    async def test_use_cache_false(self, pdf_service, launcher):
        options = PDFOptions(use_cache=False)
        await pdf_service.generate_pdf("kanban", {}, "Apollo", options=options)
        await pdf_service.generate_pdf("kanban", {}, "Apollo", options=options)
        assert len(launcher.renders) == 2

    async def test_without_cache(self, renderer, launcher):
        service = PDFService(renderer)
        result = await service.generate_pdf("pid", None, "Apollo")
        assert result.success
        assert result.pdf.page_count == 2

    async def test_unsupported_type(self, pdf_service, launcher):
        result = await pdf_service.generate_pdf("memo", {})
        assert not result.success
        assert "Unsupported document type: memo" in result.error
        assert launcher.renders == []

    async def test_render_failure_is_reported(self, pdf_service, monkeypatch):
        async def fail(html, options=None):
            raise PDFRenderError("PDF rendering failed: crashed")

        monkeypatch.setattr(pdf_service.renderer, "render", fail)
        result = await pdf_service.generate_pdf("charter", {})
        assert not result.success
        assert result.error == "PDF rendering failed: crashed"

    async def test_formatting_failure_renders_error_report(self, pdf_service, launcher, monkeypatch):
        def explode(self, content, metadata=None, options=None):
            raise ValueError("unexpected shape")

        monkeypatch.setattr(CharterFormatter, "format", explode)
        result = await pdf_service.generate_pdf("charter", {"scope": "x"}, "Apollo")
        assert result.success
        assert "Formatting Error" in launcher.renders[0].content

    async def test_tier_watermark_reaches_page(self, pdf_service, launcher):
        await pdf_service.generate_pdf("charter", {}, "Apollo", options=PDFOptions(user_tier="premium", watermark_text="Board use"))
        assert '<div class="watermark">Board use</div>' in launcher.renders[0].content

    async def test_write_to_file(self, pdf_service, tmp_path):
        target = tmp_path / "out" / "charter.pdf"
        result = await pdf_service.generate_pdf_to_file(target, "charter", {}, project_name="Apollo")
        assert result.success
        assert target.read_bytes() == result.pdf.data


class TestGenerateHtml:

    def test_fragment_matches_formatter(self, pdf_service):
        html = pdf_service.generate_html("charter", {}, "Apollo", "Acme Corp")
        assert "Apollo" in html
        assert "<!DOCTYPE html>" not in html
        assert "Table of Contents" in html

    def test_html_options(self, pdf_service):
        html = pdf_service.generate_html("charter", {}, "Apollo", html_options=HTMLFormatterOptions(include_toc=False))
        assert "Table of Contents" not in html

    def test_unknown_type(self, pdf_service):
        with pytest.raises(KeyError):
            pdf_service.generate_html("memo", {})

    def test_metadata_title(self, pdf_service):
        metadata = pdf_service.build_metadata("risk_register", "Apollo", None, PDFOptions())
        assert metadata.title == "Apollo - Risk Register"
        assert metadata.company_name == "Apollo"
