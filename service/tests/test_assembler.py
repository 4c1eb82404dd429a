"""Printable page assembly: watermark rules, banners, header/footer and error report."""

from docgen.schemas.pdf import PDFOptions
from docgen.services.documents.assembler import (
    FREE_TIER_WATERMARK,
    PAID_TIER_WATERMARK,
    build_document,
    build_error_report,
    footer_template,
    header_template,
    render_fragment,
    watermark_text,
)
from docgen.services.documents.formatters import get_formatter
from docgen.services.documents.metadata import DocumentMetadata

METADATA = {"project_name": "Apollo", "company_name": "Acme Corp"}


def charter():
    return get_formatter("charter").format({}, METADATA)


class TestWatermark:

    def test_free_tier_always_watermarked(self):
        options = PDFOptions(user_tier="free", watermark_enabled=False)
        assert watermark_text(options, "1.0") == FREE_TIER_WATERMARK

    def test_paid_tier_can_disable(self):
        options = PDFOptions(user_tier="premium", watermark_enabled=False)
        assert watermark_text(options, "1.0") is None

    def test_paid_tier_default_and_custom_text(self):
        assert watermark_text(PDFOptions(user_tier="basic"), "1.0") == PAID_TIER_WATERMARK
        assert watermark_text(PDFOptions(user_tier="basic", watermark_text="Acme only"), "1.0") == "Acme only"

    def test_draft_marking(self):
        options = PDFOptions(user_tier="premium", show_draft=True)
        assert watermark_text(options, "1.0") == "DRAFT v1.0"

    def test_classification_wins(self):
        options = PDFOptions(user_tier="premium", show_draft=True, classification="CONFIDENTIAL")
        assert watermark_text(options, "1.0") == "CONFIDENTIAL"


class TestBuildDocument:

    def test_standalone_page(self):
        html = build_document(charter())
        assert html.startswith("<!DOCTYPE html>")
        assert "<style>" in html
        assert "Apollo - Project Charter" in html
        assert f'<div class="watermark">{FREE_TIER_WATERMARK}</div>' in html

    def test_fragment_is_embedded_unescaped(self):
        doc = charter()
        assert render_fragment(doc) in build_document(doc)

    def test_classification_banner(self):
        html = build_document(charter(), PDFOptions(classification="INTERNAL"))
        assert 'class="classification-banner classification-internal">INTERNAL</div>' in html

    def test_paid_watermark_escaped(self):
        html = build_document(charter(), PDFOptions(user_tier="premium"))
        assert "Strictly Private &amp; Confidential" in html

    def test_no_watermark_when_disabled(self):
        html = build_document(charter(), PDFOptions(user_tier="premium", watermark_enabled=False))
        assert '<div class="watermark">' not in html


class TestHeaderFooter:

    def test_empty_header(self):
        assert header_template(PDFOptions(page_numbers=False)) == "<div></div>"

    def test_header_text(self):
        assert "Board Pack" in header_template(PDFOptions(header_text="Board Pack"))

    def test_footer_attribution_for_free_tier(self):
        footer = footer_template(PDFOptions(), "Generated by Project Genie")
        assert "Generated by Project Genie" in footer
        assert "pageNumber" in footer

    def test_white_label_hides_attribution(self):
        footer = footer_template(PDFOptions(user_tier="premium", white_label=True), "Generated by Project Genie")
        assert "Generated by Project Genie" not in footer


class TestErrorReport:

    def test_raw_content_truncated(self):
        metadata = DocumentMetadata.create(project_name="Apollo", title="Apollo - Charter")
        html = build_error_report("charter", {"text": "x" * 5000}, metadata, ValueError("bad shape"))
        assert "x" * 1900 in html
        assert "x" * 2100 not in html
        assert "...</pre>" in html
        assert "bad shape" in html

    def test_unserialisable_content(self):
        metadata = DocumentMetadata.create(project_name="Apollo")
        html = build_error_report("charter", {1, 2}, metadata)
        assert "formatting-error" in html
