"""
HTML document assembler.

``render_fragment`` is the single source for document HTML: the in-app view
shows it as-is and ``build_document`` wraps the same fragment in a printable
page with the print CSS, watermark and classification banner.
"""
import json
import logging
from typing import Any, Optional

from jinja2 import Environment
from markupsafe import Markup

from docgen.schemas.pdf import PDFOptions
from docgen.services.documents.metadata import DocumentMetadata, FormattedDocument
from docgen.services.documents.templates import (
    DOCUMENT_FRAGMENT_TEMPLATE,
    DOCUMENT_PAGE_TEMPLATE,
    ERROR_REPORT_TEMPLATE,
    FOOTER_TEMPLATE,
    HEADER_TEMPLATE,
    PRINT_CSS,
)
from docgen.services.documents.toolkit import truncate

logger = logging.getLogger(__name__)

RAW_CONTENT_LIMIT = 2000
FREE_TIER_WATERMARK = "Project Genie"
PAID_TIER_WATERMARK = "Strictly Private & Confidential"

_env = Environment(autoescape=True)
_fragment_template = _env.from_string(DOCUMENT_FRAGMENT_TEMPLATE)
_page_template = _env.from_string(DOCUMENT_PAGE_TEMPLATE)
_error_template = _env.from_string(ERROR_REPORT_TEMPLATE)
_header_template = _env.from_string(HEADER_TEMPLATE)
_footer_template = _env.from_string(FOOTER_TEMPLATE)


def render_fragment(doc: FormattedDocument, white_label: bool = False) -> str:
    """Cover, table of contents and numbered sections."""
    return _fragment_template.render(doc=doc, white_label=white_label)


def watermark_text(options: PDFOptions, version: str) -> Optional[str]:
    """
    Watermark for the page, or None.

    Free tier always carries the product watermark. Paid tiers use their own
    text (or the confidentiality default) and may switch it off. Draft and
    classification markings replace the text.
    """
    if options.user_tier != "free" and not options.watermark_enabled:
        return None
    if options.user_tier == "free":
        text = FREE_TIER_WATERMARK
    else:
        text = options.watermark_text or PAID_TIER_WATERMARK
    if options.show_draft:
        text = f"DRAFT v{version}"
    if options.classification:
        text = options.classification
    return text


def build_document(doc: FormattedDocument, pdf_options: Optional[PDFOptions] = None) -> str:
    """Standalone printable page around the document fragment."""
    options = pdf_options or PDFOptions()
    fragment = render_fragment(doc, white_label=options.white_label)
    return _page_template.render(
        title=doc.title,
        include_styles=doc.options.include_styles,
        print_css=Markup(PRINT_CSS),
        extra_css=Markup(doc.styles or ""),
        watermark=watermark_text(options, doc.metadata.version),
        classification=options.classification,
        fragment=Markup(fragment),
    )


def header_template(options: PDFOptions) -> str:
    if not options.header_text and not options.page_numbers:
        return "<div></div>"
    return _header_template.render(header_text=options.header_text or "")


def footer_template(options: PDFOptions, attribution: str) -> str:
    shows_attribution = not options.white_label and options.shows_attribution
    if not options.footer_text and not options.page_numbers and not shows_attribution:
        return "<div></div>"
    return _footer_template.render(
        attribution=attribution if shows_attribution else "",
        footer_text=options.footer_text or "",
        page_numbers=options.page_numbers,
    )


def build_error_report(document_type: str, raw: Any, metadata: DocumentMetadata, error: Any = None) -> str:
    """Page shown instead of the document when formatting itself fails."""
    try:
        raw_json = json.dumps(raw, indent=2, default=str)
    except (TypeError, ValueError) as e:
        logger.warning(f"[assembler] Raw content for {document_type} is not JSON serializable: {e}")
        raw_json = repr(raw)
    fragment = _error_template.render(
        title=metadata.title or document_type,
        error=str(error) if error else "",
        raw_json=truncate(raw_json, RAW_CONTENT_LIMIT),
        metadata=metadata,
    )
    return _page_template.render(
        title=metadata.title or document_type,
        include_styles=True,
        print_css=Markup(PRINT_CSS),
        extra_css=Markup(""),
        watermark=None,
        classification=None,
        fragment=Markup(fragment),
    )
