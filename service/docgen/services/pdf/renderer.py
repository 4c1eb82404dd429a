"""
HTML to PDF rendering on a pooled Chromium page.

Flow: enhance the HTML, load it, wait for web fonts, give Mermaid time to
turn diagram sources into SVG, then export. Font and Mermaid problems only
degrade the output; load timeouts and browser failures raise typed errors.
There is no retry here.
"""
import asyncio
import logging
import re
from typing import Any, Dict, Optional

from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from docgen.core.config import Settings, get_settings
from docgen.schemas.pdf import PageMargin, PDFOptions
from docgen.services.documents.assembler import footer_template, header_template
from docgen.services.documents.mermaid import contains_diagrams
from docgen.services.documents.toolkit import generate_id
from docgen.services.pdf.browser_pool import BrowserPool
from docgen.services.pdf.exceptions import (
    BrowserDisconnectedError,
    PDFGenerationError,
    PDFRenderError,
    PDFTimeoutError,
)

logger = logging.getLogger(__name__)

HEADER_FOOTER_MIN_TOP_MM = 45.0
HEADER_FOOTER_MIN_BOTTOM_MM = 40.0

_UNIT_TO_MM = {"mm": 1.0, "cm": 10.0, "in": 25.4, "px": 25.4 / 96, "pt": 25.4 / 72}
_LENGTH_RE = re.compile(r"^\s*([\d.]+)\s*(mm|cm|in|px|pt)?\s*$", re.IGNORECASE)
_HEADING_RE = re.compile(r"<(h[1-3])((?:(?!\bid=)[^>])*)>(.*?)</\1>", re.IGNORECASE | re.DOTALL)
_TAG_RE = re.compile(r"<[^>]+>")

PRINT_OVERRIDES = """
@page { size: auto; }
html, body { background: #fff !important; }
.document-section { break-before: page; }
table, .mermaid-chart, .metric-card, .highlight-box { break-inside: avoid; }
"""

MERMAID_INIT = "mermaid.initialize({ startOnLoad: true, theme: 'default', securityLevel: 'loose' });"

_DISCONNECT_MARKERS = ("has been closed", "disconnected", "target closed")


def length_to_mm(value: Any) -> Optional[float]:
    """'20mm', '0.5in', '2cm' or a bare number (mm) to millimetres; None if unparseable."""
    match = _LENGTH_RE.match(str(value or ""))
    if not match:
        return None
    return float(match.group(1)) * _UNIT_TO_MM[(match.group(2) or "mm").lower()]


def _at_least(value: str, minimum_mm: float) -> str:
    current = length_to_mm(value)
    if current is None or current < minimum_mm:
        return f"{minimum_mm:g}mm"
    return value


def page_margins(options: PDFOptions) -> Dict[str, str]:
    """Requested margins, with room reserved when a header or footer is printed."""
    margin = (options.margin or PageMargin()).model_dump()
    if options.shows_header_footer:
        margin["top"] = _at_least(margin["top"], HEADER_FOOTER_MIN_TOP_MM)
        margin["bottom"] = _at_least(margin["bottom"], HEADER_FOOTER_MIN_BOTTOM_MM)
    return margin


def _add_heading_ids(html: str) -> str:
    seen: Dict[str, int] = {}

    def replace(match: re.Match) -> str:
        tag, attrs, inner = match.group(1), match.group(2), match.group(3)
        slug = generate_id(_TAG_RE.sub("", inner))
        seen[slug] = seen.get(slug, 0) + 1
        if seen[slug] > 1:
            slug = f"{slug}-{seen[slug]}"
        return f'<{tag}{attrs} id="{slug}">{inner}</{tag}>'

    return _HEADING_RE.sub(replace, html)


def _is_disconnect(error: Exception) -> bool:
    message = str(error).lower()
    return any(marker in message for marker in _DISCONNECT_MARKERS)


class PDFRenderer:
    def __init__(self, pool: BrowserPool, settings: Optional[Settings] = None):
        self.pool = pool
        self.settings = settings or get_settings()

    def enhance_html(self, html: str) -> str:
        """Heading anchors, print overrides and the Mermaid runtime when diagrams are present."""
        enhanced = _add_heading_ids(html)

        style = f"<style>{PRINT_OVERRIDES}</style>"
        if "</head>" in enhanced:
            enhanced = enhanced.replace("</head>", f"{style}</head>", 1)
        else:
            enhanced = style + enhanced

        if contains_diagrams(enhanced):
            scripts = (
                f'<script src="{self.settings.mermaid_script_url}"></script>'
                f"<script>{MERMAID_INIT}</script>"
            )
            if "</body>" in enhanced:
                enhanced = enhanced.replace("</body>", f"{scripts}</body>", 1)
            else:
                enhanced += scripts
        return enhanced

    def pdf_arguments(self, options: PDFOptions) -> Dict[str, Any]:
        arguments: Dict[str, Any] = {
            "format": options.format or self.settings.default_page_format,
            "margin": page_margins(options),
            "print_background": True,
            "display_header_footer": options.shows_header_footer,
        }
        if options.shows_header_footer:
            arguments["header_template"] = header_template(options)
            arguments["footer_template"] = footer_template(options, self.settings.attribution_text)
        return arguments

    async def render(self, html: str, options: Optional[PDFOptions] = None) -> bytes:
        """Render a full HTML page to PDF bytes.

        Raises:
            PDFTimeoutError: If loading the content exceeds page_load_timeout_ms
            BrowserLaunchError: If no browser could be started
            BrowserDisconnectedError: If the browser dropped mid-render
            PDFRenderError: For any other browser failure
        """
        options = options or PDFOptions()
        content = self.enhance_html(html)
        has_diagrams = contains_diagrams(content)

        try:
            async with self.pool.lease() as page:
                await self._load(page, content)
                await self._wait_for_fonts(page)
                if has_diagrams:
                    await self._wait_for_diagrams(page)
                pdf = await page.pdf(**self.pdf_arguments(options))
        except PDFGenerationError:
            raise
        except (PlaywrightTimeoutError, asyncio.TimeoutError) as e:
            logger.error(f"[pdf_renderer] Render timed out: {e}")
            raise PDFTimeoutError(f"PDF rendering timed out after {self.settings.page_load_timeout_ms}ms", cause=e) from e
        except Exception as e:
            if _is_disconnect(e):
                logger.error(f"[pdf_renderer] Browser disconnected during render: {e}")
                raise BrowserDisconnectedError(f"Browser disconnected during render: {e}", cause=e) from e
            logger.error(f"[pdf_renderer] Render failed: {e}", exc_info=True)
            raise PDFRenderError(f"PDF rendering failed: {e}", cause=e) from e

        logger.info(f"[pdf_renderer] Rendered PDF ({len(pdf)} bytes)")
        return pdf

    async def _load(self, page: Any, content: str) -> None:
        await page.set_content(
            content,
            wait_until="domcontentloaded",
            timeout=self.settings.page_load_timeout_ms,
        )

    async def _wait_for_fonts(self, page: Any) -> None:
        try:
            await asyncio.wait_for(
                page.evaluate("document.fonts.ready.then(() => true)"),
                timeout=self.settings.font_ready_timeout_ms / 1000,
            )
        except Exception as e:
            logger.warning(f"[pdf_renderer] Fonts not ready, rendering with fallbacks: {e}")

    async def _wait_for_diagrams(self, page: Any) -> None:
        try:
            loaded = await page.evaluate("typeof window.mermaid !== 'undefined'")
        except Exception as e:
            logger.warning(f"[pdf_renderer] Mermaid check failed: {e}")
            return
        if not loaded:
            logger.warning("[pdf_renderer] Mermaid library did not load; diagrams stay as source text")
            return
        await asyncio.sleep(self.settings.mermaid_settle_ms / 1000)
