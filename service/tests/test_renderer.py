"""Renderer: HTML enhancement, page arguments and error mapping."""

import asyncio

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from docgen.schemas.pdf import PageMargin, PDFOptions
from docgen.services.pdf.exceptions import BrowserDisconnectedError, PDFRenderError, PDFTimeoutError
from docgen.services.pdf.renderer import MERMAID_INIT, length_to_mm, page_margins

PAGE = "<html><head><title>T</title></head><body>{}</body></html>"


class TestLengths:

    @pytest.mark.parametrize("value,expected", [
        ("20mm", 20.0),
        ("2cm", 20.0),
        ("0.5in", 12.7),
        ("96px", 25.4),
        ("72pt", 25.4),
        (10, 10.0),
    ])
    def test_units(self, value, expected):
        assert length_to_mm(value) == pytest.approx(expected)

    def test_unparseable(self):
        assert length_to_mm("auto") is None
        assert length_to_mm(None) is None


class TestMargins:

    def test_defaults_without_header_footer(self):
        margins = page_margins(PDFOptions(page_numbers=False))
        assert margins == {"top": "20mm", "right": "12mm", "bottom": "20mm", "left": "12mm"}

    def test_header_footer_reserve_space(self):
        margins = page_margins(PDFOptions())
        assert margins["top"] == "45mm"
        assert margins["bottom"] == "40mm"
        assert margins["left"] == "12mm"

    def test_larger_margins_kept(self):
        options = PDFOptions(footer_text="Confidential", margin=PageMargin(top="2in", bottom="5cm"))
        margins = page_margins(options)
        assert margins["top"] == "2in"
        assert margins["bottom"] == "5cm"


class TestEnhanceHtml:

    def test_heading_ids(self, renderer):
        html = renderer.enhance_html(PAGE.format("<h1>Intro</h1><h2 id='keep'>Kept</h2><h2>Intro</h2>"))
        assert '<h1 id="intro">Intro</h1>' in html
        assert "<h2 id='keep'>Kept</h2>" in html
        assert '<h2 id="intro-2">Intro</h2>' in html

    def test_print_overrides_in_head(self, renderer):
        html = renderer.enhance_html(PAGE.format("<p>x</p>"))
        assert html.index("break-inside: avoid") < html.index("</head>")

    def test_mermaid_runtime_only_with_diagrams(self, renderer, settings):
        plain = renderer.enhance_html(PAGE.format("<p>x</p>"))
        assert settings.mermaid_script_url not in plain

        with_chart = renderer.enhance_html(PAGE.format('<pre class="mermaid">pie title X</pre>'))
        assert settings.mermaid_script_url in with_chart
        assert MERMAID_INIT in with_chart
        assert with_chart.index(MERMAID_INIT) < with_chart.index("</body>")


class TestPdfArguments:

    def test_header_footer_templates(self, renderer, settings):
        arguments = renderer.pdf_arguments(PDFOptions(header_text="Board Pack"))
        assert arguments["display_header_footer"] is True
        assert arguments["print_background"] is True
        assert "Board Pack" in arguments["header_template"]
        assert settings.attribution_text in arguments["footer_template"]

    def test_no_header_footer(self, renderer):
        arguments = renderer.pdf_arguments(PDFOptions(page_numbers=False, format="Letter"))
        assert arguments["display_header_footer"] is False
        assert arguments["format"] == "Letter"
        assert "header_template" not in arguments


class TestRender:

    async def test_renders_pdf_bytes(self, renderer, launcher, settings):
        pdf = await renderer.render(PAGE.format("<h1>Hello</h1>"))
        assert pdf.startswith(b"%PDF")

        page = launcher.renders[0]
        assert page.wait_until == "domcontentloaded"
        assert page.timeout == settings.page_load_timeout_ms
        assert page.pdf_kwargs["margin"]["top"] == "45mm"
        assert page.closed

    async def test_missing_mermaid_still_renders(self, renderer, launcher, pool):
        await pool.get_browser()
        launcher.browsers[0].mermaid_loaded = False
        pdf = await renderer.render(PAGE.format('<pre class="mermaid">pie title X</pre>'))
        assert pdf.startswith(b"%PDF")

    @pytest.mark.parametrize("error", [PlaywrightTimeoutError("Timeout 1000ms exceeded"), asyncio.TimeoutError()])
    async def test_timeout(self, renderer, launcher, pool, error):
        await pool.get_browser()
        launcher.browsers[0].fail_with = error
        with pytest.raises(PDFTimeoutError) as excinfo:
            await renderer.render(PAGE.format("<p>x</p>"))
        assert excinfo.value.retryable
        assert pool.active_pages == 0

    async def test_disconnect(self, renderer, launcher, pool):
        await pool.get_browser()
        launcher.browsers[0].fail_with = RuntimeError("Target closed")
        with pytest.raises(BrowserDisconnectedError):
            await renderer.render(PAGE.format("<p>x</p>"))

    async def test_other_failures(self, renderer, launcher, pool):
        await pool.get_browser()
        launcher.browsers[0].fail_with = RuntimeError("net::ERR_ABORTED")
        with pytest.raises(PDFRenderError) as excinfo:
            await renderer.render(PAGE.format("<p>x</p>"))
        assert not excinfo.value.retryable
        assert isinstance(excinfo.value.cause, RuntimeError)
