"""
Shared fixtures.

Rendering tests never start Chromium: a fake browser/context/page trio is
injected through ``BrowserPool(launcher=...)``. The fake page returns a tiny
PDF body with a configurable number of ``/Type /Page`` objects.
"""

import pytest

from docgen.core.config import Settings
from docgen.services.pdf.browser_pool import BrowserPool, PoolConfig
from docgen.services.pdf.cache import PDFCache
from docgen.services.pdf.renderer import PDFRenderer
from docgen.services.pdf.service import PDFService
from docgen.services.pdf.storage import LocalArtifactStorage


def fake_pdf(pages: int = 2) -> bytes:
    body = "".join(f"{i + 3} 0 obj << /Type /Page /Parent 2 0 R >> endobj\n" for i in range(pages))
    return (f"%PDF-1.4\n2 0 obj << /Type /Pages /Count {pages} >> endobj\n{body}%%EOF").encode()


class FakePage:
    def __init__(self, browser):
        self.browser = browser
        self.content = None
        self.pdf_kwargs = None
        self.closed = False

    async def set_content(self, content, wait_until=None, timeout=None):
        if self.browser.fail_with is not None:
            raise self.browser.fail_with
        self.content = content
        self.wait_until = wait_until
        self.timeout = timeout

    async def evaluate(self, expression):
        if "mermaid" in expression:
            return self.browser.mermaid_loaded
        return True

    async def pdf(self, **kwargs):
        self.pdf_kwargs = kwargs
        self.browser.renders.append(self)
        return fake_pdf(self.browser.pages_per_pdf)

    async def close(self):
        self.closed = True


class FakeContext:
    def __init__(self, browser):
        self.browser = browser
        self.closed = False

    async def new_page(self):
        page = FakePage(self.browser)
        self.browser.pages.append(page)
        return page

    async def close(self):
        self.closed = True


class FakeBrowser:
    def __init__(self):
        self.connected = True
        self.closed = False
        self.pages = []
        self.renders = []
        self.listeners = {}
        self.fail_with = None
        self.mermaid_loaded = False
        self.pages_per_pdf = 2

    def is_connected(self):
        return self.connected

    def on(self, event, callback):
        self.listeners.setdefault(event, []).append(callback)

    def disconnect(self):
        self.connected = False
        for callback in self.listeners.get("disconnected", []):
            callback(self)

    async def new_context(self):
        if not self.connected:
            raise RuntimeError("Browser has been closed")
        return FakeContext(self)

    async def close(self):
        self.closed = True
        self.connected = False


class FakeLauncher:
    """Async callable handed to ``BrowserPool``; records every browser it starts."""

    def __init__(self):
        self.browsers = []
        self.fail = False

    async def __call__(self):
        if self.fail:
            raise RuntimeError("Executable doesn't exist")
        browser = FakeBrowser()
        self.browsers.append(browser)
        return browser

    @property
    def renders(self):
        return [page for browser in self.browsers for page in browser.renders]


@pytest.fixture
def settings(tmp_path):
    return Settings(
        mermaid_settle_ms=0,
        font_ready_timeout_ms=100,
        page_load_timeout_ms=1000,
        browser_idle_timeout_seconds=60,
        artifacts_path=str(tmp_path / "pdf-cache"),
    )


@pytest.fixture
def launcher():
    return FakeLauncher()


@pytest.fixture
async def pool(launcher):
    pool = BrowserPool(PoolConfig(max_browsers=1, max_pages_per_browser=5), launcher=launcher)
    yield pool
    await pool.force_cleanup()


@pytest.fixture
def renderer(pool, settings):
    return PDFRenderer(pool, settings)


@pytest.fixture
def cache(tmp_path):
    return PDFCache(LocalArtifactStorage(tmp_path / "pdf-cache"), ttl_seconds=3600)


@pytest.fixture
def pdf_service(renderer, cache):
    return PDFService(renderer, cache)
