"""Request dependencies. The lifespan in ``docgen.main`` owns these objects and parks them on ``app.state``."""
from fastapi import Request

from docgen.core.exceptions import InternalServerError
from docgen.services.pdf.browser_pool import BrowserPool
from docgen.services.pdf.service import PDFService


def get_pdf_service(request: Request) -> PDFService:
    service = getattr(request.app.state, "pdf_service", None)
    if service is None:
        raise InternalServerError("PDF service is not initialised")
    return service


def get_browser_pool(request: Request) -> BrowserPool:
    pool = getattr(request.app.state, "browser_pool", None)
    if pool is None:
        raise InternalServerError("Browser pool is not initialised")
    return pool
