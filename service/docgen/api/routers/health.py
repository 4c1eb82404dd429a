import logging
from fastapi import APIRouter, Depends

from docgen.api.deps import get_browser_pool
from docgen.core.config import get_settings
from docgen.services.pdf.browser_pool import BrowserPool

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health", summary="Liveness probe")
async def health_check() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/health/browser", summary="Browser pool status")
async def browser_health_check(pool: BrowserPool = Depends(get_browser_pool)) -> dict[str, str | int | bool]:
    """Reports whether a browser is running. An idle pool with no browser is still healthy."""
    stats = pool.get_stats()
    return {
        "status": "ok",
        "browsers": stats["browsers"],
        "connected": stats["connected"],
    }


@router.get("/version", summary="Get API version")
async def get_version() -> dict[str, str]:
    settings = get_settings()
    return {
        "product": settings.api_name,
        "version": "0.1.0",
        "environment": settings.environment,
        "license": "AGPL-3.0",
    }
