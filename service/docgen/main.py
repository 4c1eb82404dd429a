# Project Genie Document Service
# Copyright (C) 2025 Project Genie
#
# Licensed under AGPL-3.0. See LICENSE file for details.
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

from contextlib import asynccontextmanager
import asyncio
import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from docgen.api.routers import api_router
from docgen.core.config import Settings, get_settings
from docgen.core.logging import configure_logging
from docgen.core.exceptions import APIError
from docgen.services.pdf.browser_pool import BrowserPool, PoolConfig
from docgen.services.pdf.cache import PDFCache
from docgen.services.pdf.renderer import PDFRenderer
from docgen.services.pdf.service import PDFService
from docgen.services.pdf.storage import create_storage

logger = logging.getLogger(__name__)


def build_pdf_service(settings: Settings, pool: BrowserPool) -> PDFService:
    """Renderer and cache wired from settings around an existing pool."""
    cache = None
    if settings.pdf_cache_enabled:
        cache = PDFCache(create_storage(settings), ttl_seconds=settings.pdf_cache_ttl_seconds)
    else:
        logger.info("[startup] PDF cache disabled")
    return PDFService(PDFRenderer(pool, settings), cache)


def create_app(browser_pool: Optional[BrowserPool] = None, pdf_service: Optional[PDFService] = None) -> FastAPI:
    """Build the API. Passing a pool or service skips constructing them from settings."""
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):  # type: ignore[override]
        configure_logging(settings.log_level)

        pool = browser_pool or BrowserPool(PoolConfig.from_settings(settings))
        service = pdf_service or build_pdf_service(settings, pool)
        app.state.browser_pool = pool
        app.state.pdf_service = service
        logger.info(
            f"[startup] PDF service ready ({len(service.available_document_types())} document types, "
            f"max_browsers={pool.config.max_browsers}, max_pages={pool.config.max_pages_per_browser})"
        )

        try:
            yield
        except (asyncio.CancelledError, KeyboardInterrupt):
            logger.info("[shutdown] Shutdown signal received, cleaning up...")
        finally:
            await pool.force_cleanup()
            logger.info("[shutdown] Application shutting down gracefully")

    app = FastAPI(
        title="Project Genie Document Service",
        description="Project document formatting and PDF rendering. Licensed under AGPL-3.0.",
        version="0.1.0",
        lifespan=lifespan,
        redirect_slashes=False,
        docs_url="/docs" if settings.environment != "production" else None,
        redoc_url="/redoc" if settings.environment != "production" else None,
    )

    logger.info(f"[CORS] Configured origins: {settings.cors_origins_list}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-PDF-Cached", "X-PDF-Page-Count", "Content-Disposition"],
    )

    app.include_router(api_router, prefix="/api")

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
        """Handle APIError exceptions with standardized format."""
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "code": exc.detail.get("code", "API_ERROR"),
                "message": exc.detail.get("message", "An error occurred"),
                "details": exc.detail.get("details", {})
            }
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Handle request validation errors with standardized format."""
        errors = exc.errors()
        error_details = {
            "field_errors": {str(err["loc"][-1]): err["msg"] for err in errors if err["loc"]}
        }
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "code": "VALIDATION_ERROR",
                "message": "Invalid request data",
                "details": error_details
            }
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all handler for unhandled exceptions."""
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "code": "INTERNAL_ERROR",
                "message": "An internal error occurred. Please try again later.",
                "details": {}
            }
        )

    return app


app = create_app()
