# Project Genie Document Service
# Copyright (C) 2025 Project Genie
#
# Licensed under AGPL-3.0. See LICENSE file for details.
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from docgen.api.deps import get_browser_pool, get_pdf_service
from docgen.core.exceptions import NotFoundError, RenderFailedError
from docgen.schemas.pdf import DocumentTypeRead, GenerateDocumentRequest, HTMLResponse, PoolStatsRead
from docgen.services.pdf.browser_pool import BrowserPool
from docgen.services.pdf.service import PDFService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pdf", tags=["pdf"])


@router.get("/types", response_model=list[DocumentTypeRead], summary="List supported document types")
async def list_document_types(service: PDFService = Depends(get_pdf_service)) -> list[DocumentTypeRead]:
    return [
        DocumentTypeRead(document_type=document_type, title=service.document_title(document_type))
        for document_type in service.available_document_types()
    ]


@router.post("/generate", summary="Render a document to PDF")
async def generate_pdf(payload: GenerateDocumentRequest, service: PDFService = Depends(get_pdf_service)) -> Response:
    if not service.has_formatter(payload.document_type):
        raise NotFoundError("Document type", payload.document_type)

    result = await service.generate_pdf(
        payload.document_type,
        payload.content,
        project_name=payload.project_name,
        company_name=payload.company_name,
        options=payload.options,
        html_options=payload.html_options,
    )
    if not result.success or result.pdf is None:
        logger.error(f"[pdf] Generation failed for {payload.document_type}: {result.error}")
        raise RenderFailedError(result.error or "PDF generation failed", details={"document_type": payload.document_type})

    return Response(
        content=result.pdf.data,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{result.pdf.filename}"',
            "X-PDF-Cached": "true" if result.cached else "false",
            "X-PDF-Page-Count": str(result.pdf.page_count),
        },
    )


@router.post("/html", response_model=HTMLResponse, summary="Render a document to in-app HTML")
async def generate_html(payload: GenerateDocumentRequest, service: PDFService = Depends(get_pdf_service)) -> HTMLResponse:
    if not service.has_formatter(payload.document_type):
        raise NotFoundError("Document type", payload.document_type)
    html = service.generate_html(
        payload.document_type,
        payload.content,
        project_name=payload.project_name,
        company_name=payload.company_name,
        options=payload.options,
        html_options=payload.html_options,
    )
    return HTMLResponse(
        document_type=payload.document_type,
        title=service.document_title(payload.document_type),
        html=html,
    )


@router.get("/pool/stats", response_model=PoolStatsRead, summary="Browser pool statistics")
async def pool_stats(pool: BrowserPool = Depends(get_browser_pool)) -> PoolStatsRead:
    return PoolStatsRead(**pool.get_stats())
