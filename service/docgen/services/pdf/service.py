# Project Genie Document Service
# Copyright (C) 2025 Project Genie
#
# Licensed under AGPL-3.0. See LICENSE file for details.
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""
PDF service: the single entry point for turning document content into HTML or PDF.

Pipeline:
1. Resolve tier defaults and build per-render metadata
2. Check the cache (a hit skips formatting and rendering)
3. Normalize + format via the registered formatter (error report on failure)
4. Assemble the printable page
5. Render with the pooled browser, count pages, cache the result
"""
import asyncio
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional

from docgen.schemas.pdf import HTMLFormatterOptions, PDFOptions
from docgen.services.documents import formatters
from docgen.services.documents.assembler import build_document, build_error_report, render_fragment
from docgen.services.documents.metadata import DocumentMetadata, FormattedDocument
from docgen.services.documents.toolkit import generate_id
from docgen.services.pdf.cache import PDFCache
from docgen.services.pdf.exceptions import PDFGenerationError
from docgen.services.pdf.renderer import PDFRenderer

logger = logging.getLogger(__name__)

_PAGE_OBJECT_RE = re.compile(rb"/Type\s*/Page[^s]")


def count_pages(pdf: bytes) -> int:
    """Page objects in the PDF body; at least 1 for any successful render."""
    return max(1, len(_PAGE_OBJECT_RE.findall(pdf or b"")))


@dataclass
class GeneratedPDF:
    data: bytes
    page_count: int
    metadata: DocumentMetadata
    filename: str

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class PDFGenerationResult:
    success: bool
    pdf: Optional[GeneratedPDF] = None
    error: Optional[str] = None
    cached: bool = False


class PDFService:
    def __init__(self, renderer: PDFRenderer, cache: Optional[PDFCache] = None):
        self.renderer = renderer
        self.cache = cache

    # Registry passthroughs ------------------------------------------------

    @staticmethod
    def available_document_types() -> List[str]:
        return formatters.available_document_types()

    @staticmethod
    def has_formatter(document_type: str) -> bool:
        return formatters.has_formatter(document_type)

    @staticmethod
    def document_title(document_type: str) -> str:
        return formatters.document_title(document_type)

    # Building blocks ------------------------------------------------------

    def build_metadata(
        self,
        document_type: str,
        project_name: str,
        company_name: Optional[str],
        options: PDFOptions,
    ) -> DocumentMetadata:
        project = project_name or "Project"
        return DocumentMetadata.create(
            project_name=project,
            company_name=company_name,
            author=options.author,
            document_type=document_type,
            title=f"{project} - {self.document_title(document_type)}",
            start_date=options.start_date,
            end_date=options.end_date,
            budget=options.budget,
            timeline=options.timeline,
        )

    def _format(
        self,
        document_type: str,
        content: Any,
        metadata: DocumentMetadata,
        html_options: Optional[HTMLFormatterOptions],
    ) -> FormattedDocument:
        formatter = formatters.get_formatter(document_type)
        return formatter.format(content, metadata, html_options)

    def build_pdf_html(
        self,
        document_type: str,
        content: Any,
        metadata: DocumentMetadata,
        options: PDFOptions,
        html_options: Optional[HTMLFormatterOptions] = None,
    ) -> str:
        """Printable page for the PDF, or the formatting error report."""
        try:
            doc = self._format(document_type, content, metadata, html_options)
        except Exception as e:
            logger.error(f"[pdf_service] Formatting {document_type} failed, rendering error report: {e}", exc_info=True)
            return build_error_report(document_type, content, metadata, e)
        return build_document(doc, options)

    # Public operations ----------------------------------------------------

    def generate_html(
        self,
        document_type: str,
        content: Any,
        project_name: str = "Project",
        company_name: Optional[str] = None,
        options: Optional[PDFOptions] = None,
        html_options: Optional[HTMLFormatterOptions] = None,
    ) -> str:
        """In-app HTML, the same fragment the PDF page is built around.

        Raises:
            KeyError: If no formatter is registered for ``document_type``
        """
        options = (options or PDFOptions()).with_tier_defaults()
        metadata = self.build_metadata(document_type, project_name, company_name, options)
        if not self.has_formatter(document_type):
            raise KeyError(document_type)
        try:
            doc = self._format(document_type, content, metadata, html_options)
        except Exception as e:
            logger.error(f"[pdf_service] Formatting {document_type} failed, returning error report: {e}", exc_info=True)
            return build_error_report(document_type, content, metadata, e)
        return render_fragment(doc, white_label=options.white_label)

    async def generate_pdf(
        self,
        document_type: str,
        content: Any,
        project_name: str = "Project",
        company_name: Optional[str] = None,
        options: Optional[PDFOptions] = None,
        html_options: Optional[HTMLFormatterOptions] = None,
    ) -> PDFGenerationResult:
        """
        Generate a PDF for ``content``.

        Never raises: every failure comes back as ``success=False`` with a
        readable ``error``.

        Args:
            document_type: Registered document type (e.g. "charter")
            content: Loosely-shaped document content, any JSON value
            project_name: Project name for the cover and title
            company_name: Organization name for the cover
            options: PDF presentation, tier and cache options
            html_options: Formatter flags (TOC, charts, cover ...)

        Returns:
            PDFGenerationResult
        """
        if not self.has_formatter(document_type):
            logger.warning(f"[pdf_service] Unsupported document type: {document_type}")
            return PDFGenerationResult(success=False, error=f"Unsupported document type: {document_type}")

        try:
            options = (options or PDFOptions()).with_tier_defaults()
            metadata = self.build_metadata(document_type, project_name, company_name, options)
            filename = f"{generate_id(metadata.project_name)}-{document_type.replace('_', '-')}.pdf"

            cache_key = None
            if self.cache is not None and options.use_cache:
                cache_key = self.cache.build_key(
                    options.user_id,
                    options.document_id,
                    document_type,
                    content,
                    options,
                    context={
                        "project_name": metadata.project_name,
                        "company_name": metadata.company_name,
                        "html_options": html_options.model_dump() if html_options else None,
                    },
                )
                if not options.force_regenerate:
                    hit = await self.cache.get(cache_key)
                    if hit is not None:
                        logger.info(f"[pdf_service] Serving {document_type} from cache ({hit.key})")
                        return PDFGenerationResult(
                            success=True,
                            pdf=GeneratedPDF(data=hit.data, page_count=hit.page_count, metadata=metadata, filename=filename),
                            cached=True,
                        )

            html = self.build_pdf_html(document_type, content, metadata, options, html_options)
            logger.info(f"[pdf_service] Rendering {document_type} for '{metadata.project_name}' ({len(html)} chars of HTML)")
            data = await self.renderer.render(html, options)
            page_count = count_pages(data)

            if cache_key is not None:
                await self.cache.put(cache_key, data, page_count)

            logger.info(f"[pdf_service] Generated {document_type}: {page_count} pages, {len(data)} bytes")
            return PDFGenerationResult(
                success=True,
                pdf=GeneratedPDF(data=data, page_count=page_count, metadata=metadata, filename=filename),
            )
        except PDFGenerationError as e:
            logger.error(f"[pdf_service] PDF generation failed for {document_type}: {e}")
            return PDFGenerationResult(success=False, error=str(e))
        except Exception as e:
            logger.error(f"[pdf_service] Unexpected error generating {document_type}: {e}", exc_info=True)
            return PDFGenerationResult(success=False, error=f"PDF generation failed: {e}")

    async def generate_pdf_to_file(self, path: Path | str, document_type: str, content: Any, **kwargs: Any) -> PDFGenerationResult:
        """``generate_pdf`` and write the bytes to ``path`` on success."""
        result = await self.generate_pdf(document_type, content, **kwargs)
        if result.success and result.pdf is not None:
            target = Path(path)
            try:
                await asyncio.to_thread(target.parent.mkdir, parents=True, exist_ok=True)
                await asyncio.to_thread(target.write_bytes, result.pdf.data)
            except OSError as e:
                logger.error(f"[pdf_service] Could not write {target}: {e}")
                return PDFGenerationResult(success=False, error=f"Could not write PDF to {target}: {e}")
            logger.info(f"[pdf_service] Wrote {result.pdf.size} bytes to {target}")
        return result
