#!/usr/bin/env python3
"""
Render a document JSON file to PDF (or HTML) from the command line.

Usage:
    python -m scripts.render_document charter input.json charter.pdf
    python scripts/render_document.py backlog backlog.json out.html --html

The browser pool is always cleaned up, including on Ctrl+C and SIGTERM.
"""

import argparse
import asyncio
import json
import logging
import signal
import sys
from pathlib import Path

# Add parent directory to path so we can import docgen modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from docgen.core.config import get_settings  # noqa: E402
from docgen.core.logging import configure_logging  # noqa: E402
from docgen.main import build_pdf_service  # noqa: E402
from docgen.schemas.pdf import HTMLFormatterOptions, PDFOptions  # noqa: E402
from docgen.services.pdf.browser_pool import BrowserPool, PoolConfig  # noqa: E402

logger = logging.getLogger("render_document")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Render a project document to PDF")
    parser.add_argument("document_type", help="Document type, e.g. charter, risk_register, backlog")
    parser.add_argument("input", type=Path, help="JSON file with the document content")
    parser.add_argument("output", type=Path, help="Where to write the PDF (or HTML with --html)")
    parser.add_argument("--project", default="Project", help="Project name for the cover page")
    parser.add_argument("--company", default=None, help="Organization name for the cover page")
    parser.add_argument("--tier", choices=["free", "basic", "premium"], default="free")
    parser.add_argument("--watermark", default=None, help="Custom watermark text (paid tiers)")
    parser.add_argument("--draft", action="store_true", help="Mark the document as a draft")
    parser.add_argument("--classification", choices=["CONFIDENTIAL", "INTERNAL", "PUBLIC"], default=None)
    parser.add_argument("--format", choices=["A4", "Letter"], default="A4")
    parser.add_argument("--no-charts", action="store_true", help="Leave out diagrams")
    parser.add_argument("--no-cache", action="store_true", help="Skip the PDF cache")
    parser.add_argument("--html", action="store_true", help="Write the printable HTML instead of a PDF")
    return parser.parse_args(argv)


def load_content(path: Path):
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        logger.warning(f"[render_document] {path} is not valid JSON ({e}); rendering it as text")
        return path.read_text(encoding="utf-8")


async def run(args: argparse.Namespace) -> int:
    settings = get_settings()
    pool = BrowserPool(PoolConfig.from_settings(settings))
    service = build_pdf_service(settings, pool)

    loop = asyncio.get_running_loop()
    task = asyncio.current_task()
    handled = []
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, task.cancel)
            handled.append(sig)
        except (NotImplementedError, RuntimeError):
            # Windows event loops have no signal handler support
            pass

    options = PDFOptions(
        user_tier=args.tier,
        watermark_text=args.watermark,
        show_draft=args.draft,
        classification=args.classification,
        format=args.format,
        use_cache=not args.no_cache,
    )
    html_options = HTMLFormatterOptions(include_charts=not args.no_charts)

    try:
        if not service.has_formatter(args.document_type):
            types = ", ".join(service.available_document_types())
            print(f"Unknown document type '{args.document_type}'. Available: {types}", file=sys.stderr)
            return 2

        content = load_content(args.input)
        if args.html:
            metadata = service.build_metadata(args.document_type, args.project, args.company, options)
            html = service.build_pdf_html(args.document_type, content, metadata, options, html_options)
            args.output.parent.mkdir(parents=True, exist_ok=True)
            args.output.write_text(html, encoding="utf-8")
            print(f"Wrote HTML to {args.output}")
            return 0

        result = await service.generate_pdf_to_file(
            args.output,
            args.document_type,
            content,
            project_name=args.project,
            company_name=args.company,
            options=options,
            html_options=html_options,
        )
        if not result.success:
            print(f"PDF generation failed: {result.error}", file=sys.stderr)
            return 1
        cached = " (cached)" if result.cached else ""
        print(f"Wrote {result.pdf.page_count} pages to {args.output}{cached}")
        return 0
    except asyncio.CancelledError:
        print("Interrupted, cleaning up...", file=sys.stderr)
        return 130
    finally:
        for sig in handled:
            loop.remove_signal_handler(sig)
        await pool.force_cleanup()


def main(argv=None) -> int:
    args = parse_args(argv)
    configure_logging(get_settings().log_level)
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
