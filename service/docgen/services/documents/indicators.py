"""Presentation helpers: status glyphs, highlight boxes, progress bars, comparison matrices."""
from typing import Any, Sequence

from docgen.services.documents.html import Element, cell
from docgen.services.documents.toolkit import as_text, clamp_percentage, format_number

INDICATOR_GLYPHS = {
    "good": "🟢",
    "success": "🟢",
    "low": "🟢",
    "complete": "🟢",
    "completed": "🟢",
    "done": "🟢",
    "on track": "🟢",
    "warning": "🟡",
    "medium": "🟡",
    "at risk": "🟡",
    "in progress": "🟡",
    "bad": "🔴",
    "error": "🔴",
    "high": "🔴",
    "critical": "🔴",
    "blocked": "🔴",
    "off track": "🔴",
    "info": "🔵",
    "planned": "🔵",
    "not started": "⚪",
}

HIGHLIGHT_KINDS = ("info", "success", "warning", "error")


def visual_indicator(status: Any, with_label: bool = False) -> str:
    key = as_text(status).strip().lower()
    glyph = INDICATOR_GLYPHS.get(key, "⚪")
    return f"{glyph} {as_text(status)}" if with_label else glyph


def status_badge(status: Any) -> Element:
    label = as_text(status) or "Unknown"
    return Element("span", label, class_=f"badge badge-{label.lower().replace(' ', '-')}")


def highlight_box(title: str, body: Any, kind: str = "info") -> Element:
    if kind not in HIGHLIGHT_KINDS:
        kind = "info"
    content = body if isinstance(body, (Element, list)) else Element("p", as_text(body))
    return Element(
        "div",
        Element("div", title, class_="highlight-box-title"),
        content,
        class_=f"highlight-box highlight-{kind}",
    )


def progress_bar(percentage: Any, label: str | None = None) -> Element:
    pct = clamp_percentage(percentage)
    return Element(
        "div",
        Element("div", label, class_="progress-label") if label else "",
        Element("div", Element("div", class_="progress-fill", style=f"width: {format_number(pct)}%"), class_="progress-bar"),
        Element("div", f"{format_number(pct)}%", class_="progress-text"),
        class_="progress-container",
    )


def comparison_matrix(options: Sequence[dict], criteria: Sequence[str], name_key: str = "name") -> Element | str:
    """Options as columns, criteria as rows; a missing rating shows "-"."""
    if not options or not criteria:
        return ""
    header = Element("tr", Element("th", "Criteria"), *[Element("th", as_text(opt.get(name_key)) or f"Option {i + 1}") for i, opt in enumerate(options)])
    rows = []
    for criterion in criteria:
        row = [Element("td", Element("strong", criterion))]
        for option in options:
            scores = option.get("scores") if isinstance(option.get("scores"), dict) else option
            row.append(Element("td", cell(scores.get(criterion))))
        rows.append(Element("tr", *row))
    return Element("table", Element("thead", header), Element("tbody", *rows), class_="data-table comparison-matrix")
