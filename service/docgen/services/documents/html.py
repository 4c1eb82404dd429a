"""
Small HTML component tree used by every formatter.

Plain ``str`` children are always escaped when rendered; only ``Markup``
(produced by this module, the diagram helpers or Jinja) passes through as-is.
Sections carry the id/class the assembler and the print CSS rely on.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence

from markupsafe import Markup

from docgen.services.documents.toolkit import (
    as_text,
    escape_html,
    format_header,
    format_number,
    generate_id,
    is_number,
    is_placeholder,
)

VOID_TAGS = {"br", "hr", "img", "meta", "link", "col"}


def _attr_name(name: str) -> str:
    if name in ("class_", "cls"):
        return "class"
    return name.rstrip("_").replace("_", "-")


def render(node: Any) -> str:
    """Render any supported node to an HTML string."""
    if node is None or node is False:
        return ""
    if isinstance(node, (Element, Section)):
        return node.render()
    if isinstance(node, Markup):
        return str(node)
    if isinstance(node, (list, tuple)):
        return "".join(render(child) for child in node)
    if is_number(node):
        return format_number(node)
    return escape_html(node)


class Element:
    """An HTML element; keyword attributes use ``class_`` / ``data_x`` spelling."""

    def __init__(self, tag: str, *children: Any, **attrs: Any):
        self.tag = tag
        self.children = list(children)
        self.attrs = attrs

    def append(self, *children: Any) -> "Element":
        self.children.extend(children)
        return self

    def render(self) -> str:
        parts = [self.tag]
        for name, value in self.attrs.items():
            if value is None or value is False:
                continue
            if value is True:
                parts.append(_attr_name(name))
            else:
                parts.append(f'{_attr_name(name)}="{escape_html(value)}"')
        opening = "<" + " ".join(parts) + ">"
        if self.tag in VOID_TAGS:
            return opening
        return f"{opening}{render(self.children)}</{self.tag}>"

    def __html__(self) -> str:
        return self.render()

    def __str__(self) -> str:
        return self.render()


def h(tag: str, *children: Any, **attrs: Any) -> Element:
    return Element(tag, *children, **attrs)


@dataclass
class Section:
    """A top-level document section, one page-break unit in the PDF."""

    title: str
    children: list = field(default_factory=list)
    id: str | None = None
    number: int | None = None
    in_toc: bool = True
    page_break: bool = False
    css_class: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            self.id = generate_id(self.title)

    @property
    def heading(self) -> str:
        return f"{self.number}. {self.title}" if self.number else self.title

    def render(self) -> str:
        classes = " ".join(c for c in ("document-section", self.css_class, "page-break-before" if self.page_break else "") if c)
        return Element("section", Element("h2", self.heading), *self.children, class_=classes, id=self.id).render()

    def __html__(self) -> str:
        return self.render()


def subsection(title: str, *children: Any, level: int = 3) -> Element:
    return Element("div", Element(f"h{level}", title), *children, class_="subsection")


def paragraph(text: Any, class_: str | None = None) -> Element | str:
    """Paragraph that flags default-fill text with the ``placeholder`` class."""
    if text in (None, ""):
        return ""
    if isinstance(text, (Element, Markup)):
        return Element("p", text, class_=class_)
    value = as_text(text)
    if is_placeholder(value):
        class_ = f"{class_} placeholder" if class_ else "placeholder"
    return Element("p", value, class_=class_)


def paragraphs(text: Any) -> list:
    """Split free text on blank lines into paragraphs."""
    if not isinstance(text, str):
        return [paragraph(text)]
    blocks = [block.strip() for block in text.split("\n\n") if block.strip()]
    return [paragraph(block) for block in blocks] or [paragraph(text)]


def placeholder(text: str = "To be defined") -> Element:
    return Element("p", text, class_="placeholder")


# Headings, table headers and diagram sources are never marked
UNMARKED_TAGS = {"h1", "h2", "h3", "h4", "h5", "h6", "th", "pre", "script", "style"}


def mark_defaults(node: Any, texts: set) -> Any:
    """
    Wrap text children that match default-fill values in a ``placeholder``
    span, so example content reads differently from authored content.
    Elements and sections are updated in place; the node is returned.
    """
    if not texts or node is None:
        return node
    if isinstance(node, Section):
        node.children = [mark_defaults(child, texts) for child in node.children]
        return node
    if isinstance(node, Element):
        css = str(node.attrs.get("class_") or node.attrs.get("cls") or "")
        if node.tag in UNMARKED_TAGS or "placeholder" in css.split():
            return node
        node.children = [mark_defaults(child, texts) for child in node.children]
        return node
    if isinstance(node, (list, tuple)):
        return [mark_defaults(child, texts) for child in node]
    if isinstance(node, Markup):
        return node
    if isinstance(node, str) and node.strip() in texts:
        return Element("span", node, class_="placeholder default-content")
    return node


def cell(value: Any) -> Any:
    """Table cell content: booleans as ticks, numbers formatted, records flattened."""
    if isinstance(value, (Element, Markup)):
        return value
    if isinstance(value, bool):
        return "✅" if value else "❌"
    if value is None or value == "":
        return "-"
    if is_number(value):
        return format_number(value)
    text = as_text(value)
    if is_placeholder(text):
        return Element("span", text, class_="placeholder")
    return text


def table(
    rows: Sequence[Any],
    columns: Sequence[str] | None = None,
    headers: Sequence[str] | None = None,
    class_: str = "data-table",
) -> Element | str:
    """
    Render records (dicts) or row sequences as a table.

    With dict rows and no ``columns`` the header row comes from the first
    record's keys.
    """
    rows = [row for row in rows if row is not None]
    if not rows:
        return ""
    if isinstance(rows[0], dict):
        keys = list(columns) if columns else list(rows[0].keys())
        head = list(headers) if headers else [format_header(key) for key in keys]
        body = [[row.get(key) if isinstance(row, dict) else row for key in keys] for row in rows]
    else:
        body = [list(row) if isinstance(row, (list, tuple)) else [row] for row in rows]
        head = list(headers) if headers else []

    thead = Element("thead", Element("tr", *[Element("th", label) for label in head])) if head else ""
    tbody = Element("tbody", *[Element("tr", *[Element("td", cell(value)) for value in row]) for row in body])
    return Element("table", thead, tbody, class_=class_)


def bullet_list(items: Iterable[Any], ordered: bool = False, class_: str | None = None) -> Element | str:
    entries = [item for item in items if item not in (None, "")]
    if not entries:
        return ""
    return Element("ol" if ordered else "ul", *[Element("li", list_item(item)) for item in entries], class_=class_)


def list_item(item: Any) -> Any:
    if isinstance(item, (Element, Markup)):
        return item
    if isinstance(item, dict):
        title = item.get("title") or item.get("name")
        description = item.get("description") or item.get("details")
        if title and description:
            return [Element("strong", as_text(title)), ": ", as_text(description)]
    text = as_text(item)
    if is_placeholder(text):
        return Element("span", text, class_="placeholder")
    return text


def definition_list(mapping: dict, class_: str = "key-value-list") -> Element | str:
    if not mapping:
        return ""
    children = []
    for key, value in mapping.items():
        children.append(Element("dt", format_header(key)))
        children.append(Element("dd", cell(value)))
    return Element("dl", *children, class_=class_)


def format_content(content: Any) -> Any:
    """Pick a renderer from the value's shape: text, list, records or mapping."""
    if content is None or content == "":
        return ""
    if isinstance(content, (Element, Markup)):
        return content
    if isinstance(content, str):
        return paragraphs(content)
    if isinstance(content, (list, tuple)):
        if content and all(isinstance(item, dict) for item in content):
            return table(content)
        return bullet_list(content)
    if isinstance(content, dict):
        return definition_list(content)
    return paragraph(content)


def metric_card(label: str, value: Any) -> Element:
    return Element("div", Element("div", cell(value), class_="metric-value"), Element("div", label, class_="metric-label"), class_="metric-card")


def metrics_grid(metrics: dict) -> Element:
    return Element("div", *[metric_card(label, value) for label, value in metrics.items()], class_="metrics-grid")
