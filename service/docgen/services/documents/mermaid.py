"""
Mermaid diagram descriptions embedded in the HTML.

The builders return plain Mermaid text; ``mermaid_block`` wraps it in the
``<pre class="mermaid">`` container the client-side library converts to SVG.
If the library never loads, the escaped source stays readable in the page.
"""
import re
from datetime import date, timedelta
from typing import Iterable, List, Optional, Sequence, Tuple

from docgen.services.documents.dates import parse_date
from docgen.services.documents.html import Element
from docgen.services.documents.toolkit import format_number, is_number

MERMAID_CONTAINER_MARKER = 'class="mermaid"'

_UNSAFE_LABEL_RE = re.compile(r"[:;\"#{}\[\]()<>|`]")


def sanitize_label(text, limit: int = 60) -> str:
    """Strip characters that terminate Mermaid statements and collapse whitespace."""
    cleaned = _UNSAFE_LABEL_RE.sub(" ", str(text or ""))
    cleaned = re.sub(r"\s+", " ", cleaned).strip()
    if len(cleaned) > limit:
        cleaned = cleaned[: limit - 3].rstrip() + "..."
    return cleaned or "Untitled"


def contains_diagrams(html: str) -> bool:
    return MERMAID_CONTAINER_MARKER in html


def mermaid_block(definition: str, chart_type: str, caption: Optional[str] = None) -> Element | str:
    if not definition:
        return ""
    return Element(
        "div",
        Element("pre", definition, class_="mermaid"),
        Element("p", caption, class_="chart-caption") if caption else "",
        class_="mermaid-chart",
        data_chart_type=chart_type,
    )


def pie_chart(title: str, data: Iterable[Tuple[str, float]]) -> str:
    slices = [(sanitize_label(label), value) for label, value in data if is_number(value) and value > 0]
    if not slices:
        return ""
    lines = [f"pie title {sanitize_label(title)}"]
    lines.extend(f'    "{label}" : {format_number(value).replace(",", "")}' for label, value in slices)
    return "\n".join(lines)


def gantt_chart(
    title: str,
    sections: Sequence[Tuple[str, Sequence[dict]]],
    start_date=None,
) -> str:
    """
    Gantt description; each task dict has ``name`` and optional ``start``,
    ``end``, ``days`` and ``status`` (done/active/crit/milestone).

    Tasks without their own start follow the previous task; the first task
    falls back to ``start_date`` or today.
    """
    if not any(tasks for _, tasks in sections):
        return ""
    anchor = parse_date(start_date) or date.today()
    lines = [
        "gantt",
        f"    title {sanitize_label(title)}",
        "    dateFormat YYYY-MM-DD",
        "    axisFormat %b %Y",
    ]
    counter = 0
    previous_id = None
    for section_name, tasks in sections:
        if not tasks:
            continue
        lines.append(f"    section {sanitize_label(section_name, 40)}")
        for task in tasks:
            counter += 1
            task_id = f"t{counter}"
            tags = [task["status"]] if task.get("status") in ("done", "active", "crit", "milestone") else []
            start = parse_date(task.get("start"))
            end = parse_date(task.get("end"))
            days = task.get("days") if is_number(task.get("days")) else None
            if start and end and end >= start:
                days = max(1, (end - start).days)
            length = "0d" if "milestone" in tags else f"{int(days or 30)}d"
            if start:
                when = start.isoformat()
            elif previous_id:
                when = f"after {previous_id}"
            else:
                when = anchor.isoformat()
            spec = ", ".join(tags + [task_id, when, length])
            lines.append(f"    {sanitize_label(task.get('name'), 50)} :{spec}")
            previous_id = task_id
    return "\n".join(lines)


def quadrant_chart(
    title: str,
    x_axis: Tuple[str, str],
    y_axis: Tuple[str, str],
    quadrants: Sequence[str],
    points: Iterable[Tuple[str, float, float]],
) -> str:
    """Quadrant chart; point coordinates are clamped to [0.05, 0.95]."""
    plotted = list(points)
    if not plotted:
        return ""
    lines = [
        "quadrantChart",
        f"    title {sanitize_label(title)}",
        f"    x-axis {sanitize_label(x_axis[0], 25)} --> {sanitize_label(x_axis[1], 25)}",
        f"    y-axis {sanitize_label(y_axis[0], 25)} --> {sanitize_label(y_axis[1], 25)}",
    ]
    for number, label in zip(("quadrant-1", "quadrant-2", "quadrant-3", "quadrant-4"), quadrants):
        lines.append(f"    {number} {sanitize_label(label, 30)}")
    for label, x, y in plotted:
        x = min(0.95, max(0.05, float(x)))
        y = min(0.95, max(0.05, float(y)))
        lines.append(f"    {sanitize_label(label, 30)}: [{x:.2f}, {y:.2f}]")
    return "\n".join(lines)


def timeline_chart(title: str, entries: Iterable[Tuple[str, str]]) -> str:
    rows = list(entries)
    if not rows:
        return ""
    lines = ["timeline", f"    title {sanitize_label(title)}"]
    lines.extend(f"    {sanitize_label(period, 30)} : {sanitize_label(event)}" for period, event in rows)
    return "\n".join(lines)


def flowchart(nodes: Sequence[Tuple[str, str]], edges: Sequence[tuple] = (), direction: str = "TD") -> str:
    if not nodes:
        return ""
    lines = [f"flowchart {direction}"]
    lines.extend(f'    {node_id}["{sanitize_label(label)}"]' for node_id, label in nodes)
    for edge in edges:
        source, target = edge[0], edge[1]
        label = edge[2] if len(edge) > 2 and edge[2] else None
        lines.append(f"    {source} -->|{sanitize_label(label, 30)}| {target}" if label else f"    {source} --> {target}")
    return "\n".join(lines)


def chain_flowchart(labels: Sequence[str], direction: str = "LR") -> str:
    """Linear process flow A --> B --> C."""
    nodes = [(f"n{i}", label) for i, label in enumerate(labels)]
    edges = [(f"n{i}", f"n{i + 1}") for i in range(len(labels) - 1)]
    return flowchart(nodes, edges, direction)


def bar_chart(title: str, labels: Sequence[str], values: Sequence[float], y_label: str = "Value") -> str:
    points = [(sanitize_label(label, 20), float(value)) for label, value in zip(labels, values) if is_number(value)]
    if not points:
        return ""
    top = max(value for _, value in points) or 1
    label_list = ", ".join(f'"{label}"' for label, _ in points)
    value_list = ", ".join(format_number(value).replace(",", "") for _, value in points)
    return "\n".join([
        "xychart-beta",
        f'    title "{sanitize_label(title)}"',
        f"    x-axis [{label_list}]",
        f'    y-axis "{sanitize_label(y_label, 30)}" 0 --> {format_number(top * 1.2).replace(",", "")}',
        f"    bar [{value_list}]",
    ])


def mindmap(root: str, branches: Sequence[Tuple[str, List[str]]]) -> str:
    if not branches:
        return ""
    lines = ["mindmap", f"  root(({sanitize_label(root, 40)}))"]
    for branch, leaves in branches:
        lines.append(f"    {sanitize_label(branch, 40)}")
        lines.extend(f"      {sanitize_label(leaf, 40)}" for leaf in leaves)
    return "\n".join(lines)


def days_between(start, end) -> Optional[int]:
    first, last = parse_date(start), parse_date(end)
    if first is None or last is None:
        return None
    return max(1, (last - first).days)


def offset_date(start, days: int) -> str:
    anchor = parse_date(start) or date.today()
    return (anchor + timedelta(days=days)).isoformat()
