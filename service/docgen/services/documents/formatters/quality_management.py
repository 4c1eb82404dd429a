"""Quality management plan formatter."""
from docgen.services.documents.formatters.base import BaseFormatter
from docgen.services.documents.html import (
    Element,
    bullet_list,
    format_content,
    paragraph,
    paragraphs,
    placeholder,
    subsection,
    table,
)
from docgen.services.documents.mermaid import chain_flowchart
from docgen.services.documents.toolkit import as_text, parse_amount

PDCA = ["Plan", "Do", "Check", "Act"]


def metric_status(current, target) -> str:
    """On Track at 95% of target, At Risk from 80%, Off Track below; N/A when either side is not numeric."""
    current_value = parse_amount(current)
    target_value = parse_amount(target)
    if current_value is None or not target_value:
        return "N/A"
    if as_text(target).strip().startswith("<"):
        ratio = 100.0 if current_value <= target_value else target_value / current_value * 100
    else:
        ratio = current_value / target_value * 100
    if ratio >= 95:
        return "On Track"
    if ratio >= 80:
        return "At Risk"
    return "Off Track"


def _structured(value):
    if isinstance(value, dict):
        return [subsection(key[:1].upper() + key[1:], format_content(item), level=4) for key, item in value.items()]
    return format_content(value) or placeholder()


class QualityManagementFormatter(BaseFormatter):
    document_type = "quality_management"
    title = "Quality Management Plan"

    def sections(self):
        return [
            ("Introduction", self.introduction),
            ("Quality Policy", self.policy),
            ("Quality Standards", self.standards),
            ("Quality Processes", self.processes),
            ("Quality Metrics", self.metrics),
            ("Quality Assurance", lambda data: _structured(data["assurance"])),
            ("Quality Control", lambda data: _structured(data["control"])),
            ("Review Procedures", self.reviews),
            ("Roles and Responsibilities", self.roles),
            ("Quality Tools", self.tools),
            ("Continuous Improvement", lambda data: _structured(data["improvement"])),
        ]

    def introduction(self, data):
        return paragraphs(data["introduction"])

    def policy(self, data):
        return Element("div", *paragraphs(data["qualityPolicy"]), class_="policy-box")

    def standards(self, data):
        rows = [
            [Element("strong", as_text(standard["name"])), standard.get("description"), standard.get("compliance"), f"{self.indicator(standard.get('status'))} {as_text(standard.get('status'))}".strip()]
            for standard in data["standards"]
        ]
        return table(rows, headers=["Standard", "Description", "Compliance", "Status"])

    def processes(self, data):
        children = []
        for process in data["processes"]:
            children.append(subsection(
                as_text(process["name"]),
                paragraph(process.get("description")),
                bullet_list(process.get("steps") or [], ordered=True),
            ))
        children.append(subsection("Quality Process Flow", self.chart(chain_flowchart(PDCA), "flowchart", "PDCA Cycle")) if self.options.include_charts else "")
        return children

    def metrics(self, data):
        rows = []
        for metric in data["metrics"]:
            status = metric_status(metric.get("current"), metric.get("target"))
            rows.append([
                Element("strong", as_text(metric["name"])),
                metric.get("current"),
                metric.get("target"),
                metric.get("unit"),
                f"{self.indicator(status)} {status}".strip() if status != "N/A" else status,
            ])
        return table(rows, headers=["Metric", "Current", "Target", "Unit", "Status"], class_="data-table metrics-table")

    def reviews(self, data):
        if not data["reviews"]:
            return paragraph("Quality reviews follow the standard PRINCE2 quality review technique at each stage boundary.")
        return table(data["reviews"], columns=["type", "frequency", "participants"], headers=["Review", "Frequency", "Participants"])

    def roles(self, data):
        return table(data["roles"], columns=["role", "responsibilities"], headers=["Role", "Responsibilities"])

    def tools(self, data):
        if not data["tools"]:
            return None
        return table(data["tools"], columns=["name", "purpose"], headers=["Tool", "Purpose"])
