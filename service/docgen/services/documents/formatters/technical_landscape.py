"""Technical landscape formatter."""
from docgen.services.documents.formatters.base import BaseFormatter
from docgen.services.documents.html import (
    Element,
    bullet_list,
    definition_list,
    format_content,
    paragraph,
    paragraphs,
    placeholder,
    subsection,
    table,
)
from docgen.services.documents.mermaid import flowchart, mindmap
from docgen.services.documents.normalizers.technical_landscape import STACK_LAYERS
from docgen.services.documents.toolkit import as_text, format_header

LAYER_LABELS = {
    "frontend": "Frontend",
    "backend": "Backend",
    "database": "Data Layer",
    "infrastructure": "Infrastructure",
    "tools": "Tooling",
}
ARCHITECTURE_EXTRAS = (("patterns", "Architecture Patterns"), ("decisions", "Key Decisions"))


def _block(value):
    """Free-form value (text, list or mapping) with a placeholder for empty input."""
    if isinstance(value, dict):
        return [subsection(format_header(key), format_content(item), level=4) for key, item in value.items()] or placeholder()
    return format_content(value) or placeholder()


class TechnicalLandscapeFormatter(BaseFormatter):
    document_type = "technical_landscape"
    title = "Technical Landscape Analysis"

    def sections(self):
        return [
            ("Executive Summary", self.executive_summary),
            ("Current State Analysis", self.current_state),
            ("Technology Stack", self.tech_stack),
            ("System Architecture", self.architecture),
            ("Integrations & Interfaces", self.integrations),
            ("Infrastructure", lambda data: _block(data["infrastructure"])),
            ("Security Architecture", lambda data: _block(data["security"])),
            ("Performance Requirements", lambda data: _block(data["performance"])),
            ("Technical Debt", self.technical_debt),
            ("Gap Analysis", self.gap_analysis),
            ("Future State & Roadmap", self.future_state),
            ("Technical Risks", self.risks),
            ("Recommendations", self.recommendations),
        ]

    def executive_summary(self, data):
        return paragraphs(data["executiveSummary"])

    def current_state(self, data):
        return [
            paragraph(f"The current technology landscape of {self.metadata.company_name} is characterised by:"),
            bullet_list(data["currentState"]),
        ]

    def _stack_layers(self, stack):
        layers = [layer for layer in STACK_LAYERS if stack.get(layer)]
        return layers + [key for key in stack if key not in STACK_LAYERS and stack[key]]

    def tech_stack(self, data):
        stack = data["techStack"]
        layers = self._stack_layers(stack)
        if not layers:
            return placeholder("Technology stack to be defined")
        rows = [[Element("strong", LAYER_LABELS.get(layer, format_header(layer))), ", ".join(stack[layer])] for layer in layers]
        branches = [(LAYER_LABELS.get(layer, format_header(layer)), stack[layer]) for layer in layers]
        return [
            table(rows, headers=["Layer", "Technologies"], class_="data-table tech-stack-table"),
            self.chart(mindmap("Technology Stack", branches), "mindmap"),
        ]

    def architecture(self, data):
        architecture = data["architecture"]
        children = [subsection("Architecture Overview", *paragraphs(architecture["overview"]))]
        components = architecture["components"]
        if components:
            children.append(subsection(
                "System Components",
                table(components, columns=["name", "technology", "description"], headers=["Component", "Technology", "Description"]),
            ))
        for key, heading in ARCHITECTURE_EXTRAS:
            if architecture.get(key):
                children.append(subsection(heading, format_content(architecture[key])))
        extra = {
            key: value for key, value in architecture.items()
            if key not in ("overview", "components") and key not in dict(ARCHITECTURE_EXTRAS)
        }
        if extra:
            children.append(definition_list(extra))
        return children

    def integrations(self, data):
        integrations = data["integrations"]
        if not integrations:
            return placeholder("Integrations to be defined")
        nodes = [("CORE", f"{self.metadata.project_name}")] + [(f"I{i}", as_text(item["name"])) for i, item in enumerate(integrations)]
        edges = [("CORE", f"I{i}", as_text(item.get("type"))) for i, item in enumerate(integrations)]
        return [
            table(integrations, columns=["name", "type", "description"], headers=["System", "Type", "Description"]),
            self.chart(flowchart(nodes, edges, direction="LR"), "flowchart", "Integration Architecture"),
        ]

    def technical_debt(self, data):
        debt = data["technicalDebt"]
        if not debt:
            return paragraph("No significant technical debt has been recorded.")
        rows = [
            [item["item"], f"{self.indicator(item.get('impact'))} {as_text(item.get('impact'))}".strip(), item.get("remediation")]
            for item in debt
        ]
        return table(rows, headers=["Item", "Impact", "Remediation"])

    def gap_analysis(self, data):
        rows = [
            [gap.get("current"), gap.get("future"), gap["gap"], f"{self.indicator(gap.get('priority'))} {as_text(gap.get('priority'))}".strip()]
            for gap in data["gapAnalysis"]
        ]
        return table(rows, headers=["Current State", "Future State", "Gap", "Priority"], class_="data-table gap-table")

    def future_state(self, data):
        return [
            subsection("Technical Vision", bullet_list(data["futureState"])),
        ]

    def risks(self, data):
        return self.risk_table(data["risks"], name_key="risk")

    def recommendations(self, data):
        return bullet_list(data["recommendations"], ordered=True)
