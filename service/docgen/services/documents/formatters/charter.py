"""Project charter formatter."""
from datetime import timedelta

from docgen.services.documents import dates
from docgen.services.documents.formatters.base import BaseFormatter
from docgen.services.documents.html import (
    Element,
    bullet_list,
    cell,
    metrics_grid,
    paragraph,
    paragraphs,
    subsection,
    table,
)
from docgen.services.documents.mermaid import gantt_chart, pie_chart, quadrant_chart
from docgen.services.documents.risk import risk_level
from docgen.services.documents.toolkit import as_text, format_number, is_number, parse_amount

TIMELINE_SPLITS = (("Initiation", 0.0, 0.1), ("Planning", 0.1, 0.2), ("Execution", 0.2, 0.85), ("Closure", 0.85, 1.0))
DEFAULT_PROJECT_DAYS = 180
# Quadrant coordinates for interest/influence levels
GRID_POSITION = {"High": 0.75, "Medium": 0.5, "Low": 0.25}


def _money(value) -> str:
    if is_number(value):
        return f"${format_number(value)}"
    return as_text(value) or "TBD"


class CharterFormatter(BaseFormatter):
    document_type = "charter"
    title = "Project Charter"

    def sections(self):
        return [
            ("Executive Summary", self.executive_summary),
            ("Project Overview", self.project_overview),
            ("Business Objectives", self.business_objectives),
            ("Project Scope", self.scope),
            ("Deliverables", self.deliverables),
            ("Milestones", self.milestones),
            ("Stakeholders", self.stakeholders),
            ("Budget", self.budget),
            ("Timeline", self.timeline),
            ("Risks", self.risks),
            ("Success Criteria", self.success_criteria),
            ("Approvals", self.approvals),
        ]

    def cover_subtitle(self, data):
        return "Formal authorization of the project's objectives, scope and authority"

    def _dates(self, data):
        start = self.metadata.start_date or data["timeline"]["startDate"]
        end = self.metadata.end_date or data["timeline"]["endDate"]
        return start, end

    def executive_summary(self, data):
        start, end = self._dates(data)
        summary = data["executiveSummary"]
        intro = Element(
            "p",
            Element("strong", self.metadata.project_name),
            " is formally authorized through this charter. This document establishes the project's objectives, scope, and authority structure.",
        )
        return [
            intro,
            metrics_grid({
                "Project Duration": f"{dates.format_date_for_display(start)} - {dates.format_date_for_display(end)}",
                "Total Budget": _money(self.metadata.budget or data["budget"]["total"]),
                "Key Deliverables": f"{len(data['deliverables'])} deliverables",
                "Milestones": f"{len(data['milestones'])} major milestones",
            }),
            *paragraphs(summary),
        ]

    def project_overview(self, data):
        return [
            subsection("Project Name", Element("p", Element("strong", self.metadata.project_name))),
            subsection("Project Description", *paragraphs(data["projectOverview"])),
            table(
                [["Project Manager", data["projectManager"]], ["Project Sponsor", data["sponsor"]], ["Organization", self.metadata.company_name]],
                headers=["Role", "Assigned To"],
            ),
        ]

    def business_objectives(self, data):
        items = [
            Element(
                "div",
                Element("div", str(index), class_="objective-number"),
                Element("div", paragraph(objective), class_="objective-content"),
                class_="objective-item",
            )
            for index, objective in enumerate(data["businessObjectives"], start=1)
        ]
        return [
            paragraph("The following business objectives will be achieved through successful project completion:"),
            Element("div", *items, class_="objectives-list"),
        ]

    def scope(self, data):
        scope = data["scope"]
        return Element(
            "div",
            subsection("In Scope", bullet_list(scope["inScope"])),
            subsection("Out of Scope", bullet_list(scope["outOfScope"])),
            subsection("Assumptions", bullet_list(scope["assumptions"])),
            subsection("Constraints", bullet_list(scope["constraints"])),
            class_="scope-grid",
        )

    def deliverables(self, data):
        return table(data["deliverables"], columns=["name", "description", "dueDate"], headers=["Deliverable", "Description", "Due Date"])

    def milestones(self, data):
        start, _ = self._dates(data)
        rows = []
        tasks = []
        for milestone in data["milestones"]:
            offset = milestone.get("monthOffset")
            when = self.milestone_date(offset, as_text(milestone.get("date")))
            rows.append([milestone["name"], when, milestone.get("criteria")])
            iso = dates.calculate_milestone_date(start, offset, "iso") if isinstance(offset, int) else milestone.get("date")
            tasks.append({"name": milestone["name"], "start": iso, "status": "milestone"})
        return [
            self.chart(gantt_chart("Project Milestones", [("Milestones", tasks)], start), "gantt"),
            table(rows, headers=["Milestone", "Target Date", "Success Criteria"]),
        ]

    def stakeholders(self, data):
        stakeholders = data["stakeholders"]
        points = [
            (
                as_text(person["name"]),
                GRID_POSITION.get(as_text(person.get("interest")).title(), 0.5) + index * 0.02,
                GRID_POSITION.get(as_text(person.get("influence")).title(), 0.5),
            )
            for index, person in enumerate(stakeholders)
        ]
        matrix = quadrant_chart(
            "Stakeholder Analysis Matrix",
            ("Low Interest", "High Interest"),
            ("Low Influence", "High Influence"),
            ("Manage Closely", "Keep Satisfied", "Monitor", "Keep Informed"),
            points,
        )
        return [
            self.chart(matrix, "quadrantChart"),
            table(stakeholders, columns=["name", "role", "interest", "influence"], headers=["Stakeholder", "Role", "Interest", "Influence"]),
        ]

    def budget(self, data):
        budget = data["budget"]
        total = parse_amount(budget["total"]) or 0
        breakdown = budget["breakdown"]
        rows = []
        for line in breakdown:
            amount = parse_amount(line.get("amount")) or 0
            share = f"{amount / total * 100:.1f}%" if total > 0 else "0%"
            rows.append([line["category"], _money(line.get("amount")), share])
        slices = [(as_text(line["category"]), parse_amount(line.get("amount")) or 0) for line in breakdown]
        return [
            Element("div", Element("h3", f"Total Project Budget: {_money(budget['total'])}"), class_="budget-summary"),
            self.chart(pie_chart("Budget Allocation", slices), "pie"),
            table(rows, headers=["Category", "Amount", "Percentage"]),
            paragraph(f"Contingency: {budget['contingency']}") if budget["contingency"] != "TBD" else "",
        ]

    def timeline(self, data):
        start, end = self._dates(data)
        first = dates.parse_date(start)
        last = dates.parse_date(end)
        if first and not last:
            last = first + timedelta(days=DEFAULT_PROJECT_DAYS)
        if first is None or last is None or last <= first:
            rows = [[name, "TBD", "TBD", "TBD"] for name, _, _ in TIMELINE_SPLITS]
            return [
                paragraph(f"Project Duration: {data['timeline']['duration']}"),
                table(rows, headers=["Phase", "Start Date", "End Date", "Duration"]),
            ]

        span = (last - first).days
        tasks = []
        rows = []
        for name, lower, upper in TIMELINE_SPLITS:
            phase_start = first + timedelta(days=round(span * lower))
            phase_end = first + timedelta(days=round(span * upper))
            tasks.append({"name": name, "start": phase_start.isoformat(), "end": phase_end.isoformat()})
            rows.append([name, phase_start.isoformat(), phase_end.isoformat(), f"{(phase_end - phase_start).days} days"])
        return [
            paragraph(f"Project Duration: {first.isoformat()} to {last.isoformat()}"),
            self.chart(gantt_chart("Project Timeline", [("Phases", tasks)], first), "gantt"),
            table(rows, headers=["Phase", "Start Date", "End Date", "Duration"]),
        ]

    def risks(self, data):
        risks = data["risks"]
        points = [
            (f"R{index + 1}", risk_level(risk.get("probability")) / 5 - 0.1, risk_level(risk.get("impact")) / 5 - 0.1)
            for index, risk in enumerate(risks)
        ]
        matrix = quadrant_chart(
            "Risk Assessment Matrix",
            ("Low Probability", "High Probability"),
            ("Low Impact", "High Impact"),
            ("Critical Risks", "High Priority", "Low Priority", "Monitor"),
            points,
        )
        return [self.chart(matrix, "quadrantChart"), self.risk_table(risks)]

    def success_criteria(self, data):
        items = [
            Element("div", Element("div", "✓", class_="criteria-check"), Element("div", cell(criterion), class_="criteria-content"), class_="criteria-item")
            for criterion in data["successCriteria"]
        ]
        return [
            paragraph("Project success will be measured by achieving the following criteria:"),
            Element("div", *items, class_="criteria-list"),
        ]

    def approvals(self, data):
        cards = [
            Element(
                "div",
                Element("div", approval["role"], class_="approval-role"),
                Element("div", cell(approval.get("name")), class_="approval-name"),
                Element("div", "_______________________", class_="approval-signature"),
                Element("div", f"Date: {as_text(approval.get('date'))}", class_="approval-date"),
                class_="approval-card",
            )
            for approval in data["approvals"]
        ]
        return [paragraph("This Project Charter is approved by:"), Element("div", *cards, class_="approvals-grid")]
