"""Project plan formatter."""
import re

from docgen.services.documents import dates
from docgen.services.documents.formatters.base import BaseFormatter
from docgen.services.documents.html import (
    Element,
    bullet_list,
    format_content,
    paragraph,
    paragraphs,
    subsection,
    table,
)
from docgen.services.documents.indicators import highlight_box
from docgen.services.documents.mermaid import gantt_chart, pie_chart
from docgen.services.documents.toolkit import as_text, is_placeholder, parse_amount

DURATION_RE = re.compile(r"(\d+(?:\.\d+)?)\s*(day|week|month|year)", re.IGNORECASE)
DAYS_PER_UNIT = {"day": 1, "week": 7, "month": 30, "year": 365}
DEFAULT_PHASE_DAYS = 30

DEFAULT_DEPENDENCIES = (
    ("Internal Dependencies", ["Availability of key resources", "Completion of prerequisite projects", "Infrastructure readiness", "Budget approval"]),
    ("External Dependencies", ["Third-party service availability", "Vendor deliverables", "Regulatory approvals", "Customer feedback and approval"]),
)
DEFAULT_CRITICAL_PATH = [
    "Requirements Definition",
    "System Design",
    "Core Development",
    "Integration Testing",
    "User Acceptance Testing",
    "Production Deployment",
]
DEFAULT_BUDGET_SPLIT = (("Personnel", 60), ("Infrastructure", 15), ("Software & Licenses", 10), ("Training", 5), ("Contingency", 10))
DEFAULT_COMMUNICATIONS = [
    {"type": "Status Report", "frequency": "Weekly", "audience": "Stakeholders", "method": "Email"},
    {"type": "Team Meeting", "frequency": "Daily", "audience": "Project Team", "method": "Stand-up"},
    {"type": "Steering Committee", "frequency": "Monthly", "audience": "Executives", "method": "Presentation"},
    {"type": "Risk Review", "frequency": "Bi-weekly", "audience": "Risk Committee", "method": "Meeting"},
]


def duration_days(value) -> int | None:
    """Days in a duration such as "2 months" or "3 weeks"; None when open-ended or unreadable."""
    match = DURATION_RE.search(as_text(value))
    if not match:
        return None
    return max(1, round(float(match.group(1)) * DAYS_PER_UNIT[match.group(2).lower()]))


class ProjectPlanFormatter(BaseFormatter):
    document_type = "project_plan"
    title = "Project Plan"

    def sections(self):
        return [
            ("Executive Summary", self.executive_summary),
            ("Project Objectives", self.objectives),
            ("Project Phases", self.phases),
            ("Work Breakdown Structure", self.work_breakdown),
            ("Milestones", self.milestones),
            ("Deliverables", self.deliverables),
            ("Resource Plan", self.resources),
            ("Dependencies", self.dependencies),
            ("Critical Path", self.critical_path),
            ("Budget Plan", self.budget),
            ("Risk Management", self.risks),
            ("Quality Plan", self.quality_plan),
            ("Communication Plan", self.communication_plan),
        ]

    def executive_summary(self, data):
        phases = data["phases"]
        durations = [as_text(phase.get("duration")) for phase in phases if not is_placeholder(as_text(phase.get("duration")))]
        highlights = [
            f"Phases: {len(phases)} structured project phases",
            f"Milestones: {len(data['milestones'])} critical milestones",
            f"Duration: {dates.format_project_duration(self.metadata.start_date, self.metadata.end_date, ' + '.join(durations) or None)}",
            f"Methodology: {self.metadata.methodology.upper() if self.metadata.methodology == 'prince2' else self.metadata.methodology.title()}",
        ]
        return [
            paragraph(
                f"This Project Plan outlines the approach for delivering {self.metadata.project_name}. "
                f"The plan covers {len(phases)} major phases and {len(data['milestones'])} key milestones."
            ),
            subsection("Key Highlights", bullet_list(highlights)),
            *paragraphs(data["executiveSummary"]),
        ]

    def objectives(self, data):
        return bullet_list(data["objectives"], ordered=True)

    def _phase_tasks(self, phases):
        tasks = []
        for phase in phases:
            days = duration_days(phase.get("duration"))
            if phase.get("startDate") or days:
                tasks.append({
                    "name": phase["name"],
                    "start": phase.get("startDate"),
                    "end": phase.get("endDate"),
                    "days": days or DEFAULT_PHASE_DAYS,
                    "status": "active" if as_text(phase.get("status")).lower() == "in progress" else None,
                })
        return tasks

    def phases(self, data):
        phases = data["phases"]
        rows = [
            [index, phase["name"], phase.get("duration"), phase.get("startDate") or "-", phase.get("endDate") or "-", f"{self.indicator(phase.get('status'))} {as_text(phase.get('status'))}".strip()]
            for index, phase in enumerate(phases, start=1)
        ]
        gantt = gantt_chart("Project Timeline", [("Phases", self._phase_tasks(phases))], self.metadata.start_date)
        return [
            table(rows, headers=["#", "Phase", "Duration", "Start", "End", "Status"]),
            self.chart(gantt, "gantt"),
        ]

    def work_breakdown(self, data):
        packages = []
        for package in data["workBreakdown"]:
            tasks = [as_text(task) for task in package.get("tasks") or []]
            packages.append(Element(
                "div",
                Element("h4", f"{as_text(package.get('id'))} {as_text(package['name'])}".strip()),
                bullet_list(tasks),
                class_="wbs-package",
            ))
        return Element("div", *packages, class_="wbs")

    def milestones(self, data):
        rows = [
            [milestone["name"], milestone.get("date"), milestone.get("criteria"), f"{self.indicator(milestone.get('status'))} {as_text(milestone.get('status'))}".strip()]
            for milestone in data["milestones"]
        ]
        return table(rows, headers=["Milestone", "Target Date", "Criteria", "Status"])

    def deliverables(self, data):
        if not data["deliverables"]:
            return paragraph("Deliverables to be defined")
        return table(data["deliverables"], columns=["name", "description", "dueDate"], headers=["Deliverable", "Description", "Due Date"])

    def resources(self, data):
        if not data["resources"]:
            return paragraph("Resource requirements to be defined")
        return table(data["resources"], columns=["role", "count", "allocation"], headers=["Role", "Count", "Allocation"])

    def dependencies(self, data):
        if data["dependencies"]:
            return bullet_list(data["dependencies"])
        return [subsection(title, bullet_list(items)) for title, items in DEFAULT_DEPENDENCIES]

    def critical_path(self, data):
        steps = data["criticalPath"] or DEFAULT_CRITICAL_PATH
        return [
            paragraph("The critical path represents the sequence of activities that determines the minimum project duration:"),
            bullet_list(steps, ordered=True),
            highlight_box("Note", "Any delay in critical path activities will directly impact the project completion date.", "warning"),
        ]

    def budget(self, data):
        budget = data["budget"]
        total = self.metadata.budget if is_placeholder(as_text(budget["total"])) and self.metadata.budget else budget["total"]
        breakdown = budget["breakdown"]
        total_amount = parse_amount(total)
        if breakdown:
            rows = []
            slices = []
            for line in breakdown:
                line = line if isinstance(line, dict) else {"category": as_text(line)}
                category = as_text(line.get("category") or line.get("name") or line.get("item"))
                amount = line.get("amount") or line.get("cost")
                value = parse_amount(amount)
                rows.append([category, amount, f"{round(value / total_amount * 100)}%" if value and total_amount else "-"])
                slices.append((category, value or 0))
        else:
            rows = [
                [category, f"{round(total_amount * share / 100):,}" if total_amount else "TBD", f"{share}%"]
                for category, share in DEFAULT_BUDGET_SPLIT
            ]
            slices = [(category, share) for category, share in DEFAULT_BUDGET_SPLIT]
        return [
            paragraph(f"Total budget: {as_text(total)}"),
            table(rows, headers=["Category", "Estimated Cost", "% of Total"], class_="data-table budget-table"),
            self.chart(pie_chart("Budget Allocation", slices), "pie"),
        ]

    def risks(self, data):
        if not data["risks"]:
            return paragraph("Project risks are managed through the project risk register.")
        return self.risk_table(data["risks"], name_key="risk")

    def quality_plan(self, data):
        return format_content(data["qualityPlan"])

    def communication_plan(self, data):
        plan = data["communicationPlan"]
        if isinstance(plan, str) and is_placeholder(plan):
            return table(DEFAULT_COMMUNICATIONS, headers=["Type", "Frequency", "Audience", "Method"], class_="data-table communication-table")
        return format_content(plan)
