"""Product backlog formatter."""
import math
from collections import Counter

from docgen.services.documents import dates
from docgen.services.documents.formatters.base import BaseFormatter
from docgen.services.documents.html import Element, bullet_list, metrics_grid, paragraph, paragraphs, subsection, table
from docgen.services.documents.indicators import highlight_box, progress_bar
from docgen.services.documents.mermaid import bar_chart, gantt_chart, pie_chart, quadrant_chart
from docgen.services.documents.toolkit import as_text, is_number

PRIORITY_ORDER = ("Critical", "High", "Medium", "Low")
ITEM_TABLE_LIMIT = 20
# Effort and value are plotted on 0-20 and 0-10 scales
EFFORT_SCALE = 20
VALUE_SCALE = 10


def _priority_rank(item: dict) -> int:
    priority = as_text(item.get("priority")).title()
    return PRIORITY_ORDER.index(priority) if priority in PRIORITY_ORDER else len(PRIORITY_ORDER)


class BacklogFormatter(BaseFormatter):
    document_type = "backlog"
    title = "Product Backlog"

    def sections(self):
        return [
            ("Executive Summary", self.executive_summary),
            ("Product Vision", self.product_vision),
            ("Epics", self.epics),
            ("Backlog Metrics", self.backlog_metrics),
            ("Priority Matrix", self.priority_matrix),
            ("Backlog Items", self.backlog_items),
            ("Sprint Plan", self.sprint_plan),
            ("Velocity", self.velocity),
            ("Prioritization Criteria", self.prioritization),
            ("Definition of Ready", self.definition_of_ready),
            ("Definition of Done", self.definition_of_done),
            ("Release Roadmap", self.roadmap),
        ]

    def executive_summary(self, data):
        metrics = data["metrics"]
        total = metrics["totalItems"] if is_number(metrics["totalItems"]) else len(data["items"])
        completed = metrics["completedItems"] if is_number(metrics["completedItems"]) else 0
        progress = completed / total * 100 if total else 0
        return [
            paragraph(
                f"This backlog captures {total} items across {len(data['epics'])} epics for "
                f"{self.metadata.project_name}, planned over {len(data['sprints'])} sprints."
            ),
            metrics_grid({
                "Total Items": total,
                "Completed": completed,
                "Total Effort": f"{metrics['totalEffort']} pts",
                "Epics": len(data["epics"]),
            }),
            progress_bar(progress, "Backlog completion"),
        ]

    def product_vision(self, data):
        return highlight_box("Vision", Element("div", *paragraphs(data["productVision"])), "info")

    def epics(self, data):
        epics = data["epics"]
        slices = [(as_text(epic["name"]), epic.get("items")) for epic in epics]
        return [
            table(epics, columns=["name", "description", "priority", "items"], headers=["Epic", "Description", "Priority", "Items"]),
            self.chart(pie_chart("Items by Epic", slices), "pie"),
        ]

    def backlog_metrics(self, data):
        items = data["items"]
        by_priority = Counter(as_text(item.get("priority")).title() for item in items)
        by_status = Counter(as_text(item.get("status")) for item in items)
        priorities = [p for p in PRIORITY_ORDER if by_priority.get(p)] + [p for p in by_priority if p not in PRIORITY_ORDER]
        rows = [[f"{self.indicator(p)} {p}".strip(), by_priority[p], sum(i["effort"] for i in items if as_text(i.get("priority")).title() == p)] for p in priorities]
        return [
            subsection("By Priority", table(rows, headers=["Priority", "Items", "Effort (pts)"])),
            self.chart(bar_chart("Items by Priority", priorities, [by_priority[p] for p in priorities], "Items"), "xychart"),
            subsection("By Status", table([[status, count] for status, count in by_status.items()], headers=["Status", "Items"])),
            self.chart(pie_chart("Items by Status", by_status.items()), "pie"),
        ]

    def priority_matrix(self, data):
        points = [
            (as_text(item.get("id")), item["effort"] / EFFORT_SCALE, item["value"] / VALUE_SCALE)
            for item in data["items"]
        ]
        matrix = quadrant_chart(
            "Value vs Effort",
            ("Low Effort", "High Effort"),
            ("Low Value", "High Value"),
            ("Major Projects", "Quick Wins", "Fill Ins", "Thankless Tasks"),
            points,
        )
        if not self.options.include_charts:
            return None
        return [paragraph("Items plotted by estimated effort against business value."), self.chart(matrix, "quadrantChart")]

    def backlog_items(self, data):
        items = sorted(data["items"], key=_priority_rank)
        rows = [
            [
                item.get("id"),
                Element("div", Element("strong", as_text(item["title"])), Element("div", as_text(item.get("description")), class_="item-description")),
                f"{self.indicator(item.get('priority'))} {as_text(item.get('priority'))}".strip(),
                item["effort"],
                item["value"],
                item.get("status"),
                item.get("epic"),
            ]
            for item in items[:ITEM_TABLE_LIMIT]
        ]
        children = [table(rows, headers=["ID", "Story", "Priority", "Effort", "Value", "Status", "Epic"])]
        if len(items) > ITEM_TABLE_LIMIT:
            children.append(paragraph(f"Showing the top {ITEM_TABLE_LIMIT} of {len(items)} items by priority."))
        with_criteria = [item for item in items[:ITEM_TABLE_LIMIT] if item["acceptanceCriteria"]]
        if with_criteria:
            children.append(subsection(
                "Acceptance Criteria",
                *[Element("div", Element("h4", f"{item.get('id')} {as_text(item['title'])}"), bullet_list(item["acceptanceCriteria"])) for item in with_criteria],
            ))
        return children

    def _sprint_dates(self, data, sprint):
        length = int(data["sprintLengthDays"] or 14)
        number = sprint.get("number") if isinstance(sprint.get("number"), int) else 1
        computed = dates.calculate_sprint_dates(self.metadata.start_date, number, length)
        return sprint.get("startDate") or computed["start"], sprint.get("endDate") or computed["end"]

    def sprint_plan(self, data):
        rows = []
        tasks = []
        length = int(data["sprintLengthDays"] or 14)
        for sprint in data["sprints"]:
            start, end = self._sprint_dates(data, sprint)
            rows.append([sprint["name"], sprint["goal"], start, end, ", ".join(sprint["items"]) or "-"])
            tasks.append({"name": sprint["name"], "start": start, "end": end, "days": length})
        return [
            paragraph(f"Sprints run for {length} days."),
            table(rows, headers=["Sprint", "Goal", "Start", "End", "Items"]),
            self.chart(gantt_chart("Sprint Schedule", [("Sprints", tasks)], self.metadata.start_date), "gantt"),
        ]

    def velocity(self, data):
        sprints = data["sprints"]
        velocities = [sprint["velocity"] if is_number(sprint["velocity"]) else 0 for sprint in sprints]
        completed = [v for v in velocities if v > 0]
        average = round(sum(completed) / len(completed)) if completed else 0
        remaining = sum(item["effort"] for item in data["items"] if as_text(item.get("status")).lower() != "done")
        forecast = f"{math.ceil(remaining / average)} sprints" if average else "TBD"
        return [
            self.chart(bar_chart("Sprint Velocity", [s["name"] for s in sprints], velocities, "Story Points"), "xychart"),
            table([[s["name"], v] for s, v in zip(sprints, velocities)], headers=["Sprint", "Velocity (pts)"]),
            metrics_grid({"Average Velocity": f"{average} pts", "Remaining Effort": f"{remaining} pts", "Forecast": forecast}),
        ]

    def prioritization(self, data):
        return [paragraph("Backlog items are prioritized using the following criteria:"), bullet_list(data["prioritizationCriteria"], ordered=True)]

    def definition_of_ready(self, data):
        return bullet_list([f"☐ {as_text(item)}" for item in data["definitionOfReady"]], class_="checklist")

    def definition_of_done(self, data):
        return bullet_list([f"☐ {as_text(item)}" for item in data["definitionOfDone"]], class_="checklist")

    def roadmap(self, data):
        if not data["roadmap"]:
            return None
        return table(data["roadmap"], columns=["name", "focus", "items"], headers=["Release", "Focus", "Items"])
