"""Kanban board formatter."""
from docgen.services.documents.formatters.base import BaseFormatter
from docgen.services.documents.html import Element, definition_list, metrics_grid, paragraph, subsection, table
from docgen.services.documents.indicators import highlight_box, progress_bar
from docgen.services.documents.mermaid import bar_chart, pie_chart
from docgen.services.documents.toolkit import as_text, is_number


def initials(name: str) -> str:
    return "".join(part[0] for part in name.split() if part).upper()[:2]


def wip_state(column: dict) -> str | None:
    """"exceeded" when over the column's WIP limit, "reached" at it, None otherwise."""
    limit = column.get("wipLimit")
    if not limit:
        return None
    count = len(column["cards"])
    if count > limit:
        return "exceeded"
    if count == limit:
        return "reached"
    return None


def _days(value) -> str:
    return f"{as_text(value)}d" if is_number(value) else as_text(value)


class KanbanFormatter(BaseFormatter):
    document_type = "kanban"
    title = "Kanban Board"
    styles = """
.kanban-board { display: flex; gap: 8px; align-items: flex-start; }
.kanban-column { flex: 1; background: #f3f4f6; border-radius: 6px; padding: 8px; min-width: 0; }
.kanban-column.over-limit { background: #fee2e2; }
.kanban-column-header { display: flex; justify-content: space-between; font-weight: 600; margin-bottom: 6px; }
.kanban-column-count { background: #e5e7eb; border-radius: 10px; padding: 0 8px; }
.kanban-column-count.over-limit { background: #ef4444; color: #fff; }
.kanban-card { background: #fff; border: 1px solid #e5e7eb; border-radius: 4px; padding: 6px; margin-bottom: 6px; font-size: 0.8em; page-break-inside: avoid; }
.kanban-card-header { display: flex; justify-content: space-between; color: #6b7280; }
.kanban-card-avatar { display: inline-block; width: 18px; height: 18px; border-radius: 50%; background: #6366f1; color: #fff; text-align: center; font-size: 0.7em; line-height: 18px; }
.kanban-label { display: inline-block; background: #eef2ff; border-radius: 3px; padding: 0 4px; margin-right: 2px; }
.priority-critical { color: #991b1b; }
.priority-high { color: #c2410c; }
.priority-medium { color: #92400e; }
.priority-low { color: #065f46; }
.blocked-indicator { background: #ef4444; color: #fff; border-radius: 3px; padding: 0 4px; margin-left: 4px; font-size: 0.75em; }
.wip-limit-warning { border-left: 4px solid #f59e0b; background: #fffbeb; padding: 6px 10px; margin: 6px 0; }
.wip-limit-exceeded { border-left-color: #ef4444; background: #fef2f2; }
"""

    def sections(self):
        return [
            ("Board Overview", self.overview),
            ("Kanban Board", self.board),
            ("Work In Progress", self.work_in_progress),
            ("Key Metrics", self.metrics),
            ("Cycle Time Analysis", self.cycle_time),
            ("Throughput", self.throughput),
            ("Blocked Items", self.blocked_items),
            ("Team Capacity", self.team_capacity),
            ("Upcoming Work", self.upcoming_work),
        ]

    def cover_subtitle(self, data):
        return as_text(data["overview"].get("sprint"))

    def overview(self, data):
        overview = data["overview"]
        children = [definition_list({
            "Board Name": overview["boardName"],
            "Sprint": overview["sprint"],
            "Period": f"{as_text(overview['startDate'])} - {as_text(overview['endDate'])}",
            "Team": overview["team"],
        })]
        if overview.get("description"):
            children.append(paragraph(overview["description"]))
        children.append(highlight_box("Sprint Goal", as_text(overview["sprintGoal"]), "info"))
        return children

    def _card(self, card):
        priority = as_text(card.get("priority")) or "Medium"
        title = [as_text(card["title"])]
        if card.get("blocked"):
            title.append(Element("span", "BLOCKED", class_="blocked-indicator"))
        meta = []
        if card.get("assignee"):
            meta.append(Element("span", Element("span", initials(as_text(card["assignee"])), class_="kanban-card-avatar"), " ", as_text(card["assignee"])))
        if card.get("estimate"):
            meta.append(Element("span", f" {as_text(card['estimate'])} pts"))
        if card.get("daysInColumn"):
            meta.append(Element("span", f" {as_text(card['daysInColumn'])}d"))
        labels = [Element("span", as_text(label), class_=f"kanban-label label-{as_text(label).lower()}") for label in card.get("labels") or []]
        return Element(
            "div",
            Element("div", Element("span", as_text(card.get("id"))), Element("span", priority, class_=f"priority-{priority.lower()}"), class_="kanban-card-header"),
            Element("div", *title, class_="kanban-card-title"),
            Element("div", *meta, class_="kanban-card-meta") if meta else "",
            Element("div", *labels, class_="kanban-card-labels") if labels else "",
            class_="kanban-card",
        )

    def _column(self, column):
        over = wip_state(column) == "exceeded"
        limit = column.get("wipLimit")
        return Element(
            "div",
            Element(
                "div",
                Element("span", as_text(column["name"]), Element("small", f" (WIP: {limit})") if limit else ""),
                Element("span", len(column["cards"]), class_="kanban-column-count over-limit" if over else "kanban-column-count"),
                class_="kanban-column-header",
            ),
            Element("div", *[self._card(card) for card in column["cards"]], class_="kanban-column-cards"),
            class_="kanban-column over-limit" if over else "kanban-column",
        )

    def wip_warnings(self, columns):
        warnings = []
        for column in columns:
            state = wip_state(column)
            if state == "exceeded":
                warnings.append(Element(
                    "div",
                    Element("strong", "⚠️ WIP Limit Exceeded:"),
                    f" {column['name']} has {len(column['cards'])} items (limit: {column['wipLimit']})",
                    class_="wip-limit-warning wip-limit-exceeded",
                ))
            elif state == "reached":
                warnings.append(Element(
                    "div",
                    Element("strong", "⚠️ WIP Limit Reached:"),
                    f" {column['name']} is at capacity ({column['wipLimit']} items)",
                    class_="wip-limit-warning",
                ))
        return warnings

    def board(self, data):
        columns = data["columns"]
        distribution = [(as_text(column["name"]), len(column["cards"])) for column in columns if column["cards"]]
        return [
            Element("div", *[self._column(column) for column in columns], class_="kanban-board"),
            *self.wip_warnings(columns),
            self.chart(pie_chart("Cards by Column", distribution), "pie"),
        ]

    def work_in_progress(self, data):
        wip = data["workInProgress"]
        return metrics_grid({
            "Total WIP": wip["totalWIP"],
            "Blocked Items": wip["blockedItems"],
            "Average Age": _days(wip["avgAge"]),
            "Oldest Item": _days(wip["oldestItem"]),
        })

    def metrics(self, data):
        metrics = data["metrics"]
        return metrics_grid({
            "Velocity (pts/sprint)": metrics["velocity"],
            "Throughput (items/week)": metrics["throughput"],
            "Lead Time": _days(metrics["leadTime"]),
            "Cycle Time": _days(metrics["cycleTime"]),
        })

    def cycle_time(self, data):
        return table(
            data["cycleTime"],
            columns=["stage", "average", "min", "max", "p85"],
            headers=["Stage", "Average Time", "Min", "Max", "85th Percentile"],
        )

    def throughput(self, data):
        throughput = data["throughput"]
        weekly = throughput["weekly"]
        if not weekly:
            return paragraph("Throughput data will be collected once the board has been running for a full week.")
        rows = []
        completed = []
        for index, week in enumerate(weekly, start=1):
            started = week.get("started") if is_number(week.get("started")) else 0
            done = week.get("completed") if is_number(week.get("completed")) else 0
            net = week.get("netFlow") if is_number(week.get("netFlow")) else done - started
            rows.append([week.get("week") or f"Week {index}", started, done, f"+{net}" if net >= 0 else str(net)])
            completed.append(done)
        labels = [as_text(row[0]) for row in rows]
        average = throughput.get("average") or round(sum(completed) / len(completed), 1)
        peak = max(completed)
        return [
            table(rows, headers=["Week", "Items Started", "Items Completed", "Net Flow"]),
            self.chart(bar_chart("Weekly Throughput", labels, completed, "Items"), "xychart"),
            definition_list({
                "Average Weekly Throughput": f"{as_text(average)} items",
                "Peak Week": f"{peak} items ({labels[completed.index(peak)]})",
                "Predictability": throughput.get("predictability") or "TBD",
            }),
        ]

    def blocked_items(self, data):
        blocked = data["blockedItems"]
        if not blocked:
            return highlight_box("Blocked Items", "✅ No blocked items at this time", "success")
        rows = [
            [Element("span", Element("strong", as_text(item["id"])), f": {as_text(item['title'])}"), item["blockedSince"], item["daysBlocked"], item["reason"], item["owner"]]
            for item in blocked
        ]
        return [
            table(rows, headers=["Item", "Blocked Since", "Days Blocked", "Reason", "Owner"]),
            highlight_box("Action Required", f"{len(blocked)} items are currently blocked and need attention", "warning"),
        ]

    def team_capacity(self, data):
        capacity = data["teamCapacity"]
        members = capacity["members"]
        summary = {
            "Team Utilization": f"{as_text(capacity.get('totalCapacity') or 100)}%",
            "Available Hours": f"{as_text(capacity.get('availableHours') or 160)}h",
            "Allocated Hours": f"{as_text(capacity.get('allocatedHours') or 140)}h",
        }
        children = [metrics_grid(summary)]
        if members:
            rows = [
                [member["name"], f"{as_text(member.get('wip'))} items", member.get("capacity"), progress_bar(member.get("utilization"))]
                for member in members
            ]
            children.append(table(rows, headers=["Team Member", "Current WIP", "Capacity", "Utilization"]))
        return children

    def upcoming_work(self, data):
        health = data["backlogHealth"]
        children = []
        if data["upcomingWork"]:
            rows = [
                [index, Element("span", Element("strong", as_text(item["id"])), f": {as_text(item['title'])}"), f"{as_text(item['estimate'])} pts", item["dependencies"], item["targetSprint"]]
                for index, item in enumerate(data["upcomingWork"], start=1)
            ]
            children.append(subsection("Ready for Development", table(rows, headers=["Priority", "Item", "Estimate", "Dependencies", "Target Sprint"])))
        children.append(highlight_box("Backlog Health", definition_list({
            "Ready Items": health["readyItems"],
            "Refined Items": health["refinedItems"],
            "Estimated Coverage": health["coverage"],
        }), "info"))
        return children
