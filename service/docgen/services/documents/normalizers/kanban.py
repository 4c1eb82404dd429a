"""Kanban board normalizer."""
from typing import Any, Mapping

from docgen.services.documents.normalizers.base import FieldReader, record, unwrap
from docgen.services.documents.toolkit import as_text, extract_array, is_number

DEFAULT_COLUMNS = [
    {"name": "Backlog", "wipLimit": None, "cards": []},
    {"name": "To Do", "wipLimit": 10, "cards": []},
    {"name": "In Progress", "wipLimit": 5, "cards": []},
    {"name": "Review", "wipLimit": 3, "cards": []},
    {"name": "Done", "wipLimit": None, "cards": []},
]
# Columns whose cards do not count as work in progress
QUEUE_COLUMNS = ("backlog", "done")

DEFAULT_OVERVIEW = {
    "boardName": "Sprint Board",
    "sprint": "Current Sprint",
    "startDate": "TBD",
    "endDate": "TBD",
    "team": "Development Team",
    "sprintGoal": "Deliver key features and improvements",
}
DEFAULT_CYCLE_TIME = [
    {"stage": "To Do → In Progress", "average": "2d", "min": "0.5d", "max": "5d", "p85": "3d"},
    {"stage": "In Progress → Review", "average": "3d", "min": "1d", "max": "7d", "p85": "4d"},
    {"stage": "Review → Done", "average": "1d", "min": "0.5d", "max": "3d", "p85": "2d"},
]
# Older payloads keyed cycle time by transition: {"todoToProgress": "2d", "todoToProgressMax": "5d", ...}
CYCLE_TIME_KEYS = {
    "todoToProgress": "To Do → In Progress",
    "progressToReview": "In Progress → Review",
    "reviewToDone": "Review → Done",
}
DEFAULT_BACKLOG_HEALTH = {"readyItems": 15, "refinedItems": 25, "coverage": "3 sprints"}

_card = record(
    "title",
    {"id": lambda index: f"TASK-{index + 1:03d}", "priority": "Medium", "labels": [], "blocked": False},
    {"title": ("name", "summary"), "assignee": ("owner", "assignedTo"), "estimate": ("points", "storyPoints")},
)
_blocked = record(
    "title",
    {"id": lambda index: f"BLK-{index + 1:03d}", "blockedSince": "Unknown", "daysBlocked": 0, "reason": "Dependency", "owner": "Unassigned"},
    {"title": ("name", "item"), "reason": ("blocker", "cause")},
)
_upcoming = record(
    "title",
    {"id": lambda index: f"NEXT-{index + 1:03d}", "estimate": "?", "dependencies": "None", "targetSprint": "Next"},
    {"title": ("name", "item"), "estimate": ("points",)},
)
_member = record("name", {"wip": 0, "capacity": "100%", "utilization": "TBD"}, {"name": ("member", "person")})


def _column(value: Any, index: int) -> dict:
    if isinstance(value, Mapping):
        column = dict(value)
    elif value in (None, ""):
        return {}
    else:
        column = {"name": as_text(value)}
    column.setdefault("name", f"Column {index + 1}")
    limit = column.get("wipLimit", column.get("wip_limit", column.get("limit")))
    column["wipLimit"] = int(limit) if is_number(limit) and limit > 0 else None
    cards = extract_array(column.get("cards", column.get("items")))
    column["cards"] = [_card(card, i) for i, card in enumerate(cards) if card not in (None, "")]
    return column


def _cycle_time(fields: FieldReader) -> list:
    found = fields.value("cycleTime")
    if isinstance(found, Mapping) and any(key in found for key in CYCLE_TIME_KEYS):
        return [
            {
                "stage": label,
                "average": found.get(key, "TBD"),
                "min": found.get(f"{key}Min", "TBD"),
                "max": found.get(f"{key}Max", "TBD"),
                "p85": found.get(f"{key}85", "TBD"),
            }
            for key, label in CYCLE_TIME_KEYS.items()
        ]
    rows = fields.items("cycleTime", item=record("stage", {"average": "TBD", "min": "TBD", "max": "TBD", "p85": "TBD"}))
    return rows or fields._fallback("cycleTime", DEFAULT_CYCLE_TIME)


def _with_defaults(fields: FieldReader, canonical: str, defaults: Mapping) -> dict:
    found = fields.mapping(canonical)
    for key, value in defaults.items():
        if found.get(key) in (None, ""):
            found[key] = value
            fields.defaulted.add(f"{canonical}.{key}")
    return found


def normalize_kanban(raw: Any) -> dict:
    data, text = unwrap(raw)
    fields = FieldReader(data, "kanban")

    columns = fields.items("columns", DEFAULT_COLUMNS, item=_column)
    in_progress = [
        card
        for column in columns
        if column["name"].strip().lower() not in QUEUE_COLUMNS
        for card in column["cards"]
    ]
    blocked_items = fields.items("blockedItems", item=_blocked)

    wip = fields.mapping("workInProgress")
    wip.setdefault("totalWIP", len(in_progress))
    wip.setdefault("blockedItems", len(blocked_items) or sum(1 for card in in_progress if card.get("blocked")))
    wip.setdefault("avgAge", 0)
    wip.setdefault("oldestItem", 0)

    metrics = fields.mapping("metrics")
    for key in ("velocity", "throughput", "leadTime", "cycleTime"):
        metrics.setdefault(key, 0)

    throughput = fields.mapping("throughput")
    throughput["weekly"] = [
        week if isinstance(week, Mapping) else {"week": as_text(week)}
        for week in extract_array(throughput.get("weekly"))
    ]

    capacity = fields.mapping("teamCapacity")
    capacity["members"] = [
        member for member in (_member(m, i) for i, m in enumerate(extract_array(capacity.get("members")))) if member
    ]

    overview = _with_defaults(fields, "overview", DEFAULT_OVERVIEW)
    if text and overview.get("description") in (None, ""):
        overview["description"] = text

    return fields.finish({
        "overview": overview,
        "columns": columns,
        "workInProgress": wip,
        "metrics": metrics,
        "cycleTime": _cycle_time(fields),
        "throughput": throughput,
        "blockedItems": blocked_items,
        "teamCapacity": capacity,
        "upcomingWork": fields.items("upcomingWork", [], item=_upcoming),
        "backlogHealth": _with_defaults(fields, "backlogHealth", DEFAULT_BACKLOG_HEALTH),
    })
