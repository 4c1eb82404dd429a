"""Product backlog normalizer."""
from typing import Any, Mapping

from docgen.services.documents.normalizers.base import FieldReader, record, unwrap
from docgen.services.documents.toolkit import as_text, extract_array

DEFAULT_VISION = (
    "To deliver a comprehensive solution that meets user needs and drives business value "
    "through iterative development and continuous improvement."
)
DEFAULT_ITEMS = [
    {"id": "US-001", "title": "User Registration", "description": "As a user, I want to register for an account", "priority": "High", "effort": 5, "value": 8, "status": "Ready", "epic": "User Management", "acceptanceCriteria": []},
    {"id": "US-002", "title": "Dashboard View", "description": "As a user, I want to see my dashboard", "priority": "High", "effort": 8, "value": 9, "status": "In Progress", "epic": "Core Features", "acceptanceCriteria": []},
    {"id": "US-003", "title": "Export Data", "description": "As a user, I want to export my data", "priority": "Medium", "effort": 3, "value": 5, "status": "Backlog", "epic": "Core Features", "acceptanceCriteria": []},
]
DEFAULT_EPICS = [
    {"name": "User Management", "description": "Complete user authentication and authorization system", "priority": "High", "items": 8},
    {"name": "Core Features", "description": "Essential functionality for MVP release", "priority": "Critical", "items": 15},
    {"name": "Integration", "description": "Third-party service integrations", "priority": "Medium", "items": 6},
    {"name": "Performance", "description": "Optimization and scaling improvements", "priority": "Medium", "items": 5},
]
DEFAULT_SPRINTS = [
    {"name": "Sprint 1", "goal": "Complete user authentication", "velocity": 21, "items": ["US-001"]},
    {"name": "Sprint 2", "goal": "Implement core dashboard", "velocity": 18, "items": ["US-002"]},
    {"name": "Sprint 3", "goal": "Add data export functionality", "velocity": 0, "items": ["US-003"]},
]
DEFAULT_PRIORITIZATION = [
    "Business value and ROI",
    "User impact and satisfaction",
    "Technical dependencies",
    "Risk mitigation",
    "Strategic alignment",
]
DEFAULT_READY = [
    "User story is clearly defined with acceptance criteria",
    "Dependencies are identified and resolved",
    "Story is estimated by the team",
    "Story fits within a single sprint",
    "Test scenarios are defined",
]
DEFAULT_DONE = [
    "Code is complete and checked into version control",
    "Unit tests are written and passing",
    "Code has been peer reviewed",
    "Documentation is updated",
    "Feature is deployed to staging environment",
    "Acceptance criteria are met",
    "Product Owner has accepted the story",
]


def _item(value: Any, index: int) -> dict:
    coerce = record(
        "title",
        {
            "id": f"US-{index + 1:03d}",
            "description": "",
            "priority": "Medium",
            "effort": 0,
            "value": 0,
            "status": "Backlog",
            "epic": "-",
        },
        {
            "title": ("name", "story", "userStory", "summary"),
            "effort": ("storyPoints", "story_points", "points", "estimate"),
            "value": ("businessValue", "business_value"),
            "acceptanceCriteria": ("acceptance_criteria", "criteria"),
        },
    )
    item = coerce(value, index)
    if item:
        item["acceptanceCriteria"] = [as_text(c) for c in extract_array(item.get("acceptanceCriteria"))]
        for key in ("effort", "value"):
            try:
                item[key] = int(float(item[key]))
            except (TypeError, ValueError):
                item[key] = 0
    return item


_epic = record(
    "name",
    {"description": "Epic description", "priority": "Medium", "items": 0},
    {"name": ("title", "epic"), "items": ("itemCount", "stories")},
)


def _sprint(value: Any, index: int) -> dict:
    if isinstance(value, Mapping):
        sprint = dict(value)
    elif value in (None, ""):
        return {}
    else:
        sprint = {"goal": as_text(value)}
    sprint.setdefault("name", f"Sprint {index + 1}")
    sprint.setdefault("number", index + 1)
    sprint.setdefault("goal", "Sprint goal to be defined")
    if sprint.get("velocity") in (None, ""):
        sprint["velocity"] = sprint.get("points") or 0
    sprint["items"] = [as_text(item) for item in extract_array(sprint.get("items"))]
    return sprint


_quarter = record("name", {"focus": "Focus to be defined", "items": 0}, {"name": ("quarter", "period", "release"), "focus": ("theme", "goal", "description")})


def normalize_backlog(raw: Any) -> dict:
    data, text = unwrap(raw)
    fields = FieldReader(data, "backlog")

    items = fields.items("items", DEFAULT_ITEMS, item=_item)
    metrics = fields.mapping("metrics")
    metrics.setdefault("totalItems", len(items))
    metrics.setdefault("completedItems", sum(1 for item in items if str(item.get("status", "")).lower() == "done"))
    metrics.setdefault("totalEffort", sum(item.get("effort", 0) for item in items))

    return fields.finish({
        "productVision": fields.text("productVision", text or DEFAULT_VISION),
        "items": items,
        "epics": fields.items("epics", DEFAULT_EPICS, item=_epic),
        "sprints": fields.items("sprints", DEFAULT_SPRINTS, item=_sprint),
        "sprintLengthDays": fields.number("sprintLengthDays", 14),
        "metrics": metrics,
        "prioritizationCriteria": fields.strings("prioritizationCriteria", DEFAULT_PRIORITIZATION),
        "definitionOfReady": fields.strings("definitionOfReady", DEFAULT_READY),
        "definitionOfDone": fields.strings("definitionOfDone", DEFAULT_DONE),
        "roadmap": fields.items("roadmap", [], item=_quarter),
    })
