"""
Project plan normalizer.

Plans arrive either structured or as free text (``{"plan": "..."}``); the
text form is mined for ``Phase N: name`` and ``Milestone: name`` lines.
"""
import re
from typing import Any, List

from docgen.services.documents.normalizers.base import (
    FieldReader,
    log_zero_match,
    record,
    split_sentences,
    unwrap,
)

PHASE_RE = re.compile(r"(?:phase|stage)\s*(\d+)[:\s]+([^.\n]+)", re.IGNORECASE)
MILESTONE_RE = re.compile(r"milestone[:\s]+([^.\n]+)", re.IGNORECASE)

DEFAULT_PHASES = [
    {"name": "Initiation", "duration": "1 month", "status": "Planned"},
    {"name": "Planning", "duration": "2 months", "status": "Planned"},
    {"name": "Execution", "duration": "6 months", "status": "Planned"},
    {"name": "Monitoring", "duration": "Continuous", "status": "Planned"},
    {"name": "Closure", "duration": "1 month", "status": "Planned"},
]
DEFAULT_MILESTONES = [
    {"name": "Project Kickoff", "date": "Month 1", "status": "Pending"},
    {"name": "Requirements Complete", "date": "Month 2", "status": "Pending"},
    {"name": "Design Approval", "date": "Month 3", "status": "Pending"},
    {"name": "Development Complete", "date": "Month 7", "status": "Pending"},
    {"name": "Testing Complete", "date": "Month 9", "status": "Pending"},
    {"name": "Go Live", "date": "Month 10", "status": "Pending"},
]
DEFAULT_WORK_BREAKDOWN = [
    {"id": "1.0", "name": "Project Management", "tasks": ["1.1 Planning", "1.2 Monitoring & Control", "1.3 Reporting"]},
    {"id": "2.0", "name": "Requirements & Design", "tasks": ["2.1 Requirements Gathering", "2.2 System Design", "2.3 Design Validation"]},
    {"id": "3.0", "name": "Development", "tasks": ["3.1 Implementation", "3.2 Testing", "3.3 Integration"]},
    {"id": "4.0", "name": "Deployment", "tasks": ["4.1 Deployment Planning", "4.2 Production Release", "4.3 Post-Deployment Support"]},
]

_phase = record(
    "name",
    {"duration": "TBD", "status": "Planned"},
    {"name": ("title", "phase", "stage"), "startDate": ("start", "start_date"), "endDate": ("end", "end_date")},
)
_milestone = record(
    "name",
    {"date": "TBD", "criteria": "Criteria to be defined", "status": "Pending"},
    {"name": ("title", "milestone"), "date": ("dueDate", "targetDate", "due_date"), "criteria": ("description", "successCriteria")},
)
_work_package = record(
    "name",
    {"id": lambda index: f"{index + 1}.0", "tasks": []},
    {"name": ("title", "workPackage"), "tasks": ("children", "subtasks", "activities", "items")},
)
_deliverable = record("name", {"description": "", "dueDate": "TBD"}, {"name": ("title", "deliverable"), "dueDate": ("date", "due_date")})
_resource = record(
    "role",
    {"allocation": "TBD", "count": 1},
    {"role": ("name", "title", "resource"), "allocation": ("fte", "availability", "effort")},
)
_risk = record(
    "risk",
    {"probability": "Medium", "impact": "Medium", "mitigation": "Mitigation to be defined"},
    {"risk": ("description", "name", "title"), "probability": ("likelihood",), "mitigation": ("response",)},
)


def extract_phases(text: str) -> List[dict]:
    return [
        {"name": name.strip(), "number": int(number), "duration": "TBD", "status": "Planned"}
        for number, name in PHASE_RE.findall(text or "")
        if name.strip()
    ]


def extract_milestones(text: str) -> List[dict]:
    return [
        {"name": name.strip(), "date": "TBD", "criteria": "Criteria to be defined", "status": "Pending"}
        for name in MILESTONE_RE.findall(text or "")
        if name.strip()
    ]


def normalize_project_plan(raw: Any) -> dict:
    data, text = unwrap(raw)
    fields = FieldReader(data, "project_plan")
    raw_text = fields.text("rawText") or text

    phases = fields.items("phases", item=_phase)
    milestones = fields.items("milestones", item=_milestone)
    if raw_text and not phases:
        phases = extract_phases(raw_text)
        if not phases:
            log_zero_match("project_plan", "phases")
    if raw_text and not milestones:
        milestones = extract_milestones(raw_text)
        if not milestones:
            log_zero_match("project_plan", "milestones")
    if not phases:
        phases = fields.items("phases", DEFAULT_PHASES, item=_phase)
    if not milestones:
        milestones = fields.items("milestones", DEFAULT_MILESTONES, item=_milestone)

    budget = fields.mapping("budget")
    if budget:
        budget.setdefault("total", budget.get("totalBudget") or "TBD")
        budget.setdefault("breakdown", [])
    else:
        budget = {"total": "TBD", "breakdown": []}

    return fields.finish({
        "executiveSummary": fields.text(
            "executiveSummary",
            " ".join(split_sentences(raw_text, 2)) or "Executive summary to be defined",
        ),
        "objectives": fields.strings("objectives", ["Objectives to be defined"]),
        "phases": phases,
        "milestones": milestones,
        "workBreakdown": fields.items("workBreakdown", DEFAULT_WORK_BREAKDOWN, item=_work_package),
        "deliverables": fields.items("deliverables", [], item=_deliverable),
        "resources": fields.items("resources", [], item=_resource),
        "dependencies": fields.strings("dependencies", []),
        "criticalPath": fields.strings("criticalPath", []),
        "budget": budget,
        "risks": fields.items("risks", [], item=_risk),
        "qualityPlan": fields.value("qualityPlan", "Quality approach to be defined"),
        "communicationPlan": fields.value("communicationPlan", "Communication approach to be defined"),
        "rawText": raw_text,
    })
