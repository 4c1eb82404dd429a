"""Communication plan normalizer."""
from typing import Any

from docgen.services.documents.normalizers.base import FieldReader, record, unwrap

DEFAULT_OBJECTIVES = [
    "Keep stakeholders informed of project progress",
    "Ensure timely escalation of issues and risks",
    "Build and maintain stakeholder engagement",
    "Provide a clear channel for feedback",
]
DEFAULT_STAKEHOLDERS = [
    {"name": "Project Board", "role": "Governance", "interest": "High", "influence": "High", "informationNeeds": "Progress against tolerances, exceptions"},
    {"name": "Project Team", "role": "Delivery", "interest": "High", "influence": "Medium", "informationNeeds": "Tasks, priorities, blockers"},
    {"name": "End Users", "role": "Users", "interest": "Medium", "influence": "Low", "informationNeeds": "Changes affecting their work, training"},
]
DEFAULT_METHODS = [
    {"type": "Status report", "description": "Written summary of progress, risks and issues", "useCase": "Regular progress updates"},
    {"type": "Steering meeting", "description": "Board review of stage progress", "useCase": "Decisions and approvals"},
    {"type": "Team stand-up", "description": "Short daily coordination meeting", "useCase": "Day-to-day coordination"},
    {"type": "Email bulletin", "description": "Broadcast of key messages", "useCase": "Wider stakeholder awareness"},
]
DEFAULT_SCHEDULE = [
    {"communication": "Daily stand-up", "audience": "Project Team", "frequency": "Daily", "channel": "Meeting", "owner": "Project Manager"},
    {"communication": "Highlight report", "audience": "Project Board", "frequency": "Weekly", "channel": "Email", "owner": "Project Manager"},
    {"communication": "Steering committee", "audience": "Project Board", "frequency": "Monthly", "channel": "Meeting", "owner": "Executive"},
    {"communication": "Stakeholder newsletter", "audience": "All stakeholders", "frequency": "Monthly", "channel": "Email", "owner": "Communications Lead"},
]
DEFAULT_RACI = [
    {"activity": "Status reporting", "responsible": "Project Manager", "accountable": "Executive", "consulted": "Team Managers", "informed": "Stakeholders"},
    {"activity": "Issue escalation", "responsible": "Team Managers", "accountable": "Project Manager", "consulted": "Project Assurance", "informed": "Project Board"},
    {"activity": "Stakeholder updates", "responsible": "Communications Lead", "accountable": "Project Manager", "consulted": "Senior User", "informed": "End Users"},
]
DEFAULT_ESCALATION = [
    {"level": "Level 1", "trigger": "Issue within team tolerance", "contact": "Team Manager"},
    {"level": "Level 2", "trigger": "Stage tolerance threatened", "contact": "Project Manager"},
    {"level": "Level 3", "trigger": "Project tolerance threatened", "contact": "Project Board"},
]
DEFAULT_METRICS = [
    {"metric": "Stakeholder satisfaction", "target": ">80%", "measurement": "Quarterly survey"},
    {"metric": "Reports delivered on time", "target": "100%", "measurement": "Communication log"},
    {"metric": "Meeting attendance", "target": ">90%", "measurement": "Attendance records"},
]

_stakeholder = record(
    "name",
    {"role": "TBD", "interest": "Medium", "influence": "Medium", "informationNeeds": "TBD"},
    {"influence": ("power",), "informationNeeds": ("information_needs", "needs", "department")},
)
_method = record("type", {"description": "", "useCase": "TBD"}, {"type": ("method", "name", "channel"), "useCase": ("use_case", "purpose")})
_schedule = record(
    "communication",
    {"audience": "TBD", "frequency": "TBD", "channel": "TBD", "owner": "TBD"},
    {"communication": ("event", "name", "type", "report"), "channel": ("method", "medium"), "owner": ("responsible", "sender")},
)
_raci = record("activity", {"responsible": "-", "accountable": "-", "consulted": "-", "informed": "-"}, {"activity": ("task", "name")})
_escalation = record("level", {"trigger": "TBD", "contact": "TBD"}, {"contact": ("owner", "escalateTo")})
_risk = record(
    "risk",
    {"impact": "Medium", "probability": "Medium", "mitigation": "TBD"},
    {"risk": ("description", "name"), "probability": ("likelihood",), "mitigation": ("response",)},
)
_metric = record("metric", {"target": "TBD", "measurement": "TBD"}, {"metric": ("name", "kpi"), "measurement": ("method", "measure")})


def normalize_communication_plan(raw: Any) -> dict:
    data, text = unwrap(raw)
    fields = FieldReader(data, "communication_plan")

    return fields.finish({
        "executiveSummary": fields.text(
            "executiveSummary",
            text or "This plan sets out how project information is shared with stakeholders, by whom and how often.",
        ),
        "objectives": fields.strings("objectives", DEFAULT_OBJECTIVES),
        "stakeholders": fields.items("stakeholders", DEFAULT_STAKEHOLDERS, item=_stakeholder),
        "methods": fields.items("methods", DEFAULT_METHODS, item=_method),
        "schedule": fields.items("schedule", DEFAULT_SCHEDULE, item=_schedule),
        "raci": fields.items("raci", DEFAULT_RACI, item=_raci),
        "keyMessages": fields.strings("keyMessages", []),
        "escalation": fields.items("escalation", DEFAULT_ESCALATION, item=_escalation),
        "feedbackMechanisms": fields.strings("feedbackMechanisms", []),
        "risks": fields.items("risks", [], item=_risk),
        "metrics": fields.items("metrics", DEFAULT_METRICS, item=_metric),
    })
