"""Project charter normalizer."""
from typing import Any

from docgen.services.documents.normalizers.base import FieldReader, extract_bullets, record, unwrap

DEFAULT_OBJECTIVES = [
    "Achieve strategic business goals",
    "Improve operational efficiency",
    "Enhance customer satisfaction",
    "Drive innovation and growth",
]
DEFAULT_IN_SCOPE = ["Core functionality", "Integration requirements", "Documentation"]
DEFAULT_OUT_OF_SCOPE = ["Legacy system migration", "Third-party customization"]
DEFAULT_ASSUMPTIONS = ["Resources will be available as planned", "Stakeholder commitment"]
DEFAULT_CONSTRAINTS = ["Budget limitations", "Timeline restrictions"]
DEFAULT_DELIVERABLES = [
    {"name": "Project Plan", "description": "Comprehensive project planning documentation", "dueDate": "Month 1"},
    {"name": "System Design", "description": "Technical architecture and design specifications", "dueDate": "Month 2"},
    {"name": "Implementation", "description": "Fully functional system implementation", "dueDate": "Month 6"},
]
DEFAULT_MILESTONES = [
    {"name": "Project Kickoff", "date": "Week 1", "criteria": "Team assembled, charter approved", "monthOffset": 0},
    {"name": "Design Complete", "date": "Month 2", "criteria": "All design documents approved", "monthOffset": 2},
    {"name": "Phase 1 Complete", "date": "Month 4", "criteria": "Core functionality implemented", "monthOffset": 4},
    {"name": "Project Closure", "date": "Month 6", "criteria": "All deliverables accepted", "monthOffset": 6},
]
DEFAULT_STAKEHOLDERS = [
    {"name": "Project Sponsor", "role": "Executive Sponsor", "interest": "High", "influence": "High"},
    {"name": "Project Manager", "role": "Project Management", "interest": "High", "influence": "High"},
    {"name": "Development Team", "role": "Implementation", "interest": "High", "influence": "Medium"},
    {"name": "End Users", "role": "System Users", "interest": "High", "influence": "Low"},
]
DEFAULT_BUDGET_TOTAL = 500000
DEFAULT_BUDGET_BREAKDOWN = [
    {"category": "Personnel", "amount": 300000},
    {"category": "Technology", "amount": 100000},
    {"category": "Infrastructure", "amount": 50000},
    {"category": "Contingency", "amount": 50000},
]
DEFAULT_RISKS = [
    {"description": "Resource availability", "impact": "High", "probability": "Medium", "mitigation": "Early resource planning and backup resources"},
    {"description": "Technical complexity", "impact": "High", "probability": "Low", "mitigation": "Technical proof of concept and expert consultation"},
    {"description": "Stakeholder alignment", "impact": "Medium", "probability": "Medium", "mitigation": "Regular communication and alignment meetings"},
]
DEFAULT_SUCCESS_CRITERIA = [
    "All deliverables completed on time and within budget",
    "System meets all functional requirements",
    "User acceptance testing passed with >95% satisfaction",
    "Knowledge transfer completed successfully",
    "Post-implementation support established",
]
DEFAULT_APPROVALS = [
    {"role": "Project Sponsor", "name": "[SPONSOR]", "date": "TBD"},
    {"role": "Project Manager", "name": "[PROJECT MANAGER]", "date": "TBD"},
    {"role": "Technical Lead", "name": "[TECHNICAL LEAD]", "date": "TBD"},
]

_deliverable = record("name", {"description": "Description to be defined", "dueDate": "TBD"}, {"dueDate": ("due_date", "date", "deadline")})
_milestone = record("name", {"date": "TBD", "criteria": "Criteria to be defined"}, {"date": ("dueDate", "due_date", "targetDate"), "criteria": ("description", "successCriteria")})
_stakeholder = record("name", {"role": "Role to be defined", "interest": "Medium", "influence": "Medium"}, {"influence": ("power",)})
_risk = record(
    "description",
    {"impact": "Medium", "probability": "Medium", "mitigation": "Mitigation to be defined"},
    {"description": ("risk", "title", "name"), "probability": ("likelihood",), "mitigation": ("response", "mitigationStrategy")},
)
_budget_line = record("category", {"amount": 0}, {"category": ("name", "item"), "amount": ("value", "cost")})
_approval = record("role", {"name": "Name to be confirmed", "date": "TBD"})


def normalize_charter(raw: Any) -> dict:
    data, text = unwrap(raw)
    fields = FieldReader(data, "charter")
    raw_text = fields.text("rawText") or text

    objectives = fields.strings("businessObjectives")
    if not objectives and raw_text:
        objectives = extract_bullets(raw_text)[:6]
    if not objectives:
        objectives = fields.items("businessObjectives", DEFAULT_OBJECTIVES)

    budget_total = fields.value("budget.total")
    if budget_total is None and isinstance(data.get("budget"), (int, float, str)) and not isinstance(data.get("budget"), bool):
        budget_total = data["budget"]

    return fields.finish({
        "executiveSummary": fields.text("executiveSummary", "Executive summary to be defined"),
        "projectOverview": fields.text("projectOverview", "Project description to be defined"),
        "projectManager": fields.text("projectManager", "TBD"),
        "sponsor": fields.text("sponsor", "TBD"),
        "businessObjectives": objectives,
        "scope": {
            "inScope": fields.strings("scope.inScope", DEFAULT_IN_SCOPE),
            "outOfScope": fields.strings("scope.outOfScope", DEFAULT_OUT_OF_SCOPE),
            "assumptions": fields.strings("scope.assumptions", DEFAULT_ASSUMPTIONS),
            "constraints": fields.strings("scope.constraints", DEFAULT_CONSTRAINTS),
        },
        "deliverables": fields.items("deliverables", DEFAULT_DELIVERABLES, item=_deliverable),
        "milestones": fields.items("milestones", DEFAULT_MILESTONES, item=_milestone),
        "stakeholders": fields.items("stakeholders", DEFAULT_STAKEHOLDERS, item=_stakeholder),
        "budget": {
            "total": budget_total if budget_total not in (None, "") else fields._fallback("budget.total", DEFAULT_BUDGET_TOTAL),
            "breakdown": fields.items("budget.breakdown", DEFAULT_BUDGET_BREAKDOWN, item=_budget_line),
            "contingency": fields.text("budget.contingency", "TBD"),
        },
        "timeline": {
            "startDate": fields.text("timeline.startDate", "TBD"),
            "endDate": fields.text("timeline.endDate", "TBD"),
            "duration": fields.text("timeline.duration", "TBD"),
        },
        "risks": fields.items("risks", DEFAULT_RISKS, item=_risk),
        "successCriteria": fields.strings("successCriteria", DEFAULT_SUCCESS_CRITERIA),
        "approvals": fields.items("approvals", DEFAULT_APPROVALS, item=_approval),
        "rawText": raw_text,
    })
