"""Risk register normalizer."""
from typing import Any

from docgen.services.documents.normalizers.base import (
    FieldReader,
    extract_bullets,
    log_zero_match,
    record,
    split_sentences,
    unwrap,
)

DEFAULT_CATEGORIES = [
    {"name": "Strategic", "description": "Risks to business objectives and direction"},
    {"name": "Operational", "description": "Risks in day-to-day delivery and processes"},
    {"name": "Financial", "description": "Budget, funding and cost risks"},
    {"name": "Technical", "description": "Technology, integration and architecture risks"},
    {"name": "Compliance", "description": "Regulatory and policy risks"},
    {"name": "External", "description": "Market, supplier and environmental risks"},
]
DEFAULT_RISKS = [
    {"description": "Key resources unavailable when required", "category": "Operational", "probability": "Medium", "impact": "High", "mitigation": "Early resource planning and backup resources"},
    {"description": "Scope creep increases cost and duration", "category": "Financial", "probability": "Medium", "impact": "Medium", "mitigation": "Formal change control through the project board"},
    {"description": "Integration with existing systems more complex than planned", "category": "Technical", "probability": "Low", "impact": "High", "mitigation": "Technical proof of concept before build"},
]
DEFAULT_REVIEW_FREQUENCY = "Monthly, and at each stage boundary"
DEFAULT_METHODOLOGY = "Risks are identified, assessed on a 5x5 probability and impact scale, and reviewed with their owners at each review cycle."
DEFAULT_APPETITE = (
    "The organization maintains a balanced risk appetite, accepting calculated risks that align "
    "with strategic objectives while maintaining appropriate controls."
)


def _risk_id(index: int) -> str:
    return f"R{index + 1:03d}"


_risk = record(
    "description",
    {
        "id": _risk_id,
        "category": "General",
        "probability": "Medium",
        "impact": "Medium",
        "owner": "Unassigned",
        "mitigation": "TBD",
        "status": "Open",
        "dateIdentified": "TBD",
    },
    {
        "description": ("risk", "title", "name"),
        "probability": ("likelihood",),
        "impact": ("severity", "consequence"),
        "mitigation": ("response", "mitigationStrategy", "action"),
        "owner": ("riskOwner", "assignedTo"),
        "dateIdentified": ("date_identified", "identified", "raised"),
        "id": ("riskId", "ref"),
    },
)
_category = record("name", {"description": ""}, {"name": ("category", "title")})


def normalize_risk_register(raw: Any) -> dict:
    data, text = unwrap(raw)
    fields = FieldReader(data, "risk_register")
    raw_text = fields.text("rawText") or text

    risks = fields.items("risks", item=_risk)
    if not risks and raw_text:
        risks = [_risk(line, index) for index, line in enumerate(extract_bullets(raw_text))]
        if not risks:
            log_zero_match("risk_register", "risks")
    if not risks:
        risks = fields.items("risks", DEFAULT_RISKS, item=_risk)

    summary_default = split_sentences(raw_text, 3) if raw_text else []
    return fields.finish({
        "executiveSummary": fields.text(
            "executiveSummary",
            " ".join(summary_default) or "Risk register summary to be defined",
        ),
        "risks": risks,
        "categories": fields.items("categories", DEFAULT_CATEGORIES, item=_category),
        "methodology": fields.text("methodology", DEFAULT_METHODOLOGY),
        "riskAppetite": fields.text("riskAppetite", DEFAULT_APPETITE),
        "reviewFrequency": fields.text("reviewFrequency", DEFAULT_REVIEW_FREQUENCY),
        "governance": fields.text("governance", "Escalation route to be defined"),
        "documentOwner": fields.text("documentOwner", "Project Manager"),
        "approvalStatus": fields.text("approvalStatus", "Draft"),
        "rawText": raw_text,
    })
