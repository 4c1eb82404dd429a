"""Technical landscape normalizer."""
from typing import Any, Mapping

from docgen.services.documents.normalizers.base import FieldReader, record, unwrap
from docgen.services.documents.toolkit import as_text, extract_array

STACK_LAYERS = ("frontend", "backend", "database", "infrastructure", "tools")

DEFAULT_CURRENT_STATE = [
    "Legacy systems in production",
    "Limited automation and manual processes",
    "Technical debt accumulation",
    "Scalability constraints",
]
DEFAULT_FUTURE_STATE = [
    "Cloud-native architecture",
    "Microservices-based design",
    "Automated CI/CD pipelines",
    "Enhanced security posture",
    "Improved scalability and performance",
]
DEFAULT_GAPS = [
    {"current": "Monolithic architecture", "future": "Microservices", "gap": "Architecture redesign needed", "priority": "High"},
    {"current": "On-premises hosting", "future": "Cloud infrastructure", "gap": "Migration required", "priority": "High"},
    {"current": "Manual deployments", "future": "CI/CD automation", "gap": "Pipeline implementation", "priority": "Medium"},
    {"current": "Basic monitoring", "future": "Advanced observability", "gap": "Monitoring upgrade", "priority": "Medium"},
]
DEFAULT_RECOMMENDATIONS = [
    "Phase 1 - Foundation (Months 1-3): establish cloud infrastructure, CI/CD pipelines, monitoring and logging",
    "Phase 2 - Migration (Months 4-6): modernize applications, migrate data, implement security controls",
    "Phase 3 - Optimization (Months 7-9): performance tuning, cost optimization, advanced features",
]
DEFAULT_RISKS = [
    {"risk": "Data migration failures", "impact": "High", "probability": "Medium", "mitigation": "Comprehensive backup and rollback procedures"},
    {"risk": "Integration complexities", "impact": "Medium", "probability": "High", "mitigation": "Phased integration approach with testing"},
    {"risk": "Performance degradation", "impact": "High", "probability": "Low", "mitigation": "Load testing and optimization"},
    {"risk": "Security vulnerabilities", "impact": "High", "probability": "Medium", "mitigation": "Security audits and penetration testing"},
    {"risk": "Technical debt accumulation", "impact": "Medium", "probability": "High", "mitigation": "Regular refactoring cycles"},
]

_component = record("name", {"description": "", "technology": "TBD"}, {"technology": ("tech", "stack")})
_gap = record("gap", {"current": "TBD", "future": "TBD", "priority": "Medium"}, {"gap": ("description", "name")})
_risk = record(
    "risk",
    {"impact": "High", "probability": "Medium", "mitigation": "Develop mitigation plan"},
    {"risk": ("description", "name", "title"), "probability": ("likelihood",)},
)
_integration = record("name", {"type": "TBD", "description": ""}, {"name": ("system", "title"), "type": ("protocol", "method")})
_debt = record("item", {"impact": "Medium", "remediation": "TBD"}, {"item": ("description", "name", "title"), "remediation": ("fix", "action")})


def _tech_stack(fields: FieldReader) -> dict:
    found = fields.value("techStack")
    if isinstance(found, Mapping):
        stack = {key: [as_text(v) for v in extract_array(value, ",")] for key, value in found.items()}
    elif found not in (None, "", []):
        stack = {"other": [as_text(v) for v in extract_array(found, ",")]}
    else:
        stack = {}
    for layer in STACK_LAYERS:
        stack.setdefault(layer, [])
    if not any(stack.values()):
        fields.defaulted.add("techStack")
    return stack


def _architecture(fields: FieldReader) -> dict:
    found = fields.value("architecture")
    if isinstance(found, Mapping):
        architecture = dict(found)
    elif found not in (None, ""):
        architecture = {"overview": as_text(found)}
    else:
        architecture = {}
    if not architecture.get("overview"):
        architecture["overview"] = fields._fallback("architecture.overview", "Architecture overview to be defined")
    architecture["components"] = [
        _component(value, index) for index, value in enumerate(extract_array(architecture.get("components")))
    ]
    return architecture


def normalize_technical_landscape(raw: Any) -> dict:
    data, text = unwrap(raw)
    fields = FieldReader(data, "technical_landscape")

    return fields.finish({
        "executiveSummary": fields.text(
            "executiveSummary",
            text
            or "This technical landscape analysis provides a view of the current technology state, "
            "the future vision, and the roadmap between them.",
        ),
        "currentState": fields.strings("currentState", DEFAULT_CURRENT_STATE),
        "futureState": fields.strings("futureState", DEFAULT_FUTURE_STATE),
        "techStack": _tech_stack(fields),
        "architecture": _architecture(fields),
        "integrations": fields.items("integrations", [], item=_integration),
        "infrastructure": fields.value("infrastructure", "Infrastructure to be defined"),
        "security": fields.value("security", "Security architecture to be defined"),
        "performance": fields.value("performance", "Performance requirements to be defined"),
        "technicalDebt": fields.items("technicalDebt", [], item=_debt),
        "gapAnalysis": fields.items("gapAnalysis", DEFAULT_GAPS, item=_gap),
        "recommendations": fields.strings("recommendations", DEFAULT_RECOMMENDATIONS),
        "risks": fields.items("risks", DEFAULT_RISKS, item=_risk),
    })
