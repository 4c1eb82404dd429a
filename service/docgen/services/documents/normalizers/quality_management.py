"""Quality management plan normalizer."""
from typing import Any

from docgen.services.documents.normalizers.base import FieldReader, record, unwrap
from docgen.services.documents.toolkit import as_text, extract_array

DEFAULT_STANDARDS = [
    {"name": "ISO 9001:2015", "description": "Quality management systems", "compliance": "Required", "status": "In Progress"},
    {"name": "ISO/IEC 25010", "description": "Software product quality model", "compliance": "Recommended", "status": "In Progress"},
]
DEFAULT_PROCESSES = [
    {"name": "Quality Planning", "description": "Identify the quality standards relevant to the project and how to meet them", "steps": []},
    {"name": "Quality Assurance", "description": "Audit the quality requirements and the results of quality control", "steps": []},
    {"name": "Quality Control", "description": "Monitor and record results of executing quality activities", "steps": []},
]
DEFAULT_METRICS = [
    {"name": "Defect density", "current": "N/A", "target": "< 1 per KLOC", "unit": "defects/KLOC"},
    {"name": "Test coverage", "current": "N/A", "target": "80%", "unit": "%"},
    {"name": "Review completion", "current": "N/A", "target": "100%", "unit": "%"},
]
DEFAULT_ROLES = [
    {"role": "Project Manager", "responsibilities": "Owns the quality management approach"},
    {"role": "Quality Assurance Lead", "responsibilities": "Plans and runs quality audits"},
    {"role": "Team Managers", "responsibilities": "Apply quality control to their work packages"},
]

_standard = record(
    "name",
    {"description": "", "compliance": "Required", "status": "In Progress"},
    {"name": ("standard", "title"), "description": ("details",), "compliance": ("level",)},
)


def _process(value: Any, index: int) -> dict:
    coerce = record(
        "name",
        {"name": f"Process {index + 1}", "description": ""},
        {"name": ("process", "title")},
    )
    process = coerce(value, index)
    if process:
        process["steps"] = [as_text(step) for step in extract_array(process.get("steps"))]
    return process


_metric = record(
    "name",
    {"current": "N/A", "target": "TBD", "trend": "→"},
    {"name": ("metric", "kpi", "title"), "current": ("value", "actual")},
)
_review = record("type", {"frequency": "TBD", "participants": "TBD"}, {"type": ("name", "review", "title"), "participants": ("reviewers", "attendees")})
_role = record("role", {"responsibilities": "TBD"}, {"role": ("name", "title"), "responsibilities": ("responsibility", "duties", "description")})
_tool = record("name", {"purpose": ""}, {"name": ("tool", "title"), "purpose": ("description", "use")})


def normalize_quality_management(raw: Any) -> dict:
    data, text = unwrap(raw)
    fields = FieldReader(data, "quality_management")

    return fields.finish({
        "introduction": fields.text(
            "introduction",
            text or "This plan describes how quality will be defined, assured and controlled throughout the project.",
        ),
        "qualityPolicy": fields.text("qualityPolicy", "Quality policy to be defined"),
        "standards": fields.items("standards", DEFAULT_STANDARDS, item=_standard),
        "processes": fields.items("processes", DEFAULT_PROCESSES, item=_process),
        "metrics": fields.items("metrics", DEFAULT_METRICS, item=_metric),
        "assurance": fields.value("assurance", "Quality assurance activities to be defined"),
        "control": fields.value("control", "Quality control activities to be defined"),
        "reviews": fields.items("reviews", [], item=_review),
        "roles": fields.items("roles", DEFAULT_ROLES, item=_role),
        "tools": fields.items("tools", [], item=_tool),
        "improvement": fields.value("improvement", "Continuous improvement approach to be defined"),
    })
