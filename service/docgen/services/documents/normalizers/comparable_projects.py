"""
Comparable projects normalizer.

Analyses usually come back as a numbered report (``{"analysis": "1. EXECUTIVE
SUMMARY ..."}``). The headed sections and the ``CP-001`` project blocks are
pulled out of the text; structured input is used as-is.
"""
import re
from typing import Any, List

from docgen.services.documents.normalizers.base import (
    FieldReader,
    extract_bullets,
    extract_headed_section,
    log_zero_match,
    record,
    unwrap,
)

TEXT_SECTIONS = {
    "executiveSummary": "EXECUTIVE SUMMARY",
    "analysisMethodology": "ANALYSIS METHODOLOGY",
    "selectionCriteria": "SELECTION CRITERIA",
    "keyFindings": "KEY FINDINGS",
    "recommendations": "RECOMMENDATIONS",
    "benchmarkData": "BENCHMARK DATA",
    "lessonsLearned": "LESSONS LEARNED",
}

DEFAULT_PROJECTS = [
    {"id": "CP-001", "name": "Digital Transformation Project A", "budget": "$5M", "timeline": "18 months", "outcome": "Success", "similarity": 85},
    {"id": "CP-002", "name": "Banking Platform Modernization", "budget": "$8M", "timeline": "24 months", "outcome": "Success", "similarity": 80},
    {"id": "CP-003", "name": "Core System Upgrade Initiative", "budget": "$12M", "timeline": "30 months", "outcome": "Partial", "similarity": 75},
    {"id": "CP-004", "name": "API Integration Platform", "budget": "$3M", "timeline": "12 months", "outcome": "Success", "similarity": 70},
    {"id": "CP-005", "name": "Customer Experience Enhancement", "budget": "$6M", "timeline": "20 months", "outcome": "Success", "similarity": 65},
]
DEFAULT_CRITERIA = [
    "Industry and regulatory context",
    "Project scale and budget",
    "Technology stack",
    "Organizational complexity",
]

_PROJECT_BLOCK_RE = re.compile(r"(?:Project ID:\s*)?CP-(\d{3})[^\n]*\n(.*?)(?=(?:Project ID:\s*)?CP-\d{3}|\n\d+\.\s|\Z)", re.IGNORECASE | re.DOTALL)
_DETAIL_PATTERNS = {
    "name": r"(?:name|organi[sz]ation)[:\s]+([^\n]+)",
    "timeline": r"duration[:\s]+([^\n]+)",
    "budget": r"budget[:\s]+([^\n]+)",
    "teamSize": r"team(?: size)?[:\s]+([^\n]+)",
    "outcome": r"outcome[:\s]+([^\n]+)",
    "keyLesson": r"(?:key lesson|lesson)[:\s]+([^\n]+)",
}


def _similarity(index: int) -> int:
    return max(50, 85 - index * 5)


_project = record(
    "name",
    {
        "id": lambda index: f"CP-{index + 1:03d}",
        "budget": "N/A",
        "timeline": "N/A",
        "teamSize": "N/A",
        "outcome": "N/A",
        "status": "Completed",
        "similarity": _similarity,
    },
    {
        "name": ("title", "projectName", "organization"),
        "timeline": ("duration",),
        "teamSize": ("team_size", "team"),
        "outcome": ("outcomes", "result"),
        "similarity": ("similarityScore", "similarity_score", "score"),
        "lessonsLearned": ("keyLesson", "lessons"),
    },
)


def extract_projects(text: str) -> List[dict]:
    projects = []
    for number, body in _PROJECT_BLOCK_RE.findall(text or ""):
        project = {"id": f"CP-{number}"}
        for key, pattern in _DETAIL_PATTERNS.items():
            match = re.search(pattern, body, re.IGNORECASE)
            if match:
                project[key] = match.group(1).strip()
        project.setdefault("name", f"Comparable Project {len(projects) + 1}")
        projects.append(_project(project, len(projects)))
    return projects


def normalize_comparable_projects(raw: Any) -> dict:
    data, text = unwrap(raw)
    fields = FieldReader(data, "comparable_projects")
    raw_content = fields.text("rawContent") or text

    from_text = {
        key: extract_headed_section(raw_content, heading) for key, heading in TEXT_SECTIONS.items()
    } if raw_content else {}

    projects = fields.items("projects", item=_project)
    if not projects and raw_content:
        projects = extract_projects(raw_content)
        if not projects:
            log_zero_match("comparable_projects", "project profiles")
    if not projects:
        projects = fields.items("projects", DEFAULT_PROJECTS, item=_project)

    def section_text(key: str, default: str) -> str:
        return fields.text(key) or from_text.get(key) or fields._fallback(key, default)

    def section_list(key: str, default: list) -> list:
        found = fields.strings(key)
        if not found and from_text.get(key):
            found = extract_bullets(from_text[key]) or [from_text[key]]
        return found or fields._fallback(key, default)

    return fields.finish({
        "executiveSummary": section_text("executiveSummary", "Executive summary to be defined"),
        "analysisMethodology": section_text(
            "analysisMethodology",
            "Projects were selected and scored on industry, scale, technology and organizational similarity.",
        ),
        "selectionCriteria": section_list("selectionCriteria", DEFAULT_CRITERIA),
        "projects": projects,
        "benchmarkData": section_text("benchmarkData", "Benchmark data to be provided"),
        "keyFindings": section_list("keyFindings", ["Key findings to be defined"]),
        "lessonsLearned": section_list("lessonsLearned", ["Lessons learned to be defined"]),
        "recommendations": section_list("recommendations", ["Recommendations to be defined"]),
        "rawContent": raw_content,
    })
