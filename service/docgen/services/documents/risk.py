"""
Risk scoring shared by every document that shows risks.

One banding table is used everywhere (summaries, registers, heat maps) so a
score never lands in different bands in different sections:

    score = probability level (1-5) x impact level (1-5)
    1-4 Low, 5-9 Medium, 10-15 High, 16-25 Critical
"""
from dataclasses import dataclass
from typing import Any

from docgen.services.documents.toolkit import is_number

LEVELS = {
    "very low": 1,
    "rare": 1,
    "negligible": 1,
    "low": 2,
    "unlikely": 2,
    "minor": 2,
    "medium": 3,
    "moderate": 3,
    "possible": 3,
    "high": 4,
    "likely": 4,
    "major": 4,
    "very high": 5,
    "almost certain": 5,
    "critical": 5,
    "severe": 5,
}
LEVEL_NAMES = {1: "Very Low", 2: "Low", 3: "Medium", 4: "High", 5: "Very High"}

# (upper bound inclusive, band, css colour, glyph)
BANDS = (
    (4, "Low", "green", "🟢"),
    (9, "Medium", "yellow", "🟡"),
    (15, "High", "orange", "🟠"),
    (25, "Critical", "red", "🔴"),
)


@dataclass(frozen=True)
class RiskRating:
    score: int
    band: str
    color: str
    glyph: str


def risk_level(value: Any, default: int = 3) -> int:
    """Map a level name or number to 1-5; unknown values count as Medium."""
    if is_number(value):
        return max(1, min(5, int(round(value))))
    if isinstance(value, str):
        text = value.strip().lower()
        if text.isdigit():
            return max(1, min(5, int(text)))
        return LEVELS.get(text, default)
    return default


def level_name(value: Any) -> str:
    return LEVEL_NAMES[risk_level(value)]


def risk_band(score: int) -> str:
    return rate_score(score).band


def rate_score(score: int) -> RiskRating:
    score = max(1, min(25, int(score)))
    for upper, band, color, glyph in BANDS:
        if score <= upper:
            return RiskRating(score, band, color, glyph)
    return RiskRating(score, "Critical", "red", "🔴")


def rate_risk(probability: Any, impact: Any) -> RiskRating:
    return rate_score(risk_level(probability) * risk_level(impact))


def overall_risk_level(risks: list) -> str:
    """Document-level rating: the worst band present among the risks."""
    if not risks:
        return "Low"
    order = [band for _, band, _, _ in BANDS]
    worst = max(
        (rate_risk(r.get("probability"), r.get("impact")).band for r in risks if isinstance(r, dict)),
        key=order.index,
        default="Low",
    )
    return worst
