"""
Schedule and threshold calculators driven off the project start/end dates,
budget and timeline strings.

Every function degrades to placeholder text ("TBD", "Phase 1 Start", ...)
when its inputs are missing or unparsable. None of them raise.
"""
import calendar
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, List, Optional

from docgen.services.documents.toolkit import detect_currency, format_number, parse_amount

DEFAULT_PHASE_NAMES = ["Foundation", "Development", "Implementation", "Closure"]
TIMELINE_PHASE_NAMES = [
    "Project Initiation",
    "Phase 1 - Foundation",
    "Phase 2 - Development",
    "Phase 3 - Implementation",
    "Project Closure",
]


@dataclass
class Phase:
    name: str
    start_date: str
    end_date: str
    quarter: str = "TBD"


@dataclass
class Thresholds:
    very_low: str
    low: str
    medium: str
    high: str
    very_high: str

    def as_rows(self) -> List[dict]:
        return [
            {"level": "Very Low", "threshold": self.very_low},
            {"level": "Low", "threshold": self.low},
            {"level": "Medium", "threshold": self.medium},
            {"level": "High", "threshold": self.high},
            {"level": "Very High", "threshold": self.very_high},
        ]


@dataclass
class Duration:
    months: int
    text: str
    detailed: str


def parse_date(value: Any) -> Optional[date]:
    """Parse ISO-ish dates and datetimes; anything else yields None."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    for fmt in ("%d/%m/%Y", "%d %B %Y", "%B %d, %Y", "%Y/%m/%d"):
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def add_months(value: date, months: int) -> date:
    """Calendar month arithmetic; the day is clamped to the target month's length."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def long_date(value: date) -> str:
    """en-GB long form, e.g. "1 April 2024"."""
    return f"{value.day} {calendar.month_name[value.month]} {value.year}"


def quarter_of(value: date) -> str:
    return f"Q{(value.month - 1) // 3 + 1} {value.year}"


def calculate_quarter_from_date(value: Any) -> str:
    parsed = parse_date(value)
    return quarter_of(parsed) if parsed else "TBD"


def calculate_milestone_date(start_date: Any, month_offset: int, fmt: str = "full") -> str:
    """Date ``month_offset`` months after the project start, in the requested format."""
    start = parse_date(start_date)
    if fmt == "month":
        return f"Month {month_offset}"
    if start is None:
        return "TBD"
    try:
        months = int(month_offset)
    except (TypeError, ValueError):
        return "TBD"
    target = add_months(start, months)
    if fmt == "quarter":
        return quarter_of(target)
    if fmt == "iso":
        return target.isoformat()
    return long_date(target)


def calculate_sprint_dates(start_date: Any, sprint_number: int, sprint_duration: int = 14) -> dict:
    start = parse_date(start_date)
    if start is None:
        return {"start": f"Sprint {sprint_number} Start", "end": f"Sprint {sprint_number} End"}
    sprint_start = start + timedelta(days=(sprint_number - 1) * sprint_duration)
    sprint_end = sprint_start + timedelta(days=sprint_duration - 1)
    return {"start": sprint_start.isoformat(), "end": sprint_end.isoformat()}


def calculate_phase_timeline(start_date: Any, end_date: Any, phase_names: Optional[List[str]] = None) -> List[Phase]:
    """Split the project span into equal named phases with quarter labels."""
    names = phase_names or DEFAULT_PHASE_NAMES
    start, end = parse_date(start_date), parse_date(end_date)
    if start is None or end is None or end < start:
        return [Phase(name, f"Phase {i + 1} Start", f"Phase {i + 1} End", "TBD") for i, name in enumerate(names)]

    span = (end - start).days / len(names)
    phases = []
    for i, name in enumerate(names):
        phase_start = start + timedelta(days=round(span * i))
        phase_end = start + timedelta(days=round(span * (i + 1)))
        phases.append(Phase(name, phase_start.isoformat(), phase_end.isoformat(), quarter_of(phase_start)))
    return phases


def format_date_for_display(value: Any, fmt: str = "long") -> str:
    if value is None or value == "":
        return "TBD"
    parsed = parse_date(value)
    if parsed is None:
        return str(value)
    if fmt == "short":
        return parsed.strftime("%d/%m/%Y")
    if fmt == "iso":
        return parsed.isoformat()
    return long_date(parsed)


def calculate_project_duration(start_date: Any, end_date: Any) -> Duration:
    start, end = parse_date(start_date), parse_date(end_date)
    if start is None or end is None:
        return Duration(0, "Duration not specified", "Project duration to be determined")
    months = round(abs((end - start).days) / 30)
    return Duration(
        months,
        f"{months} months",
        f"Project Duration: {months} months - Start Date: {long_date(start)} - End Date: {long_date(end)}",
    )


def format_project_duration(start_date: Any, end_date: Any, timeline: Any = None) -> str:
    duration = calculate_project_duration(start_date, end_date)
    if duration.months > 0:
        return (
            f"{duration.text} ({format_date_for_display(start_date, 'short')} - "
            f"{format_date_for_display(end_date, 'short')})"
        )
    return str(timeline) if timeline else "Duration TBD"


def generate_timeline_entries(start_date: Any, end_date: Any, include_post_project: bool = True) -> List[tuple]:
    """(label, period) pairs for the project timeline diagram."""
    entries = [(phase.name, phase.quarter) for phase in calculate_phase_timeline(start_date, end_date, TIMELINE_PHASE_NAMES)]
    end = parse_date(end_date)
    if include_post_project and end is not None:
        entries.append(("Benefits Realization", f"{quarter_of(add_months(end, 1))}-{quarter_of(add_months(end, 12))}"))
    return entries


def calculate_budget_thresholds(total_budget: Any) -> Thresholds:
    """Cost-impact bands at 5/10/25/50 % of the budget; text bands when it can't be parsed."""
    amount = parse_amount(total_budget) if total_budget else None
    if not amount:
        return Thresholds(
            very_low="<5% of budget",
            low="5-10% of budget",
            medium="10-25% of budget",
            high="25-50% of budget",
            very_high=">50% of budget",
        )
    currency = detect_currency(total_budget)

    def share(pct: float) -> str:
        return format_number(round(amount * pct))

    return Thresholds(
        very_low=f"<{currency}{share(0.05)} or <5% budget",
        low=f"{currency}{share(0.05)}-{share(0.10)} or 5-10% budget",
        medium=f"{currency}{share(0.10)}-{share(0.25)} or 10-25% budget",
        high=f"{currency}{share(0.25)}-{share(0.50)} or 25-50% budget",
        very_high=f">{currency}{share(0.50)} or >50% budget",
    )


def calculate_delay_thresholds(timeline: Any) -> Thresholds:
    match = re.search(r"(\d+)\s*month", str(timeline or ""), re.IGNORECASE)
    if not match:
        return Thresholds(
            very_low="<2 weeks delay",
            low="2-4 weeks delay",
            medium="1-3 months delay",
            high="3-6 months delay",
            very_high=">6 months delay",
        )
    months = int(match.group(1))
    weeks = months * 52 / 12

    def weeks_at(pct: float) -> int:
        return max(1, round(weeks * pct))

    def months_at(pct: float) -> int:
        return max(1, round(months * pct))

    return Thresholds(
        very_low=f"<{weeks_at(0.05)} weeks delay",
        low=f"{weeks_at(0.05)}-{weeks_at(0.10)} weeks delay",
        medium=f"{months_at(0.10)}-{months_at(0.25)} months delay",
        high=f"{months_at(0.25)}-{months_at(0.50)} months delay",
        very_high=f">{months_at(0.50)} months delay",
    )


def today_long() -> str:
    return long_date(date.today())
