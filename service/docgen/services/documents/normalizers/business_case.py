"""Business case normalizer."""
from typing import Any, Mapping

from docgen.services.documents.normalizers.base import FieldReader, keep_alias, record, unwrap
from docgen.services.documents.toolkit import as_text, extract_value

DEFAULT_OPTIONS = [
    {"option": "Do Nothing", "description": "Maintain current state", "costs": "Minimal", "benefits": "None", "risks": "High - competitive disadvantage"},
    {"option": "Minimal Investment", "description": "Basic improvements only", "costs": "Low", "benefits": "Limited improvements", "risks": "Medium - partial solution"},
    {"option": "Full Implementation", "description": "Complete solution as proposed", "costs": "As budgeted", "benefits": "Full benefits realization", "risks": "Low - managed approach"},
]
DEFAULT_COSTS = {
    "development": "$100,000",
    "operational": "$50,000",
    "maintenance": "$25,000",
    "total": "$175,000",
    "contingency": "10%",
}
COST_ALIASES = {
    "development": ("dev", "initial", "capital"),
    "operational": ("ops", "running", "operating"),
    "maintenance": ("support",),
    "total": ("overall", "amount", "totalCost"),
}
DEFAULT_APPRAISAL = {"roi": "150%", "paybackPeriod": "18 months"}

_option = record(
    "option",
    {"description": "", "costs": "TBD", "benefits": "TBD", "risks": "TBD"},
    {"option": ("name", "title"), "costs": ("cost",), "benefits": ("benefit",), "risks": ("risk",)},
)
_disbenefit = record(
    "disbenefit",
    {"impact": "Medium", "mitigation": "Change management plan"},
    {"disbenefit": ("name", "description", "disBenefit")},
)
_risk = record(
    "risk",
    {"probability": "Medium", "impact": "High", "mitigation": "Risk management plan in place"},
    {"risk": ("name", "description", "title"), "probability": ("likelihood",), "impact": ("severity",), "mitigation": ("response",)},
)


def _benefit(value: Any, index: int) -> dict:
    if isinstance(value, Mapping):
        result = dict(value)
        if not result.get("benefit"):
            result["benefit"] = as_text(extract_value(value, "name", "description", "title")) or "Benefit"
        if "measurable" not in result:
            result["measurable"] = True
        for canonical, alias in (("measurement", "metric"), ("baseline", "current"), ("target", "goal"), ("whenRealized", "timeline")):
            if result.get(canonical) in (None, "") and result.get(alias) not in (None, ""):
                result[canonical] = result[alias]
        return result
    text = as_text(value).strip()
    return {"benefit": text, "measurable": False} if text else {}


def _costs(fields: FieldReader) -> dict:
    found = fields.value("costs")
    if found in (None, "", [], {}):
        return fields._fallback("costs", DEFAULT_COSTS)
    if not isinstance(found, Mapping):
        # A bare figure only tells us the total
        return {"development": "TBD", "operational": "TBD", "maintenance": "TBD", "total": found, "contingency": "10%"}
    costs = dict(found)
    for canonical, aliases in COST_ALIASES.items():
        if costs.get(canonical) in (None, ""):
            costs[canonical] = extract_value(found, *aliases)
    for key, default in DEFAULT_COSTS.items():
        if costs.get(key) in (None, ""):
            costs[key] = default
            fields.defaulted.add(f"costs.{key}")
    return costs


def _appraisal(fields: FieldReader) -> dict:
    appraisal = fields.mapping("investmentAppraisal", DEFAULT_APPRAISAL)
    if appraisal.get("roi") in (None, ""):
        appraisal["roi"] = extract_value(appraisal, "returnOnInvestment") or DEFAULT_APPRAISAL["roi"]
    if appraisal.get("paybackPeriod") in (None, ""):
        appraisal["paybackPeriod"] = extract_value(appraisal, "payback") or DEFAULT_APPRAISAL["paybackPeriod"]
    for canonical, alias in (("npv", "netPresentValue"), ("irr", "internalRateOfReturn")):
        if appraisal.get(canonical) in (None, "") and appraisal.get(alias) not in (None, ""):
            appraisal[canonical] = appraisal[alias]
    return appraisal


def normalize_business_case(raw: Any) -> dict:
    data, text = unwrap(raw)
    fields = FieldReader(data, "business_case")

    structure = {
        "executiveSummary": fields.text("executiveSummary", text or "Executive summary to be defined"),
        "reasons": fields.text("reasons", "Strategic alignment with organizational objectives"),
        "businessOptions": fields.items("businessOptions", DEFAULT_OPTIONS, item=_option),
        "recommendedOption": fields.text("recommendedOption", "Full Implementation"),
        "expectedBenefits": fields.items("expectedBenefits", [], item=_benefit),
        "expectedDisbenefits": fields.items("expectedDisbenefits", [], item=_disbenefit),
        "timescale": fields.text("timescale", "12 months"),
        "costs": _costs(fields),
        "investmentAppraisal": _appraisal(fields),
        "majorRisks": fields.items("majorRisks", [], item=_risk),
    }
    keep_alias(structure, "expectedDisbenefits", "expectedDisBenefits")
    return fields.finish(structure)
