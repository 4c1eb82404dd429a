"""Company intelligence pack normalizer."""
from typing import Any, Mapping

from docgen.services.documents.normalizers.base import FieldReader, record, unwrap
from docgen.services.documents.toolkit import as_text, extract_array

UNKNOWN = "Unknown"
NOT_DISCLOSED = "Not disclosed"

BASICS_TEXT = ("companyName", "description", "mission", "vision", "foundedYear", "headquarters")
BASICS_LISTS = ("industry", "targetMarket", "coreValues", "uniqueSellingPoints")
FINANCIAL_KEYS = ("revenue", "funding", "valuation", "growth", "customers")
SWOT_KEYS = ("strengths", "weaknesses", "opportunities", "threats", "recommendations")
ACTIVITY_KEYS = ("news", "blogPosts", "productLaunches", "partnerships")

_offering = record("name", {"description": ""}, {"name": ("title", "product", "service"), "pricing": ("price", "pricingModel")})
_competitor = record(
    "name",
    {"description": "", "threatLevel": "Medium", "marketShare": UNKNOWN, "strengths": []},
    {
        "name": ("companyName", "competitor", "title"),
        "description": ("positioning", "summary"),
        "threatLevel": ("threat", "threat_level", "competitiveIntensity"),
        "marketShare": ("market_share", "share"),
        "website": ("url", "domain"),
    },
)
_leader = record("name", {"role": UNKNOWN}, {"role": ("title", "position")})
_event = record("title", {"date": "", "summary": ""}, {"title": ("headline", "name"), "summary": ("description", "snippet")})


def _plain(value: Any) -> str:
    # Years and counts read badly with thousands separators
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return as_text(value).strip()


def _text_block(found: Mapping, keys, default: str) -> dict:
    return {key: _plain(found.get(key)) or default for key in keys}


def _list_block(found: Mapping, keys) -> dict:
    return {key: [as_text(value) for value in extract_array(found.get(key), ",")] for key in keys}


def _basics(fields: FieldReader, text: str) -> dict:
    found = fields.mapping("basics")
    if not found:
        fields.defaulted.add("basics")
    basics = dict(found)
    basics.update(_text_block(found, BASICS_TEXT, UNKNOWN))
    basics.update(_list_block(found, BASICS_LISTS))
    if basics["description"] == UNKNOWN:
        basics["description"] = text or "No description available."
    return basics


def normalize_company_pack(raw: Any) -> dict:
    data, text = unwrap(raw)
    fields = FieldReader(data, "company_pack")

    basics = _basics(fields, text)
    domain = fields.text("domain", "")
    if basics["companyName"] == UNKNOWN and domain:
        basics["companyName"] = domain

    financials = fields.mapping("metrics")
    digital = fields.mapping("digitalPresence")
    people = fields.mapping("people")
    activity = fields.value("recentActivity")
    if isinstance(activity, list):
        activity = {"news": activity}
    activity = dict(activity) if isinstance(activity, Mapping) else {}
    insights = fields.mapping("insights")
    market = fields.mapping("marketPosition")
    meta = fields.mapping("metadata")

    return fields.finish({
        "domain": domain,
        "basics": basics,
        "products": fields.items("products", [], item=_offering),
        "services": fields.items("services", [], item=_offering),
        "competitors": fields.items("competitors", [], item=_competitor),
        "marketPosition": {
            **market,
            **_text_block(market, ("position", "marketShare", "pricingStrategy"), UNKNOWN),
            **_list_block(market, ("trends", "segments", "differentiators")),
        },
        "metrics": {**financials, **_text_block(financials, FINANCIAL_KEYS, NOT_DISCLOSED)},
        "digitalPresence": {
            **digital,
            "website": as_text(digital.get("website")) or domain or UNKNOWN,
            "socialMedia": digital.get("socialMedia") if isinstance(digital.get("socialMedia"), Mapping) else {},
            "contentAnalysis": digital.get("contentAnalysis") if isinstance(digital.get("contentAnalysis"), Mapping) else {},
        },
        "people": {
            **people,
            **_text_block(people, ("teamSize", "hiring", "openPositions"), UNKNOWN),
            "culture": [as_text(value) for value in extract_array(people.get("culture"), ",")],
            "leadership": [
                leader
                for leader in (_leader(value, i) for i, value in enumerate(extract_array(people.get("leadership"))))
                if leader
            ],
        },
        "recentActivity": {
            **activity,
            **{
                key: [event for event in (_event(v, i) for i, v in enumerate(extract_array(activity.get(key)))) if event]
                for key in ACTIVITY_KEYS
            },
        },
        "insights": {**insights, **_list_block(insights, SWOT_KEYS)},
        "metadata": {
            **meta,
            "dataQuality": as_text(meta.get("dataQuality")) or "Medium",
            "generatedAt": as_text(meta.get("generatedAt")) or "TBD",
            "sources": [as_text(value) for value in extract_array(meta.get("sources"))],
        },
    })
