"""Risk register formatter."""
from collections import Counter

from docgen.services.documents.formatters.base import BaseFormatter, heat_map
from docgen.services.documents.html import Element, bullet_list, metrics_grid, paragraph, paragraphs, subsection, table
from docgen.services.documents.indicators import highlight_box
from docgen.services.documents.mermaid import pie_chart
from docgen.services.documents.risk import BANDS, overall_risk_level, rate_risk
from docgen.services.documents.toolkit import as_text, truncate

CATEGORY_ICONS = {
    "Strategic": "🎯",
    "Operational": "⚙️",
    "Financial": "💰",
    "Technical": "💻",
    "Compliance": "📋",
    "External": "🌍",
}
CLOSED_STATUSES = ("closed", "resolved", "retired")
# (strategy, description, keywords found in the mitigation text)
RESPONSE_STRATEGIES = (
    ("Avoid", "Eliminate the risk by removing the cause", ("avoid", "eliminate")),
    ("Reduce", "Decrease probability or impact", ("reduce", "minimize", "minimise", "mitigate")),
    ("Transfer", "Shift risk to third party", ("transfer", "insurance", "outsource")),
    ("Accept", "Acknowledge and monitor", ("accept", "monitor")),
)
PROBABILITY_SCALE = [
    {"level": "Very Low", "score": 1, "description": "Less than 10% chance of occurring"},
    {"level": "Low", "score": 2, "description": "10-30% chance of occurring"},
    {"level": "Medium", "score": 3, "description": "30-50% chance of occurring"},
    {"level": "High", "score": 4, "description": "50-80% chance of occurring"},
    {"level": "Very High", "score": 5, "description": "More than 80% chance of occurring"},
]
KEY_ACTION_LIMIT = 5


def is_closed(risk: dict) -> bool:
    return as_text(risk.get("status")).strip().lower() in CLOSED_STATUSES


def _scored(risks):
    return sorted(
        ((rate_risk(risk.get("probability"), risk.get("impact")), risk) for risk in risks),
        key=lambda pair: pair[0].score,
        reverse=True,
    )


class RiskRegisterFormatter(BaseFormatter):
    document_type = "risk_register"
    title = "Risk Register"

    def sections(self):
        return [
            ("Executive Summary", self.executive_summary),
            ("Risk Management Approach", self.approach),
            ("Risk Categories", self.categories),
            ("Risk Matrix", self.risk_matrix),
            ("Risk Register", self.register),
            ("Closed Risks", self.closed_risks),
            ("Risk Distribution", self.distribution),
            ("Mitigation Strategies", self.mitigation_strategies),
            ("Governance & Review", self.governance),
        ]

    def cover_subtitle(self, data):
        return f"Status: {data['approvalStatus']}"

    def executive_summary(self, data):
        risks = data["risks"]
        open_risks = [risk for risk in risks if not is_closed(risk)]
        scored = _scored(open_risks)
        severe = [risk for rating, risk in scored if rating.band in ("High", "Critical")]
        overall = overall_risk_level(open_risks)
        top = [
            Element("span", self.indicator(rating.band), " ", Element("strong", as_text(risk["description"])), f" (Score: {rating.score})")
            for rating, risk in scored[:3]
        ]
        children = [
            *paragraphs(data["executiveSummary"]),
            paragraph(
                f"This Risk Register documents {len(risks)} identified risks for {self.metadata.project_name}, "
                f"with {len(open_risks)} currently open and requiring active management."
            ),
            metrics_grid({
                "Total Risks": len(risks),
                "Open Risks": len(open_risks),
                "High/Critical Risks": len(severe),
                "Closed Risks": len(risks) - len(open_risks),
                "Overall Rating": f"{self.indicator(overall)} {overall}".strip(),
            }),
        ]
        if top:
            children.append(subsection("Top Risks Requiring Immediate Attention", bullet_list(top, ordered=True)))
        return children

    def approach(self, data):
        budget = self.budget_thresholds()
        delay = self.delay_thresholds()
        impact_rows = [
            [cost["level"], cost["threshold"], schedule["threshold"]]
            for cost, schedule in zip(budget.as_rows(), delay.as_rows())
        ]
        bands = []
        lower = 1
        for upper, band, _, glyph in BANDS:
            bands.append([f"{lower}-{upper}", f"{glyph} {band}" if self.options.include_visual_indicators else band])
            lower = upper + 1
        return [
            *paragraphs(data["methodology"]),
            subsection("Risk Appetite", *paragraphs(data["riskAppetite"])),
            subsection("Probability Scale", table(PROBABILITY_SCALE, headers=["Level", "Score", "Description"])),
            subsection("Impact Scale", table(impact_rows, headers=["Level", "Cost Impact", "Schedule Impact"])),
            subsection("Risk Score Bands", paragraph("Risk score = probability level x impact level."), table(bands, headers=["Score", "Rating"])),
        ]

    def categories(self, data):
        counts = Counter(as_text(risk.get("category")) for risk in data["risks"])
        rows = [
            [f"{CATEGORY_ICONS.get(category['name'], '📌')} {category['name']}", category.get("description"), counts.get(category["name"], 0)]
            for category in data["categories"]
        ]
        known = {category["name"] for category in data["categories"]}
        rows.extend([f"📌 {name}", "", count] for name, count in counts.items() if name not in known)
        return table(rows, headers=["Category", "Description", "Risks"])

    def risk_matrix(self, data):
        open_risks = [risk for risk in data["risks"] if not is_closed(risk)]
        return [
            paragraph("Open risks plotted by probability and impact level. Cells show risk IDs."),
            heat_map(open_risks),
        ]

    def _register_table(self, risks):
        rows = []
        for rating, risk in _scored(risks):
            rows.append([
                risk["id"],
                risk["description"],
                risk.get("category"),
                risk.get("probability"),
                risk.get("impact"),
                rating.score,
                f"{self.indicator(rating.band)} {rating.band}".strip(),
                risk.get("owner"),
                risk.get("mitigation"),
                risk.get("status"),
            ])
        return table(
            rows,
            headers=["ID", "Risk", "Category", "Probability", "Impact", "Score", "Rating", "Owner", "Mitigation", "Status"],
            class_="data-table risk-table",
        )

    def register(self, data):
        open_risks = [risk for risk in data["risks"] if not is_closed(risk)]
        if not open_risks:
            return paragraph("No open risks are currently recorded.")
        return self._register_table(open_risks)

    def closed_risks(self, data):
        closed = [risk for risk in data["risks"] if is_closed(risk)]
        if not closed:
            return None
        return self._register_table(closed)

    def distribution(self, data):
        risks = data["risks"]
        by_band = Counter(rate_risk(risk.get("probability"), risk.get("impact")).band for risk in risks)
        by_status = Counter(as_text(risk.get("status")) for risk in risks)
        band_rows = [[band, by_band.get(band, 0)] for _, band, _, _ in BANDS]
        return [
            self.chart(pie_chart("Risks by Rating", [(band, by_band.get(band, 0)) for _, band, _, _ in BANDS]), "pie"),
            table(band_rows, headers=["Rating", "Risks"]),
            self.chart(pie_chart("Risks by Status", by_status.items()), "pie"),
        ]

    def mitigation_strategies(self, data):
        risks = data["risks"]
        rows = []
        for strategy, description, keywords in RESPONSE_STRATEGIES:
            count = sum(1 for risk in risks if any(word in as_text(risk.get("mitigation")).lower() for word in keywords))
            rows.append([Element("strong", strategy), description, count])
        actions = [
            [risk["description"], risk.get("owner"), truncate(as_text(risk.get("mitigation")), 150)]
            for rating, risk in _scored(risks)
            if not is_closed(risk) and rating.score >= 10
        ][:KEY_ACTION_LIMIT]
        children = [subsection("Risk Response Strategies Applied", table(rows, headers=["Strategy", "Description", "Number of Risks"]))]
        if actions:
            children.append(subsection("Key Mitigation Actions", table(actions, headers=["Risk", "Owner", "Action"])))
        return children

    def governance(self, data):
        return [
            *paragraphs(data["governance"]),
            table(
                [
                    ["Review Frequency", data["reviewFrequency"]],
                    ["Document Owner", data["documentOwner"]],
                    ["Approval Status", data["approvalStatus"]],
                    ["Distribution", "Project Board, Project Manager, Risk Owners, PMO"],
                ],
                headers=["Item", "Detail"],
            ),
            highlight_box("Living Document", "This Risk Register should be updated throughout the project lifecycle.", "info"),
        ]
