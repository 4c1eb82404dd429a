"""Company intelligence pack formatter."""
from typing import Mapping

from docgen.services.documents.formatters.base import BaseFormatter
from docgen.services.documents.html import (
    Element,
    bullet_list,
    definition_list,
    paragraph,
    placeholder,
    subsection,
    table,
)
from docgen.services.documents.mermaid import mindmap, pie_chart
from docgen.services.documents.normalizers.company_pack import ACTIVITY_KEYS, SWOT_KEYS, UNKNOWN
from docgen.services.documents.toolkit import as_text, format_header, parse_amount

COMPETITOR_LIMIT = 10
ACTIVITY_LABELS = {
    "news": "Recent News",
    "blogPosts": "Recent Blog Posts",
    "productLaunches": "Recent Product Launches",
    "partnerships": "Recent Partnerships",
}
SWOT_LABELS = {
    "strengths": "💪 Strengths",
    "weaknesses": "⚠️ Weaknesses",
    "opportunities": "🚀 Opportunities",
    "threats": "⚡ Threats",
}
HIGH_THREATS = ("high", "critical")


def _joined(values) -> str:
    return ", ".join(as_text(value) for value in values) or UNKNOWN


class CompanyPackFormatter(BaseFormatter):
    document_type = "company_pack"
    title = "Company Intelligence Pack"
    styles = """
.data-quality-indicator { font-size: 0.6em; padding: 2px 8px; border-radius: 10px; margin-left: 8px; vertical-align: middle; }
.data-quality-high { background: #d1fae5; color: #065f46; }
.data-quality-medium { background: #fef3c7; color: #92400e; }
.data-quality-low { background: #fee2e2; color: #991b1b; }
.swot-grid td { width: 50%; vertical-align: top; padding: 10px; }
.swot-strengths { background: #ecfdf5; }
.swot-weaknesses { background: #fef2f2; }
.swot-opportunities { background: #eff6ff; }
.swot-threats { background: #fff7ed; }
tr.threat-high td, tr.threat-critical td { background: #fef2f2; }
"""

    def sections(self):
        return [
            ("Executive Summary", self.executive_summary),
            ("Company Overview", self.company_overview),
            ("Products & Services", self.products_and_services),
            ("Competitive Analysis", self.competitors),
            ("Market Position", self.market_position),
            ("Financial Metrics", self.financials),
            ("Digital Presence", self.digital_presence),
            ("Team & Culture", self.team),
            ("Recent Activity", self.recent_activity),
            ("Strategic Insights", self.insights),
            ("Sources", self.sources),
        ]

    def cover_subtitle(self, data):
        return data["domain"] or data["basics"]["companyName"]

    def executive_summary(self, data):
        basics = data["basics"]
        quality = data["metadata"]["dataQuality"]
        children = [
            Element("span", f"{quality} Quality Data", class_=f"data-quality-indicator data-quality-{quality.lower()}"),
            paragraph(basics["description"]),
        ]
        if basics["mission"] != UNKNOWN:
            children.append(subsection("Mission", paragraph(basics["mission"])))
        if basics["vision"] != UNKNOWN:
            children.append(subsection("Vision", paragraph(basics["vision"])))
        children.append(subsection("Key Highlights", bullet_list([
            f"Founded: {basics['foundedYear']}",
            f"Industry: {_joined(basics['industry'])}",
            f"Headquarters: {basics['headquarters']}",
            f"Employees: {data['people']['teamSize']}",
        ])))
        return children

    def company_overview(self, data):
        basics = data["basics"]
        rows = [
            ["Company Name", basics["companyName"]],
            ["Founded", basics["foundedYear"]],
            ["Headquarters", basics["headquarters"]],
            ["Industry", _joined(basics["industry"])],
            ["Target Market", _joined(basics["targetMarket"])],
            ["Core Values", ", ".join(basics["coreValues"]) or "Not specified"],
        ]
        children = [table(rows, headers=["Attribute", "Value"])]
        if basics["uniqueSellingPoints"]:
            children.append(subsection("Unique Selling Points", bullet_list(basics["uniqueSellingPoints"])))
        return children

    def _offerings(self, items):
        return table(
            [[Element("strong", as_text(item["name"])), item.get("description"), item.get("pricing")] for item in items],
            headers=["Name", "Description", "Pricing"],
        )

    def products_and_services(self, data):
        if not data["products"] and not data["services"]:
            return placeholder("No products or services were identified.")
        children = []
        if data["products"]:
            children.append(subsection("Products", self._offerings(data["products"])))
        if data["services"]:
            children.append(subsection("Services", self._offerings(data["services"])))
        return children

    def competitors(self, data):
        competitors = data["competitors"]
        if not competitors:
            return placeholder("No competitors were identified.")
        rows = []
        for competitor in competitors[:COMPETITOR_LIMIT]:
            threat = as_text(competitor.get("threatLevel"))
            rows.append(Element(
                "tr",
                Element("td", Element("strong", as_text(competitor["name"]))),
                Element("td", as_text(competitor.get("description")) or "-"),
                Element("td", f"{self.indicator(threat)} {threat}".strip()),
                Element("td", as_text(competitor.get("marketShare"))),
                Element("td", as_text(competitor.get("website")) or "-"),
                class_=f"threat-{threat.lower()}",
            ))
        header = Element("tr", *[Element("th", label) for label in ("Competitor", "Positioning", "Threat Level", "Market Share", "Website")])
        children = [Element("table", Element("thead", header), Element("tbody", *rows), class_="data-table competitor-table")]
        if len(competitors) > COMPETITOR_LIMIT:
            children.append(paragraph(f"Showing {COMPETITOR_LIMIT} of {len(competitors)} competitors."))

        shares = [(as_text(c["name"]), parse_amount(c.get("marketShare"))) for c in competitors]
        shares = [(name, share) for name, share in shares if share]
        if shares:
            children.append(self.chart(pie_chart("Market Share Distribution", shares), "pie"))

        high = [as_text(c["name"]) for c in competitors if as_text(c.get("threatLevel")).lower() in HIGH_THREATS]
        if high:
            children.append(subsection(
                "⚠️ High Threat Competitors",
                paragraph("The following competitors pose a high or critical threat:"),
                bullet_list(high),
            ))
        return children

    def market_position(self, data):
        market = data["marketPosition"]
        children = [definition_list({
            "Position": market["position"],
            "Market Share": market["marketShare"],
            "Pricing Strategy": market["pricingStrategy"],
        })]
        for key, heading in (("segments", "Market Segments"), ("differentiators", "Key Differentiators"), ("trends", "Industry Trends")):
            if market[key]:
                children.append(subsection(heading, bullet_list(market[key])))
        return children

    def financials(self, data):
        metrics = data["metrics"]
        rows = [
            ["Revenue", metrics["revenue"]],
            ["Funding", metrics["funding"]],
            ["Valuation", metrics["valuation"]],
            ["Growth Rate", metrics["growth"]],
            ["Customers", metrics["customers"]],
        ]
        return table(rows, headers=["Metric", "Value"])

    def digital_presence(self, data):
        digital = data["digitalPresence"]
        children = [paragraph(f"Website: {digital['website']}")]
        social = digital["socialMedia"]
        if social:
            rows = []
            for platform, details in social.items():
                if isinstance(details, Mapping):
                    rows.append([format_header(platform), details.get("url") or "Not found", details.get("followers") or UNKNOWN])
                else:
                    rows.append([format_header(platform), as_text(details) or "Not found", UNKNOWN])
            children.append(subsection("Social Media Presence", table(rows, headers=["Platform", "URL", "Followers"])))
        if digital["contentAnalysis"]:
            children.append(subsection("Content Strategy", definition_list(digital["contentAnalysis"])))
        return children

    def team(self, data):
        people = data["people"]
        children = [definition_list({
            "Team Size": people["teamSize"],
            "Hiring": people["hiring"],
            "Open Positions": people["openPositions"],
        })]
        if people["culture"]:
            children.append(subsection("Company Culture", bullet_list(people["culture"])))
        if people["leadership"]:
            children.append(subsection(
                "Leadership Team",
                table(people["leadership"], columns=["name", "role"], headers=["Name", "Role"]),
            ))
        return children

    def recent_activity(self, data):
        activity = data["recentActivity"]
        children = []
        for key in ACTIVITY_KEYS:
            events = activity[key]
            if events:
                children.append(subsection(
                    ACTIVITY_LABELS[key],
                    table(events, columns=["date", "title", "summary"], headers=["Date", "Title", "Summary"]),
                ))
        return children or placeholder("No recent activity was found.")

    def insights(self, data):
        insights = data["insights"]
        quadrants = [key for key in SWOT_KEYS if key in SWOT_LABELS]

        def quadrant(key):
            return Element("td", Element("h4", SWOT_LABELS[key]), bullet_list(insights[key]) or placeholder("None identified"), class_=f"swot-{key}")

        grid = Element(
            "table",
            Element("tr", quadrant(quadrants[0]), quadrant(quadrants[1])),
            Element("tr", quadrant(quadrants[2]), quadrant(quadrants[3])),
            class_="swot-grid",
        )
        branches = [(SWOT_LABELS[key].split(" ", 1)[1], insights[key]) for key in quadrants if insights[key]]
        children = [grid, self.chart(mindmap("SWOT", branches), "mindmap")]
        if insights["recommendations"]:
            children.append(subsection("Strategic Recommendations", bullet_list(insights["recommendations"], ordered=True)))
        return children

    def sources(self, data):
        meta = data["metadata"]
        children = [definition_list({"Data Quality": meta["dataQuality"], "Generated At": meta["generatedAt"]})]
        if meta["sources"]:
            children.append(bullet_list(meta["sources"], ordered=True))
        return children
