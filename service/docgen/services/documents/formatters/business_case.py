"""Business case formatter."""
import re
from datetime import date, timedelta

from docgen.services.documents import dates
from docgen.services.documents.formatters.base import BaseFormatter, heat_map
from docgen.services.documents.html import Element, bullet_list, paragraph, paragraphs, subsection, table
from docgen.services.documents.indicators import comparison_matrix, highlight_box
from docgen.services.documents.mermaid import chain_flowchart, gantt_chart, pie_chart, timeline_chart
from docgen.services.documents.risk import overall_risk_level
from docgen.services.documents.toolkit import as_text, is_placeholder, parse_amount

COST_LINES = (
    ("development", "Development Costs", "Initial build and setup"),
    ("operational", "Operational Costs", "Running costs per annum"),
    ("maintenance", "Maintenance Costs", "Ongoing support"),
)
OPTION_CRITERIA = ("Cost", "Benefit", "Risk", "Feasibility")
# ROI multipliers for the best and worst case benefit scenarios
SENSITIVITY = (("Best Case (+20% benefits)", 1.2, "Reduced 20%", "✅ Proceed"), ("Worst Case (-20% benefits)", 0.8, "Extended 20%", "⚠️ Review"))
CRITICAL_DATES = (
    ("Phase 1 Complete", 0.25, "Requirements finalized"),
    ("Phase 2 Complete", 0.5, "Development resources"),
    ("Go-Live", 0.75, "Testing & training"),
)
STRATEGIC_CONTEXT = (
    ("Strategic Alignment", "This project aligns with the organization's strategic objectives by:", [
        "Supporting digital transformation initiatives",
        "Enhancing operational efficiency",
        "Improving customer satisfaction",
        "Strengthening competitive position",
    ]),
    ("Market Context", "The current market conditions favor this investment due to:", [
        "Growing demand for digital solutions",
        "Competitive pressure to modernize",
        "Regulatory requirements",
        "Customer expectations",
    ]),
    ("Organizational Readiness", "The organization is prepared for this project with:", [
        "Executive sponsorship secured",
        "Resources identified and available",
        "Clear governance structure",
        "Change management capabilities",
    ]),
)
APPROVAL_CONDITIONS = [
    "Secure executive sponsorship and governance structure",
    "Confirm resource availability and budget allocation",
    "Establish project management office and controls",
    "Implement risk management framework",
    "Define success criteria and benefits tracking",
]
NEXT_STEPS = [
    "Present business case to investment committee",
    "Obtain formal approval and funding release",
    "Initiate project charter development",
    "Mobilize project team and resources",
    "Commence project initiation phase",
]


def cost_percentage(part, total) -> int:
    """Share of ``total`` as a whole percentage; 0 when either side can't be read."""
    part_value = parse_amount(part)
    total_value = parse_amount(total)
    if not part_value or not total_value:
        return 0
    return round(part_value / total_value * 100)


def adjust_roi(roi, factor: float) -> str:
    match = re.search(r"(-?[\d.]+)", str(roi or ""))
    if not match:
        return as_text(roi)
    try:
        return f"{round(float(match.group(1)) * factor)}%"
    except ValueError:
        return as_text(roi)


def _rating(text, high_words, low_words) -> str:
    lower = as_text(text).lower()
    if any(word in lower for word in high_words):
        return "High"
    if any(word in lower for word in low_words):
        return "Low"
    return "Medium"


class BusinessCaseFormatter(BaseFormatter):
    document_type = "business_case"
    title = "Business Case"

    def sections(self):
        return [
            ("Executive Summary", self.executive_summary),
            ("Strategic Context", self.strategic_context),
            ("Reasons for the Project", self.reasons),
            ("Business Options", self.business_options),
            ("Expected Benefits", self.expected_benefits),
            ("Expected Dis-benefits", self.expected_disbenefits),
            ("Timescale", self.timescale),
            ("Costs", self.costs),
            ("Investment Appraisal", self.investment_appraisal),
            ("Major Risks", self.major_risks),
            ("Recommendation", self.recommendation),
        ]

    def cover_subtitle(self, data):
        return f"Recommended option: {data['recommendedOption']}"

    def _rated(self, level: str) -> str:
        return f"{self.indicator(level)} {level}".strip()

    def executive_summary(self, data):
        summary = data["executiveSummary"]
        if is_placeholder(summary):
            summary = (
                f"This business case sets out the justification for {self.metadata.project_name} at "
                f"{self.metadata.company_name}. The recommended option is {data['recommendedOption']} with a total "
                f"investment of {as_text(data['costs']['total'])} over {data['timescale']}."
            )
        risk_level = overall_risk_level(data["majorRisks"])
        appraisal = data["investmentAppraisal"]
        key_points = [
            ["Total Investment", data["costs"]["total"]],
            ["ROI", appraisal["roi"]],
            ["Payback Period", appraisal["paybackPeriod"]],
            ["Duration", data["timescale"]],
            ["Risk Level", self._rated(risk_level)],
        ]
        return [
            *paragraphs(summary),
            subsection("Key Points", table(key_points, headers=["Aspect", "Value"], class_="data-table key-metrics")),
            highlight_box(
                "Recommendation",
                f"Proceed with {data['recommendedOption']}. The business case demonstrates a clear value proposition at a {risk_level.lower()} overall risk level.",
                "success" if risk_level in ("Low", "Medium") else "warning",
            ),
        ]

    def strategic_context(self, data):
        return [subsection(title, paragraph(lead), bullet_list(items)) for title, lead, items in STRATEGIC_CONTEXT]

    def reasons(self, data):
        return paragraphs(data["reasons"])

    def business_options(self, data):
        options = data["businessOptions"]
        last = len(options) - 1
        scored = []
        for index, option in enumerate(options):
            feasibility = "Low" if index == 0 and last > 0 else "High" if index == last else "Medium"
            scored.append({
                "name": option["option"],
                "scores": {
                    "Cost": self._rated(_rating(option.get("costs"), ("high", "expensive"), ("low", "minimal"))),
                    "Benefit": self._rated(_rating(option.get("benefits"), ("high", "significant", "full"), ("low", "minimal", "none"))),
                    "Risk": self._rated(_rating(option.get("risks"), ("high",), ("low",))),
                    "Feasibility": self._rated(feasibility),
                },
            })
        return [
            table(options, columns=["option", "description", "costs", "benefits", "risks"], headers=["Option", "Description", "Costs", "Benefits", "Risks"]),
            subsection("Options Comparison", comparison_matrix(scored, OPTION_CRITERIA)),
            highlight_box("Recommended Option", data["recommendedOption"], "success"),
        ]

    def expected_benefits(self, data):
        benefits = data["expectedBenefits"]
        if not benefits:
            return paragraph("Expected benefits to be defined")
        measurable = [b for b in benefits if b.get("measurable")]
        other = [b["benefit"] for b in benefits if not b.get("measurable")]
        children = []
        if measurable:
            children.append(subsection(
                "Measurable Benefits",
                table(
                    measurable,
                    columns=["benefit", "measurement", "baseline", "target", "whenRealized"],
                    headers=["Benefit", "Measurement", "Baseline", "Target", "When Realized"],
                ),
            ))
            start = self.metadata.start_date or date.today().isoformat()
            tasks = [
                {"name": b["benefit"], "start": dates.calculate_milestone_date(start, 3 + index * 3, "iso"), "days": 90}
                for index, b in enumerate(measurable)
            ]
            children.append(self.chart(gantt_chart("Benefits Realization", [("Benefits", tasks)], start), "gantt"))
        if other:
            children.append(subsection("Other Benefits", bullet_list(other)))
        return children

    def expected_disbenefits(self, data):
        disbenefits = data["expectedDisbenefits"]
        if not disbenefits:
            return paragraph("No significant dis-benefits have been identified.")
        return table(disbenefits, columns=["disbenefit", "impact", "mitigation"], headers=["Dis-benefit", "Impact", "Mitigation"])

    def timescale(self, data):
        start = dates.parse_date(self.metadata.start_date)
        end = dates.parse_date(self.metadata.end_date)
        children = [subsection("Project Duration", paragraph(data["timescale"]))]
        if start is None:
            children.append(paragraph("Milestone dates will be confirmed once the project start date is agreed."))
            return children
        if end is None or end <= start:
            end = dates.add_months(start, 12)
        span = (end - start).days
        rows = [["Project Start", dates.long_date(start), "Approval & Funding"]]
        for name, share, dependency in CRITICAL_DATES:
            rows.append([name, dates.long_date(start + timedelta(days=round(span * share))), dependency])
        rows.append(["Project Close", dates.long_date(end), "Handover complete"])
        entries = [(period, label) for label, period in dates.generate_timeline_entries(start, end)]
        children.append(subsection("Key Milestones", self.chart(timeline_chart("Project Timeline", entries), "timeline")))
        children.append(subsection("Critical Dates", table(rows, headers=["Milestone", "Target Date", "Dependencies"])))
        return children

    def costs(self, data):
        costs = data["costs"]
        total = costs["total"]
        rows = [
            [Element("strong", label), costs.get(key), f"{cost_percentage(costs.get(key), total)}%", note]
            for key, label, note in COST_LINES
        ]
        rows.append([Element("strong", "Contingency"), f"{as_text(costs.get('contingency'))} of total", as_text(costs.get("contingency")), "Risk mitigation"])
        rows.append([Element("strong", "TOTAL"), Element("strong", as_text(total)), Element("strong", "100%"), "All inclusive"])
        slices = [(label.replace(" Costs", ""), parse_amount(costs.get(key)) or 0) for key, label, _ in COST_LINES]
        return [
            subsection("Cost Breakdown", table(rows, headers=["Category", "Amount", "% of Total", "Notes"], class_="data-table cost-table")),
            subsection("Cost Distribution", self.chart(pie_chart("Cost Distribution", slices), "pie")) if self.options.include_charts else "",
        ]

    def investment_appraisal(self, data):
        appraisal = data["investmentAppraisal"]
        metrics = [
            ["Return on Investment (ROI)", appraisal["roi"]],
            ["Payback Period", appraisal["paybackPeriod"]],
            ["Net Present Value (NPV)", appraisal.get("npv") or "Positive"],
            ["Internal Rate of Return (IRR)", appraisal.get("irr") or "15%"],
        ]
        best, worst = SENSITIVITY
        scenarios = [
            [best[0], adjust_roi(appraisal["roi"], best[1]), best[2], "Very Positive", best[3]],
            ["Expected Case", appraisal["roi"], appraisal["paybackPeriod"], "Positive", "✅ Proceed"],
            [worst[0], adjust_roi(appraisal["roi"], worst[1]), worst[2], "Marginal", worst[3]],
        ]
        flow = chain_flowchart([
            "Investment",
            as_text(data["costs"]["total"]),
            "Break-even",
            f"Payback {as_text(appraisal['paybackPeriod'])}",
            f"ROI {as_text(appraisal['roi'])}",
        ])
        return [
            subsection("Financial Metrics", table(metrics, headers=["Metric", "Value"])),
            subsection("Sensitivity Analysis", table(scenarios, headers=["Scenario", "ROI", "Payback", "NPV", "Decision"], class_="data-table sensitivity-table")),
            self.chart(flow, "flowchart", "Break-even analysis"),
        ]

    def major_risks(self, data):
        risks = data["majorRisks"]
        if not risks:
            return paragraph("Major risks to be defined")
        labelled = [{**risk, "id": f"R{index + 1}"} for index, risk in enumerate(risks)]
        return [
            self.risk_table(risks, name_key="risk"),
            subsection("Risk Matrix", heat_map(labelled)),
        ]

    def recommendation(self, data):
        appraisal = data["investmentAppraisal"]
        body = bullet_list([
            f"Strong financial returns with ROI of {as_text(appraisal['roi'])}",
            f"Acceptable payback period of {as_text(appraisal['paybackPeriod'])}",
            "Clear strategic alignment with organizational objectives",
            "Manageable risk profile with mitigation strategies in place",
        ])
        return [
            subsection("Recommended Action", paragraph("Based on the analysis presented in this business case:")),
            highlight_box(f"RECOMMENDATION: APPROVE {as_text(data['recommendedOption']).upper()}", body, "success"),
            subsection("Conditions for Approval", bullet_list(APPROVAL_CONDITIONS, ordered=True)),
            subsection("Next Steps", bullet_list(NEXT_STEPS, ordered=True)),
        ]
