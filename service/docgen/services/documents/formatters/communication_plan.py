"""Communication management plan formatter."""
from docgen.services.documents.formatters.base import BaseFormatter
from docgen.services.documents.html import Element, bullet_list, paragraph, paragraphs, subsection, table
from docgen.services.documents.indicators import highlight_box
from docgen.services.documents.mermaid import quadrant_chart
from docgen.services.documents.risk import risk_level
from docgen.services.documents.toolkit import as_text

ENGAGEMENT = {
    (True, True): ("Manage Closely", "Weekly"),
    (True, False): ("Keep Satisfied", "Monthly"),
    (False, True): ("Keep Informed", "Bi-weekly"),
    (False, False): ("Monitor", "Quarterly"),
}


def engagement_strategy(stakeholder: dict) -> tuple:
    """(strategy, frequency) from the influence/interest grid position."""
    influence = risk_level(stakeholder.get("influence")) >= 4
    interest = risk_level(stakeholder.get("interest")) >= 4
    return ENGAGEMENT[(influence, interest)]


class CommunicationPlanFormatter(BaseFormatter):
    document_type = "communication_plan"
    title = "Communication Management Plan"

    def sections(self):
        return [
            ("Executive Summary", self.executive_summary),
            ("Communication Objectives", self.objectives),
            ("Stakeholder Analysis", self.stakeholders),
            ("Communication Methods", self.methods),
            ("Communication Schedule", self.schedule),
            ("RACI Matrix", self.raci),
            ("Key Messages", self.key_messages),
            ("Escalation Procedures", self.escalation),
            ("Feedback Mechanisms", self.feedback),
            ("Communication Risks", self.risks),
            ("Success Metrics", self.metrics),
        ]

    def executive_summary(self, data):
        return paragraphs(data["executiveSummary"])

    def objectives(self, data):
        return bullet_list(data["objectives"], ordered=True)

    def stakeholders(self, data):
        stakeholders = data["stakeholders"]
        rows = []
        points = []
        for stakeholder in stakeholders:
            strategy, frequency = engagement_strategy(stakeholder)
            rows.append([
                Element("strong", as_text(stakeholder["name"])),
                stakeholder.get("role"),
                stakeholder.get("interest"),
                stakeholder.get("influence"),
                stakeholder.get("strategy") or strategy,
                stakeholder.get("frequency") or frequency,
                stakeholder.get("informationNeeds"),
            ])
            points.append((
                as_text(stakeholder["name"]),
                risk_level(stakeholder.get("interest")) / 5,
                risk_level(stakeholder.get("influence")) / 5,
            ))
        grid = quadrant_chart(
            "Stakeholder Engagement",
            ("Low Interest", "High Interest"),
            ("Low Influence", "High Influence"),
            ("Manage Closely", "Keep Satisfied", "Monitor", "Keep Informed"),
            points,
        )
        return [
            subsection(
                "Stakeholder Matrix",
                table(rows, headers=["Stakeholder", "Role", "Interest", "Influence", "Strategy", "Frequency", "Information Needs"]),
            ),
            subsection("Stakeholder Engagement Strategy", self.chart(grid, "quadrantChart")) if self.options.include_charts else "",
        ]

    def methods(self, data):
        return table(data["methods"], columns=["type", "description", "useCase"], headers=["Method", "Description", "Use Case"])

    def schedule(self, data):
        return table(
            data["schedule"],
            columns=["communication", "audience", "frequency", "channel", "owner"],
            headers=["Communication", "Audience", "Frequency", "Channel", "Owner"],
            class_="data-table communication-table",
        )

    def raci(self, data):
        return [
            table(
                data["raci"],
                columns=["activity", "responsible", "accountable", "consulted", "informed"],
                headers=["Activity", "Responsible", "Accountable", "Consulted", "Informed"],
                class_="data-table raci-table",
            ),
            paragraph("R = Responsible, A = Accountable, C = Consulted, I = Informed"),
        ]

    def key_messages(self, data):
        if not data["keyMessages"]:
            return None
        return Element("div", *[highlight_box(f"Message {i}", as_text(message), "info") for i, message in enumerate(data["keyMessages"], start=1)])

    def escalation(self, data):
        return table(data["escalation"], columns=["level", "trigger", "contact"], headers=["Level", "Trigger", "Escalate To"])

    def feedback(self, data):
        if not data["feedbackMechanisms"]:
            return None
        return bullet_list(data["feedbackMechanisms"])

    def risks(self, data):
        if not data["risks"]:
            return paragraph("No communication-specific risks have been identified.")
        return self.risk_table(data["risks"], name_key="risk")

    def metrics(self, data):
        return table(data["metrics"], columns=["metric", "target", "measurement"], headers=["Metric", "Target", "Measurement"])
