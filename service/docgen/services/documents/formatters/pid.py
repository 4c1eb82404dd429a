"""PRINCE2 Project Initiation Document formatter."""
from docgen.services.documents.formatters.base import BaseFormatter
from docgen.services.documents.html import (
    Element,
    bullet_list,
    definition_list,
    format_content,
    paragraph,
    paragraphs,
    placeholder,
    subsection,
    table,
)
from docgen.services.documents.mermaid import flowchart, gantt_chart, timeline_chart
from docgen.services.documents.toolkit import as_text, format_header, is_placeholder

# (block, [(sub-field, heading)]) for the sections rendered field by field
FIELD_SECTIONS = {
    "qualityManagementApproach": [
        ("qualityMethod", "Quality Method"),
        ("qualityStandards", "Quality Standards"),
        ("qualityCriteria", "Quality Criteria"),
        ("qualityResponsibilities", "Quality Responsibilities"),
        ("qualityRecords", "Quality Records"),
    ],
    "configurationManagementApproach": [
        ("purpose", "Purpose"),
        ("procedure", "Procedure"),
        ("toolsAndTechniques", "Tools and Techniques"),
        ("issueAndChangeControl", "Issue and Change Control"),
    ],
    "riskManagementApproach": [
        ("procedure", "Risk Management Procedure"),
        ("riskCategories", "Risk Categories"),
        ("riskTolerances", "Risk Tolerances"),
        ("toolsAndTechniques", "Tools and Techniques"),
        ("timingOfRiskManagementActivities", "Timing of Risk Management Activities"),
        ("reporting", "Reporting"),
        ("rolesAndResponsibilities", "Roles and Responsibilities"),
        ("riskRegisterFormat", "Risk Register Format"),
    ],
    "communicationManagementApproach": [
        ("procedure", "Communication Procedure"),
        ("methods", "Communication Methods"),
        ("frequency", "Communication Frequency"),
        ("stakeholderAnalysis", "Stakeholder Analysis"),
        ("toolsAndTechniques", "Tools and Techniques"),
        ("reporting", "Reporting"),
        ("rolesAndResponsibilities", "Roles and Responsibilities"),
    ],
    "projectControls": [
        ("stages", "Control Stages"),
        ("tolerances", "Tolerances"),
        ("reportingArrangements", "Reporting Arrangements"),
    ],
    "tailoring": [
        ("approach", "Tailoring Approach"),
        ("justification", "Tailoring Justification"),
    ],
}
DEFINITION_FIELDS = [
    ("objectives", "Objectives"),
    ("deliverables", "Deliverables"),
    ("constraints", "Constraints"),
    ("assumptions", "Assumptions"),
    ("dependencies", "Dependencies"),
    ("interfaces", "Interfaces"),
    ("desiredOutcomes", "Desired Outcomes"),
]
BOARD_LABELS = {"executive": "Executive", "seniorUser": "Senior User", "seniorSupplier": "Senior Supplier"}


def _name(value) -> str:
    if isinstance(value, dict):
        return as_text(value.get("name") or value.get("title") or value)
    return as_text(value)


def _field(value):
    if value in (None, "", [], {}):
        return placeholder()
    if isinstance(value, dict):
        return definition_list(value)
    return format_content(value)


class PIDFormatter(BaseFormatter):
    document_type = "pid"
    title = "Project Initiation Document"

    def sections(self):
        return [
            ("Executive Summary", self.executive_summary),
            ("Project Background", self.project_background),
            ("Project Definition", self.project_definition),
            ("Business Case", self.business_case),
            ("Organization Structure", self.organization_structure),
            ("Quality Management Approach", self._fields("qualityManagementApproach")),
            ("Configuration Management Approach", self._fields("configurationManagementApproach")),
            ("Risk Management Approach", self._fields("riskManagementApproach")),
            ("Communication Management Approach", self._fields("communicationManagementApproach")),
            ("Project Plan", self.project_plan),
            ("Project Controls", self._fields("projectControls")),
            ("Tailoring", self._fields("tailoring")),
        ]

    def cover_subtitle(self, data):
        return "PRINCE2 Project Initiation Document"

    def _fields(self, block_name):
        def build(data):
            block = data[block_name]
            return [subsection(heading, _field(block.get(key))) for key, heading in FIELD_SECTIONS[block_name]]

        return build

    def executive_summary(self, data):
        summary = data["executiveSummary"]
        if not is_placeholder(summary):
            return paragraphs(summary)
        definition = data["projectDefinition"]
        objectives = [_name(o) for o in definition["objectives"]][:2]
        deliverables = [_name(d) for d in definition["deliverables"]][:2]
        if not objectives and not deliverables:
            return paragraph(f"This document outlines the project initiation details for {self.metadata.project_name}.")
        text = f"The {self.metadata.project_name} project aims to deliver key business value through strategic initiatives. "
        if objectives:
            text += f"Key objectives include {' and '.join(objectives)}. "
        if deliverables:
            text += f"Major deliverables encompass {' and '.join(deliverables)}."
        return paragraph(text.strip())

    def project_background(self, data):
        return paragraphs(data["projectBackground"])

    def project_definition(self, data):
        definition = data["projectDefinition"]
        scope = definition["scope"]
        children = [subsection("Objectives", _field(definition["objectives"]))]
        children.append(subsection(
            "Scope",
            Element("h4", "In Scope"),
            bullet_list(scope["inScope"]) or placeholder(),
            Element("h4", "Out of Scope"),
            bullet_list(scope["outOfScope"]) or placeholder(),
        ))
        children.extend(subsection(heading, _field(definition[key])) for key, heading in DEFINITION_FIELDS[1:])
        return children

    def business_case(self, data):
        case = data["businessCase"]
        children = [subsection("Reasons for the Project", _field(case["reasons"]))]
        options = case["businessOptions"]
        if options and all(isinstance(option, dict) for option in options):
            children.append(subsection("Business Options", table(options)))
        else:
            children.append(subsection("Business Options", _field(options)))
        children.append(subsection("Expected Benefits", _field(case["expectedBenefits"])))
        if case["expectedDisbenefits"]:
            children.append(subsection("Expected Dis-benefits", _field(case["expectedDisbenefits"])))
        children.append(subsection("Timescale", _field(case["timescale"])))
        children.append(subsection("Costs", _field(case["costs"])))
        children.append(subsection("Investment Appraisal", _field(case["investmentAppraisal"])))
        children.append(subsection("Major Risks", _field(case["majorRisks"])))
        return children

    def organization_structure(self, data):
        org = data["organizationStructure"]
        board = org["projectBoard"]
        if isinstance(board, dict):
            board_body = table(
                [[BOARD_LABELS.get(key, format_header(key)), value] for key, value in board.items()],
                headers=["Role", "Name"],
            )
        else:
            board_body = _field(board)

        children = [subsection("Project Board", board_body), subsection("Project Manager", _field(org["projectManager"]))]

        managers = [_name(manager) for manager in org["teamManagers"]]
        if managers:
            nodes = [("PB", "Project Board"), ("PM", "Project Manager")] + [(f"TM{i}", name) for i, name in enumerate(managers)]
            edges = [("PB", "PM")] + [("PM", f"TM{i}") for i in range(len(managers))]
            rows = []
            for manager in managers:
                name, _, role = manager.partition(" - ")
                role = role or "Team Manager"
                rows.append([Element("strong", role), name, f"Responsible for {role.lower()} activities and deliverables"])
            children.append(subsection(
                "Team Structure",
                self.chart(flowchart(nodes, edges), "flowchart"),
                table(rows, headers=["Role", "Name", "Responsibilities"]),
            ))
        else:
            children.append(subsection("Team Structure", placeholder("Team managers to be appointed")))

        children.append(subsection("Project Assurance", _field(org["projectAssurance"])))
        children.append(subsection("Project Support", _field(org["projectSupport"])))
        return children

    def project_plan(self, data):
        plan = data["projectPlan"]
        children = []
        stages = plan["stages"]
        if stages:
            entries = [
                (as_text(stage.get("startDate")) if isinstance(stage, dict) and stage.get("startDate") else f"Month {index + 1}", _name(stage))
                for index, stage in enumerate(stages)
            ]
            rows = []
            for index, stage in enumerate(stages, start=1):
                stage = stage if isinstance(stage, dict) else {"name": as_text(stage)}
                rows.append([
                    Element("strong", f"Stage {index}: {_name(stage)}"),
                    stage.get("startDate") or "TBD",
                    stage.get("endDate") or "TBD",
                    bullet_list(stage.get("objectives") or []) or "To be defined",
                    bullet_list(stage.get("deliverables") or []) or "To be defined",
                ])
            children.append(subsection(
                "Project Stages",
                self.chart(timeline_chart("Project Timeline", entries), "timeline"),
                table(rows, headers=["Stage", "Start Date", "End Date", "Objectives", "Deliverables"]),
            ))
        else:
            children.append(subsection("Project Stages", placeholder("Project stages to be defined")))

        milestones = plan["milestones"]
        if milestones:
            records = [m if isinstance(m, dict) else {"name": as_text(m)} for m in milestones]
            tasks = [{"name": _name(m), "start": m.get("date"), "status": "milestone"} for m in records]
            children.append(subsection(
                "Milestones",
                self.chart(gantt_chart("Project Milestones", [("Milestones", tasks)], self.metadata.start_date), "gantt"),
                table([[_name(m), m.get("date"), m.get("criteria")] for m in records], headers=["Milestone", "Date", "Criteria"]),
            ))
        children.append(subsection("Schedule", _field(plan["schedule"])))
        if plan["dependencies"]:
            children.append(subsection("Dependencies", _field(plan["dependencies"])))
        if plan["resources"]:
            children.append(subsection("Resources", _field(plan["resources"])))
        if plan["budget"]:
            children.append(subsection("Budget", _field(plan["budget"])))
        return children
