"""Comparable projects analysis formatter."""
from typing import Any

from docgen.services.documents.formatters.base import BaseFormatter
from docgen.services.documents.html import Element, bullet_list, paragraph, paragraphs, placeholder, subsection, table
from docgen.services.documents.indicators import highlight_box
from docgen.services.documents.mermaid import bar_chart
from docgen.services.documents.toolkit import as_text, extract_array, format_number, is_number, is_placeholder

SELECTION_WEIGHTS = [
    ["Industry Relevance", "25%", "Same or similar industry sector"],
    ["Project Scale", "20%", "Comparable budget and scope"],
    ["Technical Similarity", "20%", "Similar technology stack and architecture"],
    ["Business Context", "15%", "Similar business objectives and constraints"],
    ["Timeline", "10%", "Recent projects (last 3 years)"],
    ["Data Availability", "10%", "Sufficient documentation and outcomes data"],
]
DATA_SOURCES = [
    "Public case studies and project reports",
    "Industry benchmarks and surveys",
    "Expert interviews and consultations",
    "Academic research and white papers",
]
MATRIX_ASPECTS = (("budget", "Budget", "TBD"), ("timeline", "Timeline", "TBD"), ("teamSize", "Team Size", "TBD"), ("outcome", "Outcome", "Target: Success"))


def similarity_score(value: Any) -> int | None:
    if is_number(value):
        return int(value)
    digits = "".join(ch for ch in as_text(value) if ch.isdigit())
    return int(digits) if digits else None


def similarity_class(value: Any) -> str:
    score = similarity_score(value) or 0
    if score >= 80:
        return "similarity-high"
    if score >= 60:
        return "similarity-medium"
    return "similarity-low"


def format_budget(value: Any) -> str:
    if value in (None, ""):
        return "N/A"
    if is_number(value):
        return f"${format_number(value)}"
    return as_text(value)


class ComparableProjectsFormatter(BaseFormatter):
    document_type = "comparable_projects"
    title = "Comparable Projects Analysis"
    styles = """
.similarity-badge { display: inline-block; padding: 2px 10px; border-radius: 12px; font-size: 0.85em; font-weight: 600; }
.similarity-high { background: #d1fae5; color: #065f46; }
.similarity-medium { background: #fef3c7; color: #92400e; }
.similarity-low { background: #fee2e2; color: #991b1b; }
.project-profile { border: 1px solid #e5e7eb; border-radius: 6px; padding: 12px 16px; margin-bottom: 16px; page-break-inside: avoid; }
.tech-tag { display: inline-block; background: #eef2ff; color: #3730a3; padding: 1px 8px; margin: 2px; border-radius: 4px; font-size: 0.85em; }
"""

    def sections(self):
        return [
            ("Executive Summary", self.executive_summary),
            ("Analysis Methodology", self.methodology),
            ("Selection Criteria", self.selection_criteria),
            ("Project Profiles", self.project_profiles),
            ("Comparison Matrix", self.comparison_matrix),
            ("Benchmark Data", self.benchmark_data),
            ("Key Findings", self.key_findings),
            ("Lessons Learned", self.lessons_learned),
            ("Recommendations", self.recommendations),
        ]

    def executive_summary(self, data):
        projects = data["projects"]
        children = [paragraph(
            f"This Comparable Projects Analysis examines {len(projects)} similar projects to identify patterns, "
            f"best practices, and lessons learned that can inform the {self.metadata.project_name} project."
        )]
        if is_placeholder(data["executiveSummary"]):
            children.append(highlight_box("Key Insights", bullet_list([
                f"Analysis of {len(projects)} comparable projects",
                "Identification of success patterns and risk factors",
                "Actionable recommendations based on lessons learned",
                "Best practices for implementation",
            ]), "info"))
        else:
            children.extend(paragraphs(data["executiveSummary"]))
        return children

    def methodology(self, data):
        return [
            *paragraphs(data["analysisMethodology"]),
            subsection("Data Collection", bullet_list(DATA_SOURCES)),
        ]

    def selection_criteria(self, data):
        return [
            bullet_list(data["selectionCriteria"]),
            subsection("Selection Weighting", table(SELECTION_WEIGHTS, headers=["Criterion", "Weight", "Description"], class_="data-table criteria-table")),
        ]

    def project_profiles(self, data):
        projects = data["projects"]
        if not projects:
            return placeholder("No comparable projects have been analyzed yet.")
        profiles = []
        for index, project in enumerate(projects, start=1):
            similarity = project.get("similarity")
            score = similarity_score(similarity)
            details = [
                Element("h3", f"{index}. {as_text(project['name'])}"),
                Element("span", f"Similarity Score: {score}%" if score is not None else "Similarity Score: N/A", class_=f"similarity-badge {similarity_class(similarity)}"),
            ]
            if project.get("description"):
                details.append(paragraph(project["description"]))
            details.append(table(
                [
                    [Element("strong", "Budget"), format_budget(project.get("budget")), Element("strong", "Timeline"), project.get("timeline")],
                    [Element("strong", "Team Size"), project.get("teamSize"), Element("strong", "Status"), project.get("status")],
                ],
                class_="project-info",
            ))
            technologies = extract_array(project.get("technologies"), ",")
            if technologies:
                details.append(Element("h4", "Technologies Used"))
                details.append(Element("div", *[Element("span", as_text(tech), class_="tech-tag") for tech in technologies]))
            if project.get("outcome") and project["outcome"] != "N/A":
                details.append(Element("h4", "Outcome"))
                details.append(paragraph(project["outcome"]))
            if project.get("lessonsLearned"):
                details.append(Element("h4", "Lessons Learned"))
                details.append(paragraph(project["lessonsLearned"]))
            profiles.append(Element("div", *details, class_="project-profile", id=as_text(project.get("id")).lower() or None))
        return profiles

    def comparison_matrix(self, data):
        projects = data["projects"]
        if not projects:
            return None
        header = Element(
            "tr",
            Element("th", "Aspect"),
            *[Element("th", as_text(project["name"])) for project in projects],
            Element("th", self.metadata.project_name),
        )
        rows = []
        for key, label, own in MATRIX_ASPECTS:
            values = [format_budget(project.get(key)) if key == "budget" else as_text(project.get(key)) or "N/A" for project in projects]
            rows.append(Element("tr", Element("td", Element("strong", label)), *[Element("td", value) for value in values], Element("td", own)))
        children = [Element("div", Element("table", Element("thead", header), Element("tbody", *rows), class_="data-table comparison-matrix"), class_="matrix-container")]
        scored = [(as_text(project.get("id")) or as_text(project["name"]), similarity_score(project.get("similarity"))) for project in projects]
        scored = [(label, score) for label, score in scored if score is not None]
        if scored:
            children.append(self.chart(
                bar_chart("Similarity Scores", [label for label, _ in scored], [score for _, score in scored], "Similarity %"),
                "xychart",
            ))
        return children

    def benchmark_data(self, data):
        return paragraphs(data["benchmarkData"])

    def key_findings(self, data):
        return bullet_list(data["keyFindings"])

    def lessons_learned(self, data):
        children = [bullet_list(data["lessonsLearned"])]
        per_project = [
            [project["name"], project["lessonsLearned"]]
            for project in data["projects"]
            if project.get("lessonsLearned")
        ]
        if per_project:
            children.append(subsection("Lessons by Project", table(per_project, headers=["Project", "Lesson"])))
        return children

    def recommendations(self, data):
        return [
            bullet_list(data["recommendations"], ordered=True),
            highlight_box(
                "Next Steps",
                f"Review these recommendations with the {self.metadata.project_name} project board and reflect accepted items in the project plan.",
                "success",
            ),
        ]
