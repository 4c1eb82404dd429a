"""Formatter output: section order, default-fill, failure isolation and the registry."""

import re

import pytest

from docgen.services.documents.formatters import (
    FORMATTERS,
    CharterFormatter,
    available_document_types,
    document_title,
    get_formatter,
    has_formatter,
)
from docgen.services.documents.formatters.base import heat_map
from docgen.services.documents.formatters.business_case import cost_percentage
from docgen.services.documents.formatters.communication_plan import engagement_strategy
from docgen.services.documents.formatters.kanban import wip_state
from docgen.services.documents.formatters.quality_management import metric_status
from docgen.services.documents.html import render
from docgen.services.documents.metadata import DocumentMetadata, FormatterOptions
from docgen.services.documents.normalizers.charter import DEFAULT_OBJECTIVES

METADATA = {"project_name": "Apollo", "company_name": "Acme Corp", "date": "1 January 2025"}


def section_titles(doc):
    return [section.title for section in doc.sections]


class TestRegistry:

    def test_twelve_document_types(self):
        assert len(FORMATTERS) == 12
        assert set(available_document_types()) >= {"charter", "business_case", "risk_register", "backlog", "kanban"}

    def test_lookup(self):
        assert has_formatter("pid")
        assert not has_formatter("memo")
        assert isinstance(get_formatter("charter"), CharterFormatter)

    def test_unknown_type_raises(self):
        with pytest.raises(KeyError):
            get_formatter("memo")

    def test_titles(self):
        assert document_title("pid") == "Project Initiation Document"
        assert document_title("lessons_learned") == "Lessons Learned"


@pytest.mark.parametrize("document_type", sorted(FORMATTERS))
class TestEveryFormatter:

    def test_empty_input_renders_every_section(self, document_type):
        doc = get_formatter(document_type).format({}, METADATA)
        assert doc.sections
        assert doc.sections[-1].title == "Version History"
        numbers = [section.number for section in doc.sections[:-1]]
        assert numbers == list(range(1, len(numbers) + 1))

    def test_html_fragment(self, document_type):
        html = get_formatter(document_type).generate_html(None, METADATA)
        assert "Apollo" in html
        assert 'class="document-section' in html
        assert "Table of Contents" in html


class TestCharter:

    def test_missing_objectives_get_four_placeholders(self):
        html = CharterFormatter().generate_html({"projectName": "Apollo", "scope": "Build the thing"}, METADATA)
        assert "Business Objectives" in html
        assert html.count('class="objective-item"') == 4
        for objective in DEFAULT_OBJECTIVES:
            assert objective in html

    def test_title_and_metadata(self):
        doc = CharterFormatter().format({}, METADATA)
        assert doc.title == "Apollo - Project Charter"
        assert doc.metadata.document_type == "charter"
        assert section_titles(doc)[:3] == ["Executive Summary", "Project Overview", "Business Objectives"]

    def test_builder_failure_becomes_placeholder_section(self, monkeypatch):
        def explode(self, data):
            raise RuntimeError("boom")

        monkeypatch.setattr(CharterFormatter, "scope", explode)
        doc = CharterFormatter().format({}, METADATA)
        scope = next(section for section in doc.sections if section.title == "Project Scope")
        assert "Project Scope to be defined" in render(scope)
        assert "Approvals" in section_titles(doc)

    def test_options_toggle_cover_and_history(self):
        options = FormatterOptions(include_cover=False, include_version_history=False, include_toc=False)
        doc = CharterFormatter().format({}, METADATA, options)
        assert "Version History" not in section_titles(doc)
        html = CharterFormatter().generate_html({}, METADATA, {"includeCover": False, "includeTOC": False})
        assert "cover-page" not in html
        assert "Table of Contents" not in html


class TestBusinessCase:

    def test_development_share_of_total(self):
        content = {"costs": {"total": "$175,000", "development": "$100,000"}}
        html = get_formatter("business_case").generate_html(content, METADATA)
        assert re.search(r"Development Costs</strong></td><td>\$100,000</td><td>57%</td>", html)

    def test_cost_percentage(self):
        assert cost_percentage("$100,000", "$175,000") == 57
        assert cost_percentage("TBD", "$175,000") == 0


class TestRiskRegister:

    def test_heat_map_places_risks(self):
        risks = [{"id": "R1", "probability": "High", "impact": "High"}, {"id": "R2", "probability": "Low", "impact": "Low"}]
        html = render(heat_map(risks))
        assert 'class="heat-cell heat-red">R1</td>' in html
        assert 'class="heat-cell heat-green">R2</td>' in html

    def test_scores_in_register(self):
        content = {"risks": [{"id": "R1", "description": "Vendor delay", "probability": "High", "impact": "High", "mitigation": "Dual source"}]}
        html = get_formatter("risk_register").generate_html(content, METADATA)
        assert "Vendor delay" in html
        assert "Critical" in html


class TestKanban:

    def test_wip_state(self):
        assert wip_state({"wipLimit": 2, "cards": [1, 2, 3]}) == "exceeded"
        assert wip_state({"wipLimit": 3, "cards": [1, 2, 3]}) == "reached"
        assert wip_state({"wipLimit": None, "cards": [1]}) is None

    def test_wip_warning_rendered(self):
        content = {"columns": [
            {"name": "In Progress", "wipLimit": 2, "cards": ["A", "B", "C"]},
            {"name": "Done", "cards": ["D"]},
        ]}
        html = get_formatter("kanban").generate_html(content, METADATA)
        assert "wip-limit-exceeded" in html
        assert "In Progress has 3 items (limit: 2)" in html


class TestHelpers:

    @pytest.mark.parametrize("current,target,status", [
        ("96%", "100%", "On Track"),
        ("85", "100", "At Risk"),
        ("50%", "100%", "Off Track"),
        ("n/a", "100%", "N/A"),
    ])
    def test_metric_status(self, current, target, status):
        assert metric_status(current, target) == status

    def test_engagement_strategy(self):
        assert engagement_strategy({"influence": "High", "interest": "High"})[0] == "Manage Closely"
        assert engagement_strategy({"influence": "Low", "interest": "Low"})[0] == "Monitor"


class TestMetadata:

    def test_create_fills_defaults(self):
        metadata = DocumentMetadata.create(project_name=None)
        assert metadata.project_name == "Project"
        assert metadata.version == "1.0"
        assert metadata.date

    def test_formatter_options_accept_camel_case(self):
        options = FormatterOptions.create({"includeCharts": False, "theme": "dark"})
        assert options.include_charts is False
        assert options.theme == "dark"


class TestDefaultContent:

    MARKED = '<span class="placeholder default-content">{}</span>'

    def test_default_objectives_are_marked(self):
        html = CharterFormatter().generate_html({}, METADATA)
        for objective in DEFAULT_OBJECTIVES:
            assert self.MARKED.format(objective) in html

    def test_authored_objectives_are_not_marked(self):
        html = CharterFormatter().generate_html({"businessObjectives": ["Cut churn by 10%"]}, METADATA)
        assert "<p>Cut churn by 10%</p>" in html
        assert self.MARKED.format(DEFAULT_OBJECTIVES[0]) not in html
        # Scope was not supplied, so it is still shown as example content
        assert self.MARKED.format("Core functionality") in html

    def test_default_costs_are_marked(self):
        html = get_formatter("business_case").generate_html({}, METADATA)
        assert f"<td>{self.MARKED.format('$100,000')}</td>" in html
        assert f"<td>{self.MARKED.format('$50,000')}</td>" in html

    def test_authored_costs_are_not_marked(self):
        content = {"costs": {"total": "$175,000", "development": "$100,000"}}
        html = get_formatter("business_case").generate_html(content, METADATA)
        assert "<td>$100,000</td>" in html
        assert self.MARKED.format("$175,000") not in html
        assert self.MARKED.format("$50,000") in html

    def test_diagram_sources_untouched(self):
        html = get_formatter("business_case").generate_html({}, METADATA)
        for source in re.findall(r'<pre class="mermaid">(.*?)</pre>', html, re.DOTALL):
            assert "<span" not in source
