"""Tests for the HTML component tree, diagram descriptions and indicators."""

from markupsafe import Markup

from docgen.services.documents.html import (
    Element,
    Section,
    bullet_list,
    cell,
    definition_list,
    format_content,
    mark_defaults,
    paragraph,
    render,
    table,
)
from docgen.services.documents.indicators import visual_indicator
from docgen.services.documents.mermaid import (
    bar_chart,
    chain_flowchart,
    contains_diagrams,
    gantt_chart,
    mermaid_block,
    pie_chart,
    sanitize_label,
)


class TestEscaping:

    def test_text_children_are_escaped(self):
        html = render(Element("p", "<script>alert('x')</script>"))
        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_markup_passes_through(self):
        assert render(Element("div", Markup("<b>ok</b>"))) == "<div><b>ok</b></div>"

    def test_attribute_values_escaped(self):
        html = Element("a", "x", title='"quoted"').render()
        assert 'title="&quot;quoted&quot;"' in html

    def test_false_and_none_attributes_skipped(self):
        assert Element("input", disabled=False, value=None).render() == "<input></input>"


class TestComponents:

    def test_empty_table_renders_nothing(self):
        assert table([]) == ""

    def test_dict_rows_use_keys_as_headers(self):
        html = render(table([{"task_name": "Build", "owner": "Ann"}]))
        assert "<th>Task Name</th>" in html
        assert "<td>Build</td>" in html

    def test_empty_list_renders_nothing(self):
        assert bullet_list([None, ""]) == ""

    def test_placeholder_paragraph_is_flagged(self):
        html = render(paragraph("Background to be defined"))
        assert 'class="placeholder"' in html

    def test_cell_formats_values(self):
        assert cell(None) == "-"
        assert cell(True) == "✅"
        assert cell(1500) == "1,500"

    def test_definition_list_labels(self):
        html = render(definition_list({"startDate": "2024-01-01"}))
        assert "<dt>Start Date</dt>" in html

    def test_format_content_picks_shape(self):
        assert "<table" in render(format_content([{"a": 1}]))
        assert "<ul" in render(format_content(["a", "b"]))
        assert "<dl" in render(format_content({"a": 1}))

    def test_section_numbering_and_id(self):
        section = Section("Executive Summary", [paragraph("Hello")])
        section.number = 2
        html = section.render()
        assert 'id="executive-summary"' in html
        assert "<h2>2. Executive Summary</h2>" in html
        assert 'class="document-section"' in html


class TestMermaid:

    def test_block_wraps_definition(self):
        html = render(mermaid_block("pie title X", "pie", "Caption"))
        assert contains_diagrams(html)
        assert 'data-chart-type="pie"' in html
        assert "Caption" in html

    def test_empty_definition_renders_nothing(self):
        assert mermaid_block("", "pie") == ""

    def test_sanitize_label_strips_statement_terminators(self):
        assert sanitize_label('Phase: "one"; [draft]') == "Phase one draft"
        assert sanitize_label(None) == "Untitled"

    def test_pie_skips_zero_slices(self):
        chart = pie_chart("Status", [("Done", 3), ("Blocked", 0)])
        assert '"Done" : 3' in chart
        assert "Blocked" not in chart
        assert pie_chart("Status", [("Done", 0)]) == ""

    def test_gantt_chains_tasks(self):
        chart = gantt_chart("Plan", [("Phase 1", [{"name": "Design", "days": 10}, {"name": "Build"}])], "2024-01-01")
        assert "Design :t1, 2024-01-01, 10d" in chart
        assert "Build :t2, after t1, 30d" in chart

    def test_chain_flowchart(self):
        chart = chain_flowchart(["Plan", "Do"])
        assert "n0 --> n1" in chart

    def test_bar_chart(self):
        chart = bar_chart("Throughput", ["W1", "W2"], [4, 6])
        assert "bar [4, 6]" in chart


class TestIndicators:

    def test_known_statuses(self):
        assert visual_indicator("Critical") == "🔴"
        assert visual_indicator("on track") == "🟢"

    def test_unknown_status(self):
        assert visual_indicator("mystery") == "⚪"

    def test_with_label(self):
        assert visual_indicator("Low", with_label=True) == "🟢 Low"


class TestMarkDefaults:

    def test_matching_text_wrapped(self):
        section = Section("Scope", [bullet_list(["Core functionality", "Real item"])])
        html = mark_defaults(section, {"Core functionality"}).render()
        assert '<li><span class="placeholder default-content">Core functionality</span></li>' in html
        assert "<li>Real item</li>" in html

    def test_headers_diagrams_and_placeholders_untouched(self):
        node = Element(
            "div",
            table([["Core functionality"]], headers=["Core functionality"]),
            Element("pre", "Core functionality", class_="mermaid"),
            Element("p", "Core functionality", class_="placeholder"),
        )
        html = mark_defaults(node, {"Core functionality"}).render()
        assert "<th>Core functionality</th>" in html
        assert '<pre class="mermaid">Core functionality</pre>' in html
        assert '<p class="placeholder">Core functionality</p>' in html
        assert html.count("default-content") == 1

    def test_markup_untouched(self):
        node = Element("div", Markup("Core functionality"))
        assert mark_defaults(node, {"Core functionality"}).render() == "<div>Core functionality</div>"
