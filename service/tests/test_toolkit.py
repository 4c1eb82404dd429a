"""Tests for the value helpers, date calculators and risk scoring."""

import pytest

from docgen.services.documents import dates
from docgen.services.documents.risk import overall_risk_level, rate_risk, rate_score, risk_level
from docgen.services.documents.toolkit import (
    as_text,
    clamp_percentage,
    escape_html,
    extract_array,
    extract_text,
    extract_value,
    format_number,
    format_percentage,
    generate_id,
    is_placeholder,
    parse_amount,
    truncate,
)


class TestEscapeHtml:

    def test_escapes_all_special_characters(self):
        assert escape_html("<a href='x'>\"&\"</a>") == (
            "&lt;a href=&#x27;x&#x27;&gt;&quot;&amp;&quot;&lt;&#x2F;a&gt;"
        )

    def test_none_is_empty(self):
        assert escape_html(None) == ""

    def test_numbers_are_stringified(self):
        assert escape_html(42) == "42"


class TestExtractArray:

    def test_none_is_empty(self):
        assert extract_array(None) == []

    def test_string_split_on_newlines(self):
        assert extract_array("a\nb\n\nc") == ["a", "b", "c"]

    def test_custom_delimiter(self):
        assert extract_array("a, b ,c", delimiter=",") == ["a", "b", "c"]

    def test_wrapped_items(self):
        assert extract_array({"items": [1, 2]}) == [1, 2]

    def test_plain_dict_becomes_single_element(self):
        assert extract_array({"x": 1}) == [{"x": 1}]

    def test_list_drops_none(self):
        assert extract_array([1, None, 2]) == [1, 2]

    def test_scalar(self):
        assert extract_array(7) == [7]


class TestExtractValue:

    def test_first_defined_candidate_wins(self):
        data = {"b": 2, "c": 3}
        assert extract_value(data, "a", "b", "c") == 2

    def test_dotted_path(self):
        data = {"projectDefinition": {"background": "Why"}}
        assert extract_value(data, "projectDefinition.background", "background") == "Why"

    def test_list_index_in_path(self):
        assert extract_value({"items": [{"name": "x"}]}, "items.0.name") == "x"

    def test_missing_returns_none(self):
        assert extract_value({}, "a.b") is None

    def test_extract_text_skips_blank_and_structures(self):
        data = {"a": "  ", "b": {"x": 1}, "c": "value"}
        assert extract_text(data, "a", "b", "c") == "value"
        assert extract_text({}, "a", default="TBD") == "TBD"


class TestNumbers:

    @pytest.mark.parametrize("value,expected", [(150, 100.0), (-5, 0.0), ("57%", 57.0), ("abc", 0.0), (None, 0.0)])
    def test_clamp_percentage(self, value, expected):
        assert clamp_percentage(value) == expected

    def test_format_percentage(self):
        assert format_percentage(57) == "57%"

    def test_format_number(self):
        assert format_number(1234567) == "1,234,567"
        assert format_number(3.14159) == "3.14"

    def test_parse_amount(self):
        assert parse_amount("$1.2M") == 1_200_000
        assert parse_amount("£500,000") == 500_000
        assert parse_amount("no money") is None


class TestText:

    def test_generate_id(self):
        assert generate_id("1. Executive Summary!") == "1-executive-summary"
        assert generate_id("") == "section"

    def test_truncate_adds_ellipsis(self):
        assert truncate("abcdef", 3) == "abc..."
        assert truncate("abc", 3) == "abc"

    def test_as_text_for_records(self):
        assert as_text({"name": "Alice", "role": "PM"}) == "Alice"
        assert as_text([1, "b", None]) == "1, b"
        assert as_text(True) == "Yes"

    @pytest.mark.parametrize("value", ["TBD", "Objective to be defined", "[EXECUTIVE]", "n/a"])
    def test_placeholders(self, value):
        assert is_placeholder(value)

    def test_real_text_is_not_placeholder(self):
        assert not is_placeholder("Deliver the new billing platform")


class TestDates:

    def test_quarter_of_missing_date(self):
        assert dates.calculate_quarter_from_date(None) == "TBD"

    def test_quarter_of_date(self):
        assert dates.calculate_quarter_from_date("2024-05-10") == "Q2 2024"

    def test_milestone_full_date(self):
        assert dates.calculate_milestone_date("2024-01-01", 3, "full") == "1 April 2024"

    def test_milestone_month_end_clamps(self):
        assert dates.calculate_milestone_date("2024-01-31", 1, "iso") == "2024-02-29"

    def test_milestone_without_start(self):
        assert dates.calculate_milestone_date(None, 3) == "TBD"

    def test_milestone_with_unreadable_offset(self):
        assert dates.calculate_milestone_date("2025-01-01", "three") == "TBD"
        assert dates.calculate_milestone_date("2025-01-01", None, "quarter") == "TBD"

    def test_phase_timeline_degrades_without_dates(self):
        phases = dates.calculate_phase_timeline(None, None)
        assert [p.start_date for p in phases][:2] == ["Phase 1 Start", "Phase 2 Start"]
        assert all(p.quarter == "TBD" for p in phases)

    def test_phase_timeline_splits_span(self):
        phases = dates.calculate_phase_timeline("2024-01-01", "2024-12-31")
        assert len(phases) == 4
        assert phases[0].start_date == "2024-01-01"
        assert phases[-1].end_date == "2024-12-31"

    def test_sprint_dates(self):
        assert dates.calculate_sprint_dates("2024-01-01", 2) == {"start": "2024-01-15", "end": "2024-01-28"}

    def test_project_duration(self):
        duration = dates.calculate_project_duration("2024-01-01", "2024-12-31")
        assert duration.months == 12
        assert dates.calculate_project_duration("nope", None).text == "Duration not specified"

    def test_budget_thresholds(self):
        thresholds = dates.calculate_budget_thresholds("$1,000,000")
        assert thresholds.very_low == "<$50,000 or <5% budget"
        assert dates.calculate_budget_thresholds(None).medium == "10-25% of budget"

    def test_delay_thresholds(self):
        thresholds = dates.calculate_delay_thresholds("12 months")
        assert thresholds.high == "3-6 months delay"
        assert dates.calculate_delay_thresholds("soon").very_high == ">6 months delay"


class TestRisk:

    def test_high_high_is_critical(self):
        rating = rate_risk("High", "High")
        assert rating.score == 16
        assert rating.band == "Critical"

    def test_low_low_is_low(self):
        rating = rate_risk("Low", "Low")
        assert rating.score == 4
        assert rating.band == "Low"

    @pytest.mark.parametrize("score,band", [(1, "Low"), (5, "Medium"), (9, "Medium"), (10, "High"), (15, "High"), (25, "Critical")])
    def test_band_boundaries(self, score, band):
        assert rate_score(score).band == band

    def test_levels_accept_numbers_and_names(self):
        assert risk_level(5) == 5
        assert risk_level("4") == 4
        assert risk_level("Almost Certain") == 5
        assert risk_level("whatever") == 3

    def test_overall_is_worst_band(self):
        risks = [{"probability": "Low", "impact": "Low"}, {"probability": "High", "impact": "Very High"}]
        assert overall_risk_level(risks) == "Critical"
        assert overall_risk_level([]) == "Low"
