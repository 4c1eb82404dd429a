"""Normalizer totality and idempotence across every document type."""

import json

import pytest

from docgen.services.documents.normalizers import NORMALIZERS, normalize
from docgen.services.documents.normalizers.base import DEFAULTED_KEY, default_texts, unwrap
from docgen.services.documents.normalizers.backlog import normalize_backlog
from docgen.services.documents.normalizers.business_case import normalize_business_case
from docgen.services.documents.normalizers.charter import DEFAULT_OBJECTIVES, normalize_charter
from docgen.services.documents.normalizers.kanban import normalize_kanban

LOOSE_INPUTS = [
    None,
    {},
    "Free text project description.\n- first point\n- second point",
    [1, "two", None],
    {"content": {"data": {}}},
    {"content": json.dumps({"projectName": "Wrapped"})},
    {"plan": {"document": {"unexpected": {"deeply": ["nested"]}}}},
    42,
]

DOCUMENT_TYPES = sorted(NORMALIZERS)


@pytest.mark.parametrize("document_type", DOCUMENT_TYPES)
@pytest.mark.parametrize("raw", LOOSE_INPUTS, ids=lambda raw: type(raw).__name__)
class TestNormalizerTotality:

    def test_returns_complete_structure(self, document_type, raw):
        result = normalize(document_type, raw)
        baseline = normalize(document_type, None)
        assert isinstance(result, dict)
        assert set(baseline) <= set(result)
        assert DEFAULTED_KEY in result

    def test_idempotent(self, document_type, raw):
        once = normalize(document_type, raw)
        twice = normalize(document_type, once)
        assert twice == once


class TestUnwrap:

    def test_peels_nested_envelopes(self):
        data, text = unwrap({"content": {"data": {"name": "x"}}})
        assert data == {"name": "x"}
        assert text == ""

    def test_keeps_sibling_keys(self):
        data, _ = unwrap({"content": {"title": "T"}, "version": "2"})
        assert data == {"title": "T", "version": "2"}

    def test_json_string_is_parsed(self):
        data, _ = unwrap('{"content": {"a": 1}}')
        assert data == {"a": 1}

    def test_plain_text_is_returned_as_text(self):
        data, text = unwrap({"plan": "Some narrative"})
        assert data == {}
        assert text == "Some narrative"


class TestTypeDefaults:

    def test_charter_without_objectives_gets_four_defaults(self):
        result = normalize_charter({"projectName": "Apollo"})
        assert result["businessObjectives"] == DEFAULT_OBJECTIVES
        assert "businessObjectives" in result[DEFAULTED_KEY]

    def test_charter_keeps_given_objectives(self):
        result = normalize_charter({"businessObjectives": "Cut costs\nGrow revenue"})
        assert result["businessObjectives"] == ["Cut costs", "Grow revenue"]

    def test_empty_backlog_gets_three_example_items(self):
        result = normalize_backlog({})
        assert [item["id"] for item in result["items"]] == ["US-001", "US-002", "US-003"]
        assert result["metrics"]["totalItems"] == 3

    def test_business_case_fills_missing_cost_lines(self):
        result = normalize_business_case({"costs": {"total": "$175,000", "development": "$100,000"}})
        assert result["costs"]["total"] == "$175,000"
        assert result["costs"]["development"] == "$100,000"
        assert "operational" in result["costs"]

    def test_kanban_columns_default_with_wip_limits(self):
        result = normalize_kanban({})
        limits = {column["name"]: column["wipLimit"] for column in result["columns"]}
        assert limits == {"Backlog": None, "To Do": 10, "In Progress": 5, "Review": 3, "Done": None}

    def test_unknown_type_passes_dicts_through(self):
        assert normalize("mystery", {"a": 1}) == {"a": 1}
        assert normalize("mystery", "text") == {}


class TestDefaultTexts:

    def test_collects_values_of_defaulted_fields(self):
        texts = default_texts(normalize_backlog({}))
        assert {"US-001", "US-002", "US-003"} <= texts

    def test_authored_values_excluded(self):
        data = {
            "summary": "Same words",
            "objectives": ["Same words", "Only in defaults"],
            DEFAULTED_KEY: ["objectives"],
        }
        assert default_texts(data) == {"Only in defaults"}

    def test_nested_paths(self):
        result = normalize_business_case({"costs": {"total": "$175,000", "development": "$100,000"}})
        texts = default_texts(result)
        assert "$50,000" in texts
        assert "$175,000" not in texts

    def test_rating_words_and_short_values_ignored(self):
        data = {"risks": [{"probability": "High", "impact": "Very High", "owner": "PM"}], DEFAULTED_KEY: ["risks"]}
        assert default_texts(data) == set()

    def test_case_variant_mirror_is_not_authored(self):
        data = {"expectedDisbenefits": ["Retraining"], "expectedDisBenefits": ["Retraining"], DEFAULTED_KEY: ["expectedDisbenefits"]}
        assert default_texts(data) == {"Retraining"}

    def test_nothing_defaulted(self):
        assert default_texts({"a": "b", DEFAULTED_KEY: []}) == set()
        assert default_texts(None) == set()
