"""Tests for script/carrier document loading and the script schema."""

import json

import pytest

from src.schemas.script_schema import (
    AgentLine,
    InputField,
    InputKind,
    ScriptDocument,
)
from src.tools.documents import (
    ScriptDocumentError,
    find_duplicate_field_ids,
    find_unreachable_branches,
    iter_input_fields,
    load_carriers,
    load_script_document,
    parse_script_document,
)


class TestScriptSchema:
    def test_discriminated_nodes(self):
        doc = parse_script_document({"sections": [{
            "id": "s", "title": "S", "order": 1,
            "content": [
                {"type": "agent_line", "text": "Hello"},
                {"type": "input_field", "id": "age", "input_type": "number"},
            ],
        }]})
        first, second = doc.sections[0].content
        assert isinstance(first, AgentLine)
        assert isinstance(second, InputField)
        assert second.input_type == InputKind.NUMBER
        assert second.required is False

    def test_nested_branches_parse(self):
        doc = parse_script_document({"sections": [{
            "id": "s", "title": "S", "order": 1,
            "content": [{
                "type": "input_field", "id": "diabetes", "options": ["Yes", "No"],
                "branching": {"Yes": [
                    {"type": "input_field", "id": "diabetes_treatment"},
                ]},
            }],
        }]})
        field = doc.sections[0].content[0]
        assert isinstance(field.branching["Yes"][0], InputField)

    def test_unknown_node_type_rejected(self):
        with pytest.raises(ScriptDocumentError):
            parse_script_document({"sections": [{
                "id": "s", "title": "S", "order": 1,
                "content": [{"type": "video", "text": "nope"}],
            }]})

    def test_sections_ordered_by_order_key(self, two_section_document):
        ids = [s.id for s in two_section_document.ordered_sections()]
        assert ids == ["introduction", "medical_questions"]

    def test_get_section(self, two_section_document):
        assert two_section_document.get_section("introduction").order == 1
        assert two_section_document.get_section("missing") is None


class TestDocumentChecks:
    def test_iter_input_fields_includes_branches(self, medical_section):
        ids = [f.id for f in iter_input_fields(medical_section.content)]
        assert ids == [
            "tobacco_use", "diabetes", "diabetes_treatment", "diabetes_complications",
        ]

    def test_duplicate_ids_reported(self, medical_section):
        doc = ScriptDocument(sections=[medical_section, medical_section])
        assert "tobacco_use" in find_duplicate_field_ids(doc)

    def test_unreachable_branch_reported(self):
        doc = parse_script_document({"sections": [{
            "id": "s", "title": "S", "order": 1,
            "content": [{
                "type": "input_field", "id": "smoker", "options": ["Yes", "No"],
                "branching": {"Maybe": [{"type": "agent_line", "text": "?"}]},
            }],
        }]})
        assert find_unreachable_branches(doc) == [("smoker", "Maybe")]

    def test_duplicates_logged_not_raised(self, caplog):
        section = {
            "id": "s", "title": "S", "order": 1,
            "content": [
                {"type": "input_field", "id": "age"},
                {"type": "input_field", "id": "age"},
            ],
        }
        doc = parse_script_document({"sections": [section]})
        assert len(doc.sections) == 1
        assert "declared more than once" in caplog.text


class TestLoaders:
    def test_missing_file(self, tmp_path):
        with pytest.raises(ScriptDocumentError, match="not found"):
            load_script_document(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ScriptDocumentError, match="Invalid JSON"):
            load_script_document(path)

    def test_invalid_carrier_document(self, tmp_path):
        path = tmp_path / "carriers.json"
        path.write_text(json.dumps({"carriers": [{"name": "No id"}]}), encoding="utf-8")
        with pytest.raises(ScriptDocumentError, match="Invalid carrier document"):
            load_carriers(path)

    def test_carrier_aliases(self, tmp_path):
        path = tmp_path / "carriers.json"
        path.write_text(json.dumps({"carriers": [{
            "id": "x", "name": "X Life", "ratingAgency": "AM Best", "yearsInBusiness": 40,
        }]}), encoding="utf-8")
        carrier = load_carriers(path)[0]
        assert carrier.rating_agency == "AM Best"
        assert carrier.years_in_business == 40
        assert carrier.coverage_types.immediate is False


class TestBundledData:
    def test_bundled_script_is_clean(self, bundled_document):
        assert find_duplicate_field_ids(bundled_document) == []
        assert find_unreachable_branches(bundled_document) == []

    def test_bundled_script_has_medical_section(self, bundled_document):
        assert bundled_document.get_section("medical_questions") is not None

    def test_bundled_carriers(self, bundled_carriers):
        names = {c.name for c in bundled_carriers}
        assert "Mutual of Omaha" in names
        assert any(c.coverage_types.graded for c in bundled_carriers)
