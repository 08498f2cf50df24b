"""Tests for section rendering and branch evaluation."""

import pytest

from src.conversation.renderer import is_section_complete, match_branch, render_section
from src.schemas.script_schema import InputField, NodeType

from tests.conftest import make_context, make_section


def _branch_ids(result, parent):
    return {i.field_id for i in result.items if i.parent_field == parent and i.field_id}


class TestBasicRendering:
    def test_items_in_document_order(self, medical_section):
        result = render_section(medical_section, {})
        kinds = [i.kind for i in result.items]
        assert kinds == [NodeType.INSTRUCTION, NodeType.INPUT_FIELD, NodeType.INPUT_FIELD]
        assert result.visible_field_ids == ["tobacco_use", "diabetes"]

    def test_required_incomplete_lists_blank_fields(self, medical_section):
        result = render_section(medical_section, {"tobacco_use": "No"})
        assert result.required_incomplete == ["diabetes"]
        assert result.progress() == (1, 2)
        assert not result.is_complete

    def test_whitespace_answer_is_blank(self, medical_section):
        result = render_section(medical_section, {"tobacco_use": "  ", "diabetes": "No"})
        assert result.required_incomplete == ["tobacco_use"]

    def test_field_value_carried_on_item(self, medical_section):
        result = render_section(medical_section, {"tobacco_use": "Yes"})
        item = next(i for i in result.items if i.field_id == "tobacco_use")
        assert item.value == "Yes"
        assert item.answered
        assert item.options == ("Yes", "No")

    def test_text_placeholders_resolved(self):
        section = make_section("intro", [
            {"type": "agent_line", "text": "Hi (customer's first name), I'm [Agent Name]."},
        ])
        result = render_section(section, {}, make_context())
        assert result.items[0].text == "Hi Ruth, I'm Dana Reyes."

    def test_context_derived_from_data(self):
        section = make_section("intro", [
            {"type": "agent_line", "text": "Hi (customer's first name)."},
        ])
        result = render_section(section, {"customer_first_name": "Walt"})
        assert result.items[0].text == "Hi Walt."

    def test_empty_section(self):
        result = render_section(make_section("empty", []), {})
        assert result.items == []
        assert result.is_complete


class TestBranching:
    def test_non_matching_value_adds_nothing(self, medical_section):
        base = render_section(medical_section, {})
        result = render_section(medical_section, {"diabetes": "No"})
        assert len(result.items) == len(base.items)
        assert result.required_visible == base.required_visible

    def test_matching_branch_adds_nested_items(self, medical_section):
        result = render_section(medical_section, {"diabetes": "Yes"})
        nested = [i for i in result.items if i.parent_field == "diabetes"]
        assert [i.field_id for i in nested] == ["diabetes_treatment", "diabetes_complications"]
        assert all(i.level == 1 and i.branch_key == "Yes" for i in nested)
        assert result.expanded_branches == {"diabetes": "Yes"}

    def test_nested_required_fields_count(self, medical_section):
        result = render_section(medical_section, {"tobacco_use": "No", "diabetes": "Yes"})
        assert result.required_incomplete == ["diabetes_treatment", "diabetes_complications"]

    def test_hidden_required_field_never_blocks(self, medical_section):
        data = {"tobacco_use": "No", "diabetes": "No"}
        assert render_section(medical_section, data).is_complete
        assert is_section_complete(medical_section, data)

    def test_hidden_answer_ignored_for_completion(self, medical_section):
        # Answer captured under the old branch stays in data but is not visible.
        data = {"tobacco_use": "No", "diabetes": "No", "diabetes_treatment": "Pills"}
        result = render_section(medical_section, data)
        assert "diabetes_treatment" not in result.visible_field_ids
        assert result.is_complete

    def test_changing_answer_swaps_branches(self):
        section = make_section("s", [{
            "type": "input_field", "id": "retired", "options": ["Yes", "No"],
            "branching": {
                "Yes": [{"type": "input_field", "id": "previous_job"}],
                "No": [{"type": "input_field", "id": "current_job"}],
            },
        }])
        first = render_section(section, {"retired": "Yes"})
        second = render_section(section, {"retired": "No"})
        assert _branch_ids(first, "retired") == {"previous_job"}
        assert _branch_ids(second, "retired") == {"current_job"}
        assert not _branch_ids(first, "retired") & _branch_ids(second, "retired")

    def test_at_most_one_branch_per_field(self):
        section = make_section("s", [{
            "type": "input_field", "id": "aids", "input_type": "checkbox",
            "options": ["Inhalers", "Oxygen"],
            "branching": {
                "Inhalers": [{"type": "agent_line", "text": "inhaler follow-up"}],
                "Oxygen": [{"type": "agent_line", "text": "oxygen follow-up"}],
            },
        }])
        result = render_section(section, {"aids": ["Oxygen", "Inhalers"]})
        nested = [i.text for i in result.items if i.parent_field == "aids"]
        assert nested == ["inhaler follow-up"]

    def test_deterministic(self, medical_section):
        data = {"tobacco_use": "Yes", "diabetes": "Yes", "diabetes_treatment": "Insulin"}
        assert render_section(medical_section, data) == render_section(medical_section, data)

    def test_duplicate_field_id_expanded_once(self, caplog):
        section = make_section("s", [
            {"type": "input_field", "id": "smoker", "options": ["Yes", "No"],
             "branching": {"Yes": [{"type": "agent_line", "text": "first"}]}},
            {"type": "input_field", "id": "smoker", "options": ["Yes", "No"],
             "branching": {"Yes": [{"type": "agent_line", "text": "second"}]}},
        ])
        result = render_section(section, {"smoker": "Yes"})
        texts = [i.text for i in result.items if i.kind == NodeType.AGENT_LINE]
        assert texts == ["first"]
        assert "Duplicate field id" in caplog.text


class TestMatchBranch:
    @pytest.fixture
    def field(self):
        return InputField(
            id="f",
            options=["Yes", "No", "3"],
            branching={"Yes": [], "3": []},
        )

    def test_string_match(self, field):
        assert match_branch(field, "Yes") == "Yes"

    def test_case_sensitive(self, field):
        assert match_branch(field, "yes") is None

    def test_bool_maps_to_yes(self, field):
        assert match_branch(field, True) == "Yes"
        assert match_branch(field, False) is None

    def test_numbers_compare_as_strings(self, field):
        assert match_branch(field, 3) == "3"
        assert match_branch(field, 3.0) == "3"

    def test_blank_opens_nothing(self, field):
        assert match_branch(field, None) is None
        assert match_branch(field, "") is None
        assert match_branch(field, []) is None

    def test_no_branching(self):
        assert match_branch(InputField(id="x"), "Yes") is None


class TestBundledScript:
    def test_diabetes_chain(self, bundled_document):
        section = bundled_document.get_section("medical_questions")
        data = {"diabetes": "Yes", "diabetes_complications": "Yes"}
        result = render_section(section, data)
        assert "diabetes_complication_types" in result.visible_field_ids
        item = next(i for i in result.items if i.field_id == "diabetes_complication_types")
        assert item.level == 2

    def test_introduction_resolves_agent(self, bundled_document):
        section = bundled_document.get_section("introduction")
        result = render_section(section, {"customer_last_name": "Alvarez"}, make_context())
        assert "Mr./Mrs. Alvarez" in result.items[0].text
        assert any("18822345" in i.text for i in result.items)
