"""Shared test fixtures and helpers."""

import os
from typing import Any, Optional

import pytest

from src.config import settings
from src.conversation.data_store import CustomerDataStore
from src.schemas.customer_schema import AgentProfile, PlaceholderContext
from src.schemas.quote_schema import Carrier, CoverageTypes
from src.schemas.script_schema import ScriptDocument, ScriptSection
from src.tools import leads
from src.tools.documents import load_carriers, load_script_document


@pytest.fixture(autouse=True)
def _reset_leads():
    leads.reset()
    yield
    leads.reset()


@pytest.fixture
def agent():
    return AgentProfile(agent_id="agent-007", name="Dana Reyes", npn="18822345")


@pytest.fixture
def store():
    return CustomerDataStore()


@pytest.fixture(scope="session")
def bundled_document() -> ScriptDocument:
    assert os.path.exists(settings.paths.script_path)
    return load_script_document(settings.paths.script_path)


@pytest.fixture(scope="session")
def bundled_carriers() -> list[Carrier]:
    return load_carriers(settings.paths.carriers_path)


@pytest.fixture
def carriers():
    """Small carrier list: one immediate-only, one graded-capable."""
    return [
        make_carrier("mutual_of_omaha", "Mutual of Omaha", immediate=True),
        make_carrier("foresters", "Foresters", immediate=True, graded=True),
    ]


@pytest.fixture
def medical_section():
    return make_section("medical_questions", [
        {"type": "instruction", "text": "Read each question exactly as written."},
        {"type": "input_field", "id": "tobacco_use", "label": "Tobacco?",
         "input_type": "radio", "required": True, "options": ["Yes", "No"]},
        {"type": "input_field", "id": "diabetes", "label": "Diabetes?",
         "input_type": "radio", "required": True, "options": ["Yes", "No"],
         "branching": {
             "Yes": [
                 {"type": "input_field", "id": "diabetes_treatment", "label": "Treatment?",
                  "input_type": "select", "required": True,
                  "options": ["Diet", "Pills", "Insulin"]},
                 {"type": "input_field", "id": "diabetes_complications",
                  "label": "Complications?", "input_type": "radio", "required": True,
                  "options": ["Yes", "No"]},
             ],
         }},
    ])


@pytest.fixture
def two_section_document(medical_section):
    intro = make_section("introduction", [
        {"type": "agent_line", "text": "Hi (customer's first name), this is [Agent Name]."},
        {"type": "input_field", "id": "customer_first_name", "label": "First name",
         "required": True},
    ], order=1)
    medical = medical_section.model_copy(update={"order": 2})
    return ScriptDocument(sections=[medical, intro])


def make_section(section_id: str, content: list[dict[str, Any]], order: int = 1,
                 title: Optional[str] = None) -> ScriptSection:
    """Helper to build a ScriptSection from raw JSON-like nodes."""
    return ScriptSection.model_validate({
        "id": section_id,
        "title": title or section_id.replace("_", " ").title(),
        "order": order,
        "content": content,
    })


def make_carrier(carrier_id: str, name: str, immediate: bool = False,
                 graded: bool = False, rop: bool = False) -> Carrier:
    return Carrier(
        id=carrier_id,
        name=name,
        coverage_types=CoverageTypes(
            immediate=immediate, graded=graded, return_of_premium=rop
        ),
    )


def make_context(**overrides: Optional[str]) -> PlaceholderContext:
    """PlaceholderContext with a fully known agent and customer by default."""
    values = {
        "agent_name": "Dana Reyes",
        "agent_npn": "18822345",
        "customer_first_name": "Ruth",
        "customer_last_name": "Alvarez",
        "customer_state": "TX",
        "customer_phone": "512-555-0147",
    }
    values.update(overrides)
    return PlaceholderContext(**values)
