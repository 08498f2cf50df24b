"""Script document models: sections and the four script node variants."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field


class NodeType(str, Enum):
    AGENT_LINE = "agent_line"
    INSTRUCTION = "instruction"
    INPUT_FIELD = "input_field"
    CUSTOMER_RESPONSE = "customer_response"


class InputKind(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    SELECT = "select"
    RADIO = "radio"
    CHECKBOX = "checkbox"
    TEXTAREA = "textarea"


class AgentLine(BaseModel):
    """A line the agent reads verbatim."""
    type: Literal["agent_line"] = "agent_line"
    text: str


class Instruction(BaseModel):
    """Stage direction or compliance note for the agent."""
    type: Literal["instruction"] = "instruction"
    text: str


class CustomerResponse(BaseModel):
    """Illustrative response the customer is expected to give."""
    type: Literal["customer_response"] = "customer_response"
    text: str


class InputField(BaseModel):
    """A data-collection point keyed into the customer data store by ``id``."""
    type: Literal["input_field"] = "input_field"
    id: str
    label: str = ""
    input_type: InputKind = InputKind.TEXT
    required: bool = False
    placeholder: Optional[str] = None
    options: Optional[list[str]] = None
    branching: Optional[dict[str, list[ScriptNode]]] = None


ScriptNode = Annotated[
    Union[AgentLine, Instruction, InputField, CustomerResponse],
    Field(discriminator="type"),
]

InputField.model_rebuild()


class ScriptSection(BaseModel):
    """One ordered section of the call script."""
    id: str
    title: str
    order: int
    content: list[ScriptNode] = Field(default_factory=list)


class ScriptDocument(BaseModel):
    """The whole call script, loaded once and never mutated."""
    sections: list[ScriptSection] = Field(default_factory=list)

    def ordered_sections(self) -> list[ScriptSection]:
        """Sections sorted by their ``order`` key (stable for ties)."""
        return sorted(self.sections, key=lambda s: s.order)

    def get_section(self, section_id: str) -> Optional[ScriptSection]:
        for section in self.sections:
            if section.id == section_id:
                return section
        return None
