"""
Script renderer and branch evaluator.

Walks one script section against a read-only snapshot of customer data
and produces a flat, ordered list of display items plus the required
fields that are visible but still unanswered.

Visibility is always derived from the data passed in. Nothing about
which branch is open is stored on the nodes, so changing an answer and
rendering again closes the old follow-ups and opens the new ones.

Usage:
    result = render_section(section, {"diabetes": "Yes"}, context)
    for item in result.items:
        print("  " * item.level + item.text)
    if result.is_complete:
        ...
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from src.conversation.placeholders import resolve_placeholders
from src.schemas.customer_schema import CustomerData, PlaceholderContext
from src.schemas.script_schema import (
    AgentLine,
    CustomerResponse,
    InputField,
    InputKind,
    Instruction,
    NodeType,
    ScriptSection,
)
from src.utils import is_blank

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DisplayItem:
    """One rendered line of the script, ready for display."""

    kind: NodeType
    text: str
    level: int = 0
    field_id: Optional[str] = None
    input_type: Optional[InputKind] = None
    required: bool = False
    options: Optional[tuple[str, ...]] = None
    placeholder: Optional[str] = None
    value: Any = None
    parent_field: Optional[str] = None
    branch_key: Optional[str] = None

    @property
    def answered(self) -> bool:
        return not is_blank(self.value)


@dataclass(frozen=True)
class RenderResult:
    """Everything derived from one (section, data) snapshot."""

    section_id: str
    title: str
    items: list[DisplayItem] = field(default_factory=list)
    required_incomplete: list[str] = field(default_factory=list)
    required_visible: list[str] = field(default_factory=list)
    expanded_branches: dict[str, str] = field(default_factory=dict)

    @property
    def is_complete(self) -> bool:
        return not self.required_incomplete

    @property
    def visible_field_ids(self) -> list[str]:
        return [i.field_id for i in self.items if i.field_id is not None]

    def progress(self) -> tuple[int, int]:
        """(answered, total) over currently visible required fields."""
        total = len(self.required_visible)
        return total - len(self.required_incomplete), total


def _branch_token(value: Any) -> str:
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def match_branch(node: InputField, value: Any) -> Optional[str]:
    """
    Return the branch key that ``value`` opens on ``node``, or None.

    Scalars match a key by string equality. Multi-select values (lists)
    open the first key, in document order, that is among the selections.
    Blank values and unknown answers open nothing.
    """
    if not node.branching or is_blank(value):
        return None
    if isinstance(value, (list, tuple, set, frozenset)):
        selected = {_branch_token(v) for v in value}
        for key in node.branching:
            if key in selected:
                return key
        return None
    token = _branch_token(value)
    return token if token in node.branching else None


class _Walker:
    def __init__(self, data: CustomerData, context: PlaceholderContext) -> None:
        self.data = data
        self.context = context
        self.items: list[DisplayItem] = []
        self.required_incomplete: list[str] = []
        self.required_visible: list[str] = []
        self.expanded: dict[str, str] = {}

    def _text(self, text: str) -> str:
        return resolve_placeholders(text, self.context)

    def walk(
        self,
        nodes: Sequence[Any],
        level: int,
        parent_field: Optional[str] = None,
        branch_key: Optional[str] = None,
    ) -> None:
        for node in nodes:
            if isinstance(node, InputField):
                self._emit_field(node, level, parent_field, branch_key)
            elif isinstance(node, (AgentLine, Instruction, CustomerResponse)):
                self.items.append(DisplayItem(
                    kind=NodeType(node.type),
                    text=self._text(node.text),
                    level=level,
                    parent_field=parent_field,
                    branch_key=branch_key,
                ))
            else:
                logger.warning("Skipping unrecognized script node: %r", node)

    def _emit_field(
        self,
        node: InputField,
        level: int,
        parent_field: Optional[str],
        branch_key: Optional[str],
    ) -> None:
        value = self.data.get(node.id)
        self.items.append(DisplayItem(
            kind=NodeType.INPUT_FIELD,
            text=self._text(node.label),
            level=level,
            field_id=node.id,
            input_type=node.input_type,
            required=node.required,
            options=tuple(node.options) if node.options else None,
            placeholder=node.placeholder,
            value=value,
            parent_field=parent_field,
            branch_key=branch_key,
        ))

        if node.required:
            self.required_visible.append(node.id)
            if is_blank(value):
                self.required_incomplete.append(node.id)

        key = match_branch(node, value)
        if key is None:
            return
        if node.id in self.expanded:
            # Same id reached twice in one render; first occurrence wins.
            logger.warning("Duplicate field id '%s' in rendered section", node.id)
            return
        self.expanded[node.id] = key
        self.walk(node.branching[key], level + 1, parent_field=node.id, branch_key=key)


def render_section(
    section: ScriptSection,
    data: CustomerData,
    context: Optional[PlaceholderContext] = None,
) -> RenderResult:
    """
    Render a section against a data snapshot.

    Args:
        section: The script section to walk.
        data: Current customer data (read only).
        context: Placeholder values. Derived from ``data`` when omitted.

    Returns:
        RenderResult with display items in depth-first order and the
        visible required fields that are still blank.
    """
    ctx = context or PlaceholderContext.from_customer_data(data)
    walker = _Walker(data, ctx)
    walker.walk(section.content, level=0)
    return RenderResult(
        section_id=section.id,
        title=resolve_placeholders(section.title, ctx),
        items=walker.items,
        required_incomplete=walker.required_incomplete,
        required_visible=walker.required_visible,
        expanded_branches=walker.expanded,
    )


def is_section_complete(section: ScriptSection, data: CustomerData) -> bool:
    """True when every visible required field in ``section`` has a value."""
    return render_section(section, data).is_complete
