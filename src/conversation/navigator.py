"""
Section navigation for the call script.

Sections are visited in ``order``. Moving forward requires the current
section to be complete for the data snapshot supplied with the move;
moving back or jumping to an earlier section never does. Completion is
re-derived from data on every check.

Usage:
    nav = ScriptNavigator(document)
    nav.next_section(store.snapshot())   # raises SectionIncompleteError if blocked
    assert nav.current_index == 1
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from src.conversation.renderer import render_section
from src.schemas.customer_schema import CustomerData
from src.schemas.script_schema import ScriptDocument, ScriptSection

logger = logging.getLogger(__name__)


class InvalidSectionError(Exception):
    """Raised when navigating to a section index that does not exist."""


class SectionIncompleteError(Exception):
    """Raised when moving forward while required fields are still blank."""

    def __init__(self, section_id: str, missing: list[str]) -> None:
        self.section_id = section_id
        self.missing = list(missing)
        super().__init__(
            f"Section '{section_id}' has unanswered required fields: {', '.join(missing)}"
        )


@dataclass
class SectionVisit:
    """Recorded history entry for a section visit."""
    section_id: str
    entered_at: datetime


class ScriptNavigator:
    """Tracks which section of the script the agent is on."""

    def __init__(self, document: ScriptDocument) -> None:
        self._sections = document.ordered_sections()
        if not self._sections:
            raise InvalidSectionError("Script document has no sections")
        self._index = 0
        self._completed: list[str] = []
        self._history: list[SectionVisit] = [
            SectionVisit(self._sections[0].id, datetime.now(timezone.utc))
        ]

    @property
    def sections(self) -> list[ScriptSection]:
        return list(self._sections)

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def current_section(self) -> ScriptSection:
        return self._sections[self._index]

    @property
    def total_sections(self) -> int:
        return len(self._sections)

    @property
    def completed_sections(self) -> list[str]:
        return list(self._completed)

    def is_first(self) -> bool:
        return self._index == 0

    def is_last(self) -> bool:
        return self._index == len(self._sections) - 1

    def progress(self) -> float:
        """Fraction of the script reached, counting the current section."""
        return (self._index + 1) / len(self._sections)

    def can_proceed(self, data: CustomerData) -> bool:
        return not self.is_last() and render_section(self.current_section, data).is_complete

    def _move_to(self, index: int) -> ScriptSection:
        old = self._sections[self._index].id
        self._index = index
        self._history.append(
            SectionVisit(self._sections[index].id, datetime.now(timezone.utc))
        )
        logger.debug("Section change: %s -> %s", old, self._sections[index].id)
        return self._sections[index]

    def next_section(self, data: CustomerData) -> ScriptSection:
        """
        Advance one section.

        Raises:
            InvalidSectionError: Already on the last section.
            SectionIncompleteError: Current section has blank required fields.
        """
        if self.is_last():
            raise InvalidSectionError("Already at the last section")
        result = render_section(self.current_section, data)
        if not result.is_complete:
            raise SectionIncompleteError(result.section_id, result.required_incomplete)
        if result.section_id not in self._completed:
            self._completed.append(result.section_id)
        return self._move_to(self._index + 1)

    def previous_section(self) -> ScriptSection:
        if self.is_first():
            raise InvalidSectionError("Already at the first section")
        return self._move_to(self._index - 1)

    def go_to_section(self, index: int) -> ScriptSection:
        """Jump to any section by position."""
        if not 0 <= index < len(self._sections):
            raise InvalidSectionError(
                f"Section index {index} out of range (0..{len(self._sections) - 1})"
            )
        return self._move_to(index)

    def find_index(self, section_id: str) -> Optional[int]:
        for i, section in enumerate(self._sections):
            if section.id == section_id:
                return i
        return None

    def get_history(self) -> list[SectionVisit]:
        return list(self._history)

    def get_section_trace(self) -> list[str]:
        return [visit.section_id for visit in self._history]
