from src.conversation.call_session import CallSession
from src.conversation.data_store import CustomerDataStore, UnknownFieldValueError
from src.conversation.navigator import (
    InvalidSectionError,
    ScriptNavigator,
    SectionIncompleteError,
)
from src.conversation.placeholders import resolve_placeholders
from src.conversation.renderer import DisplayItem, RenderResult, render_section

__all__ = [
    "CallSession",
    "CustomerDataStore",
    "UnknownFieldValueError",
    "ScriptNavigator",
    "InvalidSectionError",
    "SectionIncompleteError",
    "resolve_placeholders",
    "render_section",
    "RenderResult",
    "DisplayItem",
]
