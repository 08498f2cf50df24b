"""
In-memory customer data store for one call.

A flat field-id -> value map. Writes are last-write-wins per field with
no undo. Renderers and the quote estimator never see the store itself,
only a read-only snapshot taken at the moment they run.

Usage:
    store = CustomerDataStore()
    store.set_field("customer_first_name", "Ruth")
    result = render_section(section, store.snapshot())
"""

import logging
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional

from src.utils import is_blank

logger = logging.getLogger(__name__)

_SCALAR_TYPES = (str, int, float, bool)


class UnknownFieldValueError(TypeError):
    """Raised when a value is not one of the supported customer data types."""


def _clean(field_id: str, value: Any) -> Any:
    if value is None or isinstance(value, _SCALAR_TYPES):
        return value.strip() if isinstance(value, str) else value
    if isinstance(value, (list, tuple)):
        if not all(isinstance(v, str) for v in value):
            raise UnknownFieldValueError(
                f"Multi-select field '{field_id}' only accepts strings, got {value!r}"
            )
        return [v.strip() for v in value]
    raise UnknownFieldValueError(
        f"Unsupported value for '{field_id}': {type(value).__name__}"
    )


class CustomerDataStore:
    """
    Owns the mutable customer data for a session.

    Field ids are not checked against the script document. Unknown ids
    are stored like any other so ad-hoc notes are never lost.
    """

    def __init__(self, initial: Optional[Mapping[str, Any]] = None) -> None:
        self._data: dict[str, Any] = {}
        if initial:
            self.update(initial)

    def set_field(self, field_id: str, value: Any) -> None:
        """Set one field. The previous value is discarded."""
        if not field_id:
            raise ValueError("Field id must be a non-empty string")
        self._data[field_id] = _clean(field_id, value)
        logger.debug("Field '%s' set to %r", field_id, self._data[field_id])

    def update(self, values: Mapping[str, Any]) -> None:
        for field_id, value in values.items():
            self.set_field(field_id, value)

    def get(self, field_id: str, default: Any = None) -> Any:
        return self._data.get(field_id, default)

    def snapshot(self) -> Mapping[str, Any]:
        """Read-only copy of the current data for one render or quote run."""
        return MappingProxyType(
            {k: list(v) if isinstance(v, list) else v for k, v in self._data.items()}
        )

    def to_dict(self) -> dict[str, Any]:
        """Export answered fields as a plain dict (blank values dropped)."""
        return {
            k: list(v) if isinstance(v, list) else v
            for k, v in self._data.items()
            if not is_blank(v)
        }

    def answered_fields(self) -> list[str]:
        return [k for k, v in self._data.items() if not is_blank(v)]

    def missing(self, field_ids: Iterable[str]) -> list[str]:
        """Subset of ``field_ids`` that are still blank."""
        return [f for f in field_ids if is_blank(self._data.get(f))]

    def clear(self) -> None:
        self._data.clear()
        logger.info("Customer data cleared")

    def get_stats(self) -> dict[str, Any]:
        answered = len(self.answered_fields())
        return {
            "fields_set": len(self._data),
            "fields_answered": answered,
            "fields_blank": len(self._data) - answered,
        }

    def __contains__(self, field_id: object) -> bool:
        return field_id in self._data

    def __len__(self) -> int:
        return len(self._data)
