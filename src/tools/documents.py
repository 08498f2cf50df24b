"""
Loading of the static JSON assets: the call script and carrier reference.

Both documents are read once at startup and treated as read-only.
Schema problems raise ScriptDocumentError; softer content problems such
as duplicate field ids are logged and tolerated so a slightly broken
script still renders.
"""

import json
import logging
from collections import Counter
from pathlib import Path
from typing import Any, Iterator, Sequence, Union

from pydantic import ValidationError

from src.schemas.quote_schema import Carrier, CarrierDocument
from src.schemas.script_schema import InputField, ScriptDocument

logger = logging.getLogger(__name__)


class ScriptDocumentError(Exception):
    """Raised when a script or carrier document cannot be read or parsed."""


def _read_json(path: Union[str, Path]) -> Any:
    path = Path(path)
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise ScriptDocumentError(f"Document not found: {path}") from None
    except json.JSONDecodeError as exc:
        raise ScriptDocumentError(f"Invalid JSON in {path}: {exc}") from exc


def iter_input_fields(nodes: Sequence[Any]) -> Iterator[InputField]:
    """Yield every input field in ``nodes``, including all branches."""
    for node in nodes:
        if isinstance(node, InputField):
            yield node
            for branch in (node.branching or {}).values():
                yield from iter_input_fields(branch)


def find_duplicate_field_ids(document: ScriptDocument) -> list[str]:
    """Field ids declared more than once anywhere in the document."""
    counts = Counter(
        f.id for section in document.sections for f in iter_input_fields(section.content)
    )
    return sorted(fid for fid, n in counts.items() if n > 1)


def find_unreachable_branches(document: ScriptDocument) -> list[tuple[str, str]]:
    """(field_id, branch_key) pairs whose key is not one of the field's options."""
    problems = []
    for section in document.sections:
        for f in iter_input_fields(section.content):
            if not f.branching or not f.options:
                continue
            for key in f.branching:
                if key not in f.options:
                    problems.append((f.id, key))
    return problems


def parse_script_document(raw: Any) -> ScriptDocument:
    try:
        document = ScriptDocument.model_validate(raw)
    except ValidationError as exc:
        raise ScriptDocumentError(f"Invalid script document: {exc}") from exc

    for field_id in find_duplicate_field_ids(document):
        logger.warning("Field id '%s' is declared more than once in the script", field_id)
    for field_id, key in find_unreachable_branches(document):
        logger.warning(
            "Branch '%s' on field '%s' matches none of its options and will never open",
            key, field_id,
        )
    return document


def load_script_document(path: Union[str, Path]) -> ScriptDocument:
    """Load and validate the call script JSON."""
    document = parse_script_document(_read_json(path))
    logger.info("Loaded script with %d section(s) from %s", len(document.sections), path)
    return document


def load_carriers(path: Union[str, Path]) -> list[Carrier]:
    """Load the carrier reference JSON."""
    try:
        document = CarrierDocument.model_validate(_read_json(path))
    except ValidationError as exc:
        raise ScriptDocumentError(f"Invalid carrier document: {exc}") from exc
    logger.info("Loaded %d carrier(s) from %s", len(document.carriers), path)
    return document.carriers
