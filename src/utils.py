"""Shared utilities used across the call assistant."""

import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Any


def normalize_phone(value: str) -> str:
    """Normalize a phone number by stripping everything except digits and a leading +.

    Examples:
        >>> normalize_phone("(555) 123-4567")
        '5551234567'
        >>> normalize_phone("+1 555 123 4567")
        '+15551234567'
    """
    value = value.strip()
    if value.startswith("+"):
        return "+" + re.sub(r"[^\d]", "", value[1:])
    return re.sub(r"[^\d]", "", value)


def is_blank(value: Any) -> bool:
    """True for values treated as unanswered: None, empty/whitespace strings, empty lists."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, frozenset)):
        return len(value) == 0
    return False


def is_yes(value: Any) -> bool:
    """Case-insensitive check for a "Yes" answer.

    Examples:
        >>> is_yes("Yes"), is_yes("yes "), is_yes("No"), is_yes(None)
        (True, True, False, False)
    """
    if isinstance(value, bool):
        return value
    return isinstance(value, str) and value.strip().lower() == "yes"


def round_half_up(value: float, places: int = 0) -> float:
    """Round like a cash register rather than banker's rounding.

    Examples:
        >>> round_half_up(2.5), round_half_up(1.005, 2)
        (3.0, 1.01)
    """
    exponent = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP))


def format_value(value: Any) -> str:
    """Format a customer data value for summaries.

    Examples:
        >>> format_value(["Metformin", "Lisinopril"])
        'Metformin, Lisinopril'
        >>> format_value(True), format_value(""), format_value(65)
        ('Yes', 'Not provided', '65')
    """
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value) if value else "Not provided"
    if is_blank(value):
        return "Not provided"
    return str(value)


def humanize_field_id(field_id: str) -> str:
    """Turn ``customer_first_name`` into ``Customer First Name``."""
    return " ".join(part.capitalize() for part in field_id.split("_") if part)
