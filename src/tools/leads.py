"""
Mock lead store and post-call lead helpers.

In production, this would write to the agency's lead database. Here
leads live in a module-level dict so sessions, the console demo, and
tests can exercise the full create/update/delete cycle.

Customer data is never passed through unchanged: ``map_customer_data_to_lead``
selects and converts the fields a lead record holds.
"""

import logging
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional, TypedDict

from src.schemas.customer_schema import CustomerData
from src.utils import is_blank, is_yes, normalize_phone

logger = logging.getLogger(__name__)

HEALTH_CONDITION_FIELDS: dict[str, str] = {
    "heart_problems": "Heart",
    "stroke_history": "Stroke",
    "cancer_history": "Cancer",
    "diabetes": "Diabetes",
    "blood_pressure": "High Blood Pressure",
    "emphysema_copd": "COPD",
    "autoimmune_disorders": "Autoimmune",
    "liver_kidney_disease": "Liver/Kidney",
}


class LeadCreationTrigger(str, Enum):
    """Call outcomes that prompt the agent to save a lead."""
    CALL_COMPLETED = "call_completed"
    QUOTE_PROVIDED = "quote_provided"
    APPLICATION_STARTED = "application_started"
    CALLBACK_SCHEDULED = "callback_scheduled"
    MANUAL_TRIGGER = "manual_trigger"


class LeadRecord(TypedDict, total=False):
    """Lead stored in the system."""

    id: str
    agent_id: str
    first_name: str
    last_name: str
    email: str
    phone: str
    date_of_birth: str
    tobacco_use: bool
    health_conditions: list[str]
    coverage_amount: float
    coverage_type: str
    premium_budget: float
    trigger: str
    created_at: str
    updated_at: str


class LeadResult(TypedDict, total=False):
    """Result from create_lead, update_lead, or delete_lead."""

    success: bool
    message: str
    lead: LeadRecord


_leads: dict[str, LeadRecord] = {}


def _text(data: CustomerData, key: str) -> str:
    value = data.get(key)
    return "" if is_blank(value) else str(value).strip()


def _number(data: CustomerData, key: str) -> Optional[float]:
    value = data.get(key)
    if is_blank(value) or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def validate_customer_data_for_lead(data: CustomerData) -> bool:
    """A lead needs at least a name and one way to contact the customer."""
    has_name = _text(data, "customer_first_name") or _text(data, "customer_last_name")
    has_contact = _text(data, "customer_phone") or _text(data, "email")
    return bool(has_name and has_contact)


def should_create_lead(data: CustomerData) -> bool:
    """Basic info plus either insurance interest or any health answer."""
    interest = any(
        not is_blank(data.get(k))
        for k in ("coverage_amount", "monthly_premium", "premium_budget",
                  "main_concern", "protection_for")
    )
    health = any(
        not is_blank(data.get(k))
        for k in ("tobacco_use", "heart_problems", "diabetes",
                  "blood_pressure", "other_health_problems")
    )
    return validate_customer_data_for_lead(data) and (interest or health)


def get_customer_data_summary(data: CustomerData) -> str:
    """Short multi-line summary for the lead confirmation prompt."""
    lines = []
    name = f"{_text(data, 'customer_first_name')} {_text(data, 'customer_last_name')}".strip()
    if name:
        lines.append(f"Name: {name}")
    if _text(data, "customer_phone"):
        lines.append(f"Phone: {_text(data, 'customer_phone')}")
    if _text(data, "email"):
        lines.append(f"Email: {_text(data, 'email')}")
    if _text(data, "customer_age"):
        lines.append(f"Age: {_text(data, 'customer_age')}")
    coverage = _number(data, "coverage_amount")
    if coverage:
        lines.append(f"Coverage: ${coverage:,.0f}")
    premium = _number(data, "monthly_premium")
    if premium:
        lines.append(f"Premium: ${premium:g}/month")
    return "\n".join(lines)


def map_customer_data_to_lead(data: CustomerData) -> dict[str, Any]:
    """Select and convert the customer data fields a lead record holds."""
    fields: dict[str, Any] = {
        "first_name": _text(data, "customer_first_name"),
        "last_name": _text(data, "customer_last_name"),
        "email": _text(data, "email"),
        "phone": normalize_phone(_text(data, "customer_phone")),
        "date_of_birth": _text(data, "customer_dob"),
        "tobacco_use": is_yes(data.get("tobacco_use")),
        "health_conditions": [
            label for key, label in HEALTH_CONDITION_FIELDS.items() if is_yes(data.get(key))
        ],
        "coverage_type": _text(data, "selected_plan"),
    }
    coverage = _number(data, "coverage_amount")
    if coverage is not None:
        fields["coverage_amount"] = coverage
    budget = _number(data, "premium_budget") or _number(data, "monthly_premium")
    if budget is not None:
        fields["premium_budget"] = budget
    return fields


def create_lead(
    fields: dict[str, Any],
    agent_id: str,
    trigger: LeadCreationTrigger = LeadCreationTrigger.MANUAL_TRIGGER,
) -> LeadResult:
    """Create a new lead owned by ``agent_id``."""
    if not agent_id:
        return {"success": False, "message": "Cannot create lead - no agent is signed in."}
    if not (fields.get("first_name") or fields.get("last_name")):
        return {"success": False, "message": "Cannot create lead - a customer name is required."}

    now = datetime.now(timezone.utc).isoformat()
    lead: LeadRecord = {
        **fields,  # type: ignore[typeddict-item]
        "id": f"LD-{uuid.uuid4().hex[:8].upper()}",
        "agent_id": agent_id,
        "trigger": LeadCreationTrigger(trigger).value,
        "created_at": now,
        "updated_at": now,
    }
    _leads[lead["id"]] = lead
    logger.info("Lead created: %s for agent %s", lead["id"], agent_id)
    return {"success": True, "message": f"Lead {lead['id']} created.", "lead": lead}


def update_lead(lead_id: str, changes: dict[str, Any]) -> LeadResult:
    if lead_id not in _leads:
        return {"success": False, "message": f"Lead {lead_id} not found."}
    protected = {"id", "agent_id", "created_at"}
    _leads[lead_id].update(
        {k: v for k, v in changes.items() if k not in protected}  # type: ignore[typeddict-item]
    )
    _leads[lead_id]["updated_at"] = datetime.now(timezone.utc).isoformat()
    logger.info("Lead updated: %s", lead_id)
    return {"success": True, "message": f"Lead {lead_id} updated.", "lead": _leads[lead_id]}


def delete_lead(lead_id: str) -> LeadResult:
    if _leads.pop(lead_id, None) is None:
        return {"success": False, "message": f"Lead {lead_id} not found."}
    logger.info("Lead deleted: %s", lead_id)
    return {"success": True, "message": f"Lead {lead_id} deleted."}


def get_lead(lead_id: str) -> Optional[LeadRecord]:
    return _leads.get(lead_id)


def list_leads(agent_id: str) -> list[LeadRecord]:
    """All leads for an agent, newest first."""
    owned = [lead for lead in _leads.values() if lead.get("agent_id") == agent_id]
    return sorted(owned, key=lambda lead: lead.get("created_at", ""), reverse=True)


def reset() -> None:
    """Clear all leads. Used by test fixtures for isolation."""
    _leads.clear()
