"""Grouped, human-readable summary of everything collected on a call."""

from typing import Any

from src.schemas.customer_schema import CustomerData
from src.utils import format_value, humanize_field_id, is_blank

SUMMARY_GROUPS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Personal Information", (
        "customer_first_name", "customer_last_name", "customer_phone",
        "customer_state", "customer_city", "customer_age", "customer_dob",
    )),
    ("Agent Information", ("agent_producer_number",)),
    ("Rapport Building", (
        "marital_status", "has_children", "retirement_status",
        "previous_occupation", "current_occupation", "hobbies_interests",
    )),
    ("Qualifying Information", (
        "main_concern", "paid_for_funeral", "funeral_experience", "protection_for",
    )),
    ("Medical Information", (
        "tobacco_use", "height", "weight", "heart_problems", "stroke_history",
        "cancer_history", "aids_hiv_terminal", "diabetes", "diabetes_treatment",
        "diabetes_medication_changed", "ever_used_insulin", "insulin_before_50",
        "diabetes_complications", "diabetes_complication_types", "blood_pressure",
        "blood_pressure_medication_changed", "emphysema_copd",
        "inhalers_nebulizer_oxygen", "autoimmune_disorders", "liver_kidney_disease",
        "alcohol_drug_treatment", "disability_status", "disability_reason",
        "mobility_aids", "home_health_care", "other_health_problems", "medications",
    )),
    ("Banking Information", ("account_type", "draft_date")),
    ("Beneficiary Information", (
        "primary_beneficiary", "primary_beneficiary_relationship",
        "contingent_beneficiary", "contingent_beneficiary_relationship",
    )),
    ("Contact Information", ("address", "alternate_phone", "email", "primary_doctor")),
    ("Quote Information", (
        "selected_plan", "coverage_amount", "monthly_premium", "selected_carrier",
    )),
)

OTHER_GROUP = "Other Information"


def summarize_customer_data(data: CustomerData, include_blank: bool = False) -> dict[str, dict[str, str]]:
    """
    Group collected values by category with display labels.

    Fields not in any known group land under "Other Information", so
    nothing the agent typed is hidden from the summary.
    """
    summary: dict[str, dict[str, str]] = {}
    known: set[str] = set()
    for title, field_ids in SUMMARY_GROUPS:
        known.update(field_ids)
        rows = {
            humanize_field_id(f): format_value(data.get(f))
            for f in field_ids
            if include_blank or not is_blank(data.get(f))
        }
        if rows:
            summary[title] = rows

    extras: dict[str, Any] = {
        humanize_field_id(k): format_value(v)
        for k, v in data.items()
        if k not in known and (include_blank or not is_blank(v))
    }
    if extras:
        summary[OTHER_GROUP] = extras
    return summary


def format_summary(summary: dict[str, dict[str, str]]) -> str:
    lines = []
    for title, rows in summary.items():
        lines.append(f"{title}:")
        lines.extend(f"  {label}: {value}" for label, value in rows.items())
    return "\n".join(lines)
