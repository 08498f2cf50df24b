"""
Application form integration.

Customer data is transformed into the field layout of the carrier
application form, then sent as a pre-filled form URL. Opening the URL is
delegated to an injectable ``opener`` (``webbrowser.open`` by default);
the submission only reports whether that hand-off succeeded.
"""

import json
import logging
import time
import webbrowser
from datetime import datetime, timezone
from typing import Any, Callable, Optional, TypedDict
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from src.config import settings
from src.schemas.customer_schema import CustomerData
from src.utils import is_blank, is_yes

logger = logging.getLogger(__name__)

# Medical answers that must be present before the form is sent.
MEDICAL_FIELDS: tuple[str, ...] = (
    "tobacco_use", "height", "weight", "heart_problems", "stroke_history",
    "cancer_history", "aids_hiv_terminal", "diabetes",
)

# Ordered yes/no questions as numbered on the application.
YES_QUESTIONS: tuple[tuple[str, str], ...] = (
    ("tobacco_use", "Q1: Tobacco Use"),
    ("heart_problems", "Q2: Heart Problems"),
    ("stroke_history", "Q3: Stroke"),
    ("cancer_history", "Q4: Cancer"),
    ("aids_hiv_terminal", "Q5: AIDS/HIV/Terminal"),
    ("diabetes", "Q6: Diabetes"),
    ("blood_pressure", "Q7: High Blood Pressure"),
    ("emphysema_copd", "Q8: Emphysema/COPD"),
    ("autoimmune_disorders", "Q9: Autoimmune Disorders"),
    ("liver_kidney_disease", "Q10: Liver/Kidney Disease"),
    ("alcohol_drug_treatment", "Q11: Alcohol/Drug Treatment"),
    ("disability_status", "Q12: Disability"),
    ("mobility_aids", "Q13: Mobility Aids"),
    ("home_health_care", "Q14: Home Health Care"),
)

HEALTH_SUMMARY: tuple[tuple[str, str], ...] = (
    ("heart_problems", "Heart"),
    ("stroke_history", "Stroke"),
    ("cancer_history", "Cancer"),
    ("diabetes", "Diabetes"),
    ("blood_pressure", "HBP"),
    ("emphysema_copd", "COPD"),
    ("autoimmune_disorders", "Autoimmune"),
    ("liver_kidney_disease", "Liver/Kidney"),
    ("disability_status", "Disability"),
)

# Transformed field name -> form entry id. Replace with the real form's ids.
DEFAULT_FIELD_MAPPINGS: dict[str, str] = {
    "insured_name": "123456789",
    "telephone_number": "111111111",
    "email_address": "222222222",
    "age": "333333333",
    "dob": "444444444",
    "tobacco_y_or_n": "555555555",
    "height": "666666666",
    "weight": "777777777",
    "summary_health": "888888888",
    "rop_yes_questions": "999999999",
    "face_amount": "101010101",
    "monthly_premium": "121212121",
    "plan_type": "131313131",
}


class FormSubmission(TypedDict, total=False):
    success: bool
    error: str
    submission_id: str
    url: str


def _text(data: CustomerData, key: str) -> str:
    value = data.get(key)
    if is_blank(value):
        return ""
    if isinstance(value, list):
        return ", ".join(value)
    return str(value).strip()


def format_yes_no(value: Any) -> str:
    return "Y" if is_yes(value) else "N"


def transform_for_form(data: CustomerData) -> dict[str, str]:
    """Map customer data onto the application form's field names."""
    full_name = f"{_text(data, 'customer_first_name')} {_text(data, 'customer_last_name')}".strip()
    yes_questions = [label for key, label in YES_QUESTIONS if is_yes(data.get(key))]
    conditions = [label for key, label in HEALTH_SUMMARY if is_yes(data.get(key))]
    age = _text(data, "customer_age")

    return {
        "reference_id": f"REF-{int(time.time() * 1000)}",
        "company_name": settings.forms.company_name,
        "plan_type": _text(data, "selected_plan") or "TBD",
        "rop_yes_questions": ", ".join(yes_questions) or "None",
        "insured_name": full_name,
        "address": _text(data, "address"),
        "city": _text(data, "customer_city"),
        "state": _text(data, "customer_state"),
        "telephone_number": _text(data, "customer_phone"),
        "email_address": _text(data, "email"),
        "dob": _text(data, "customer_dob"),
        "age": age,
        "height": _text(data, "height"),
        "weight": _text(data, "weight"),
        "primary_beneficiary": _text(data, "primary_beneficiary"),
        "contingent_beneficiary": _text(data, "contingent_beneficiary"),
        "face_amount": _text(data, "coverage_amount") or _text(data, "selected_plan"),
        "monthly_premium": _text(data, "monthly_premium"),
        "tobacco_y_or_n": format_yes_no(data.get("tobacco_use")),
        "physician_name": _text(data, "primary_doctor"),
        "name_as_appears_on_account": full_name,
        "account_type": _text(data, "account_type"),
        "draft_day": _text(data, "draft_date"),
        "summary_state": _text(data, "customer_state"),
        "summary_age": age,
        "summary_dob": _text(data, "customer_dob"),
        "summary_tobacco": format_yes_no(data.get("tobacco_use")),
        "summary_ht_wt": f"{_text(data, 'height')} / {_text(data, 'weight')}",
        "summary_health": ", ".join(conditions) if conditions else "No major conditions",
        "summary_meds": _text(data, "medications") or "None",
        "summary_current": _text(data, "current_occupation"),
        "summary_concern": _text(data, "main_concern"),
    }


def validate_required_fields(data: CustomerData, required: tuple[str, ...]) -> list[str]:
    """Return the required fields that are still blank."""
    return [f for f in required if is_blank(data.get(f))]


class FormIntegration:
    """Builds and opens pre-filled application form URLs."""

    def __init__(
        self,
        form_url: str = "",
        field_mappings: Optional[dict[str, str]] = None,
        opener: Optional[Callable[[str], Any]] = None,
    ) -> None:
        self.form_url = form_url
        self.field_mappings = dict(field_mappings or DEFAULT_FIELD_MAPPINGS)
        self._opener = opener or webbrowser.open

    def update_config(self, form_url: str, field_mappings: Optional[dict[str, str]] = None) -> None:
        self.form_url = form_url
        if field_mappings is not None:
            self.field_mappings = dict(field_mappings)

    def config_status(self) -> dict[str, bool]:
        return {
            "configured": bool(self.form_url and self.field_mappings),
            "has_url": bool(self.form_url),
            "has_mappings": bool(self.field_mappings),
        }

    def generate_prefilled_url(self, data: CustomerData) -> str:
        """
        Build the pre-filled URL, one ``entry.<id>`` parameter per mapped field.

        Raises:
            ValueError: No form URL configured.
        """
        if not self.form_url:
            raise ValueError("Form URL not configured")
        transformed = transform_for_form(data)
        parts = urlsplit(self.form_url)
        params = parse_qsl(parts.query, keep_blank_values=True)
        for field_name, entry_id in self.field_mappings.items():
            value = transformed.get(field_name, "")
            if value:
                params.append((f"entry.{entry_id}", value))
        return urlunsplit(parts._replace(query=urlencode(params)))

    def submit_to_form(self, data: CustomerData) -> FormSubmission:
        """Open the pre-filled form. Failures are returned, never raised."""
        try:
            url = self.generate_prefilled_url(data)
            opened = self._opener(url)
        except Exception as exc:
            logger.error("Form submission failed: %s", exc)
            return {"success": False, "error": str(exc)}
        if opened is False:
            logger.error("Form URL could not be opened")
            return {"success": False, "error": "Could not open the form URL", "url": url}
        submission_id = f"form_{int(time.time() * 1000)}"
        logger.info("Form opened for submission %s", submission_id)
        return {"success": True, "submission_id": submission_id, "url": url}

    def export_as_json(self, data: CustomerData) -> str:
        """Customer data plus form configuration, for manual form filling."""
        return json.dumps(
            {
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "customer_data": dict(data),
                "form_url": self.form_url,
                "field_mappings": self.field_mappings,
            },
            indent=2,
            default=str,
        )

    def submit_medical_data(self, data: CustomerData) -> FormSubmission:
        """Submit only once every medical question has an answer."""
        missing = validate_required_fields(data, MEDICAL_FIELDS)
        if missing:
            return {
                "success": False,
                "error": f"Missing required medical information: {', '.join(missing)}",
            }
        return self.submit_to_form(data)
