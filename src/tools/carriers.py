"""
Carrier reference lookup and health-profile recommendations.

The reference data itself is loaded from JSON (see documents.load_carriers).
Recommendations follow typical final-expense underwriting guidelines and
are advisory only.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence

from src.schemas.customer_schema import CustomerData
from src.schemas.quote_schema import Carrier
from src.utils import is_yes

logger = logging.getLogger(__name__)


class CoverageFilter(str, Enum):
    ALL = "all"
    IMMEDIATE = "immediate"
    GRADED = "graded"
    ROP = "rop"


class Suitability(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


_SUITABILITY_RANK = {
    Suitability.EXCELLENT: 4,
    Suitability.GOOD: 3,
    Suitability.FAIR: 2,
    Suitability.POOR: 1,
}


def _matches_filter(carrier: Carrier, coverage: CoverageFilter) -> bool:
    types = carrier.coverage_types
    if coverage == CoverageFilter.IMMEDIATE:
        return types.immediate
    if coverage == CoverageFilter.GRADED:
        return types.graded
    if coverage == CoverageFilter.ROP:
        return types.return_of_premium
    return True


def search_carriers(
    carriers: Sequence[Carrier],
    term: str = "",
    coverage: CoverageFilter = CoverageFilter.ALL,
) -> list[Carrier]:
    """Case-insensitive name/location search combined with a coverage-type filter."""
    needle = term.lower().strip()
    return [
        c for c in carriers
        if (not needle or needle in c.name.lower() or needle in c.location.lower())
        and _matches_filter(c, CoverageFilter(coverage))
    ]


def get_carrier(carriers: Sequence[Carrier], carrier_id: str) -> Optional[Carrier]:
    """Find a carrier by id, falling back to a case-insensitive name match."""
    normalized = carrier_id.lower().strip()
    for c in carriers:
        if c.id == carrier_id or c.name.lower() == normalized:
            return c
    return None


# --- Recommendations -------------------------------------------------------


@dataclass
class CarrierRecommendation:
    carrier: str
    suitability: Suitability
    reasons: list[str] = field(default_factory=list)
    notes: Optional[str] = None


@dataclass(frozen=True)
class HealthProfile:
    """Boolean view of the medical answers relevant to carrier fit."""

    age: int = 0
    heart: bool = False
    stroke: bool = False
    cancer: bool = False
    aids_hiv_terminal: bool = False
    diabetes: bool = False
    diabetes_complications: bool = False
    insulin: bool = False
    blood_pressure: bool = False
    copd: bool = False
    autoimmune: bool = False
    liver_kidney: bool = False
    disability: bool = False
    home_health_care: bool = False
    tobacco: bool = False
    bmi: Optional[float] = None

    @property
    def high_risk(self) -> bool:
        """Conditions that usually push an applicant toward guaranteed issue."""
        return (
            self.aids_hiv_terminal or self.cancer or self.stroke
            or (self.diabetes and self.diabetes_complications)
            or self.liver_kidney or self.autoimmune or self.home_health_care
        )


def parse_height_inches(height: str) -> int:
    """Parse heights like ``5'8``, ``5' 8"`` or ``68`` into inches.

    Examples:
        >>> parse_height_inches("5'8"), parse_height_inches("68")
        (68, 68)
    """
    text = str(height).strip()
    match = re.match(r"^(\d+)\s*'\s*(\d+)?", text)
    if match:
        return int(match.group(1)) * 12 + int(match.group(2) or 0)
    digits = re.match(r"^(\d+)", text)
    return int(digits.group(1)) if digits else 0


def calculate_bmi(height: str, weight) -> Optional[float]:
    """BMI from imperial height/weight, or None if either is unusable."""
    inches = parse_height_inches(height) if height else 0
    try:
        pounds = float(weight)
    except (TypeError, ValueError):
        return None
    if inches <= 0 or pounds <= 0:
        return None
    return round(pounds / (inches * inches) * 703, 1)


def build_health_profile(data: CustomerData) -> HealthProfile:
    try:
        age = int(float(str(data.get("customer_age") or 0)))
    except (ValueError, OverflowError):
        age = 0
    treatment = str(data.get("diabetes_treatment") or "").lower()
    return HealthProfile(
        age=age,
        heart=is_yes(data.get("heart_problems")),
        stroke=is_yes(data.get("stroke_history")),
        cancer=is_yes(data.get("cancer_history")),
        aids_hiv_terminal=is_yes(data.get("aids_hiv_terminal")),
        diabetes=is_yes(data.get("diabetes")),
        diabetes_complications=is_yes(data.get("diabetes_complications")),
        insulin="insulin" in treatment or is_yes(data.get("ever_used_insulin")),
        blood_pressure=is_yes(data.get("blood_pressure")),
        copd=is_yes(data.get("emphysema_copd")),
        autoimmune=is_yes(data.get("autoimmune_disorders")),
        liver_kidney=is_yes(data.get("liver_kidney_disease")),
        disability=is_yes(data.get("disability_status")),
        home_health_care=is_yes(data.get("home_health_care")),
        tobacco=is_yes(data.get("tobacco_use")),
        bmi=calculate_bmi(data.get("height") or "", data.get("weight")),
    )


def recommend_carriers(data: CustomerData) -> list[CarrierRecommendation]:
    """
    Rank carriers for the customer's age and health answers.

    Returns:
        Recommendations sorted best-first. Empty if nothing fits.
    """
    p = build_health_profile(data)
    mild = p.blood_pressure or p.diabetes
    recs: list[CarrierRecommendation] = []

    if not p.high_risk and not p.copd and 50 <= p.age <= 80:
        recs.append(CarrierRecommendation(
            carrier="Mutual of Omaha",
            suitability=Suitability.GOOD if mild else Suitability.EXCELLENT,
            reasons=[
                "Competitive rates for standard health",
                "Good underwriting for controlled diabetes",
                "Accepts blood pressure with medication",
                "Senior-friendly underwriting" if p.age >= 65 else "Good age range coverage",
            ],
            notes="May require stable medication for 12 months" if p.blood_pressure else None,
        ))

    if not p.high_risk and 45 <= p.age <= 85:
        recs.append(CarrierRecommendation(
            carrier="Baltimore Life",
            suitability=Suitability.GOOD if mild and not p.heart else Suitability.EXCELLENT,
            reasons=[
                "Lenient underwriting for mild conditions",
                "Good for controlled diabetes (pills only)",
                "Accepts stable blood pressure",
                "Competitive pricing",
            ],
            notes=(
                "May be challenging for insulin-dependent diabetes"
                if p.diabetes and p.insulin else None
            ),
        ))

    if 50 <= p.age <= 80:
        if p.high_risk:
            suitability = Suitability.FAIR
        elif p.heart or p.copd:
            suitability = Suitability.GOOD
        else:
            suitability = Suitability.EXCELLENT
        recs.append(CarrierRecommendation(
            carrier="Pioneer American",
            suitability=suitability,
            reasons=[
                "More lenient health questions",
                "Good for heart conditions (stable)",
                "Accepts COPD with treatment",
                "Flexible underwriting",
            ],
            notes="May require guaranteed issue product" if p.high_risk else None,
        ))

    if not p.high_risk and not p.heart and not p.copd and 18 <= p.age <= 75:
        recs.append(CarrierRecommendation(
            carrier="AIG (American General)",
            suitability=Suitability.FAIR if mild else Suitability.EXCELLENT,
            reasons=[
                "Excellent rates for healthy applicants",
                "Strong financial ratings",
                "Good customer service",
                "Competitive term conversion options",
            ],
            notes="Stricter underwriting for health conditions" if mild else None,
        ))

    if p.high_risk or p.age >= 75 or p.disability:
        recs.append(CarrierRecommendation(
            carrier="Foresters",
            suitability=Suitability.GOOD,
            reasons=[
                "Guaranteed issue options available",
                "No medical exam required",
                "Good for high-risk applicants",
                "Member benefits included",
            ],
            notes="Graded death benefit for first 2-3 years",
        ))

    if not p.high_risk and 18 <= p.age <= 80:
        recs.append(CarrierRecommendation(
            carrier="Liberty Bankers",
            suitability=Suitability.GOOD if mild else Suitability.EXCELLENT,
            reasons=[
                "Competitive pricing",
                "Good underwriting flexibility",
                "Fast approval process",
                "Good customer service",
            ],
        ))

    if p.bmi is not None and p.bmi >= 40:
        for rec in recs:
            rec.notes = " ".join(filter(None, [rec.notes, f"BMI {p.bmi} may exceed build chart limits"]))

    recs.sort(key=lambda r: _SUITABILITY_RANK[r.suitability], reverse=True)
    logger.debug("Recommended %d carrier(s) for age %d", len(recs), p.age)
    return recs
