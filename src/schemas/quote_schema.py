"""Carrier reference and quote option models."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PlanType(str, Enum):
    IMMEDIATE = "immediate"
    GRADED = "graded"
    RETURN_OF_PREMIUM = "return_of_premium"


class QuoteMode(str, Enum):
    BUDGET_FIRST = "budget_first"
    COVERAGE_FIRST = "coverage_first"


class CoverageTypes(BaseModel):
    immediate: bool = False
    graded: bool = False
    return_of_premium: bool = False


class GradedDetails(BaseModel):
    """Payout schedule of a graded-benefit product."""
    year1: str
    year2: str
    year3_plus: str
    accidental: str


class Carrier(BaseModel):
    """Static carrier reference record."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    location: str = ""
    description: str = ""
    rating: str = ""
    rating_agency: str = Field(default="", alias="ratingAgency")
    years_in_business: int = Field(default=0, alias="yearsInBusiness")
    founded: Optional[int] = None
    assets: Optional[str] = None
    customers: Optional[str] = None
    members: Optional[str] = None
    specialties: list[str] = Field(default_factory=list)
    coverage_types: CoverageTypes = Field(default_factory=CoverageTypes)
    graded_details: Optional[GradedDetails] = None
    return_of_premium_details: Optional[str] = None


class CarrierDocument(BaseModel):
    carriers: list[Carrier] = Field(default_factory=list)


class QuoteOption(BaseModel):
    """One illustrative coverage/premium pair. Never mutated after creation."""

    model_config = ConfigDict(frozen=True)

    coverage_amount: int
    monthly_premium: int
    daily_cost: float
    carrier: str
    plan_type: PlanType
    age_assumed: bool = False
