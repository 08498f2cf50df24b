"""
Illustrative premium estimator for final-expense quotes.

This is a heuristic, not an underwriting quote. It maps age, tobacco use,
and a handful of high-risk health answers to three coverage/premium
tiers, either around a desired coverage amount or around a monthly
budget.

    premium = coverage / 1000 * base_rate(age) * 8 * surcharges

Usage:
    options = compute_quotes(store.snapshot(), carriers, QuoteMode.COVERAGE_FIRST, 10000)
"""

import logging
from typing import Any, Optional, Sequence, Union

from src.config import settings
from src.schemas.customer_schema import CustomerData
from src.schemas.quote_schema import Carrier, PlanType, QuoteMode, QuoteOption
from src.utils import is_blank, is_yes, round_half_up

logger = logging.getLogger(__name__)

# (upper age bound exclusive, annual rate per $1000 factor)
AGE_RATE_TABLE: tuple[tuple[int, float], ...] = (
    (50, 0.8),
    (60, 1.0),
    (70, 1.3),
    (80, 1.8),
)
MAX_AGE_RATE = 2.5

PREMIUM_MULTIPLIER = 8
HEALTH_SURCHARGE = 1.4
TOBACCO_SURCHARGE = 1.5

HIGH_RISK_FIELDS: tuple[str, ...] = (
    "heart_problems",
    "stroke_history",
    "cancer_history",
    "diabetes_complications",
    "emphysema_copd",
    "liver_kidney_disease",
)

COVERAGE_TIERS: tuple[float, ...] = (0.75, 1.0, 1.333)
BUDGET_TIERS: tuple[float, ...] = (0.8, 1.0, 1.25)
COVERAGE_STEP = 100


class InsufficientQuoteDataError(Exception):
    """Raised when age or tobacco answers needed for a quote are missing."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = list(missing)
        super().__init__(f"Insufficient data for a quote, missing: {', '.join(missing)}")


def get_base_rate(age: int) -> float:
    """Annual rate factor per $1000 of coverage, rising with age."""
    for upper, rate in AGE_RATE_TABLE:
        if age < upper:
            return rate
    return MAX_AGE_RATE


def has_health_surcharge(data: CustomerData) -> bool:
    return any(is_yes(data.get(f)) for f in HIGH_RISK_FIELDS)


def _parse_age(value: Any) -> Optional[int]:
    if is_blank(value) or isinstance(value, (bool, list)):
        return None
    try:
        age = int(float(str(value).strip()))
    except (ValueError, OverflowError):
        return None
    return age if 0 < age < 130 else None


def select_carrier(carriers: Sequence[Carrier], health_surcharge: bool) -> str:
    """
    Pick the carrier to show on every quote.

    Impaired health prefers the first graded-benefit carrier; otherwise
    the first immediate-benefit carrier. Falls back to the first carrier.
    """
    if not carriers:
        logger.warning("No carriers loaded, quotes will have no carrier")
        return ""
    if health_surcharge:
        preferred = [c for c in carriers if c.coverage_types.graded]
    else:
        preferred = [c for c in carriers if c.coverage_types.immediate]
    return (preferred[0] if preferred else carriers[0]).name


def calculate_premium(coverage: float, base_rate: float, multiplier: float) -> int:
    """Monthly premium rounded half-up to whole dollars."""
    return int(round_half_up(coverage / 1000 * base_rate * PREMIUM_MULTIPLIER * multiplier))


def _round_coverage(amount: float) -> int:
    return int(round_half_up(amount / COVERAGE_STEP) * COVERAGE_STEP)


def compute_quotes(
    data: CustomerData,
    carriers: Sequence[Carrier],
    mode: Union[QuoteMode, str],
    target: float,
    allow_default_age: bool = False,
) -> list[QuoteOption]:
    """
    Produce three illustrative quote options.

    Args:
        data: Customer data snapshot (reads ``customer_age``, ``tobacco_use``,
            and the high-risk health answers).
        carriers: Carrier reference list, in preference order.
        mode: ``coverage_first`` treats ``target`` as desired coverage,
            ``budget_first`` as a monthly budget.
        target: Coverage amount or monthly budget in dollars.
        allow_default_age: Use the configured default age when age is
            missing. Every resulting option is flagged ``age_assumed``.

    Raises:
        InsufficientQuoteDataError: Age or tobacco answer missing.
        ValueError: ``target`` is not positive or ``mode`` is unknown.
    """
    mode = QuoteMode(mode)
    if target <= 0:
        raise ValueError(f"Quote target must be positive, got {target}")

    missing = []
    age = _parse_age(data.get("customer_age"))
    age_assumed = False
    if age is None:
        if allow_default_age:
            age = settings.quotes.default_age
            age_assumed = True
            logger.info("Customer age missing, assuming %d for an estimate", age)
        else:
            missing.append("customer_age")
    if is_blank(data.get("tobacco_use")):
        missing.append("tobacco_use")
    if missing:
        raise InsufficientQuoteDataError(missing)

    health = has_health_surcharge(data)
    multiplier = 1.0
    if health:
        multiplier *= HEALTH_SURCHARGE
    if is_yes(data.get("tobacco_use")):
        multiplier *= TOBACCO_SURCHARGE
    base_rate = get_base_rate(age)

    if mode == QuoteMode.COVERAGE_FIRST:
        pairs = []
        for factor in COVERAGE_TIERS:
            coverage = _round_coverage(target * factor)
            pairs.append((coverage, calculate_premium(coverage, base_rate, multiplier)))
    else:
        base_coverage = target / (base_rate * PREMIUM_MULTIPLIER * multiplier) * 1000
        pairs = [
            (_round_coverage(base_coverage * factor), int(round_half_up(target * factor)))
            for factor in BUDGET_TIERS
        ]

    carrier = select_carrier(carriers, health)
    plan_type = PlanType.GRADED if health else PlanType.IMMEDIATE
    floor_coverage = settings.quotes.min_coverage
    floor_premium = settings.quotes.min_monthly_premium

    options = []
    for coverage, premium in pairs:
        coverage = max(coverage, floor_coverage)
        premium = max(premium, floor_premium)
        options.append(QuoteOption(
            coverage_amount=coverage,
            monthly_premium=premium,
            daily_cost=round_half_up(premium / 30, 2),
            carrier=carrier,
            plan_type=plan_type,
            age_assumed=age_assumed,
        ))

    logger.info(
        "Quoted %s (age %d, rate %.1f, x%.2f): %s",
        mode.value, age, base_rate, multiplier,
        ", ".join(f"${o.coverage_amount}/${o.monthly_premium}" for o in options),
    )
    return options
