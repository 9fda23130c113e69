"""
Credit Offer Sizing for the Credit Assessment Engine.

This module sizes a revenue-based credit offer from the venue's grade and
annualized volume. Repayment is a fixed share of daily sales, so the term
is an estimate that depends on the venue keeping its current sales pace.
"""

from .models import (
    CreditGrade,
    CreditRecommendation,
    EligibilityGates,
    VenueMetrics,
    round_half_up,
)
from .settings import ScoringSettings, scoring_settings


def round_credit_limit(
    raw_limit: float,
    settings: ScoringSettings = scoring_settings,
) -> int:
    """
    Round a raw limit half-up to the rounding step and clamp to offer bounds.

    Examples (defaults):
        2,500,000 -> 2,500,000
        184,999 -> 180,000
        185,000 -> 190,000
        12,000 -> 50,000 (floor)
        4,000,000 -> 3,000,000 (cap)
    """
    step = settings.credit_offer_rounding
    rounded = round_half_up(raw_limit / step) * step
    return int(max(settings.min_credit_offer, min(settings.max_credit_offer, rounded)))


def estimate_term_days(
    total_repayment: float,
    annualized_volume: float,
    repayment_percent: float,
    settings: ScoringSettings = scoring_settings,
) -> int:
    """
    Days needed to repay when a share of each day's sales is withheld.

    Falls back to the default term when daily repayment would be 0.
    """
    daily_repayment = annualized_volume / 365 * repayment_percent
    if daily_repayment <= 0:
        return settings.default_term_days
    return round_half_up(total_repayment / daily_repayment)


def calculate_recommendation(
    metrics: VenueMetrics,
    grade: CreditGrade,
    gates: EligibilityGates,
    settings: ScoringSettings = scoring_settings,
) -> CreditRecommendation:
    """
    Size and price a credit offer.

    Algorithm:
        1. Gate failure or grade D -> all-zero recommendation
        2. Look up (credit %, factor rate, repayment %) for the grade
        3. limit = annualized volume x credit %, rounded and clamped
        4. total repayment = limit x factor rate
        5. term = total / daily repayment; monthly = total / (term / 30)

    Args:
        metrics: Derived venue metrics
        grade: Credit grade from the composite score
        gates: Eligibility gate results
        settings: Scoring settings (uses defaults if not provided)

    Returns:
        CreditRecommendation (zeros when no offer should be made)
    """
    terms = settings.offer_terms.get(grade.value)
    if not gates.passed or terms is None:
        return CreditRecommendation.none()

    credit_percent, factor_rate, repayment_percent = terms

    limit = round_credit_limit(metrics.annualized_volume * credit_percent, settings)
    total_repayment = round_half_up(limit * factor_rate)
    term_days = estimate_term_days(
        total_repayment, metrics.annualized_volume, repayment_percent, settings
    )
    monthly_payment = round_half_up(total_repayment / (term_days / 30)) if term_days > 0 else 0

    return CreditRecommendation(
        recommended_credit_limit=limit,
        suggested_factor_rate=factor_rate,
        total_repayment=total_repayment,
        max_repayment_percent=repayment_percent,
        estimated_term_days=term_days,
        monthly_payment_estimate=monthly_payment,
    )
