"""
Composite Score, Grade and Eligibility for the Credit Assessment Engine.

This module combines the five pillar scores into the composite score,
maps the composite to a letter grade, and resolves the eligibility status
from the grade and the eligibility gates.
"""

from typing import Dict

from .models import (
    CreditGrade,
    EligibilityGates,
    EligibilityStatus,
    ScoreBreakdown,
    VenueMetrics,
    round_half_up,
)
from .pillars import PILLAR_SCORERS
from .settings import ScoringSettings, scoring_settings

# Eligibility for venues that passed every gate
ELIGIBILITY_BY_GRADE: Dict[CreditGrade, EligibilityStatus] = {
    CreditGrade.A: EligibilityStatus.ELIGIBLE,
    CreditGrade.B: EligibilityStatus.ELIGIBLE,
    CreditGrade.C: EligibilityStatus.REVIEW_REQUIRED,
    CreditGrade.D: EligibilityStatus.INELIGIBLE,
}


def calculate_score_breakdown(
    metrics: VenueMetrics,
    gates: EligibilityGates,
    settings: ScoringSettings = scoring_settings,
) -> ScoreBreakdown:
    """
    Score every pillar and combine them into the composite score.

    Algorithm:
        1. Score each pillar (0-100)
        2. Weighted sum, rounded half-up
        3. Subtract the gate penalty if any gate failed
        4. Clamp to 0-100

    Gate failures never skip pillar scoring; the penalty pushes a venue
    that would otherwise grade well down towards grade D.

    Args:
        metrics: Derived venue metrics
        gates: Eligibility gate results for the same metrics
        settings: Scoring settings (uses defaults if not provided)

    Returns:
        ScoreBreakdown with pillar and total scores
    """
    weights = settings.pillar_weights
    pillars = {
        name: scorer(metrics, settings)
        for name, scorer in PILLAR_SCORERS.items()
    }

    raw_total = round_half_up(sum(pillars[name] * weights[name] for name in PILLAR_SCORERS))
    penalty = 0 if gates.passed else settings.gate_failure_penalty
    total = max(0, min(100, raw_total - penalty))

    return ScoreBreakdown(
        volume_score=pillars["volume"],
        growth_score=pillars["growth"],
        stability_score=pillars["stability"],
        risk_score=pillars["risk"],
        maturity_score=pillars["maturity"],
        total_score=total,
    )


def determine_grade(
    total_score: int,
    settings: ScoringSettings = scoring_settings,
) -> CreditGrade:
    """Map a composite score to the best grade whose cutoff it reaches."""
    for grade, minimum in settings.grade_cutoffs:
        if total_score >= minimum:
            return CreditGrade(grade)
    return CreditGrade.D


def determine_eligibility(
    grade: CreditGrade,
    gates: EligibilityGates,
) -> EligibilityStatus:
    """
    Resolve the engine's eligibility status.

    Failing any gate is always INELIGIBLE, independent of grade.
    Otherwise A/B are ELIGIBLE, C needs manual review, D is INELIGIBLE.
    """
    if not gates.passed:
        return EligibilityStatus.INELIGIBLE
    return ELIGIBILITY_BY_GRADE[grade]
