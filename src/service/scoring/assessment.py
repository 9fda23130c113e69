"""
Assessment Orchestrator for the Credit Assessment Engine.

This module sequences the complete assessment for one venue:
1. Derive metrics from the transaction history
2. Check the six eligibility gates
3. Score the five pillars and build the composite score
4. Classify grade and eligibility
5. Generate alerts and size the credit offer

This is the main entry point for the scoring module. It performs no I/O;
fetching the history and persisting the result belong to the caller.
"""

from datetime import datetime, timezone
from typing import Iterable, Optional

from .alerts import generate_alerts
from .composite import calculate_score_breakdown, determine_eligibility, determine_grade
from .gates import check_eligibility_gates
from .models import AssessmentResult, TransactionRecord, VenueIdentity, to_utc
from .recommendation import calculate_recommendation
from .settings import ScoringSettings, scoring_settings
from .venue_metrics import derive_venue_metrics


def assess_venue(
    venue: VenueIdentity,
    transactions: Iterable[TransactionRecord],
    now: Optional[datetime] = None,
    settings: ScoringSettings = scoring_settings,
) -> AssessmentResult:
    """
    Produce a full credit assessment for a venue.

    Ineligibility is a normal result, not an error: a venue failing its
    gates still gets every pillar score, its alerts and a zero offer.

    Args:
        venue: Identity of the venue being assessed
        transactions: Completed sale/refund records (trailing 12 months)
        now: Assessment time (defaults to current UTC time)
        settings: Scoring settings (uses defaults if not provided)

    Returns:
        AssessmentResult stamped with `now` as calculation and data time
    """
    now = to_utc(now) if now else datetime.now(timezone.utc)

    metrics = derive_venue_metrics(transactions, now=now, settings=settings)
    gates = check_eligibility_gates(metrics, settings)
    breakdown = calculate_score_breakdown(metrics, gates, settings)
    grade = determine_grade(breakdown.total_score, settings)
    eligibility = determine_eligibility(grade, gates)

    return AssessmentResult(
        venue=venue,
        eligibility_gates=gates,
        score_breakdown=breakdown,
        credit_grade=grade,
        eligibility_status=eligibility,
        metrics=metrics,
        recommendation=calculate_recommendation(metrics, grade, gates, settings),
        alerts=generate_alerts(metrics, gates, settings),
        calculated_at=now,
        data_as_of=now,
    )


def explain_assessment(result: AssessmentResult) -> str:
    """
    Generate a human-readable explanation of an assessment.

    Used for structured logs and by the credit team when reviewing a venue.

    Args:
        result: The assessment to explain

    Returns:
        Multi-line explanation string
    """
    breakdown = result.score_breakdown
    metrics = result.metrics
    recommendation = result.recommendation

    lines = [
        f"Venue: {result.venue.name} ({result.venue.venue_id})",
        f"Eligibility: {result.eligibility_status.value}",
        f"Credit Score: {breakdown.total_score}/100 (grade {result.credit_grade.value})",
        "",
        "Pillars:",
        f"  - Volume: {breakdown.volume_score} "
        f"(annualized ${metrics.annualized_volume:,.0f}, {metrics.transaction_count} sales)",
        f"  - Growth: {breakdown.growth_score} "
        f"(3-month trend {metrics.three_month_trend:+.1f}%, {metrics.trend_direction.value})",
        f"  - Stability: {breakdown.stability_score} "
        f"(CV {metrics.revenue_variance:.2f}, {metrics.operating_days_ratio:.0%} days active)",
        f"  - Risk: {breakdown.risk_score} "
        f"(refunds {metrics.refund_rate:.1%}, card {metrics.card_payment_ratio:.0%})",
        f"  - Maturity: {breakdown.maturity_score} ({metrics.days_in_operation} days operating)",
    ]

    if recommendation.recommended_credit_limit > 0:
        lines.append("")
        lines.append(
            f"Offer: ${recommendation.recommended_credit_limit:,.0f} at "
            f"{recommendation.suggested_factor_rate:g}x, "
            f"{recommendation.max_repayment_percent:.0%} of daily sales, "
            f"~{recommendation.estimated_term_days} days"
        )

    if result.alerts:
        lines.append("")
        lines.append("Alerts:")
        lines.extend(f"  - {alert}" for alert in result.alerts)

    return "\n".join(lines)
