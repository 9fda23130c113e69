"""
Alert Generation for the Credit Assessment Engine.

Alerts are advisory messages for the credit team. They never change the
score or the eligibility decision.
"""

from typing import Tuple

from .models import EligibilityGates, VenueMetrics
from .settings import ScoringSettings, scoring_settings


def generate_alerts(
    metrics: VenueMetrics,
    gates: EligibilityGates,
    settings: ScoringSettings = scoring_settings,
) -> Tuple[str, ...]:
    """
    Build the alert list for an assessment.

    Every gate failure is included verbatim, followed by independent
    warnings for declining revenue, low recent activity, high volatility,
    low card usage and new businesses.

    Args:
        metrics: Derived venue metrics
        gates: Eligibility gate results
        settings: Scoring settings (uses defaults if not provided)

    Returns:
        Ordered tuple of alert strings
    """
    alerts = list(gates.failures)

    if metrics.mom_growth_percent < settings.alert_declining_mom_percent:
        alerts.append(
            f"DECLINING_REVENUE: Month-over-month decline > "
            f"{abs(settings.alert_declining_mom_percent):g}%"
        )

    if (
        settings.alert_low_activity_days
        < metrics.days_since_last_transaction
        <= settings.gate_max_days_inactive
    ):
        alerts.append(
            f"LOW_RECENT_ACTIVITY: No transactions in {settings.alert_low_activity_days}+ days"
        )

    if metrics.revenue_variance > settings.alert_high_volatility_cv:
        alerts.append(
            f"HIGH_VOLATILITY: Revenue variance > {settings.alert_high_volatility_cv * 100:g}%"
        )

    if metrics.card_payment_ratio < settings.alert_low_card_ratio:
        alerts.append(
            f"LOW_CARD_USAGE: Less than {settings.alert_low_card_ratio * 100:g}% card payments"
        )

    if metrics.is_new_business:
        alerts.append("NEW_BUSINESS: Less than 6 months of history")

    return tuple(alerts)
