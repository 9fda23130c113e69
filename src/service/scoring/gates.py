"""
Eligibility Gates for the Credit Assessment Engine.

Gates are hard minimum requirements evaluated alongside scoring. A venue
that fails any gate is ineligible regardless of its score, but all pillar
scores are still computed so the assessment stays explainable.
"""

from .models import EligibilityGates, VenueMetrics
from .settings import ScoringSettings, scoring_settings


def check_eligibility_gates(
    metrics: VenueMetrics,
    settings: ScoringSettings = scoring_settings,
) -> EligibilityGates:
    """
    Apply the six eligibility rules to a metrics snapshot.

    Rules (all bounds inclusive):
        1. Days in operation >= minimum
        2. Annualized volume >= minimum
        3. Transaction count >= minimum
        4. Chargeback rate <= maximum
        5. Days since last transaction <= maximum
        6. Operating days ratio >= minimum

    Each failed rule adds a failure message carrying the observed value and
    the threshold, in rule order.

    Args:
        metrics: Derived venue metrics
        settings: Scoring settings (uses defaults if not provided)

    Returns:
        EligibilityGates with individual flags and failure messages
    """
    failures = []

    minimum_days = metrics.days_in_operation >= settings.gate_min_days_in_operation
    if not minimum_days:
        failures.append(
            f"INSUFFICIENT_HISTORY: {metrics.days_in_operation} days "
            f"(minimum {settings.gate_min_days_in_operation})"
        )

    minimum_volume = metrics.annualized_volume >= settings.gate_min_annualized_volume
    if not minimum_volume:
        failures.append(
            f"INSUFFICIENT_VOLUME: ${round(metrics.annualized_volume):,} "
            f"(minimum ${round(settings.gate_min_annualized_volume):,})"
        )

    minimum_transactions = metrics.transaction_count >= settings.gate_min_transactions
    if not minimum_transactions:
        failures.append(
            f"INSUFFICIENT_TRANSACTIONS: {metrics.transaction_count} "
            f"(minimum {settings.gate_min_transactions})"
        )

    acceptable_chargebacks = metrics.chargeback_rate <= settings.gate_max_chargeback_rate
    if not acceptable_chargebacks:
        failures.append(
            f"HIGH_CHARGEBACK_RATE: {metrics.chargeback_rate * 100:.2f}% "
            f"(maximum {settings.gate_max_chargeback_rate * 100:g}%)"
        )

    recent_activity = metrics.days_since_last_transaction <= settings.gate_max_days_inactive
    if not recent_activity:
        failures.append(
            f"INACTIVE: {metrics.days_since_last_transaction} days since last transaction "
            f"(maximum {settings.gate_max_days_inactive})"
        )

    minimum_operating_days = (
        metrics.operating_days_ratio >= settings.gate_min_operating_days_ratio
    )
    if not minimum_operating_days:
        failures.append(
            f"LOW_ACTIVITY: {metrics.operating_days_ratio * 100:.0f}% days active "
            f"(minimum {settings.gate_min_operating_days_ratio * 100:g}%)"
        )

    return EligibilityGates(
        minimum_days_in_operation=minimum_days,
        minimum_volume=minimum_volume,
        minimum_transactions=minimum_transactions,
        acceptable_chargeback_rate=acceptable_chargebacks,
        recent_activity=recent_activity,
        minimum_operating_days=minimum_operating_days,
        failures=tuple(failures),
    )
