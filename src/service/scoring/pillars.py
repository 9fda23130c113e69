"""
Pillar Scoring for the Credit Assessment Engine.

Each pillar maps VenueMetrics to an integer 0-100 sub-score:

    PILLAR      WEIGHT  WHAT IT MEASURES
    Volume        25%   Processing capacity
    Growth        20%   Business trajectory
    Stability     25%   Revenue consistency
    Risk          20%   Chargeback/refund behavior
    Maturity      10%   Operating history and data quality

The pillars are independent pure functions registered in PILLAR_SCORERS.
"""

from typing import Callable, Dict, List, Tuple

from .models import TrendDirection, VenueMetrics, round_half_up
from .settings import ScoringSettings, scoring_settings

PillarScorer = Callable[[VenueMetrics, ScoringSettings], int]


def clamp_score(score: float) -> int:
    """Round half-up and clamp to the 0-100 range."""
    return max(0, min(100, round_half_up(score)))


def interpolate_tiers(value: float, tiers: List[Tuple[float, float]]) -> float:
    """
    Piecewise-linear interpolation over ascending (threshold, score) tiers.

    - At or above the last threshold: the last score
    - Between two thresholds: linear between their scores
    - Below the first threshold: linear from 0 up to the first score
    """
    if value <= 0:
        return 0.0

    last_threshold, last_score = tiers[-1]
    if value >= last_threshold:
        return last_score

    for (low, low_score), (high, high_score) in zip(reversed(tiers[:-1]), reversed(tiers[1:])):
        if value >= low:
            return low_score + (value - low) / (high - low) * (high_score - low_score)

    first_threshold, first_score = tiers[0]
    return value / first_threshold * first_score


def score_volume(
    metrics: VenueMetrics,
    settings: ScoringSettings = scoring_settings,
) -> int:
    """
    Score processing capacity from annualized volume.

    Tiers (default): 300k -> 30, 500k -> 50, 1M -> 65, 2.5M -> 80,
    5M -> 90, 10M+ -> 100, interpolated linearly within each band.
    High transaction velocity adds +5 (>20 tx/day) or +3 (>10 tx/day).
    """
    score = interpolate_tiers(metrics.annualized_volume, settings.volume_tiers)

    tx_per_day = metrics.transactions_per_day
    if tx_per_day > settings.velocity_high_tx_per_day:
        score = min(100, score + 5)
    elif tx_per_day > settings.velocity_medium_tx_per_day:
        score = min(100, score + 3)

    return clamp_score(score)


def score_growth(
    metrics: VenueMetrics,
    settings: ScoringSettings = scoring_settings,
) -> int:
    """
    Score business trajectory, starting from a neutral 50.

    New businesses (< 6 months) are scored on transaction velocity, since
    month-over-month changes are too noisy that early. Established
    businesses are scored on the smoothed 3-month trend.
    """
    score = 50

    if metrics.is_new_business:
        velocity = metrics.velocity_score
        if velocity > settings.new_business_velocity_strong:
            score += 25
        elif velocity > settings.new_business_velocity_good:
            score += 15
        elif velocity > settings.new_business_velocity_developing:
            score += 5
        else:
            score -= 10
        trend_adjustment = 15
    else:
        growth = metrics.three_month_trend
        if growth >= settings.growth_excellent:
            score += 40
        elif growth >= settings.growth_good:
            score += 25
        elif growth >= settings.growth_stable:
            score += 10
        elif growth >= settings.growth_declining:
            score -= 10
        else:
            score -= 25
        trend_adjustment = 10

    if metrics.trend_direction == TrendDirection.GROWING:
        score += trend_adjustment
    elif metrics.trend_direction == TrendDirection.DECLINING:
        score -= trend_adjustment

    return clamp_score(score)


def score_stability(
    metrics: VenueMetrics,
    settings: ScoringSettings = scoring_settings,
) -> int:
    """
    Score revenue consistency from three components summing to 100.

    - Coefficient of variation: up to 40 points (lower CV is better)
    - Operating days ratio: up to 35 points
    - Consistency score: up to 25 points, scaled linearly
    """
    cv = metrics.revenue_variance
    if cv <= settings.variance_excellent:
        score = 40
    elif cv <= settings.variance_good:
        score = 32
    elif cv <= settings.variance_acceptable:
        score = 24
    elif cv <= settings.variance_poor:
        score = 15
    else:
        score = 5

    operating_days = metrics.operating_days_ratio
    if operating_days >= settings.operating_days_excellent:
        score += 35
    elif operating_days >= settings.operating_days_good:
        score += 28
    elif operating_days >= settings.operating_days_acceptable:
        score += 20
    elif operating_days >= settings.gate_min_operating_days_ratio:
        score += 12
    else:
        score += 5

    score += metrics.consistency_score / 100 * 25

    return clamp_score(score)


def score_risk(
    metrics: VenueMetrics,
    settings: ScoringSettings = scoring_settings,
) -> int:
    """
    Score chargeback and refund behavior (higher = lower risk).

    Starts at 100 and deducts up to 50 for chargebacks, 30 for refunds and
    10 for an unusual share of large tickets. A high share of card payments
    (more verifiable data) earns back up to 10 points.
    """
    score = 100

    chargeback_rate = metrics.chargeback_rate
    if chargeback_rate > settings.chargeback_concerning:
        score -= 50
    elif chargeback_rate > settings.chargeback_acceptable:
        score -= 35
    elif chargeback_rate > settings.chargeback_good:
        score -= 20
    elif chargeback_rate > settings.chargeback_excellent:
        score -= 10

    refund_rate = metrics.refund_rate
    if refund_rate > settings.refund_concerning:
        score -= 30
    elif refund_rate > settings.refund_acceptable:
        score -= 20
    elif refund_rate > settings.refund_good:
        score -= 10
    elif refund_rate > settings.refund_excellent:
        score -= 5

    if metrics.large_transaction_ratio > settings.large_transaction_high:
        score -= 10
    elif metrics.large_transaction_ratio > settings.large_transaction_elevated:
        score -= 5

    if metrics.card_payment_ratio > settings.card_ratio_high:
        score = min(100, score + 10)
    elif metrics.card_payment_ratio > settings.card_ratio_medium:
        score = min(100, score + 5)

    return clamp_score(score)


def score_maturity(
    metrics: VenueMetrics,
    settings: ScoringSettings = scoring_settings,
) -> int:
    """
    Score operating history.

    Tiers (default): 90 days -> 50, 180 -> 65, 365 -> 80, 730+ -> 95,
    interpolated linearly; +5 when the venue averages 5+ sales per day.
    """
    score = interpolate_tiers(metrics.days_in_operation, settings.maturity_tiers)

    if metrics.transactions_per_day >= settings.maturity_density_tx_per_day:
        score = min(100, score + 5)

    return clamp_score(score)


PILLAR_SCORERS: Dict[str, PillarScorer] = {
    "volume": score_volume,
    "growth": score_growth,
    "stability": score_stability,
    "risk": score_risk,
    "maturity": score_maturity,
}
