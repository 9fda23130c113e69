"""
Venue Metrics Derivation for the Credit Assessment Engine.

This module turns a venue's raw payment history into the normalized
metrics consumed by the eligibility gates and the five scoring pillars:
- Operating period (age, recency)
- Volume (raw, annualized, monthly buckets, tickets)
- Growth (month-over-month, 3-month trend, velocity)
- Stability (coefficient of variation, consistency, operating days)
- Risk (chargebacks, refunds, large-ticket anomalies)
- Payment mix (card vs. cash)

The derivation is a pure function of the history and `now`: the same
snapshot always yields an identical VenueMetrics.
"""

import math
from collections import Counter, defaultdict
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Tuple

from .models import TransactionRecord, TrendDirection, VenueMetrics, to_utc
from .settings import ScoringSettings, scoring_settings

SECONDS_PER_DAY = 86_400
CASH_METHOD = "CASH"
UNKNOWN_METHOD = "UNKNOWN"


def safe_ratio(numerator: float, denominator: float) -> float:
    """Divide, returning 0 for a non-positive denominator or a non-finite result."""
    if denominator <= 0:
        return 0.0
    result = numerator / denominator
    if not math.isfinite(result):
        return 0.0
    return result


def percent_change(current: float, previous: float) -> float:
    """Percent change from previous to current, 0 when previous is 0."""
    if previous <= 0:
        return 0.0
    return (current - previous) / previous * 100


def month_start(now: datetime, months_back: int = 0) -> datetime:
    """First instant of the calendar month `months_back` months before now's."""
    year = now.year
    month = now.month - months_back
    while month <= 0:
        month += 12
        year -= 1
    return now.replace(year=year, month=month, day=1, hour=0, minute=0, second=0, microsecond=0)


def _whole_days(later: datetime, earlier: datetime) -> int:
    return math.floor((later - earlier).total_seconds() / SECONDS_PER_DAY)


def _window_volume(sales: List[TransactionRecord], start: datetime, end: datetime) -> float:
    """Sum of sale amounts in the half-open window [start, end)."""
    return sum(t.amount for t in sales if start <= t.timestamp < end)


def calculate_annualized_volume(
    raw_volume: float,
    days_in_operation: int,
    settings: ScoringSettings = scoring_settings,
) -> float:
    """
    Scale partial-year volume to a 365-day equivalent.

    Business Rationale:
        A venue open for four months cannot be compared to one open for a
        year on raw volume alone. Below 30 days the projection is too noisy
        to trust, and from 330 days on the trailing window is already close
        to a full year, so the raw figure is used in both cases.

    Args:
        raw_volume: Sum of sales in the trailing window
        days_in_operation: Days since the first sale
        settings: Scoring settings (uses defaults if not provided)

    Returns:
        Annualized volume in currency units
    """
    if settings.annualize_min_days <= days_in_operation < settings.annualize_max_days:
        return raw_volume * 365 / days_in_operation
    return raw_volume


def calculate_monthly_volumes(sales: Iterable[TransactionRecord]) -> Dict[Tuple[int, int], float]:
    """Bucket sale amounts by calendar month, keyed by (year, month)."""
    buckets: Dict[Tuple[int, int], float] = defaultdict(float)
    for txn in sales:
        buckets[(txn.timestamp.year, txn.timestamp.month)] += txn.amount
    return dict(sorted(buckets.items()))


def calculate_revenue_variance(monthly_values: List[float]) -> float:
    """
    Coefficient of variation of monthly revenue.

    Algorithm:
        population standard deviation / mean of the monthly totals

    Edge Cases:
        - Fewer than 2 months: 0 (no variation observable)
        - Mean of 0: 0
    """
    if len(monthly_values) < 2:
        return 0.0

    mean = sum(monthly_values) / len(monthly_values)
    if mean <= 0:
        return 0.0

    variance = sum((v - mean) ** 2 for v in monthly_values) / len(monthly_values)
    return safe_ratio(math.sqrt(variance), mean)


def calculate_consistency_score(
    monthly_values: List[float],
    settings: ScoringSettings = scoring_settings,
) -> float:
    """Percent of months whose revenue reaches half of the monthly average."""
    if not monthly_values:
        return 0.0

    average = sum(monthly_values) / len(monthly_values)
    floor_value = average * settings.consistent_month_ratio
    consistent = sum(1 for v in monthly_values if v >= floor_value)
    return consistent / len(monthly_values) * 100


def classify_trend(
    three_month_trend: float,
    settings: ScoringSettings = scoring_settings,
) -> TrendDirection:
    if three_month_trend >= settings.trend_growing_threshold:
        return TrendDirection.GROWING
    if three_month_trend <= settings.trend_declining_threshold:
        return TrendDirection.DECLINING
    return TrendDirection.FLAT


def calculate_payment_mix(sales: Iterable[TransactionRecord]) -> Dict[str, int]:
    """Histogram of sales by payment method."""
    counts = Counter(t.method or UNKNOWN_METHOD for t in sales)
    return dict(sorted(counts.items()))


def derive_venue_metrics(
    transactions: Iterable[TransactionRecord],
    now: Optional[datetime] = None,
    settings: ScoringSettings = scoring_settings,
) -> VenueMetrics:
    """
    Derive the full VenueMetrics structure from a payment history.

    Algorithm:
        1. Keep records inside the trailing window, ordered by timestamp
        2. Split sales from refunds (the operating period uses sales only)
        3. Compute volume, monthly buckets and calendar-month windows
        4. Compute growth, stability, risk and payment-mix statistics

    Edge Cases:
        - No sales: every metric is 0, except days since the last
          transaction which reports the configured no-activity value
        - Records after `now` or before the window are ignored

    Args:
        transactions: Completed sale/refund records for the venue
        now: Assessment time (defaults to current UTC time)
        settings: Scoring settings (uses defaults if not provided)

    Returns:
        VenueMetrics snapshot
    """
    now = to_utc(now) if now else datetime.now(timezone.utc)
    window_start = now - timedelta(days=settings.lookback_days)

    records = sorted(
        (t for t in transactions if window_start <= t.timestamp <= now),
        key=lambda t: t.timestamp,
    )
    sales = [t for t in records if t.is_sale]
    refunds = [t for t in records if t.is_refund]

    # Operating period
    first_date = sales[0].timestamp if sales else None
    last_date = sales[-1].timestamp if sales else None

    days_in_operation = max(1, _whole_days(now, first_date)) if first_date else 0
    is_new_business = days_in_operation < settings.new_business_days
    days_since_last = _whole_days(now, last_date) if last_date else settings.no_activity_days

    # Volume
    raw_volume = sum(t.amount for t in sales)
    transaction_count = len(sales)
    annualized_volume = calculate_annualized_volume(raw_volume, days_in_operation, settings)

    monthly_values = list(calculate_monthly_volumes(sales).values())
    monthly_average = sum(monthly_values) / len(monthly_values) if monthly_values else 0.0

    current_start = month_start(now)
    previous_start = month_start(now, 1)
    two_months_start = month_start(now, 2)

    current_month_volume = sum(t.amount for t in sales if t.timestamp >= current_start)
    previous_month_volume = _window_volume(sales, previous_start, current_start)
    two_months_ago_volume = _window_volume(sales, two_months_start, previous_start)

    amounts = sorted(t.amount for t in sales)
    average_ticket = safe_ratio(raw_volume, transaction_count)
    median_ticket = amounts[len(amounts) // 2] if amounts else 0.0

    # Growth
    mom_growth = percent_change(current_month_volume, previous_month_volume)
    prior_mom_growth = percent_change(previous_month_volume, two_months_ago_volume)
    three_month_trend = (mom_growth + prior_mom_growth) / 2

    unique_days = len({t.timestamp.date() for t in sales})
    velocity_score = safe_ratio(transaction_count, unique_days)

    # Stability
    revenue_variance = calculate_revenue_variance(monthly_values)
    consistency_score = calculate_consistency_score(monthly_values, settings)
    operating_days_ratio = safe_ratio(unique_days, min(365, days_in_operation))
    peak_to_trough = safe_ratio(min(monthly_values), max(monthly_values)) if monthly_values else 0.0

    # Risk
    # Chargebacks are not reported by the payments platform yet; the
    # count stays 0 until a chargeback feed exists.
    chargeback_count = 0
    chargeback_rate = safe_ratio(chargeback_count, transaction_count)

    refund_total = sum(abs(t.amount) for t in refunds)
    refund_rate = safe_ratio(refund_total, raw_volume)

    large_threshold = average_ticket * settings.large_transaction_multiplier
    large_count = sum(1 for a in amounts if a > large_threshold)
    large_transaction_ratio = safe_ratio(large_count, transaction_count)

    # Payment mix
    payment_mix = calculate_payment_mix(sales)
    cash_ratio = safe_ratio(payment_mix.get(CASH_METHOD, 0), transaction_count)
    card_ratio = 1 - cash_ratio if transaction_count else 0.0

    return VenueMetrics(
        first_transaction_date=first_date,
        last_transaction_date=last_date,
        days_in_operation=days_in_operation,
        is_new_business=is_new_business,
        raw_volume=raw_volume,
        annualized_volume=annualized_volume,
        monthly_average=monthly_average,
        current_month_volume=current_month_volume,
        previous_month_volume=previous_month_volume,
        two_months_ago_volume=two_months_ago_volume,
        transaction_count=transaction_count,
        unique_operating_days=unique_days,
        average_ticket=average_ticket,
        median_ticket=median_ticket,
        mom_growth_percent=mom_growth,
        three_month_trend=three_month_trend,
        velocity_score=velocity_score,
        trend_direction=classify_trend(three_month_trend, settings),
        revenue_variance=revenue_variance,
        consistency_score=consistency_score,
        operating_days_ratio=operating_days_ratio,
        days_since_last_transaction=days_since_last,
        peak_to_trough_ratio=peak_to_trough,
        chargeback_rate=chargeback_rate,
        chargeback_count=chargeback_count,
        refund_rate=refund_rate,
        refund_count=len(refunds),
        large_transaction_ratio=large_transaction_ratio,
        card_payment_ratio=card_ratio,
        cash_payment_ratio=cash_ratio,
        payment_method_mix=payment_mix,
    )
