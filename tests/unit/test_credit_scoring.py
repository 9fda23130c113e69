"""
Unit Tests for the Venue Credit Assessment Engine.

These tests verify:
1. Metrics derivation (windows, annualization, payment mix)
2. Eligibility gates and their inclusive bounds
3. Pillar scorers and the composite score
4. Grade and eligibility mapping
5. Credit offer sizing
6. Alerts and the full assessment pipeline

Test Categories:
- TestDeriveVenueMetrics: deriver behavior on generated histories
- TestEligibilityGates: the six hard rules
- TestPillars / TestCompositeScore: scoring
- TestRecommendation: limit rounding, pricing and term estimate
- TestAlerts: advisory messages
- TestAssessVenue: end-to-end scenarios
"""

import math
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from src.service.scoring import (
    PILLAR_SCORERS,
    ScoringSettings,
    assess_venue,
    calculate_recommendation,
    calculate_score_breakdown,
    check_eligibility_gates,
    derive_venue_metrics,
    determine_eligibility,
    determine_grade,
    estimate_term_days,
    explain_assessment,
    generate_alerts,
    score_growth,
    score_maturity,
    score_risk,
    score_stability,
    score_volume,
)
from src.service.scoring.models import (
    CreditGrade,
    EligibilityGates,
    EligibilityStatus,
    TransactionRecord,
    TransactionRole,
    TrendDirection,
    VenueIdentity,
    VenueMetrics,
    round_half_up,
)
from src.service.scoring.pillars import interpolate_tiers
from src.service.scoring.recommendation import round_credit_limit
from src.service.scoring.venue_metrics import calculate_annualized_volume

NOW = datetime(2025, 6, 30, 18, 0, tzinfo=timezone.utc)
VENUE = VenueIdentity(venue_id="ven_001", name="Casa Lupe", slug="casa-lupe", organization_name="Lupe Group")


# =============================================================================
# Test Fixtures
# =============================================================================

def make_sale(
    days_ago: int,
    amount: float = 150.0,
    method: str = "CARD",
    minutes: int = 15,
) -> TransactionRecord:
    """Helper to create a sale relative to NOW."""
    return TransactionRecord(
        amount=amount,
        role=TransactionRole.SALE,
        method=method,
        timestamp=NOW - timedelta(days=days_ago, minutes=minutes),
    )


def generate_daily_sales(
    days: int,
    per_day: int = 20,
    amount: float = 150.0,
    method: str = "CARD",
) -> list[TransactionRecord]:
    """`per_day` sales every day for `days` days, 15 minutes apart, newest first."""
    return [
        make_sale(day, amount=amount, method=method, minutes=15 * (k + 1))
        for day in range(days)
        for k in range(per_day)
    ]


def make_metrics(**overrides) -> VenueMetrics:
    """Metrics for a large, steady, established venue; override as needed."""
    values = dict(
        first_transaction_date=NOW - timedelta(days=400),
        last_transaction_date=NOW,
        days_in_operation=400,
        is_new_business=False,
        raw_volume=10_000_000.0,
        annualized_volume=10_000_000.0,
        monthly_average=833_333.0,
        current_month_volume=900_000.0,
        previous_month_volume=820_000.0,
        two_months_ago_volume=700_000.0,
        transaction_count=12_000,
        unique_operating_days=380,
        average_ticket=833.0,
        median_ticket=800.0,
        mom_growth_percent=9.8,
        three_month_trend=20.0,
        velocity_score=31.6,
        trend_direction=TrendDirection.GROWING,
        revenue_variance=0.05,
        consistency_score=100.0,
        operating_days_ratio=0.95,
        days_since_last_transaction=0,
        peak_to_trough_ratio=0.9,
        chargeback_rate=0.0,
        chargeback_count=0,
        refund_rate=0.01,
        refund_count=40,
        large_transaction_ratio=0.0,
        card_payment_ratio=0.9,
        cash_payment_ratio=0.1,
        payment_method_mix={"CARD": 10_800, "CASH": 1_200},
    )
    values.update(overrides)
    return VenueMetrics(**values)


def passing_gates() -> EligibilityGates:
    return EligibilityGates(True, True, True, True, True, True)


def failing_gates() -> EligibilityGates:
    return EligibilityGates(False, True, True, True, True, True, failures=("INSUFFICIENT_HISTORY",))


# =============================================================================
# Metrics Derivation
# =============================================================================

class TestDeriveVenueMetrics:
    """Tests for derive_venue_metrics."""

    def test_same_history_gives_identical_metrics(self):
        transactions = generate_daily_sales(120)

        first = derive_venue_metrics(transactions, now=NOW)
        second = derive_venue_metrics(list(transactions), now=NOW)

        assert first == second

    def test_input_order_does_not_matter(self):
        transactions = generate_daily_sales(120)

        assert derive_venue_metrics(transactions, now=NOW) == derive_venue_metrics(
            list(reversed(transactions)), now=NOW
        )

    def test_records_outside_window_are_ignored(self):
        transactions = generate_daily_sales(120)
        noisy = transactions + [
            make_sale(400, amount=1_000_000.0),
            TransactionRecord(
                amount=5_000.0,
                role=TransactionRole.SALE,
                method="CARD",
                timestamp=NOW + timedelta(days=1),
            ),
        ]

        assert derive_venue_metrics(noisy, now=NOW) == derive_venue_metrics(transactions, now=NOW)

    def test_operating_period(self):
        metrics = derive_venue_metrics(generate_daily_sales(100, per_day=2), now=NOW)

        # First sale is 99 days and 30 minutes before NOW
        assert metrics.days_in_operation == 99
        assert metrics.days_since_last_transaction == 0
        assert metrics.is_new_business is True
        assert metrics.unique_operating_days == 100

    def test_partial_year_volume_is_annualized(self):
        metrics = derive_venue_metrics(generate_daily_sales(100, per_day=2, amount=100.0), now=NOW)

        assert metrics.raw_volume == pytest.approx(20_000.0)
        assert metrics.annualized_volume == pytest.approx(20_000.0 * 365 / 99)

    def test_annualization_bounds(self):
        assert calculate_annualized_volume(1_000.0, 29) == 1_000.0
        assert calculate_annualized_volume(1_000.0, 30) == pytest.approx(1_000.0 * 365 / 30)
        assert calculate_annualized_volume(1_000.0, 329) == pytest.approx(1_000.0 * 365 / 329)
        assert calculate_annualized_volume(1_000.0, 330) == 1_000.0

    def test_refunds_count_towards_refund_rate_only(self):
        sales = generate_daily_sales(100, per_day=2, amount=100.0)
        refunds = [
            TransactionRecord(
                amount=-500.0,
                role=TransactionRole.REFUND,
                method="CARD",
                timestamp=NOW - timedelta(days=3),
            )
        ]

        metrics = derive_venue_metrics(sales + refunds, now=NOW)

        assert metrics.transaction_count == 200
        assert metrics.refund_count == 1
        assert metrics.refund_rate == pytest.approx(500.0 / 20_000.0)

    def test_payment_mix_and_card_ratio(self):
        card = generate_daily_sales(10, per_day=3, method="CARD")
        cash = generate_daily_sales(10, per_day=1, method="CASH")

        metrics = derive_venue_metrics(card + cash, now=NOW)

        assert metrics.payment_method_mix == {"CARD": 30, "CASH": 10}
        assert metrics.cash_payment_ratio == pytest.approx(0.25)
        assert metrics.card_payment_ratio == pytest.approx(0.75)

    def test_empty_history_defaults_to_zero(self):
        metrics = derive_venue_metrics([], now=NOW)

        assert metrics.days_in_operation == 0
        assert metrics.annualized_volume == 0
        assert metrics.transaction_count == 0
        assert metrics.average_ticket == 0
        assert metrics.revenue_variance == 0
        assert metrics.card_payment_ratio == 0
        assert metrics.chargeback_rate == 0
        assert metrics.days_since_last_transaction == 999
        assert metrics.first_transaction_date is None

    def test_calendar_month_windows(self):
        metrics = derive_venue_metrics(generate_daily_sales(100, per_day=1, amount=100.0), now=NOW)

        # June 2025 has 30 days, May 31, April 30
        assert metrics.current_month_volume == pytest.approx(3_000.0)
        assert metrics.previous_month_volume == pytest.approx(3_100.0)
        assert metrics.two_months_ago_volume == pytest.approx(3_000.0)
        assert metrics.mom_growth_percent == pytest.approx((3_000 - 3_100) / 3_100 * 100)

    def test_naive_timestamps_are_read_as_utc(self):
        aware = generate_daily_sales(60, per_day=2)
        naive = [
            TransactionRecord(
                amount=t.amount,
                role=t.role,
                method=t.method,
                timestamp=t.timestamp.replace(tzinfo=None),
            )
            for t in aware
        ]

        expected = derive_venue_metrics(aware, now=NOW)

        assert derive_venue_metrics(naive, now=NOW) == expected
        assert derive_venue_metrics(naive, now=NOW.replace(tzinfo=None)) == expected

    def test_naive_timestamps_with_default_now(self):
        recent = datetime.now(timezone.utc).replace(tzinfo=None) - timedelta(hours=2)
        sales = [
            TransactionRecord(
                amount=100.0,
                role=TransactionRole.SALE,
                method="CARD",
                timestamp=recent - timedelta(days=day),
            )
            for day in range(5)
        ]

        metrics = derive_venue_metrics(sales)

        assert metrics.transaction_count == 5
        assert metrics.raw_volume == pytest.approx(500.0)

    def test_offset_timestamps_bucket_by_utc_month(self):
        # 01:00 on June 1st at +02:00 is still May 31st in UTC
        plus_two = timezone(timedelta(hours=2))
        sales = [
            TransactionRecord(
                amount=100.0,
                role=TransactionRole.SALE,
                method="CARD",
                timestamp=datetime(2025, 6, 1, 1, 0, tzinfo=plus_two),
            ),
            TransactionRecord(
                amount=200.0,
                role=TransactionRole.SALE,
                method="CARD",
                timestamp=datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc),
            ),
        ]

        metrics = derive_venue_metrics(sales, now=NOW)

        assert sales[0].timestamp == datetime(2025, 5, 31, 23, 0, tzinfo=timezone.utc)
        assert metrics.previous_month_volume == pytest.approx(100.0)
        assert metrics.current_month_volume == pytest.approx(200.0)
        assert metrics.monthly_average == pytest.approx(150.0)


# =============================================================================
# Eligibility Gates
# =============================================================================

class TestEligibilityGates:
    """Tests for check_eligibility_gates."""

    def test_strong_venue_passes_all_gates(self):
        gates = check_eligibility_gates(make_metrics())

        assert gates.passed is True
        assert gates.failures == ()

    def test_exact_boundaries_pass(self):
        gates = check_eligibility_gates(
            make_metrics(
                days_in_operation=90,
                annualized_volume=300_000.0,
                transaction_count=200,
                chargeback_rate=0.015,
                days_since_last_transaction=14,
                operating_days_ratio=0.5,
            )
        )

        assert gates.minimum_days_in_operation is True
        assert gates.minimum_volume is True
        assert gates.minimum_transactions is True
        assert gates.acceptable_chargeback_rate is True
        assert gates.recent_activity is True
        assert gates.minimum_operating_days is True

    def test_just_below_boundaries_fail(self):
        gates = check_eligibility_gates(
            make_metrics(
                days_in_operation=89,
                annualized_volume=299_999.0,
                transaction_count=199,
                days_since_last_transaction=15,
                operating_days_ratio=0.49,
            )
        )

        assert gates.passed is False
        assert len(gates.failures) == 5

    def test_failure_messages_carry_values_in_rule_order(self):
        gates = check_eligibility_gates(
            make_metrics(days_in_operation=45, chargeback_rate=0.02)
        )

        assert gates.failures == (
            "INSUFFICIENT_HISTORY: 45 days (minimum 90)",
            "HIGH_CHARGEBACK_RATE: 2.00% (maximum 1.5%)",
        )

    def test_custom_settings_are_applied(self):
        settings = ScoringSettings(gate_min_transactions=20_000)

        gates = check_eligibility_gates(make_metrics(), settings)

        assert gates.minimum_transactions is False


# =============================================================================
# Pillars
# =============================================================================

class TestPillars:
    """Tests for the five pillar scorers."""

    def test_interpolate_tiers(self):
        tiers = [(100.0, 50.0), (200.0, 100.0)]

        assert interpolate_tiers(0, tiers) == 0
        assert interpolate_tiers(50, tiers) == pytest.approx(25.0)
        assert interpolate_tiers(150, tiers) == pytest.approx(75.0)
        assert interpolate_tiers(500, tiers) == 100.0

    def test_volume_score_is_monotonic(self):
        volumes = [0, 100_000, 300_000, 400_000, 1_000_000, 3_000_000, 10_000_000, 20_000_000]
        scores = [
            score_volume(make_metrics(annualized_volume=v, transaction_count=1_000))
            for v in volumes
        ]

        assert scores == sorted(scores)
        assert scores[0] == 0
        assert scores[2] == 30
        assert scores[3] == 40
        assert scores[-1] == 100

    def test_volume_velocity_bonus(self):
        slow = make_metrics(annualized_volume=1_000_000, transaction_count=1_000)
        busy = make_metrics(annualized_volume=1_000_000, transaction_count=4_400)  # 11/day
        busiest = make_metrics(annualized_volume=1_000_000, transaction_count=8_400)  # 21/day

        assert score_volume(slow) == 65
        assert score_volume(busy) == 68
        assert score_volume(busiest) == 70

    def test_growth_established_business(self):
        assert score_growth(make_metrics(three_month_trend=20.0)) == 100
        assert score_growth(
            make_metrics(three_month_trend=2.0, trend_direction=TrendDirection.FLAT)
        ) == 60
        assert score_growth(
            make_metrics(three_month_trend=-20.0, trend_direction=TrendDirection.DECLINING)
        ) == 15

    def test_growth_new_business_uses_velocity(self):
        metrics = make_metrics(
            is_new_business=True,
            velocity_score=9.0,
            trend_direction=TrendDirection.FLAT,
        )

        assert score_growth(metrics) == 75
        assert score_growth(make_metrics(is_new_business=True, velocity_score=9.0)) == 90
        assert score_growth(
            make_metrics(
                is_new_business=True,
                velocity_score=1.0,
                trend_direction=TrendDirection.DECLINING,
            )
        ) == 25

    def test_stability(self):
        assert score_stability(make_metrics()) == 100
        assert score_stability(
            make_metrics(revenue_variance=0.7, operating_days_ratio=0.4, consistency_score=0.0)
        ) == 10
        assert score_stability(
            make_metrics(revenue_variance=0.3, operating_days_ratio=0.8, consistency_score=50.0)
        ) == 65

    def test_risk(self):
        assert score_risk(make_metrics()) == 100
        assert score_risk(make_metrics(chargeback_rate=0.02)) == 60
        assert score_risk(make_metrics(refund_rate=0.10, card_payment_ratio=0.5)) == 80
        assert score_risk(make_metrics(large_transaction_ratio=0.2, card_payment_ratio=0.7)) == 95

    def test_maturity(self):
        assert score_maturity(make_metrics(days_in_operation=90, transaction_count=100)) == 50
        assert score_maturity(make_metrics(days_in_operation=730, transaction_count=100)) == 95
        assert score_maturity(make_metrics(days_in_operation=730, transaction_count=3_650)) == 100

    def test_every_pillar_stays_in_range(self):
        extremes = [
            make_metrics(),
            derive_venue_metrics([], now=NOW),
            make_metrics(
                chargeback_rate=0.5,
                refund_rate=0.9,
                large_transaction_ratio=0.9,
                card_payment_ratio=0.0,
                revenue_variance=5.0,
                operating_days_ratio=0.0,
                consistency_score=0.0,
                three_month_trend=-90.0,
                trend_direction=TrendDirection.DECLINING,
            ),
            make_metrics(annualized_volume=1e12, transaction_count=10_000_000),
        ]

        for metrics in extremes:
            for name, scorer in PILLAR_SCORERS.items():
                assert 0 <= scorer(metrics) <= 100, name


# =============================================================================
# Composite Score, Grade, Eligibility
# =============================================================================

class TestCompositeScore:
    """Tests for the composite score and grade/eligibility mapping."""

    def test_weights_sum_to_one(self):
        settings = ScoringSettings()

        assert math.isclose(sum(settings.pillar_weights.values()), 1.0)

    def test_weights_not_summing_to_one_are_rejected(self):
        with pytest.raises(ValidationError):
            ScoringSettings(weight_volume=0.5)

    def test_malformed_offer_terms_are_rejected(self):
        with pytest.raises(ValidationError):
            ScoringSettings(offer_terms_json='{"D": [0.1, 1.2, 0.1]}')

    def test_tier_tables_are_parsed_once(self):
        settings = ScoringSettings(volume_tiers_json="[[1000, 10], [2000, 50]]")

        assert settings.volume_tiers == [(1000.0, 10.0), (2000.0, 50.0)]
        assert settings.volume_tiers is settings.volume_tiers
        assert settings.maturity_tiers is settings.maturity_tiers
        assert settings.offer_terms is settings.offer_terms
        assert settings.offer_terms["A"] == (0.25, 1.08, 0.12)

    def test_weighted_sum(self):
        metrics = make_metrics()
        breakdown = calculate_score_breakdown(metrics, passing_gates())

        expected = round_half_up(
            breakdown.volume_score * 0.25
            + breakdown.growth_score * 0.20
            + breakdown.stability_score * 0.25
            + breakdown.risk_score * 0.20
            + breakdown.maturity_score * 0.10
        )
        assert breakdown.total_score == expected

    def test_gate_failure_applies_penalty(self):
        metrics = make_metrics()

        passed = calculate_score_breakdown(metrics, passing_gates())
        failed = calculate_score_breakdown(metrics, failing_gates())

        assert failed.total_score == passed.total_score - 30
        assert failed.volume_score == passed.volume_score

    @pytest.mark.parametrize(
        "score,grade",
        [(100, "A"), (80, "A"), (79, "B"), (65, "B"), (64, "C"), (50, "C"), (49, "D"), (0, "D")],
    )
    def test_grade_cutoffs(self, score, grade):
        assert determine_grade(score) == CreditGrade(grade)

    def test_eligibility_mapping(self):
        gates = passing_gates()

        assert determine_eligibility(CreditGrade.A, gates) == EligibilityStatus.ELIGIBLE
        assert determine_eligibility(CreditGrade.B, gates) == EligibilityStatus.ELIGIBLE
        assert determine_eligibility(CreditGrade.C, gates) == EligibilityStatus.REVIEW_REQUIRED
        assert determine_eligibility(CreditGrade.D, gates) == EligibilityStatus.INELIGIBLE

    def test_failed_gates_are_always_ineligible(self):
        assert determine_eligibility(CreditGrade.A, failing_gates()) == EligibilityStatus.INELIGIBLE


# =============================================================================
# Recommendation
# =============================================================================

class TestRecommendation:
    """Tests for credit offer sizing."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            (2_500_000, 2_500_000),
            (184_999, 180_000),
            (185_000, 190_000),
            (12_000, 50_000),
            (4_000_000, 3_000_000),
        ],
    )
    def test_round_credit_limit(self, raw, expected):
        assert round_credit_limit(raw) == expected

    def test_grade_d_gets_no_offer(self):
        recommendation = calculate_recommendation(make_metrics(), CreditGrade.D, passing_gates())

        assert recommendation.recommended_credit_limit == 0
        assert recommendation.total_repayment == 0
        assert recommendation.estimated_term_days == 0

    def test_failed_gates_get_no_offer(self):
        recommendation = calculate_recommendation(make_metrics(), CreditGrade.A, failing_gates())

        assert recommendation.recommended_credit_limit == 0
        assert recommendation.suggested_factor_rate == 0

    def test_grade_c_terms(self):
        metrics = make_metrics(annualized_volume=500_000.0)

        recommendation = calculate_recommendation(metrics, CreditGrade.C, passing_gates())

        assert recommendation.recommended_credit_limit == 60_000
        assert recommendation.suggested_factor_rate == 1.18
        assert recommendation.total_repayment == 70_800
        assert recommendation.max_repayment_percent == 0.18
        # 70,800 / (500,000 / 365 * 0.18)
        assert recommendation.estimated_term_days == 287

    def test_limits_stay_within_bounds_and_steps(self):
        for volume in [300_000, 777_777, 2_345_678, 9_999_999, 100_000_000]:
            for grade in (CreditGrade.A, CreditGrade.B, CreditGrade.C):
                limit = calculate_recommendation(
                    make_metrics(annualized_volume=float(volume)), grade, passing_gates()
                ).recommended_credit_limit

                assert 50_000 <= limit <= 3_000_000
                assert limit % 10_000 == 0

    def test_term_falls_back_without_sales(self):
        assert estimate_term_days(100_000, 0, 0.12) == 365


# =============================================================================
# Alerts
# =============================================================================

class TestAlerts:
    """Tests for generate_alerts."""

    def test_strong_venue_has_no_alerts(self):
        metrics = make_metrics()

        assert generate_alerts(metrics, check_eligibility_gates(metrics)) == ()

    def test_declining_revenue(self):
        alerts = generate_alerts(make_metrics(mom_growth_percent=-15.0), passing_gates())

        assert alerts == ("DECLINING_REVENUE: Month-over-month decline > 10%",)

    def test_low_recent_activity_window(self):
        assert generate_alerts(make_metrics(days_since_last_transaction=7), passing_gates()) == ()
        assert generate_alerts(make_metrics(days_since_last_transaction=10), passing_gates()) == (
            "LOW_RECENT_ACTIVITY: No transactions in 7+ days",
        )
        assert generate_alerts(make_metrics(days_since_last_transaction=20), passing_gates()) == ()

    def test_volatility_card_usage_and_new_business(self):
        alerts = generate_alerts(
            make_metrics(revenue_variance=0.6, card_payment_ratio=0.2, is_new_business=True),
            passing_gates(),
        )

        assert alerts == (
            "HIGH_VOLATILITY: Revenue variance > 50%",
            "LOW_CARD_USAGE: Less than 30% card payments",
            "NEW_BUSINESS: Less than 6 months of history",
        )

    def test_gate_failures_come_first(self):
        alerts = generate_alerts(make_metrics(mom_growth_percent=-50.0), failing_gates())

        assert alerts[0] == "INSUFFICIENT_HISTORY"
        assert alerts[1].startswith("DECLINING_REVENUE")


# =============================================================================
# Full Assessment
# =============================================================================

class TestAssessVenue:
    """End-to-end tests for assess_venue."""

    def test_young_venue_is_ineligible(self):
        result = assess_venue(VENUE, generate_daily_sales(46, per_day=10, amount=500.0), now=NOW)

        assert result.metrics.days_in_operation == 45
        assert result.eligibility_gates.minimum_days_in_operation is False
        assert result.eligibility_status == EligibilityStatus.INELIGIBLE
        assert result.recommendation.recommended_credit_limit == 0
        assert result.recommendation.monthly_payment_estimate == 0
        assert "INSUFFICIENT_HISTORY: 45 days (minimum 90)" in result.alerts
        assert "NEW_BUSINESS: Less than 6 months of history" in result.alerts

    def test_prime_venue_scores_grade_a(self):
        metrics = make_metrics(
            days_in_operation=400,
            annualized_volume=10_000_000.0,
            revenue_variance=0.05,
            chargeback_rate=0.0,
            three_month_trend=20.0,
        )
        gates = check_eligibility_gates(metrics)
        breakdown = calculate_score_breakdown(metrics, gates)
        grade = determine_grade(breakdown.total_score)
        recommendation = calculate_recommendation(metrics, grade, gates)

        assert breakdown.volume_score == 100
        assert breakdown.growth_score >= 90
        assert breakdown.risk_score == 100
        assert breakdown.total_score >= 80
        assert grade == CreditGrade.A
        assert determine_eligibility(grade, gates) == EligibilityStatus.ELIGIBLE
        assert recommendation.recommended_credit_limit == 2_500_000
        assert recommendation.suggested_factor_rate == 1.08
        assert recommendation.total_repayment == 2_700_000
        assert recommendation.estimated_term_days == 821

    def test_empty_history_fails_gates_without_crashing(self):
        result = assess_venue(VENUE, [], now=NOW)
        failures = result.eligibility_gates.failures

        assert result.eligibility_status == EligibilityStatus.INELIGIBLE
        assert result.credit_grade == CreditGrade.D
        # Chargeback rate is 0, so only that gate passes
        assert len(failures) == 5
        assert result.eligibility_gates.acceptable_chargeback_rate is True
        assert result.alerts[: len(failures)] == failures
        assert "NEW_BUSINESS: Less than 6 months of history" in result.alerts
        assert result.recommendation.recommended_credit_limit == 0

    def test_steady_year_round_venue(self):
        result = assess_venue(VENUE, generate_daily_sales(365), now=NOW)

        assert result.eligibility_gates.passed is True
        assert result.credit_grade == CreditGrade.A
        assert result.eligibility_status == EligibilityStatus.ELIGIBLE
        assert result.recommendation.recommended_credit_limit == 270_000
        assert result.recommendation.total_repayment == 291_600
        assert result.recommendation.estimated_term_days == 810
        assert result.recommendation.monthly_payment_estimate == 10_800
        assert result.alerts == ()
        assert result.calculated_at == NOW
        assert result.data_as_of == NOW

    def test_explanation_mentions_grade_and_offer(self):
        result = assess_venue(VENUE, generate_daily_sales(365), now=NOW)

        text = explain_assessment(result)

        assert "Casa Lupe (ven_001)" in text
        assert "grade A" in text
        assert "Offer: $270,000" in text
