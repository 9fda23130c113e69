"""
Data models for venue credit scoring.

These models represent the data structures used throughout the scoring
pipeline, from raw payment records to the final assessment result.
"""

import math
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Optional, Tuple


class TransactionRole(str, Enum):
    """Whether a payment record brought money in or gave it back."""
    SALE = "sale"
    REFUND = "refund"


class TrendDirection(str, Enum):
    GROWING = "GROWING"
    FLAT = "FLAT"
    DECLINING = "DECLINING"


class CreditGrade(str, Enum):
    """Letter grade derived from the composite score."""
    A = "A"  # Prime - best rates, highest limits
    B = "B"  # Near-prime - standard limits
    C = "C"  # Developing - manual review
    D = "D"  # Not ready


class EligibilityStatus(str, Enum):
    """
    Credit eligibility of a venue.

    The engine only produces INELIGIBLE, REVIEW_REQUIRED and ELIGIBLE.
    OFFER_PENDING and ACTIVE_LOAN are set by the offer lifecycle.
    """
    INELIGIBLE = "INELIGIBLE"
    REVIEW_REQUIRED = "REVIEW_REQUIRED"
    ELIGIBLE = "ELIGIBLE"
    OFFER_PENDING = "OFFER_PENDING"
    ACTIVE_LOAN = "ACTIVE_LOAN"

    def can_transition_to(self, target: "EligibilityStatus") -> bool:
        """Check a lifecycle transition against the allowed transition table."""
        return target in _ELIGIBILITY_TRANSITIONS.get(self, frozenset())


_ELIGIBILITY_TRANSITIONS = {
    EligibilityStatus.REVIEW_REQUIRED: frozenset({EligibilityStatus.OFFER_PENDING}),
    EligibilityStatus.ELIGIBLE: frozenset({EligibilityStatus.OFFER_PENDING}),
    EligibilityStatus.OFFER_PENDING: frozenset({
        EligibilityStatus.ACTIVE_LOAN,
        EligibilityStatus.ELIGIBLE,
    }),
}


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def to_utc(value: datetime) -> datetime:
    """Express a datetime in UTC, reading naive values as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class TransactionRecord:
    """
    A single completed payment from the venue's trailing 12-month history.

    Attributes:
        amount: Payment amount in currency units (refunds may be negative)
        role: Whether this is a sale or a refund
        method: Payment method name, "CASH" for cash payments
        timestamp: When the payment was completed
    """
    amount: float
    role: TransactionRole
    method: str
    timestamp: datetime

    def __post_init__(self):
        # Month buckets and calendar windows are computed in UTC
        object.__setattr__(self, "timestamp", to_utc(self.timestamp))

    @property
    def is_sale(self) -> bool:
        return self.role == TransactionRole.SALE

    @property
    def is_refund(self) -> bool:
        return self.role == TransactionRole.REFUND


@dataclass(frozen=True)
class VenueIdentity:
    """Who is being assessed."""
    venue_id: str
    name: str
    slug: str
    organization_name: str = "N/A"


@dataclass(frozen=True)
class VenueMetrics:
    """
    Normalized metrics derived from a venue's transaction history.

    Recomputed on every assessment run. Every ratio is finite and
    non-negative; a zero denominator yields 0.
    """
    # Operating period
    first_transaction_date: Optional[datetime]
    last_transaction_date: Optional[datetime]
    days_in_operation: int
    is_new_business: bool

    # Volume
    raw_volume: float
    annualized_volume: float
    monthly_average: float
    current_month_volume: float
    previous_month_volume: float
    two_months_ago_volume: float
    transaction_count: int
    unique_operating_days: int
    average_ticket: float
    median_ticket: float

    # Growth
    mom_growth_percent: float
    three_month_trend: float
    velocity_score: float
    trend_direction: TrendDirection

    # Stability
    revenue_variance: float
    consistency_score: float
    operating_days_ratio: float
    days_since_last_transaction: int
    peak_to_trough_ratio: float

    # Risk
    chargeback_rate: float
    chargeback_count: int
    refund_rate: float
    refund_count: int
    large_transaction_ratio: float

    # Payment mix
    card_payment_ratio: float
    cash_payment_ratio: float
    payment_method_mix: Dict[str, int] = field(default_factory=dict)

    @property
    def transactions_per_day(self) -> float:
        """Sales per calendar day of operation."""
        return self.transaction_count / max(1, self.days_in_operation)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["trend_direction"] = self.trend_direction.value
        for key in ("first_transaction_date", "last_transaction_date"):
            value = data[key]
            data[key] = value.isoformat() if value else None
        return data


@dataclass(frozen=True)
class EligibilityGates:
    """Result of the six hard eligibility rules."""
    minimum_days_in_operation: bool
    minimum_volume: bool
    minimum_transactions: bool
    acceptable_chargeback_rate: bool
    recent_activity: bool
    minimum_operating_days: bool
    failures: Tuple[str, ...] = ()

    @property
    def passed(self) -> bool:
        return (
            self.minimum_days_in_operation
            and self.minimum_volume
            and self.minimum_transactions
            and self.acceptable_chargeback_rate
            and self.recent_activity
            and self.minimum_operating_days
        )

    def to_dict(self) -> dict:
        return {
            "passed": self.passed,
            "failures": list(self.failures),
            "minimum_days_in_operation": self.minimum_days_in_operation,
            "minimum_volume": self.minimum_volume,
            "minimum_transactions": self.minimum_transactions,
            "acceptable_chargeback_rate": self.acceptable_chargeback_rate,
            "recent_activity": self.recent_activity,
            "minimum_operating_days": self.minimum_operating_days,
        }


@dataclass(frozen=True)
class ScoreBreakdown:
    """Five pillar scores and the penalized composite, all 0-100."""
    volume_score: int
    growth_score: int
    stability_score: int
    risk_score: int
    maturity_score: int
    total_score: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class CreditRecommendation:
    """
    A sized and priced revenue-based credit offer.

    Attributes:
        recommended_credit_limit: Advance amount in currency units
        suggested_factor_rate: Multiplier applied to the limit (>= 1)
        total_repayment: limit x factor rate
        max_repayment_percent: Share of daily sales withheld for repayment
        estimated_term_days: Days to repay at the current sales pace
        monthly_payment_estimate: Repayment per 30 days
    """
    recommended_credit_limit: float
    suggested_factor_rate: float
    total_repayment: float
    max_repayment_percent: float
    estimated_term_days: int
    monthly_payment_estimate: float

    @classmethod
    def none(cls) -> "CreditRecommendation":
        """The all-zero recommendation given to ineligible venues."""
        return cls(
            recommended_credit_limit=0,
            suggested_factor_rate=0,
            total_repayment=0,
            max_repayment_percent=0,
            estimated_term_days=0,
            monthly_payment_estimate=0,
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class AssessmentResult:
    """
    The complete credit assessment for one venue at one point in time.

    The engine holds no state between runs; callers persist the result.
    """
    venue: VenueIdentity
    eligibility_gates: EligibilityGates
    score_breakdown: ScoreBreakdown
    credit_grade: CreditGrade
    eligibility_status: EligibilityStatus
    metrics: VenueMetrics
    recommendation: CreditRecommendation
    alerts: Tuple[str, ...]
    calculated_at: datetime
    data_as_of: datetime

    @property
    def credit_score(self) -> int:
        return self.score_breakdown.total_score

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "venue_id": self.venue.venue_id,
            "venue_name": self.venue.name,
            "venue_slug": self.venue.slug,
            "organization_name": self.venue.organization_name,
            "eligibility_gates": self.eligibility_gates.to_dict(),
            "credit_score": self.credit_score,
            "credit_grade": self.credit_grade.value,
            "eligibility_status": self.eligibility_status.value,
            "score_breakdown": self.score_breakdown.to_dict(),
            "metrics": self.metrics.to_dict(),
            "recommendation": self.recommendation.to_dict(),
            "alerts": list(self.alerts),
            "calculated_at": self.calculated_at.isoformat(),
            "data_as_of": self.data_as_of.isoformat(),
        }
