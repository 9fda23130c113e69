"""Credit assessment entities: the current assessment and its history."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional
from uuid import UUID, uuid4

from src.service.scoring.models import (
    AssessmentResult,
    CreditGrade,
    EligibilityStatus,
    TrendDirection,
)


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass
class CreditAssessment:
    """
    The current credit assessment of a venue.

    One row per venue, replaced on every re-assessment. The eligibility
    status may later be moved along the offer lifecycle by the offer
    service (OFFER_PENDING, ACTIVE_LOAN).
    """

    venue_id: str
    venue_name: str
    venue_slug: str
    organization_name: str
    credit_score: int
    credit_grade: CreditGrade
    eligibility_status: EligibilityStatus

    # Pillar scores
    volume_score: int
    growth_score: int
    stability_score: int
    risk_score: int
    maturity_score: int

    # Volume
    annual_volume: float
    monthly_average: float
    current_month_volume: float
    transaction_count: int
    average_ticket: float

    # Growth
    mom_growth_percent: float
    three_month_trend: float
    trend_direction: TrendDirection

    # Stability
    revenue_variance: float
    consistency_score: float
    days_in_operation: int
    days_since_last_transaction: int
    operating_days_ratio: float

    # Risk
    chargeback_rate: float
    chargeback_count: int
    refund_rate: float
    card_payment_ratio: float
    payment_method_mix: Dict[str, int]

    # Recommendation
    recommended_credit_limit: float
    suggested_factor_rate: float
    max_repayment_percent: float
    estimated_term_days: int

    alerts: List[str]
    gate_failures: List[str]
    calculated_at: datetime
    data_as_of: datetime
    id: UUID = field(default_factory=uuid4)

    @classmethod
    def from_result(cls, result: AssessmentResult) -> "CreditAssessment":
        """Flatten an engine result into the persisted assessment."""
        metrics = result.metrics
        breakdown = result.score_breakdown
        recommendation = result.recommendation
        return cls(
            venue_id=result.venue.venue_id,
            venue_name=result.venue.name,
            venue_slug=result.venue.slug,
            organization_name=result.venue.organization_name,
            credit_score=breakdown.total_score,
            credit_grade=result.credit_grade,
            eligibility_status=result.eligibility_status,
            volume_score=breakdown.volume_score,
            growth_score=breakdown.growth_score,
            stability_score=breakdown.stability_score,
            risk_score=breakdown.risk_score,
            maturity_score=breakdown.maturity_score,
            annual_volume=metrics.annualized_volume,
            monthly_average=metrics.monthly_average,
            current_month_volume=metrics.current_month_volume,
            transaction_count=metrics.transaction_count,
            average_ticket=metrics.average_ticket,
            mom_growth_percent=metrics.mom_growth_percent,
            three_month_trend=metrics.three_month_trend,
            trend_direction=metrics.trend_direction,
            revenue_variance=metrics.revenue_variance,
            consistency_score=metrics.consistency_score,
            days_in_operation=metrics.days_in_operation,
            days_since_last_transaction=metrics.days_since_last_transaction,
            operating_days_ratio=metrics.operating_days_ratio,
            chargeback_rate=metrics.chargeback_rate,
            chargeback_count=metrics.chargeback_count,
            refund_rate=metrics.refund_rate,
            card_payment_ratio=metrics.card_payment_ratio,
            payment_method_mix=dict(metrics.payment_method_mix),
            recommended_credit_limit=recommendation.recommended_credit_limit,
            suggested_factor_rate=recommendation.suggested_factor_rate,
            max_repayment_percent=recommendation.max_repayment_percent,
            estimated_term_days=recommendation.estimated_term_days,
            alerts=list(result.alerts),
            gate_failures=list(result.eligibility_gates.failures),
            calculated_at=result.calculated_at,
            data_as_of=result.data_as_of,
        )

    def to_snapshot(self) -> "AssessmentSnapshot":
        """Build the history row recorded alongside this assessment."""
        return AssessmentSnapshot(
            venue_id=self.venue_id,
            credit_score=self.credit_score,
            credit_grade=self.credit_grade,
            annual_volume=self.annual_volume,
            monthly_volume=self.monthly_average,
            growth_percent=self.mom_growth_percent,
            snapshot_date=self.calculated_at,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": str(self.id),
            "venue_id": self.venue_id,
            "venue_name": self.venue_name,
            "venue_slug": self.venue_slug,
            "organization_name": self.organization_name,
            "credit_score": self.credit_score,
            "credit_grade": self.credit_grade.value,
            "eligibility_status": self.eligibility_status.value,
            "annual_volume": self.annual_volume,
            "mom_growth_percent": self.mom_growth_percent,
            "trend_direction": self.trend_direction.value,
            "recommended_credit_limit": self.recommended_credit_limit,
            "alerts": list(self.alerts),
            "calculated_at": _isoformat(self.calculated_at),
        }


@dataclass(frozen=True)
class AssessmentSnapshot:
    """An immutable point-in-time record of a venue's assessment."""

    venue_id: str
    credit_score: int
    credit_grade: CreditGrade
    annual_volume: float
    monthly_volume: float
    growth_percent: float
    snapshot_date: datetime
    id: UUID = field(default_factory=uuid4)

    def to_dict(self) -> dict:
        return {
            "credit_score": self.credit_score,
            "credit_grade": self.credit_grade.value,
            "annual_volume": self.annual_volume,
            "monthly_volume": self.monthly_volume,
            "growth_percent": self.growth_percent,
            "snapshot_date": _isoformat(self.snapshot_date),
        }


@dataclass
class AssessmentFilter:
    """Filtering, sorting and paging options for listing assessments."""

    eligibility: List[EligibilityStatus] = field(default_factory=list)
    grades: List[CreditGrade] = field(default_factory=list)
    min_score: Optional[int] = None
    max_score: Optional[int] = None
    sort_by: str = "credit_score"
    sort_order: str = "desc"
    page: int = 1
    page_size: int = 20

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


@dataclass(frozen=True)
class PortfolioSummary:
    """Aggregate statistics across all current assessments."""

    total_venues: int
    eligible_count: int
    grade_distribution: Dict[str, int]
    total_available_credit: float
    pending_offers: int

    def to_dict(self) -> dict:
        return {
            "total_venues": self.total_venues,
            "eligible_count": self.eligible_count,
            "grade_distribution": dict(self.grade_distribution),
            "total_available_credit": self.total_available_credit,
            "pending_offers": self.pending_offers,
        }
