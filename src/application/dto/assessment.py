"""Data transfer objects for credit assessment operations."""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from src.domain.entities import AssessmentSnapshot, CreditAssessment, PortfolioSummary
from src.service.scoring.models import AssessmentResult

from .offer import OfferResponse


@dataclass(frozen=True)
class ScoreBreakdownDTO:
    """Pillar scores and the composite score."""

    volume_score: int
    growth_score: int
    stability_score: int
    risk_score: int
    maturity_score: int
    total_score: int


@dataclass(frozen=True)
class EligibilityGatesDTO:
    """Hard eligibility rule results."""

    passed: bool
    failures: List[str]
    minimum_days_in_operation: bool
    minimum_volume: bool
    minimum_transactions: bool
    acceptable_chargeback_rate: bool
    recent_activity: bool
    minimum_operating_days: bool


@dataclass(frozen=True)
class RecommendationDTO:
    """Sized credit offer suggested by the engine."""

    recommended_credit_limit: float
    suggested_factor_rate: float
    total_repayment: float
    max_repayment_percent: float
    estimated_term_days: int
    monthly_payment_estimate: float


@dataclass(frozen=True)
class VenueAssessmentResponse:
    """
    A freshly calculated assessment.

    `eligibility_status` is what the engine decided on this run;
    `current_status` is the stored status, which the offer lifecycle
    may have moved on (OFFER_PENDING, ACTIVE_LOAN).
    """

    venue_id: str
    venue_name: str
    venue_slug: str
    organization_name: str
    credit_score: int
    credit_grade: str
    eligibility_status: str
    current_status: str
    score_breakdown: ScoreBreakdownDTO
    eligibility_gates: EligibilityGatesDTO
    metrics: Dict[str, Any]
    recommendation: RecommendationDTO
    alerts: List[str]
    calculated_at: datetime
    data_as_of: datetime

    @classmethod
    def from_result(
        cls,
        result: AssessmentResult,
        current_status: Optional[str] = None,
    ) -> "VenueAssessmentResponse":
        gates = result.eligibility_gates
        breakdown = result.score_breakdown
        recommendation = result.recommendation
        return cls(
            venue_id=result.venue.venue_id,
            venue_name=result.venue.name,
            venue_slug=result.venue.slug,
            organization_name=result.venue.organization_name,
            credit_score=result.credit_score,
            credit_grade=result.credit_grade.value,
            eligibility_status=result.eligibility_status.value,
            current_status=current_status or result.eligibility_status.value,
            score_breakdown=ScoreBreakdownDTO(
                volume_score=breakdown.volume_score,
                growth_score=breakdown.growth_score,
                stability_score=breakdown.stability_score,
                risk_score=breakdown.risk_score,
                maturity_score=breakdown.maturity_score,
                total_score=breakdown.total_score,
            ),
            eligibility_gates=EligibilityGatesDTO(
                passed=gates.passed,
                failures=list(gates.failures),
                minimum_days_in_operation=gates.minimum_days_in_operation,
                minimum_volume=gates.minimum_volume,
                minimum_transactions=gates.minimum_transactions,
                acceptable_chargeback_rate=gates.acceptable_chargeback_rate,
                recent_activity=gates.recent_activity,
                minimum_operating_days=gates.minimum_operating_days,
            ),
            metrics=result.metrics.to_dict(),
            recommendation=RecommendationDTO(
                recommended_credit_limit=recommendation.recommended_credit_limit,
                suggested_factor_rate=recommendation.suggested_factor_rate,
                total_repayment=recommendation.total_repayment,
                max_repayment_percent=recommendation.max_repayment_percent,
                estimated_term_days=recommendation.estimated_term_days,
                monthly_payment_estimate=recommendation.monthly_payment_estimate,
            ),
            alerts=list(result.alerts),
            calculated_at=result.calculated_at,
            data_as_of=result.data_as_of,
        )


@dataclass(frozen=True)
class AssessmentRecordDTO:
    """A stored assessment as shown in listings and details."""

    id: str
    venue_id: str
    venue_name: str
    venue_slug: str
    organization_name: str
    credit_score: int
    credit_grade: str
    eligibility_status: str
    volume_score: int
    growth_score: int
    stability_score: int
    risk_score: int
    maturity_score: int
    annual_volume: float
    monthly_average: float
    current_month_volume: float
    transaction_count: int
    average_ticket: float
    mom_growth_percent: float
    three_month_trend: float
    trend_direction: str
    revenue_variance: float
    consistency_score: float
    days_in_operation: int
    days_since_last_transaction: int
    operating_days_ratio: float
    chargeback_rate: float
    refund_rate: float
    card_payment_ratio: float
    payment_method_mix: Dict[str, int]
    recommended_credit_limit: float
    suggested_factor_rate: float
    max_repayment_percent: float
    estimated_term_days: int
    alerts: List[str]
    calculated_at: datetime

    @classmethod
    def from_entity(cls, assessment: CreditAssessment) -> "AssessmentRecordDTO":
        return cls(
            id=str(assessment.id),
            venue_id=assessment.venue_id,
            venue_name=assessment.venue_name,
            venue_slug=assessment.venue_slug,
            organization_name=assessment.organization_name,
            credit_score=assessment.credit_score,
            credit_grade=assessment.credit_grade.value,
            eligibility_status=assessment.eligibility_status.value,
            volume_score=assessment.volume_score,
            growth_score=assessment.growth_score,
            stability_score=assessment.stability_score,
            risk_score=assessment.risk_score,
            maturity_score=assessment.maturity_score,
            annual_volume=assessment.annual_volume,
            monthly_average=assessment.monthly_average,
            current_month_volume=assessment.current_month_volume,
            transaction_count=assessment.transaction_count,
            average_ticket=assessment.average_ticket,
            mom_growth_percent=assessment.mom_growth_percent,
            three_month_trend=assessment.three_month_trend,
            trend_direction=assessment.trend_direction.value,
            revenue_variance=assessment.revenue_variance,
            consistency_score=assessment.consistency_score,
            days_in_operation=assessment.days_in_operation,
            days_since_last_transaction=assessment.days_since_last_transaction,
            operating_days_ratio=assessment.operating_days_ratio,
            chargeback_rate=assessment.chargeback_rate,
            refund_rate=assessment.refund_rate,
            card_payment_ratio=assessment.card_payment_ratio,
            payment_method_mix=dict(assessment.payment_method_mix),
            recommended_credit_limit=assessment.recommended_credit_limit,
            suggested_factor_rate=assessment.suggested_factor_rate,
            max_repayment_percent=assessment.max_repayment_percent,
            estimated_term_days=assessment.estimated_term_days,
            alerts=list(assessment.alerts),
            calculated_at=assessment.calculated_at,
        )


@dataclass(frozen=True)
class AssessmentListResponse:
    """One page of stored assessments."""

    items: List[AssessmentRecordDTO]
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.page_size else 0


@dataclass(frozen=True)
class SnapshotDTO:
    """A point in a venue's assessment history."""

    credit_score: int
    credit_grade: str
    annual_volume: float
    monthly_volume: float
    growth_percent: float
    snapshot_date: datetime

    @classmethod
    def from_entity(cls, snapshot: AssessmentSnapshot) -> "SnapshotDTO":
        return cls(
            credit_score=snapshot.credit_score,
            credit_grade=snapshot.credit_grade.value,
            annual_volume=snapshot.annual_volume,
            monthly_volume=snapshot.monthly_volume,
            growth_percent=snapshot.growth_percent,
            snapshot_date=snapshot.snapshot_date,
        )


@dataclass(frozen=True)
class AssessmentDetailsResponse:
    """Current assessment with recent history and offers."""

    assessment: AssessmentRecordDTO
    history: List[SnapshotDTO]
    offers: List[OfferResponse]


@dataclass(frozen=True)
class PortfolioSummaryResponse:
    """Portfolio-wide statistics for the credit dashboard."""

    total_venues: int
    eligible_count: int
    grade_distribution: Dict[str, int]
    total_available_credit: float
    pending_offers: int

    @classmethod
    def from_entity(cls, summary: PortfolioSummary) -> "PortfolioSummaryResponse":
        return cls(
            total_venues=summary.total_venues,
            eligible_count=summary.eligible_count,
            grade_distribution=dict(summary.grade_distribution),
            total_available_credit=summary.total_available_credit,
            pending_offers=summary.pending_offers,
        )


@dataclass(frozen=True)
class BatchRefreshResult:
    """Outcome of re-assessing every active venue."""

    success: int
    failed: int
    failed_venue_ids: List[str] = field(default_factory=list)
