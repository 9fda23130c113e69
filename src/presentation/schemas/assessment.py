"""Assessment-related Pydantic schemas."""

from datetime import datetime
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field

from .offer import OfferResponseSchema


class ScoreBreakdownSchema(BaseModel):
    """Schema for the pillar scores of an assessment."""

    model_config = ConfigDict(from_attributes=True)

    volume_score: int = Field(..., ge=0, le=100)
    growth_score: int = Field(..., ge=0, le=100)
    stability_score: int = Field(..., ge=0, le=100)
    risk_score: int = Field(..., ge=0, le=100)
    maturity_score: int = Field(..., ge=0, le=100)
    total_score: int = Field(
        ...,
        ge=0,
        le=100,
        description="Weighted composite after gate penalties",
    )


class EligibilityGatesSchema(BaseModel):
    """Schema for the hard eligibility rules."""

    model_config = ConfigDict(from_attributes=True)

    passed: bool
    failures: List[str] = Field(
        ...,
        description="Human-readable reason for every failed gate",
        examples=[["Minimum 90 days in operation required (currently 45)"]],
    )
    minimum_days_in_operation: bool
    minimum_volume: bool
    minimum_transactions: bool
    acceptable_chargeback_rate: bool
    recent_activity: bool
    minimum_operating_days: bool


class RecommendationSchema(BaseModel):
    """Schema for the engine's suggested offer."""

    model_config = ConfigDict(from_attributes=True)

    recommended_credit_limit: float = Field(..., ge=0, examples=[250000])
    suggested_factor_rate: float = Field(..., ge=0, examples=[1.12])
    total_repayment: float = Field(..., ge=0, examples=[280000])
    max_repayment_percent: float = Field(..., ge=0, le=1, examples=[0.12])
    estimated_term_days: int = Field(..., ge=0, examples=[98])
    monthly_payment_estimate: float = Field(..., ge=0, examples=[85714])


class VenueAssessmentSchema(BaseModel):
    """Schema for a freshly calculated venue assessment."""

    model_config = ConfigDict(from_attributes=True)

    venue_id: str
    venue_name: str
    venue_slug: str
    organization_name: str
    credit_score: int = Field(..., ge=0, le=100, examples=[78])
    credit_grade: str = Field(..., examples=["B"])
    eligibility_status: str = Field(
        ...,
        description="Eligibility decided by this calculation",
        examples=["ELIGIBLE"],
    )
    current_status: str = Field(
        ...,
        description="Stored eligibility, including offer lifecycle states",
        examples=["OFFER_PENDING"],
    )
    score_breakdown: ScoreBreakdownSchema
    eligibility_gates: EligibilityGatesSchema
    metrics: Dict[str, Any] = Field(..., description="Derived venue metrics")
    recommendation: RecommendationSchema
    alerts: List[str]
    calculated_at: datetime
    data_as_of: datetime


class AssessmentRecordSchema(BaseModel):
    """Schema for a stored venue assessment."""

    model_config = ConfigDict(from_attributes=True)

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


class AssessmentListSchema(BaseModel):
    """Schema for GET /v1/credit/assessments response."""

    model_config = ConfigDict(from_attributes=True)

    items: List[AssessmentRecordSchema]
    total: int = Field(..., ge=0)
    page: int = Field(..., ge=1)
    page_size: int = Field(..., ge=1)
    total_pages: int = Field(..., ge=0)


class SnapshotSchema(BaseModel):
    """Schema for a history snapshot."""

    model_config = ConfigDict(from_attributes=True)

    credit_score: int
    credit_grade: str
    annual_volume: float
    monthly_volume: float
    growth_percent: float
    snapshot_date: datetime


class AssessmentDetailsSchema(BaseModel):
    """Schema for GET /v1/credit/venues/{venue_id}/details response."""

    model_config = ConfigDict(from_attributes=True)

    assessment: AssessmentRecordSchema
    history: List[SnapshotSchema] = Field(..., description="Latest snapshots, newest first")
    offers: List[OfferResponseSchema] = Field(..., description="Latest offers, newest first")


class PortfolioSummarySchema(BaseModel):
    """Schema for GET /v1/credit/summary response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "examples": [
                {
                    "total_venues": 42,
                    "eligible_count": 17,
                    "grade_distribution": {"A": 6, "B": 11, "C": 9, "D": 16},
                    "total_available_credit": 4250000,
                    "pending_offers": 3,
                }
            ]
        },
    )

    total_venues: int
    eligible_count: int = Field(..., description="ELIGIBLE and REVIEW_REQUIRED venues")
    grade_distribution: Dict[str, int]
    total_available_credit: float = Field(
        ...,
        description="Sum of recommended limits across ELIGIBLE venues",
    )
    pending_offers: int


class BatchRefreshSchema(BaseModel):
    """Schema for POST /v1/credit/refresh-all response."""

    model_config = ConfigDict(from_attributes=True)

    success: int = Field(..., ge=0)
    failed: int = Field(..., ge=0)
    failed_venue_ids: List[str]
