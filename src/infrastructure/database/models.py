"""SQLAlchemy ORM models for venue credit entities."""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import (
    DateTime,
    Float,
    ForeignKey,
    Integer,
    JSON,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from src.domain.entities import utcnow


class Base(DeclarativeBase):
    pass


def as_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to datetimes read back from backends that drop the zone (SQLite)."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class VenueCreditAssessmentModel(Base):
    """Current credit assessment, one row per venue."""

    __tablename__ = "venue_credit_assessments"

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    venue_id: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    venue_name: Mapped[str] = mapped_column(String(255), nullable=False)
    venue_slug: Mapped[str] = mapped_column(String(255), nullable=False)
    organization_name: Mapped[str] = mapped_column(String(255), nullable=False)

    credit_score: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    credit_grade: Mapped[str] = mapped_column(String(1), nullable=False, index=True)
    eligibility_status: Mapped[str] = mapped_column(String(50), nullable=False, index=True)

    volume_score: Mapped[int] = mapped_column(Integer, nullable=False)
    growth_score: Mapped[int] = mapped_column(Integer, nullable=False)
    stability_score: Mapped[int] = mapped_column(Integer, nullable=False)
    risk_score: Mapped[int] = mapped_column(Integer, nullable=False)
    maturity_score: Mapped[int] = mapped_column(Integer, nullable=False)

    annual_volume: Mapped[float] = mapped_column(Float, nullable=False)
    monthly_average: Mapped[float] = mapped_column(Float, nullable=False)
    current_month_volume: Mapped[float] = mapped_column(Float, nullable=False)
    transaction_count: Mapped[int] = mapped_column(Integer, nullable=False)
    average_ticket: Mapped[float] = mapped_column(Float, nullable=False)

    mom_growth_percent: Mapped[float] = mapped_column(Float, nullable=False)
    three_month_trend: Mapped[float] = mapped_column(Float, nullable=False)
    trend_direction: Mapped[str] = mapped_column(String(20), nullable=False)

    revenue_variance: Mapped[float] = mapped_column(Float, nullable=False)
    consistency_score: Mapped[float] = mapped_column(Float, nullable=False)
    days_in_operation: Mapped[int] = mapped_column(Integer, nullable=False)
    days_since_last_transaction: Mapped[int] = mapped_column(Integer, nullable=False)
    operating_days_ratio: Mapped[float] = mapped_column(Float, nullable=False)

    chargeback_rate: Mapped[float] = mapped_column(Float, nullable=False)
    chargeback_count: Mapped[int] = mapped_column(Integer, nullable=False)
    refund_rate: Mapped[float] = mapped_column(Float, nullable=False)
    card_payment_ratio: Mapped[float] = mapped_column(Float, nullable=False)
    payment_method_mix: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)

    recommended_credit_limit: Mapped[float] = mapped_column(Float, nullable=False)
    suggested_factor_rate: Mapped[float] = mapped_column(Float, nullable=False)
    max_repayment_percent: Mapped[float] = mapped_column(Float, nullable=False)
    estimated_term_days: Mapped[int] = mapped_column(Integer, nullable=False)

    alerts: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    gate_failures: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    calculated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    data_as_of: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    history: Mapped[list["CreditAssessmentHistoryModel"]] = relationship(
        "CreditAssessmentHistoryModel",
        back_populates="assessment",
        cascade="all, delete-orphan",
    )


class CreditAssessmentHistoryModel(Base):
    """Append-only snapshot written on every assessment run."""

    __tablename__ = "credit_assessment_history"

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    assessment_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("venue_credit_assessments.id", ondelete="CASCADE"),
        nullable=False,
    )
    venue_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    credit_score: Mapped[int] = mapped_column(Integer, nullable=False)
    credit_grade: Mapped[str] = mapped_column(String(1), nullable=False)
    annual_volume: Mapped[float] = mapped_column(Float, nullable=False)
    monthly_volume: Mapped[float] = mapped_column(Float, nullable=False)
    growth_percent: Mapped[float] = mapped_column(Float, nullable=False)
    snapshot_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    assessment: Mapped["VenueCreditAssessmentModel"] = relationship(
        "VenueCreditAssessmentModel",
        back_populates="history",
    )


class CreditOfferModel(Base):
    """Persisted credit offer."""

    __tablename__ = "credit_offers"

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    assessment_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("venue_credit_assessments.id", ondelete="CASCADE"),
        nullable=False,
    )
    venue_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    offer_amount: Mapped[float] = mapped_column(Float, nullable=False)
    factor_rate: Mapped[float] = mapped_column(Float, nullable=False)
    total_repayment: Mapped[float] = mapped_column(Float, nullable=False)
    repayment_percent: Mapped[float] = mapped_column(Float, nullable=False)
    estimated_term_days: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="PENDING", index=True)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    accepted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    accepted_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    rejected_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    withdrawn_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
