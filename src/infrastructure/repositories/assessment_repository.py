"""PostgreSQL implementation of AssessmentRepository."""

from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities import (
    AssessmentFilter,
    AssessmentSnapshot,
    CreditAssessment,
    PortfolioSummary,
)
from src.domain.interfaces import AssessmentRepository
from src.infrastructure.database.models import (
    CreditAssessmentHistoryModel,
    VenueCreditAssessmentModel,
    as_utc,
)
from src.service.scoring.models import CreditGrade, EligibilityStatus, TrendDirection

# Columns copied verbatim between the entity and the model
_ASSESSMENT_COLUMNS = (
    "venue_name",
    "venue_slug",
    "organization_name",
    "credit_score",
    "volume_score",
    "growth_score",
    "stability_score",
    "risk_score",
    "maturity_score",
    "annual_volume",
    "monthly_average",
    "current_month_volume",
    "transaction_count",
    "average_ticket",
    "mom_growth_percent",
    "three_month_trend",
    "revenue_variance",
    "consistency_score",
    "days_in_operation",
    "days_since_last_transaction",
    "operating_days_ratio",
    "chargeback_rate",
    "chargeback_count",
    "refund_rate",
    "card_payment_ratio",
    "payment_method_mix",
    "recommended_credit_limit",
    "suggested_factor_rate",
    "max_repayment_percent",
    "estimated_term_days",
    "alerts",
    "gate_failures",
    "calculated_at",
    "data_as_of",
)

_SORT_COLUMNS = {
    "credit_score": VenueCreditAssessmentModel.credit_score,
    "annual_volume": VenueCreditAssessmentModel.annual_volume,
    "calculated_at": VenueCreditAssessmentModel.calculated_at,
}

# Statuses counted as "eligible" in the portfolio summary
_SUMMARY_ELIGIBLE = (EligibilityStatus.ELIGIBLE.value, EligibilityStatus.REVIEW_REQUIRED.value)


class PostgresAssessmentRepository(AssessmentRepository):
    """
    PostgreSQL implementation of the assessment repository.

    Uses SQLAlchemy async session for database operations.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    @asynccontextmanager
    async def savepoint(self) -> AsyncIterator[None]:
        """Run the block inside a SAVEPOINT of the current transaction."""
        async with self._session.begin_nested():
            yield

    async def upsert(self, assessment: CreditAssessment) -> CreditAssessment:
        """Insert the venue's assessment or overwrite the existing row in place."""
        model = await self._get_model(assessment.venue_id)

        if model is None:
            model = VenueCreditAssessmentModel(
                id=str(assessment.id),
                venue_id=assessment.venue_id,
            )
            self._session.add(model)
        else:
            assessment.id = UUID(model.id)

        for column in _ASSESSMENT_COLUMNS:
            setattr(model, column, getattr(assessment, column))
        model.payment_method_mix = dict(assessment.payment_method_mix)
        model.alerts = list(assessment.alerts)
        model.gate_failures = list(assessment.gate_failures)
        model.credit_grade = assessment.credit_grade.value
        model.eligibility_status = assessment.eligibility_status.value
        model.trend_direction = assessment.trend_direction.value

        await self._session.flush()

        return assessment

    async def append_history(self, snapshot: AssessmentSnapshot) -> AssessmentSnapshot:
        """Append a snapshot row linked to the venue's current assessment."""
        assessment = await self._get_model(snapshot.venue_id)
        if assessment is None:
            raise ValueError(f"Cannot record history before assessing venue {snapshot.venue_id}")

        model = CreditAssessmentHistoryModel(
            id=str(snapshot.id),
            assessment_id=assessment.id,
            venue_id=snapshot.venue_id,
            credit_score=snapshot.credit_score,
            credit_grade=snapshot.credit_grade.value,
            annual_volume=snapshot.annual_volume,
            monthly_volume=snapshot.monthly_volume,
            growth_percent=snapshot.growth_percent,
            snapshot_date=snapshot.snapshot_date,
        )

        self._session.add(model)
        await self._session.flush()

        return snapshot

    async def get_by_venue_id(self, venue_id: str) -> Optional[CreditAssessment]:
        model = await self._get_model(venue_id)
        if model is None:
            return None
        return self._to_entity(model)

    async def update_eligibility(self, venue_id: str, status: EligibilityStatus) -> None:
        model = await self._get_model(venue_id)
        if model is None:
            return
        model.eligibility_status = status.value
        await self._session.flush()

    async def list(self, filters: AssessmentFilter) -> Tuple[List[CreditAssessment], int]:
        """Filter, sort and paginate current assessments."""
        conditions = []
        if filters.eligibility:
            conditions.append(
                VenueCreditAssessmentModel.eligibility_status.in_(
                    [status.value for status in filters.eligibility]
                )
            )
        if filters.grades:
            conditions.append(
                VenueCreditAssessmentModel.credit_grade.in_([grade.value for grade in filters.grades])
            )
        if filters.min_score is not None:
            conditions.append(VenueCreditAssessmentModel.credit_score >= filters.min_score)
        if filters.max_score is not None:
            conditions.append(VenueCreditAssessmentModel.credit_score <= filters.max_score)

        count_stmt = select(func.count()).select_from(VenueCreditAssessmentModel).where(*conditions)
        total = (await self._session.execute(count_stmt)).scalar_one()

        sort_column = _SORT_COLUMNS.get(filters.sort_by, VenueCreditAssessmentModel.credit_score)
        order = sort_column.asc() if filters.sort_order == "asc" else sort_column.desc()

        stmt = (
            select(VenueCreditAssessmentModel)
            .where(*conditions)
            .order_by(order, VenueCreditAssessmentModel.venue_id)
            .limit(filters.page_size)
            .offset(filters.offset)
        )
        result = await self._session.execute(stmt)
        models = result.scalars().all()

        return [self._to_entity(model) for model in models], total

    async def summary(self) -> PortfolioSummary:
        """Aggregate counts and available credit in the database."""
        totals_stmt = select(
            func.count(),
            func.coalesce(
                func.sum(
                    case(
                        (VenueCreditAssessmentModel.eligibility_status.in_(_SUMMARY_ELIGIBLE), 1),
                        else_=0,
                    )
                ),
                0,
            ),
            func.coalesce(
                func.sum(
                    case(
                        (
                            VenueCreditAssessmentModel.eligibility_status
                            == EligibilityStatus.ELIGIBLE.value,
                            VenueCreditAssessmentModel.recommended_credit_limit,
                        ),
                        else_=0,
                    )
                ),
                0,
            ),
        ).select_from(VenueCreditAssessmentModel)
        total, eligible, available_credit = (await self._session.execute(totals_stmt)).one()

        grade_stmt = select(
            VenueCreditAssessmentModel.credit_grade,
            func.count(),
        ).group_by(VenueCreditAssessmentModel.credit_grade)
        grade_rows = (await self._session.execute(grade_stmt)).all()

        distribution = {grade.value: 0 for grade in CreditGrade}
        for grade, count in grade_rows:
            distribution[grade] = count

        return PortfolioSummary(
            total_venues=total,
            eligible_count=int(eligible),
            grade_distribution=distribution,
            total_available_credit=float(available_credit),
            pending_offers=0,
        )

    async def get_history(self, venue_id: str, limit: int = 12) -> List[AssessmentSnapshot]:
        stmt = (
            select(CreditAssessmentHistoryModel)
            .where(CreditAssessmentHistoryModel.venue_id == venue_id)
            .order_by(CreditAssessmentHistoryModel.snapshot_date.desc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        models = result.scalars().all()

        return [
            AssessmentSnapshot(
                id=UUID(model.id),
                venue_id=model.venue_id,
                credit_score=model.credit_score,
                credit_grade=CreditGrade(model.credit_grade),
                annual_volume=model.annual_volume,
                monthly_volume=model.monthly_volume,
                growth_percent=model.growth_percent,
                snapshot_date=as_utc(model.snapshot_date),
            )
            for model in models
        ]

    async def _get_model(self, venue_id: str) -> Optional[VenueCreditAssessmentModel]:
        stmt = select(VenueCreditAssessmentModel).where(
            VenueCreditAssessmentModel.venue_id == venue_id
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    def _to_entity(self, model: VenueCreditAssessmentModel) -> CreditAssessment:
        values = {column: getattr(model, column) for column in _ASSESSMENT_COLUMNS}
        values["payment_method_mix"] = dict(model.payment_method_mix or {})
        values["alerts"] = list(model.alerts or [])
        values["gate_failures"] = list(model.gate_failures or [])
        values["calculated_at"] = as_utc(model.calculated_at)
        values["data_as_of"] = as_utc(model.data_as_of)

        return CreditAssessment(
            id=UUID(model.id),
            venue_id=model.venue_id,
            credit_grade=CreditGrade(model.credit_grade),
            eligibility_status=EligibilityStatus(model.eligibility_status),
            trend_direction=TrendDirection(model.trend_direction),
            **values,
        )
