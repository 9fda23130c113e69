"""PostgreSQL implementation of OfferRepository."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities import CreditOffer, CreditOfferStatus
from src.domain.interfaces import OfferRepository
from src.infrastructure.database.models import CreditOfferModel, as_utc


class PostgresOfferRepository(OfferRepository):
    """
    PostgreSQL implementation of the credit offer repository.

    Uses SQLAlchemy async session for database operations.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def save(self, offer: CreditOffer) -> CreditOffer:
        """Persist a new offer to the database."""
        model = CreditOfferModel(
            id=str(offer.id),
            assessment_id=str(offer.assessment_id),
            venue_id=offer.venue_id,
            offer_amount=offer.offer_amount,
            factor_rate=offer.factor_rate,
            total_repayment=offer.total_repayment,
            repayment_percent=offer.repayment_percent,
            estimated_term_days=offer.estimated_term_days,
            status=offer.status.value,
            expires_at=offer.expires_at,
            notes=offer.notes,
            created_by=offer.created_by,
            created_at=offer.created_at,
        )

        self._session.add(model)
        await self._session.flush()

        return offer

    async def update(self, offer: CreditOffer) -> CreditOffer:
        """Write lifecycle fields of an existing offer."""
        model = await self._get_model(offer.id)

        if model is None:
            raise ValueError(f"Offer {offer.id} not found")

        model.status = offer.status.value
        model.accepted_at = offer.accepted_at
        model.accepted_by = offer.accepted_by
        model.rejected_at = offer.rejected_at
        model.rejection_reason = offer.rejection_reason
        model.withdrawn_at = offer.withdrawn_at

        await self._session.flush()

        return offer

    async def get_by_id(self, offer_id: UUID) -> Optional[CreditOffer]:
        model = await self._get_model(offer_id)

        if model is None:
            return None

        return self._to_entity(model)

    async def get_by_venue_id(self, venue_id: str, limit: Optional[int] = None) -> List[CreditOffer]:
        stmt = (
            select(CreditOfferModel)
            .where(CreditOfferModel.venue_id == venue_id)
            .order_by(CreditOfferModel.created_at.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)

        result = await self._session.execute(stmt)
        models = result.scalars().all()

        return [self._to_entity(model) for model in models]

    async def count_pending(self) -> int:
        stmt = (
            select(func.count())
            .select_from(CreditOfferModel)
            .where(CreditOfferModel.status == CreditOfferStatus.PENDING.value)
        )
        return (await self._session.execute(stmt)).scalar_one()

    async def list_expired_pending(self, now: datetime) -> List[CreditOffer]:
        stmt = (
            select(CreditOfferModel)
            .where(
                CreditOfferModel.status == CreditOfferStatus.PENDING.value,
                CreditOfferModel.expires_at < now,
            )
            .order_by(CreditOfferModel.expires_at)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars().all()]

    async def _get_model(self, offer_id: UUID) -> Optional[CreditOfferModel]:
        stmt = select(CreditOfferModel).where(CreditOfferModel.id == str(offer_id))
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    def _to_entity(self, model: CreditOfferModel) -> CreditOffer:
        return CreditOffer(
            id=UUID(model.id),
            assessment_id=UUID(model.assessment_id),
            venue_id=model.venue_id,
            offer_amount=model.offer_amount,
            factor_rate=model.factor_rate,
            total_repayment=model.total_repayment,
            repayment_percent=model.repayment_percent,
            estimated_term_days=model.estimated_term_days,
            status=CreditOfferStatus(model.status),
            expires_at=as_utc(model.expires_at),
            notes=model.notes,
            created_by=model.created_by,
            created_at=as_utc(model.created_at),
            accepted_at=as_utc(model.accepted_at),
            accepted_by=model.accepted_by,
            rejected_at=as_utc(model.rejected_at),
            rejection_reason=model.rejection_reason,
            withdrawn_at=as_utc(model.withdrawn_at),
        )
