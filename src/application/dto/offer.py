"""Data transfer objects for credit offer operations."""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from src.domain.entities import CreditOffer

OFFER_ACTIONS = ("accept", "reject", "withdraw")


@dataclass(frozen=True)
class CreateOfferRequest:
    """Input data for extending a credit offer to a venue."""

    offer_amount: float
    factor_rate: float
    repayment_percent: float
    expires_in_days: int = 30
    notes: Optional[str] = None
    created_by: Optional[str] = None

    def validate(self) -> List[str]:
        errors = []

        if self.offer_amount <= 0:
            errors.append("offer_amount must be positive")

        if self.factor_rate < 1:
            errors.append("factor_rate must be at least 1")

        if not 0 < self.repayment_percent <= 1:
            errors.append("repayment_percent must be in (0, 1]")

        if self.expires_in_days <= 0:
            errors.append("expires_in_days must be positive")

        return errors


@dataclass(frozen=True)
class OfferResponse:
    """Response data for a credit offer."""

    offer_id: str
    venue_id: str
    offer_amount: float
    factor_rate: float
    total_repayment: float
    repayment_percent: float
    estimated_term_days: int
    status: str
    expires_at: datetime
    created_at: datetime
    notes: Optional[str] = None
    created_by: Optional[str] = None
    accepted_at: Optional[datetime] = None
    rejected_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    withdrawn_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, offer: CreditOffer) -> "OfferResponse":
        return cls(
            offer_id=str(offer.id),
            venue_id=offer.venue_id,
            offer_amount=offer.offer_amount,
            factor_rate=offer.factor_rate,
            total_repayment=offer.total_repayment,
            repayment_percent=offer.repayment_percent,
            estimated_term_days=offer.estimated_term_days,
            status=offer.status.value,
            expires_at=offer.expires_at,
            created_at=offer.created_at,
            notes=offer.notes,
            created_by=offer.created_by,
            accepted_at=offer.accepted_at,
            rejected_at=offer.rejected_at,
            rejection_reason=offer.rejection_reason,
            withdrawn_at=offer.withdrawn_at,
        )
