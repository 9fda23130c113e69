"""Credit offer entity and its lifecycle."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from src.domain.exceptions import OfferExpiredException, OfferNotPendingException
from src.service.scoring.models import round_half_up
from src.service.scoring.recommendation import estimate_term_days

from .assessment import utcnow


class CreditOfferStatus(str, Enum):
    """Status of a credit offer."""

    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    WITHDRAWN = "WITHDRAWN"
    EXPIRED = "EXPIRED"


@dataclass
class CreditOffer:
    """
    A revenue-based credit offer extended to a venue.

    Offers start PENDING and move exactly once to ACCEPTED, REJECTED,
    WITHDRAWN or EXPIRED. Total repayment and the estimated term are
    fixed when the offer is created.
    """

    venue_id: str
    assessment_id: UUID
    offer_amount: float
    factor_rate: float
    repayment_percent: float
    total_repayment: float
    estimated_term_days: int
    expires_at: datetime
    id: UUID = field(default_factory=uuid4)
    status: CreditOfferStatus = CreditOfferStatus.PENDING
    notes: Optional[str] = None
    created_by: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)
    accepted_at: Optional[datetime] = None
    accepted_by: Optional[str] = None
    rejected_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    withdrawn_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        venue_id: str,
        assessment_id: UUID,
        annual_volume: float,
        offer_amount: float,
        factor_rate: float,
        repayment_percent: float,
        expires_in_days: int = 30,
        notes: Optional[str] = None,
        created_by: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> "CreditOffer":
        """Price a new pending offer against the venue's annual volume."""
        now = now or utcnow()
        total_repayment = round_half_up(offer_amount * factor_rate)
        return cls(
            venue_id=venue_id,
            assessment_id=assessment_id,
            offer_amount=offer_amount,
            factor_rate=factor_rate,
            repayment_percent=repayment_percent,
            total_repayment=total_repayment,
            estimated_term_days=estimate_term_days(
                total_repayment, annual_volume, repayment_percent
            ),
            expires_at=now + timedelta(days=expires_in_days),
            notes=notes,
            created_by=created_by,
            created_at=now,
        )

    @property
    def is_pending(self) -> bool:
        return self.status == CreditOfferStatus.PENDING

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return self.expires_at < (now or utcnow())

    def _ensure_pending(self) -> None:
        if not self.is_pending:
            raise OfferNotPendingException(str(self.id), self.status.value)

    def accept(self, staff_id: Optional[str] = None, now: Optional[datetime] = None) -> None:
        """Accept a pending, unexpired offer."""
        now = now or utcnow()
        self._ensure_pending()
        if self.is_expired(now):
            raise OfferExpiredException(str(self.id))
        self.status = CreditOfferStatus.ACCEPTED
        self.accepted_at = now
        self.accepted_by = staff_id

    def reject(self, reason: Optional[str] = None, now: Optional[datetime] = None) -> None:
        """Record that the venue declined the offer."""
        self._ensure_pending()
        self.status = CreditOfferStatus.REJECTED
        self.rejected_at = now or utcnow()
        self.rejection_reason = reason

    def withdraw(self, now: Optional[datetime] = None) -> None:
        """Pull the offer back before the venue answers."""
        self._ensure_pending()
        self.status = CreditOfferStatus.WITHDRAWN
        self.withdrawn_at = now or utcnow()

    def expire(self) -> None:
        """Close a pending offer whose deadline has passed."""
        self._ensure_pending()
        self.status = CreditOfferStatus.EXPIRED

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "offer_id": str(self.id),
            "venue_id": self.venue_id,
            "offer_amount": self.offer_amount,
            "factor_rate": self.factor_rate,
            "total_repayment": self.total_repayment,
            "repayment_percent": self.repayment_percent,
            "estimated_term_days": self.estimated_term_days,
            "status": self.status.value,
            "expires_at": self.expires_at.isoformat(),
            "created_at": self.created_at.isoformat(),
        }
