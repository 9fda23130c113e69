"""Offer service - manages the credit offer lifecycle."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

import structlog

from src.application.dto import OFFER_ACTIONS, CreateOfferRequest, OfferResponse
from src.core.metrics import record_offer_action
from src.domain.entities import CreditOffer, utcnow
from src.domain.exceptions import (
    AssessmentNotFoundException,
    InvalidOfferActionException,
    InvalidOfferRequestException,
    OfferAlreadyOutstandingException,
    OfferNotFoundException,
    VenueIneligibleException,
)
from src.domain.interfaces import AssessmentRepository, OfferRepository
from src.service.scoring.models import EligibilityStatus

logger = structlog.get_logger(__name__)

# Venue eligibility after each offer action
STATUS_AFTER_ACTION = {
    "accept": EligibilityStatus.ACTIVE_LOAN,
    "reject": EligibilityStatus.ELIGIBLE,
    "withdraw": EligibilityStatus.ELIGIBLE,
    "expire": EligibilityStatus.ELIGIBLE,
}


class OfferService:
    """
    Application service for credit offers.

    Keeps the venue's eligibility status in step with its offers.
    """

    def __init__(
        self,
        assessment_repository: AssessmentRepository,
        offer_repository: OfferRepository,
    ):
        self._assessment_repo = assessment_repository
        self._offer_repo = offer_repository

    async def create_offer(self, venue_id: str, request: CreateOfferRequest) -> OfferResponse:
        """
        Extend a credit offer to an assessed venue.

        Args:
            venue_id: The venue's identifier
            request: Offer terms chosen by staff

        Returns:
            OfferResponse for the new PENDING offer

        Raises:
            InvalidOfferRequestException: If the terms fail validation
            AssessmentNotFoundException: If the venue was never assessed
            VenueIneligibleException: If the venue is INELIGIBLE
            OfferAlreadyOutstandingException: If an offer or loan is in progress
        """
        errors = request.validate()
        if errors:
            raise InvalidOfferRequestException("; ".join(errors))

        log = logger.bind(venue_id=venue_id, offer_amount=request.offer_amount)

        assessment = await self._assessment_repo.get_by_venue_id(venue_id)
        if assessment is None:
            raise AssessmentNotFoundException(venue_id)

        status = assessment.eligibility_status
        if status == EligibilityStatus.INELIGIBLE:
            raise VenueIneligibleException(venue_id)
        if not status.can_transition_to(EligibilityStatus.OFFER_PENDING):
            raise OfferAlreadyOutstandingException(venue_id, status.value)

        offer = CreditOffer.create(
            venue_id=venue_id,
            assessment_id=assessment.id,
            annual_volume=assessment.annual_volume,
            offer_amount=request.offer_amount,
            factor_rate=request.factor_rate,
            repayment_percent=request.repayment_percent,
            expires_in_days=request.expires_in_days,
            notes=request.notes,
            created_by=request.created_by,
        )

        await self._offer_repo.save(offer)
        await self._assessment_repo.update_eligibility(venue_id, EligibilityStatus.OFFER_PENDING)

        record_offer_action("create")
        log.info(
            "offer_created",
            offer_id=str(offer.id),
            total_repayment=offer.total_repayment,
            estimated_term_days=offer.estimated_term_days,
        )

        return OfferResponse.from_entity(offer)

    async def update_offer_status(
        self,
        offer_id: UUID,
        action: str,
        staff_id: Optional[str] = None,
        rejection_reason: Optional[str] = None,
    ) -> OfferResponse:
        """
        Accept, reject or withdraw a pending offer.

        Raises:
            InvalidOfferActionException: If the action is unknown
            OfferNotFoundException: If the offer doesn't exist
            OfferNotPendingException: If the offer was already answered
            OfferExpiredException: If accepting after expiry
        """
        if action not in OFFER_ACTIONS:
            raise InvalidOfferActionException(action)

        offer = await self._offer_repo.get_by_id(offer_id)
        if offer is None:
            raise OfferNotFoundException(str(offer_id))

        if action == "accept":
            offer.accept(staff_id)
        elif action == "reject":
            offer.reject(rejection_reason)
        else:
            offer.withdraw()

        await self._offer_repo.update(offer)
        await self._assessment_repo.update_eligibility(offer.venue_id, STATUS_AFTER_ACTION[action])

        record_offer_action(action)
        logger.info(
            "offer_status_updated",
            offer_id=str(offer.id),
            venue_id=offer.venue_id,
            action=action,
            status=offer.status.value,
            staff_id=staff_id,
        )

        return OfferResponse.from_entity(offer)

    async def get_venue_offers(self, venue_id: str) -> List[OfferResponse]:
        """All offers made to a venue, newest first."""
        offers = await self._offer_repo.get_by_venue_id(venue_id)
        return [OfferResponse.from_entity(o) for o in offers]

    async def expire_offers(self, now: Optional[datetime] = None) -> List[OfferResponse]:
        """
        Close pending offers past their expiry and free their venues.

        Returns:
            The offers that were expired
        """
        now = now or utcnow()
        offers = await self._offer_repo.list_expired_pending(now)

        for offer in offers:
            offer.expire()
            await self._offer_repo.update(offer)
            await self._assessment_repo.update_eligibility(
                offer.venue_id, STATUS_AFTER_ACTION["expire"]
            )
            record_offer_action("expire")

        if offers:
            logger.info("offers_expired", count=len(offers))

        return [OfferResponse.from_entity(o) for o in offers]
