"""Credit offer domain exceptions."""

from .base import DomainException


class OfferNotFoundException(DomainException):
    """Raised when a credit offer cannot be found."""

    def __init__(self, offer_id: str):
        super().__init__(
            message=f"Offer not found: {offer_id}",
            code="OFFER_NOT_FOUND",
        )
        self.offer_id = offer_id


class OfferNotPendingException(DomainException):
    """Raised when acting on an offer that is no longer pending."""

    def __init__(self, offer_id: str, status: str):
        super().__init__(
            message=f"Offer {offer_id} is no longer pending (status: {status})",
            code="OFFER_NOT_PENDING",
        )
        self.offer_id = offer_id
        self.status = status


class OfferExpiredException(DomainException):
    """Raised when accepting an offer past its expiry date."""

    def __init__(self, offer_id: str):
        super().__init__(
            message=f"Offer has expired: {offer_id}",
            code="OFFER_EXPIRED",
        )
        self.offer_id = offer_id


class InvalidOfferActionException(DomainException):
    """Raised for an unknown offer action."""

    def __init__(self, action: str):
        super().__init__(
            message=f"Unknown offer action: {action} (expected accept, reject or withdraw)",
            code="INVALID_OFFER_ACTION",
        )
        self.action = action


class InvalidOfferRequestException(DomainException):
    """Raised when offer terms fail validation."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="INVALID_OFFER_REQUEST",
        )


class OfferAlreadyOutstandingException(DomainException):
    """Raised when a venue already has a pending offer or an active loan."""

    def __init__(self, venue_id: str, status: str):
        super().__init__(
            message=f"Venue {venue_id} already has an offer in progress (status: {status})",
            code="OFFER_ALREADY_OUTSTANDING",
        )
        self.venue_id = venue_id
        self.status = status
