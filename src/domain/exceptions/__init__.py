"""Domain Exceptions - Business rule violations and domain errors."""

from .base import DomainException
from .assessment import (
    AssessmentNotFoundException,
    VenueIneligibleException,
)
from .offer import (
    InvalidOfferActionException,
    InvalidOfferRequestException,
    OfferAlreadyOutstandingException,
    OfferExpiredException,
    OfferNotFoundException,
    OfferNotPendingException,
)
from .venue import (
    VenueDataException,
    VenueDataTimeoutException,
    VenueNotFoundException,
)

__all__ = [
    "DomainException",
    "AssessmentNotFoundException",
    "VenueIneligibleException",
    "InvalidOfferActionException",
    "InvalidOfferRequestException",
    "OfferAlreadyOutstandingException",
    "OfferExpiredException",
    "OfferNotFoundException",
    "OfferNotPendingException",
    "VenueDataException",
    "VenueDataTimeoutException",
    "VenueNotFoundException",
]
