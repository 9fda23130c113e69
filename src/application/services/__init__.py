"""Application services (use cases)."""

from .assessment_service import AssessmentService
from .offer_service import OfferService

__all__ = [
    "AssessmentService",
    "OfferService",
]
