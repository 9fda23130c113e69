"""Domain Entities - Core business objects."""

from .assessment import (
    AssessmentFilter,
    AssessmentSnapshot,
    CreditAssessment,
    PortfolioSummary,
    utcnow,
)
from .offer import CreditOffer, CreditOfferStatus
from .venue import Venue

__all__ = [
    "AssessmentFilter",
    "AssessmentSnapshot",
    "CreditAssessment",
    "CreditOffer",
    "CreditOfferStatus",
    "PortfolioSummary",
    "Venue",
    "utcnow",
]
