"""Repository implementations."""

from .assessment_repository import PostgresAssessmentRepository
from .offer_repository import PostgresOfferRepository

__all__ = [
    "PostgresAssessmentRepository",
    "PostgresOfferRepository",
]
