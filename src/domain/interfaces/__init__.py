"""
Domain Interfaces (Ports)
"""

from .repositories import AssessmentRepository, OfferRepository
from .clients import VenueDataClient

__all__ = [
    "AssessmentRepository",
    "OfferRepository",
    "VenueDataClient",
]
