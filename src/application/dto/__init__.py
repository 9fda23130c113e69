"""Data Transfer Objects for application layer."""

from .assessment import (
    AssessmentDetailsResponse,
    AssessmentListResponse,
    AssessmentRecordDTO,
    BatchRefreshResult,
    PortfolioSummaryResponse,
    SnapshotDTO,
    VenueAssessmentResponse,
)
from .offer import OFFER_ACTIONS, CreateOfferRequest, OfferResponse

__all__ = [
    "AssessmentDetailsResponse",
    "AssessmentListResponse",
    "AssessmentRecordDTO",
    "BatchRefreshResult",
    "PortfolioSummaryResponse",
    "SnapshotDTO",
    "VenueAssessmentResponse",
    "OFFER_ACTIONS",
    "CreateOfferRequest",
    "OfferResponse",
]
