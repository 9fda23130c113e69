"""Pydantic schemas for API request/response validation."""

from .assessment import (
    AssessmentDetailsSchema,
    AssessmentListSchema,
    AssessmentRecordSchema,
    BatchRefreshSchema,
    EligibilityGatesSchema,
    PortfolioSummarySchema,
    RecommendationSchema,
    ScoreBreakdownSchema,
    SnapshotSchema,
    VenueAssessmentSchema,
)
from .offer import CreateOfferRequestSchema, OfferActionSchema, OfferResponseSchema
from .error import ErrorResponseSchema

__all__ = [
    "AssessmentDetailsSchema",
    "AssessmentListSchema",
    "AssessmentRecordSchema",
    "BatchRefreshSchema",
    "EligibilityGatesSchema",
    "PortfolioSummarySchema",
    "RecommendationSchema",
    "ScoreBreakdownSchema",
    "SnapshotSchema",
    "VenueAssessmentSchema",
    "CreateOfferRequestSchema",
    "OfferActionSchema",
    "OfferResponseSchema",
    "ErrorResponseSchema",
]
