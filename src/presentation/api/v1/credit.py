"""Credit assessment API endpoints."""

from typing import Annotated, List, Literal, Optional

from fastapi import APIRouter, Depends, Path, Query

from src.application.services import AssessmentService
from src.core.dependencies import get_assessment_service
from src.domain.entities import AssessmentFilter
from src.presentation.schemas import (
    AssessmentDetailsSchema,
    AssessmentListSchema,
    BatchRefreshSchema,
    ErrorResponseSchema,
    PortfolioSummarySchema,
    VenueAssessmentSchema,
)
from src.service.scoring.models import CreditGrade, EligibilityStatus

credit_router = APIRouter(
    prefix="/credit",
    responses={
        503: {"model": ErrorResponseSchema, "description": "Payments platform unavailable"},
    },
)

VenueId = Annotated[
    str,
    Path(min_length=1, max_length=255, description="Venue identifier on the payments platform"),
]


@credit_router.get(
    "/assessments",
    response_model=AssessmentListSchema,
    summary="List Assessments",
    description="""
    List stored venue assessments.

    Filter by eligibility status, grade and score range; sort by
    credit score, annual volume or calculation time.
    """,
)
async def list_assessments(
    assessment_service: Annotated[AssessmentService, Depends(get_assessment_service)],
    eligibility: Annotated[
        Optional[List[EligibilityStatus]],
        Query(description="Eligibility statuses to include"),
    ] = None,
    grade: Annotated[
        Optional[List[CreditGrade]],
        Query(description="Credit grades to include"),
    ] = None,
    min_score: Annotated[Optional[int], Query(ge=0, le=100)] = None,
    max_score: Annotated[Optional[int], Query(ge=0, le=100)] = None,
    sort_by: Annotated[
        Literal["credit_score", "annual_volume", "calculated_at"],
        Query(description="Field to sort by"),
    ] = "credit_score",
    sort_order: Annotated[Literal["asc", "desc"], Query()] = "desc",
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1, le=100)] = 20,
) -> AssessmentListSchema:
    filters = AssessmentFilter(
        eligibility=eligibility or [],
        grades=grade or [],
        min_score=min_score,
        max_score=max_score,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        page_size=page_size,
    )
    response = await assessment_service.list_assessments(filters)
    return AssessmentListSchema.model_validate(response)


@credit_router.get(
    "/summary",
    response_model=PortfolioSummarySchema,
    summary="Portfolio Summary",
    description="Aggregate statistics across all assessed venues.",
)
async def get_summary(
    assessment_service: Annotated[AssessmentService, Depends(get_assessment_service)],
) -> PortfolioSummarySchema:
    response = await assessment_service.get_summary()
    return PortfolioSummarySchema.model_validate(response)


@credit_router.get(
    "/venues/{venue_id}",
    response_model=VenueAssessmentSchema,
    summary="Assess Venue",
    description="""
    Calculate a venue's credit assessment from its trailing 12 months of
    payments and store the result.
    """,
    responses={
        404: {"model": ErrorResponseSchema, "description": "Venue not found"},
    },
)
async def get_venue_assessment(
    venue_id: VenueId,
    assessment_service: Annotated[AssessmentService, Depends(get_assessment_service)],
) -> VenueAssessmentSchema:
    response = await assessment_service.assess_venue(venue_id)
    return VenueAssessmentSchema.model_validate(response)


@credit_router.post(
    "/venues/{venue_id}/refresh",
    response_model=VenueAssessmentSchema,
    summary="Refresh Venue Assessment",
    description="Re-run the assessment for one venue.",
    responses={
        404: {"model": ErrorResponseSchema, "description": "Venue not found"},
    },
)
async def refresh_venue_assessment(
    venue_id: VenueId,
    assessment_service: Annotated[AssessmentService, Depends(get_assessment_service)],
) -> VenueAssessmentSchema:
    response = await assessment_service.assess_venue(venue_id)
    return VenueAssessmentSchema.model_validate(response)


@credit_router.get(
    "/venues/{venue_id}/details",
    response_model=AssessmentDetailsSchema,
    summary="Assessment Details",
    description="Stored assessment with recent history snapshots and offers.",
    responses={
        404: {"model": ErrorResponseSchema, "description": "Venue not assessed"},
    },
)
async def get_assessment_details(
    venue_id: VenueId,
    assessment_service: Annotated[AssessmentService, Depends(get_assessment_service)],
) -> AssessmentDetailsSchema:
    response = await assessment_service.get_assessment_details(venue_id)
    return AssessmentDetailsSchema.model_validate(response)


@credit_router.post(
    "/refresh-all",
    response_model=BatchRefreshSchema,
    summary="Refresh All Assessments",
    description="""
    Re-assess every active venue. Venues whose data cannot be fetched are
    counted as failed; the rest are still refreshed.
    """,
)
async def refresh_all_assessments(
    assessment_service: Annotated[AssessmentService, Depends(get_assessment_service)],
) -> BatchRefreshSchema:
    response = await assessment_service.refresh_all_assessments()
    return BatchRefreshSchema.model_validate(response)
