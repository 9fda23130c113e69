"""Dependency injection for FastAPI."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.database import get_db_session
from src.infrastructure.repositories import (
    PostgresAssessmentRepository,
    PostgresOfferRepository,
)
from src.infrastructure.clients import HttpVenueDataClient
from src.application.services import AssessmentService, OfferService


# Repository dependencies
async def get_assessment_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> PostgresAssessmentRepository:
    """Get an AssessmentRepository instance."""
    return PostgresAssessmentRepository(session)


async def get_offer_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> PostgresOfferRepository:
    """Get an OfferRepository instance."""
    return PostgresOfferRepository(session)


# External client dependencies
def get_venue_client() -> HttpVenueDataClient:
    """Get a VenueDataClient instance."""
    return HttpVenueDataClient()


# Service dependencies
async def get_assessment_service(
    assessment_repo: Annotated[PostgresAssessmentRepository, Depends(get_assessment_repository)],
    offer_repo: Annotated[PostgresOfferRepository, Depends(get_offer_repository)],
    venue_client: Annotated[HttpVenueDataClient, Depends(get_venue_client)],
) -> AssessmentService:
    """Get an AssessmentService instance with all dependencies."""
    return AssessmentService(
        assessment_repository=assessment_repo,
        offer_repository=offer_repo,
        venue_client=venue_client,
    )


async def get_offer_service(
    assessment_repo: Annotated[PostgresAssessmentRepository, Depends(get_assessment_repository)],
    offer_repo: Annotated[PostgresOfferRepository, Depends(get_offer_repository)],
) -> OfferService:
    """Get an OfferService instance."""
    return OfferService(
        assessment_repository=assessment_repo,
        offer_repository=offer_repo,
    )
