"""Credit offer API endpoints."""

from typing import Annotated, List, Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Path

from src.application.dto import CreateOfferRequest
from src.application.services import OfferService
from src.core.dependencies import get_offer_service
from src.presentation.schemas import (
    CreateOfferRequestSchema,
    ErrorResponseSchema,
    OfferActionSchema,
    OfferResponseSchema,
)

offer_router = APIRouter(prefix="/credit")


@offer_router.post(
    "/venues/{venue_id}/offers",
    response_model=OfferResponseSchema,
    status_code=201,
    summary="Create Credit Offer",
    description="""
    Extend a credit offer to an assessed venue.

    The venue moves to OFFER_PENDING until the offer is answered.
    """,
    responses={
        400: {"model": ErrorResponseSchema, "description": "Invalid offer terms"},
        404: {"model": ErrorResponseSchema, "description": "Venue not assessed"},
        409: {"model": ErrorResponseSchema, "description": "Venue cannot receive an offer"},
    },
)
async def create_offer(
    venue_id: Annotated[str, Path(min_length=1, max_length=255)],
    request: CreateOfferRequestSchema,
    offer_service: Annotated[OfferService, Depends(get_offer_service)],
) -> OfferResponseSchema:
    dto = CreateOfferRequest(
        offer_amount=request.offer_amount,
        factor_rate=request.factor_rate,
        repayment_percent=request.repayment_percent,
        expires_in_days=request.expires_in_days,
        notes=request.notes,
        created_by=request.created_by,
    )
    response = await offer_service.create_offer(venue_id, dto)
    return OfferResponseSchema.model_validate(response)


@offer_router.get(
    "/venues/{venue_id}/offers",
    response_model=List[OfferResponseSchema],
    summary="List Venue Offers",
    description="All offers made to a venue, newest first.",
)
async def get_venue_offers(
    venue_id: Annotated[str, Path(min_length=1, max_length=255)],
    offer_service: Annotated[OfferService, Depends(get_offer_service)],
) -> List[OfferResponseSchema]:
    offers = await offer_service.get_venue_offers(venue_id)
    return [OfferResponseSchema.model_validate(o) for o in offers]


@offer_router.patch(
    "/offers/{offer_id}/{action}",
    response_model=OfferResponseSchema,
    summary="Update Offer Status",
    description="""
    Accept, reject or withdraw a pending offer.

    Accepting moves the venue to ACTIVE_LOAN; rejecting or withdrawing
    returns it to ELIGIBLE.
    """,
    responses={
        400: {"model": ErrorResponseSchema, "description": "Unknown action"},
        404: {"model": ErrorResponseSchema, "description": "Offer not found"},
        409: {"model": ErrorResponseSchema, "description": "Offer no longer pending or expired"},
    },
)
async def update_offer_status(
    offer_id: Annotated[UUID, Path(description="UUID of the offer")],
    action: Annotated[str, Path(description="accept, reject or withdraw")],
    offer_service: Annotated[OfferService, Depends(get_offer_service)],
    body: Annotated[Optional[OfferActionSchema], Body()] = None,
) -> OfferResponseSchema:
    body = body or OfferActionSchema()
    response = await offer_service.update_offer_status(
        offer_id,
        action,
        staff_id=body.staff_id,
        rejection_reason=body.rejection_reason,
    )
    return OfferResponseSchema.model_validate(response)


@offer_router.post(
    "/offers/expire",
    response_model=List[OfferResponseSchema],
    summary="Expire Stale Offers",
    description="Mark pending offers past their expiry as EXPIRED and free their venues.",
)
async def expire_offers(
    offer_service: Annotated[OfferService, Depends(get_offer_service)],
) -> List[OfferResponseSchema]:
    offers = await offer_service.expire_offers()
    return [OfferResponseSchema.model_validate(o) for o in offers]
