"""Offer-related Pydantic schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.core.config import settings


class CreateOfferRequestSchema(BaseModel):
    """Schema for POST /v1/credit/venues/{venue_id}/offers request body."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "offer_amount": 250000,
                    "factor_rate": 1.12,
                    "repayment_percent": 0.12,
                    "expires_in_days": 30,
                    "notes": "Seasonal stock-up",
                    "created_by": "staff_42",
                }
            ]
        }
    )

    offer_amount: float = Field(
        ...,
        gt=0,
        description="Credit amount offered",
        examples=[250000],
    )
    factor_rate: float = Field(
        ...,
        ge=1,
        le=2,
        description="Multiplier giving the total repayment",
        examples=[1.12],
    )
    repayment_percent: float = Field(
        ...,
        gt=0,
        le=1,
        description="Share of daily sales withheld for repayment",
        examples=[0.12],
    )
    expires_in_days: int = Field(
        default=settings.offer_default_expiry_days,
        ge=1,
        le=365,
        description="Days until the offer lapses",
    )
    notes: Optional[str] = Field(None, max_length=2000)
    created_by: Optional[str] = Field(None, max_length=255)

    @field_validator("notes", "created_by")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v


class OfferActionSchema(BaseModel):
    """Schema for PATCH /v1/credit/offers/{offer_id}/{action} request body."""

    staff_id: Optional[str] = Field(
        None,
        max_length=255,
        description="Staff member recording the action",
    )
    rejection_reason: Optional[str] = Field(
        None,
        max_length=2000,
        description="Why the venue declined (reject only)",
    )


class OfferResponseSchema(BaseModel):
    """Schema for a credit offer."""

    model_config = ConfigDict(from_attributes=True)

    offer_id: str = Field(..., description="UUID of the offer")
    venue_id: str
    offer_amount: float
    factor_rate: float
    total_repayment: float
    repayment_percent: float
    estimated_term_days: int
    status: str = Field(..., examples=["PENDING"])
    expires_at: datetime
    created_at: datetime
    notes: Optional[str] = None
    created_by: Optional[str] = None
    accepted_at: Optional[datetime] = None
    rejected_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    withdrawn_at: Optional[datetime] = None
