"""Venue and payments platform domain exceptions."""

from .base import DomainException


class VenueNotFoundException(DomainException):
    """Raised when a venue is not found on the payments platform."""

    def __init__(self, venue_id: str):
        super().__init__(
            message=f"Venue not found: {venue_id}",
            code="VENUE_NOT_FOUND",
        )
        self.venue_id = venue_id


class VenueDataException(DomainException):
    """Raised when the payments platform returns an error."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(
            message=message,
            code="VENUE_DATA_ERROR",
        )
        self.status_code = status_code


class VenueDataTimeoutException(VenueDataException):
    """Raised when the payments platform times out."""

    def __init__(self):
        super().__init__(
            message="Payments platform request timed out",
            status_code=None,
        )
        self.code = "VENUE_DATA_TIMEOUT"
