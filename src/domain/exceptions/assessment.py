"""Assessment-related domain exceptions."""

from .base import DomainException


class AssessmentNotFoundException(DomainException):
    """Raised when a venue has never been assessed."""

    def __init__(self, venue_id: str):
        super().__init__(
            message=f"No assessment found for venue: {venue_id}",
            code="ASSESSMENT_NOT_FOUND",
        )
        self.venue_id = venue_id


class VenueIneligibleException(DomainException):
    """Raised when an offer is requested for an ineligible venue."""

    def __init__(self, venue_id: str):
        super().__init__(
            message=f"Venue is not eligible for credit offers: {venue_id}",
            code="VENUE_INELIGIBLE",
        )
        self.venue_id = venue_id
