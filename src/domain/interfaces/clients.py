"""External client interfaces."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List

from src.domain.entities import Venue
from src.service.scoring.models import TransactionRecord


class VenueDataClient(ABC):
    """
    Abstract client for the payments platform.

    Supplies venue identity and the completed payment history used
    for credit assessment.
    """

    @abstractmethod
    async def get_venue(self, venue_id: str) -> Venue:
        """
        Fetch a venue's identity.

        Args:
            venue_id: The venue's identifier

        Returns:
            The venue

        Raises:
            VenueNotFoundException: If the venue doesn't exist
            VenueDataException: If the platform returns an error
            VenueDataTimeoutException: If the request times out
        """
        ...

    @abstractmethod
    async def get_transactions(self, venue_id: str, since: datetime) -> List[TransactionRecord]:
        """
        Fetch completed sales and refunds for a venue.

        Args:
            venue_id: The venue's identifier
            since: Earliest payment time to include

        Returns:
            Payment records completed at or after `since`

        Raises:
            VenueNotFoundException: If the venue doesn't exist
            VenueDataException: If the platform returns an error
            VenueDataTimeoutException: If the request times out
        """
        ...

    @abstractmethod
    async def list_active_venue_ids(self) -> List[str]:
        """
        List the identifiers of all active venues.

        Returns:
            Venue ids eligible for batch re-assessment
        """
        ...
