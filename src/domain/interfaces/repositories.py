"""Repository interfaces for data persistence."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import AsyncContextManager, List, Optional, Tuple
from uuid import UUID

from src.domain.entities import (
    AssessmentFilter,
    AssessmentSnapshot,
    CreditAssessment,
    CreditOffer,
    PortfolioSummary,
)
from src.service.scoring.models import EligibilityStatus


class AssessmentRepository(ABC):
    """
    Abstract repository for credit assessments.

    Keeps one current assessment per venue plus an append-only history
    of snapshots.
    """

    @abstractmethod
    async def upsert(self, assessment: CreditAssessment) -> CreditAssessment:
        """
        Insert or replace the current assessment for a venue.

        Args:
            assessment: The assessment to store, keyed by venue_id

        Returns:
            The stored assessment, carrying the persisted id
        """
        ...

    @abstractmethod
    def savepoint(self) -> AsyncContextManager[None]:
        """
        Group writes so they are kept or discarded together.

        Leaving the block normally keeps every write made inside it; an
        exception undoes them all and propagates. The enclosing unit of
        work is left open.
        """
        ...

    @abstractmethod
    async def append_history(self, snapshot: AssessmentSnapshot) -> AssessmentSnapshot:
        """
        Append an immutable history snapshot.

        Args:
            snapshot: Point-in-time assessment values

        Returns:
            The saved snapshot
        """
        ...

    @abstractmethod
    async def get_by_venue_id(self, venue_id: str) -> Optional[CreditAssessment]:
        """
        Retrieve the current assessment of a venue.

        Args:
            venue_id: The venue's identifier

        Returns:
            The assessment if the venue was assessed, None otherwise
        """
        ...

    @abstractmethod
    async def update_eligibility(self, venue_id: str, status: EligibilityStatus) -> None:
        """
        Move a venue's eligibility along the offer lifecycle.

        Args:
            venue_id: The venue's identifier
            status: The new eligibility status
        """
        ...

    @abstractmethod
    async def list(self, filters: AssessmentFilter) -> Tuple[List[CreditAssessment], int]:
        """
        List current assessments.

        Args:
            filters: Filtering, sorting and paging options

        Returns:
            The requested page and the total number of matches
        """
        ...

    @abstractmethod
    async def summary(self) -> PortfolioSummary:
        """
        Aggregate statistics over all current assessments.

        Pending offers are reported as 0; callers fill them in from
        the offer repository.
        """
        ...

    @abstractmethod
    async def get_history(self, venue_id: str, limit: int = 12) -> List[AssessmentSnapshot]:
        """
        Retrieve the latest history snapshots for a venue.

        Args:
            venue_id: The venue's identifier
            limit: Maximum number of snapshots to return

        Returns:
            Snapshots ordered by snapshot date descending
        """
        ...


class OfferRepository(ABC):
    """
    Abstract repository for credit offers.

    Implementations may use PostgreSQL, in-memory storage, etc.
    """

    @abstractmethod
    async def save(self, offer: CreditOffer) -> CreditOffer:
        """Persist a new offer."""
        ...

    @abstractmethod
    async def update(self, offer: CreditOffer) -> CreditOffer:
        """Persist lifecycle changes of an existing offer."""
        ...

    @abstractmethod
    async def get_by_id(self, offer_id: UUID) -> Optional[CreditOffer]:
        """
        Retrieve an offer by ID.

        Args:
            offer_id: The offer's unique identifier

        Returns:
            The offer if found, None otherwise
        """
        ...

    @abstractmethod
    async def get_by_venue_id(self, venue_id: str, limit: Optional[int] = None) -> List[CreditOffer]:
        """
        Retrieve offers for a venue, newest first.

        Args:
            venue_id: The venue's identifier
            limit: Maximum number of offers to return (all when None)

        Returns:
            List of offers ordered by created_at descending
        """
        ...

    @abstractmethod
    async def count_pending(self) -> int:
        """Count offers still awaiting an answer."""
        ...

    @abstractmethod
    async def list_expired_pending(self, now: datetime) -> List[CreditOffer]:
        """Retrieve pending offers whose expiry is before `now`."""
        ...
