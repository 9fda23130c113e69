"""Venue entity returned by the payments platform."""

from dataclasses import dataclass

from src.service.scoring.models import VenueIdentity


@dataclass(frozen=True)
class Venue:
    """A merchant venue known to the payments platform."""

    id: str
    name: str
    slug: str
    organization_name: str = "N/A"
    status: str = "ACTIVE"

    @property
    def is_active(self) -> bool:
        return self.status == "ACTIVE"

    @property
    def identity(self) -> VenueIdentity:
        """Identity handed to the scoring engine."""
        return VenueIdentity(
            venue_id=self.id,
            name=self.name,
            slug=self.slug,
            organization_name=self.organization_name,
        )
