"""External API client implementations."""

from .venue_client import HttpVenueDataClient

__all__ = [
    "HttpVenueDataClient",
]
