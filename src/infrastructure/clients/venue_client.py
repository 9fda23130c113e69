"""HTTP implementation of VenueDataClient."""

import asyncio
from datetime import datetime, timezone
from typing import Any, Dict, List

import httpx
import structlog

from src.core.config import settings
from src.core.metrics import (
    track_venue_fetch_latency,
    record_venue_fetch_success,
    record_venue_fetch_failure,
)
from src.domain.entities import Venue
from src.domain.exceptions import (
    VenueDataException,
    VenueDataTimeoutException,
    VenueNotFoundException,
)
from src.domain.interfaces import VenueDataClient
from src.service.scoring.models import TransactionRecord, TransactionRole

logger = structlog.get_logger(__name__)

COMPLETED_STATUS = "COMPLETED"
REFUND_TYPE = "REFUND"


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, treating naive values as UTC."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class HttpVenueDataClient(VenueDataClient):
    """
    HTTP client for the payments platform.

    Fetches venue identity and payment history with retry logic and
    proper error handling.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._base_url = base_url or settings.venue_api_url
        self._timeout = timeout or settings.venue_api_timeout
        self._max_retries = max_retries or settings.venue_api_max_retries
        self._transport = transport

    async def get_venue(self, venue_id: str) -> Venue:
        data = await self._get_json(f"/venues/{venue_id}", venue_id=venue_id)
        return self._parse_venue(data)

    async def get_transactions(self, venue_id: str, since: datetime) -> List[TransactionRecord]:
        data = await self._get_json(
            f"/venues/{venue_id}/payments",
            params={"since": since.isoformat()},
            venue_id=venue_id,
        )
        return self._parse_payments(data)

    async def list_active_venue_ids(self) -> List[str]:
        data = await self._get_json("/venues", params={"status": "ACTIVE"})
        return [str(item["id"]) for item in data.get("venues", [])]

    async def _get_json(
        self,
        path: str,
        params: Dict[str, str] | None = None,
        venue_id: str | None = None,
    ) -> Dict[str, Any]:
        """
        GET a JSON document from the payments platform.

        Implements retry logic with exponential backoff. A 404 on a
        venue-scoped path is a VenueNotFoundException and is not retried.
        """
        url = f"{self._base_url}{path}"
        last_exception = None

        for attempt in range(self._max_retries):
            try:
                with track_venue_fetch_latency():
                    async with httpx.AsyncClient(
                        timeout=self._timeout, transport=self._transport
                    ) as client:
                        response = await client.get(url, params=params)

                        if response.status_code == 404 and venue_id is not None:
                            record_venue_fetch_failure("not_found")
                            raise VenueNotFoundException(venue_id)

                        if response.status_code >= 400:
                            record_venue_fetch_failure("error")
                            raise VenueDataException(
                                message=f"Payments platform error: {response.text}",
                                status_code=response.status_code,
                            )

                        data = response.json()
                        record_venue_fetch_success()
                        return data

            except httpx.TimeoutException:
                record_venue_fetch_failure("timeout")
                last_exception = VenueDataTimeoutException()
                logger.warning(
                    "venue_api_timeout",
                    path=path,
                    venue_id=venue_id,
                    attempt=attempt + 1,
                    max_retries=self._max_retries,
                )
            except (VenueNotFoundException, VenueDataException):
                raise
            except Exception as e:
                record_venue_fetch_failure("error")
                last_exception = VenueDataException(
                    message=f"Unexpected error: {str(e)}",
                )
                logger.error(
                    "venue_api_error",
                    path=path,
                    venue_id=venue_id,
                    attempt=attempt + 1,
                    error=str(e),
                )

            # Exponential backoff
            if attempt < self._max_retries - 1:
                await asyncio.sleep(2**attempt * 0.1)

        raise last_exception or VenueDataException("Failed to fetch from payments platform")

    def _parse_venue(self, data: Dict[str, Any]) -> Venue:
        organization = data.get("organization") or {}
        return Venue(
            id=str(data["id"]),
            name=data.get("name", ""),
            slug=data.get("slug", ""),
            organization_name=organization.get("name") or "N/A",
            status=data.get("status", "ACTIVE"),
        )

    def _parse_payments(self, data: Dict[str, Any]) -> List[TransactionRecord]:
        """Parse completed payments into transaction records, oldest first."""
        records = []

        for item in data.get("payments", []):
            if item.get("status", COMPLETED_STATUS) != COMPLETED_STATUS:
                continue

            role = (
                TransactionRole.REFUND
                if str(item.get("type", "")).upper() == REFUND_TYPE
                else TransactionRole.SALE
            )
            records.append(
                TransactionRecord(
                    amount=float(item.get("amount", 0)),
                    role=role,
                    method=item.get("method") or "",
                    timestamp=parse_timestamp(item["created_at"]),
                )
            )

        records.sort(key=lambda r: r.timestamp)
        return records
